"""
PinchPad Gesture Module

Pinch detection and anchor-relative cursor mapping. Pure Python, no camera
or GUI dependencies.
"""
from .observation import Keypoint, Observation, observation_from_landmarks
from .engine import (
    GestureEngine,
    EngineState,
    Mode,
    ModeChanged,
    CursorMoved,
    pinch_distance,
    step,
)

__all__ = [
    'Keypoint',
    'Observation',
    'observation_from_landmarks',
    'GestureEngine',
    'EngineState',
    'Mode',
    'ModeChanged',
    'CursorMoved',
    'pinch_distance',
    'step',
]
