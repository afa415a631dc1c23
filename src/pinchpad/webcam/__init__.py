"""
PinchPad Webcam Module

Camera capture and hand keypoint detection using MediaPipe.
"""
from .devices import (
    CameraState,
    Device,
    VideoFormat,
    VideoEffectsState,
    CameraEffectsSource,
    NullCameraEffectsSource,
    effects_state_or_default,
    list_video_devices,
)
from .hand_tracker import HandTracker
from .worker import TrackpadWorker

__all__ = [
    'CameraState',
    'Device',
    'VideoFormat',
    'VideoEffectsState',
    'CameraEffectsSource',
    'NullCameraEffectsSource',
    'effects_state_or_default',
    'list_video_devices',
    'HandTracker',
    'TrackpadWorker',
]
