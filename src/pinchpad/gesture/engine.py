"""
Pinch-drag gesture engine.

Turns a frame-ordered stream of hand observations into trackpad-style cursor
control. Pinching thumb and index fingertip engages the trackpad; while the
pinch is held, index-fingertip motion relative to where the pinch started is
added to the cursor position recorded at that moment. Releasing the pinch (or
losing the hand) disengages it and leaves the cursor where it is, so the next
pinch continues from there.
"""
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable, List, Optional, Tuple, Union
import logging
import math

from ..config import GestureConfig
from .observation import Keypoint, Observation, Point

logger = logging.getLogger(__name__)


class Mode(Enum):
    """Trackpad engagement mode."""
    INACTIVE = auto()
    ACTIVE = auto()


@dataclass(frozen=True)
class EngineState:
    """
    Engine state carried from frame to frame.

    Attributes:
        mode: Current engagement mode
        pinch_anchor: Index tip position when the pinch started (None while inactive)
        cursor_anchor: Cursor position when the pinch started
        cursor_position: Last published cursor position, normalized 0-1
    """
    mode: Mode = Mode.INACTIVE
    pinch_anchor: Optional[Point] = None
    cursor_anchor: Point = (0.0, 0.0)
    cursor_position: Point = (0.0, 0.0)

    @property
    def is_active(self) -> bool:
        return self.mode is Mode.ACTIVE


@dataclass(frozen=True)
class ModeChanged:
    """The trackpad was engaged or released."""
    is_active: bool
    cursor_position: Point


@dataclass(frozen=True)
class CursorMoved:
    """A new cursor target was published."""
    x: float
    y: float

    @property
    def position(self) -> Point:
        return (self.x, self.y)


EngineEvent = Union[ModeChanged, CursorMoved]
StepResult = Tuple[EngineState, List[EngineEvent]]


def pinch_distance(a: Point, b: Point) -> float:
    """Euclidean distance between two normalized points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _is_reliable(keypoint: Optional[Keypoint], config: GestureConfig) -> bool:
    return keypoint is not None and keypoint.confidence > config.confidence_threshold


def _activate(state: EngineState, index_position: Point) -> StepResult:
    new_state = replace(
        state,
        mode=Mode.ACTIVE,
        pinch_anchor=index_position,
        cursor_anchor=state.cursor_position,
    )
    return new_state, [ModeChanged(is_active=True, cursor_position=new_state.cursor_position)]


def _deactivate(state: EngineState) -> StepResult:
    if not state.is_active:
        return state, []
    new_state = replace(state, mode=Mode.INACTIVE, pinch_anchor=None)
    return new_state, [ModeChanged(is_active=False, cursor_position=new_state.cursor_position)]


def _update_cursor(state: EngineState, index_position: Point, config: GestureConfig) -> StepResult:
    ax, ay = state.pinch_anchor
    dx = (index_position[0] - ax) * config.sensitivity
    dy = (index_position[1] - ay) * config.sensitivity

    if abs(dx) < config.dead_zone and abs(dy) < config.dead_zone:
        return state, []

    cx, cy = state.cursor_anchor
    # Image y grows downward, cursor y grows upward
    new_position = (_clamp(cx + dx), _clamp(cy - dy))
    new_state = replace(state, cursor_position=new_position)
    return new_state, [CursorMoved(*new_position)]


def step(
    state: EngineState,
    observation: Optional[Observation],
    config: GestureConfig,
) -> StepResult:
    """
    Apply one frame to the engine state.

    Never raises for missing or low-confidence keypoints: a frame without a
    reliable thumb and index tip simply releases the trackpad.

    Args:
        state: State after the previous frame
        observation: This frame's keypoints, or None if no hand was found
        config: Thresholds and gain

    Returns:
        (new state, events produced by this frame)
    """
    index = observation.index_tip if observation is not None else None
    thumb = observation.thumb_tip if observation is not None else None

    if not (_is_reliable(index, config) and _is_reliable(thumb, config)):
        return _deactivate(state)

    distance = pinch_distance(index.position, thumb.position)
    threshold = config.pinch_threshold

    # Exact equality keeps the current mode in both directions
    if not state.is_active:
        if distance < threshold:
            return _activate(state, index.position)
        return state, []

    if distance > threshold:
        return _deactivate(state)
    return _update_cursor(state, index.position, config)


Listener = Callable[[EngineEvent], None]


class GestureEngine:
    """
    Stateful wrapper around :func:`step`.

    Feed observations in frame order through :meth:`update`. Events are
    returned and also delivered, in order, to every subscribed listener.
    """

    def __init__(self, config: Optional[GestureConfig] = None, state: Optional[EngineState] = None):
        self._config = config or GestureConfig()
        self._state = state or EngineState()
        self._listeners: List[Listener] = []

    @property
    def config(self) -> GestureConfig:
        return self._config

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state.is_active

    @property
    def cursor_position(self) -> Point:
        return self._state.cursor_position

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, observation: Optional[Observation]) -> List[EngineEvent]:
        """Process one frame and publish the resulting events."""
        self._state, events = step(self._state, observation, self._config)
        self._publish(events)
        return events

    def reset(self) -> List[EngineEvent]:
        """Release the trackpad if engaged. The cursor position is kept."""
        self._state, events = _deactivate(self._state)
        self._publish(events)
        return events

    def _publish(self, events: List[EngineEvent]) -> None:
        for event in events:
            if isinstance(event, ModeChanged):
                logger.debug("Trackpad %s at (%.3f, %.3f)",
                             "engaged" if event.is_active else "released",
                             *event.cursor_position)
            for listener in list(self._listeners):
                listener(event)
