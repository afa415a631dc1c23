"""
Camera device discovery and video-effect reporting.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterable, List, Optional, Protocol, Tuple
import logging

import cv2

logger = logging.getLogger(__name__)


class CameraState(Enum):
    """Lifecycle of the capture pipeline."""
    UNKNOWN = auto()
    FAILED = auto()
    RUNNING = auto()
    STOPPED = auto()


@dataclass(frozen=True)
class Device:
    """A video capture device addressed by its OpenCV index."""
    id: int
    name: str


@dataclass(frozen=True)
class VideoFormat:
    width: int
    height: int
    fps: int = 0

    @property
    def name(self) -> str:
        if self.fps:
            return f"{self.width} x {self.height} @ {self.fps} fps"
        return f"{self.width} x {self.height}"


# Common webcam resolutions, largest first
COMMON_RESOLUTIONS: List[Tuple[int, int]] = [
    (1920, 1080),
    (1280, 720),
    (960, 540),
    (800, 600),
    (640, 480),
    (320, 240),
]


def list_video_devices(
    max_devices: int = 8,
    opener: Callable[[int], object] = cv2.VideoCapture,
) -> List[Device]:
    """
    Probe capture indices and return the devices that open.

    Args:
        max_devices: Number of indices to probe, starting at 0
        opener: Factory returning an object with isOpened()/release()

    Returns:
        Devices in index order.
    """
    devices = []
    for index in range(max_devices):
        cap = opener(index)
        try:
            if cap.isOpened():
                devices.append(Device(id=index, name=f"Camera {index}"))
        finally:
            cap.release()
    logger.debug("Found %d video device(s)", len(devices))
    return devices


def probe_video_formats(
    capture,
    candidates: Iterable[Tuple[int, int]] = COMMON_RESOLUTIONS,
) -> List[VideoFormat]:
    """
    Ask an open capture for each candidate resolution and keep what it reports.

    Devices silently snap unsupported sizes to the nearest supported one, so
    the reported size is read back and duplicates are dropped. The capture's
    original size is restored afterwards.
    """
    original = (
        int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
        int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
    )
    formats: List[VideoFormat] = []
    for width, height in candidates:
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        fmt = VideoFormat(
            width=int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            height=int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            fps=int(round(capture.get(cv2.CAP_PROP_FPS) or 0)),
        )
        if fmt.width > 0 and fmt.height > 0 and fmt not in formats:
            formats.append(fmt)

    capture.set(cv2.CAP_PROP_FRAME_WIDTH, original[0])
    capture.set(cv2.CAP_PROP_FRAME_HEIGHT, original[1])
    return formats


@dataclass(frozen=True)
class VideoEffectsState:
    """System video effects and whether the active format supports them."""
    center_stage_supported: bool = False
    center_stage_enabled: bool = False
    portrait_effect_supported: bool = False
    portrait_effect_enabled: bool = False
    studio_light_supported: bool = False
    studio_light_enabled: bool = False


class CameraEffectsSource(Protocol):
    """Reports system-level camera effects. Optional; only the UI reads it."""

    def effects_state(self) -> VideoEffectsState:
        ...


class NullCameraEffectsSource:
    """Effects source for platforms without system camera effects."""

    def effects_state(self) -> VideoEffectsState:
        return VideoEffectsState()


def effects_state_or_default(source: Optional[CameraEffectsSource]) -> VideoEffectsState:
    if source is None:
        return VideoEffectsState()
    return source.effects_state()
