"""
Per-frame hand observations consumed by the gesture engine.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

Point = Tuple[float, float]

# MediaPipe hand landmark indices
THUMB_TIP = 4
INDEX_TIP = 8


@dataclass(frozen=True)
class Keypoint:
    """
    A single detected keypoint.

    Attributes:
        position: (x, y) in normalized image coordinates, origin top-left
        confidence: Detector confidence 0-1
    """
    position: Point
    confidence: float

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]


@dataclass(frozen=True)
class Observation:
    """Keypoints resolved for one frame. A field is None when unresolved."""
    index_tip: Optional[Keypoint] = None
    thumb_tip: Optional[Keypoint] = None


def keypoint_from_landmark(landmark, confidence: float) -> Optional[Keypoint]:
    """
    Build a Keypoint from a landmark with ``x``/``y`` attributes.

    Points the detector placed outside the frame are extrapolated guesses,
    so they are reported as unresolved.
    """
    x, y = float(landmark.x), float(landmark.y)
    if not (0.0 <= x <= 1.0 and 0.0 <= y <= 1.0):
        return None
    return Keypoint(position=(x, y), confidence=float(confidence))


def observation_from_landmarks(landmarks: Sequence, confidence: float) -> Observation:
    """
    Convert one hand's 21 MediaPipe landmarks into an Observation.

    Args:
        landmarks: Sequence of landmark objects (``.x``, ``.y``), MediaPipe order
        confidence: Confidence assigned to every extracted keypoint

    Returns:
        Observation with whichever tips could be resolved.
    """
    def _get(index: int) -> Optional[Keypoint]:
        if index >= len(landmarks):
            return None
        return keypoint_from_landmark(landmarks[index], confidence)

    return Observation(index_tip=_get(INDEX_TIP), thumb_tip=_get(THUMB_TIP))
