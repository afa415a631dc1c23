"""
MediaPipe Hand Tracker wrapper using the Tasks API.
Handles camera capture and turns each frame into at most one hand Observation.
"""
from pathlib import Path
from typing import List, Optional
import logging
import time
import cv2
import numpy as np
import mediapipe as mp

from ..config import Config, CameraConfig, MediaPipeConfig
from ..gesture.observation import Observation, observation_from_landmarks
from .devices import CameraState, VideoFormat, probe_video_formats

logger = logging.getLogger(__name__)

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)

ACTIVE_COLOR = (0, 255, 0)
IDLE_COLOR = (0, 200, 255)


class HandTracker:
    """
    Camera capture plus single-hand keypoint detection.

    Every call to :meth:`get_observation` consumes one camera frame and yields
    exactly one ``Observation`` or ``None``, whatever happens to the camera
    underneath (read failures, device swaps, detector errors).
    """

    # Default model path relative to project root
    DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent.parent / "models" / "hand_landmarker.task"

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        """
        Initialize hand tracker.

        Args:
            config: PinchPad configuration
            model_path: Path to hand_landmarker.task model file
        """
        self._camera_config: CameraConfig = config.camera
        self._mp_config: MediaPipeConfig = config.mediapipe
        if model_path is None and self._mp_config.model_path:
            model_path = Path(self._mp_config.model_path)
        self._model_path = Path(model_path) if model_path else self.DEFAULT_MODEL_PATH

        # Lazy initialization
        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker: Optional[HandLandmarker] = None
        self._device_id = self._camera_config.device_id

        # State
        self._state = CameraState.UNKNOWN
        self._last_frame: Optional[np.ndarray] = None
        self._frame_count = 0
        self._read_failures = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1

    def start(self) -> bool:
        """
        Start camera capture and MediaPipe.

        Returns:
            True if started successfully, False otherwise.
        """
        if self._state is CameraState.RUNNING:
            return True

        if not self._model_path.exists():
            logger.error("Model file not found: %s", self._model_path)
            logger.error("Download from: %s", MODEL_URL)
            self._state = CameraState.FAILED
            return False

        self._cap = self._open_capture(self._device_id)
        if self._cap is None:
            logger.error("Could not open camera %d", self._device_id)
            self._state = CameraState.FAILED
            return False

        options = HandLandmarkerOptions(
            base_options=self._base_options(),
            running_mode=VisionRunningMode.VIDEO,
            num_hands=1,
            min_hand_detection_confidence=self._mp_config.min_detection_confidence,
            min_hand_presence_confidence=self._mp_config.min_presence_confidence,
            min_tracking_confidence=self._mp_config.min_tracking_confidence,
        )

        self._landmarker = HandLandmarker.create_from_options(options)
        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._read_failures = 0
        self._state = CameraState.RUNNING
        logger.info("Hand tracking started on camera %d", self._device_id)
        return True

    def _base_options(self):
        if self._mp_config.use_gpu:
            try:
                opts = BaseOptions(
                    model_asset_path=str(self._model_path),
                    delegate=BaseOptions.Delegate.GPU,
                )
                logger.info("GPU delegate enabled for MediaPipe")
                return opts
            except (AttributeError, RuntimeError) as e:
                logger.warning("GPU delegate unavailable (%s), using CPU", e)
        return BaseOptions(model_asset_path=str(self._model_path))

    def _open_capture(self, device_id: int) -> Optional[cv2.VideoCapture]:
        cap = cv2.VideoCapture(device_id)
        if not cap.isOpened():
            cap.release()
            return None

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera_config.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera_config.height)
        cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)
        return cap

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None

        if self._cap:
            self._cap.release()
            self._cap = None

        self._last_frame = None
        if self._state is CameraState.RUNNING:
            self._state = CameraState.STOPPED

    def select_device(self, device_id: int) -> bool:
        """
        Switch capture to another camera.

        On failure the previous camera is reopened and False is returned.
        """
        if device_id == self._device_id and self._cap is not None:
            return True

        new_cap = self._open_capture(device_id)
        if new_cap is None:
            logger.warning("Could not switch to camera %d, keeping camera %d",
                           device_id, self._device_id)
            if self._cap is None:
                self._cap = self._open_capture(self._device_id)
            return False

        if self._cap is not None:
            self._cap.release()
        self._cap = new_cap
        self._device_id = device_id
        self._read_failures = 0
        logger.info("Switched to camera %d", device_id)
        return True

    def video_formats(self) -> List[VideoFormat]:
        """Formats the active camera reports supporting."""
        if self._cap is None:
            return []
        return probe_video_formats(self._cap)

    def current_format(self) -> Optional[VideoFormat]:
        """Format the active camera is delivering right now."""
        if self._cap is None:
            return None
        return VideoFormat(
            width=int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            height=int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            fps=int(round(self._cap.get(cv2.CAP_PROP_FPS) or 0)),
        )

    def select_format(self, fmt: VideoFormat) -> bool:
        """Request a capture resolution. Returns True if the device accepted it."""
        if self._cap is None:
            return False
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, fmt.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, fmt.height)
        if fmt.fps:
            self._cap.set(cv2.CAP_PROP_FPS, fmt.fps)
        accepted = (
            int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)) == fmt.width
            and int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)) == fmt.height
        )
        if not accepted:
            logger.warning("Camera %d rejected format %s", self._device_id, fmt.name)
        return accepted

    def get_observation(self) -> Optional[Observation]:
        """
        Capture one frame and detect the hand's thumb and index tips.

        Returns:
            Observation for the first detected hand, or None when there is no
            frame, no hand, or the detector failed.
        """
        if self._state is not CameraState.RUNNING or self._cap is None or self._landmarker is None:
            return None

        ret, frame = self._cap.read()
        if not ret:
            self._handle_read_failure()
            return None

        self._read_failures = 0
        self._frame_count += 1

        if self._camera_config.mirror:
            frame = cv2.flip(frame, 1)
        self._last_frame = frame

        # Convert BGR to RGB for MediaPipe
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        # Calculate strictly monotonic timestamp
        timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms

        try:
            result = self._landmarker.detect_for_video(mp_image, timestamp_ms)
        except Exception as e:
            logger.warning("Hand detection failed on frame %d: %s", self._frame_count, e)
            return None

        if not result.hand_landmarks:
            return None

        # The landmarker scores the hand, not single landmarks; handedness is the
        # only per-hand score it returns, so both tips share it.
        handedness = result.handedness[0][0] if result.handedness and result.handedness[0] else None
        confidence = handedness.score if handedness is not None else 0.0
        return observation_from_landmarks(result.hand_landmarks[0], confidence)

    def _handle_read_failure(self) -> None:
        self._read_failures += 1
        if self._read_failures < self._camera_config.max_read_failures:
            return

        logger.warning("Camera %d stopped delivering frames", self._device_id)
        self._read_failures = 0
        if not self._camera_config.automatic_selection:
            return

        # Drop the dead device and rebind to the configured default
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        default_id = self._camera_config.device_id
        self._cap = self._open_capture(default_id)
        if self._cap is None:
            logger.error("Default camera %d is unavailable", default_id)
            self._state = CameraState.FAILED
            return
        self._device_id = default_id
        logger.info("Fell back to camera %d", default_id)

    def get_frame_with_overlay(
        self,
        observation: Optional[Observation] = None,
        is_active: bool = False,
    ) -> Optional[np.ndarray]:
        """
        Get last frame with the tracked keypoints drawn for debugging.

        Args:
            observation: If provided, draw its keypoints and the pinch line.
            is_active: Whether the trackpad is engaged (changes colors/label).

        Returns:
            Annotated BGR frame, or None if no frame available.
        """
        if self._last_frame is None:
            return None

        frame = self._last_frame.copy()

        h, w = frame.shape[:2]
        color = ACTIVE_COLOR if is_active else IDLE_COLOR

        if observation is not None:
            points = [kp for kp in (observation.index_tip, observation.thumb_tip) if kp is not None]
            for kp in points:
                cv2.circle(frame, (int(kp.x * w), int(kp.y * h)), 8, color, -1)
            if len(points) == 2:
                start, end = points
                cv2.line(frame, (int(start.x * w), int(start.y * h)),
                         (int(end.x * w), int(end.y * h)), color, 2)

        label = "ACTIVE" if is_active else "INACTIVE"
        cv2.putText(frame, label, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 1, color, 2)
        return frame

    @property
    def state(self) -> CameraState:
        return self._state

    @property
    def device_id(self) -> int:
        return self._device_id

    @property
    def frame_count(self) -> int:
        return self._frame_count
