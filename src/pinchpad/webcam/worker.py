"""
Background worker for hand tracking and the gesture engine.
Runs in a separate QThread to avoid blocking the UI.
"""
from typing import List, Optional
import logging
import threading
import time
from PyQt5.QtCore import QObject, pyqtSignal

from ..gesture.engine import CursorMoved, EngineEvent, GestureEngine, ModeChanged
from ..gesture.observation import Observation
from .devices import CameraState, VideoFormat
from .hand_tracker import HandTracker

logger = logging.getLogger(__name__)


class TrackpadWorker(QObject):
    """
    Worker class that owns the tracker and the engine.

    Frames are read and processed strictly one after another in the worker
    thread, and engine events are re-emitted as signals in the order the
    engine produced them. Connect with ``Qt.QueuedConnection`` to handle them
    on the GUI thread.
    """
    # Signals
    mode_changed = pyqtSignal(bool, float, float)  # Emits is_active, cursor x, cursor y
    cursor_moved = pyqtSignal(float, float)
    frame_ready = pyqtSignal(object)  # Emits numpy array (BGR frame with overlay)
    formats_ready = pyqtSignal(object, object)  # Emits list of VideoFormat, current VideoFormat
    camera_state_changed = pyqtSignal(object)  # Emits CameraState
    error = pyqtSignal(str)

    def __init__(self, config, tracker: Optional[HandTracker] = None,
                 engine: Optional[GestureEngine] = None, parent=None):
        super().__init__(parent)
        self._config = config
        self._tracker = tracker
        self._engine = engine or GestureEngine(config.gestures)
        self._is_running = False

        # Requests from the GUI thread, applied between frames
        self._requests_lock = threading.Lock()
        self._pending_device: Optional[int] = None
        self._pending_format: Optional[VideoFormat] = None

    @property
    def engine(self) -> GestureEngine:
        return self._engine

    def process_observation(self, observation: Optional[Observation]) -> List[EngineEvent]:
        """Run one frame through the engine and emit its events."""
        events = self._engine.update(observation)
        self._emit_events(events)
        return events

    def _emit_events(self, events: List[EngineEvent]) -> None:
        for event in events:
            if isinstance(event, ModeChanged):
                self.mode_changed.emit(event.is_active, *event.cursor_position)
            elif isinstance(event, CursorMoved):
                self.cursor_moved.emit(event.x, event.y)

    def request_device(self, device_id: int) -> None:
        """Ask the loop to switch cameras before the next frame. Thread-safe."""
        with self._requests_lock:
            self._pending_device = device_id

    def request_format(self, fmt: VideoFormat) -> None:
        """Ask the loop to change capture resolution before the next frame. Thread-safe."""
        with self._requests_lock:
            self._pending_format = fmt

    def _emit_formats(self) -> None:
        formats = self._tracker.video_formats()
        self.formats_ready.emit(formats, self._tracker.current_format())

    def _apply_pending_requests(self) -> None:
        with self._requests_lock:
            device_id, self._pending_device = self._pending_device, None
            fmt, self._pending_format = self._pending_format, None

        if device_id is not None:
            if self._tracker.select_device(device_id):
                self._emit_formats()
            else:
                self.error.emit(f"Could not open camera {device_id}")
        if fmt is not None and not self._tracker.select_format(fmt):
            self.error.emit(f"Camera rejected format {fmt.name}")

    def start_process(self):
        """Main processing loop. Runs in worker thread, paced by the camera."""
        if self._tracker is None:
            self._tracker = HandTracker(self._config)

        if not self._tracker.start():
            self.camera_state_changed.emit(self._tracker.state)
            self.error.emit("Could not start hand tracking (camera or model unavailable)")
            return

        self._is_running = True
        self.camera_state_changed.emit(self._tracker.state)
        self._emit_formats()

        show_preview = self._config.ui.show_preview
        frame_interval = 1.0 / max(1, self._config.ui.preview_fps)
        last_frame_time = 0.0

        try:
            while self._is_running:
                self._apply_pending_requests()

                frames_before = self._tracker.frame_count
                observation = self._tracker.get_observation()
                self.process_observation(observation)

                if self._tracker.state is CameraState.FAILED:
                    self.error.emit("Camera lost and no fallback device available")
                    break

                if self._tracker.frame_count == frames_before:
                    # Nothing was read; avoid spinning on a stalled camera
                    time.sleep(0.01)
                    continue

                now = time.perf_counter()
                if show_preview and now - last_frame_time >= frame_interval:
                    frame = self._tracker.get_frame_with_overlay(observation, self._engine.is_active)
                    if frame is not None:
                        self.frame_ready.emit(frame)
                    last_frame_time = now

        except Exception as e:
            logger.exception("Worker loop failed")
            self.error.emit(f"Worker Exception: {str(e)}")
        finally:
            self._is_running = False
            self._emit_events(self._engine.reset())
            self._tracker.stop()
            self.camera_state_changed.emit(self._tracker.state)

    def stop_process(self):
        """Signal the loop to stop and release resources in worker thread."""
        self._is_running = False
