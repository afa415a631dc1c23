import os

import pytest

pytest.importorskip("mediapipe")
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PyQt5.QtWidgets")

from pinchpad.config import Config
from pinchpad.gesture import Keypoint, Observation
from pinchpad.webcam.devices import CameraState, VideoFormat
from pinchpad.webcam.worker import TrackpadWorker


def pinched(index):
    return Observation(
        index_tip=Keypoint(index, 0.9),
        thumb_tip=Keypoint((index[0], index[1] + 0.02), 0.9),
    )


class FakeTracker:
    """Plays back a fixed list of observations, then stops the worker."""

    def __init__(self, observations, start_ok=True):
        self._observations = list(observations)
        self._start_ok = start_ok
        self.worker = None
        self.state = CameraState.UNKNOWN
        self.frame_count = 0
        self.selected_devices = []
        self.selected_formats = []
        self.stopped = False

    def start(self):
        self.state = CameraState.RUNNING if self._start_ok else CameraState.FAILED
        return self._start_ok

    def stop(self):
        self.stopped = True
        self.state = CameraState.STOPPED

    def get_observation(self):
        if not self._observations:
            self.worker.stop_process()
            return None
        self.frame_count += 1
        return self._observations.pop(0)

    def get_frame_with_overlay(self, observation, is_active):
        return None

    def video_formats(self):
        return [VideoFormat(1280, 720, 30), VideoFormat(640, 480, 30)]

    def current_format(self):
        return VideoFormat(640, 480, 30)

    def select_device(self, device_id):
        self.selected_devices.append(device_id)
        return device_id != 5

    def select_format(self, fmt):
        self.selected_formats.append(fmt)
        return True


@pytest.fixture(scope="module")
def qt_app():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


def make_worker(observations, **kwargs):
    tracker = FakeTracker(observations, **kwargs)
    worker = TrackpadWorker(Config(), tracker=tracker)
    tracker.worker = worker

    received = []
    worker.mode_changed.connect(lambda active, x, y: received.append(("mode", active, x, y)))
    worker.cursor_moved.connect(lambda x, y: received.append(("move", x, y)))
    worker.error.connect(lambda msg: received.append(("error", msg)))
    return worker, tracker, received


def test_process_observation_emits_signals_in_order(qt_app):
    worker, _, received = make_worker([])

    worker.process_observation(pinched((0.5, 0.5)))
    worker.process_observation(pinched((0.6, 0.5)))
    worker.process_observation(None)

    assert [r[0] for r in received] == ["mode", "move", "mode"]
    assert received[0] == ("mode", True, 0.0, 0.0)
    assert received[1][1] == pytest.approx(0.12)
    assert received[2][1] is False
    assert received[2][2] == pytest.approx(0.12)


def test_loop_processes_every_frame_then_stops_tracker(qt_app):
    frames = [pinched((0.5, 0.5)), pinched((0.55, 0.5)), pinched((0.6, 0.5))]
    worker, tracker, received = make_worker(frames)
    states = []
    worker.camera_state_changed.connect(states.append)

    worker.start_process()

    moves = [r for r in received if r[0] == "move"]
    assert len(moves) == 2
    assert moves[0][1] < moves[1][1]
    # Engine is released on shutdown
    assert received[-1][:2] == ("mode", False)
    assert not worker.engine.is_active
    assert tracker.stopped
    assert states == [CameraState.RUNNING, CameraState.STOPPED]


def test_failed_start_reports_error(qt_app):
    worker, tracker, received = make_worker([], start_ok=False)
    worker.start_process()
    assert received and received[0][0] == "error"
    assert not tracker.stopped


def test_device_and_format_requests_are_applied_in_loop(qt_app):
    worker, tracker, received = make_worker([pinched((0.5, 0.5))])
    fmt = VideoFormat(1280, 720, 30)

    worker.request_device(5)
    worker.request_format(fmt)
    worker.start_process()

    assert tracker.selected_devices == [5]
    assert tracker.selected_formats == [fmt]
    assert ("error", "Could not open camera 5") in received


def test_formats_ready_carries_current_format(qt_app):
    worker, _, _ = make_worker([])
    formats = []
    worker.formats_ready.connect(lambda fmts, current: formats.append((fmts, current)))

    worker.start_process()

    assert formats == [
        ([VideoFormat(1280, 720, 30), VideoFormat(640, 480, 30)], VideoFormat(640, 480, 30))
    ]
