import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
pytest.importorskip("mediapipe")
QtWidgets = pytest.importorskip("PyQt5.QtWidgets")

from pinchpad.ui import ConfigurationPanel, CursorFeedbackOverlay
from pinchpad.webcam.devices import Device, VideoEffectsState, VideoFormat


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


def test_populating_devices_does_not_emit(qapp):
    panel = ConfigurationPanel()
    selected = []
    panel.device_selected.connect(selected.append)

    panel.set_devices([Device(0, "Camera 0"), Device(2, "Camera 2")], selected_id=2)

    assert selected == []
    assert panel.device_combo.currentIndex() == 1


def test_user_selection_emits_device_and_format(qapp):
    panel = ConfigurationPanel()
    devices, formats = [], []
    panel.device_selected.connect(devices.append)
    panel.format_selected.connect(formats.append)
    panel.set_devices([Device(0, "Camera 0"), Device(3, "Camera 3")])
    panel.set_formats([VideoFormat(1280, 720, 30), VideoFormat(640, 480, 30)])

    panel.device_combo.setCurrentIndex(1)
    panel.format_combo.setCurrentIndex(1)

    assert devices == [3]
    assert formats == [VideoFormat(640, 480, 30)]


def test_no_devices_disables_picker(qapp):
    panel = ConfigurationPanel()
    panel.set_devices([])
    assert not panel.device_combo.isEnabled()


def test_effects_state_enables_supported_effects(qapp):
    panel = ConfigurationPanel()
    panel.set_effects_state(VideoEffectsState(center_stage_supported=True, center_stage_enabled=True))
    assert panel.center_stage.isEnabled()
    assert panel.center_stage.status
    assert not panel.portrait.isEnabled()


def test_automatic_selection_toggle(qapp):
    panel = ConfigurationPanel(automatic_selection=True)
    changes = []
    panel.automatic_selection_changed.connect(changes.append)
    panel.auto_checkbox.setChecked(False)
    assert changes == [False]


def test_feedback_overlay_tracks_state(qapp):
    overlay = CursorFeedbackOverlay()
    assert not overlay.is_active
    assert overlay.cursor_position is None

    overlay.set_cursor(0.25, 0.75)
    overlay.set_active(True)

    assert overlay.is_active
    assert overlay.cursor_position == (0.25, 0.75)


def test_set_formats_selects_current_format_without_emitting(qapp):
    panel = ConfigurationPanel()
    formats = []
    panel.format_selected.connect(formats.append)

    panel.set_formats(
        [VideoFormat(1280, 720, 30), VideoFormat(640, 480, 30)],
        VideoFormat(640, 480, 30),
    )

    assert panel.format_combo.currentIndex() == 1
    assert formats == []
