"""
Configuration panel: camera and format selection plus video effect status.
"""
from typing import List, Optional
from PyQt5.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QComboBox, QCheckBox
)
from PyQt5.QtCore import QEvent, pyqtSignal

from ..webcam.devices import Device, VideoFormat, VideoEffectsState


class EffectStatusView(QWidget):
    """Colored dot plus label showing whether a system video effect is on."""

    ON_COLOR = "#2ecc71"
    OFF_COLOR = "#7f8c8d"

    def __init__(self, name: str, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        self._dot = QLabel()
        self._dot.setFixedSize(14, 14)
        self._label = QLabel(name)
        layout.addWidget(self._dot)
        layout.addWidget(self._label)
        layout.addStretch()

        self._status = False
        self.set_status(False)

    @property
    def status(self) -> bool:
        return self._status

    def set_status(self, status: bool):
        self._status = status
        color = self.ON_COLOR if status and self.isEnabled() else self.OFF_COLOR
        self._dot.setStyleSheet(f"background-color: {color}; border-radius: 7px;")

    def changeEvent(self, event):
        super().changeEvent(event)
        if event.type() == QEvent.EnabledChange:
            self.set_status(self._status)


class ConfigurationPanel(QWidget):
    """
    Side panel for choosing the capture device and format.

    Emits requests only; the owner forwards them to the worker.
    """
    device_selected = pyqtSignal(int)
    format_selected = pyqtSignal(object)  # VideoFormat
    automatic_selection_changed = pyqtSignal(bool)

    def __init__(self, automatic_selection: bool = True, parent=None):
        super().__init__(parent)
        self._devices: List[Device] = []
        self._formats: List[VideoFormat] = []
        self._updating = False

        layout = QVBoxLayout(self)
        layout.setSpacing(8)

        # Cameras
        layout.addWidget(self._section_header("Cameras"))
        self.device_combo = QComboBox()
        self.device_combo.currentIndexChanged.connect(self._on_device_index)
        layout.addWidget(self.device_combo)

        self.format_combo = QComboBox()
        self.format_combo.currentIndexChanged.connect(self._on_format_index)
        layout.addWidget(self.format_combo)

        self.auto_checkbox = QCheckBox("Automatic Camera Selection")
        self.auto_checkbox.setChecked(automatic_selection)
        self.auto_checkbox.toggled.connect(self.automatic_selection_changed.emit)
        layout.addWidget(self.auto_checkbox)

        layout.addSpacing(20)

        # Video effects
        layout.addWidget(self._section_header("Video Effects"))
        self.center_stage = EffectStatusView("Center Stage")
        self.portrait = EffectStatusView("Portrait Mode")
        self.studio_light = EffectStatusView("Studio Light")
        for view in (self.center_stage, self.portrait, self.studio_light):
            layout.addWidget(view)

        layout.addStretch()
        self.set_effects_state(VideoEffectsState())

    @staticmethod
    def _section_header(title: str) -> QLabel:
        label = QLabel(title)
        label.setStyleSheet("font-weight: bold; color: palette(mid);")
        return label

    def set_devices(self, devices: List[Device], selected_id: Optional[int] = None):
        """Populate the camera picker without emitting selection signals."""
        self._updating = True
        try:
            self._devices = list(devices)
            self.device_combo.clear()
            if not self._devices:
                self.device_combo.addItem("No camera available")
                self.device_combo.setEnabled(False)
                return
            self.device_combo.setEnabled(True)
            for device in self._devices:
                self.device_combo.addItem(device.name)
            ids = [d.id for d in self._devices]
            if selected_id in ids:
                self.device_combo.setCurrentIndex(ids.index(selected_id))
        finally:
            self._updating = False

    def set_formats(self, formats: List[VideoFormat], current: Optional[VideoFormat] = None):
        """Populate the format picker without emitting selection signals."""
        self._updating = True
        try:
            self._formats = list(formats)
            self.format_combo.clear()
            for fmt in self._formats:
                self.format_combo.addItem(fmt.name)
            self.format_combo.setEnabled(bool(self._formats))
            if current in self._formats:
                self.format_combo.setCurrentIndex(self._formats.index(current))
        finally:
            self._updating = False

    def set_effects_state(self, state: VideoEffectsState):
        self.center_stage.setEnabled(state.center_stage_supported)
        self.center_stage.set_status(state.center_stage_enabled)
        self.portrait.setEnabled(state.portrait_effect_supported)
        self.portrait.set_status(state.portrait_effect_enabled)
        self.studio_light.setEnabled(state.studio_light_supported)
        self.studio_light.set_status(state.studio_light_enabled)

    def _on_device_index(self, index: int):
        if self._updating or not 0 <= index < len(self._devices):
            return
        self.device_selected.emit(self._devices[index].id)

    def _on_format_index(self, index: int):
        if self._updating or not 0 <= index < len(self._formats):
            return
        self.format_selected.emit(self._formats[index])
