"""
Main window: camera preview next to the configuration panel.
"""
import numpy as np
from PyQt5.QtWidgets import QMainWindow, QWidget, QHBoxLayout, QLabel, QSizePolicy
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QImage, QPixmap

from .config_panel import ConfigurationPanel


class MainWindow(QMainWindow):
    """Preview of what the tracker sees, with camera controls on the right."""

    PANEL_WIDTH = 300

    def __init__(self, automatic_selection: bool = True, parent=None):
        super().__init__(parent)
        self.setWindowTitle("PinchPad")

        central = QWidget()
        layout = QHBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        self.setCentralWidget(central)

        self.preview = QLabel("Waiting for camera...")
        self.preview.setAlignment(Qt.AlignCenter)
        self.preview.setMinimumSize(320, 240)
        self.preview.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.preview.setStyleSheet("background-color: black; color: white;")
        layout.addWidget(self.preview, 1)

        self.panel = ConfigurationPanel(automatic_selection=automatic_selection)
        self.panel.setFixedWidth(self.PANEL_WIDTH)
        layout.addWidget(self.panel)

        self.resize(960, 540)

    def set_frame(self, frame: np.ndarray):
        """
        Update the camera preview.

        Args:
            frame: BGR numpy array from HandTracker
        """
        if frame is None:
            self.preview.clear()
            return

        rgb = frame[:, :, ::-1].copy()
        h, w, ch = rgb.shape
        bytes_per_line = ch * w
        qimg = QImage(rgb.data, w, h, bytes_per_line, QImage.Format_RGB888)
        pixmap = QPixmap.fromImage(qimg).scaled(
            self.preview.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation
        )
        self.preview.setPixmap(pixmap)

    def set_status(self, text: str):
        self.statusBar().showMessage(text)
