"""
PinchPad UI Module

PyQt5 cursor feedback overlay and configuration window.
"""
from .feedback_overlay import CursorFeedbackOverlay
from .config_panel import ConfigurationPanel, EffectStatusView
from .main_window import MainWindow

__all__ = [
    'CursorFeedbackOverlay',
    'ConfigurationPanel',
    'EffectStatusView',
    'MainWindow',
]
