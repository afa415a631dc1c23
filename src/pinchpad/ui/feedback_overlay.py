"""
Cursor feedback overlay - frameless, transparent, always-on-top, click-through.
"""
from typing import Optional, Tuple
from PyQt5.QtWidgets import QApplication, QWidget
from PyQt5.QtCore import Qt, QPoint
from PyQt5.QtGui import QPainter, QPen, QColor


class CursorFeedbackOverlay(QWidget):
    """
    Full-screen indicator showing where the trackpad is steering the cursor.

    Draws a ring with a filled center dot while the trackpad is engaged and
    nothing otherwise.
    """

    OUTER_RADIUS = 20
    INNER_RADIUS = 5
    COLOR = QColor(0, 200, 0)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._active = False
        self._cursor_pos: Optional[Tuple[float, float]] = None

        self.setWindowFlags(
            Qt.FramelessWindowHint |
            Qt.WindowStaysOnTopHint |
            Qt.Tool  # Don't show in taskbar
        )
        self.setAttribute(Qt.WA_TranslucentBackground)
        self.setAttribute(Qt.WA_TransparentForMouseEvents)
        self._cover_screen()

    def _cover_screen(self):
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        self.setGeometry(screen.geometry())

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def cursor_position(self) -> Optional[Tuple[float, float]]:
        return self._cursor_pos

    def set_active(self, active: bool):
        """Show or hide the indicator."""
        if self._active != active:
            self._active = active
            self.update()

    def set_cursor(self, x: float, y: float):
        """Set indicator position, normalized 0-1."""
        self._cursor_pos = (x, y)
        self.update()

    def paintEvent(self, event):
        """Draw the ring and dot at the cursor position."""
        if not self._active or self._cursor_pos is None:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        cx, cy = self._cursor_pos
        center = QPoint(int(cx * self.width()), int(cy * self.height()))

        painter.setBrush(Qt.NoBrush)
        painter.setPen(QPen(self.COLOR, 2))
        painter.drawEllipse(center, self.OUTER_RADIUS, self.OUTER_RADIUS)

        fill = QColor(self.COLOR)
        fill.setAlpha(128)
        painter.setPen(Qt.NoPen)
        painter.setBrush(fill)
        painter.drawEllipse(center, self.INNER_RADIUS, self.INNER_RADIUS)
        painter.end()
