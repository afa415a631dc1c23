"""
System cursor output.
"""
from typing import Tuple
import logging

logger = logging.getLogger(__name__)


def to_screen(x: float, y: float, width: int, height: int) -> Tuple[int, int]:
    """
    Scale a normalized position to pixel coordinates.

    The result stays on screen: 1.0 maps to the last pixel column/row.
    """
    px = min(max(int(x * width), 0), max(width - 1, 0))
    py = min(max(int(y * height), 0), max(height - 1, 0))
    return (px, py)


class CursorSink:
    """
    Warps the system cursor to normalized positions.

    Args:
        backend: Object providing ``size()`` and ``moveTo(x, y)``. Defaults to
                 pyautogui, imported on first use since it needs a display.
        enabled: If False, positions are logged but the cursor is not moved.
    """

    def __init__(self, backend=None, enabled: bool = True):
        self._enabled = enabled
        if backend is None and enabled:
            import pyautogui
            pyautogui.FAILSAFE = False  # Corners are valid targets
            pyautogui.PAUSE = 0
            backend = pyautogui
        self._backend = backend
        self._last_position = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def last_position(self):
        """Last pixel position sent to the backend, or None."""
        return self._last_position

    def screen_size(self) -> Tuple[int, int]:
        width, height = self._backend.size()
        return int(width), int(height)

    def move_to(self, x: float, y: float) -> None:
        """Move the cursor to normalized (x, y)."""
        if not self._enabled:
            logger.debug("Cursor -> (%.3f, %.3f) [dry run]", x, y)
            return
        width, height = self.screen_size()
        px, py = to_screen(x, y, width, height)
        self._backend.moveTo(px, py)
        self._last_position = (px, py)
