"""
PinchPad Cursor Module

Maps normalized positions to the screen and moves the system cursor.
"""
from .sink import CursorSink, to_screen

__all__ = [
    'CursorSink',
    'to_screen',
]
