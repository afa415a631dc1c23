"""
PinchPad

Pinch-and-drag trackpad emulation from a webcam hand feed.
"""
__version__ = "0.1.0"
