import pytest
from pinchpad.cursor import CursorSink, to_screen


class FakeScreen:
    def __init__(self, width=1920, height=1080):
        self._size = (width, height)
        self.moves = []

    def size(self):
        return self._size

    def moveTo(self, x, y):
        self.moves.append((x, y))


@pytest.mark.parametrize("x,y,expected", [
    (0.0, 0.0, (0, 0)),
    (0.5, 0.5, (960, 540)),
    (0.25, 0.75, (480, 810)),
    (1.0, 1.0, (1919, 1079)),
])
def test_to_screen_scales(x, y, expected):
    assert to_screen(x, y, 1920, 1080) == expected


def test_sink_moves_backend_in_order():
    screen = FakeScreen()
    sink = CursorSink(backend=screen)

    sink.move_to(0.5, 0.5)
    sink.move_to(0.1, 0.9)

    assert screen.moves == [(960, 540), (192, 972)]
    assert sink.last_position == (192, 972)


def test_sink_follows_screen_size():
    screen = FakeScreen(800, 600)
    sink = CursorSink(backend=screen)
    sink.move_to(0.5, 0.5)
    assert screen.moves == [(400, 300)]


def test_disabled_sink_never_touches_backend():
    screen = FakeScreen()
    sink = CursorSink(backend=screen, enabled=False)
    sink.move_to(0.5, 0.5)
    assert screen.moves == []
    assert sink.last_position is None
    assert not sink.enabled


def test_disabled_sink_needs_no_backend():
    sink = CursorSink(enabled=False)
    sink.move_to(0.2, 0.2)
