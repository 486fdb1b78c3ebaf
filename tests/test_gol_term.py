import pytest

from gol import Universe
from gol_diag import TimedUniverse
from gol_term import cell_at, frame_lines, status_line


def small_universe():
    u = Universe()
    u.set_width(4)
    u.set_height(3)
    u.set_cells([(0, 0), (2, 3)])
    return u


def test_frame_lines_full():
    assert frame_lines(small_universe(), 10, 10) == ["+...", "....", "...+"]


def test_frame_lines_cropped():
    assert frame_lines(small_universe(), 2, 2) == ["+.", ".."]


@pytest.mark.parametrize("rows, cols", [(0, 5), (5, 0), (-1, -1)])
def test_frame_lines_empty_window(rows, cols):
    assert frame_lines(small_universe(), rows, cols) == []


def test_status_line():
    life = TimedUniverse(small_universe())
    life.tick()

    text = status_line(life, paused=False, delay_ms=50.0, width=200)
    assert "gen 1" in text
    assert "4x3" in text
    assert "50ms" in text
    assert "paused" in status_line(life, paused=True, delay_ms=50.0, width=200)
    assert len(status_line(life, paused=True, delay_ms=50.0, width=5)) == 5


@pytest.mark.parametrize("y, x, max_y, expected", [
    (0, 0, 24, (0, 0)),
    (2, 3, 24, (2, 3)),
    (3, 0, 24, None),   # below the grid
    (0, 4, 24, None),   # right of the grid
    (-1, 0, 24, None),
    (2, 0, 3, None),    # status bar row covers the last grid row
    (1, 0, 3, (1, 0)),
])
def test_cell_at(y, x, max_y, expected):
    assert cell_at(small_universe(), y, x, max_y) == expected
