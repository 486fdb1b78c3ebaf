"""
  Conway's Game of Life on a torus.

  A fixed-size grid of binary cells stored as one flat row-major byte buffer
  (index = row * width + col). Every edge wraps: row 0's northern neighbour
  is row height-1 and column 0's western neighbour is column width-1.

  Each tick applies B3/S23 to a snapshot of the current generation and
  writes the result into a spare buffer; the two buffers are swapped once the
  whole grid has been computed, so nothing outside tick() ever sees a
  half-updated generation.

  The universe is not synchronised. Callers that share one across threads
  must serialise tick(), resizes and cell edits themselves.
"""

from __future__ import annotations

import enum
import operator
from collections.abc import Iterable

import numpy as np
from numpy.typing import NDArray
from scipy.ndimage import convolve

# ── Construction defaults ───────────────────────────────────────────────
DEFAULT_WIDTH: int = 64
DEFAULT_HEIGHT: int = 64

# ── Convolution kernel (reused every tick) ──────────────────────────────
NEIGHBOR_KERNEL: NDArray = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=np.int16)

# ── Text rendering ──────────────────────────────────────────────────────
DEAD_CHAR = "."
ALIVE_CHAR = "+"
_GLYPHS: NDArray[np.uint8] = np.frombuffer(
    (DEAD_CHAR + ALIVE_CHAR).encode("ascii"), dtype=np.uint8
)
_NEWLINE: int = ord("\n")

# ── Pattern library ─────────────────────────────────────────────────────
# Offsets are (row, col) from the pattern's top-left corner.
PATTERNS: dict[str, list[tuple[int, int]]] = {
    "block": [(0, 0), (0, 1), (1, 0), (1, 1)],
    "blinker": [(0, 0), (0, 1), (0, 2)],
    "glider": [(0, 1), (1, 2), (2, 0), (2, 1), (2, 2)],
    "lwss": [
        (0, 1), (0, 4), (1, 0), (2, 0), (2, 4),
        (3, 0), (3, 1), (3, 2), (3, 3),
    ],
    "r_pentomino": [(0, 1), (0, 2), (1, 0), (1, 1), (2, 1)],
    "acorn": [(0, 1), (1, 3), (2, 0), (2, 1), (2, 4), (2, 5), (2, 6)],
    "diehard": [(0, 6), (1, 0), (1, 1), (2, 1), (2, 5), (2, 6), (2, 7)],
    "pulsar": [
        (0, 2), (0, 3), (0, 4), (0, 8), (0, 9), (0, 10),
        (2, 0), (2, 5), (2, 7), (2, 12),
        (3, 0), (3, 5), (3, 7), (3, 12),
        (4, 0), (4, 5), (4, 7), (4, 12),
        (5, 2), (5, 3), (5, 4), (5, 8), (5, 9), (5, 10),
        (7, 2), (7, 3), (7, 4), (7, 8), (7, 9), (7, 10),
        (8, 0), (8, 5), (8, 7), (8, 12),
        (9, 0), (9, 5), (9, 7), (9, 12),
        (10, 0), (10, 5), (10, 7), (10, 12),
        (12, 2), (12, 3), (12, 4), (12, 8), (12, 9), (12, 10),
    ],
    "pentadecathlon": [
        (0, 1), (1, 1), (2, 0), (2, 2), (3, 1), (4, 1),
        (5, 1), (6, 1), (7, 0), (7, 2), (8, 1), (9, 1),
    ],
}


class Cell(enum.IntEnum):
    Dead = 0
    Alive = 1


def _dimension(name: str, value: int) -> int:
    # operator.index rejects floats and other non-integers with TypeError
    size = operator.index(value)
    if size <= 0:
        raise ValueError(f"{name} must be positive, got {size}")
    return size


# ═══════════════════════════════════════════════════════════════════════
#  The universe
# ═══════════════════════════════════════════════════════════════════════

class Universe:
    """
    A width x height torus of cells, advanced one generation per tick().

    Cells live in a flat uint8 buffer in row-major order. A second buffer of
    the same size receives the next generation; tick() swaps them. Arrays
    handed out by ``cells`` and ``grid()`` are read-only views of the
    current buffer and go stale after the next tick() or resize.
    """

    def __init__(self) -> None:
        self._width: int = DEFAULT_WIDTH
        self._height: int = DEFAULT_HEIGHT
        self._allocate()

        i = np.arange(self._width * self._height)
        self._cells[:] = (i % 2 == 0) | (i % 9 == 0)

    @classmethod
    def new(cls) -> Universe:
        return cls()

    def _allocate(self) -> None:
        """(Re)build both cell buffers and the tick scratch space, all Dead."""
        h, w = self._height, self._width
        self._cells: NDArray[np.uint8] = np.zeros(w * h, dtype=np.uint8)
        self._next: NDArray[np.uint8] = np.zeros(w * h, dtype=np.uint8)

        # Pre-allocated buffers for the tick() hot path
        self._grid_i16: NDArray[np.int16] = np.empty((h, w), dtype=np.int16)
        self._neighbor_buf: NDArray[np.int16] = np.empty((h, w), dtype=np.int16)

        self.generation: int = 0

    # ── Dimensions ──────────────────────────────────────────────────

    @property
    def width(self) -> int:
        return self._width

    @width.setter
    def width(self, width: int) -> None:
        self.set_width(width)

    @property
    def height(self) -> int:
        return self._height

    @height.setter
    def height(self, height: int) -> None:
        self.set_height(height)

    def set_width(self, width: int) -> None:
        """Set the width. Every cell is reset to Dead, not just new ones."""
        self._width = _dimension("width", width)
        self._allocate()

    def set_height(self, height: int) -> None:
        """Set the height. Every cell is reset to Dead, not just new ones."""
        self._height = _dimension("height", height)
        self._allocate()

    # ── Indexing ────────────────────────────────────────────────────

    def get_index(self, row: int, col: int) -> int:
        """Linear offset of (row, col). Coordinates are not validated."""
        return row * self._width + col

    def get_index_checked(self, row: int, col: int) -> int:
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexError(
                f"cell ({row}, {col}) is outside the "
                f"{self._height}x{self._width} universe"
            )
        return self.get_index(row, col)

    # ── Queries ─────────────────────────────────────────────────────

    @property
    def cells(self) -> NDArray[np.uint8]:
        """Read-only row-major view of the current generation."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def grid(self) -> NDArray[np.uint8]:
        """Read-only (height, width) view of the current generation."""
        return self.cells.reshape(self._height, self._width)

    def get_cell(self, row: int, col: int) -> Cell:
        return Cell(int(self._cells[self.get_index_checked(row, col)]))

    def population(self) -> int:
        return int(np.count_nonzero(self._cells))

    def live_neighbor_count(self, row: int, col: int) -> int:
        """Count live cells among the 8 wrapped neighbours of (row, col)."""
        h, w = self._height, self._width
        count = 0
        for dr, dc in self._neighbor_offsets():
            count += int(self._cells[self.get_index((row + dr) % h, (col + dc) % w)])
        return count

    def _neighbor_offsets(self) -> list[tuple[int, int]]:
        # -1 is written as size-1 so every offset stays non-negative. On a
        # dimension of 1 that makes the offsets {0, 0, 1}, and only the
        # literal (0, 0) pairs are skipped.
        h, w = self._height, self._width
        return [
            (dr, dc)
            for dr in (h - 1, 0, 1)
            for dc in (w - 1, 0, 1)
            if not (dr == 0 and dc == 0)
        ]

    # ── Editing ─────────────────────────────────────────────────────

    def set_cell(self, row: int, col: int, state: Cell | int) -> None:
        self._cells[self.get_index_checked(row, col)] = Cell(state)

    def toggle_cell(self, row: int, col: int) -> None:
        idx = self.get_index_checked(row, col)
        self._cells[idx] ^= 1

    def set_cells(self, coords: Iterable[tuple[int, int]]) -> None:
        """Mark every (row, col) in coords Alive. Other cells are untouched."""
        # Validate everything before writing so a bad coordinate leaves no trace
        indices = [self.get_index_checked(row, col) for row, col in coords]
        self._cells[indices] = Cell.Alive

    def place(self, name: str, row: int, col: int) -> None:
        """Stamp pattern ``name`` with its top-left corner at (row, col).

        The stamp wraps around the edges like everything else on the torus.
        """
        h, w = self._height, self._width
        for dy, dx in PATTERNS[name]:
            self._cells[self.get_index((row + dy) % h, (col + dx) % w)] = Cell.Alive

    def clear(self) -> None:
        self._cells[:] = Cell.Dead
        self.generation = 0

    # ── Simulation ──────────────────────────────────────────────────

    def tick(self) -> None:
        """Advance one generation."""
        h, w = self._height, self._width
        g = self._cells.reshape(h, w)
        n = self._count_neighbors(g)

        # Zero-copy bool view of the uint8 grid (cells only ever hold 0 or 1)
        alive = g.view(np.bool_)
        n_is_3 = n == 3
        # Live cells with 2 or 3 neighbours survive; fewer or more die
        survive = alive & (n_is_3 | (n == 2))
        # Dead cells with exactly 3 neighbours are born; the rest stay dead
        birth = ~alive & n_is_3

        nxt = self._next.reshape(h, w)
        np.bitwise_or(survive, birth, out=nxt.view(np.bool_))

        self._cells, self._next = self._next, self._cells
        self.generation += 1

    def _count_neighbors(self, g: NDArray[np.uint8]) -> NDArray[np.int16]:
        h, w = g.shape
        if h > 1 and w > 1:
            # Reuse pre-allocated input + output buffers (toroidal wrap-around)
            np.copyto(self._grid_i16, g)
            convolve(self._grid_i16, NEIGHBOR_KERNEL, output=self._neighbor_buf, mode="wrap")
            return self._neighbor_buf

        # A 1-wide torus: the 3x3 kernel would see a cell as its own
        # neighbour twice, so sum the exact offsets live_neighbor_count uses.
        n = self._neighbor_buf
        n[:] = 0
        for dr, dc in self._neighbor_offsets():
            n += np.roll(g, (-dr, -dc), axis=(0, 1))
        return n

    # ── Rendering ───────────────────────────────────────────────────

    def render(self) -> str:
        """One line per row, '.' for Dead and '+' for Alive."""
        h, w = self._height, self._width
        lines = np.empty((h, w + 1), dtype=np.uint8)
        lines[:, :w] = _GLYPHS[self._cells.reshape(h, w)]
        lines[:, w] = _NEWLINE
        return lines.tobytes().decode("ascii")

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (
            f"Universe(width={self._width}, height={self._height}, "
            f"generation={self.generation})"
        )
