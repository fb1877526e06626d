"""Immutable bit-pattern seeds for Game of Life runs."""

import numpy as np
from typing import Iterable, List, Optional


class State:
    """A Game of Life seed: one bit per cell, row-major, read-only.

    Equality and hashing use the full bit content, so a State can key the
    state-space cache.
    """

    __slots__ = ("_bits", "_key")

    def __init__(self, bits):
        array = np.array(bits, dtype=bool).reshape(-1)
        array.flags.writeable = False
        self._bits = array
        self._key = (array.size, np.packbits(array).tobytes())

    @classmethod
    def zeros(cls, length: int) -> "State":
        """An all-dead seed."""
        return cls(np.zeros(length, dtype=bool))

    @classmethod
    def random(
        cls,
        length: int,
        rng: Optional[np.random.Generator] = None,
        density: float = 0.5,
    ) -> "State":
        """Each cell alive independently with probability ``density``."""
        if rng is None:
            rng = np.random.default_rng()
        return cls(rng.random(length) < density)

    @classmethod
    def from_pattern(cls, pattern, columns: int, rows: int, x: int = 0, y: int = 0) -> "State":
        """Place a 2D pattern at (x, y) in an otherwise dead grid."""
        pattern = np.asarray(pattern, dtype=bool)
        if pattern.ndim != 2:
            raise ValueError("pattern must be two-dimensional")
        ph, pw = pattern.shape
        if x < 0 or y < 0 or x + pw > columns or y + ph > rows:
            raise ValueError(
                f"{pw}x{ph} pattern at ({x}, {y}) does not fit a {columns}x{rows} grid"
            )
        grid = np.zeros((rows, columns), dtype=bool)
        grid[y:y + ph, x:x + pw] = pattern
        return cls(grid)

    @classmethod
    def from_plaintext(
        cls,
        text: str,
        columns: int,
        rows: int,
        x: Optional[int] = None,
        y: Optional[int] = None,
    ) -> "State":
        """Parse a Life 'plaintext' pattern (``!`` comments, ``O`` alive, ``.`` dead).

        The pattern is centred unless an offset is given.
        """
        lines = [
            line.rstrip()
            for line in text.splitlines()
            if not line.startswith("!")
        ]
        while lines and not lines[-1]:
            lines.pop()
        if not lines:
            raise ValueError("pattern is empty")

        width = max(len(line) for line in lines)
        pattern = np.zeros((len(lines), width), dtype=bool)
        for dy, line in enumerate(lines):
            for dx, c in enumerate(line):
                if c in "O*":
                    pattern[dy, dx] = True
                elif c != ".":
                    raise ValueError(f"unexpected character {c!r} on line {dy + 1}")

        if x is None:
            x = (columns - width) // 2
        if y is None:
            y = (rows - len(lines)) // 2
        return cls.from_pattern(pattern, columns, rows, x, y)

    @property
    def bits(self) -> np.ndarray:
        """Read-only view of the cells."""
        return self._bits

    @property
    def population(self) -> int:
        return int(np.count_nonzero(self._bits))

    def to_grid(self, columns: int, rows: int) -> np.ndarray:
        """Reshape to a writable (rows, columns) uint8 array."""
        if columns * rows != self._bits.size:
            raise ValueError(
                f"state of length {self._bits.size} does not fit a {columns}x{rows} grid"
            )
        return self._bits.reshape(rows, columns).astype(np.uint8)

    def flip(self, indices: Iterable[int]) -> "State":
        """Return a copy with the given cells toggled; repeated indices cancel."""
        bits = self._bits.copy()
        np.logical_xor.at(bits, np.asarray(list(indices), dtype=np.intp), True)
        return State(bits)

    def to_list(self) -> List[bool]:
        return self._bits.tolist()

    def __len__(self):
        return self._bits.size

    def __hash__(self):
        return hash(self._key)

    def __eq__(self, other):
        if not isinstance(other, State):
            return False
        return self._key == other._key

    def __repr__(self):
        return f"State(length={len(self)}, population={self.population})"
