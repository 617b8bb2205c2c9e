from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .errors import out_of_memory_bounds


# ---------------- Memory sizes ----------------

@dataclass(frozen=True)
class Fixed:
    size: int  # valid addresses: [0, size)

    def __post_init__(self) -> None:
        if self.size < 0:
            raise ValueError(f'Fixed memory size must not be negative: {self.size}')


@dataclass(frozen=True)
class RightUnbounded:
    pass  # addresses >= 0 grow on demand, negative addresses fail


@dataclass(frozen=True)
class BothUnbounded:
    pass  # both directions grow on demand


MemorySize = Union[Fixed, RightUnbounded, BothUnbounded]

DEFAULT_MEMSIZE: MemorySize = Fixed(30000)

_MIN_GROWTH = 256


def _grow(buf: np.ndarray, needed: int) -> np.ndarray:
    # Double the buffer so repeated one-cell growth stays amortized O(1).
    capacity = max(needed, 2 * len(buf), _MIN_GROWTH)
    out = np.zeros(capacity, dtype=np.uint8)
    out[:len(buf)] = buf
    return out


class Memory:
    """
    Byte cells addressed by any integer.

    ``right`` holds addresses 0.. and ``left`` holds -1, -2, ... at indices
    0, 1, ... Cells read as zero until written. Every access is checked against
    the size policy before anything is modified.
    """

    def __init__(self, size: MemorySize = DEFAULT_MEMSIZE):
        self.size = size
        if isinstance(size, Fixed):
            self.right = np.zeros(size.size, dtype=np.uint8)
        else:
            self.right = np.zeros(0, dtype=np.uint8)
        self.left = np.zeros(0, dtype=np.uint8)

    def _locate(self, address: int) -> Tuple[np.ndarray, int]:
        if address >= 0:
            if address >= len(self.right):
                if isinstance(self.size, Fixed):
                    raise out_of_memory_bounds(address)
                self.right = _grow(self.right, address + 1)
            return self.right, address

        if isinstance(self.size, BothUnbounded):
            left_address = -(address + 1)
            if left_address >= len(self.left):
                self.left = _grow(self.left, left_address + 1)
            return self.left, left_address

        raise out_of_memory_bounds(address)

    def in_bounds(self, address: int) -> bool:
        """Whether the size policy allows ``address``. Never grows memory."""
        if isinstance(self.size, Fixed):
            return 0 <= address < self.size.size
        if isinstance(self.size, RightUnbounded):
            return address >= 0
        return True

    def peek(self, address: int) -> int:
        """Value at an in-bounds ``address`` without growing memory; untouched cells read 0."""
        if address >= 0:
            return int(self.right[address]) if address < len(self.right) else 0
        left_address = -(address + 1)
        return int(self.left[left_address]) if left_address < len(self.left) else 0

    def get(self, address: int) -> int:
        buf, i = self._locate(address)
        return int(buf[i])

    def set(self, address: int, value: int) -> None:
        buf, i = self._locate(address)
        buf[i] = value & 0xFF

    def add(self, address: int, operand: int) -> None:
        buf, i = self._locate(address)
        buf[i] = (int(buf[i]) + operand) & 0xFF

    def window(self, start: int, end: int) -> np.ndarray:
        """Copy of cells [start, end) without growing memory; cells outside the buffers read as 0."""
        out = np.zeros(max(0, end - start), dtype=np.uint8)
        for offset, address in enumerate(range(start, end)):
            if 0 <= address < len(self.right):
                out[offset] = self.right[address]
            elif address < 0 and -(address + 1) < len(self.left):
                out[offset] = self.left[-(address + 1)]
        return out
