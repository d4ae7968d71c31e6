"""
Fixed-capacity overwrite ring buffer for stereo sample frames.

The buffer is a preallocated ``(capacity, width)`` numpy arena addressed by a
write index modulo capacity.  Pushing past capacity silently evicts the
oldest rows; peeking never removes anything.
"""

from __future__ import annotations

from typing import Optional

import numpy as np


class OverwriteRingBuffer:
    """
    Circular buffer of fixed-width rows with push-with-overwrite semantics.

    Rows are kept in chronological order: a peek always returns the oldest
    retained row first and the most recently pushed row last.
    """

    def __init__(self, capacity: int, width: int = 2, dtype=np.int16):
        """
        Args:
            capacity: Maximum number of rows retained.
            width: Values per row (2 for stereo frames).
            dtype: numpy dtype of the stored values.

        Raises:
            ValueError: If capacity or width is not positive.
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")

        self.capacity = int(capacity)
        self.width = int(width)
        self._data = np.zeros((self.capacity, self.width), dtype=dtype)
        self._write_idx = 0
        self._len = 0

    def __len__(self) -> int:
        return self._len

    @property
    def is_full(self) -> bool:
        return self._len == self.capacity

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    def push_overwrite(self, rows: np.ndarray) -> None:
        """
        Append rows, evicting the oldest ones when capacity is exceeded.

        Args:
            rows: Array of shape ``(n, width)``.  ``n`` may be zero or exceed
                  capacity; in the latter case only the last ``capacity`` rows
                  are retained.
        """
        rows = np.asarray(rows)
        if rows.ndim != 2 or rows.shape[1] != self.width:
            raise ValueError(
                f"expected rows of shape (n, {self.width}), got {rows.shape}"
            )

        n = len(rows)
        if n == 0:
            return

        if n >= self.capacity:
            # Only the tail survives; lay it out from index 0
            self._data[:] = rows[n - self.capacity:]
            self._write_idx = 0
            self._len = self.capacity
            return

        first = min(n, self.capacity - self._write_idx)
        self._data[self._write_idx:self._write_idx + first] = rows[:first]
        if first < n:
            self._data[:n - first] = rows[first:]

        self._write_idx = (self._write_idx + n) % self.capacity
        self._len = min(self.capacity, self._len + n)

    def peek_into(self, out: np.ndarray) -> int:
        """
        Copy the most recent rows into ``out`` without removing them.

        Copies ``n = min(len(self), len(out))`` rows, oldest first, into
        ``out[:n]``.  Rows of ``out`` beyond ``n`` keep their previous contents.

        Returns:
            Number of rows copied.
        """
        n = min(self._len, len(out))
        if n == 0:
            return 0

        start = (self._write_idx - n) % self.capacity
        first = min(n, self.capacity - start)
        out[:first] = self._data[start:start + first]
        if first < n:
            out[first:n] = self._data[:n - first]
        return n

    def peek(self, n: Optional[int] = None) -> np.ndarray:
        """Return a copy of the ``n`` most recent rows (all rows if None)."""
        if n is None or n > self._len:
            n = self._len
        out = np.zeros((n, self.width), dtype=self._data.dtype)
        self.peek_into(out)
        return out
