"""Window tables and small aggregation helpers shared by the analyzer."""

from typing import Sequence, Union

import numpy as np
from scipy import signal as scipy_signal

WINDOW_KINDS = ("hann", "blackmanharris")


def window_table(size: int, kind: str = "hann") -> np.ndarray:
    """
    Precompute a read-only taper of ``size`` scale factors.

    ``"hann"`` is the periodic Hann window, ``sin(pi * i / size) ** 2``:
    zero at index 0 and peaking at ``size // 2``.  ``"blackmanharris"`` is
    the 4-term Blackman-Harris window, trading resolution for lower
    sidelobes.

    Raises:
        ValueError: For a non-positive size or an unknown kind.
    """
    if size <= 0:
        raise ValueError(f"window size must be positive, got {size}")
    if kind not in WINDOW_KINDS:
        raise ValueError(
            f"unknown window {kind!r}; expected one of {', '.join(WINDOW_KINDS)}"
        )

    table = scipy_signal.get_window(kind, size, fftbins=True).astype(np.float64)
    table.flags.writeable = False
    return table


def mean_or_zero(values: Union[Sequence[float], np.ndarray]) -> float:
    """Arithmetic mean of ``values``; 0.0 when there are none."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def bin_means(values: np.ndarray, n_bins: int) -> np.ndarray:
    """
    Average ``values`` into ``n_bins`` contiguous, equal-size chunks.

    Chunk size is ``len(values) // n_bins``.  When that does not divide
    evenly the trailing ``len(values) % n_bins`` values are left out, so every
    bin averages the same number of inputs.  If there are fewer values than
    bins no complete chunk exists and the result is empty.
    """
    if n_bins <= 0:
        raise ValueError(f"n_bins must be positive, got {n_bins}")

    values = np.asarray(values, dtype=np.float64)
    chunk = len(values) // n_bins
    if chunk == 0:
        return np.zeros(0, dtype=np.float64)

    return values[:chunk * n_bins].reshape(n_bins, chunk).mean(axis=1)
