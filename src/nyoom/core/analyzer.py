"""
Spectral analysis of the visualized sample window.

Turns one window of stereo time-domain samples into two fixed-length
magnitude spectra:

    samples ─► taper ─► zero-pad to 2N ─► forward FFT ─► |X[0:N]| ─► bin means

Only the lower half of the transform is kept since the input is real and the
spectrum mirrors around Nyquist.  Zero-padding to twice the window doubles
the frequency resolution of the raw magnitudes before binning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from scipy import fft as scipy_fft

from nyoom.core.windows import bin_means, mean_or_zero, window_table


@dataclass
class ProcessorOutput:
    """Per-channel bin magnitudes for one rendered frame."""

    left: np.ndarray   # (output_bins,) ascending frequency
    right: np.ndarray  # (output_bins,) ascending frequency

    def levels(self) -> Tuple[float, float]:
        """Mean magnitude of each channel's bins."""
        return mean_or_zero(self.left), mean_or_zero(self.right)


class SpectralAnalyzer:
    """
    Windowed-FFT magnitude binning for a fixed window and bin count.

    All buffers are sized once here; :meth:`process` only overwrites them.
    The sample extractor writes into :attr:`audio_buffer` (column 0 left,
    column 1 right) and :meth:`process_samples` reads it back.
    """

    def __init__(self, window_size: int, output_bins: int, window: str = "hann"):
        """
        Args:
            window_size: Samples per channel in each analyzed window.
            output_bins: Magnitudes produced per channel.  Should divide
                         window_size; if it does not, the top
                         ``window_size % output_bins`` raw magnitudes are left
                         out of the bins.
            window: Taper applied before the transform ("hann" or
                    "blackmanharris").

        Raises:
            ValueError: If either size is non-positive or there are more
                        bins than magnitudes to fill them.
        """
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")
        if output_bins <= 0:
            raise ValueError(f"output_bins must be positive, got {output_bins}")
        if output_bins > window_size:
            raise ValueError(
                f"output_bins ({output_bins}) cannot exceed window_size ({window_size})"
            )

        self.window_size = int(window_size)
        self.output_bins = int(output_bins)
        self.fft_size = 2 * self.window_size

        self.audio_buffer = np.zeros((self.window_size, 2), dtype=np.int16)
        self.window = window_table(self.window_size, window)
        self._scratch = np.zeros(self.fft_size, dtype=np.complex128)

    @property
    def chunk_size(self) -> int:
        """Raw magnitudes averaged into each output bin."""
        return self.window_size // self.output_bins

    def magnitudes(self, samples: np.ndarray) -> np.ndarray:
        """Magnitudes of the lower half of the windowed, zero-padded FFT."""
        samples = np.asarray(samples)
        if samples.shape != (self.window_size,):
            raise ValueError(
                f"expected {self.window_size} samples, got shape {samples.shape}"
            )

        n = self.window_size
        self._scratch[:n] = self.window * samples
        self._scratch[n:] = 0.0

        spectrum = scipy_fft.fft(self._scratch, overwrite_x=True)
        return np.abs(spectrum[:n])

    def process(self, samples: np.ndarray) -> np.ndarray:
        """
        Analyze one channel.

        Args:
            samples: ``window_size`` amplitudes in chronological order.

        Returns:
            ``output_bins`` mean magnitudes, lowest frequency first.
        """
        return bin_means(self.magnitudes(samples), self.output_bins)

    def process_samples(self) -> ProcessorOutput:
        """Analyze both channels of :attr:`audio_buffer`."""
        return ProcessorOutput(
            left=self.process(self.audio_buffer[:, 0]),
            right=self.process(self.audio_buffer[:, 1]),
        )
