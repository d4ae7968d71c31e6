"""
Per-frame pipeline: sample extraction followed by spectral analysis.

The driver (the pygame viewer, or a test) calls :meth:`SpectrumPipeline.step`
once per rendered frame.  Nothing here sleeps or schedules itself.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from nyoom.config import VisualizerConfig
from nyoom.core.analyzer import ProcessorOutput, SpectralAnalyzer
from nyoom.core.extractor import SampleExtractor


class SampleSource(Protocol):
    """Decoded audio plus the clock of whatever is playing it."""

    channels: int
    sample_rate: int

    @property
    def samples(self) -> Iterable[int]:
        ...

    def get_pos(self) -> float:
        ...


class SpectrumPipeline:
    """
    Wires a :class:`SampleExtractor` into a :class:`SpectralAnalyzer`.

    The extractor writes straight into the analyzer's channel buffer, so a
    step is one pull plus one transform per channel with no intermediate
    copies.
    """

    def __init__(
        self,
        source: SampleSource,
        window_size: int = 8192,
        output_bins: int = 100,
        window: str = "hann",
    ):
        self.source = source
        self.analyzer = SpectralAnalyzer(window_size, output_bins, window=window)
        self.extractor = SampleExtractor(
            source.samples,
            channels=source.channels,
            sample_rate=source.sample_rate,
            clock=source,
            buffer_size=window_size,
        )
        self.frame_index = 0

    @classmethod
    def from_config(cls, source: SampleSource, config: VisualizerConfig) -> "SpectrumPipeline":
        return cls(
            source,
            window_size=config.window_size,
            output_bins=config.output_bins,
            window=config.window,
        )

    @property
    def output_bins(self) -> int:
        return self.analyzer.output_bins

    def step(self) -> ProcessorOutput:
        """Pull the newest samples and return both channels' spectra."""
        self.extractor.get_samples(self.analyzer.audio_buffer)
        self.frame_index += 1
        return self.analyzer.process_samples()
