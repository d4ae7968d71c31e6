"""Core sample extraction and spectral analysis modules."""

from nyoom.core.analyzer import ProcessorOutput, SpectralAnalyzer
from nyoom.core.extractor import PlaybackClock, SampleExtractor
from nyoom.core.ring import OverwriteRingBuffer

__all__ = [
    "OverwriteRingBuffer",
    "PlaybackClock",
    "ProcessorOutput",
    "SampleExtractor",
    "SpectralAnalyzer",
]
