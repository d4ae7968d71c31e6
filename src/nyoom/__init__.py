"""Playback-synchronized audio spectrum visualizer."""

from nyoom.config import VisualizerConfig
from nyoom.core.analyzer import ProcessorOutput, SpectralAnalyzer
from nyoom.core.extractor import SampleExtractor
from nyoom.core.ring import OverwriteRingBuffer
from nyoom.pipeline import SpectrumPipeline

__version__ = "0.1.0"
__all__ = [
    "OverwriteRingBuffer",
    "ProcessorOutput",
    "SampleExtractor",
    "SpectralAnalyzer",
    "SpectrumPipeline",
    "VisualizerConfig",
]
