"""Construction-time settings for the visualizer."""

from dataclasses import dataclass

from nyoom.core.windows import WINDOW_KINDS


@dataclass
class VisualizerConfig:
    """Window, playback and analysis parameters, validated on creation."""

    title: str = "Nyoom"
    width: int = 800
    height: int = 600
    max_framerate: float = 120.0

    # Analysis
    window_size: int = 8192   # ring buffer capacity and FFT half-size
    output_bins: int = 100    # magnitudes per channel handed to the renderer
    window: str = "hann"

    # Playback
    volume: float = 0.5

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"window dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.max_framerate <= 0:
            raise ValueError(f"max_framerate must be positive, got {self.max_framerate}")
        if self.window_size <= 0:
            raise ValueError(f"window_size must be positive, got {self.window_size}")
        if self.output_bins <= 0:
            raise ValueError(f"output_bins must be positive, got {self.output_bins}")
        if self.output_bins > self.window_size:
            raise ValueError(
                f"output_bins ({self.output_bins}) cannot exceed "
                f"window_size ({self.window_size})"
            )
        if self.window not in WINDOW_KINDS:
            raise ValueError(
                f"unknown window {self.window!r}; expected one of {', '.join(WINDOW_KINDS)}"
            )
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"volume must be within [0, 1], got {self.volume}")

    @property
    def divides_evenly(self) -> bool:
        """True when every raw magnitude lands in an output bin."""
        return self.window_size % self.output_bins == 0
