"""
Audio sources: decoded sample streams paired with a playback clock.

:class:`AudioSource` decodes a file with librosa and plays it through
``pygame.mixer``; the mixer's music position is the clock the extractor
follows.  :class:`SyntheticSource` produces a sine tone against the wall
clock so the viewer can run without a file or an audio device, and
:class:`ManualClock` lets tests and offline callers step time explicitly.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Iterator, Optional, Union

import librosa
import numpy as np

INT16_SCALE = 32767


def interleave(y: np.ndarray) -> np.ndarray:
    """
    Convert float audio in [-1, 1] to interleaved int16 samples.

    Args:
        y: ``(n,)`` mono or ``(channels, n)`` multi-channel signal, the
           layout ``librosa.load(..., mono=False)`` returns.

    Returns:
        Flat int16 array ``[c0[0], c1[0], ..., c0[1], c1[1], ...]``.
    """
    y = np.asarray(y, dtype=np.float32)
    if y.ndim == 1:
        y = y[np.newaxis, :]
    elif y.ndim != 2:
        raise ValueError(f"expected a 1-D or 2-D signal, got shape {y.shape}")

    scaled = np.clip(y, -1.0, 1.0) * INT16_SCALE
    return np.round(scaled).astype(np.int16).T.ravel()


class ManualClock:
    """Playback clock advanced by hand."""

    def __init__(self, position: float = 0.0):
        self.position = float(position)

    def advance(self, seconds: float) -> float:
        self.position += seconds
        return self.position

    def get_pos(self) -> float:
        return self.position


class AudioSource:
    """
    A decoded audio file together with its pygame playback.

    Build with :meth:`from_file`; the constructor takes already decoded
    samples so it can be used without a mixer (``clock`` then supplies the
    position).
    """

    def __init__(
        self,
        samples: np.ndarray,
        channels: int,
        sample_rate: int,
        clock: Optional[ManualClock] = None,
        path: Optional[Path] = None,
    ):
        self.channels = int(channels)
        self.sample_rate = int(sample_rate)
        self.path = path
        self.n_frames = len(samples) // max(1, self.channels)
        self._samples: Iterator[int] = iter(samples)
        self._clock = clock
        self._mixer = None

    @classmethod
    def from_file(cls, path: Union[str, Path], volume: float = 0.5) -> "AudioSource":
        """
        Decode ``path`` and queue it, paused, on the pygame mixer.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            RuntimeError: If decoding or audio output initialization fails.
            ImportError: If pygame is not installed.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        try:
            y, sr = librosa.load(path, sr=None, mono=False)
        except Exception as exc:
            raise RuntimeError(f"Could not decode {path}: {exc}") from exc

        channels = 1 if y.ndim == 1 else y.shape[0]
        source = cls(interleave(y), channels=channels, sample_rate=sr, path=path)
        source._open_mixer(volume)
        return source

    def _open_mixer(self, volume: float) -> None:
        try:
            import pygame
        except ModuleNotFoundError as exc:
            raise ImportError(
                "Audio playback requires pygame.\n"
                "Install it with:  pip install pygame"
            ) from exc

        try:
            pygame.mixer.init(frequency=self.sample_rate, channels=min(self.channels, 2))
            pygame.mixer.music.load(str(self.path))
        except pygame.error as exc:
            raise RuntimeError(f"Audio output initialization failed: {exc}") from exc

        pygame.mixer.music.set_volume(volume)
        # Start paused so the clock stays at zero until the window is up
        pygame.mixer.music.play()
        pygame.mixer.music.pause()
        self._mixer = pygame.mixer

    @property
    def samples(self) -> Iterator[int]:
        """Interleaved int16 samples, consumed forward by the extractor."""
        return self._samples

    @property
    def duration(self) -> float:
        return self.n_frames / self.sample_rate

    def play(self) -> None:
        if self._mixer is not None:
            self._mixer.music.unpause()

    def pause(self) -> None:
        if self._mixer is not None:
            self._mixer.music.pause()

    def set_volume(self, volume: float) -> None:
        if self._mixer is not None:
            self._mixer.music.set_volume(volume)

    def get_pos(self) -> float:
        """Elapsed playback in seconds (negative while the mixer is stopped)."""
        if self._mixer is not None:
            return self._mixer.music.get_pos() / 1000.0
        if self._clock is not None:
            return self._clock.get_pos()
        return 0.0


class SyntheticSource:
    """
    Sine tone of fixed ``duration`` played against the wall clock.

    Parameters
    ----------
    frequency:
        Tone frequency in Hz.
    sample_rate:
        Frames per second.
    channels:
        Interleaved channel count; every channel carries the same tone.
    duration:
        Stream length in seconds.
    amplitude:
        Peak level in [0, 1].
    """

    BLOCK_FRAMES = 4096

    def __init__(
        self,
        frequency: float = 440.0,
        sample_rate: int = 44100,
        channels: int = 2,
        duration: float = 60.0,
        amplitude: float = 0.5,
    ):
        if frequency <= 0:
            raise ValueError(f"frequency must be positive, got {frequency}")
        if channels < 1:
            raise ValueError(f"channels must be at least 1, got {channels}")

        self.frequency = float(frequency)
        self.sample_rate = int(sample_rate)
        self.channels = int(channels)
        self.duration = float(duration)
        self.amplitude = float(amplitude)

        self._samples = self._generate()
        self._started_at: Optional[float] = None
        self._played = 0.0

    def _generate(self) -> Iterator[int]:
        total = int(self.duration * self.sample_rate)
        for start in range(0, total, self.BLOCK_FRAMES):
            t = np.arange(start, min(start + self.BLOCK_FRAMES, total)) / self.sample_rate
            tone = self.amplitude * np.sin(2 * np.pi * self.frequency * t)
            block = np.tile(tone, (self.channels, 1))
            yield from interleave(block)

    @property
    def samples(self) -> Iterator[int]:
        return self._samples

    def play(self) -> None:
        if self._started_at is None:
            self._started_at = time.perf_counter()

    def pause(self) -> None:
        if self._started_at is not None:
            self._played += time.perf_counter() - self._started_at
            self._started_at = None

    def get_pos(self) -> float:
        if self._started_at is None:
            return self._played
        return self._played + time.perf_counter() - self._started_at
