"""Shared fixtures for the nyoom test suite."""

import numpy as np
import pytest

from nyoom.io.source import AudioSource, ManualClock, interleave

TEST_SR = 44100


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def silent_stereo(clock):
    """Ten seconds of stereo silence on a hand-stepped clock."""
    samples = np.zeros(TEST_SR * 10 * 2, dtype=np.int16)
    return AudioSource(samples, channels=2, sample_rate=TEST_SR, clock=clock)


def bin_aligned_sine(window_size: int, fft_bin: int, n_frames: int, amplitude: float = 0.5):
    """A sine sitting exactly on ``fft_bin`` of a ``2 * window_size`` FFT."""
    t = np.arange(n_frames)
    return amplitude * np.sin(2 * np.pi * fft_bin * t / (2 * window_size))


@pytest.fixture
def sine_stereo(clock):
    """Stereo tone on FFT bin 352 of a 1024-sample window (output bin 5 of 16)."""
    y = bin_aligned_sine(1024, 352, TEST_SR)
    samples = interleave(np.vstack([y, y]))
    return AudioSource(samples, channels=2, sample_rate=TEST_SR, clock=clock)


@pytest.fixture
def make_sine():
    return bin_aligned_sine


@pytest.fixture
def headless_pygame(monkeypatch):
    """pygame on SDL's dummy video and audio drivers, shut down afterwards."""
    pygame = pytest.importorskip("pygame")
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    yield pygame
    pygame.mixer.quit()
    pygame.quit()
