"""
Playback-synchronized sample extraction.

Every rendered frame the extractor reads the playback clock, works out how
many sample-frames the audio device has played since the previous poll, and
pulls that many frames from the decoded stream into an overwrite ring buffer.
The renderer then gets a chronologically ordered snapshot of the most recent
frames.

Timing model
------------
::

    clock.get_pos()  ──►  elapsed = pos - last_pos  (never negative)
                               │
                               ▼
                 expected = round(elapsed * sample_rate)
                               │
            expected > capacity?  ──yes──►  skip (expected - capacity),
                               │            take capacity
                               no
                               ▼
                         take expected

Falling behind is resolved by discarding stream data rather than buffering
without bound, so the visual may desync from playback but per-frame work stays
capped by the output size.
"""

from __future__ import annotations

from itertools import islice
from typing import Iterable, Iterator, Protocol

import numpy as np

from nyoom.core.ring import OverwriteRingBuffer


class PlaybackClock(Protocol):
    """Anything that reports elapsed playback time in seconds."""

    def get_pos(self) -> float:
        ...


def _consume(iterator: Iterator, n: int) -> None:
    """Advance ``iterator`` by up to ``n`` items."""
    if n > 0:
        next(islice(iterator, n, n), None)


class SampleExtractor:
    """
    Pulls interleaved samples from a decoded stream in step with playback.

    Parameters
    ----------
    stream:
        Finite iterable of interleaved integer samples (one per channel per
        frame).  Consumed strictly forward; never rewound.
    channels:
        Number of interleaved channels in ``stream``.  Channel 0 becomes the
        left value, channel 1 the right; further channels are discarded.  A
        mono stream is upmixed (right == left).
    sample_rate:
        Frames per second of ``stream``.
    clock:
        Playback clock, read once per :meth:`get_samples` call.
    buffer_size:
        Capacity of the internal ring buffer, normally the analysis window.

    The clock is only followed forwards.  A reading below the furthest
    position seen so far counts as no elapsed time, so after a genuine reset
    (playback restarted from the top) nothing new is pulled until the clock
    passes its previous maximum.
    """

    def __init__(
        self,
        stream: Iterable[int],
        channels: int,
        sample_rate: int,
        clock: PlaybackClock,
        buffer_size: int,
    ):
        if channels < 1:
            raise ValueError(f"channels must be at least 1, got {channels}")
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")

        self._stream: Iterator[int] = iter(stream)
        self.channels = int(channels)
        self.sample_rate = int(sample_rate)
        self.clock = clock
        self.buffer_size = int(buffer_size)

        self._buffer = OverwriteRingBuffer(self.buffer_size, width=2, dtype=np.int16)
        self._last_position = 0.0
        self._exhausted = False

    @property
    def last_position(self) -> float:
        """Playback position (seconds) observed at the previous poll."""
        return self._last_position

    @property
    def exhausted(self) -> bool:
        """True once a pull came back short because the stream ran out."""
        return self._exhausted

    @property
    def buffered(self) -> int:
        """Number of frames currently held in the ring buffer."""
        return len(self._buffer)

    def expected_frames(self, elapsed: float) -> int:
        """Frames played during ``elapsed`` seconds, rounded half away from zero."""
        if elapsed <= 0.0:
            return 0
        return int(elapsed * self.sample_rate + 0.5)

    def _elapsed(self) -> float:
        position = float(self.clock.get_pos())
        elapsed = position - self._last_position
        if elapsed <= 0.0:
            return 0.0
        self._last_position = position
        return elapsed

    def _pull_frames(self, skip: int, take: int) -> np.ndarray:
        """
        Discard ``skip`` frames, then read up to ``take`` frames as stereo rows.

        Returns an ``(n, 2)`` int16 array with ``n <= take``.
        """
        _consume(self._stream, skip * self.channels)

        wanted = take * self.channels
        raw = np.fromiter(islice(self._stream, wanted), dtype=np.int16)
        if len(raw) < wanted:
            self._exhausted = True

        # A short trailing group at end-of-stream is dropped
        n = len(raw) // self.channels
        grouped = raw[:n * self.channels].reshape(n, self.channels)

        frames = np.empty((n, 2), dtype=np.int16)
        frames[:, 0] = grouped[:, 0]
        frames[:, 1] = grouped[:, 1] if self.channels > 1 else grouped[:, 0]
        return frames

    def get_samples(self, output: np.ndarray) -> int:
        """
        Refresh ``output`` with the most recent stereo frames.

        Args:
            output: ``(capacity, 2)`` int16 array, overwritten in place.  Rows
                    beyond what the ring buffer holds (during warm-up) keep
                    their previous contents.

        Returns:
            Number of new frames read from the stream during this call.
        """
        capacity = len(output)
        expected = self.expected_frames(self._elapsed())

        if expected > capacity:
            skip, take = expected - capacity, capacity
        else:
            skip, take = 0, expected

        if take > 0 and not self._exhausted:
            frames = self._pull_frames(skip, take)
            self._buffer.push_overwrite(frames)
            pulled = len(frames)
        else:
            pulled = 0

        self._buffer.peek_into(output)
        return pulled
