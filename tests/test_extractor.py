"""Tests for playback-synchronized sample extraction."""

import numpy as np
import pytest

from nyoom.core.extractor import SampleExtractor
from nyoom.io.source import ManualClock


def _extractor(samples, channels=1, sample_rate=10, buffer_size=4, clock=None):
    clock = clock or ManualClock()
    extractor = SampleExtractor(
        np.asarray(samples, dtype=np.int16),
        channels=channels,
        sample_rate=sample_rate,
        clock=clock,
        buffer_size=buffer_size,
    )
    return extractor, clock


def _output(capacity, fill=0):
    return np.full((capacity, 2), fill, dtype=np.int16)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"channels": 0},
            {"sample_rate": 0},
            {"buffer_size": 0},
        ],
    )
    def test_rejects_invalid_parameters(self, kwargs):
        params = {"channels": 2, "sample_rate": 44100, "buffer_size": 16}
        params.update(kwargs)
        with pytest.raises(ValueError):
            SampleExtractor(iter([]), clock=ManualClock(), **params)

    def test_initial_state(self):
        extractor, _ = _extractor(range(8))
        assert extractor.last_position == 0.0
        assert extractor.buffered == 0
        assert not extractor.exhausted


# ---------------------------------------------------------------------------
# Frame accounting
# ---------------------------------------------------------------------------

class TestFrameAccounting:
    def test_expected_frames_rounds_half_away_from_zero(self):
        extractor, _ = _extractor([], sample_rate=10)
        assert extractor.expected_frames(0.25) == 3
        assert extractor.expected_frames(0.24) == 2
        assert extractor.expected_frames(0.0) == 0

    def test_one_window_of_elapsed_time(self):
        extractor, _ = _extractor([], sample_rate=44100, buffer_size=1024)
        assert extractor.expected_frames(1024 / 44100) == 1024

    def test_no_time_elapsed_pulls_nothing(self):
        extractor, _ = _extractor(range(1, 9))
        out = _output(4, fill=7)
        assert extractor.get_samples(out) == 0
        assert np.all(out == 7)

    def test_partial_update_takes_expected_frames(self):
        extractor, clock = _extractor(range(1, 9))
        out = _output(4, fill=-1)

        clock.advance(0.2)
        pulled = extractor.get_samples(out)

        assert pulled == 2
        np.testing.assert_array_equal(out[:2], [[1, 1], [2, 2]])
        # Warm-up: rows not yet backed by data keep their previous contents
        assert np.all(out[2:] == -1)

    def test_falling_behind_skips_oldest_frames(self):
        extractor, clock = _extractor(range(20))
        out = _output(4)

        clock.advance(1.0)  # 10 frames due, only 4 fit
        pulled = extractor.get_samples(out)

        assert pulled == 4
        np.testing.assert_array_equal(out[:, 0], [6, 7, 8, 9])
        # The stream cursor moved past the skipped and taken frames
        clock.advance(0.1)
        extractor.get_samples(out)
        np.testing.assert_array_equal(out[:, 0], [7, 8, 9, 10])

    def test_successive_calls_stay_chronological(self):
        extractor, clock = _extractor(range(100), sample_rate=1, buffer_size=4)
        out = _output(4)
        for _ in range(5):
            clock.advance(3.0)
            extractor.get_samples(out)
        np.testing.assert_array_equal(out[:, 0], [11, 12, 13, 14])

    def test_output_fully_written_once_buffer_is_warm(self):
        extractor, clock = _extractor(range(1, 100), buffer_size=4)
        out = _output(4, fill=-5)
        clock.advance(0.4)
        extractor.get_samples(out)
        assert not np.any(out == -5)


# ---------------------------------------------------------------------------
# Clock behaviour
# ---------------------------------------------------------------------------

class TestClock:
    def test_clock_going_backwards_is_zero_elapsed(self):
        extractor, clock = _extractor(range(1, 50))
        out = _output(4)

        clock.advance(0.3)
        extractor.get_samples(out)
        snapshot = out.copy()

        clock.position = 0.1
        assert extractor.get_samples(out) == 0
        np.testing.assert_array_equal(out, snapshot)
        assert extractor.last_position == pytest.approx(0.3)

    def test_recovered_clock_is_not_double_counted(self):
        extractor, clock = _extractor(range(1, 50))
        out = _output(4)

        clock.position = 0.3
        extractor.get_samples(out)
        clock.position = -0.001  # stopped-mixer sentinel
        extractor.get_samples(out)
        clock.position = 0.4
        assert extractor.get_samples(out) == 1

    def test_clock_reset_waits_for_previous_maximum(self):
        extractor, clock = _extractor(range(1, 50))
        out = _output(4)

        clock.position = 0.5
        extractor.get_samples(out)

        # Playback restarted from the top
        for position in (0.0, 0.2, 0.5):
            clock.position = position
            assert extractor.get_samples(out) == 0
        assert extractor.last_position == pytest.approx(0.5)

        clock.position = 0.7
        assert extractor.get_samples(out) == 2


# ---------------------------------------------------------------------------
# Channel handling
# ---------------------------------------------------------------------------

class TestChannels:
    def test_mono_is_upmixed(self):
        extractor, clock = _extractor([3, -4, 5, -6], channels=1)
        out = _output(4)
        clock.advance(0.4)
        extractor.get_samples(out)
        np.testing.assert_array_equal(out[:, 0], out[:, 1])
        np.testing.assert_array_equal(out[:, 0], [3, -4, 5, -6])

    def test_stereo_pairs_interleaved_samples(self):
        extractor, clock = _extractor([1, -1, 2, -2, 3, -3], channels=2)
        out = _output(3)
        clock.advance(0.3)
        extractor.get_samples(out)
        np.testing.assert_array_equal(out, [[1, -1], [2, -2], [3, -3]])

    def test_extra_channels_are_dropped(self):
        extractor, clock = _extractor([1, 2, 3, 4, 5, 6], channels=3, buffer_size=2)
        out = _output(2)
        clock.advance(0.2)
        extractor.get_samples(out)
        np.testing.assert_array_equal(out, [[1, 2], [4, 5]])


# ---------------------------------------------------------------------------
# Stream exhaustion
# ---------------------------------------------------------------------------

class TestExhaustion:
    def test_short_stream_yields_fewer_frames(self):
        extractor, clock = _extractor([1, 2, 3])
        out = _output(4, fill=9)

        clock.advance(0.4)
        pulled = extractor.get_samples(out)

        assert pulled == 3
        assert extractor.exhausted
        np.testing.assert_array_equal(out[:3, 0], [1, 2, 3])
        assert np.all(out[3] == 9)

    def test_exhausted_stream_keeps_prior_data(self):
        extractor, clock = _extractor([1, 2, 3, 4])
        out = _output(4)
        clock.advance(0.4)
        extractor.get_samples(out)

        clock.advance(0.4)
        assert extractor.get_samples(out) == 0
        np.testing.assert_array_equal(out[:, 0], [1, 2, 3, 4])

    def test_trailing_partial_group_is_discarded(self):
        extractor, clock = _extractor([1, -1, 2, -2, 3], channels=2)
        out = _output(4)
        clock.advance(0.4)
        assert extractor.get_samples(out) == 2
        np.testing.assert_array_equal(out[:2], [[1, -1], [2, -2]])

    def test_skip_past_end_of_stream(self):
        extractor, clock = _extractor([1, 2, 3], buffer_size=2)
        out = _output(2, fill=4)
        clock.advance(1.0)
        assert extractor.get_samples(out) == 0
        assert np.all(out == 4)
