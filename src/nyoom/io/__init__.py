"""Decoded audio sources and playback clocks."""

from nyoom.io.source import AudioSource, ManualClock, SyntheticSource, interleave

__all__ = ["AudioSource", "ManualClock", "SyntheticSource", "interleave"]
