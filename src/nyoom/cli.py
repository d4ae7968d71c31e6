"""
Command line entry point for the spectrum viewer.

Usage:
    nyoom music.mp3
    nyoom music.mp3 --window-size 4096 --bins 64 --fps 60
    nyoom --tone 440
"""

import argparse
import sys
from pathlib import Path

from nyoom.config import VisualizerConfig
from nyoom.core.windows import WINDOW_KINDS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show the live frequency spectrum of an audio file while it plays"
    )

    parser.add_argument(
        "audio",
        type=Path,
        nargs="?",
        default=None,
        help="Input audio file (wav, mp3, flac)",
    )

    parser.add_argument(
        "--tone",
        type=float,
        default=None,
        help="Visualize a synthetic sine tone at this frequency (Hz) instead of a file",
    )

    parser.add_argument(
        "-w", "--window-size",
        type=int,
        default=8192,
        help="Samples per analysis window (default: 8192)",
    )

    parser.add_argument(
        "-b", "--bins",
        type=int,
        default=100,
        help="Output bins per channel (default: 100)",
    )

    parser.add_argument(
        "--window",
        choices=WINDOW_KINDS,
        default="hann",
        help="Window function (default: hann)",
    )

    parser.add_argument(
        "-f", "--fps",
        type=float,
        default=120.0,
        help="Maximum frames per second (default: 120)",
    )

    parser.add_argument(
        "--width",
        type=int,
        default=800,
        help="Window width (default: 800)",
    )

    parser.add_argument(
        "--height",
        type=int,
        default=600,
        help="Window height (default: 600)",
    )

    parser.add_argument(
        "--volume",
        type=float,
        default=0.5,
        help="Playback volume 0-1 (default: 0.5)",
    )

    parser.add_argument(
        "--show-fps",
        action="store_true",
        help="Print the measured frame rate every 30 frames",
    )

    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.audio is None and args.tone is None:
        parser.error("either an audio file or --tone is required")

    try:
        config = VisualizerConfig(
            width=args.width,
            height=args.height,
            max_framerate=args.fps,
            window_size=args.window_size,
            output_bins=args.bins,
            window=args.window,
            volume=args.volume,
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if not config.divides_evenly:
        print(
            f"Note: {config.window_size} samples do not split evenly into "
            f"{config.output_bins} bins; the top "
            f"{config.window_size % config.output_bins} magnitudes are left out.",
            file=sys.stderr,
        )

    from nyoom.io.source import AudioSource, SyntheticSource
    from nyoom.pipeline import SpectrumPipeline
    from nyoom.viewer import run_viewer

    if args.audio is not None:
        if not args.audio.exists():
            print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
            return 1
        print(f"Decoding {args.audio}...", flush=True)
        try:
            source = AudioSource.from_file(args.audio, volume=config.volume)
        except (RuntimeError, ImportError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        print(
            f"{source.channels} channel(s) @ {source.sample_rate} Hz, "
            f"{source.duration:.2f}s",
            flush=True,
        )
    else:
        source = SyntheticSource(frequency=args.tone)

    pipeline = SpectrumPipeline.from_config(source, config)
    run_viewer(pipeline, source, config, show_fps=args.show_fps)
    return 0


if __name__ == "__main__":
    sys.exit(main())
