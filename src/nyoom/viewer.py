"""
Real-time spectrum window.

Opens a pygame window and, once per frame, steps the pipeline and draws the
left and right spectra as line strips.  Frame pacing is done here with
``pygame.time.Clock.tick``; the pipeline itself never waits.

Keyboard controls:
    ESC / Q      quit
    SPACE        pause / resume playback
"""

from __future__ import annotations

import math
from typing import Any, List, Tuple

import numpy as np

from nyoom.config import VisualizerConfig
from nyoom.pipeline import SpectrumPipeline

LEFT_COLOR = (255, 255, 255)
RIGHT_COLOR = (255, 0, 0)
BACKGROUND = (0, 0, 0)
FPS_REPORT_INTERVAL = 30

_LOG2_20 = math.log2(20.0)


def spectrum_points(
    magnitudes: np.ndarray,
    width: int,
    height: int,
) -> List[Tuple[float, float]]:
    """
    Map bin magnitudes to pixel coordinates for a line strip.

    Heights are log-scaled, ``log2(a / sqrt(n)) / log2(20) / 10`` in
    normalized device units, with ``n`` the number of bins.  Bins run left to
    right across the full width; silent bins sit on the bottom edge.
    """
    magnitudes = np.asarray(magnitudes, dtype=np.float64)
    n = len(magnitudes)
    if n == 0:
        return []

    scaled = magnitudes / math.sqrt(n)
    with np.errstate(divide="ignore"):
        ndc_y = np.where(scaled > 0, np.log2(scaled) / _LOG2_20 / 10.0, -1.0)
    ndc_y = np.clip(ndc_y, -1.0, 1.0)

    xs = np.arange(n) * (width - 1) / max(1, n - 1)
    ys = (1.0 - ndc_y) * 0.5 * (height - 1)
    return list(zip(xs.tolist(), ys.tolist()))


def run_viewer(
    pipeline: SpectrumPipeline,
    source: Any,
    config: VisualizerConfig,
    show_fps: bool = False,
) -> None:
    """
    Drive ``pipeline`` once per frame until the window is closed.

    Args:
        pipeline: Pipeline to step each frame.
        source: Playback handle with ``play()`` and ``pause()``.
        config: Window title, size and frame-rate cap.
        show_fps: Print the measured frame rate every 30 frames.
    """
    try:
        import pygame
    except ImportError:
        print(
            "The spectrum viewer requires pygame.\n"
            "Install it with:  pip install pygame"
        )
        return

    pygame.init()
    screen = pygame.display.set_mode((config.width, config.height))
    pygame.display.set_caption(config.title)
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 20)

    source.play()
    paused = False
    counter = 0

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_ESCAPE, pygame.K_q):
                    running = False
                elif event.key == pygame.K_SPACE:
                    paused = not paused
                    if paused:
                        source.pause()
                    else:
                        source.play()

        if not running:
            break

        output = pipeline.step()

        screen.fill(BACKGROUND)
        for values, color in ((output.left, LEFT_COLOR), (output.right, RIGHT_COLOR)):
            points = spectrum_points(values, config.width, config.height)
            if len(points) > 1:
                pygame.draw.lines(screen, color, False, points)

        left_level, right_level = output.levels()
        label = font.render(
            f"L {left_level:10.1f}  R {right_level:10.1f}" + ("  [PAUSED]" if paused else ""),
            True,
            (200, 200, 200),
        )
        screen.blit(label, (8, 8))
        pygame.display.flip()

        clock.tick(int(round(config.max_framerate)))

        counter += 1
        if show_fps and counter >= FPS_REPORT_INTERVAL:
            print(f"{clock.get_fps():.1f} fps", flush=True)
            counter = 0

    source.pause()
    pygame.quit()
