"""
Окно matplotlib для пошагового проигрывания лога Хопкрофта–Карпа.
Лог читается из файла (или берётся встроенный, --demo), расписание эффектов
проигрывается в реальном времени: одна единица времени = 1 / speed секунды.
"""

from __future__ import annotations

import argparse
import sys

import matplotlib.pyplot as plt

from hkviz.config import PlaybackConfig
from hkviz.console import read_input
from hkviz.logger import Logger
from hkviz.playback import PlaybackSession
from hkviz.renderer import MatplotlibRenderer


def play(session: PlaybackSession, speed: float = 1.0, fps: float = 30.0) -> None:
    renderer = MatplotlibRenderer()
    runner = session.runner(renderer)
    plt.ion()
    plt.show()

    step = 1.0 / fps
    t = 0.0
    while plt.fignum_exists(renderer.fig.number):
        runner.advance_to(t)
        renderer.draw(t)
        plt.pause(step / speed)
        if runner.done:
            break
        t += step

    plt.ioff()
    if plt.fignum_exists(renderer.fig.number):
        plt.show()


def main() -> None:
    parser = argparse.ArgumentParser(description="Визуализация лога шагов Хопкрофта–Карпа")
    parser.add_argument("input", nargs="?", help="путь к файлу с логом шагов")
    parser.add_argument("--demo", help="встроенный лог вместо файла")
    parser.add_argument("--speed", type=float, default=1.0, help="множитель скорости проигрывания")
    parser.add_argument("--step-duration", type=float, default=PlaybackConfig.step_duration)
    args = parser.parse_args()

    logger = Logger()
    try:
        lines = read_input(args.input, args.demo, logger)
        config = PlaybackConfig(step_duration=args.step_duration)
        if args.speed <= 0:
            raise ValueError("Скорость должна быть положительной")
    except (OSError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)

    session = PlaybackSession(config=config, logger=logger)
    session.play_lines(lines)
    play(session, speed=args.speed)


if __name__ == "__main__":
    main()
