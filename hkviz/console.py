# console.py
"""
Консольный проигрыватель лога шагов Хопкрофта–Карпа.
Формат входного файла: по одному шагу на строку, например
  Initialize: (1,2,3 4,5,6)
  Add_edge: (1,4) (1,5) (2,4)
  Begin_Phase1
  Add_path: (1,4)
  Update_match: (1,4)
  Disregard_vertices: (2,4)
  Maximum matching: 1
Пустые строки игнорируются; нераспознанные строки пропускаются с записью в лог.

Программа:
- разбирает шаги и строит расписание эффектов,
- печатает расписание и проигрывает его на сцене в памяти
  (или сохраняет кадры matplotlib в каталог, если задан --frames),
- по окончании пишет ВСЕ сообщения в файл (по умолчанию playback_steps.log).
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from hkviz.config import PlaybackConfig
from hkviz.logger import Logger
from hkviz.playback import PlaybackSession
from hkviz.renderer import MatplotlibRenderer, SceneRenderer
from hkviz.samples import demo_lines, make_demo_expectations, make_demo_logs
from hkviz.scheduler import NARRATION_SLOT, EffectRunner
from hkviz.steps import load_steps


def read_input(path: Optional[str], demo: Optional[str], logger: Logger) -> List[str]:
    if demo:
        if demo not in make_demo_logs():
            raise ValueError(f"Нет встроенного лога «{demo}». Есть: {', '.join(sorted(make_demo_logs()))}")
        logger.log(f"Встроенный лог: {demo}")
        return demo_lines(demo)
    if not path:
        raise ValueError("Не указан файл с логом шагов (или --demo)")
    logger.log(f"Чтение файла: {path}")
    lines = load_steps(path)
    if not lines:
        raise ValueError("Файл пуст")
    logger.log(f"Загружено шагов: {len(lines)}")
    return lines


def dump_frames(runner: EffectRunner, renderer, directory: str, fps: float) -> int:
    """Проиграть расписание, сохраняя кадр каждые 1/fps единиц времени."""
    os.makedirs(directory, exist_ok=True)
    step = 1.0 / fps
    frame = 0
    t = 0.0
    while True:
        runner.advance_to(t)
        renderer.save_frame(os.path.join(directory, f"frame_{frame:05d}.png"), t)
        frame += 1
        if runner.done:
            break
        t = frame * step
    renderer.close()
    return frame


def report(session: PlaybackSession, logger: Logger) -> None:
    s = session.summary()
    logger.log("ИТОГ:")
    logger.log(f"  Вершин: левых {s['left']}, правых {s['right']}; рёбер: {s['edges']}")
    logger.log(f"  Рёбер в паросочетании: {s['matched']}")
    logger.log(f"  Фаз: {len(s['phases'])}")
    if s["result"] is not None:
        logger.log(f"  Итог из лога: Maximum matching:{s['result']}")
    logger.log(f"  Пропущено строк: {s['skipped_lines']}, потеряно эффектов: {s['dropped_effects']}")
    logger.log(f"  Часы: {s['clock']:g}, последний эффект заканчивается в {s['end_time']:g}")
    for v1, v2 in session.matched_edges():
        logger.log(f"    {v1} - {v2}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Проигрыватель лога шагов Хопкрофта–Карпа: расписание эффектов + лог в файл."
    )
    parser.add_argument("input", nargs="?", help="путь к файлу с логом шагов")
    parser.add_argument("--demo", help="вместо файла взять встроенный лог (например, «1) perfect_6»)")
    parser.add_argument(
        "-o",
        "--output",
        default="playback_steps.log",
        help="файл для записи всех сообщений (по умолчанию playback_steps.log)",
    )
    parser.add_argument("--step-duration", type=float, default=PlaybackConfig.step_duration)
    parser.add_argument("--settle-delay", type=float, default=PlaybackConfig.settle_delay)
    parser.add_argument("--lenient-edges", action="store_true",
                        help="искать ребро в обоих порядках вершин")
    parser.add_argument("--frames", help="каталог для кадров matplotlib")
    parser.add_argument("--fps", type=float, default=10.0)
    parser.add_argument("-q", "--quiet", action="store_true", help="не дублировать лог в stdout")
    args = parser.parse_args(argv)

    logger = Logger(echo=not args.quiet)
    try:
        lines = read_input(args.input, args.demo, logger)
        config = PlaybackConfig(
            step_duration=args.step_duration,
            settle_delay=args.settle_delay,
            strict_edge_order=not args.lenient_edges,
        )
        if args.fps <= 0:
            raise ValueError("fps должен быть положительным")
    except (OSError, ValueError) as e:
        logger.log(f"\nОШИБКА: {e}")
        logger.dump_to_file(args.output)
        return 1

    session = PlaybackSession(config=config, logger=logger)
    scheduler = session.play_lines(lines)

    logger.log("\n=== Расписание эффектов ===")
    for effect in scheduler.effects():
        logger.log("  " + effect.describe())

    if args.frames:
        renderer = MatplotlibRenderer()
        count = dump_frames(session.runner(renderer), renderer, args.frames, args.fps)
        logger.log(f"\nСохранено кадров: {count} в {args.frames}")
    else:
        renderer = SceneRenderer()
        runner = session.runner(renderer)
        runner.run()
        logger.log(f"\nПрименено эффектов: {runner.dispatched}, пропущено при отрисовке: {runner.dropped}")
        logger.log(f"Пояснение на экране: {renderer.texts[NARRATION_SLOT]}")

    if args.demo and args.demo in make_demo_expectations():
        exp = make_demo_expectations()[args.demo]
        logger.log(f"[Ожидаемо] рёбер: {exp['edges']}, в паросочетании: {exp['matched']}")
    report(session, logger)

    logger.dump_to_file(args.output)
    logger.log(f"\nПолный лог сохранён в файл: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
