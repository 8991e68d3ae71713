"""
Планировщик анимации.

Часы воспроизведения (time) только растут: их двигают «тяжёлые» шаги на step_duration.
Каждый эффект получает отметку времени в момент постановки в очередь; эффекты одного
шага делят одну отметку. Пауза после Add_edge (start_delay) копится отдельно и сдвигает
момент, когда следующие эффекты становятся видны, не трогая их отметки.

EffectRunner исполняет эффекты одной кучей задач, упорядоченной по абсолютному
виртуальному времени. Каждая выборка интерполяции цвета — отдельная задача.
"""

from __future__ import annotations

import heapq
import itertools
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Optional, Tuple

from matplotlib.colors import to_rgb

from hkviz.errors import RegistryError
from hkviz.logger import Logger
from hkviz.registry import Position, Side

RGB = Tuple[float, float, float]
Frame = Tuple[float, RGB]


class EffectKind(Enum):
    CREATE_NODE = "create_node"
    CREATE_EDGE = "create_edge"
    RECOLOR_EDGE = "recolor_edge"
    HIGHLIGHT_NODE = "highlight_node"
    SET_NARRATION_TEXT = "set_narration_text"
    SET_PHASE_TEXT = "set_phase_text"


NARRATION_SLOT = "narration"
PHASE_SLOT = "phase"


@dataclass(frozen=True)
class TimedEffect:
    """
    Запланированное визуальное изменение.
    target — имя вершины, ключ ребра или слот текста; остальные поля зависят от kind.
    """

    scheduled_time: float
    kind: EffectKind
    target: str
    seq: int = 0
    start_delay: float = 0.0
    color: str = ""
    start_color: str = ""
    width: float = 0.0
    z_order: int = 0
    duration: float = 0.0
    text: str = ""
    side: Optional[Side] = None
    positions: Tuple[Position, ...] = ()

    @property
    def due_time(self) -> float:
        """Момент, когда эффект становится виден (с учётом пауз после Add_edge)."""
        return self.scheduled_time + self.start_delay

    def describe(self) -> str:
        details = self.text or self.color
        return (
            f"t={self.scheduled_time:7.2f} (+{self.start_delay:g})  "
            f"{self.kind.value:<18} {self.target} {details}"
        ).rstrip()


# ------------------------- Интерполяция цвета -------------------------

def lerp_color(start: str, end: str, t: float) -> RGB:
    """Линейная интерполяция между двумя цветами matplotlib; t обрезается до [0, 1]."""
    a = to_rgb(start)
    b = to_rgb(end)
    if t >= 1.0:
        return b
    if t <= 0.0:
        return a
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t, a[2] + (b[2] - a[2]) * t)


def sample_offsets(duration: float, step: float) -> List[float]:
    """Смещения выборок: step, 2*step, ... пока меньше duration, последняя — ровно duration."""
    if duration <= 0:
        return [0.0]
    count = int(math.ceil(duration / step - 1e-9))
    offsets = [round(k * step, 9) for k in range(1, count)]
    offsets.append(duration)
    return offsets


def color_frames(start: str, end: str, duration: float, step: float) -> List[Frame]:
    if duration <= 0:
        return [(0.0, to_rgb(end))]
    return [(off, lerp_color(start, end, off / duration)) for off in sample_offsets(duration, step)]


def highlight_frames(base: str, peak: str, half: float, step: float) -> List[Frame]:
    """К пиковому цвету за half, затем обратно к исходному за то же время."""
    there = color_frames(base, peak, half, step)
    back = color_frames(peak, base, half, step)
    return there + [(half + off, rgb) for off, rgb in back]


# ------------------------- Планировщик -------------------------

class Scheduler:
    """Часы воспроизведения, очередь эффектов и состояние, нужное для их построения."""

    def __init__(self, smoothness: float = 0.02, lowest_sprite_order: int = -2) -> None:
        self.smoothness = smoothness
        self.time: float = 0.0
        self.start_delay: float = 0.0
        # Уменьшается на 1 для каждого отброшенного ребра, за всю сессию не сбрасывается
        self.lowest_sprite_order = lowest_sprite_order
        self._effects: List[TimedEffect] = []
        self._seq = itertools.count()

    def advance(self, duration: float) -> float:
        if duration < 0:
            raise ValueError("Часы воспроизведения не могут идти назад")
        self.time += duration
        return self.time

    def add_settle_pause(self, delay: float) -> None:
        if delay < 0:
            raise ValueError("Пауза не может быть отрицательной")
        self.start_delay += delay

    def next_sprite_order(self) -> int:
        self.lowest_sprite_order -= 1
        return self.lowest_sprite_order

    def schedule(self, kind: EffectKind, target: str, **payload) -> TimedEffect:
        effect = TimedEffect(
            scheduled_time=self.time,
            kind=kind,
            target=target,
            seq=next(self._seq),
            start_delay=self.start_delay,
            **payload,
        )
        self._effects.append(effect)
        return effect

    def effects(self) -> Iterator[TimedEffect]:
        """Ленивый проход по эффектам в порядке постановки (он же порядок по времени)."""
        index = 0
        while index < len(self._effects):
            yield self._effects[index]
            index += 1

    def __len__(self) -> int:
        return len(self._effects)

    def __getitem__(self, index: int) -> TimedEffect:
        return self._effects[index]

    @property
    def end_time(self) -> float:
        """Момент, когда последний эффект отыграет целиком."""
        if not self._effects:
            return 0.0
        return max(e.due_time + e.duration for e in self._effects)


class EffectRunner:
    """
    Применяет эффекты к рендереру по виртуальному времени.
    advance_to(t) выполняет все задачи со временем <= t; задачи с одинаковым временем
    независимы. Отмена проверяется только на границе запуска эффекта, начатая
    интерполяция доигрывается.
    """

    def __init__(self, scheduler: Scheduler, renderer, logger: Optional[Logger] = None) -> None:
        self.scheduler = scheduler
        self.renderer = renderer
        self.logger = logger or Logger(echo=False)
        self.now: float = 0.0
        self.dispatched = 0
        self.dropped = 0
        self.cancelled = False
        self._heap: List[Tuple[float, int, Callable[[], None]]] = []
        self._order = itertools.count()
        self._cursor = 0
        self._next: Optional[TimedEffect] = None

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def done(self) -> bool:
        self._pull()
        return not self._heap and (self._next is None or self.cancelled)

    def _push(self, when: float, action: Callable[[], None]) -> None:
        heapq.heappush(self._heap, (when, next(self._order), action))

    def _pull(self) -> None:
        # Эффекты, поставленные в очередь уже после создания раннера, тоже подхватываются
        if self._next is None and self._cursor < len(self.scheduler):
            self._next = self.scheduler[self._cursor]
            self._cursor += 1

    def _peek_time(self) -> Optional[float]:
        self._pull()
        candidates = []
        if self._heap:
            candidates.append(self._heap[0][0])
        if self._next is not None and not self.cancelled:
            candidates.append(self._next.due_time)
        return min(candidates) if candidates else None

    def advance_to(self, until: float, sleep: Optional[Callable[[float], None]] = None, speed: float = 1.0) -> int:
        """Выполнить всё, что должно случиться до момента until. Возвращает число задач."""
        executed = 0
        while True:
            when = self._peek_time()
            if when is None or when > until:
                break
            if sleep is not None and when > self.now:
                sleep((when - self.now) / speed)
            self.now = max(self.now, when)

            if self._next is not None and not self.cancelled and self._next.due_time == when and (
                not self._heap or self._heap[0][0] >= when
            ):
                effect = self._next
                self._next = None
                self._start(effect)
            else:
                _, _, action = heapq.heappop(self._heap)
                self._run_action(action)
            executed += 1
        if until != math.inf:
            self.now = max(self.now, until)
        return executed

    def run(self, sleep: Optional[Callable[[float], None]] = None, speed: float = 1.0) -> int:
        return self.advance_to(math.inf, sleep=sleep, speed=speed)

    def _run_action(self, action: Callable[[], None]) -> None:
        try:
            action()
        except RegistryError as exc:
            self.dropped += 1
            self.logger.error(f"эффект пропущен: {exc}")

    def _start(self, effect: TimedEffect) -> None:
        self.dispatched += 1
        self._run_action(lambda: self._apply(effect))

    def _apply(self, effect: TimedEffect) -> None:
        r = self.renderer
        kind = effect.kind
        if kind is EffectKind.CREATE_NODE:
            r.create_node(effect.target, effect.side, effect.color, effect.text, effect.positions[0])
        elif kind is EffectKind.CREATE_EDGE:
            r.create_edge(effect.target, effect.positions[0], effect.positions[1])
            r.set_edge_style(effect.target, to_rgb(effect.color), effect.width, effect.z_order)
        elif kind is EffectKind.RECOLOR_EDGE:
            r.find_edge(effect.target)
            r.set_edge_style(effect.target, to_rgb(effect.start_color), effect.width, effect.z_order)
            frames = color_frames(effect.start_color, effect.color, effect.duration, self.scheduler.smoothness)
            for offset, rgb in frames:
                self._push(
                    effect.due_time + offset,
                    lambda rgb=rgb: r.set_edge_style(effect.target, rgb, effect.width, effect.z_order),
                )
        elif kind is EffectKind.HIGHLIGHT_NODE:
            r.find_node(effect.target)
            frames = highlight_frames(
                effect.start_color, effect.color, effect.duration / 2.0, self.scheduler.smoothness
            )
            for offset, rgb in frames:
                self._push(effect.due_time + offset, lambda rgb=rgb: r.set_node_color(effect.target, rgb))
        elif kind is EffectKind.SET_NARRATION_TEXT:
            r.set_text(NARRATION_SLOT, effect.text)
        elif kind is EffectKind.SET_PHASE_TEXT:
            r.set_text(PHASE_SLOT, effect.text)
