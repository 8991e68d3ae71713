"""
Проигрывание лога шагов: разбор строк, обновление реестра и постановка эффектов.

Сессия владеет своим реестром и планировщиком; рендерер, журнал и настройки
передаются снаружи.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from hkviz import narration
from hkviz.config import PlaybackConfig
from hkviz.errors import RegistryError
from hkviz.logger import Logger
from hkviz.registry import GraphRegistry, Side
from hkviz.scheduler import NARRATION_SLOT, PHASE_SLOT, EffectKind, EffectRunner, Scheduler
from hkviz.steps import Edge, StepEvent, StepKind, iter_steps


class PlaybackState(Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    RUNNING = "running"
    FINISHED = "finished"


class PlaybackSession:
    """Одна сессия воспроизведения: от Initialize до итогового шага."""

    def __init__(
        self,
        config: Optional[PlaybackConfig] = None,
        logger: Optional[Logger] = None,
        registry: Optional[GraphRegistry] = None,
    ) -> None:
        self.config = config or PlaybackConfig()
        self.logger = logger or Logger(echo=False)
        self.registry = registry or GraphRegistry(strict_edge_order=self.config.strict_edge_order)
        self.scheduler = Scheduler(
            smoothness=self.config.smoothness,
            lowest_sprite_order=self.config.edge_z_order,
        )
        self.state = PlaybackState.IDLE
        self.phases: List[str] = []
        self.result: Optional[str] = None
        self.skipped_lines: List[Tuple[int, str]] = []
        self.dropped_effects = 0
        self.cancelled = False

        self._handlers = {
            StepKind.INITIALIZE: self._on_initialize,
            StepKind.ADD_EDGE: self._on_add_edge,
            StepKind.ADD_PATH: self._on_add_path,
            StepKind.UPDATE_MATCH: self._on_update_match,
            StepKind.DISREGARD_VERTICES: self._on_disregard,
            StepKind.BEGIN_PHASE: self._on_begin_phase,
            StepKind.MAXIMUM_MATCHING: self._on_maximum_matching,
        }

    @property
    def time(self) -> float:
        return self.scheduler.time

    # ------------------------- Вход -------------------------

    def play_lines(self, lines: Iterable[str]) -> Scheduler:
        """Разобрать все строки, поставить эффекты и завершить сессию."""
        for number, line, event, error in iter_steps(lines):
            if self.cancelled:
                self.logger.log(f"Воспроизведение отменено на строке {number}")
                break
            if error is not None:
                self.skipped_lines.append((number, line))
                self.logger.error(f"строка {number} пропущена: {error}")
                continue
            self.handle(event)
        self.finish()
        return self.scheduler

    def handle(self, event: StepEvent) -> None:
        if self.state is PlaybackState.FINISHED:
            self.logger.log(f"Сессия завершена, шаг проигнорирован: {event.raw}")
            return
        self._handlers[event.kind](event)

    def cancel(self) -> None:
        """Новые шаги не ставятся; уже поставленные эффекты остаются."""
        self.cancelled = True

    def finish(self) -> None:
        if self.state is PlaybackState.FINISHED:
            return
        if self.result is not None:
            final_text = f"{StepKind.MAXIMUM_MATCHING.value}{self.result}"
        else:
            final_text = narration.FINAL_MATCHING
        self.scheduler.advance(self.config.step_duration)
        self._narrate(final_text)
        self._set_state(PlaybackState.FINISHED)

    def runner(self, renderer) -> EffectRunner:
        return EffectRunner(self.scheduler, renderer, self.logger)

    # ------------------------- Обработчики шагов -------------------------

    def _on_initialize(self, event: StepEvent) -> None:
        if self.state is PlaybackState.IDLE:
            self._set_state(PlaybackState.INITIALIZING)

        cfg = self.config
        created = []
        for names, side, color in (
            (event.left, Side.LEFT, cfg.left_color),
            (event.right, Side.RIGHT, cfg.right_color),
        ):
            for name in names:
                try:
                    created.append(self.registry.add_vertex(name, side, color))
                except RegistryError as exc:
                    self._drop(exc)
        self.registry.layout()

        for vertex in created:
            self.scheduler.schedule(
                EffectKind.CREATE_NODE,
                vertex.node_id,
                side=vertex.side,
                color=vertex.color,
                text=vertex.name,
                positions=(vertex.position,),
            )
        self._narrate(narration.initialize_text(event.left, event.right))

        if self.state is PlaybackState.INITIALIZING:
            self._set_state(PlaybackState.RUNNING)

    def _on_add_edge(self, event: StepEvent) -> None:
        cfg = self.config
        for v1, v2 in event.edges:
            try:
                info = self.registry.add_edge(v1, v2, cfg.edge_color, cfg.edge_width, cfg.edge_z_order)
            except RegistryError as exc:
                self._drop(exc)
                continue
            self.scheduler.schedule(
                EffectKind.CREATE_EDGE,
                info.key,
                color=info.color,
                width=info.width,
                z_order=info.z_order,
                positions=tuple(end.position for end in info.ends),
            )
        self._narrate(narration.add_edge_text(event.edges))
        self.scheduler.add_settle_pause(cfg.settle_delay)

    def _on_add_path(self, event: StepEvent) -> None:
        cfg = self.config
        self.scheduler.advance(cfg.step_duration)
        for index, (v1, v2) in enumerate(event.edges):
            color = cfg.path_colors[index % 2]
            self._recolor(v1, v2, color, cfg.highlight_width, cfg.front_z_order)
        self._narrate(narration.add_path_text(event.edges))

    def _on_update_match(self, event: StepEvent) -> None:
        cfg = self.config
        self.scheduler.advance(cfg.step_duration)
        for v1, v2 in event.edges:
            self._recolor(v1, v2, cfg.match_color, cfg.highlight_width, cfg.front_z_order)
        self._narrate(narration.update_match_text(event.edges))

    def _on_disregard(self, event: StepEvent) -> None:
        cfg = self.config
        self.scheduler.advance(cfg.step_duration)
        for v1, v2 in event.edges:
            self._recolor(v1, v2, cfg.disregard_color, cfg.disregard_width, None)
        self._narrate(narration.disregard_text(event.edges))

    def _on_begin_phase(self, event: StepEvent) -> None:
        self.scheduler.advance(self.config.step_duration)
        text, label = narration.begin_phase_text(event.label)
        self.phases.append(event.label)
        self._narrate(text, label)

    def _on_maximum_matching(self, event: StepEvent) -> None:
        self.scheduler.advance(self.config.step_duration)
        text, label = narration.maximum_matching_text(event.label)
        self.result = event.label
        self._narrate(text, label)

    # ------------------------- Вспомогательные -------------------------

    def _recolor(self, v1: str, v2: str, color: str, width: float, z_order: Optional[int]) -> None:
        """Перекраска ребра и подсветка обоих концов. z_order=None — очередной самый нижний слой."""
        try:
            info = self.registry.lookup_edge(v1, v2)
        except RegistryError as exc:
            self._drop(exc)
            return

        if z_order is None:
            z_order = self.scheduler.next_sprite_order()
        self.scheduler.schedule(
            EffectKind.RECOLOR_EDGE,
            info.key,
            start_color=info.color,
            color=color,
            width=width,
            z_order=z_order,
            duration=self.config.edge_color_change_duration,
        )
        info.color, info.width, info.z_order = color, width, z_order

        for vertex in info.ends:
            self.scheduler.schedule(
                EffectKind.HIGHLIGHT_NODE,
                vertex.node_id,
                start_color=vertex.color,
                color=self.config.highlight_color,
                duration=self.config.node_highlight_duration,
            )

    def _narrate(self, text: str, label: Optional[str] = None) -> None:
        self.scheduler.schedule(EffectKind.SET_NARRATION_TEXT, NARRATION_SLOT, text=text)
        if label is not None:
            self.scheduler.schedule(EffectKind.SET_PHASE_TEXT, PHASE_SLOT, text=label)

    def _drop(self, exc: RegistryError) -> None:
        self.dropped_effects += 1
        self.logger.error(f"эффект пропущен: {exc}")

    def _set_state(self, state: PlaybackState) -> None:
        self.logger.log(f"Состояние: {self.state.value} -> {state.value} (t={self.time:g})")
        self.state = state

    # ------------------------- Итог -------------------------

    def matched_edges(self) -> List[Edge]:
        return [(e.source, e.target) for e in self.registry.edges() if e.color == self.config.match_color]

    def summary(self) -> Dict[str, object]:
        return {
            "state": self.state.value,
            "left": self.registry.count(Side.LEFT),
            "right": self.registry.count(Side.RIGHT),
            "edges": self.registry.edge_count(),
            "matched": len(self.matched_edges()),
            "phases": list(self.phases),
            "result": self.result,
            "skipped_lines": len(self.skipped_lines),
            "dropped_effects": self.dropped_effects,
            "clock": self.scheduler.time,
            "end_time": self.scheduler.end_time,
        }


def build_session(lines: Iterable[str], config: Optional[PlaybackConfig] = None,
                  logger: Optional[Logger] = None) -> PlaybackSession:
    session = PlaybackSession(config=config, logger=logger)
    session.play_lines(lines)
    return session
