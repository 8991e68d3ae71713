"""
Параметры воспроизведения: длительности шагов, ширины и цвета рёбер.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PlaybackConfig:
    # Время (в условных единицах) на один «тяжёлый» шаг алгоритма
    step_duration: float = 2.0
    # Пауза после Add_edge, добавляемая к задержке старта всех следующих эффектов
    settle_delay: float = 5.0
    node_highlight_duration: float = 1.0
    edge_color_change_duration: float = 0.5
    smoothness: float = 0.02

    # Цвета вершин (как в исходном спавнере: левые красные, правые синие)
    left_color: str = "red"
    right_color: str = "blue"
    highlight_color: str = "white"

    # Рёбра
    edge_color: str = "lightgray"
    edge_width: float = 0.05
    edge_z_order: int = -2
    path_colors: tuple = ("green", "white")
    match_color: str = "yellow"
    disregard_color: str = "grey"
    highlight_width: float = 0.08
    disregard_width: float = 0.05
    front_z_order: int = -1

    # Поиск ребра только в том порядке вершин, в котором оно создано
    strict_edge_order: bool = True

    def __post_init__(self) -> None:
        durations = (self.step_duration, self.settle_delay, self.node_highlight_duration,
                     self.edge_color_change_duration)
        if any(d < 0 for d in durations):
            raise ValueError("Длительности не могут быть отрицательными")
        if self.smoothness <= 0:
            raise ValueError("Шаг сглаживания должен быть положительным")
