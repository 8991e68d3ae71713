"""
Рендереры: получатели эффектов воспроизведения.

SceneRenderer держит сцену в памяти (вершины, рёбра, тексты) и журнал вызовов:
этого хватает для консольного режима и тестов. MatplotlibRenderer рисует ту же
сцену на осях matplotlib.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb

from hkviz.errors import EdgeNotFound, UnknownVertex
from hkviz.registry import Position, Side
from hkviz.scheduler import NARRATION_SLOT, PHASE_SLOT, RGB


class Renderer(abc.ABC):
    """Интерфейс, который должен предоставить любой рендерер."""

    @abc.abstractmethod
    def create_node(self, node_id: str, side: Side, color: str, label: str, position: Position) -> None:
        ...

    @abc.abstractmethod
    def create_edge(self, key: str, from_pos: Position, to_pos: Position) -> None:
        ...

    @abc.abstractmethod
    def set_edge_style(self, key: str, color: RGB, width: float, z_order: int) -> None:
        ...

    @abc.abstractmethod
    def set_node_color(self, node_id: str, color: RGB) -> None:
        ...

    @abc.abstractmethod
    def set_text(self, slot: str, value: str) -> None:
        ...

    @abc.abstractmethod
    def find_node(self, node_id: str):
        """Бросает UnknownVertex, если вершина ещё не создана."""

    @abc.abstractmethod
    def find_edge(self, key: str):
        """Бросает EdgeNotFound, если ребро ещё не создано."""


@dataclass
class SceneNode:
    node_id: str
    side: Side
    label: str
    position: Position
    base_color: RGB
    color: RGB


@dataclass
class SceneEdge:
    key: str
    from_pos: Position
    to_pos: Position
    color: RGB = (0.0, 0.0, 0.0)
    width: float = 0.0
    z_order: int = 0


@dataclass
class SceneRenderer(Renderer):
    nodes: Dict[str, SceneNode] = field(default_factory=dict)
    edges: Dict[str, SceneEdge] = field(default_factory=dict)
    texts: Dict[str, str] = field(default_factory=lambda: {NARRATION_SLOT: "", PHASE_SLOT: ""})
    calls: List[Tuple] = field(default_factory=list)

    def create_node(self, node_id: str, side: Side, color: str, label: str, position: Position) -> None:
        rgb = to_rgb(color)
        self.nodes[node_id] = SceneNode(node_id, side, label, position, rgb, rgb)
        self.calls.append(("create_node", node_id))

    def create_edge(self, key: str, from_pos: Position, to_pos: Position) -> None:
        self.edges[key] = SceneEdge(key, from_pos, to_pos)
        self.calls.append(("create_edge", key))

    def set_edge_style(self, key: str, color: RGB, width: float, z_order: int) -> None:
        edge = self.find_edge(key)
        edge.color = tuple(color)
        edge.width = width
        edge.z_order = z_order
        self.calls.append(("set_edge_style", key))

    def set_node_color(self, node_id: str, color: RGB) -> None:
        self.find_node(node_id).color = tuple(color)
        self.calls.append(("set_node_color", node_id))

    def set_text(self, slot: str, value: str) -> None:
        self.texts[slot] = value
        self.calls.append(("set_text", slot))

    def find_node(self, node_id: str) -> SceneNode:
        node = self.nodes.get(node_id)
        if node is None:
            raise UnknownVertex(f"Вершина {node_id} не создана на сцене")
        return node

    def find_edge(self, key: str) -> SceneEdge:
        edge = self.edges.get(key)
        if edge is None:
            raise EdgeNotFound(f"Ребро {key} не создано на сцене")
        return edge


# Перевод «мировой» ширины ребра в пункты matplotlib
WIDTH_TO_POINTS = 40.0


class MatplotlibRenderer(SceneRenderer):
    """Сцена + отрисовка на осях matplotlib на тёмном фоне."""

    def __init__(self, ax=None, background: str = "#1f2a38", title: str = "Hopcroft–Karp") -> None:
        super().__init__()
        if ax is None:
            self.fig, self.ax = plt.subplots(figsize=(8, 6))
        else:
            self.fig, self.ax = ax.figure, ax
        self.background = background
        self.title = title

    def draw(self, time: Optional[float] = None) -> None:
        """Перерисовать текущее состояние сцены."""
        ax = self.ax
        ax.clear()
        ax.set_facecolor(self.background)
        self.fig.patch.set_facecolor(self.background)

        if not self.nodes:
            ax.text(0.5, 0.5, "Граф не загружен", ha="center", va="center",
                    color="white", transform=ax.transAxes)
            ax.set_axis_off()
            return

        # Рёбра: чем больше z-порядок, тем выше ребро; вершины всегда поверх рёбер
        lowest = min((e.z_order for e in self.edges.values()), default=0)
        for edge in sorted(self.edges.values(), key=lambda e: e.z_order):
            (x1, y1), (x2, y2) = edge.from_pos, edge.to_pos
            ax.plot([x1, x2], [y1, y2], color=edge.color,
                    linewidth=max(0.5, edge.width * WIDTH_TO_POINTS),
                    zorder=1 + edge.z_order - lowest)

        node_z = 2 + max((e.z_order for e in self.edges.values()), default=0) - lowest
        for node in self.nodes.values():
            x, y = node.position
            ax.plot(x, y, "o", markersize=22, markerfacecolor=node.color,
                    markeredgecolor="black", markeredgewidth=1, zorder=node_z)
            ax.text(x, y, node.label, ha="center", va="center", color="black",
                    weight="bold", zorder=node_z + 1)

        xs = [n.position[0] for n in self.nodes.values()]
        ax.set_xlim(min(xs) - 1, max(xs) + 1)
        ax.set_ylim(-2.2, 2.2)
        ax.set_axis_off()

        ax.text(0.5, 0.98, self.texts.get(PHASE_SLOT, ""), ha="center", va="top",
                color="white", fontsize=12, weight="bold", transform=ax.transAxes)
        ax.text(0.5, 0.03, self.texts.get(NARRATION_SLOT, ""), ha="center", va="bottom",
                color="white", fontsize=9, wrap=True, transform=ax.transAxes)
        caption = self.title if time is None else f"{self.title}  t={time:.2f}"
        ax.set_title(caption, color="white")

    def save_frame(self, path: str, time: Optional[float] = None) -> None:
        self.draw(time)
        self.fig.savefig(path, facecolor=self.background)

    def close(self) -> None:
        plt.close(self.fig)
