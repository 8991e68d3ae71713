"""
Реестр вершин и рёбер двудольного графа, независимый от отрисовки.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from hkviz.errors import DuplicateEdge, DuplicateVertex, EdgeNotFound, SameSideEdge, UnknownVertex

Position = Tuple[float, float]


class Side(Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def other(self) -> "Side":
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


# Доли рисуются строками: левая сверху, правая снизу
ROW_Y = {Side.LEFT: 1.0, Side.RIGHT: -1.0}


@dataclass
class Vertex:
    name: str
    side: Side
    index: int
    color: str = ""
    position: Position = (0.0, 0.0)

    @property
    def node_id(self) -> str:
        """Идентификатор узла на сцене: имя уникально только внутри доли."""
        return f"{self.side.value}:{self.name}"


@dataclass
class EdgeInfo:
    key: str
    source: str
    target: str
    color: str
    width: float
    z_order: int
    # Концы в порядке ключа: source, target
    ends: Tuple[Vertex, ...] = ()


def edge_key(v1: str, v2: str) -> str:
    return f"{v1}_{v2}"


def row_positions(count: int, side: Side) -> List[Position]:
    """Вершины одной доли в ряд с шагом 1, центрированные относительно x=0."""
    start_x = -(count / 2.0) + 0.5
    y = ROW_Y[side]
    return [(start_x + i, y) for i in range(count)]


class GraphRegistry:
    """
    Вершины: (доля, имя) -> порядковый номер в доле. Одно и то же имя может
    встречаться в обеих долях, например Initialize: (1,2 1,2).
    Рёбра: ключ "v1_v2" в порядке из лога -> цвет, ширина, z-порядок.
    Ребро всегда соединяет разные доли: v1 ищется слева, v2 справа, и только
    если так не выходит, наоборот.
    При strict_edge_order=True ребро ищется только по тому порядку вершин,
    в котором оно было создано: (b,a) после (a,b) не находится.
    """

    def __init__(self, strict_edge_order: bool = True) -> None:
        self.strict_edge_order = strict_edge_order
        self._vertices: Dict[Tuple[Side, str], Vertex] = {}
        self._edges: Dict[str, EdgeInfo] = {}
        self._side_counts: Dict[Side, int] = {Side.LEFT: 0, Side.RIGHT: 0}

    # ------------------------- Вершины -------------------------

    def add_vertex(self, name: str, side: Side, color: str = "") -> Vertex:
        if (side, name) in self._vertices:
            raise DuplicateVertex(f"Вершина {name} уже есть в доле {side.value}")
        vertex = Vertex(name=name, side=side, index=self._side_counts[side], color=color)
        self._side_counts[side] += 1
        self._vertices[(side, name)] = vertex
        return vertex

    def vertex(self, name: str, side: Side) -> Vertex:
        try:
            return self._vertices[(side, name)]
        except KeyError:
            raise UnknownVertex(f"Вершина {name} не найдена в доле {side.value}") from None

    def has_vertex(self, name: str, side: Optional[Side] = None) -> bool:
        sides = list(Side) if side is None else [side]
        return any((s, name) in self._vertices for s in sides)

    def vertices(self, side: Optional[Side] = None) -> List[Vertex]:
        result = [v for v in self._vertices.values() if side is None or v.side is side]
        return sorted(result, key=lambda v: (v.side.value, v.index))

    def layout(self) -> None:
        """Пересчитать позиции всех вершин по числу вершин в каждой доле."""
        for side in Side:
            row = self.vertices(side)
            for vertex, pos in zip(row, row_positions(len(row), side)):
                vertex.position = pos

    def count(self, side: Optional[Side] = None) -> int:
        if side is None:
            return len(self._vertices)
        return self._side_counts[side]

    # ------------------------- Рёбра -------------------------

    def resolve_ends(self, v1: str, v2: str) -> Tuple[Vertex, Vertex]:
        """Найти концы ребра в разных долях: сначала v1 слева и v2 справа, затем наоборот."""
        for first in (Side.LEFT, Side.RIGHT):
            a = self._vertices.get((first, v1))
            b = self._vertices.get((first.other, v2))
            if a is not None and b is not None:
                return a, b
        for side in Side:
            if (side, v1) in self._vertices and (side, v2) in self._vertices:
                raise SameSideEdge(f"Ребро {v1} — {v2}: обе вершины только в доле {side.value}")
        missing = v1 if not self.has_vertex(v1) else v2
        raise UnknownVertex(f"Вершина {missing} не найдена")

    def add_edge(self, v1: str, v2: str, color: str = "", width: float = 0.0, z_order: int = 0) -> EdgeInfo:
        ends = self.resolve_ends(v1, v2)
        key = edge_key(v1, v2)
        if key in self._edges:
            raise DuplicateEdge(f"Ребро {key} уже существует")
        info = EdgeInfo(key=key, source=v1, target=v2, color=color, width=width, z_order=z_order, ends=ends)
        self._edges[key] = info
        return info

    def lookup_edge(self, v1: str, v2: str) -> EdgeInfo:
        info = self._edges.get(edge_key(v1, v2))
        if info is None and not self.strict_edge_order:
            info = self._edges.get(edge_key(v2, v1))
        if info is None:
            raise EdgeNotFound(f"Ребро {v1} — {v2} не найдено")
        return info

    def has_edge(self, v1: str, v2: str) -> bool:
        try:
            self.lookup_edge(v1, v2)
        except EdgeNotFound:
            return False
        return True

    def edges(self) -> List[EdgeInfo]:
        return list(self._edges.values())

    def edge_count(self) -> int:
        return len(self._edges)
