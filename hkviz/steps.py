"""
Разбор строк лога шагов Хопкрофта–Карпа.

Формат (префиксы чувствительны к регистру, проверяются в этом порядке):
  Initialize: (a,b,c d,e,f)      — левая и правая доли
  Add_edge: (a,d) (b,e)          — добавить рёбра
  Add_path: (a,d)(d,b)           — найденный увеличивающий путь
  Update_match: (a,d)            — новые пары паросочетания (двоеточие необязательно)
  Disregard_vertices: (b,e)      — рёбра, которые больше не рассматриваются
  Begin_Phase1                   — начало фазы, метка берётся как есть
  Maximum matching: 3            — итог, текст берётся как есть
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from hkviz.errors import MalformedEdge, MalformedInitialize, ParseError, UnknownStepKind

Edge = Tuple[str, str]


class StepKind(Enum):
    INITIALIZE = "Initialize:"
    ADD_EDGE = "Add_edge:"
    ADD_PATH = "Add_path:"
    UPDATE_MATCH = "Update_match"
    DISREGARD_VERTICES = "Disregard_vertices:"
    BEGIN_PHASE = "Begin_Phase"
    MAXIMUM_MATCHING = "Maximum matching:"


# Порядок важен: первый совпавший префикс выигрывает
PREFIX_ORDER: Tuple[StepKind, ...] = (
    StepKind.INITIALIZE,
    StepKind.ADD_EDGE,
    StepKind.ADD_PATH,
    StepKind.UPDATE_MATCH,
    StepKind.DISREGARD_VERTICES,
    StepKind.BEGIN_PHASE,
    StepKind.MAXIMUM_MATCHING,
)

EDGE_KINDS = frozenset(
    {StepKind.ADD_EDGE, StepKind.ADD_PATH, StepKind.UPDATE_MATCH, StepKind.DISREGARD_VERTICES}
)


@dataclass(frozen=True)
class StepEvent:
    """Один разобранный шаг. Заполнены только поля, относящиеся к его виду."""

    kind: StepKind
    left: Tuple[str, ...] = ()
    right: Tuple[str, ...] = ()
    edges: Tuple[Edge, ...] = ()
    label: str = ""
    raw: str = ""


def detect_kind(line: str) -> StepKind:
    for kind in PREFIX_ORDER:
        if line.startswith(kind.value):
            return kind
    raise UnknownStepKind(f"Неизвестный шаг: {line!r}", line)


def parse_step(line: str) -> StepEvent:
    """Преобразует одну строку лога в StepEvent или бросает ParseError."""
    line = line.rstrip("\r\n")
    kind = detect_kind(line)

    if kind is StepKind.INITIALIZE:
        left, right = parse_vertex_groups(line[len(kind.value):], line)
        return StepEvent(kind, left=left, right=right, raw=line)

    if kind in EDGE_KINDS:
        return StepEvent(kind, edges=parse_pair_list(_payload_after_colon(line, kind)), raw=line)

    # Begin_Phase и Maximum matching: хвост строки без изменений
    return StepEvent(kind, label=line[len(kind.value):], raw=line)


def _payload_after_colon(line: str, kind: StepKind) -> str:
    if ":" in line:
        return line.split(":", 1)[1]
    return line[len(kind.value):]


def parse_vertex_groups(body: str, line: str = "") -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    body = body.replace("(", "").replace(")", "").strip()
    groups = body.split(" ")
    if len(groups) < 2:
        raise MalformedInitialize(
            f"Initialize: ожидаются две группы вершин через пробел, получено {len(groups)}", line
        )
    left = tuple(name for name in groups[0].split(",") if name)
    right = tuple(name for name in groups[1].split(",") if name)
    return left, right


def parse_pair_list(body: str) -> Tuple[Edge, ...]:
    """
    Общая грамматика списков рёбер: '(a,b) (c,d)' или '(a,b)(c,d)'.
    Без единой скобки — пустой список (это допустимо, например для пустого Disregard_vertices).
    """
    body = body.strip()
    if "(" not in body and ")" not in body:
        return ()

    edges: List[Edge] = []
    for token in body.replace("(", " ").replace(")", " ").split():
        parts = token.split(",")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise MalformedEdge(f"Ребро должно иметь вид v1,v2: {token!r}", body)
        edges.append((parts[0], parts[1]))
    return tuple(edges)


def iter_steps(lines: Iterable[str]) -> Iterator[Tuple[int, str, Optional[StepEvent], Optional[ParseError]]]:
    """
    Проходит по строкам, не останавливаясь на ошибках:
    выдаёт (номер строки, строка, событие или None, ошибка или None).
    Пустые строки пропускаются.
    """
    for number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue
        try:
            yield number, line, parse_step(line), None
        except ParseError as exc:
            yield number, line, None, exc


def load_steps(path: str) -> List[str]:
    with open(path, "r", encoding="utf-8") as f:
        return [ln.rstrip("\r\n") for ln in f.readlines() if ln.strip()]
