"""
Тексты пояснений к шагам. Чистые функции: одинаковый шаг даёт одинаковую строку.
Тексты выводятся на экран как есть, поэтому опечатки ("verticies") сохранены.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from hkviz.steps import Edge

ADD_EDGE_LIMIT = 75
ADD_EDGE_SUMMARY = "Add the edges."
NO_EDGES_TO_IGNORE = "No edges to ignore."
FINISHED = "Finished"
FINAL_MATCHING = "Found final matching!"


def initialize_text(left: Sequence[str], right: Sequence[str]) -> str:
    return (
        f"Set up the bipartite graph with the left verticies ({','.join(left)}) "
        f"and the right verticies ({','.join(right)}) and create an empty matching. "
    )


def add_edge_text(edges: Sequence[Edge]) -> str:
    """Длинный список рёбер (больше 75 символов) заменяется коротким итогом."""
    text = "Add edges between " + "".join(f"({a}  , {b})" for a, b in edges)
    if len(text) > ADD_EDGE_LIMIT:
        return ADD_EDGE_SUMMARY
    return text


def add_path_text(edges: Sequence[Edge]) -> str:
    return "Found an augmenting path from " + ", ".join(f"Node {a} to Node {b}" for a, b in edges)


def update_match_text(edges: Sequence[Edge]) -> str:
    return "Found match(es): " + ", ".join(f"Node {a} and Node {b}" for a, b in edges)


def disregard_text(edges: Sequence[Edge]) -> str:
    if not edges:
        return NO_EDGES_TO_IGNORE
    return "Ignore edges between " + ", ".join(f"Node {a} and Node {b}" for a, b in edges)


def begin_phase_text(label: str) -> Tuple[str, str]:
    """(пояснение, короткая подпись фазы)"""
    return f"Begin Phase {label}", f"Phase {label}"


def maximum_matching_text(result: str) -> Tuple[str, str]:
    return FINISHED, f"Maximum matching is {result}"
