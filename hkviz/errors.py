"""
Иерархия ошибок плеера: разбор строк лога и реестр графа.
"""

from __future__ import annotations


class ParseError(ValueError):
    """Строка лога шагов не распознана или записана с ошибкой."""

    def __init__(self, message: str, line: str = "") -> None:
        super().__init__(message)
        self.line = line


class UnknownStepKind(ParseError):
    """Неизвестный префикс шага."""


class MalformedInitialize(ParseError):
    """В шаге Initialize нет двух групп вершин."""


class MalformedEdge(ParseError):
    """Токен ребра не имеет вида v1,v2."""


class RegistryError(LookupError):
    """Ошибка обращения к реестру вершин и рёбер."""


class DuplicateVertex(RegistryError):
    pass


class UnknownVertex(RegistryError):
    pass


class EdgeNotFound(RegistryError):
    pass


class DuplicateEdge(RegistryError):
    pass


class SameSideEdge(RegistryError):
    """Оба конца ребра лежат в одной доле."""
