from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Protocol, TypeVar


class _HasPath(Protocol):
    @property
    def path(self) -> str: ...


P = TypeVar("P", bound=_HasPath)
E = TypeVar("E", bound=Enum)


def sort_by_path(items: Iterable[P]) -> list[P]:
    return sorted(items, key=lambda item: item.path)


def sort_by_value(items: Iterable[E]) -> list[E]:
    return sorted(items, key=lambda item: item.value)
