"""Heuristics that look only at the field name."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class NameHeuristic:
    """Match a field name case-insensitively by equality or substring."""

    flag: str
    equals: Sequence[str] = ()
    contains: Sequence[str] = ()

    def matches_name(self, name: str) -> bool:
        lower = name.lower()
        if lower in self.equals:
            return True
        return any(token in lower for token in self.contains)

    def classify(self, name: str, value: Any) -> bool:
        return self.matches_name(name)
