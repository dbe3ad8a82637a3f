"""Field heuristic interface."""

from __future__ import annotations

from typing import Any, Protocol


class FieldHeuristic(Protocol):
    """Heuristic interface: decide whether a field plays one role.

    ``flag`` names the FieldAnalysis attribute the heuristic turns on.
    """

    flag: str

    def classify(self, name: str, value: Any) -> bool:
        """Return True if this (name, value) occurrence suggests the role."""
        ...
