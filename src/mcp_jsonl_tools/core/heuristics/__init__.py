"""Field-role heuristics used by schema inference.

Each heuristic is independent; new ones can be appended to the list returned
by :func:`default_heuristics` without touching the others.
"""

from __future__ import annotations

from .base import FieldHeuristic
from .name import NameHeuristic
from .value import ApiResponseHeuristic, CorrelationIdHeuristic, TimestampHeuristic


def default_heuristics() -> list[FieldHeuristic]:
    """Default heuristic chain (all are evaluated; none short-circuits)."""
    return [
        TimestampHeuristic(),
        NameHeuristic("is_likely_level", equals=("level", "severity")),
        NameHeuristic("is_likely_message", contains=("message", "msg")),
        NameHeuristic("is_likely_event", equals=("event", "type", "action")),
        CorrelationIdHeuristic(),
        ApiResponseHeuristic(),
        NameHeuristic("is_likely_error", contains=("error", "exception", "stack")),
    ]


__all__ = [
    "ApiResponseHeuristic",
    "CorrelationIdHeuristic",
    "FieldHeuristic",
    "NameHeuristic",
    "TimestampHeuristic",
    "default_heuristics",
]
