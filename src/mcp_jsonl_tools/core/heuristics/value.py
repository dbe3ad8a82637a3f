"""Heuristics that combine the field name with the observed value."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..values import parse_timestamp
from .name import NameHeuristic


@dataclass(frozen=True, slots=True)
class TimestampHeuristic:
    """Name mentions time/date and the value is a parseable date string."""

    flag: str = "is_likely_timestamp"
    name_tokens: Sequence[str] = ("time", "date")

    def classify(self, name: str, value: Any) -> bool:
        if not NameHeuristic(self.flag, contains=self.name_tokens).matches_name(name):
            return False
        return isinstance(value, str) and parse_timestamp(value) is not None


@dataclass(frozen=True, slots=True)
class CorrelationIdHeuristic:
    """Name contains "id" and the value is a reasonably long string."""

    flag: str = "is_likely_correlation_id"
    min_length: int = 11

    def classify(self, name: str, value: Any) -> bool:
        return "id" in name.lower() and isinstance(value, str) and len(value) >= self.min_length


@dataclass(frozen=True, slots=True)
class ApiResponseHeuristic:
    """A nested object/array under a response-like name."""

    flag: str = "is_likely_api_response"
    name_tokens: Sequence[str] = ("response", "data", "result")

    def classify(self, name: str, value: Any) -> bool:
        if not isinstance(value, (dict, list)):
            return False
        lower = name.lower()
        return any(token in lower for token in self.name_tokens)
