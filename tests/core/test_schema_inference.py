from __future__ import annotations

from typing import Any

import pytest

from mcp_jsonl_tools.core.heuristics import (
    ApiResponseHeuristic,
    CorrelationIdHeuristic,
    NameHeuristic,
    TimestampHeuristic,
    default_heuristics,
)
from mcp_jsonl_tools.core.schema_inference import infer_schema


def test_infers_timestamp_and_level(parsed) -> None:
    lines = parsed(
        {"timestamp": "2025-01-01T00:00:00Z", "level": "info"},
        {"timestamp": "2025-01-01T00:01:00Z", "level": "error"},
    )
    result = infer_schema(lines)
    assert result.detected_fields.timestamp_field == "timestamp"
    assert result.detected_fields.level_field == "level"
    assert result.confidence == 1.0
    assert "Detected timestamp field: timestamp" in result.suggestions


def test_field_analysis_entry(parsed) -> None:
    lines = parsed(*({"requestId": f"req-0000000{i}", "n": i} for i in range(5)))
    result = infer_schema(lines)
    entry = result.field_analysis["requestId"]
    assert entry.type == "string"
    assert entry.frequency == 5
    assert entry.examples == ["req-00000000", "req-00000001", "req-00000002"]
    assert entry.is_likely_correlation_id
    assert result.field_analysis["n"].type == "number"


def test_first_observed_field_wins_for_singular_roles(parsed) -> None:
    lines = parsed(
        {"msg": "hello", "createdDate": "2025-01-01T00:00:00Z"},
        {"message": "world", "timestamp": "2025-01-01T00:00:00Z", "msg": "x"},
    )
    detected = infer_schema(lines).detected_fields
    assert detected.message_field == "msg"
    assert detected.timestamp_field == "createdDate"


def test_set_roles_collect_every_match_in_order(parsed) -> None:
    lines = parsed(
        {"error": "boom", "stackTrace": "at x", "data": {"a": 1}},
        {"exception": "E", "result": [1, 2], "response": "plain string"},
    )
    detected = infer_schema(lines).detected_fields
    assert detected.error_fields == ["error", "stackTrace", "exception"]
    assert detected.api_response_fields == ["data", "result"]


def test_flags_only_turn_on(parsed) -> None:
    lines = parsed(
        {"traceId": "trace-0123456789"},
        {"traceId": "short"},
    )
    assert infer_schema(lines).field_analysis["traceId"].is_likely_correlation_id


def test_flags_are_not_exclusive(parsed) -> None:
    lines = parsed({"errorId": "err-0123456789"})
    entry = infer_schema(lines).field_analysis["errorId"]
    assert entry.is_likely_error
    assert entry.is_likely_correlation_id


def test_confidence_counts_malformed_lines(parsed) -> None:
    lines = parsed({"level": "info"}, "not json", {"level": "warn"}, "[1]")
    result = infer_schema(lines)
    assert result.confidence == 0.5
    assert result.valid_logs == 2
    assert result.sample_size == 4
    assert result.detected_fields.level_field == "level"


def test_sample_size_truncates(parsed) -> None:
    lines = parsed({"level": "info"}, {"level": "info"}, {"severity": "high"})
    result = infer_schema(lines, sample_size=2)
    assert result.sample_size == 2
    assert "severity" not in result.field_analysis


def test_no_valid_records_is_not_an_error(parsed) -> None:
    result = infer_schema(parsed("garbage", "{broken"))
    assert result.confidence == 0.0
    assert result.field_analysis == {}
    assert result.suggestions == []

    empty = infer_schema([])
    assert empty.confidence == 0.0


def test_idempotent(parsed) -> None:
    lines = parsed(
        {"ts": "2025-01-01T00:00:00Z", "type": "login", "userId": "user-000000001"},
        "bad",
    )
    assert infer_schema(lines, 10) == infer_schema(lines, 10)


@pytest.mark.parametrize(
    ("name", "value", "expected"),
    [
        ("timestamp", "2025-01-01T00:00:00Z", True),
        ("createdDate", "2025-01-01T00:00:00Z", True),
        ("date", "2025-01-01", True),
        ("time", "2025/01/01 10:00:00", True),
        ("loggedDate", "01-01-2025 10:00:00", True),
        ("level", "info", False),
        ("timestamp", "invalid-date", False),
        ("time", 1735689600000, False),
    ],
)
def test_timestamp_heuristic(name: str, value: Any, expected: bool) -> None:
    assert TimestampHeuristic().classify(name, value) is expected


def test_name_heuristics() -> None:
    by_flag = {h.flag: h for h in default_heuristics()}
    assert by_flag["is_likely_level"].classify("LEVEL", "debug")
    assert not by_flag["is_likely_level"].classify("loglevel", "debug")
    assert by_flag["is_likely_message"].classify("errorMessage", "x")
    assert by_flag["is_likely_event"].classify("Action", "x")
    assert not by_flag["is_likely_event"].classify("eventName", "x")
    assert by_flag["is_likely_error"].classify("stackTrace", "x")
    assert not by_flag["is_likely_error"].classify("message", "error message")


def test_value_heuristics() -> None:
    cid = CorrelationIdHeuristic()
    assert cid.classify("migrationId", "migration-123456")
    assert not cid.classify("userId", "123")
    assert not cid.classify("message", "long-string-here")

    api = ApiResponseHeuristic()
    assert api.classify("response", {"status": 200})
    assert not api.classify("response", "string-response")
    assert not api.classify("message", {"nested": True})


def test_custom_heuristics_extend_the_chain(parsed) -> None:
    chain = [*default_heuristics(), NameHeuristic("is_likely_level", equals=("lvl",))]
    result = infer_schema(parsed({"lvl": "info"}), heuristics=chain)
    assert result.detected_fields.level_field == "lvl"
