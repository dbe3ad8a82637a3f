from __future__ import annotations

from datetime import UTC, datetime

from mcp_jsonl_tools.core.search import RecordFilter, filter_records, search_records

FILTER_FIELDS = {"level_field": "level", "event_field": "event", "timestamp_field": "timestamp"}


def test_search_anywhere_case_insensitive(parsed) -> None:
    lines = parsed(
        {"message": "User LOGIN ok", "userId": "u-1"},
        {"message": "logout"},
        "broken",
        {"nested": {"detail": "login retry"}},
    )
    hits = search_records(lines, "login")
    assert [h.line_no for h in hits] == [1, 4]
    assert hits[0].matched_field == "message"
    assert hits[1].matched_field == "nested"


def test_search_case_sensitive(parsed) -> None:
    lines = parsed({"message": "User LOGIN ok"}, {"message": "login"})
    hits = search_records(lines, "login", case_sensitive=True)
    assert [h.line_no for h in hits] == [2]


def test_search_single_field(parsed) -> None:
    lines = parsed(
        {"user": {"id": "abc-1"}, "message": "abc"},
        {"user": {"id": "xyz"}, "message": "abc"},
    )
    hits = search_records(lines, "abc", field="user.id")
    assert [(h.line_no, h.matched_field) for h in hits] == [(1, "user.id")]


def test_search_limit_and_correlation_fields(parsed) -> None:
    lines = parsed(*({"taskId": "task-42", "n": i} for i in range(5)))
    hits = search_records(lines, "task-42", limit=2, correlation_fields=["taskId", "listId"])
    assert len(hits) == 2
    assert hits[0].correlation_fields == ("taskId",)


def test_filter_level_and_event(parsed, migration_log) -> None:
    hits = filter_records(
        parsed(*migration_log), RecordFilter(level="error", event="fail"), **FILTER_FIELDS
    )
    assert [h.line_no for h in hits] == [4]
    assert hits[0].matched_filters == ("level:error", "event:fail")


def test_filter_time_range_excludes_unparseable(parsed, migration_log) -> None:
    lines = parsed(*migration_log, {"timestamp": "soon"}, {"level": "info"})
    criteria = RecordFilter(
        time_from=datetime(2025, 1, 1, 10, 1, tzinfo=UTC),
        time_to=datetime(2025, 1, 1, 11, 0, tzinfo=UTC),
    )
    hits = filter_records(lines, criteria, **FILTER_FIELDS)
    assert [h.line_no for h in hits] == [2, 4]
    assert hits[0].matched_filters == ("time_range",)


def test_filter_custom_paths(parsed) -> None:
    lines = parsed(
        {"response": {"status": 500}, "retry": True},
        {"response": {"status": 500}, "retry": 1},
        {"response": {"status": 200}, "retry": True},
    )
    criteria = RecordFilter(custom={"response.status": 500, "retry": True})
    hits = filter_records(lines, criteria, **FILTER_FIELDS)
    assert [h.line_no for h in hits] == [1]
    assert hits[0].matched_filters == ("response.status:500", "retry:true")


def test_filter_event_without_event_field(parsed, migration_log) -> None:
    hits = filter_records(
        parsed(*migration_log),
        RecordFilter(event="start"),
        level_field="level",
        event_field=None,
        timestamp_field="timestamp",
    )
    assert hits == []


def test_filter_no_criteria_returns_valid_records_up_to_limit(parsed, migration_log) -> None:
    lines = parsed(*migration_log, "junk")
    hits = filter_records(lines, RecordFilter(), limit=3, **FILTER_FIELDS)
    assert [h.line_no for h in hits] == [1, 2, 3]
    assert hits[0].matched_filters == ()
