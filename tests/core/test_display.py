from __future__ import annotations

from mcp_jsonl_tools.core.config import DisplayConfig
from mcp_jsonl_tools.core.display import format_record


def test_format_record_truncates_on_a_copy() -> None:
    log = {
        "message": "This is a very long message that should be truncated",
        "short": "ok",
        "nested": {"longText": "Another very long text value here"},
    }
    display = DisplayConfig(max_field_value_length=20, show_line_numbers=False)
    out = format_record(log, display=display)
    assert out["message"] == "This is a very long ... [truncated]"
    assert out["short"] == "ok"
    assert out["nested"]["longText"] == "Another very long te... [truncated]"
    assert log["message"].startswith("This is a very long message")


def test_format_record_truncates_inside_arrays() -> None:
    display = DisplayConfig(max_field_value_length=3, show_line_numbers=False)
    out = format_record({"tags": ["abcdef", "ab"]}, display=display)
    assert out["tags"] == ["abc... [truncated]", "ab"]


def test_format_record_zero_length_disables_truncation() -> None:
    display = DisplayConfig(max_field_value_length=0, show_line_numbers=False)
    assert format_record({"message": "x" * 1000}, display=display) == {"message": "x" * 1000}


def test_format_record_line_numbers_and_api_json() -> None:
    log = {"response": '{"status": 200, "data": {"id": 1}}', "message": "hi"}
    out = format_record(log, display=DisplayConfig(), api_response_fields=["response"], line_no=42)
    assert out["_line_number"] == 42
    assert out["response"] == {"status": 200, "data": {"id": 1}}
    assert "_line_number" not in log

    hidden = format_record(log, display=DisplayConfig(show_line_numbers=False), line_no=42)
    assert "_line_number" not in hidden


def test_format_record_leaves_invalid_json_strings_alone() -> None:
    log = {"response": "{not json", "data": "plain"}
    out = format_record(log, display=DisplayConfig(), api_response_fields=["response", "data"])
    assert out["response"] == "{not json"
    assert out["data"] == "plain"


def test_format_record_pretty_print_disabled() -> None:
    log = {"response": '{"status": 200}'}
    display = DisplayConfig(pretty_print_api_responses=False)
    out = format_record(log, display=display, api_response_fields=["response"])
    assert out["response"] == '{"status": 200}'
