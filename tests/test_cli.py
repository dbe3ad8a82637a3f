from __future__ import annotations

import json
from pathlib import Path

import pytest

from mcp_jsonl_tools.cli import main


def test_cli_related(tmp_path: Path, write_jsonl, migration_log, capsys, monkeypatch) -> None:
    monkeypatch.delenv("JSONL_TOOLS_LOG_DIR", raising=False)
    log = write_jsonl(tmp_path / "mig.jsonl", migration_log)

    main(
        [
            "--config",
            str(tmp_path / "cfg.json"),
            "related",
            str(log),
            "mig-123",
            "--context-window",
            "0",
            "--time-window",
            "0",
        ]
    )

    out = json.loads(capsys.readouterr().out)
    assert out["direct_matches"] == 3
    assert [r["line_number"] for r in out["related_logs"]] == [1, 2, 4]


def test_cli_patterns(tmp_path: Path, write_jsonl, migration_log, capsys) -> None:
    log = write_jsonl(tmp_path / "mig.jsonl", migration_log)

    main(["--config", str(tmp_path / "cfg.json"), "patterns", str(log), "--group-by", "event"])

    out = json.loads(capsys.readouterr().out)
    assert out["group_by_analysis"]["unique_values"] == 4


def test_cli_missing_file_exits_2(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(tmp_path / "cfg.json"), "detect-schema", str(tmp_path / "nope.jsonl")])

    assert exc.value.code == 2
    assert "not found" in capsys.readouterr().err
