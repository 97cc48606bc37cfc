"""Unit tests for the cardindex CLI."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from cli.cardindex import main
from contracts.audit import AuditEntry, AuditEvent
from runtime.audit.logger import JsonlAuditLogger


def _write_log(path: Path) -> None:
    logger = JsonlAuditLogger(path)
    logger.log(AuditEntry(event=AuditEvent.POINT_INSERT, point_id="p-1", collection="cards"))
    logger.log(AuditEntry(event=AuditEvent.INDEX_SEARCH, collection="cards", detail={"count": 3}))
    logger.log(AuditEntry(event=AuditEvent.POINT_VISIBILITY, point_id="p-1", collection="cards"))


class TestValidate:
    def test_valid_manifest(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        f = tmp_path / "cardindex.yaml"
        f.write_text("app:\n  name: cards\nindex:\n  collection: debate_cards\n")

        main(["validate", str(f)])

        out = capsys.readouterr().out
        assert "Manifest OK: cards" in out
        assert "debate_cards" in out

    def test_missing_manifest(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["validate", str(tmp_path / "nope.yaml")])

        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_manifest(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        f = tmp_path / "cardindex.yaml"
        f.write_text("qdrant:\n  url: http://x\n")  # missing app

        with pytest.raises(SystemExit):
            main(["validate", str(f)])

        assert "invalid manifest" in capsys.readouterr().err


class TestLogs:
    def test_tail(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        log = tmp_path / "audit.jsonl"
        _write_log(log)

        main(["logs", str(log), "-n", "2"])

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 2
        assert "index.search" in lines[0]

    def test_by_point_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        log = tmp_path / "audit.jsonl"
        _write_log(log)

        main(["logs", str(log), "--point-id", "p-1", "--json"])

        records = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
        assert [r["event"] for r in records] == ["point.insert", "point.visibility"]

    def test_by_event(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        log = tmp_path / "audit.jsonl"
        _write_log(log)

        main(["logs", str(log), "--event", "index.search", "--json"])

        (line,) = capsys.readouterr().out.strip().splitlines()
        assert json.loads(line)["detail"] == {"count": 3}

    def test_unknown_event(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        log = tmp_path / "audit.jsonl"
        _write_log(log)

        with pytest.raises(SystemExit):
            main(["logs", str(log), "--event", "tool.call"])

        assert "Valid events" in capsys.readouterr().err

    def test_missing_log(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit):
            main(["logs", str(tmp_path / "none.jsonl")])

    def test_errors_show_operation_and_kind(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        log = tmp_path / "audit.jsonl"
        _write_log(log)
        JsonlAuditLogger(log).log(
            AuditEntry(
                event=AuditEvent.INDEX_ERROR,
                collection="cards",
                detail={
                    "operation": "index.search",
                    "kind": "search",
                    "error": "Failed to search points on index",
                    "cause": "ConnectionError: refused",
                },
            )
        )

        main(["logs", str(log), "--errors"])

        (line,) = capsys.readouterr().out.strip().splitlines()
        assert "index.search search: Failed to search points on index" in line
        assert "(ConnectionError: refused)" in line

    def test_collection_and_since_filters(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        log = tmp_path / "audit.jsonl"
        logger = JsonlAuditLogger(log)
        now = datetime.now(timezone.utc)
        logger.log(
            AuditEntry(
                event=AuditEvent.POINT_INSERT,
                point_id="old-point",
                collection="cards",
                ts=now - timedelta(days=2),
            )
        )
        logger.log(AuditEntry(event=AuditEvent.POINT_INSERT, point_id="new-point", collection="cards"))
        logger.log(AuditEntry(event=AuditEvent.POINT_INSERT, point_id="elsewhere", collection="other"))

        since = (now - timedelta(days=1)).isoformat()
        main(["logs", str(log), "--collection", "cards", "--since", since, "--json"])

        records = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
        assert [r["point_id"] for r in records] == ["new-point"]

    def test_visibility_line_is_summarised(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        log = tmp_path / "audit.jsonl"
        JsonlAuditLogger(log).log(
            AuditEntry(
                event=AuditEvent.POINT_VISIBILITY,
                point_id="p-1",
                collection="cards",
                detail={"requested": "private", "changed": False},
            )
        )

        main(["logs", str(log)])

        assert "-> private unchanged" in capsys.readouterr().out

    def test_invalid_timestamp(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        log = tmp_path / "audit.jsonl"
        _write_log(log)

        with pytest.raises(SystemExit):
            main(["logs", str(log), "--since", "yesterday"])

        assert "Invalid timestamp" in capsys.readouterr().err
