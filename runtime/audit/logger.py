"""JSONL audit trail of index operations.

Each line is one ``AuditEntry``.  Reads scan the whole file; the log is
meant for operators inspecting recent activity, not for analytics.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime
from pathlib import Path
from typing import Iterator

from contracts.audit import AuditEntry, AuditEvent, AuditLogger


class JsonlAuditLogger(AuditLogger):
    """Thread-safe, append-only JSONL audit logger."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def log(self, entry: AuditEntry) -> None:
        line = entry.model_dump_json() + "\n"
        with self._lock:
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line)

    def query_by_point(self, point_id: str) -> list[AuditEntry]:
        return self.select(point_id=point_id)

    def query_by_event(self, event: AuditEvent, limit: int = 100) -> list[AuditEntry]:
        return self.select(event=event)[-limit:]

    def tail(self, n: int = 20) -> list[AuditEntry]:
        return list(self._entries())[-n:]

    def select(
        self,
        *,
        event: AuditEvent | None = None,
        point_id: str | None = None,
        collection: str | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[AuditEntry]:
        """Return entries matching every given criterion, oldest first."""
        return [
            e
            for e in self._entries()
            if (event is None or e.event == event)
            and (point_id is None or e.point_id == point_id)
            and (collection is None or e.collection == collection)
            and (since is None or e.ts >= since)
            and (until is None or e.ts <= until)
        ]

    # ── internal ────────────────────────────────────────────────────

    def _entries(self) -> Iterator[AuditEntry]:
        if not self._path.exists():
            return
        with self._path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    yield AuditEntry(**json.loads(line))
