"""Audit-trail sinks for completed operations."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from aavaverify.models import AuditRecord


class AuditSink(Protocol):
    """Anything that can persist an AuditRecord."""

    def record(self, entry: AuditRecord) -> None: ...


class InMemoryAuditLog:
    """Process-local audit log, newest entries last."""

    def __init__(self) -> None:
        self._entries: list[AuditRecord] = []

    def record(self, entry: AuditRecord) -> None:
        self._entries.append(entry)

    def for_user(self, user_id: str, limit: int = 100) -> list[AuditRecord]:
        """Up to *limit* entries for *user_id*, newest first."""
        matching = [e for e in reversed(self._entries) if e.user_id == user_id]
        return matching[:limit]

    def export_json(self, user_id: str, path: str | Path) -> Path:
        """Write the user's entries to *path* as indented JSON; returns the path."""
        path = Path(path)
        entries = [e.to_dict() for e in self.for_user(user_id, limit=1000)]
        path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
        return path

    def __len__(self) -> int:
        return len(self._entries)
