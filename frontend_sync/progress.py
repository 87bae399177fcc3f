"""Per-phase status and timing for one engine run."""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable

import structlog

from frontend_sync.exceptions import FrontendSyncError

log = structlog.get_logger("frontend_sync.engine")

PhaseListener = Callable[["PhaseRecord"], None]


@dataclass
class PhaseRecord:
    phase: str
    status: str = "running"  # "running" | "completed" | "failed" | "skipped"
    started: float | None = None
    finished: float | None = None
    detail: str = ""
    error: str | None = None

    @property
    def duration(self) -> float | None:
        if self.started is None or self.finished is None:
            return None
        return round(self.finished - self.started, 2)

    @property
    def done(self) -> bool:
        return self.status != "running"

    def as_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "status": self.status,
            "duration": self.duration,
            "detail": self.detail,
            "error": self.error,
        }


class ProgressTracker:
    """Record each phase of a run and tell listeners when one finishes.

    Listeners survive :meth:`reset`, so the CLI can register once and see
    every run of an engine.
    """

    def __init__(self) -> None:
        self.records: list[PhaseRecord] = []
        self.listeners: list[PhaseListener] = []

    def reset(self) -> None:
        self.records = []

    @contextmanager
    def track(self, phase: str) -> Iterator[PhaseRecord]:
        """Time the enclosed block as *phase*; a FrontendSyncError marks it failed."""
        record = PhaseRecord(phase=phase, started=time.monotonic())
        self.records.append(record)
        try:
            yield record
        except FrontendSyncError as e:
            record.status = "failed"
            record.error = str(e)
            raise
        else:
            record.status = "completed"
        finally:
            record.finished = time.monotonic()
            if record.done:
                self._finished(record)

    def skip(self, phase: str, reason: str) -> None:
        record = PhaseRecord(phase=phase, status="skipped", detail=reason)
        self.records.append(record)
        self._finished(record)

    def status_of(self, phase: str) -> str | None:
        for record in self.records:
            if record.phase == phase:
                return record.status
        return None

    def get_summary(self) -> dict[str, Any]:
        return {
            "phases": [r.as_dict() for r in self.records],
            "total_duration": round(sum(r.duration or 0 for r in self.records), 2),
        }

    def _finished(self, record: PhaseRecord) -> None:
        log.debug("engine.phase", phase=record.phase, status=record.status, duration=record.duration)
        for listener in self.listeners:
            listener(record)
