"""Run-level types returned by the line runner."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class RunStatus(str, Enum):
    """Overall run outcome."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RunError:
    """The error that stopped a run (or the first one seen, when lines are skipped)."""

    code: str
    message: str
    line_number: int | None = None


@dataclass(frozen=True)
class RunResult:
    """Outcome summary for a run."""

    status: RunStatus
    lines_read: int = 0
    lines_written: int = 0
    lines_failed: int = 0
    error: RunError | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is RunStatus.SUCCEEDED


__all__ = ["RunError", "RunResult", "RunStatus"]
