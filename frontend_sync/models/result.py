"""Result types returned by the synchronizers and the tool runner."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class ToolMode(str, enum.Enum):
    PACKAGE_MANAGER = "package_manager"
    BUNDLER = "bundler"


class PackagingMode(str, enum.Enum):
    LIBRARY = "library"
    ARCHIVE = "archive"

    @classmethod
    def parse(cls, packaging: str) -> PackagingMode | None:
        """Map a build-system packaging string to a mode, or None if unknown."""
        return _PACKAGING_ALIASES.get(packaging.strip().lower())


_PACKAGING_ALIASES = {
    "library": PackagingMode.LIBRARY,
    "jar": PackagingMode.LIBRARY,
    "archive": PackagingMode.ARCHIVE,
    "war": PackagingMode.ARCHIVE,
}


@dataclass(frozen=True)
class UnresolvedImport:
    original_path: str
    translated_path: str

    @property
    def was_translated(self) -> bool:
        return self.original_path != self.translated_path


@dataclass(frozen=True)
class BundlerOutputTarget:
    output_directory: Path
    packaging_mode: PackagingMode


@dataclass
class RunResult:
    """Outcome of one external process invocation."""

    command: list[str]
    exit_code: int
    stderr: str = ""
    mode: ToolMode = ToolMode.PACKAGE_MANAGER

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass
class SyncResult:
    """Outcome of one synchronization phase."""

    phase: str
    status: str = "unchanged"  # "updated" | "unchanged" | "degraded"
    written: list[str] = field(default_factory=list)
    invocations: list[RunResult] = field(default_factory=list)
    detail: str = ""

    @property
    def changed(self) -> bool:
        return bool(self.written) or bool(self.invocations)


@dataclass
class EngineResult:
    """Engine return value: per-phase results plus the progress summary."""

    results: list[SyncResult] = field(default_factory=list)
    summary: dict[str, Any] = field(default_factory=dict)

    @property
    def degraded(self) -> bool:
        return any(r.status == "degraded" for r in self.results)

    @property
    def writes(self) -> list[str]:
        return [path for r in self.results for path in r.written]

    @property
    def invocations(self) -> list[RunResult]:
        return [run for r in self.results for run in r.invocations]

    def get(self, phase: str) -> SyncResult | None:
        for r in self.results:
            if r.phase == phase:
                return r
        return None
