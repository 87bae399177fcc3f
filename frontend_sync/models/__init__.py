"""Data models for frontend synchronization."""

from frontend_sync.models.project import BuildFacts, ProjectLayout
from frontend_sync.models.result import (
    BundlerOutputTarget,
    EngineResult,
    PackagingMode,
    RunResult,
    SyncResult,
    ToolMode,
    UnresolvedImport,
)
from frontend_sync.models.snapshot import DependencySnapshot, ThemeDescriptor

__all__ = [
    "BuildFacts",
    "BundlerOutputTarget",
    "DependencySnapshot",
    "EngineResult",
    "PackagingMode",
    "ProjectLayout",
    "RunResult",
    "SyncResult",
    "ThemeDescriptor",
    "ToolMode",
    "UnresolvedImport",
]
