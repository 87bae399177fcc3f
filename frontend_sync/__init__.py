"""frontend-sync: keep package.json, the generated JS entry file and the bundler config in sync."""

__version__ = "0.1.0"

from frontend_sync.bundler import BundlerConfigSynchronizer, resolve_output_target
from frontend_sync.exceptions import (
    BundlerConfigIOError,
    EntryFileIOError,
    FrontendSyncError,
    InternalModuleIOError,
    ManifestIOError,
    TemplateRenderError,
    ToolExecutionError,
    ToolResolutionError,
    UnresolvedImportError,
    UnsupportedPackagingError,
)
from frontend_sync.imports import ModuleImportResolver
from frontend_sync.models import (
    BuildFacts,
    BundlerOutputTarget,
    DependencySnapshot,
    PackagingMode,
    ProjectLayout,
    SyncResult,
    ThemeDescriptor,
)
from frontend_sync.orchestrator import FrontendSyncEngine
from frontend_sync.packages import PackageManifestSynchronizer
from frontend_sync.tools.runner import ExternalToolRunner

__all__ = [
    "BuildFacts",
    "BundlerConfigIOError",
    "BundlerConfigSynchronizer",
    "BundlerOutputTarget",
    "DependencySnapshot",
    "EntryFileIOError",
    "ExternalToolRunner",
    "FrontendSyncEngine",
    "FrontendSyncError",
    "InternalModuleIOError",
    "ManifestIOError",
    "ModuleImportResolver",
    "PackageManifestSynchronizer",
    "PackagingMode",
    "ProjectLayout",
    "SyncResult",
    "TemplateRenderError",
    "ThemeDescriptor",
    "ToolExecutionError",
    "ToolResolutionError",
    "UnresolvedImportError",
    "UnsupportedPackagingError",
    "resolve_output_target",
]
