"""Custom exceptions for frontend-sync."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from frontend_sync.models.result import UnresolvedImport


class FrontendSyncError(Exception):
    """Base exception for all synchronization errors."""


class _FileIOError(FrontendSyncError):
    kind = "file"

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to access {self.kind} '{self.path}': {reason}")


class ManifestIOError(_FileIOError):
    """Raised when package.json cannot be read, parsed or written."""

    kind = "package manifest"


class EntryFileIOError(_FileIOError):
    """Raised when the generated JS entry file cannot be read or written."""

    kind = "entry file"


class BundlerConfigIOError(_FileIOError):
    """Raised when the bundler configuration cannot be read or written."""

    kind = "bundler config"


class InternalModuleIOError(_FileIOError):
    """Raised when an internal frontend resource cannot be copied into node_modules."""

    kind = "internal module"


class UnresolvedImportError(FrontendSyncError):
    """Raised when one or more module imports exist neither locally nor in node_modules."""

    def __init__(self, unresolved: list[UnresolvedImport], node_modules_root: str | Path):
        self.unresolved = list(unresolved)
        self.node_modules_root = str(node_modules_root)
        lines = [
            "Failed to resolve the following module imports neither in the "
            f"node_modules directory '{self.node_modules_root}' nor in project files:"
        ]
        for item in self.unresolved:
            line = f"'{item.translated_path}'"
            if item.was_translated:
                line += f" (the import was translated from the path '{item.original_path}')"
            lines.append(line)
        lines.append("Double check that those files exist in the project structure.")
        super().__init__("\n".join(lines))


class UnsupportedPackagingError(FrontendSyncError):
    """Raised when the packaging mode has no known bundler output directory."""

    def __init__(self, packaging: str):
        self.packaging = packaging
        super().__init__(f"Unsupported packaging '{packaging}'")


class TemplateRenderError(FrontendSyncError):
    """Raised when the bundler template cannot be loaded or leaves placeholders behind."""


class ToolResolutionError(FrontendSyncError):
    """Raised when a required external executable cannot be located."""

    def __init__(self, tool: str, hint: str = ""):
        self.tool = tool
        self.hint = hint
        message = f"Failed to determine '{tool}' tool."
        if hint:
            message += f" {hint}"
        super().__init__(message)


class ToolExecutionError(FrontendSyncError):
    """Raised when an external process cannot start or the bundler exits non-zero."""

    def __init__(self, command: list[str], exit_code: int | None, stderr: str = ""):
        self.command = list(command)
        self.exit_code = exit_code
        self.stderr = stderr
        tool = Path(self.command[0]).name if self.command else "<unknown>"
        if exit_code is None:
            message = f"Failed to start '{tool}': {stderr}"
        else:
            message = (
                f"'{tool}' process exited with non-zero exit code {exit_code}.\n"
                f"Stderr: '{stderr}'"
            )
        super().__init__(message)
