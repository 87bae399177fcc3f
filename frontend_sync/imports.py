"""ModuleImportResolver: generate the JS entry file importing every declared module."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

import structlog

from frontend_sync.core.config import INTERNAL_PACKAGE, package_root
from frontend_sync.exceptions import EntryFileIOError, UnresolvedImportError
from frontend_sync.html_imports import html_import_to_js_module, strip_protocol
from frontend_sync.models.result import SyncResult, UnresolvedImport
from frontend_sync.models.snapshot import DependencySnapshot, ThemeDescriptor
from frontend_sync.store.base import FileStore
from frontend_sync.store.local import LocalFileStore

log = structlog.get_logger("frontend_sync.imports")

# Leading indentation on each line, and line breaks, of inline header HTML
_INLINE_WHITESPACE_RE = re.compile(r"(^\s+|\s?\n)", re.MULTILINE)


def to_valid_browser_import(path: str) -> str:
    """Canonicalize an import so the browser/bundler can resolve it.

    Relative and protocol-prefixed project paths become ``./``-prefixed;
    package paths (``@scope/pkg/...`` or ``pkg/...``) are left as they are.
    """
    if path.startswith(("./", "../", "@")):
        return path
    stripped = strip_protocol(path)
    if stripped != path:
        return "./" + stripped.lstrip("/")
    if path.startswith("/"):
        return "." + path
    return path


def sort_imports(modules: Iterable[str]) -> list[str]:
    """Canonicalize, dedupe and order imports in reverse lexicographic order."""
    return sorted({to_valid_browser_import(m) for m in modules}, reverse=True)


def theme_header_lines(theme: ThemeDescriptor) -> list[str]:
    lines: list[str] = []
    if theme.header_inline_contents:
        lines.append("const div = document.createElement('div');")
        for html in theme.header_inline_contents:
            lines.append(f"div.innerHTML = '{_INLINE_WHITESPACE_RE.sub('', html)}';")
            lines.append(
                "document.head.insertBefore(div.firstElementChild, document.head.firstChild);"
            )
    for key, value in theme.html_attributes:
        lines.append(f"document.body.setAttribute('{key}', '{value}');")
    return lines


def build_entry_lines(theme: ThemeDescriptor | None, imports: Iterable[str]) -> list[str]:
    lines = theme_header_lines(theme) if theme is not None else []
    lines.extend(f"import '{path}';" for path in imports)
    return lines


class ModuleImportResolver:
    """Resolve declared modules against the file tree and write the entry file.

    ``./`` imports resolve under the local root (the entry file's directory),
    everything else under ``node_modules``. Theme-translated paths are tried
    first, then the original path.
    """

    def __init__(
        self,
        store: FileStore | None = None,
        convert_html: bool = True,
        internal_package: str = INTERNAL_PACKAGE,
    ) -> None:
        self.store = store or LocalFileStore()
        self.convert_html = convert_html
        self.internal_package = package_root(internal_package)

    def resolve(
        self,
        entry_file_path: str | Path,
        snapshot: DependencySnapshot,
        local_file_root: str | Path,
        node_modules_root: str | Path,
    ) -> SyncResult:
        entry_file_path = Path(entry_file_path)
        local_file_root = Path(local_file_root)
        node_modules_root = Path(node_modules_root)

        modules = self.collect_modules(snapshot, node_modules_root)
        ordered = sort_imports(modules)
        imports = self._resolve_imports(ordered, snapshot.theme, local_file_root, node_modules_root)
        lines = build_entry_lines(snapshot.theme, imports)
        return self._update_entry_file(entry_file_path, lines)

    def collect_modules(self, snapshot: DependencySnapshot, node_modules_root: Path) -> set[str]:
        """Union of declared modules, translated HTML imports and scripts."""
        modules = set(snapshot.modules)
        if self.convert_html:
            for html_import in snapshot.html_imports:
                module = html_import_to_js_module(html_import)
                if module.startswith("./"):
                    module = self._in_internal_package(module[2:], node_modules_root) or module
                modules.add(module)
        for script in snapshot.scripts:
            internal = self._in_internal_package(strip_protocol(script), node_modules_root)
            modules.add(internal or script)
        return modules

    def _in_internal_package(self, path: str, node_modules_root: Path) -> str | None:
        """Path inside the internal package if the file was installed there."""
        if path.startswith(("@", "./", "../")):
            return None
        candidate = f"{self.internal_package}/{path.lstrip('/')}"
        if self.store.is_file(node_modules_root / candidate):
            return candidate
        return None

    def _file_exists(self, path: str, local_file_root: Path, node_modules_root: Path) -> bool:
        root = local_file_root if path.startswith("./") else node_modules_root
        return self.store.is_file(root / path)

    def _resolve_imports(
        self,
        ordered: list[str],
        theme: ThemeDescriptor | None,
        local_file_root: Path,
        node_modules_root: Path,
    ) -> list[str]:
        resolved: list[str] = []
        unresolved: list[UnresolvedImport] = []

        for original in ordered:
            translated = original
            if theme is not None and theme.applies_to(original):
                translated = theme.translate(original)

            if self._file_exists(translated, local_file_root, node_modules_root):
                resolved.append(translated)
            elif self._file_exists(original, local_file_root, node_modules_root):
                resolved.append(original)
            else:
                unresolved.append(UnresolvedImport(original, translated))

        if unresolved:
            log.error(
                "imports.unresolved",
                count=len(unresolved),
                imports=[u.translated_path for u in unresolved],
            )
            raise UnresolvedImportError(unresolved, node_modules_root)
        return resolved

    def _update_entry_file(self, entry_file_path: Path, lines: list[str]) -> SyncResult:
        result = SyncResult(phase="imports")
        try:
            old_lines = self.store.read_lines(entry_file_path)
        except OSError as e:
            raise EntryFileIOError(entry_file_path, str(e)) from e

        if old_lines == lines:
            log.info("imports.no_update", path=str(entry_file_path))
            result.detail = "No js modules to update"
            return result

        try:
            self.store.write_text(entry_file_path, "\n".join(lines))
        except OSError as e:
            raise EntryFileIOError(entry_file_path, str(e)) from e

        log.info("imports.updated", path=str(entry_file_path), imports=len(lines))
        result.status = "updated"
        result.written.append(str(entry_file_path))
        result.detail = f"{len(lines)} lines"
        return result
