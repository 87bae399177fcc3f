"""PackageManifestSynchronizer: keep package.json in line with declared npm packages.

Resolution is split into pure functions (``ensure_sections``,
``compute_new_dependencies``, ``compute_missing_dev_dependencies``) and an
apply step that writes the manifest and runs npm.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import structlog

from frontend_sync.core.config import (
    BASELINE_PACKAGE,
    DEV_DEPENDENCIES,
    INTERNAL_PACKAGE,
    package_root,
)
from frontend_sync.exceptions import ManifestIOError
from frontend_sync.html_imports import html_imports_to_packages
from frontend_sync.models.result import RunResult, SyncResult, ToolMode
from frontend_sync.models.snapshot import DependencySnapshot
from frontend_sync.store.base import FileStore
from frontend_sync.store.local import LocalFileStore
from frontend_sync.tools.locator import ToolLocator
from frontend_sync.tools.runner import ExternalToolRunner

log = structlog.get_logger("frontend_sync.packages")

SECTIONS = ("dependencies", "devDependencies")

# Constraint recorded for names added before npm resolves a real version.
PENDING_CONSTRAINT = "*"

# Anything not starting with "." or "/" (local files are not packages)
_NON_LOCAL_RE = re.compile(r"[^./].*", re.DOTALL)
# A plain script file name such as "jquery.min.js"
_BARE_JS_RE = re.compile(r"[a-z].*\.js", re.IGNORECASE | re.DOTALL)

NPM_INSTALL_FLAGS = ["--no-package-lock", "install"]
SAVE_FLAGS = {"dependencies": "--save", "devDependencies": "--save-dev"}


# ── pure resolution ──────────────────────────────────────────────────────


def ensure_sections(manifest: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *manifest* with both dependency sections present."""
    result = dict(manifest)
    for section in SECTIONS:
        if not isinstance(result.get(section), dict):
            result[section] = {}
        else:
            result[section] = dict(result[section])
    return result


def is_installable(name: str, internal_package: str = INTERNAL_PACKAGE) -> bool:
    """True for names npm can install: not local paths, bare .js files or internal modules."""
    internal = package_root(internal_package)
    return (
        _NON_LOCAL_RE.fullmatch(name) is not None
        and _BARE_JS_RE.fullmatch(name) is None
        and name != internal
        and not name.startswith(internal + "/")
    )


def compute_new_dependencies(
    snapshot: DependencySnapshot,
    current: Mapping[str, Any],
    convert_html: bool = True,
    internal_package: str = INTERNAL_PACKAGE,
) -> list[str]:
    """Sorted list of packages to add to ``dependencies``."""
    declared: set[str] = set(snapshot.packages)
    if convert_html:
        declared |= html_imports_to_packages(snapshot.html_imports)

    new = {
        name
        for name in declared
        if name not in current and is_installable(name, internal_package)
    }
    if BASELINE_PACKAGE not in current:
        new.add(BASELINE_PACKAGE)
    return sorted(new)


def compute_missing_dev_dependencies(
    current: Mapping[str, Any],
    required: Iterable[str] = DEV_DEPENDENCIES,
) -> list[str]:
    """Sorted list of required dev tooling packages absent from ``devDependencies``."""
    return sorted(set(required) - set(current))


def merge_dependencies(
    manifest: Mapping[str, Any], section: str, names: Iterable[str]
) -> dict[str, Any]:
    """Return a copy of *manifest* with *names* added to *section*."""
    result = ensure_sections(manifest)
    for name in names:
        result[section].setdefault(name, PENDING_CONSTRAINT)
    return result


def withdraw_pending(
    manifest: Mapping[str, Any], failed: Mapping[str, Iterable[str]]
) -> dict[str, Any]:
    """Return a copy of *manifest* without the *failed* names still at the pending constraint."""
    result = ensure_sections(manifest)
    for section, names in failed.items():
        for name in names:
            if result[section].get(name) == PENDING_CONSTRAINT:
                del result[section][name]
    return result


def serialize_manifest(manifest: Mapping[str, Any]) -> str:
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


# ── apply step ───────────────────────────────────────────────────────────


class PackageManifestSynchronizer:
    """Merge required packages into package.json and install them with npm.

    Names are recorded with a pending constraint before npm runs. Names
    whose install fails are withdrawn again so the next run retries them.
    The npm command is resolved before anything is recorded.
    """

    def __init__(
        self,
        tool_runner: ExternalToolRunner | None = None,
        store: FileStore | None = None,
        locator: ToolLocator | None = None,
        convert_html: bool = True,
        internal_package: str = INTERNAL_PACKAGE,
    ) -> None:
        self.tool_runner = tool_runner or ExternalToolRunner()
        self.store = store or LocalFileStore()
        self.locator = locator
        self.convert_html = convert_html
        self.internal_package = internal_package

    def synchronize(self, manifest_path: str | Path, snapshot: DependencySnapshot) -> SyncResult:
        manifest_path = Path(manifest_path)
        result = SyncResult(phase="packages")

        manifest = self._load(manifest_path, result)

        new_deps = compute_new_dependencies(
            snapshot,
            manifest["dependencies"],
            convert_html=self.convert_html,
            internal_package=self.internal_package,
        )
        new_dev_deps = compute_missing_dev_dependencies(manifest["devDependencies"])

        if not new_deps:
            log.info("packages.no_update", section="dependencies")
        if not new_dev_deps:
            log.info("packages.no_update", section="devDependencies")
        pending = {
            section: names
            for section, names in (("dependencies", new_deps), ("devDependencies", new_dev_deps))
            if names
        }
        if not pending:
            return result

        npm_folder = manifest_path.parent
        npm = (self.locator or ToolLocator(npm_folder)).npm_command()

        for section, names in pending.items():
            manifest = merge_dependencies(manifest, section, names)
        self._write(manifest_path, manifest)
        result.written.append(str(manifest_path))

        installed: set[str] = set()
        try:
            for section, names in pending.items():
                run = self._install(npm, npm_folder, names, SAVE_FLAGS[section])
                result.invocations.append(run)
                if run.ok:
                    installed.add(section)
        finally:
            failed = {s: names for s, names in pending.items() if s not in installed}
            if failed:
                self._withdraw(manifest_path, failed)

        if failed:
            result.status = "degraded"
            result.detail = (
                f"npm exited non-zero for {len(failed)} install(s); "
                "dependencies may be partially installed"
            )
            log.warning(
                "packages.degraded",
                failed=sorted(failed),
                manifest=str(manifest_path),
            )
        else:
            result.status = "updated"
            result.detail = f"added {len(new_deps)} dependencies, {len(new_dev_deps)} dev dependencies"
        return result

    def _load(self, manifest_path: Path, result: SyncResult) -> dict[str, Any]:
        if not self.store.is_file(manifest_path):
            log.info("packages.create_manifest", path=str(manifest_path))
            manifest = ensure_sections({})
            self._write(manifest_path, manifest)
            result.written.append(str(manifest_path))
            return manifest
        return self._read(manifest_path)

    def _read(self, manifest_path: Path) -> dict[str, Any]:
        try:
            raw = self.store.read_text(manifest_path)
        except OSError as e:
            raise ManifestIOError(manifest_path, str(e)) from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ManifestIOError(manifest_path, f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ManifestIOError(manifest_path, "top-level value is not a JSON object")
        return ensure_sections(data)

    def _write(self, manifest_path: Path, manifest: Mapping[str, Any]) -> None:
        try:
            self.store.write_text(manifest_path, serialize_manifest(manifest))
        except OSError as e:
            raise ManifestIOError(manifest_path, str(e)) from e

    def _withdraw(self, manifest_path: Path, failed: Mapping[str, list[str]]) -> None:
        """Drop names npm did not install, unless npm already pinned them."""
        # npm may have rewritten the file, so start from what is on disk
        manifest = self._read(manifest_path)
        withdrawn = withdraw_pending(manifest, failed)
        if withdrawn == manifest:
            return
        self._write(manifest_path, withdrawn)
        log.info("packages.withdrawn", sections={s: len(n) for s, n in failed.items()})

    def _install(
        self, npm: list[str], npm_folder: Path, packages: list[str], save_flag: str
    ) -> RunResult:
        log.info("packages.install", save=save_flag, packages=packages)
        return self.tool_runner.run(
            npm,
            NPM_INSTALL_FLAGS + [save_flag] + packages,
            npm_folder,
            ToolMode.PACKAGE_MANAGER,
        )
