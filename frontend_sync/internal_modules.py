"""Install the project's internal frontend resources into node_modules.

Resources shipped with the server side (connectors, helper scripts) are
copied to ``node_modules/<internal package>/`` so imports under that
namespace resolve like any other package.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from frontend_sync.core.config import INTERNAL_PACKAGE, package_root
from frontend_sync.exceptions import InternalModuleIOError
from frontend_sync.models.result import SyncResult
from frontend_sync.store.base import FileStore
from frontend_sync.store.local import LocalFileStore

log = structlog.get_logger("frontend_sync.imports")


def internal_package_dir(node_modules_root: str | Path, internal_package: str = INTERNAL_PACKAGE) -> Path:
    return Path(node_modules_root) / package_root(internal_package)


def install_internal_modules(
    source_dirs: Iterable[str | Path],
    node_modules_root: str | Path,
    store: FileStore | None = None,
    internal_package: str = INTERNAL_PACKAGE,
) -> SyncResult:
    """Copy every file under *source_dirs* into the internal package, skipping unchanged files.

    Later source directories win when two provide the same relative path.
    """
    store = store or LocalFileStore()
    target_root = internal_package_dir(node_modules_root, internal_package)
    result = SyncResult(phase="internal_modules")

    planned: dict[Path, Path] = {}
    for source in source_dirs:
        source = Path(source)
        files = store.list_files(source)
        if not files:
            log.warning("imports.internal_source_empty", source=str(source))
        for rel in files:
            planned[rel] = source / rel

    for rel, src in sorted(planned.items()):
        dst = target_root / rel
        try:
            content = store.read_bytes(src)
            if store.is_file(dst) and store.read_bytes(dst) == content:
                continue
            store.write_bytes(dst, content)
        except OSError as e:
            raise InternalModuleIOError(dst, f"copy from {src} failed: {e}") from e
        result.written.append(str(dst))

    if result.written:
        result.status = "updated"
        log.info("imports.internal_installed", count=len(result.written), target=str(target_root))
    result.detail = f"{len(planned)} files, {len(result.written)} copied"
    return result
