"""Frontend synchronization engine: runs the phases in order.

Phase 1: packages          PackageManifestSynchronizer (package.json + npm install)
Phase 2: internal_modules  copy internal resources into node_modules
Phase 3: imports           ModuleImportResolver (entry file)
Phase 4: bundler_config    BundlerConfigSynchronizer (webpack.config.js)
Phase 5: bundle            node webpack (optional)

Runs are synchronous and hold no state between calls beyond the files they
write. Concurrent runs against one project directory must be serialized by
the caller.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import structlog

from frontend_sync.bundler import BundlerConfigSynchronizer, resolve_output_target, run_bundler
from frontend_sync.core.config import SyncSettings
from frontend_sync.exceptions import FrontendSyncError
from frontend_sync.imports import ModuleImportResolver
from frontend_sync.internal_modules import install_internal_modules
from frontend_sync.models.project import ProjectLayout
from frontend_sync.models.result import EngineResult, SyncResult
from frontend_sync.models.snapshot import DependencySnapshot
from frontend_sync.packages import PackageManifestSynchronizer
from frontend_sync.progress import ProgressTracker
from frontend_sync.store.base import FileStore
from frontend_sync.store.local import LocalFileStore
from frontend_sync.tools.locator import ToolLocator
from frontend_sync.tools.runner import ExternalToolRunner

log = structlog.get_logger("frontend_sync.engine")


class FrontendSyncEngine:
    """Reconcile package.json, the entry file and the bundler config, then bundle."""

    def __init__(
        self,
        settings: SyncSettings | None = None,
        store: FileStore | None = None,
        tool_runner: ExternalToolRunner | None = None,
        locator_factory: Callable[[Path], ToolLocator] = ToolLocator,
    ) -> None:
        self.settings = settings or SyncSettings()
        self.store = store or LocalFileStore()
        self.tool_runner = tool_runner or ExternalToolRunner()
        self.locator_factory = locator_factory
        self.progress = ProgressTracker()

    def run(
        self,
        snapshot: DependencySnapshot,
        layout: ProjectLayout,
        webpack_template: str | Path | None = None,
        generate_bundle: bool | None = None,
    ) -> EngineResult:
        self.progress.reset()
        if generate_bundle is None:
            generate_bundle = self.settings.generate_bundle
        locator = self.locator_factory(layout.project_root)
        results: list[SyncResult] = []

        log.info("engine.start", project=str(layout.project_root))

        results.append(self._phase("packages", lambda: self._packages(snapshot, layout, locator)))

        if layout.internal_module_dirs:
            results.append(
                self._phase(
                    "internal_modules",
                    lambda: install_internal_modules(
                        layout.internal_module_dirs,
                        layout.node_modules,
                        store=self.store,
                        internal_package=self.settings.internal_package,
                    ),
                )
            )
        else:
            self.progress.skip("internal_modules", "no internal module directories")

        resolver = ModuleImportResolver(
            store=self.store,
            convert_html=self.settings.convert_html,
            internal_package=self.settings.internal_package,
        )
        results.append(
            self._phase(
                "imports",
                lambda: resolver.resolve(
                    layout.entry_file, snapshot, layout.frontend_dir, layout.node_modules
                ),
            )
        )

        results.append(
            self._phase("bundler_config", lambda: self._bundler_config(layout, webpack_template))
        )

        if generate_bundle:
            results.append(self._phase("bundle", lambda: self._bundle(layout, locator)))
        else:
            self.progress.skip("bundle", "bundle generation disabled")

        engine_result = EngineResult(results=results, summary=self.progress.get_summary())
        log.info(
            "engine.done",
            writes=len(engine_result.writes),
            invocations=len(engine_result.invocations),
            degraded=engine_result.degraded,
        )
        return engine_result

    def _phase(self, name: str, step: Callable[[], SyncResult]) -> SyncResult:
        try:
            with self.progress.track(name) as record:
                result = step()
                record.detail = result.detail or result.status
        except FrontendSyncError as e:
            log.error("engine.phase_failed", phase=name, error=str(e))
            raise
        return result

    def _packages(
        self, snapshot: DependencySnapshot, layout: ProjectLayout, locator: ToolLocator
    ) -> SyncResult:
        synchronizer = PackageManifestSynchronizer(
            tool_runner=self.tool_runner,
            store=self.store,
            locator=locator,
            convert_html=self.settings.convert_html,
            internal_package=self.settings.internal_package,
        )
        return synchronizer.synchronize(layout.manifest, snapshot)

    def _bundler_config(
        self, layout: ProjectLayout, webpack_template: str | Path | None
    ) -> SyncResult:
        target = resolve_output_target(layout.build)
        synchronizer = BundlerConfigSynchronizer(store=self.store)
        return synchronizer.synchronize(
            webpack_template, layout.bundler_config, target, project_root=layout.project_root
        )

    def _bundle(self, layout: ProjectLayout, locator: ToolLocator) -> SyncResult:
        run = run_bundler(
            layout.project_root, layout.node_modules, tool_runner=self.tool_runner, locator=locator
        )
        return SyncResult(phase="bundle", status="updated", invocations=[run], detail="webpack ok")
