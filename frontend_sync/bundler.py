"""BundlerConfigSynchronizer: render webpack.config.js and run the bundle build."""

from __future__ import annotations

import os
from importlib import resources
from pathlib import Path, PurePath

import httpx
import structlog

from frontend_sync.exceptions import (
    BundlerConfigIOError,
    TemplateRenderError,
    UnsupportedPackagingError,
)
from frontend_sync.models.project import BuildFacts
from frontend_sync.models.result import (
    BundlerOutputTarget,
    PackagingMode,
    RunResult,
    SyncResult,
    ToolMode,
)
from frontend_sync.store.base import FileStore
from frontend_sync.store.local import LocalFileStore
from frontend_sync.tools.locator import ToolLocator
from frontend_sync.tools.runner import ExternalToolRunner

log = structlog.get_logger("frontend_sync.bundler")

OUTPUT_DIRECTORY_TOKEN = "{{OUTPUT_DIRECTORY}}"
PLACEHOLDER_MARKER = "{{"
DEFAULT_TEMPLATE = "webpack.config.js"

# Resources subdirectory served from library (jar) packaging
LIBRARY_RESOURCES_DIR = Path("META-INF") / "resources"


def resolve_output_target(facts: BuildFacts) -> BundlerOutputTarget:
    """Decide where the bundler writes its build for the project's packaging mode."""
    mode = PackagingMode.parse(facts.packaging)
    if mode is PackagingMode.LIBRARY:
        directory = Path(facts.output_directory) / LIBRARY_RESOURCES_DIR
    elif mode is PackagingMode.ARCHIVE:
        directory = Path(facts.build_directory) / facts.final_name
    else:
        raise UnsupportedPackagingError(facts.packaging)
    return BundlerOutputTarget(output_directory=directory, packaging_mode=mode)


def relative_output_directory(output_directory: Path, project_root: Path) -> str:
    """Output directory relative to the project root, with forward slashes."""
    output_directory = Path(output_directory)
    if not output_directory.is_absolute():
        return PurePath(output_directory).as_posix()
    rel = os.path.relpath(output_directory, Path(project_root).absolute())
    return PurePath(rel).as_posix()


def render_template(template: str, output_directory: str) -> str:
    rendered = template.replace(OUTPUT_DIRECTORY_TOKEN, output_directory)
    if PLACEHOLDER_MARKER in rendered:
        line_no = next(
            i for i, line in enumerate(rendered.splitlines(), 1) if PLACEHOLDER_MARKER in line
        )
        raise TemplateRenderError(
            f"Bundler template still contains a '{PLACEHOLDER_MARKER}' placeholder "
            f"after rendering (line {line_no}); template and engine are out of sync"
        )
    return rendered


class BundlerConfigSynchronizer:
    """Keep the bundler configuration rendered from its template."""

    def __init__(self, store: FileStore | None = None, http_timeout: float = 30.0) -> None:
        self.store = store or LocalFileStore()
        self.http_timeout = http_timeout

    def load_template(self, template_source: str | Path | None) -> str:
        """Template text from the bundled default, an http(s) URL or a file path."""
        if template_source is None or str(template_source) == DEFAULT_TEMPLATE:
            return resources.files("frontend_sync.templates").joinpath(DEFAULT_TEMPLATE).read_text(
                encoding="utf-8"
            )

        source = str(template_source)
        if source.startswith(("http://", "https://")):
            try:
                response = httpx.get(source, timeout=self.http_timeout, follow_redirects=True)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise TemplateRenderError(f"Failed to fetch bundler template '{source}': {e}") from e
            return response.text

        try:
            return self.store.read_text(Path(source))
        except OSError as e:
            raise TemplateRenderError(f"Failed to read bundler template '{source}': {e}") from e

    def synchronize(
        self,
        template_source: str | Path | None,
        target_config_path: str | Path,
        output_target: BundlerOutputTarget,
        project_root: str | Path | None = None,
    ) -> SyncResult:
        target_config_path = Path(target_config_path)
        project_root = Path(project_root) if project_root is not None else target_config_path.parent
        result = SyncResult(phase="bundler_config")

        output_dir = relative_output_directory(output_target.output_directory, project_root)
        rendered = render_template(self.load_template(template_source), output_dir)

        try:
            current = (
                self.store.read_text(target_config_path)
                if self.store.is_file(target_config_path)
                else None
            )
        except OSError as e:
            raise BundlerConfigIOError(target_config_path, str(e)) from e

        if current == rendered:
            log.info("bundler.no_update", path=str(target_config_path))
            return result

        try:
            self.store.write_text(target_config_path, rendered)
        except OSError as e:
            raise BundlerConfigIOError(target_config_path, str(e)) from e

        log.info(
            "bundler.config_written",
            path=str(target_config_path),
            output_directory=output_dir,
            packaging=output_target.packaging_mode.value,
        )
        result.status = "updated"
        result.written.append(str(target_config_path))
        result.detail = f"output directory {output_dir}"
        return result


def run_bundler(
    project_root: str | Path,
    node_modules: str | Path,
    tool_runner: ExternalToolRunner | None = None,
    locator: ToolLocator | None = None,
) -> RunResult:
    """Run ``node node_modules/.bin/webpack`` in the project root; non-zero exit raises."""
    project_root = Path(project_root)
    locator = locator or ToolLocator(project_root)
    tool_runner = tool_runner or ExternalToolRunner()

    webpack = locator.locate_webpack(node_modules)
    node = locator.locate_node()
    return tool_runner.run(
        str(node.absolute()),
        [str(webpack.absolute())],
        project_root,
        ToolMode.BUNDLER,
    )
