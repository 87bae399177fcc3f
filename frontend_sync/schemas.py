"""Work-order schema: the dependency collector's output as JSON."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from frontend_sync.core.config import SyncSettings
from frontend_sync.models.project import BuildFacts, ProjectLayout
from frontend_sync.models.snapshot import DependencySnapshot, ThemeDescriptor


class ThemeSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_url: str
    theme_url: str
    header_inline_contents: list[str] = Field(default_factory=list)
    html_attributes: dict[str, str] = Field(default_factory=dict)

    def to_descriptor(self) -> ThemeDescriptor:
        return ThemeDescriptor(
            base_url=self.base_url,
            theme_url=self.theme_url,
            header_inline_contents=tuple(self.header_inline_contents),
            html_attributes=tuple(self.html_attributes.items()),
        )


class DependenciesSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    packages: list[str] = Field(default_factory=list)
    modules: list[str] = Field(default_factory=list)
    scripts: list[str] = Field(default_factory=list)
    html_imports: list[str] = Field(default_factory=list)


class ProjectSpec(BaseModel):
    """Project layout and build facts; relative paths are resolved against ``root``."""

    model_config = ConfigDict(extra="forbid")

    root: str = "."
    packaging: str = "archive"
    output_directory: str = "target/classes"
    build_directory: str = "target"
    final_name: str = "app"
    npm_folder: str | None = None
    node_modules: str | None = None
    entry_file: str | None = None
    bundler_config: str | None = None


class WorkOrder(BaseModel):
    model_config = ConfigDict(extra="forbid")

    project: ProjectSpec = Field(default_factory=ProjectSpec)
    dependencies: DependenciesSpec = Field(default_factory=DependenciesSpec)
    theme: ThemeSpec | None = None
    internal_module_dirs: list[str] = Field(default_factory=list)
    webpack_template: str | None = None
    generate_bundle: bool | None = None
    convert_html: bool | None = None

    def to_snapshot(self) -> DependencySnapshot:
        deps = self.dependencies
        return DependencySnapshot.of(
            packages=deps.packages,
            modules=deps.modules,
            scripts=deps.scripts,
            html_imports=deps.html_imports,
            theme=self.theme.to_descriptor() if self.theme else None,
        )

    def to_layout(self, settings: SyncSettings, base_dir: Path | None = None) -> ProjectLayout:
        """Build the layout; *base_dir* anchors a relative ``project.root``."""
        p = self.project
        root = Path(p.root)
        if not root.is_absolute() and base_dir is not None:
            root = base_dir / root

        def under(base: Path, value: str) -> Path:
            path = Path(value)
            return path if path.is_absolute() else base / path

        npm_folder = under(root, p.npm_folder or ".")
        return ProjectLayout(
            project_root=root,
            build=BuildFacts(
                packaging=p.packaging,
                output_directory=under(root, p.output_directory),
                build_directory=under(root, p.build_directory),
                final_name=p.final_name,
            ),
            npm_folder=npm_folder,
            node_modules=under(npm_folder, p.node_modules or settings.node_modules),
            entry_file=under(root, p.entry_file or settings.entry_file),
            bundler_config=under(npm_folder, p.bundler_config or settings.bundler_config),
            internal_module_dirs=[under(root, d) for d in self.internal_module_dirs],
        )
