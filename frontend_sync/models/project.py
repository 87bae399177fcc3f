"""Data models for project layout and build facts."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class BuildFacts:
    """Build-output facts supplied by the surrounding build system."""

    packaging: str  # "library" | "archive" (also "jar" | "war")
    output_directory: Path  # compiled resources, e.g. target/classes
    build_directory: Path  # e.g. target
    final_name: str  # e.g. my-app-1.0


@dataclass
class ProjectLayout:
    """Locations of everything the engine reads or writes."""

    project_root: Path
    build: BuildFacts
    npm_folder: Path | None = None  # folder holding package.json
    node_modules: Path | None = None
    entry_file: Path | None = None
    bundler_config: Path | None = None
    internal_module_dirs: list[Path] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.project_root = Path(self.project_root)
        if self.npm_folder is None:
            self.npm_folder = self.project_root
        if self.node_modules is None:
            self.node_modules = Path(self.npm_folder) / "node_modules"
        if self.entry_file is None:
            self.entry_file = self.project_root / "frontend" / "main.js"
        if self.bundler_config is None:
            self.bundler_config = Path(self.npm_folder) / "webpack.config.js"

    @property
    def manifest(self) -> Path:
        return Path(self.npm_folder) / "package.json"

    @property
    def frontend_dir(self) -> Path:
        """Root for ``./`` imports: the directory holding the entry file."""
        return Path(self.entry_file).parent
