"""Tests for the work-order schema."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from frontend_sync.core.config import SyncSettings
from frontend_sync.schemas import WorkOrder


class TestWorkOrder:
    def test_defaults(self):
        work = WorkOrder.model_validate({})
        assert work.project.packaging == "archive"
        assert work.theme is None
        assert work.generate_bundle is None

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            WorkOrder.model_validate({"dependencies": {"pkgs": []}})

    def test_to_snapshot(self):
        work = WorkOrder.model_validate(
            {
                "dependencies": {"packages": ["a", "a"], "html_imports": ["frontend://x.html"]},
                "theme": {"base_url": "src/", "theme_url": "theme/lumo/"},
            }
        )
        snapshot = work.to_snapshot()
        assert snapshot.packages == frozenset({"a"})
        assert snapshot.html_imports == frozenset({"frontend://x.html"})
        assert snapshot.theme.theme_url == "theme/lumo/"

    def test_to_layout_relative_root(self, tmp_path: Path):
        work = WorkOrder.model_validate(
            {"project": {"root": "app", "npm_folder": "web"}, "internal_module_dirs": ["res"]}
        )
        layout = work.to_layout(SyncSettings(), base_dir=tmp_path)

        root = tmp_path / "app"
        assert layout.project_root == root
        assert layout.manifest == root / "web" / "package.json"
        assert layout.node_modules == root / "web" / "node_modules"
        assert layout.bundler_config == root / "web" / "webpack.config.js"
        assert layout.entry_file == root / "frontend" / "main.js"
        assert layout.build.output_directory == root / "target" / "classes"
        assert layout.internal_module_dirs == [root / "res"]

    def test_to_layout_settings_paths(self, tmp_path: Path):
        settings = SyncSettings(entry_file="src/index.js", node_modules="deps")
        layout = WorkOrder.model_validate({"project": {"root": str(tmp_path)}}).to_layout(settings)
        assert layout.entry_file == tmp_path / "src" / "index.js"
        assert layout.node_modules == tmp_path / "deps"
