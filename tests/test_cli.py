"""Tests for CLI commands (npm and webpack are never invoked)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from frontend_sync.cli import _WORK_ORDER_TEMPLATE, main
from frontend_sync.core.config import BASELINE_PACKAGE, DEV_DEPENDENCIES


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("frontend_sync.cli.setup_logging"):
        yield


def _synced_project(root: Path) -> None:
    """A project whose package.json already lists everything, so npm is not needed."""
    manifest = {
        "dependencies": {"@polymer/iron-icon": "^3.0.0", BASELINE_PACKAGE: "^2.0.0"},
        "devDependencies": {name: "*" for name in DEV_DEPENDENCIES},
    }
    (root / "package.json").write_text(json.dumps(manifest))
    icon = root / "node_modules" / "@polymer" / "iron-icon" / "iron-icon.js"
    icon.parent.mkdir(parents=True)
    icon.write_text("")


def _work_order(root: Path, **overrides) -> Path:
    work = {
        "project": {"root": ".", "packaging": "jar"},
        "dependencies": {
            "packages": ["@polymer/iron-icon"],
            "modules": ["@polymer/iron-icon/iron-icon.js"],
        },
    }
    work.update(overrides)
    path = root / "work.json"
    path.write_text(json.dumps(work))
    return path


class TestCreateWork:
    def test_creates_template(self, tmp_path):
        runner = CliRunner()
        output = tmp_path / "work.json"
        result = runner.invoke(main, ["create-work", "-o", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data == _WORK_ORDER_TEMPLATE
        assert data["project"]["packaging"] == "archive"
        assert "frontend-sync run" in result.output


class TestRun:
    def test_invalid_work_order(self, tmp_path):
        work = tmp_path / "work.json"
        work.write_text(json.dumps({"project": {"root": "."}, "unexpected": 1}))

        result = CliRunner().invoke(main, ["run", str(work)])

        assert result.exit_code == 1
        assert "Invalid work order" in result.output

    def test_missing_work_file(self, tmp_path):
        result = CliRunner().invoke(main, ["run", str(tmp_path / "nope.json")])
        assert result.exit_code != 0

    def test_synced_project(self, tmp_path):
        _synced_project(tmp_path)
        work = _work_order(tmp_path)

        result = CliRunner().invoke(main, ["run", str(work), "--no-bundle"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "frontend" / "main.js").read_text() == (
            "import '@polymer/iron-icon/iron-icon.js';"
        )
        config = (tmp_path / "webpack.config.js").read_text()
        assert "target/classes/META-INF/resources" in config
        assert "[+] packages" in result.output
        assert "[-] bundle" in result.output

    def test_unresolved_import_exits_1(self, tmp_path):
        _synced_project(tmp_path)
        work = _work_order(
            tmp_path,
            dependencies={"packages": [], "modules": ["@polymer/missing/missing.js"]},
        )

        result = CliRunner().invoke(main, ["run", str(work), "--no-bundle"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "@polymer/missing/missing.js" in result.output
        assert "[!] imports" in result.output

    def test_engine_called_with_overrides(self, tmp_path):
        work = _work_order(tmp_path, generate_bundle=True, convert_html=True)

        with patch("frontend_sync.orchestrator.FrontendSyncEngine") as engine_cls:
            engine = engine_cls.return_value
            engine.run.return_value.summary = {"phases": [], "total_duration": 0}
            engine.run.return_value.degraded = True

            result = CliRunner().invoke(
                main, ["run", str(work), "--no-bundle", "--no-convert-html"]
            )

        assert result.exit_code == 0, result.output
        settings = engine_cls.call_args.kwargs["settings"]
        assert settings.convert_html is False
        assert engine.run.call_args.kwargs["generate_bundle"] is False
        layout = engine.run.call_args.args[1]
        assert layout.project_root == tmp_path.resolve()
        assert "partially installed" in result.output


class TestOutputDir:
    def test_jar(self):
        result = CliRunner().invoke(
            main, ["output-dir", "--packaging", "jar", "--output-directory", "target/classes"]
        )
        assert result.exit_code == 0
        assert result.output.strip() == "target/classes/META-INF/resources"

    def test_war(self):
        result = CliRunner().invoke(
            main,
            ["output-dir", "--packaging", "war", "--build-directory", "build", "--final-name", "finalName"],
        )
        assert result.exit_code == 0
        assert result.output.strip() == "build/finalName"

    def test_unsupported(self):
        result = CliRunner().invoke(main, ["output-dir", "--packaging", "pom"])
        assert result.exit_code == 1
        assert "Unsupported packaging 'pom'" in result.output
