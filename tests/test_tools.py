"""Tests for ToolLocator and ExternalToolRunner."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from structlog.testing import capture_logs

from frontend_sync.exceptions import ToolExecutionError, ToolResolutionError
from frontend_sync.models.result import ToolMode
from frontend_sync.testing import RecordingCommandRunner
from frontend_sync.tools.locator import ToolLocator
from frontend_sync.tools.runner import ExternalToolRunner, SubprocessRunner


def _executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


class TestToolLocatorNode:
    def test_project_local_node_wins(self, tmp_path: Path):
        local = _executable(tmp_path / "node" / "node")
        with patch("frontend_sync.tools.locator.shutil.which", return_value="/usr/bin/node"):
            assert ToolLocator(tmp_path).locate_node() == local

    def test_falls_back_to_path(self, tmp_path: Path):
        with patch("frontend_sync.tools.locator.shutil.which", return_value="/usr/bin/node"):
            assert ToolLocator(tmp_path).locate_node() == Path("/usr/bin/node")

    def test_non_executable_local_ignored(self, tmp_path: Path):
        local = tmp_path / "node" / "node"
        local.parent.mkdir()
        local.write_text("")
        local.chmod(0o644)
        with patch("frontend_sync.tools.locator.shutil.which", return_value="/opt/node"):
            assert ToolLocator(tmp_path).locate_node() == Path("/opt/node")

    def test_missing_everywhere(self, tmp_path: Path):
        with patch("frontend_sync.tools.locator.shutil.which", return_value=None):
            with pytest.raises(ToolResolutionError, match="nodejs.org") as exc_info:
                ToolLocator(tmp_path).locate_node()
        assert exc_info.value.tool == "node"


class TestToolLocatorNpm:
    def test_local_npm_cli(self, tmp_path: Path):
        node = _executable(tmp_path / "node" / "node")
        cli = tmp_path / "node" / "node_modules" / "npm" / "bin" / "npm-cli.js"
        cli.parent.mkdir(parents=True)
        cli.write_text("")
        assert ToolLocator(tmp_path).npm_command() == [str(node), str(cli)]

    def test_local_node_without_cli_uses_path(self, tmp_path: Path):
        _executable(tmp_path / "node" / "node")
        with patch("frontend_sync.tools.locator.shutil.which", return_value="/usr/bin/npm"):
            assert ToolLocator(tmp_path).npm_command() == ["/usr/bin/npm"]

    def test_missing_npm(self, tmp_path: Path):
        with patch("frontend_sync.tools.locator.shutil.which", return_value=None):
            with pytest.raises(ToolResolutionError, match="'npm'"):
                ToolLocator(tmp_path).npm_command()


class TestToolLocatorWebpack:
    def test_found(self, tmp_path: Path):
        script = tmp_path / "node_modules" / ".bin" / "webpack"
        script.parent.mkdir(parents=True)
        script.write_text("")
        assert ToolLocator(tmp_path).locate_webpack(tmp_path / "node_modules") == script

    def test_missing(self, tmp_path: Path):
        with pytest.raises(ToolResolutionError, match="webpack"):
            ToolLocator(tmp_path).locate_webpack(tmp_path / "node_modules")


class TestExternalToolRunner:
    def test_success(self, tmp_path: Path):
        runner = RecordingCommandRunner()
        result = ExternalToolRunner(runner).run(
            "npm", ["install"], tmp_path, ToolMode.PACKAGE_MANAGER
        )
        assert result.ok
        assert result.command == ["npm", "install"]
        assert runner.calls == [(["npm", "install"], tmp_path)]

    def test_command_prefix_list(self, tmp_path: Path):
        runner = RecordingCommandRunner()
        result = ExternalToolRunner(runner).run(
            ["node/node", "npm-cli.js"], ["install"], tmp_path, ToolMode.PACKAGE_MANAGER
        )
        assert result.command == ["node/node", "npm-cli.js", "install"]

    def test_package_manager_failure_not_raised(self, tmp_path: Path):
        runner = RecordingCommandRunner(exit_codes={"npm": 1}, stderr={"npm": "E404"})
        result = ExternalToolRunner(runner).run("npm", ["install"], tmp_path, ToolMode.PACKAGE_MANAGER)
        assert not result.ok
        assert result.exit_code == 1
        assert result.stderr == "E404"

    def test_bundler_failure_raised(self, tmp_path: Path):
        runner = RecordingCommandRunner(exit_codes={"webpack": 1}, stderr={"webpack": "boom"})
        with pytest.raises(ToolExecutionError, match="boom"):
            ExternalToolRunner(runner).run("node", ["webpack"], tmp_path, ToolMode.BUNDLER)

    def test_stderr_logged_on_success(self, tmp_path: Path):
        runner = RecordingCommandRunner(stderr={"npm": "npm WARN deprecated left-pad"})

        with capture_logs() as logs:
            ExternalToolRunner(runner).run("npm", ["install"], tmp_path, ToolMode.PACKAGE_MANAGER)

        echoed = [e for e in logs if e["event"] == "tools.stderr"]
        assert echoed == [
            {
                "event": "tools.stderr",
                "log_level": "debug",
                "mode": "package_manager",
                "stderr": "npm WARN deprecated left-pad",
            }
        ]

    def test_empty_stderr_not_logged(self, tmp_path: Path):
        with capture_logs() as logs:
            ExternalToolRunner(RecordingCommandRunner()).run(
                "npm", ["install"], tmp_path, ToolMode.PACKAGE_MANAGER
            )
        assert not [e for e in logs if e["event"] == "tools.stderr"]

    @pytest.mark.parametrize("mode", [ToolMode.PACKAGE_MANAGER, ToolMode.BUNDLER])
    def test_start_failure_raised(self, tmp_path: Path, mode: ToolMode):
        runner = RecordingCommandRunner(fail_to_start=True)
        with pytest.raises(ToolExecutionError, match="Failed to start 'npm'") as exc_info:
            ExternalToolRunner(runner).run("npm", ["install"], tmp_path, mode)
        assert exc_info.value.exit_code is None


class TestSubprocessRunner:
    def test_captures_stderr_and_exit_code(self, tmp_path: Path):
        code, stderr = SubprocessRunner().execute(
            [sys.executable, "-c", "import sys; sys.stderr.write('broken'); sys.exit(3)"],
            tmp_path,
        )
        assert code == 3
        assert stderr == "broken"

    def test_runs_in_working_directory(self, tmp_path: Path):
        code, _ = SubprocessRunner().execute(
            [sys.executable, "-c", "import os; open('marker', 'w').close()"],
            tmp_path,
        )
        assert code == 0
        assert (tmp_path / "marker").is_file()

    def test_missing_executable(self, tmp_path: Path):
        with pytest.raises(OSError):
            SubprocessRunner().execute([os.path.join(str(tmp_path), "no-such-tool")], tmp_path)

    def test_bundler_failure_end_to_end(self, tmp_path: Path):
        with pytest.raises(ToolExecutionError) as exc_info:
            ExternalToolRunner().run(
                sys.executable,
                ["-c", "import sys; sys.stderr.write('webpack failed'); sys.exit(2)"],
                tmp_path,
                ToolMode.BUNDLER,
            )
        assert exc_info.value.stderr == "webpack failed"
        assert exc_info.value.exit_code == 2
