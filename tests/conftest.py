"""Shared pytest fixtures for frontend-sync tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from frontend_sync.models.project import BuildFacts, ProjectLayout
from frontend_sync.testing import RecordingCommandRunner, StubToolLocator
from frontend_sync.tools.runner import ExternalToolRunner


@pytest.fixture
def layout(tmp_path: Path) -> ProjectLayout:
    """A war-packaged project rooted at tmp_path with default locations."""
    return ProjectLayout(
        project_root=tmp_path,
        build=BuildFacts(
            packaging="war",
            output_directory=tmp_path / "target" / "classes",
            build_directory=tmp_path / "target",
            final_name="finalName",
        ),
    )


@pytest.fixture
def command_runner() -> RecordingCommandRunner:
    return RecordingCommandRunner()


@pytest.fixture
def tool_runner(command_runner: RecordingCommandRunner) -> ExternalToolRunner:
    return ExternalToolRunner(command_runner)


@pytest.fixture
def stub_locator(tmp_path: Path) -> StubToolLocator:
    return StubToolLocator(tmp_path)
