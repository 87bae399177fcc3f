"""Run npm and webpack as blocking subprocesses.

stdout is inherited so the operator sees tool output live; stderr is
captured for diagnostics. No timeout is applied.
"""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

import structlog

from frontend_sync.exceptions import ToolExecutionError
from frontend_sync.models.result import RunResult, ToolMode

log = structlog.get_logger("frontend_sync.tools")


class CommandRunner(ABC):
    """Process launcher abstraction; swapped for a fake in tests."""

    @abstractmethod
    def execute(self, command: list[str], cwd: Path) -> tuple[int, str]:
        """Run *command* to completion, return (exit_code, stderr).

        Raises ``OSError`` if the process cannot be started.
        """
        ...


class SubprocessRunner(CommandRunner):
    def execute(self, command: list[str], cwd: Path) -> tuple[int, str]:
        proc: subprocess.Popen | None = None
        try:
            proc = subprocess.Popen(
                command,
                cwd=str(cwd),
                stdout=None,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
            _, stderr = proc.communicate()
            return proc.returncode, stderr or ""
        finally:
            if proc is not None and proc.poll() is None:
                proc.kill()
                proc.wait()


class ExternalToolRunner:
    """Invoke external tools and map failures per tool mode.

    Bundler: non-zero exit raises ``ToolExecutionError``.
    Package manager: non-zero exit is logged and returned; a later run
    can retry the install.
    """

    def __init__(self, command_runner: CommandRunner | None = None) -> None:
        self.command_runner = command_runner or SubprocessRunner()

    def run(
        self,
        command: str | Sequence[str],
        args: Sequence[str],
        working_directory: str | Path,
        mode: ToolMode,
    ) -> RunResult:
        prefix = [command] if isinstance(command, str) else list(command)
        full_command = prefix + list(args)
        log.info("tools.run", mode=mode.value, command=" ".join(full_command))

        try:
            exit_code, stderr = self.command_runner.execute(full_command, Path(working_directory))
        except OSError as e:
            raise ToolExecutionError(full_command, None, str(e)) from e

        result = RunResult(command=full_command, exit_code=exit_code, stderr=stderr, mode=mode)
        if stderr:
            log.debug("tools.stderr", mode=mode.value, stderr=stderr[-2000:])
        if result.ok:
            log.info("tools.completed", mode=mode.value)
            return result

        if mode is ToolMode.BUNDLER:
            raise ToolExecutionError(full_command, exit_code, stderr)

        log.error(
            "tools.package_manager_failed",
            exit_code=exit_code,
            stderr=stderr[-2000:],
            hint="Check that all required dependencies are deployed in npm repositories.",
        )
        return result
