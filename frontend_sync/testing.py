"""Test doubles for frontend_sync: exercise the synchronizers without disk or processes.

Usage::

    from frontend_sync.testing import MemoryFileStore, RecordingCommandRunner

    store = MemoryFileStore({"/p/node_modules/lit/index.js": ""})
    runner = RecordingCommandRunner(exit_codes={"webpack": 2})
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from frontend_sync.store.base import FileStore
from frontend_sync.tools.locator import ToolLocator
from frontend_sync.tools.runner import CommandRunner


def _key(path: Path | str) -> str:
    return PurePosixPath(Path(path).as_posix()).as_posix()


class MemoryFileStore(FileStore):
    """In-memory FileStore that counts writes.

    Parameters
    ----------
    files:
        Initial contents keyed by path (str or bytes values).
    fail_on:
        Paths whose read or write raises ``OSError``.
    """

    def __init__(
        self,
        files: dict[str, str | bytes] | None = None,
        fail_on: set[str] | None = None,
    ) -> None:
        self.files: dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self.files[_key(path)] = content.encode("utf-8") if isinstance(content, str) else content
        self.fail_on = {_key(p) for p in (fail_on or set())}
        self.writes: list[str] = []

    def _check(self, path: Path) -> str:
        key = _key(path)
        if key in self.fail_on:
            raise OSError(f"simulated I/O failure: {key}")
        return key

    def is_file(self, path: Path) -> bool:
        return _key(path) in self.files

    def read_text(self, path: Path) -> str:
        return self.read_bytes(path).decode("utf-8")

    def write_text(self, path: Path, content: str) -> None:
        self.write_bytes(path, content.encode("utf-8"))

    def read_bytes(self, path: Path) -> bytes:
        key = self._check(path)
        if key not in self.files:
            raise FileNotFoundError(key)
        return self.files[key]

    def write_bytes(self, path: Path, content: bytes) -> None:
        key = self._check(path)
        self.files[key] = content
        self.writes.append(key)

    def list_files(self, root: Path) -> list[Path]:
        prefix = _key(root).rstrip("/") + "/"
        return sorted(Path(k[len(prefix):]) for k in self.files if k.startswith(prefix))


class RecordingCommandRunner(CommandRunner):
    """CommandRunner that records commands instead of spawning them.

    ``exit_codes`` maps a substring of the joined command to the exit code
    returned for it; ``stderr`` likewise for captured stderr.
    """

    def __init__(
        self,
        exit_codes: dict[str, int] | None = None,
        stderr: dict[str, str] | None = None,
        fail_to_start: bool = False,
    ) -> None:
        self.exit_codes = exit_codes or {}
        self.stderr = stderr or {}
        self.fail_to_start = fail_to_start
        self.calls: list[tuple[list[str], Path]] = []

    def execute(self, command: list[str], cwd: Path) -> tuple[int, str]:
        if self.fail_to_start:
            raise FileNotFoundError(command[0])
        self.calls.append((list(command), Path(cwd)))
        joined = " ".join(command)
        code = next((c for k, c in self.exit_codes.items() if k in joined), 0)
        err = next((s for k, s in self.stderr.items() if k in joined), "")
        return code, err


class StubToolLocator(ToolLocator):
    """ToolLocator with fixed tool paths; skips PATH lookups."""

    def __init__(self, project_root: str | Path = ".", node: str = "/usr/bin/node") -> None:
        super().__init__(project_root)
        self.node = Path(node)

    def locate_node(self) -> Path:
        return self.node

    def npm_command(self) -> list[str]:
        return ["npm"]

    def locate_webpack(self, node_modules: str | Path) -> Path:
        return Path(node_modules) / ".bin" / "webpack"
