"""Locate node, npm and webpack for a project."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

import structlog

from frontend_sync.core.config import NODE_INSTALL_HINT
from frontend_sync.exceptions import ToolResolutionError

log = structlog.get_logger("frontend_sync.tools")


class ToolLocator:
    """Resolve external executables, project-local candidates first.

    Search order for node:
      1. <project_root>/node/node  (installed by a frontend build plugin)
      2. ``node`` on PATH

    Search order for npm:
      1. <project_root>/node/node + node/node_modules/npm/bin/npm-cli.js
      2. ``npm`` on PATH
    """

    def __init__(self, project_root: str | Path) -> None:
        self.project_root = Path(project_root)

    @staticmethod
    def verify_tool(path: Path) -> bool:
        return path.is_file() and os.access(path, os.X_OK)

    def try_locate_tool(self, name: str) -> Path | None:
        found = shutil.which(name)
        return Path(found) if found else None

    def locate_node(self) -> Path:
        local = self.project_root / "node" / "node"
        if self.verify_tool(local):
            log.debug("tools.node_local", path=str(local))
            return local

        found = self.try_locate_tool("node")
        if found is None:
            raise ToolResolutionError("node", NODE_INSTALL_HINT)
        log.debug("tools.node_path", path=str(found))
        return found

    def npm_command(self) -> list[str]:
        """Command prefix that runs npm."""
        local_node = self.project_root / "node" / "node"
        local_cli = self.project_root / "node" / "node_modules" / "npm" / "bin" / "npm-cli.js"
        if self.verify_tool(local_node) and local_cli.is_file():
            log.debug("tools.npm_local", path=str(local_cli))
            return [str(local_node), str(local_cli)]

        found = self.try_locate_tool("npm")
        if found is None:
            raise ToolResolutionError("npm", NODE_INSTALL_HINT)
        log.debug("tools.npm_path", path=str(found))
        return [str(found)]

    def locate_webpack(self, node_modules: str | Path) -> Path:
        script = Path(node_modules) / ".bin" / "webpack"
        if not script.is_file():
            raise ToolResolutionError(
                "webpack",
                f"Unable to locate webpack executable by path '{script.absolute()}'. "
                "Double check that npm dependencies were installed.",
            )
        return script
