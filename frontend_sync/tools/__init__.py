"""External tool location and invocation (node, npm, webpack)."""

from frontend_sync.tools.locator import ToolLocator
from frontend_sync.tools.runner import CommandRunner, ExternalToolRunner, SubprocessRunner

__all__ = ["CommandRunner", "ExternalToolRunner", "SubprocessRunner", "ToolLocator"]
