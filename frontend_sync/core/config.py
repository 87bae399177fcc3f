"""Engine settings: defaults overridable via FRONTEND_SYNC_* env vars."""

from __future__ import annotations

import os
from dataclasses import dataclass

INTERNAL_PACKAGE = "@vaadin/flow-frontend"
BASELINE_PACKAGE = "@webcomponents/webcomponentsjs"

# Bundler tooling that must always be present in devDependencies.
DEV_DEPENDENCIES: frozenset[str] = frozenset(
    {
        "webpack",
        "webpack-cli",
        "webpack-dev-server",
        "webpack-babel-multi-target-plugin",
        "copy-webpack-plugin",
    }
)

NODE_INSTALL_HINT = "Please install it using the https://nodejs.org/en/download/ guide."


def package_root(name: str) -> str:
    """Package name without a trailing slash, e.g. "@vaadin/flow-frontend/" -> "@vaadin/flow-frontend"."""
    return name.rstrip("/")


def _env_bool(key: str, default: bool) -> bool:
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class SyncSettings:
    """Engine-wide settings."""

    convert_html: bool = True
    generate_bundle: bool = True
    internal_package: str = INTERNAL_PACKAGE
    entry_file: str = "frontend/main.js"  # relative to project root
    bundler_config: str = "webpack.config.js"  # relative to npm folder
    node_modules: str = "node_modules"  # relative to npm folder

    @classmethod
    def from_env(cls) -> SyncSettings:
        defaults = cls()
        return cls(
            convert_html=_env_bool("FRONTEND_SYNC_CONVERT_HTML", defaults.convert_html),
            generate_bundle=_env_bool("FRONTEND_SYNC_GENERATE_BUNDLE", defaults.generate_bundle),
            internal_package=os.environ.get(
                "FRONTEND_SYNC_INTERNAL_PACKAGE", defaults.internal_package
            ),
            entry_file=os.environ.get("FRONTEND_SYNC_ENTRY_FILE", defaults.entry_file),
            bundler_config=os.environ.get(
                "FRONTEND_SYNC_BUNDLER_CONFIG", defaults.bundler_config
            ),
            node_modules=os.environ.get("FRONTEND_SYNC_NODE_MODULES", defaults.node_modules),
        )
