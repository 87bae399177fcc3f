"""Translation of legacy HTML imports into npm modules and packages.

Legacy components import ``.html`` files served from bower, e.g.
``frontend://bower_components/vaadin-button/src/vaadin-button.html``.
Their npm equivalents live in scoped packages:

    bower_components/vaadin-button/...  ->  @vaadin/vaadin-button/...
    bower_components/iron-icon/...      ->  @polymer/iron-icon/...
    bower_components/polymer/...        ->  @polymer/polymer/...

HTML imports outside ``bower_components`` are project files and become
``./`` imports.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# Protocol prefixes used by legacy HTML imports and scripts.
_PROTOCOL_RE = re.compile(r"^(frontend|context|base)://")
_BOWER_PREFIX = "bower_components/"

# @scope/name/rest -> @scope/name ; name/rest -> name
_PACKAGE_RE = re.compile(r"^(@[^/]+/[^/]+|[^@./][^/]*)(/.*)?$")


def strip_protocol(path: str) -> str:
    return _PROTOCOL_RE.sub("", path)


def _npm_scope(component: str) -> str:
    return "@vaadin" if component.startswith("vaadin-") else "@polymer"


def html_import_to_js_module(html_import: str) -> str:
    """Translate one HTML import into the equivalent JS module path."""
    path = strip_protocol(html_import).lstrip("/")
    if path.endswith(".html"):
        path = path[: -len(".html")] + ".js"

    if path.startswith(_BOWER_PREFIX):
        path = path[len(_BOWER_PREFIX):]
        component, _, rest = path.partition("/")
        module = f"{_npm_scope(component)}/{component}"
        return f"{module}/{rest}" if rest else module

    return "./" + path


def js_module_to_package(module: str) -> str | None:
    """Return the npm package a module belongs to, or None for project files."""
    m = _PACKAGE_RE.match(module)
    if not m:
        return None
    return m.group(1)


def html_imports_to_js_modules(html_imports: Iterable[str]) -> set[str]:
    return {html_import_to_js_module(h) for h in html_imports}


def html_imports_to_packages(html_imports: Iterable[str]) -> set[str]:
    packages = set()
    for module in html_imports_to_js_modules(html_imports):
        package = js_module_to_package(module)
        if package:
            packages.add(package)
    return packages
