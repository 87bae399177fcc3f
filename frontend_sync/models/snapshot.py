"""Dependency snapshot and theme descriptor."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeDescriptor:
    """Theme applied to the generated entry file.

    Module paths containing ``base_url`` are rewritten to the theme's own
    implementation by replacing that segment with ``theme_url``
    (e.g. ``src/`` -> ``theme/lumo/``).
    """

    base_url: str
    theme_url: str
    header_inline_contents: tuple[str, ...] = ()
    html_attributes: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        # mappings are accepted; insertion order is kept
        attributes = self.html_attributes
        if isinstance(attributes, Mapping):
            attributes = attributes.items()
        object.__setattr__(self, "html_attributes", tuple((str(k), str(v)) for k, v in attributes))
        object.__setattr__(self, "header_inline_contents", tuple(self.header_inline_contents))

    def applies_to(self, path: str) -> bool:
        return bool(self.base_url) and self.base_url in path

    def translate(self, path: str) -> str:
        if not self.applies_to(path):
            return path
        return path.replace(self.base_url, self.theme_url, 1)


@dataclass(frozen=True)
class DependencySnapshot:
    """Flat view of the frontend dependencies declared by a project.

    Produced once per run by the dependency collector. ``html_imports`` only
    holds imports of components that declare no native module or package.
    """

    packages: frozenset[str] = frozenset()
    modules: frozenset[str] = frozenset()
    scripts: frozenset[str] = frozenset()
    html_imports: frozenset[str] = frozenset()
    theme: ThemeDescriptor | None = None

    @classmethod
    def of(
        cls,
        packages: Iterable[str] = (),
        modules: Iterable[str] = (),
        scripts: Iterable[str] = (),
        html_imports: Iterable[str] = (),
        theme: ThemeDescriptor | None = None,
    ) -> DependencySnapshot:
        """Build a snapshot from arbitrary iterables."""
        return cls(
            packages=frozenset(packages),
            modules=frozenset(modules),
            scripts=frozenset(scripts),
            html_imports=frozenset(html_imports),
            theme=theme,
        )
