"""CLI entry point: frontend-sync.

Subcommands:
    frontend-sync create-work -o work.json   # Generate work order template
    frontend-sync run work.json              # Synchronize package.json, main.js, webpack config; bundle
    frontend-sync output-dir --packaging jar # Print the bundler output directory
"""

from __future__ import annotations

import dataclasses
import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from frontend_sync.core.config import SyncSettings
from frontend_sync.core.logging import setup_logging
from frontend_sync.exceptions import FrontendSyncError
from frontend_sync.progress import PhaseRecord

# Work order template
_WORK_ORDER_TEMPLATE = {
    "project": {
        "root": ".",
        "packaging": "archive",
        "output_directory": "target/classes",
        "build_directory": "target",
        "final_name": "my-app-1.0",
    },
    "dependencies": {
        "packages": ["@vaadin/vaadin-button"],
        "modules": ["@vaadin/vaadin-button/src/vaadin-button.js", "./my-view.js"],
        "scripts": [],
        "html_imports": [],
    },
    "theme": {
        "base_url": "src/",
        "theme_url": "theme/lumo/",
        "header_inline_contents": [],
        "html_attributes": {},
    },
    "internal_module_dirs": [],
    "webpack_template": None,
    "generate_bundle": True,
}

_STATUS_ICONS = {
    "completed": "+",
    "failed": "!",
    "skipped": "-",
}


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """frontend-sync: keep package.json, the JS entry file and webpack config in sync."""
    setup_logging("DEBUG" if verbose else None)


@main.command("create-work")
@click.option("-o", "--output", default="work.json", help="Output file path")
def create_work(output: str) -> None:
    """Generate a work order template JSON file."""
    Path(output).write_text(json.dumps(_WORK_ORDER_TEMPLATE, indent=2) + "\n")
    click.echo(f"Work order template written to {output}")
    click.echo("Edit the file, then run: frontend-sync run " + output)


@main.command("run")
@click.argument("work_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--no-bundle", is_flag=True, help="Skip the webpack build")
@click.option("--no-convert-html", is_flag=True, help="Ignore legacy HTML imports")
def run(work_file: str, no_bundle: bool, no_convert_html: bool) -> None:
    """Run the synchronization engine from a work order JSON file."""
    from frontend_sync.orchestrator import FrontendSyncEngine
    from frontend_sync.schemas import WorkOrder

    try:
        work = WorkOrder.model_validate_json(Path(work_file).read_text(encoding="utf-8"))
    except ValidationError as e:
        click.echo(f"Error: Invalid work order {work_file}:\n{e}", err=True)
        sys.exit(1)

    settings = SyncSettings.from_env()
    if work.convert_html is not None:
        settings = dataclasses.replace(settings, convert_html=work.convert_html)
    if no_convert_html:
        settings = dataclasses.replace(settings, convert_html=False)

    generate_bundle = settings.generate_bundle if work.generate_bundle is None else work.generate_bundle
    if no_bundle:
        generate_bundle = False

    layout = work.to_layout(settings, base_dir=Path(work_file).resolve().parent)
    engine = FrontendSyncEngine(settings=settings)
    engine.progress.listeners.append(_echo_phase)
    click.echo("Synchronizing frontend resources:")

    try:
        result = engine.run(
            work.to_snapshot(),
            layout,
            webpack_template=work.webpack_template,
            generate_bundle=generate_bundle,
        )
    except FrontendSyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Done in {result.summary['total_duration']}s")
    if result.degraded:
        click.echo(
            "\nWarning: npm reported errors; dependencies may be partially installed. "
            "Re-run to retry.",
            err=True,
        )


@main.command("output-dir")
@click.option("--packaging", required=True, help="Packaging mode: library|archive (jar|war)")
@click.option("--output-directory", default="target/classes", help="Compiled resources directory")
@click.option("--build-directory", default="target", help="Build directory")
@click.option("--final-name", default="app", help="Final artifact name")
def output_dir(packaging: str, output_directory: str, build_directory: str, final_name: str) -> None:
    """Print the directory the bundler writes to for a packaging mode."""
    from frontend_sync.bundler import resolve_output_target
    from frontend_sync.models.project import BuildFacts

    facts = BuildFacts(
        packaging=packaging,
        output_directory=Path(output_directory),
        build_directory=Path(build_directory),
        final_name=final_name,
    )
    try:
        target = resolve_output_target(facts)
    except FrontendSyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(target.output_directory.as_posix())


def _echo_phase(record: PhaseRecord) -> None:
    icon = _STATUS_ICONS.get(record.status, "?")
    duration = f" ({record.duration}s)" if record.duration else ""
    detail = f" - {record.detail}" if record.detail else ""
    click.echo(f"  [{icon}] {record.phase}{duration}{detail}")


if __name__ == "__main__":
    main()
