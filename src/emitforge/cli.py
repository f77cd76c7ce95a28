"""
emitforge.cli - Command Line Interface
======================================

This module provides the command-line interface for emitforge using Typer.

Architecture
------------

    app (main entry point)
    ├── init       - Write a starter emitforge.toml
    ├── generate   - Generate every unit, honoring user templates
    ├── scaffold   - Write starter templates for units
    └── templates  - List user templates and scaffold status

Usage Examples
--------------
    $ emitforge init
    $ emitforge scaffold order-id
    $ emitforge generate --dry-run
    $ emitforge templates

See Also
--------
- generator.py: Generation pipeline behind these commands
- models.py: emitforge.toml models
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import questionary
import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from emitforge import __version__
from emitforge.diagnostics import Diagnostic, Severity
from emitforge.emitters import EMITTERS
from emitforge.generator import (
    build_units,
    generate as run_generate,
    load_registry,
    scaffold_units,
    write_starter_config,
)
from emitforge.models import ForgeConfig
from emitforge.scaffold import ScaffoldFileHeader, find_available_scaffolds, find_stale_templates


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="emitforge",
    help="Customizable code emission with user-overridable Jinja2 templates.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()

DEFAULT_CONFIG = Path("emitforge.toml")

ConfigOption = Annotated[
    Path,
    typer.Option("--config", "-c", help="Path to emitforge.toml"),
]

SEVERITY_STYLES = {
    Severity.INFO: "blue",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]emitforge[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]Customizable code emission and template scaffolding[/]",
            border_style="green",
        ))
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=False)],
        force=True,
    )


def load_config(path: Path) -> ForgeConfig:
    """Load ``path`` or exit with a readable error."""
    try:
        return ForgeConfig.from_toml(path)
    except FileNotFoundError:
        rprint(f"[red]Error:[/] {path} not found. Run 'emitforge init' to create one.")
        raise typer.Exit(1)
    except ValidationError as e:
        rprint(f"[red]Error:[/] Invalid configuration in {path}:\n{e}")
        raise typer.Exit(1)
    except ValueError as e:
        # tomli.TOMLDecodeError
        rprint(f"[red]Error:[/] Could not parse {path}: {e}")
        raise typer.Exit(1)


def print_diagnostics(diagnostics: list[Diagnostic], title: str = "Diagnostics") -> None:
    if not diagnostics:
        return

    table = Table(title=title, show_header=True)
    table.add_column("Severity", style="bold", width=9)
    table.add_column("Id", style="cyan")
    table.add_column("Location", style="dim")
    table.add_column("Message")

    for diagnostic in diagnostics:
        style = SEVERITY_STYLES[diagnostic.severity]
        table.add_row(
            f"[{style}]{diagnostic.severity.value}[/]",
            diagnostic.id.value,
            str(diagnostic.location) if diagnostic.location else "",
            diagnostic.message,
        )

    console.print(table)


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """
    [bold]emitforge[/] - customizable code emission.

    Built-in generators write default Python code. A Jinja2 template at
    [cyan]Templates/<group>/<name>.py.j2[/] replaces that output.

    [bold]Quick Start:[/]

        emitforge init
        emitforge scaffold
        emitforge generate
    """
    configure_logging(verbose)


# =============================================================================
# Commands
# =============================================================================

@app.command()
def init(
    path: Annotated[
        Path,
        typer.Argument(help="Where to write the configuration"),
    ] = DEFAULT_CONFIG,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing file"),
    ] = False,
) -> None:
    """
    Write a starter [cyan]emitforge.toml[/] with one unit per generator.
    """
    try:
        written = write_starter_config(path, force=force)
    except FileExistsError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    generators = "\n".join(
        f"  [cyan]{name:<10}[/] {spec.description} ([dim]{spec.template_name}[/])"
        for name, spec in EMITTERS.items()
    )
    console.print(Panel(
        f"[bold green]Created {written}[/]\n\n[bold]Generators:[/]\n{generators}",
        title="[bold]emitforge[/]",
        border_style="green",
    ))


@app.command()
def generate(
    config_path: ConfigOption = DEFAULT_CONFIG,
    root: Annotated[
        Path | None,
        typer.Option("--root", "-r", help="Project root (defaults to the config's folder)"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Resolve everything but write nothing"),
    ] = False,
) -> None:
    """
    Generate every unit, using user templates where they exist.

    [bold]Example:[/]

        emitforge generate
        emitforge generate --dry-run
    """
    config = load_config(config_path)
    project_root = root or config_path.parent

    result = run_generate(config, project_root, dry_run=dry_run)

    table = Table(title="Generation Units", show_header=True)
    table.add_column("Unit", style="cyan")
    table.add_column("Template", style="dim")
    table.add_column("Source")
    table.add_column("Output")

    for unit_result in result.units:
        if not unit_result.success:
            source = "[red]failed[/]"
        elif unit_result.customized:
            source = "[green]user template[/]"
        else:
            source = "default"
        table.add_row(
            unit_result.unit.name,
            unit_result.unit.resolved_template_name,
            source,
            unit_result.unit.output.as_posix(),
        )

    console.print(table)
    print_diagnostics(result.diagnostics)

    if not result.success:
        raise typer.Exit(1)

    if dry_run:
        console.print("[dim]Dry run: no files written.[/]")
    else:
        console.print(f"[green]✓[/] Wrote {len(result.files_created)} file(s)")


@app.command()
def scaffold(
    units: Annotated[
        list[str] | None,
        typer.Argument(help="Units to scaffold (default: all)"),
    ] = None,
    config_path: ConfigOption = DEFAULT_CONFIG,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing templates"),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip existing templates without asking"),
    ] = False,
) -> None:
    """
    Write starter templates derived from the default output.

    Model values in the default output become [cyan]{{ placeholders }}[/],
    so the template renders the same code until you edit it.
    """
    config = load_config(config_path)
    project_root = config_path.parent

    try:
        try:
            written = scaffold_units(config, project_root, units, force=force, skip_existing=yes)
        except FileExistsError as e:
            overwrite = questionary.confirm(f"{e} Overwrite?", default=False).ask()
            if overwrite is None:
                raise typer.Abort()
            written = scaffold_units(
                config, project_root, units, force=overwrite, skip_existing=not overwrite
            )
    except KeyError as e:
        rprint(f"[red]Error:[/] {e.args[0]}")
        raise typer.Exit(1)
    except ValueError as e:
        rprint(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    if not written:
        console.print("[yellow]No templates written.[/]")
        return

    console.print(Panel(
        "\n".join(f"  - {p.relative_to(project_root).as_posix()}" for p in written),
        title="[bold green]Scaffolded templates[/]",
        border_style="green",
    ))


@app.command()
def templates(config_path: ConfigOption = DEFAULT_CONFIG) -> None:
    """
    List user templates and which templates can still be customized.
    """
    config = load_config(config_path)
    project_root = config_path.parent
    registry = load_registry(config, project_root)
    emissions = [emission for _, emission in build_units(config)]

    if len(registry):
        users: dict[str, list[str]] = {}
        for unit in config.units:
            users.setdefault(unit.resolved_template_name, []).append(unit.name)

        table = Table(title="User Templates", show_header=True)
        table.add_column("Template", style="cyan")
        table.add_column("File")
        table.add_column("Origin", style="dim")
        table.add_column("Used by")

        for name in registry.names:
            header = ScaffoldFileHeader.parse(registry.get_source(name) or "")
            origin = f"scaffold v{header.version}" if header else "hand-written"
            table.add_row(
                name,
                registry.get_file_path(name) or "",
                origin,
                ", ".join(users.get(name, [])) or "[yellow]unused[/]",
            )

        console.print(table)
    else:
        console.print(f"[dim]No user templates in {config.templates_dir}/[/]")

    print_diagnostics(
        find_stale_templates(emissions, registry) + find_available_scaffolds(emissions, registry),
        title="Template Status",
    )


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
