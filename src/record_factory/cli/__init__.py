"""CLI module for inspecting record schemas and their builders.

Provides commands to analyze record classes, render typed builder stubs,
list stored records through a database profile, and list profiles.

Usage:
    record-factory inspect forge.models:Anvil
    record-factory render forge.models:Anvil forge.models:Hammer --output builders.pyi
    record-factory list forge.models:Anvil --profile local
    record-factory profiles

Commands:
    inspect   - Show the analyzed fields and relations of a record
    render    - Print (or write) the typed builder stub of records
    list      - Print every stored record via Record.all()
    profiles  - List database profiles from record_factory.toml
"""

import argparse
import asyncio
import importlib
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from record_factory.builder.render import render_stub, type_name
from record_factory.builder.synthesizer import synthesize
from record_factory.config.loader import CONFIG_FILE_NAME, load_config
from record_factory.config.models import AnalysisSettings
from record_factory.connect import get_adapter
from record_factory.errors import RecordFactoryError
from record_factory.schema.analyzer import analysis_of
from record_factory.schema.models import AnalysisOutput

console = Console()
err_console = Console(stderr=True)


# ============================================================================
# Helpers
# ============================================================================


def load_target(target: str) -> Any:
    """Import ``module:Attribute`` and return the attribute.

    Raises:
        ImportError: Malformed target, unknown module, or missing attribute.

    Example:
        >>> load_target("record_factory.config.loader:CONFIG_FILE_NAME")
        'record_factory.toml'
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ImportError(f"Expected 'module:Record', got '{target}'")

    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise ImportError(f"Module '{module_name}' has no attribute '{attr}'") from e


def _config_path(args: argparse.Namespace) -> Path | None:
    return Path(args.config) if getattr(args, "config", None) else None


def _load_settings(args: argparse.Namespace) -> AnalysisSettings | None:
    """Analysis settings from --config, else ./record_factory.toml, else None."""
    path = _config_path(args)
    if path is None and not (Path.cwd() / CONFIG_FILE_NAME).exists():
        return None
    return load_config(path).analysis


def _analyze_targets(args: argparse.Namespace) -> list[AnalysisOutput]:
    """Analyze every target with the configured settings.

    Records decorated with ``@factory`` keep the analysis made at decoration
    time, so the config's analysis settings do not apply to them.
    """
    settings = _load_settings(args)
    analyses: list[AnalysisOutput] = []
    for target in args.targets:
        record_type = load_target(target)
        if (
            settings is not None
            and isinstance(record_type, type)
            and "__record_analysis__" in vars(record_type)
        ):
            err_console.print(
                f"[yellow]![/yellow] {record_type.__name__} was analyzed by @factory; "
                "config analysis settings do not apply"
            )
        analyses.append(analysis_of(record_type, settings))
    return analyses


def _print_analysis(analysis: AnalysisOutput) -> None:
    table = Table(
        title=f"{analysis.record_name} [dim](table: {analysis.table_name})[/dim]",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Field")
    table.add_column("Type")
    table.add_column("PK", justify="center")
    table.add_column("Relation")
    table.add_column("Builder hook")

    for field in analysis.fields:
        relation = field.relation
        table.add_row(
            f"[bold cyan]{field.name}[/bold cyan]" if relation else field.name,
            type_name(field.shape.type_hint),
            "[green]v[/green]" if field.attributes.primary_key else "",
            f"{relation.related_type.name}.{relation.referenced_key}" if relation else "",
            f"{relation.hook_name}()" if relation else "",
        )

    console.print(table)


# ============================================================================
# Commands
# ============================================================================


def cmd_inspect(args: argparse.Namespace) -> int:
    """Show the analysis of each target record.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        analyses = _analyze_targets(args)
    except (RecordFactoryError, ImportError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]x[/bold red] {e}")
        return 1

    for analysis in analyses:
        _print_analysis(analysis)
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Render the builder stub of each target record.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        analyses = _analyze_targets(args)
    except (RecordFactoryError, ImportError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]x[/bold red] {e}")
        return 1

    stub = render_stub(synthesize(analysis) for analysis in analyses)

    if args.output:
        Path(args.output).write_text(stub)
        console.print(
            f"[bold green]v[/bold green] Wrote {len(analyses)} builder(s) to "
            f"[cyan]{args.output}[/cyan]"
        )
    else:
        # Plain stdout so the stub can be redirected
        sys.stdout.write(stub)
    return 0


async def _async_list(args: argparse.Namespace) -> int:
    """Async implementation for list command.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        record_type = load_target(args.target)
        analysis = analysis_of(record_type, _load_settings(args))
        adapter = get_adapter(
            profile_name=args.profile,
            config_path=_config_path(args),
            env_prefix=args.env_prefix,
        )
    except (RecordFactoryError, ImportError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]x[/bold red] {e}")
        return 1

    try:
        records = await record_type.all(adapter)
    except Exception as e:
        console.print(f"[bold red]x[/bold red] Failed to list {analysis.record_name}: {e}")
        return 1
    finally:
        await adapter.close()

    table = Table(
        title=f"{analysis.table_name} ({len(records)} rows)",
        show_header=True,
        header_style="bold",
    )
    for name in analysis.field_names:
        table.add_column(name)
    for record in records:
        table.add_row(*(str(getattr(record, name)) for name in analysis.field_names))

    console.print(table)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """Print every stored record of the target type.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_list(args))


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from record_factory.toml.

    Reads only local TOML config -- no database calls.

    Returns:
        0 on success, 1 if the config file is missing or invalid.
    """
    try:
        config = load_config(_config_path(args))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    table = Table(title="Database Profiles", show_header=True, header_style="bold")
    table.add_column("Profile")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        table.add_row(f"[cyan]{name}[/cyan]", profile.description or "")

    console.print(table)
    return 0


# ============================================================================
# Main entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="record-factory",
        description="Record schema analysis and builder toolkit",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to config file (default: ./{CONFIG_FILE_NAME})",
    )
    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix APP_ reads APP_RECORD_FACTORY_PROFILE)"
        ),
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # inspect command
    p_inspect = subparsers.add_parser(
        "inspect",
        help="Show the analyzed fields and relations of records",
    )
    p_inspect.add_argument("targets", nargs="+", help="Records as module:Record")
    p_inspect.set_defaults(func=cmd_inspect)

    # render command
    p_render = subparsers.add_parser(
        "render",
        help="Render typed builder stubs",
    )
    p_render.add_argument("targets", nargs="+", help="Records as module:Record")
    p_render.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the stub to this file instead of stdout",
    )
    p_render.set_defaults(func=cmd_render)

    # list command
    p_list = subparsers.add_parser(
        "list",
        help="List stored records through a database profile",
    )
    p_list.add_argument("target", help="Record as module:Record")
    p_list.add_argument(
        "--profile",
        "-p",
        default=None,
        help="Profile from the config file (default: $RECORD_FACTORY_PROFILE)",
    )
    p_list.set_defaults(func=cmd_list)

    # profiles command
    p_profiles = subparsers.add_parser(
        "profiles",
        help="List available profiles",
    )
    p_profiles.set_defaults(func=cmd_profiles)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
