"""Command-line interface for diagtrack using Click."""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Final

import click

from diagtrack.catalog import CatalogError, CodeInfo, MessageCatalog, format_code_detail, format_code_table
from diagtrack.config import build_tracker, load_config
from diagtrack.constants import OutputFormat, Severity, __version__
from diagtrack.formatting import get_formatter
from diagtrack.replay import ReplayResult, format_results, replay_paths
from diagtrack.sinks import ConsoleSink
from diagtrack.tracker import LogTracker
from diagtrack.types import ConfigError, TrackerConfig


def format_config_text(*, config: TrackerConfig) -> str:
    """Format configuration as human-readable text."""
    catalog: MessageCatalog = MessageCatalog()
    no_warn: list[str] = [catalog.canonical_identifier(c) for c in sorted(config.no_warn)]
    lines: list[str] = [
        "diagtrack Configuration",
        "=" * 40,
        "",
        f"Config file: {config.config_path or '(defaults)'}",
        "",
        "Tracking:",
        f"  Verbosity: {config.verbosity.name.lower()}",
        f"  No warn: {', '.join(no_warn) or '(none)'}",
        f"  Line offset: {config.line_offset}",
        "",
        "Output:",
        f"  Format: {config.output_format.value}",
    ]
    return "\n".join(lines)


def format_config_json(*, config: TrackerConfig) -> str:
    """Format configuration as JSON."""
    data: dict[str, Any] = {
        "config_path": str(config.config_path) if config.config_path else None,
        "verbosity": config.verbosity.name.lower(),
        "no_warn": sorted(config.no_warn),
        "line_offset": config.line_offset,
        "output_format": config.output_format.value,
    }
    return json.dumps(data, indent=2)


class ConfigType(click.ParamType):
    """Custom Click parameter type for config path."""

    name: str = "path"

    def convert(
        self,
        value: str | Path | None,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> Path | None:
        if value is None:
            return None
        return Path(value)


class CodeType(click.ParamType):
    """Diagnostic code given as a number or a QSnnnn identifier."""

    name: str = "code"

    def convert(
        self,
        value: str | int,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> int:
        if isinstance(value, int):
            return value
        if value.isdigit():
            return int(value)
        resolved: int | None = MessageCatalog().try_resolve_code(value.upper())
        if resolved is None:
            self.fail(f"{value!r} is not a diagnostic code", param, ctx)
        return resolved


CONFIG_TYPE: Final[ConfigType] = ConfigType()
CODE_TYPE: Final[CodeType] = CodeType()
SEVERITY_CHOICES: Final[list[str]] = [s.name.lower() for s in Severity]


@click.group()
@click.version_option(version=__version__, prog_name="diagtrack")
@click.option(
    "--config",
    "config_path",
    type=CONFIG_TYPE,
    default=None,
    help="Path to pyproject.toml (default: search upward from current directory)",
)
@click.option("--verbose", is_flag=True, help="Show progress and timing")
@click.option("--debug", is_flag=True, help="Show detailed trace")
@click.pass_context
def cli(
    ctx: click.Context,
    *,
    config_path: Path | None,
    verbose: bool,
    debug: bool,
) -> None:
    """diagtrack - Track, filter and render compiler diagnostics."""
    level: int = (
        logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    )
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    try:
        cfg: TrackerConfig = load_config(path=config_path)
        ctx.obj["config"] = cfg
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        if e.path:
            click.echo(f"  in: {e.path}", err=True)
        ctx.exit(1)


@cli.command()
@click.option("--validate", is_flag=True, help="Only validate configuration, don't print")
@click.option("--json", "as_json", is_flag=True, help="Output configuration as JSON")
@click.pass_context
def config(ctx: click.Context, *, validate: bool, as_json: bool) -> None:
    """Show or validate configuration."""
    cfg: TrackerConfig = ctx.obj["config"]

    if validate:
        click.echo(f"Configuration valid: {cfg.config_path or '(defaults)'}")
        return

    if as_json:
        click.echo(format_config_json(config=cfg))
    else:
        click.echo(format_config_text(config=cfg))


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=None,
    help="Output format (overrides config)",
)
@click.option(
    "--verbosity",
    type=click.Choice(SEVERITY_CHOICES),
    default=None,
    help="Least significant severity to show (overrides config)",
)
@click.option(
    "--no-warn",
    "no_warn",
    type=CODE_TYPE,
    multiple=True,
    help="Warning code to suppress; may be repeated (adds to config)",
)
@click.option("--line-offset", type=int, default=None, help="Shift reported line numbers (overrides config)")
@click.pass_context
def replay(
    ctx: click.Context,
    paths: tuple[Path, ...],
    *,
    output_format: str | None,
    verbosity: str | None,
    no_warn: tuple[int, ...],
    line_offset: int | None,
) -> None:
    """Replay diagnostics recorded as JSON through the tracker."""
    cfg: TrackerConfig = ctx.obj["config"]

    # Apply CLI overrides
    overrides: dict[str, Any] = {}
    if output_format is not None:
        overrides["output_format"] = OutputFormat(output_format)
    if verbosity is not None:
        overrides["verbosity"] = Severity.parse(verbosity)
    if no_warn:
        overrides["no_warn"] = cfg.no_warn | frozenset(no_warn)
    if line_offset is not None:
        overrides["line_offset"] = line_offset

    if overrides:
        cfg = replace(cfg, **overrides)

    sink: ConsoleSink = ConsoleSink(formatter=get_formatter(output_format=cfg.output_format))
    tracker: LogTracker = build_tracker(config=cfg, sink=sink)

    result: ReplayResult = replay_paths(paths=paths, tracker=tracker)
    click.echo(format_results(result=result))
    ctx.exit(result.exit_code)


@cli.command()
@click.argument("code", type=CODE_TYPE, required=False, default=None)
@click.option("--all", "show_all", is_flag=True, help="List all known diagnostic codes")
@click.pass_context
def explain(ctx: click.Context, code: int | None, *, show_all: bool) -> None:
    """Show the catalog entry for a diagnostic code."""
    catalog: MessageCatalog = MessageCatalog()

    if show_all:
        click.echo(format_code_table(catalog=catalog))
        return

    if code is None:
        click.echo("Usage: diagtrack explain <CODE> or diagtrack explain --all")
        ctx.exit(1)
        return

    try:
        info: CodeInfo = catalog.lookup(code)
    except CatalogError as e:
        click.echo(f"Error: {e}.", err=True)
        ctx.exit(1)
        return

    click.echo(format_code_detail(info=info, catalog=catalog))


def main() -> None:
    """Main entry point for diagtrack CLI."""
    cli()


if __name__ == "__main__":
    main()
