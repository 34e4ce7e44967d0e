"""Command line entry point."""

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.config import DEFAULT_SETTINGS_PATH, ReportSettings, load_settings
from ..detection.report import Reporter
from ..detection.results import DetectionResults
from ..ignores.rc_file import Mode, RCFile, dump_ignore_configs
from ..ignores.suggestion import IgnoreSuggester
from ..prompt import PromptContext
from ..utils.console import unique_items
from ..utils.hashing import DefaultSHA256Hasher
from ..utils.rich_logging import setup_logging


console = Console(highlight=False)

MODE_CHOICES = click.Choice([m.value for m in Mode])


def _load_results(ctx: click.Context, results_file: Path, mode: Mode) -> DetectionResults:
    try:
        with open(results_file) as f:
            data = json.load(f)
        return DetectionResults.from_dict(data, mode=mode)
    except (OSError, ValueError, KeyError, TypeError) as e:
        console.print(f"[red]Error: could not read results from {escape(str(results_file))}: {escape(str(e))}[/]")
        ctx.exit(2)


def _suggester(settings: ReportSettings, mode: Mode) -> IgnoreSuggester:
    return IgnoreSuggester(
        mode=mode,
        rc_file=RCFile(settings.rc_filename),
        console=console,
        color=settings.color,
        width=settings.table_width,
        git_timeout=settings.git_timeout,
    )


@click.group()
@click.option(
    "--config", "-c", "config_path",
    default=str(DEFAULT_SETTINGS_PATH),
    type=click.Path(dir_okay=False, path_type=Path),
    help="Settings file",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
)
@click.pass_context
def cli(ctx, config_path, log_level):
    """Report scan results and suggest ignore entries."""
    setup_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = load_settings(config_path)


@cli.command()
@click.argument("results_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--interactive/--no-interactive",
    default=None,
    help="Confirm each suggested ignore entry (default: when stdin is a terminal)",
)
@click.option("--mode", type=MODE_CHOICES, default=Mode.PRE_COMMIT.value, show_default=True)
@click.pass_context
def report(ctx, results_file, interactive, mode):
    """Print warnings and failures from a saved scan, then suggest ignores."""
    settings = ctx.obj["settings"]
    mode = Mode(mode)
    results = _load_results(ctx, results_file, mode)

    if interactive is None:
        interactive = sys.stdin.isatty()

    reporter = Reporter(results, suggester=_suggester(settings, mode), settings=settings)
    click.echo(reporter.render_warnings(), nl=False)
    click.echo(reporter.render_failures(PromptContext(interactive=interactive)), nl=False)

    ctx.exit(0 if results.successful() else 1)


@cli.command()
@click.argument("results_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def summary(ctx, results_file):
    """Print the failure, warning and ignore counts of a saved scan."""
    results = _load_results(ctx, results_file, Mode.PRE_COMMIT)
    types = results.summary.types

    table = Table()
    table.add_column("Type")
    table.add_column("Count", justify="right")
    for name, count in types.to_dict().items():
        table.add_row(name, str(count))
    console.print(table)

    if results.successful():
        console.print("[green]✓ No failures[/]")
    else:
        console.print("[bold red]Failures found[/]")
    ctx.exit(0 if results.successful() else 1)


@cli.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("--mode", type=MODE_CHOICES, default=Mode.PRE_COMMIT.value, show_default=True)
@click.option(
    "--root",
    default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory the paths are relative to",
)
def checksum(paths, mode, root):
    """Print ignore entries with the current checksum of each path."""
    suggester = IgnoreSuggester(mode=Mode(mode), hasher=DefaultSHA256Hasher(root), console=console)
    candidates = suggester.build_candidates(unique_items(paths))
    click.echo(dump_ignore_configs(candidates), nl=False)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
