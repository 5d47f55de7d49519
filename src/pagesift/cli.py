"""Command-line interface for pagesift."""

import asyncio
import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pagesift import __version__
from pagesift.core.models import ExtractionMode, RunConfig, RunResult, RunState
from pagesift.engine.coordinator import RunCoordinator
from pagesift.patterns.library import DEFAULT_LIBRARY
from pagesift.storage.filesystem import FilesystemRunStore, export_results

console = Console()

MAX_TABLE_ROWS = 50

_STATUS = {
    RunState.COMPLETED: "completed",
    RunState.FAILED: "failed",
    RunState.STOPPED: "stopped",
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]pagesift[/bold] version {__version__}")
        raise typer.Exit()


def _normalize_url(url: str) -> str:
    """Add a scheme to bare hostnames.

    Examples:
        example.com -> https://example.com
        http://example.com -> http://example.com
    """
    url = url.strip()
    if url and "://" not in url:
        return f"https://{url}"
    return url


def _parse_mode(value: str) -> ExtractionMode:
    """Resolve a mode from its value or enum name."""
    value = value.strip().lower()
    for mode in ExtractionMode:
        if value in (mode.value, mode.name.lower()):
            return mode
    choices = ", ".join(m.value for m in ExtractionMode)
    raise typer.BadParameter(f"Unknown mode {value!r}. Choose one of: {choices}")


def _timestamped(line: str) -> str:
    return f"[{datetime.now().strftime('%H:%M:%S')}] {line}"


def _print_log_line(line: str) -> None:
    console.print(_timestamped(line), markup=False, highlight=False)


def _results_table(result: RunResult) -> Table:
    table = Table(
        title=f"[bold]{result.mode.label}[/bold]",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Content", style="green", overflow="fold")
    table.add_column("Source", style="yellow")

    for index, record in enumerate(result.records[:MAX_TABLE_ROWS], 1):
        row = record.to_dict()
        table.add_row(str(index), row["title"], row["content"], row["source"] or "")
    return table


async def _run(
    url: str,
    mode: ExtractionMode,
    config: RunConfig,
    output: Optional[Path],
    quiet: bool,
) -> RunResult:
    """Run the coordinator and hand results to the store."""
    coordinator = RunCoordinator(config, sink=None if quiet else _print_log_line)
    store = FilesystemRunStore(output) if output else None
    run_id = await store.create_run(url, mode) if store else None

    task = asyncio.ensure_future(coordinator.run(url, mode))
    try:
        result = await asyncio.shield(task)
    except asyncio.CancelledError:
        coordinator.stop()
        result = await task

    if store and run_id:
        await store.append_results(run_id, result.records)
        await store.close_run(run_id, _STATUS[result.state], len(result.records))
        if not quiet:
            console.print(f"[dim]Saved run {run_id} to {store.run_dir(run_id)}[/dim]")
    return result


def _show_summary(result: RunResult, export: Optional[Path]) -> None:
    progress = result.progress
    if result.succeeded:
        strategy = result.outcome.strategy_used.value if result.outcome else "-"
        if result.records:
            console.print()
            console.print(_results_table(result))
            if len(result.records) > MAX_TABLE_ROWS:
                console.print(
                    f"  [dim]... and {len(result.records) - MAX_TABLE_ROWS} more[/dim]"
                )
        console.print()
        console.print(
            Panel(
                f"[bold green]Results:[/bold green] {len(result.records)}\n"
                f"[bold cyan]Strategy:[/bold cyan] {strategy}"
                f"{' (fallback)' if result.used_fallback else ''}\n"
                f"[bold yellow]Elapsed:[/bold yellow] {progress.elapsed_seconds}s",
                title="[bold green]Run Complete![/bold green]",
                border_style="green",
            )
        )
        if export:
            written = export_results(result.records, export)
            console.print(f"[dim]Exported results to {written}[/dim]")
    else:
        console.print()
        console.print(
            Panel(
                f"[bold red]State:[/bold red] {result.state.value}\n"
                f"[bold red]Error:[/bold red] {result.error_message or '-'}",
                title="[bold red]Run Failed[/bold red]"
                if result.state == RunState.FAILED
                else "[bold yellow]Run Stopped[/bold yellow]",
                border_style="red",
            )
        )


def _list_modes() -> None:
    """List the available extraction modes."""
    table = Table(
        title="[bold]Extraction Modes[/bold]",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Mode", style="cyan")
    table.add_column("Description", style="green")
    table.add_column("Deduplicated", style="yellow")
    table.add_column("Patterns", style="magenta", justify="right")

    for mode in ExtractionMode:
        table.add_row(
            mode.value,
            mode.label,
            "yes" if mode.deduplicated else "no",
            str(len(DEFAULT_LIBRARY.rules_for(mode))),
        )

    console.print()
    console.print(table)


def _list_patterns(mode: Optional[ExtractionMode]) -> None:
    """List pattern library rules, optionally for one mode."""
    table = Table(
        title="[bold]Pattern Library[/bold]",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Mode", style="cyan")
    table.add_column("Rule", style="green")
    table.add_column("Group", style="yellow")
    table.add_column("Pattern", style="dim", overflow="fold")

    modes = [mode] if mode else DEFAULT_LIBRARY.modes()
    for current in modes:
        for rule in DEFAULT_LIBRARY.rules_for(current):
            table.add_row(current.value, rule.label, rule.group or "-", rule.regex.pattern)

    console.print()
    console.print(table)


app = typer.Typer(
    name="pagesift",
    help="Fetch a page and extract emails, links, data, credentials, keys or codes.",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def callback(
    version: Annotated[
        bool,
        typer.Option(
            "-V",
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """pagesift command-line interface."""


@app.command()
def run(
    url: Annotated[
        str,
        typer.Argument(help="Page URL to fetch (e.g., https://example.com)"),
    ],
    mode: Annotated[
        str,
        typer.Option(
            "-m",
            "--mode",
            help="Extraction mode: email, links, data, html, credentials, keys, giftcodes",
        ),
    ] = "email",
    output: Annotated[
        Optional[Path],
        typer.Option(
            "-o",
            "--output",
            help="Directory to store the run and its results",
        ),
    ] = None,
    export: Annotated[
        Optional[Path],
        typer.Option(
            "-x",
            "--export",
            help="Export results to a file (.json or plain text)",
        ),
    ] = None,
    proxy: Annotated[
        Optional[str],
        typer.Option(
            "--proxy",
            help="HTTP proxy for the fallback fetch (e.g., http://127.0.0.1:8080)",
        ),
    ] = None,
    timeout: Annotated[
        float,
        typer.Option(
            "-t",
            "--timeout",
            help="Timeout per fetch attempt in seconds",
        ),
    ] = 10.0,
    no_relays: Annotated[
        bool,
        typer.Option(
            "--no-relays",
            help="Skip the CORS relays and fetch directly",
        ),
    ] = False,
    no_fallback: Annotated[
        bool,
        typer.Option(
            "--no-fallback",
            help="Do not retry through the fallback pipeline",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "-v",
            "--verbose",
            help="Verbose output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "-q",
            "--quiet",
            help="Suppress the live log (for scripting/CI)",
        ),
    ] = False,
) -> None:
    """Fetch a page and extract results.

    \b
    Examples:
        pagesift run https://example.com
        pagesift run https://example.com -m links -x links.txt
        pagesift run https://example.com -m keys -o ./runs -v
    """
    extraction_mode = _parse_mode(mode)
    config = RunConfig(
        timeout=timeout,
        proxy_url=proxy,
        use_relays=not no_relays,
        enable_fallback=not no_fallback,
        verbose=verbose,
    )
    url = _normalize_url(url)

    if not quiet:
        console.print()
        console.print(
            Panel(
                f"[bold cyan]Mode:[/bold cyan] {extraction_mode.label}\n"
                f"[bold green]URL:[/bold green] {url}\n"
                f"[bold yellow]Proxy:[/bold yellow] {proxy or 'off'}",
                title="[bold]pagesift[/bold]",
                border_style="blue",
            )
        )
        console.print()

    try:
        result = asyncio.run(_run(url, extraction_mode, config, output, quiet))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        raise typer.Exit(1)

    _show_summary(result, export)
    if not result.succeeded:
        raise typer.Exit(1)


@app.command("modes")
def modes() -> None:
    """List available extraction modes."""
    _list_modes()


@app.command("patterns")
def patterns(
    mode: Annotated[
        Optional[str],
        typer.Argument(help="Only show rules for this mode"),
    ] = None,
) -> None:
    """List the pattern library rules."""
    _list_patterns(_parse_mode(mode) if mode else None)


def main() -> None:
    """Main entry point with smart argument handling.

    Allows both:
        pagesift https://example.com
        pagesift run https://example.com
    """
    if len(sys.argv) > 1:
        first_arg = sys.argv[1]
        if first_arg.startswith(("http://", "https://")) or (
            "." in first_arg
            and not first_arg.startswith("-")
            and first_arg not in ("run", "modes", "patterns")
        ):
            sys.argv.insert(1, "run")

    app()


if __name__ == "__main__":
    main()
