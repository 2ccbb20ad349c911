"""CLI interface for cachemanager."""

import time
from typing import Optional

import typer
from rich.markup import escape

from cachemanager import __version__
from cachemanager.analyzer import summarize
from cachemanager.catalog import CATEGORY_INFO
from cachemanager.display import console, show_banner, show_entries, show_scanning_progress, show_totals
from cachemanager.menu import MenuSession
from cachemanager.models import CacheEntry, SizeMode
from cachemanager.scanner import measure_working_set, resolve_working_set
from cachemanager.settings import (
    DEFAULT_DU_TIMEOUT,
    DEFAULT_WORKERS,
    Settings,
    configure_logging,
    parse_exclusions,
)


def _help_epilog() -> str:
    lines = ["[bold]Cache Categories:[/bold]"]
    for info in CATEGORY_INFO.values():
        lines.append(f"[{info.color}]{info.category.value}[/{info.color}] → {info.description}")
    lines.append(
        "[bold]Examples:[/bold] cachemanager (fast mode), cachemanager --accurate, "
        "cachemanager --ignore system,temp"
    )
    return "\n\n".join(lines)


# Create Typer app
app = typer.Typer(
    name="cachemanager",
    help="macOS Cache Manager - scan and clean cache folders on your Mac",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"cachemanager version {__version__}")
        raise typer.Exit()


@app.command(epilog=_help_epilog())
def main(
    accurate: bool = typer.Option(
        False,
        "--accurate",
        "-a",
        help="Use accurate mode for precise size calculation (slower).",
    ),
    skip_size_calculation: bool = typer.Option(
        False,
        "--skip-size-calculation",
        "-s",
        help="List folders without calculating their sizes.",
    ),
    ignore: Optional[list[str]] = typer.Option(
        None,
        "--ignore",
        "-i",
        metavar="CATEGORY",
        help="Category to skip (USER, DEV, SYSTEM, TEMP, ANDROID). Repeatable or comma-separated.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Trace every measurement and deletion on stderr.",
    ),
    workers: int = typer.Option(
        DEFAULT_WORKERS,
        "--workers",
        metavar="N",
        min=1,
        help="Number of folders measured in parallel.",
    ),
    timeout: float = typer.Option(
        DEFAULT_DU_TIMEOUT,
        "--timeout",
        metavar="SECS",
        min=1,
        help="Seconds before a single size calculation is abandoned (fast mode).",
    ),
    no_sudo: bool = typer.Option(
        False,
        "--no-sudo",
        help="Never retry a denied deletion with sudo.",
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Scan cache folders, show their sizes, and delete the ones you choose."""
    configure_logging(debug)

    exclusions, unknown = parse_exclusions(ignore or [])
    for name in unknown:
        console.print(f"[yellow]Warning: ignoring unknown category '{escape(name)}'[/yellow]")

    settings = Settings(
        mode=SizeMode.ACCURATE if accurate else SizeMode.FAST,
        skip_sizes=skip_size_calculation,
        exclusions=exclusions,
        max_workers=workers,
        du_timeout=timeout,
        use_sudo=not no_sudo,
        debug=debug,
    )

    show_banner(settings.mode, skip_sizes=settings.skip_sizes)
    if exclusions:
        skipped = ", ".join(sorted(c.value for c in exclusions))
        console.print(f"[dim]Skipping categories: {skipped}[/dim]\n")

    console.print("Scanning for cache folders...")
    working_set = resolve_working_set(settings)

    if not working_set.entries:
        console.print("\nNo existing cache folders found.")
        raise typer.Exit(0)

    elapsed = None
    if not settings.skip_sizes:
        console.print("Calculating sizes of existing cache folders...\n")
        start = time.monotonic()

        with show_scanning_progress() as progress:
            task = progress.add_task("Measuring...", total=len(working_set))

            def update_progress(entry: CacheEntry, current: int, total: int):
                progress.update(task, completed=current, description=escape(entry.path))

            measure_working_set(working_set, settings, progress_callback=update_progress)

        elapsed = time.monotonic() - start

    show_entries(working_set, show_sizes=not settings.skip_sizes)
    show_totals(summarize(working_set.entries), elapsed)

    MenuSession(console=console, working_set=working_set, settings=settings).run()


if __name__ == "__main__":
    app()
