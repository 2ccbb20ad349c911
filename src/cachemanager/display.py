"""Rich terminal display for cachemanager."""

from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from cachemanager.catalog import CATEGORY_INFO, get_category_info
from cachemanager.models import (
    BatchReport,
    CacheCategory,
    CacheEntry,
    CategoryTotals,
    DeletionResult,
    SizeMode,
    WorkingSet,
)

console = Console()

KIB = 1024
MIB = 1024**2
GIB = 1024**3


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string (binary units, like du -h).

    The decimal is truncated, never rounded up, so a size never reads as
    the next unit boundary.
    """
    for unit, suffix in ((GIB, "G"), (MIB, "M"), (KIB, "K")):
        if size_bytes >= unit:
            tenths = size_bytes * 10 // unit
            return f"{tenths // 10}.{tenths % 10}{suffix}"
    return f"{size_bytes}B"


def format_duration(seconds: float) -> str:
    """Format an elapsed time as '1m 5s' or '12s'."""
    seconds = int(seconds)
    if seconds >= 60:
        return f"{seconds // 60}m {seconds % 60}s"
    return f"{seconds}s"


def category_label(category: CacheCategory) -> str:
    """Get styled label for a category."""
    color = get_category_info(category).color
    return f"[{color}]{category.value}[/{color}]"


def entry_size_label(entry: CacheEntry) -> str:
    """Size column text for an entry: a size, N/A, or empty if never measured."""
    if entry.error is not None:
        return "N/A"
    if entry.size_bytes is None:
        return ""
    return format_size(entry.size_bytes)


def total_label(totals: CategoryTotals, category: Optional[CacheCategory] = None) -> str:
    """Total text for one category (or the grand total), 'unknown' if unmeasured."""
    if not totals.sizes_known:
        return "unknown"
    if category is None:
        return format_size(totals.grand_total)
    return format_size(totals.total_for(category))


def show_banner(mode: SizeMode, skip_sizes: bool = False, out: Optional[Console] = None) -> None:
    """Display the title, category legend and measurement mode."""
    out = out or console

    legend = "\n".join(
        f"  [{info.color}]●[/{info.color}] {info.category.value:<8}→ {info.description}"
        for info in CATEGORY_INFO.values()
    )
    out.print(
        Panel(
            "This tool scans and helps you clean cache folders on your Mac.\n\n"
            f"[bold]Cache Categories:[/bold]\n{legend}",
            title="[bold]macOS Cache Manager[/bold]",
            border_style="blue",
        )
    )

    if skip_sizes:
        out.print("[dim]Size calculation skipped[/dim]")
    elif mode == SizeMode.ACCURATE:
        out.print("[bold]Accurate Mode:[/bold] Precise size calculation (slower but exact)")
    else:
        out.print(
            "[bold]Fast Mode:[/bold] Quick size estimation "
            "(use [green]--accurate[/green] flag for precise sizes)"
        )
    out.print()


def show_scanning_progress(out: Optional[Console] = None) -> Progress:
    """Create progress bar for size calculation."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=out or console,
        transient=True,
    )


def show_entries(
    working_set: WorkingSet,
    show_sizes: bool = True,
    out: Optional[Console] = None,
) -> None:
    """Display the table of active entries with their slot numbers."""
    out = out or console

    table = Table(show_header=True, header_style="bold")
    table.add_column("No.", justify="right")
    table.add_column("Folder", overflow="fold")
    table.add_column("Type")
    if show_sizes:
        table.add_column("Size", justify="right")

    for slot, entry in working_set.slots():
        row = [str(slot), escape(entry.path), category_label(entry.category)]
        if show_sizes:
            row.append(entry_size_label(entry))
        table.add_row(*row)

    out.print(table)


def show_totals(
    totals: CategoryTotals,
    elapsed: Optional[float] = None,
    out: Optional[Console] = None,
) -> None:
    """Display the grand total and how long the calculation took."""
    out = out or console
    out.print(f"[bold]Total cache size:[/bold] {total_label(totals)}")
    if elapsed is not None:
        out.print(f"[dim]Calculation time: {format_duration(elapsed)}[/dim]")
    out.print()


def menu_categories(exclusions: frozenset[CacheCategory]) -> list[CacheCategory]:
    """Categories offered as delete actions, in legend order."""
    return [c for c in CacheCategory if c not in exclusions]


def menu_prompt(working_set: WorkingSet, exclusions: frozenset[CacheCategory]) -> str:
    """Prompt text listing the accepted choices."""
    keys = ["A"] + [get_category_info(c).key for c in menu_categories(exclusions)]
    keys.append(f"1-{len(working_set)}")
    keys.append("Q")
    return f"Choose an option ({'/'.join(keys)}): "


def show_menu(
    working_set: WorkingSet,
    totals: CategoryTotals,
    exclusions: frozenset[CacheCategory],
    out: Optional[Console] = None,
) -> None:
    """Display the available delete actions with their totals."""
    out = out or console

    out.print(f"A) Delete ALL ({total_label(totals)})")
    out.print(f"1-{len(working_set)}) Delete specific folder by number")
    for category in menu_categories(exclusions):
        info = get_category_info(category)
        out.print(
            f"[{info.color}]{info.key}) Delete {category.value} caches "
            f"({total_label(totals, category)})[/{info.color}]"
        )
    out.print("Q) Quit")
    out.print()


def show_deleting(entry: CacheEntry, out: Optional[Console] = None) -> None:
    """Announce the deletion of one entry."""
    out = out or console
    color = get_category_info(entry.category).color
    suffix = " (build folders)" if entry.category == CacheCategory.ANDROID else ""
    out.print(f"Deleting [{color}]{escape(entry.path)}[/{color}]{suffix}...")


def show_deletion_result(result: DeletionResult, out: Optional[Console] = None) -> None:
    """Display a failed deletion; successes are silent."""
    out = out or console
    if not result.success:
        out.print(f"  [red]✗[/red] {escape(result.path)}: {escape(result.error or 'failed')}")


def show_batch_report(report: BatchReport, out: Optional[Console] = None) -> None:
    """Display the outcome of one delete action."""
    out = out or console
    deleted = report.success_count
    failed = report.failure_count

    if failed:
        out.print(f"[yellow]Deleted {deleted} folder(s), {failed} failed.[/yellow]")
    else:
        out.print(f"[green]✓ Deleted {deleted} folder(s).[/green]")
    out.print()


def confirm_action(message: str, read_line: Callable[[str], str]) -> bool:
    """
    Ask a yes/no question.

    Only 'y' or 'yes' (any case) confirms; anything else, including an
    empty answer, declines.
    """
    answer = read_line(f"{message} (y/N): ")
    return answer.strip().lower() in ("y", "yes")
