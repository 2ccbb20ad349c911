"""Cache location discovery and size measurement for cachemanager."""

import glob
import logging
import os
import subprocess
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Optional

from cachemanager.catalog import get_catalog
from cachemanager.models import CacheCategory, CacheEntry, CatalogEntry, SizeMode, WorkingSet
from cachemanager.settings import Settings

log = logging.getLogger(__name__)

# Characters that make a template a glob pattern
GLOB_CHARS = frozenset("*?[")


class MeasurementError(Exception):
    """Raised when the size of a path cannot be determined."""


def expand_path(template: str, home: Path) -> Path:
    """Expand a leading ~ in a template to the injected *home* directory."""
    if template == "~" or template.startswith("~/"):
        template = str(home) + template[1:]
    return Path(template)


def is_glob(template: str) -> bool:
    """Check whether a template contains glob wildcards."""
    return any(c in GLOB_CHARS for c in template)


# =============================================================================
# Existence filter
# =============================================================================


def _is_existing_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        # e.g. permission denied on a parent directory
        return False


def _is_existing(path: Path) -> bool:
    try:
        return path.exists()
    except OSError:
        return False


def expand_entry(row: CatalogEntry, home: Path) -> list[Path]:
    """
    Resolve one catalog row to the concrete paths that currently exist.

    Plain templates resolve to at most one directory. Glob templates resolve
    to every existing match, in sorted order.
    """
    path = expand_path(row.template, home)

    if not is_glob(row.template):
        return [path] if _is_existing_dir(path) else []

    matches = sorted(glob.glob(str(path)))
    return [Path(m) for m in matches if _is_existing(Path(m))]


def resolve_working_set(
    settings: Settings,
    catalog: Optional[list[CatalogEntry]] = None,
) -> WorkingSet:
    """
    Build the working set: catalog rows that exist and are not excluded.

    Args:
        settings: Run settings (home directory and exclusions are used)
        catalog: Catalog rows to resolve (defaults to the built-in catalog)

    Returns:
        WorkingSet in catalog order, with glob matches in matched order
    """
    if catalog is None:
        catalog = get_catalog()

    entries: list[CacheEntry] = []
    for row in catalog:
        if row.category in settings.exclusions:
            continue

        for path in expand_entry(row, settings.home):
            entries.append(CacheEntry(path=str(path), category=row.category))

    log.debug("Found %d existing cache locations", len(entries))
    return WorkingSet(entries=entries)


# =============================================================================
# Size measurement
# =============================================================================


def measure_fast(path: Path, timeout: Optional[float] = None) -> int:
    """
    Measure disk usage with a single du call.

    du reports whole 1 KiB units, rounded up, so the result is a multiple of
    1024. Unreadable subdirectories make du exit non-zero but it still
    prints the total of what it could read; that total is used.

    Raises:
        MeasurementError: If du produced no usable total
    """
    try:
        result = subprocess.run(
            ["du", "-sk", str(path)],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise MeasurementError(f"du timed out after {timeout:g}s")
    except OSError as e:
        raise MeasurementError(f"could not run du: {e}")

    fields = result.stdout.split()
    if not fields:
        raise MeasurementError(result.stderr.strip() or f"du exited with {result.returncode}")

    try:
        size_kb = int(fields[0])
    except ValueError:
        raise MeasurementError(f"unexpected du output: {result.stdout.strip()!r}")

    return size_kb * 1024


def measure_accurate(path: Path) -> int:
    """
    Measure the exact byte size of a path by walking every file.

    Symlinks are not followed. Unreadable subdirectories are skipped.

    Raises:
        MeasurementError: If the path itself cannot be read
    """
    try:
        if not path.is_dir():
            return path.stat().st_size
    except OSError as e:
        raise MeasurementError(str(e))

    total_size = 0

    def _scan(p: str, root: bool = False) -> None:
        nonlocal total_size
        try:
            with os.scandir(p) as entries:
                for entry in entries:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            total_size += entry.stat(follow_symlinks=False).st_size
                        elif entry.is_dir(follow_symlinks=False):
                            _scan(entry.path)
                    except OSError:
                        continue
        except OSError as e:
            if root:
                raise MeasurementError(str(e))

    _scan(str(path), root=True)
    return total_size


def measure_path(path: Path, settings: Settings) -> int:
    """Measure one path with the mode selected in *settings*.

    A symlink to a directory is measured through its target, the same
    tree that deleting it clears.
    """
    if path.is_symlink() and path.is_dir():
        path = path.resolve()
    if settings.mode == SizeMode.ACCURATE:
        return measure_accurate(path)
    return measure_fast(path, timeout=settings.du_timeout)


def estimate_size(entry: CacheEntry, settings: Settings) -> tuple[int, Optional[str]]:
    """
    Estimate the size of one entry.

    ANDROID entries are sized by their build directories, not the project
    root. Failures never raise; they are returned as an error message with a
    size of 0.

    Returns:
        Tuple of (size_bytes, error_message)
    """
    path = Path(entry.path)

    if entry.category == CacheCategory.ANDROID:
        from cachemanager.recursive_scanner import measure_build_artifacts

        size = measure_build_artifacts(path, settings)
        log.debug("%s: %d bytes in build folders (%s)", path, size, settings.mode.value)
        return size, None

    try:
        size = measure_path(path, settings)
    except MeasurementError as e:
        log.debug("%s: size unavailable: %s", path, e)
        return 0, str(e)

    log.debug("%s: %d bytes (%s)", path, size, settings.mode.value)
    return size, None


def measure_working_set(
    working_set: WorkingSet,
    settings: Settings,
    progress_callback: Callable[[CacheEntry, int, int], None] | None = None,
) -> WorkingSet:
    """
    Measure every entry of the working set in parallel.

    Sizes are written to the entries by the calling thread as results
    arrive; workers never touch shared state.

    Args:
        working_set: Entries to measure
        settings: Run settings (mode, workers, timeout)
        progress_callback: Optional callback(entry, current, total) per finished entry

    Returns:
        The same working set, with sizes attached
    """
    entries = working_set.entries
    total = len(entries)

    with ThreadPoolExecutor(max_workers=settings.max_workers) as executor:
        future_to_entry = {
            executor.submit(estimate_size, entry, settings): entry for entry in entries
        }

        for i, future in enumerate(as_completed(future_to_entry)):
            entry = future_to_entry[future]
            size, error = future.result()
            entry.size_bytes = size
            entry.error = error

            if progress_callback:
                progress_callback(entry, i + 1, total)

    return working_set
