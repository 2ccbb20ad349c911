"""Recursive discovery of build directories inside Android project roots.

An ANDROID entry is sized and cleaned through the Gradle ``build``
directories found beneath it, never through the project root itself.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Generator

from cachemanager.catalog import BUILD_DIR_NAME
from cachemanager.scanner import MeasurementError, measure_path
from cachemanager.settings import Settings

log = logging.getLogger(__name__)


# Directories never searched for build output
SKIP_DIRECTORIES = frozenset(
    {
        ".git",
        ".svn",
        ".hg",
    }
)


def find_matching_directories(
    root: Path,
    pattern: str = BUILD_DIR_NAME,
    max_depth: int = 30,
    skip_inside_match: bool = True,
) -> Generator[Path, None, None]:
    """
    Find directories named *pattern* recursively.

    Uses os.scandir for performance instead of pathlib.glob().

    Args:
        root: Root directory to start searching from
        pattern: Directory name to match (e.g., 'build')
        max_depth: Maximum depth to search (prevents infinite recursion)
        skip_inside_match: If True, don't recurse into matched directories,
            so nested matches are never counted twice

    Yields:
        Paths to matching directories
    """
    if max_depth <= 0:
        return

    try:
        with os.scandir(root) as entries:
            for entry in entries:
                try:
                    # Skip non-directories and symlinks
                    if not entry.is_dir(follow_symlinks=False):
                        continue

                    name = entry.name
                    if name in SKIP_DIRECTORIES:
                        continue

                    entry_path = Path(entry.path)

                    if name == pattern:
                        yield entry_path
                        if skip_inside_match:
                            continue

                    yield from find_matching_directories(
                        entry_path,
                        pattern,
                        max_depth - 1,
                        skip_inside_match,
                    )

                except OSError:
                    # Skip directories we can't access
                    continue

    except OSError:
        # Skip roots we can't access
        return


def find_build_directories(root: Path) -> list[Path]:
    """List every build directory beneath an Android project root."""
    found = list(find_matching_directories(root, BUILD_DIR_NAME))
    for build_dir in found:
        log.debug("Found build folder %s", build_dir)
    return found


def _measure_or_zero(path: Path, settings: Settings) -> int:
    try:
        return measure_path(path, settings)
    except MeasurementError as e:
        log.debug("%s: size unavailable: %s", path, e)
        return 0


def measure_build_artifacts(root: Path, settings: Settings) -> int:
    """
    Total size of all build directories beneath *root*.

    Each build directory is measured independently in a thread pool and the
    results are summed. A root without build directories has size 0; a build
    directory that cannot be measured counts as 0.

    Args:
        root: Android project root
        settings: Run settings (mode, workers, timeout)

    Returns:
        Total bytes in build directories
    """
    build_dirs = find_build_directories(root)
    if not build_dirs:
        return 0

    with ThreadPoolExecutor(max_workers=settings.max_workers) as executor:
        sizes = executor.map(lambda d: _measure_or_zero(d, settings), build_dirs)
        return sum(sizes)
