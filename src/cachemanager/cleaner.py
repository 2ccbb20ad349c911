"""Deletion of cache entries for cachemanager."""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable

from cachemanager.models import (
    Action,
    BatchReport,
    CacheCategory,
    CacheEntry,
    DeleteAll,
    DeleteCategory,
    DeleteIndex,
    DeletionResult,
    WorkingSet,
)
from cachemanager.recursive_scanner import find_build_directories
from cachemanager.settings import Settings

log = logging.getLogger(__name__)

# Paths that should NEVER be deleted, whatever the catalog says
BLOCKED_PATHS = frozenset(
    {
        "/",
        "/System",
        "/Library",
        "/Applications",
        "/Users",
        "/private",
        "/usr",
        "/bin",
        "/sbin",
        "/var",
    }
)


def is_path_safe(path: Path, home: Path) -> bool:
    """
    Check if a path is safe to delete.

    Args:
        path: Path to check
        home: Home directory of the operator

    Returns:
        True if safe to delete, False otherwise
    """
    path_str = str(path).rstrip("/") or "/"
    if path_str in BLOCKED_PATHS:
        return False
    if path_str == str(home).rstrip("/"):
        return False
    return True


def _sudo_remove(path: Path) -> tuple[bool, str | None]:
    """Remove a path with sudo rm -rf; sudo may prompt for a password."""
    if shutil.which("sudo") is None:
        return False, "sudo not available"

    log.debug("Retrying %s with sudo", path)
    try:
        result = subprocess.run(["sudo", "rm", "-rf", "--", str(path)])
    except OSError as e:
        return False, f"sudo failed: {e}"

    if result.returncode != 0:
        return False, f"sudo rm exited with {result.returncode}"
    return True, None


def delete_tree(path: Path, use_sudo: bool = False) -> DeletionResult:
    """
    Delete a path and everything beneath it.

    A path that no longer exists counts as deleted. On permission errors the
    deletion is retried with sudo when *use_sudo* is set. A symlink to a
    directory (e.g. /tmp on macOS) is kept; the contents of its target are
    deleted instead.

    Args:
        path: File or directory to delete
        use_sudo: Whether to escalate on permission errors

    Returns:
        DeletionResult, never raises for filesystem errors
    """
    if path.is_symlink() and path.is_dir():
        return _clear_link_target(path, use_sudo)
    return _remove(path, use_sudo)


def _clear_link_target(link: Path, use_sudo: bool) -> DeletionResult:
    target = link.resolve()
    log.debug("%s links to %s; clearing its contents", link, target)

    try:
        children = sorted(target.iterdir())
    except OSError as e:
        return DeletionResult(path=str(link), success=False, error=f"OS error: {e}")

    results = [_remove(child, use_sudo) for child in children]
    failed = [r for r in results if not r.success]
    escalated = any(r.escalated for r in results)

    if failed:
        return DeletionResult(
            path=str(link),
            success=False,
            error=f"{len(failed)} of {len(results)} item(s) could not be deleted",
            escalated=escalated,
        )
    return DeletionResult(path=str(link), escalated=escalated)


def _remove(path: Path, use_sudo: bool) -> DeletionResult:
    log.debug("Deleting %s", path)

    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        log.debug("%s already gone", path)
        return DeletionResult(path=str(path))
    except PermissionError as e:
        if not use_sudo:
            log.debug("%s: permission denied: %s", path, e)
            return DeletionResult(path=str(path), success=False, error=f"Permission denied: {e}")

        ok, error = _sudo_remove(path)
        if not ok:
            log.debug("%s: %s", path, error)
            return DeletionResult(path=str(path), success=False, error=error, escalated=True)
        return DeletionResult(path=str(path), escalated=True)
    except OSError as e:
        log.debug("%s: %s", path, e)
        return DeletionResult(path=str(path), success=False, error=f"OS error: {e}")

    return DeletionResult(path=str(path))


def delete_entry(entry: CacheEntry, settings: Settings) -> list[DeletionResult]:
    """
    Delete one entry.

    ANDROID entries delete the build directories found beneath the project
    root (searched again now); the project root itself is kept. Every other
    entry deletes its path.

    Returns:
        One DeletionResult per path attempted
    """
    path = Path(entry.path)

    if entry.category == CacheCategory.ANDROID:
        return [delete_tree(d, settings.use_sudo) for d in find_build_directories(path)]

    if not is_path_safe(path, settings.home) or (
        path.is_symlink() and not is_path_safe(path.resolve(), settings.home)
    ):
        log.debug("Refusing to delete %s", path)
        return [DeletionResult(path=str(path), success=False, error="Blocked path")]

    return [delete_tree(path, settings.use_sudo)]


def entries_for_action(action: Action, working_set: WorkingSet) -> list[CacheEntry]:
    """Active entries targeted by a delete action, in working-set order."""
    if isinstance(action, DeleteAll):
        return working_set.active
    if isinstance(action, DeleteCategory):
        return working_set.in_category(action.category)
    if isinstance(action, DeleteIndex):
        entry = working_set.get(action.index)
        return [entry] if entry is not None and not entry.deleted else []
    return []


def execute_action(
    action: Action,
    working_set: WorkingSet,
    settings: Settings,
    progress_callback: Callable[[CacheEntry], None] | None = None,
) -> BatchReport:
    """
    Delete every entry targeted by *action*.

    Each path is attempted independently; a failure does not stop the rest
    of the batch. Entries whose paths were all deleted are marked deleted.

    Args:
        action: Confirmed delete action
        working_set: Session working set (updated in place)
        settings: Run settings
        progress_callback: Optional callback(entry) before each entry is deleted

    Returns:
        BatchReport with one result per path attempted
    """
    report = BatchReport()

    for entry in entries_for_action(action, working_set):
        if progress_callback:
            progress_callback(entry)

        results = delete_entry(entry, settings)
        report.results.extend(results)

        if all(r.success for r in results):
            entry.deleted = True
            report.entries_deleted += 1

    return report
