"""Run configuration and logging setup for cachemanager."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field
from rich.console import Console
from rich.logging import RichHandler

from cachemanager.catalog import parse_category
from cachemanager.models import CacheCategory, SizeMode

# Default number of parallel size measurements
DEFAULT_WORKERS = 4

# Timeout for a single du call (seconds)
DEFAULT_DU_TIMEOUT = 300.0


class Settings(BaseModel):
    """Configuration for one run, built from the command line."""

    home: Path = Field(default_factory=Path.home, description="Home directory used to expand ~")
    mode: SizeMode = Field(SizeMode.FAST, description="Size measurement mode")
    skip_sizes: bool = Field(False, description="Skip size calculation entirely")
    exclusions: frozenset[CacheCategory] = Field(
        default_factory=frozenset, description="Categories left out of this run"
    )
    max_workers: int = Field(DEFAULT_WORKERS, ge=1, description="Parallel size measurements")
    du_timeout: float = Field(DEFAULT_DU_TIMEOUT, gt=0, description="Timeout for one du call")
    use_sudo: bool = Field(True, description="Retry with sudo when deletion is denied")
    debug: bool = Field(False, description="Trace measurements and deletions")


def parse_exclusions(values: list[str]) -> tuple[frozenset[CacheCategory], list[str]]:
    """
    Parse --ignore values into a set of categories.

    Each value may hold several comma-separated names; names are
    case-insensitive.

    Returns:
        Tuple of (excluded categories, unrecognized names)
    """
    excluded: set[CacheCategory] = set()
    unknown: list[str] = []

    for value in values:
        for name in value.split(","):
            name = name.strip()
            if not name:
                continue
            category = parse_category(name)
            if category is None:
                unknown.append(name)
            else:
                excluded.add(category)

    return frozenset(excluded), unknown


def configure_logging(debug: bool = False) -> None:
    """Send log records to stderr, at DEBUG level when debug is set."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=debug,
    )
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    logging.getLogger("cachemanager").setLevel(logging.DEBUG if debug else logging.WARNING)
