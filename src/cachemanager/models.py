"""Data models for cachemanager."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class CacheCategory(str, Enum):
    """Classification of a cache location."""

    USER = "USER"  # Application caches
    DEV = "DEV"  # Development tools
    SYSTEM = "SYSTEM"  # macOS system caches, usually needs admin rights
    TEMP = "TEMP"  # Temporary files and logs
    ANDROID = "ANDROID"  # Android Studio build folders


class SizeMode(str, Enum):
    """How directory sizes are measured."""

    FAST = "fast"  # Block-rounded disk usage from du
    ACCURATE = "accurate"  # Byte-exact walk of every file


class CatalogEntry(BaseModel):
    """A known cache location template."""

    template: str = Field(..., description="Path template (supports ~ and glob wildcards)")
    category: CacheCategory = Field(..., description="Category of this location")


class CacheEntry(BaseModel):
    """An existing cache location found by a scan."""

    path: str = Field(..., description="Absolute path after expansion")
    category: CacheCategory = Field(..., description="Category of this entry")
    size_bytes: Optional[int] = Field(None, description="Measured size, None until measured")
    error: Optional[str] = Field(None, description="Error message if measurement failed")
    deleted: bool = Field(False, description="Whether the entry was deleted this session")

    @property
    def measured(self) -> bool:
        """Whether a size measurement was attempted."""
        return self.size_bytes is not None or self.error is not None

    @property
    def known_bytes(self) -> int:
        """Size counted towards totals (unknown counts as 0)."""
        return self.size_bytes or 0


class WorkingSet(BaseModel):
    """Ordered entries produced by one scan.

    Slot numbers are 1-based and stay fixed for the whole session; a deleted
    entry keeps its slot so the numbers shown to the operator never shift.
    """

    entries: list[CacheEntry] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def active(self) -> list[CacheEntry]:
        """Entries that have not been deleted."""
        return [e for e in self.entries if not e.deleted]

    def slots(self) -> list[tuple[int, CacheEntry]]:
        """Active entries paired with their slot number."""
        return [(i, e) for i, e in enumerate(self.entries, 1) if not e.deleted]

    def get(self, slot: int) -> Optional[CacheEntry]:
        """Get the entry at a 1-based slot, or None if out of range."""
        if 1 <= slot <= len(self.entries):
            return self.entries[slot - 1]
        return None

    def in_category(self, category: CacheCategory) -> list[CacheEntry]:
        """Active entries of one category."""
        return [e for e in self.active if e.category == category]


class CategoryTotals(BaseModel):
    """Per-category and overall byte totals of the active entries."""

    by_category: dict[CacheCategory, int] = Field(default_factory=dict)
    counts: dict[CacheCategory, int] = Field(default_factory=dict)
    grand_total: int = 0
    sizes_known: bool = True

    def total_for(self, category: CacheCategory) -> int:
        """Bytes for one category (0 if it has no entries)."""
        return self.by_category.get(category, 0)

    def count_for(self, category: CacheCategory) -> int:
        """Number of active entries in one category."""
        return self.counts.get(category, 0)


class DeletionResult(BaseModel):
    """Result of deleting a single path."""

    path: str = Field(..., description="Path that was deleted")
    success: bool = Field(True, description="Whether deletion succeeded")
    error: Optional[str] = Field(None, description="Error message if failed")
    escalated: bool = Field(False, description="Whether sudo was used")


class BatchReport(BaseModel):
    """Outcome of one destructive menu action."""

    results: list[DeletionResult] = Field(default_factory=list)
    entries_deleted: int = 0

    @property
    def success_count(self) -> int:
        """Number of paths deleted."""
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        """Number of paths that could not be deleted."""
        return sum(1 for r in self.results if not r.success)


# =============================================================================
# Menu selections
# =============================================================================


class DeleteAll(BaseModel):
    """Delete every active entry."""


class DeleteCategory(BaseModel):
    """Delete every active entry of one category."""

    category: CacheCategory


class DeleteIndex(BaseModel):
    """Delete the entry at one slot."""

    index: int


class Quit(BaseModel):
    """Leave the menu."""


class InvalidSelection(BaseModel):
    """Input that does not name any available action."""

    reason: str


Selection = Union[DeleteAll, DeleteCategory, DeleteIndex, Quit, InvalidSelection]
Action = Union[DeleteAll, DeleteCategory, DeleteIndex]

