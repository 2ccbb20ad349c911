"""Per-category totals for cachemanager."""

from typing import Iterable

from cachemanager.models import CacheCategory, CacheEntry, CategoryTotals


def summarize(entries: Iterable[CacheEntry]) -> CategoryTotals:
    """
    Fold entries into per-category totals and a grand total.

    Deleted entries are left out. Unknown sizes count as 0 but the entry is
    still counted. Totals are computed from scratch on every call.
    """
    by_category: dict[CacheCategory, int] = {}
    counts: dict[CacheCategory, int] = {}
    sizes_known = True

    for entry in entries:
        if entry.deleted:
            continue
        by_category[entry.category] = by_category.get(entry.category, 0) + entry.known_bytes
        counts[entry.category] = counts.get(entry.category, 0) + 1
        if not entry.measured:
            sizes_known = False

    return CategoryTotals(
        by_category=by_category,
        counts=counts,
        grand_total=sum(by_category.values()),
        sizes_known=sizes_known,
    )
