"""Tests for per-category totals."""

from cachemanager.analyzer import summarize
from cachemanager.display import format_size
from cachemanager.models import CacheCategory, CacheEntry


def _entry(category: CacheCategory, size=None, **kwargs) -> CacheEntry:
    return CacheEntry(path=f"/{category.value.lower()}", category=category, size_bytes=size, **kwargs)


class TestSummarize:
    def test_user_and_dev_totals(self):
        totals = summarize([_entry(CacheCategory.USER, 2048), _entry(CacheCategory.DEV, 3072)])

        assert totals.grand_total == 5120
        assert format_size(totals.grand_total) == "5.0K"
        assert format_size(totals.total_for(CacheCategory.USER)) == "2.0K"
        assert format_size(totals.total_for(CacheCategory.DEV)) == "3.0K"

    def test_grand_total_equals_sum_of_categories(self):
        entries = [
            _entry(CacheCategory.USER, 1),
            _entry(CacheCategory.USER, 1024**3 + 7),
            _entry(CacheCategory.DEV, 513),
            _entry(CacheCategory.SYSTEM, 99),
            _entry(CacheCategory.TEMP, 0),
            _entry(CacheCategory.ANDROID, 12345),
        ]
        totals = summarize(entries)

        assert totals.grand_total == sum(totals.by_category.values())
        assert totals.grand_total == sum(e.size_bytes for e in entries)

    def test_counts_entries_per_category(self):
        totals = summarize(
            [_entry(CacheCategory.USER, 1), _entry(CacheCategory.USER, 2), _entry(CacheCategory.TEMP, 3)]
        )
        assert totals.count_for(CacheCategory.USER) == 2
        assert totals.count_for(CacheCategory.TEMP) == 1
        assert totals.count_for(CacheCategory.DEV) == 0

    def test_deleted_entries_are_left_out(self):
        entries = [_entry(CacheCategory.USER, 2048), _entry(CacheCategory.DEV, 3072)]
        entries[1].deleted = True

        totals = summarize(entries)

        assert totals.grand_total == 2048
        assert format_size(totals.grand_total) == "2.0K"
        assert totals.count_for(CacheCategory.DEV) == 0

    def test_failed_measurement_counts_as_zero(self):
        totals = summarize(
            [_entry(CacheCategory.USER, 2048), _entry(CacheCategory.SYSTEM, 0, error="denied")]
        )
        assert totals.grand_total == 2048
        assert totals.count_for(CacheCategory.SYSTEM) == 1
        assert totals.sizes_known

    def test_unmeasured_entries_make_totals_unknown(self):
        totals = summarize([_entry(CacheCategory.USER), _entry(CacheCategory.DEV)])
        assert not totals.sizes_known
        assert totals.grand_total == 0
        assert totals.count_for(CacheCategory.USER) == 1

    def test_empty(self):
        totals = summarize([])
        assert totals.grand_total == 0
        assert totals.by_category == {}
