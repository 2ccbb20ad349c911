"""Tests for run settings."""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from cachemanager.models import CacheCategory, SizeMode
from cachemanager.settings import Settings, configure_logging, parse_exclusions


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.home == Path.home()
        assert settings.mode == SizeMode.FAST
        assert not settings.skip_sizes
        assert settings.exclusions == frozenset()
        assert settings.use_sudo

    def test_home_is_injectable(self, tmp_path):
        settings = Settings(home=tmp_path)
        assert settings.home == tmp_path

    def test_rejects_zero_workers(self):
        with pytest.raises(ValidationError):
            Settings(max_workers=0)

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            Settings(du_timeout=0)


class TestParseExclusions:
    def test_comma_separated_and_repeated(self):
        excluded, unknown = parse_exclusions(["system,Temp", "dev"])
        assert excluded == {CacheCategory.SYSTEM, CacheCategory.TEMP, CacheCategory.DEV}
        assert unknown == []

    def test_unknown_names_are_reported(self):
        excluded, unknown = parse_exclusions(["user,bogus"])
        assert excluded == {CacheCategory.USER}
        assert unknown == ["bogus"]

    def test_blank_parts_are_ignored(self):
        excluded, unknown = parse_exclusions(["android,,", " "])
        assert excluded == {CacheCategory.ANDROID}
        assert unknown == []

    def test_empty(self):
        excluded, unknown = parse_exclusions([])
        assert excluded == frozenset()
        assert unknown == []


class TestConfigureLogging:
    def test_debug_level(self):
        configure_logging(debug=True)
        assert logging.getLogger("cachemanager").level == logging.DEBUG

    def test_quiet_by_default(self):
        configure_logging(debug=False)
        assert logging.getLogger("cachemanager").level == logging.WARNING
