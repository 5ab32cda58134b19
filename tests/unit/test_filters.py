"""Unit tests for the container page template filters"""
import pytest

from contmon.pages.filters import format_bytes, format_percent, format_uptime


class TestFilters:

    @pytest.mark.parametrize("value,expected", [
        (0, "0 B"),
        (512, "512B"),
        (2048, "2.0KB"),
        (5 * 1024**2, "5.0MB"),
        (3 * 1024**3, "3.0GB"),
        ("n/a", "n/a"),
    ])
    def test_format_bytes(self, value, expected):
        assert format_bytes(value) == expected

    def test_format_uptime(self):
        assert format_uptime(1000, now=1000 + 2 * 86400 + 3 * 3600) == "2 days, 3 hours"
        assert format_uptime(1000, now=1000 + 3600 + 120) == "1 hours, 2 minutes"
        assert format_uptime(None) == "Unknown"

    def test_format_percent(self):
        assert format_percent(25, 100) == "25.0%"
        assert format_percent(1, 0) == "0.0%"
