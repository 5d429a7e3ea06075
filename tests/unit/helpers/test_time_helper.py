"""
Unit tests for symgraph.helpers.time_helper module.

Tests the time utility functions.
"""

import pytest

from symgraph.helpers.time_helper import now_ms


class TestNowMs:
    """Tests for now_ms function."""

    @pytest.mark.unit
    def test_now_ms_value_is_integer(self) -> None:
        """now_ms should return an integer."""
        assert isinstance(now_ms(), int)

    @pytest.mark.unit
    def test_now_ms_is_reasonable_timestamp(self) -> None:
        """now_ms should return a timestamp in milliseconds (roughly current epoch)."""
        result = now_ms()
        # Should be after year 2020 (1577836800000 ms) and before year 2100
        assert result > 1577836800000
        assert result < 4102444800000

    @pytest.mark.unit
    def test_now_ms_increases_over_time(self) -> None:
        """Consecutive calls to now_ms should return non-decreasing values."""
        first = now_ms()
        second = now_ms()
        assert second >= first
