"""
Unit tests for UnitConverter.
"""

import pytest

from timeledger.domain.models.base import ValidationError
from timeledger.domain.services.unit_converter import DisplayUnit, UnitConverter


class TestUnitConverter:
    """Test cases for UnitConverter."""

    def setup_method(self):
        self.converter = UnitConverter()

    def test_format_days(self):
        """Test eight hours read as one day."""
        assert self.converter.format(8, "days") == "1.0"
        assert self.converter.format(12, DisplayUnit.DAYS) == "1.5"

    def test_format_hours(self):
        """Test hours are shown with one decimal."""
        assert self.converter.format(7.25) == "7.2"
        assert self.converter.format(0, "hours") == "0.0"

    def test_round_trip(self):
        """Test days and hours convert back and forth."""
        assert self.converter.to_hours(self.converter.to_days(20)) == 20

    def test_format_label(self):
        """Test singular and plural suffixes."""
        assert self.converter.format_label(8, "days") == "1.0 day"
        assert self.converter.format_label(20, "days") == "2.5 days"
        assert self.converter.format_label(1) == "1.0 hour"
        assert self.converter.format_label(4) == "4.0 hours"

    def test_format_label_short(self):
        """Test short suffixes."""
        assert self.converter.format_label(8, "days", short=True) == "1.0d"
        assert self.converter.format_label(4, "hours", short=True) == "4.0h"

    def test_custom_hours_per_day(self):
        """Test the hours-per-day constant is configurable."""
        assert UnitConverter(hours_per_day=7.5).format(15, "days") == "2.0"

    def test_invalid_unit(self):
        """Test unknown units are rejected."""
        with pytest.raises(ValidationError, match="Unsupported display unit"):
            self.converter.format(8, "weeks")

    def test_invalid_hours_per_day(self):
        """Test a non-positive day length is rejected."""
        with pytest.raises(ValidationError):
            UnitConverter(hours_per_day=0)
