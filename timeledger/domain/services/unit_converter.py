"""Unit converter for presenting hour totals.
Aggregations always work on raw hours; conversion happens only for display.
"""

from enum import Enum
from typing import Union

from timeledger.domain.models.base import ValidationError


HOURS_PER_DAY = 8.0


class DisplayUnit(str, Enum):
    """Units hours can be displayed in."""
    HOURS = "hours"
    DAYS = "days"


class UnitConverter:
    """Converts hour values to the selected display unit."""

    def __init__(self, hours_per_day: float = HOURS_PER_DAY):
        if hours_per_day <= 0:
            raise ValidationError("Hours per day must be positive", "hours_per_day")
        self.hours_per_day = hours_per_day

    @staticmethod
    def parse_unit(unit: Union[str, DisplayUnit]) -> DisplayUnit:
        try:
            return DisplayUnit(unit)
        except ValueError:
            raise ValidationError(f"Unsupported display unit: {unit}", "unit")

    def to_days(self, hours: float) -> float:
        return hours / self.hours_per_day

    def to_hours(self, days: float) -> float:
        return days * self.hours_per_day

    def convert(self, hours: float, unit: Union[str, DisplayUnit]) -> float:
        """Convert raw hours to the value shown in the given unit."""
        if self.parse_unit(unit) == DisplayUnit.DAYS:
            return self.to_days(hours)
        return float(hours)

    def format(self, hours: float, unit: Union[str, DisplayUnit] = DisplayUnit.HOURS) -> str:
        """Format hours in the given unit with one decimal place."""
        return f"{self.convert(hours, unit):.1f}"

    def format_label(
        self,
        hours: float,
        unit: Union[str, DisplayUnit] = DisplayUnit.HOURS,
        short: bool = False
    ) -> str:
        """
        Format hours with a unit suffix.

        Long form reads "1.0 day" / "2.5 days" / "1.0 hour" / "4.0 hours";
        short form reads "1.0d" / "4.0h".
        """
        display_unit = self.parse_unit(unit)
        value = self.convert(hours, display_unit)
        formatted = f"{value:.1f}"

        if display_unit == DisplayUnit.DAYS:
            if short:
                return f"{formatted}d"
            return f"{formatted} {'day' if value == 1 else 'days'}"

        if short:
            return f"{formatted}h"
        return f"{formatted} {'hour' if value == 1 else 'hours'}"
