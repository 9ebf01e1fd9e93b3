"""
Domain services for the timesheet ledger.
This module exports the classification, recurrence, reconciliation,
aggregation and unit conversion services.
"""

from .unit_converter import UnitConverter, DisplayUnit
from .entry_classifier import EntryClassifier
from .recurrence import RecurrenceExpander, RecurrencePlan, RecurrenceRule
from .reconciliation_engine import ReconciliationEngine
from .aggregation_engine import AggregationEngine

__all__ = [
    "UnitConverter",
    "DisplayUnit",
    "EntryClassifier",
    "RecurrenceExpander",
    "RecurrencePlan",
    "RecurrenceRule",
    "ReconciliationEngine",
    "AggregationEngine",
]
