"""
API routers.
"""

from . import reports, timesheets

__all__ = ["reports", "timesheets"]
