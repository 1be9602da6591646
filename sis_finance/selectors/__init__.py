"""Selectors for the school finance ledger (read side)."""

from sis_finance.selectors.analytics_selector import AnalyticsSelector
from sis_finance.selectors.directory_selector import DirectorySelector

__all__ = [
    "AnalyticsSelector",
    "DirectorySelector",
]
