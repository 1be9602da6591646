"""
School finance ledger.

Bills and payments, per-student savings accounts, payroll, the cash ledger,
daily infaq, academic years and dashboard analytics over a relational store.
"""

__version__ = "0.1.0"
