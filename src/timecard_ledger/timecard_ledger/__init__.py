"""Timecard Ledger package.

This package is organized by feature modules (geo, ledger, overtime,
aggregation, approvals, reports, ...) with a thin Flask controller layer and
service/repository layers underneath.
"""
