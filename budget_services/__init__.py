"""Services built on the ledger model: reporting."""

from budget_services.report import LedgerReport, ReportRow, build_report, render_report

__all__ = ["LedgerReport", "ReportRow", "build_report", "render_report"]
