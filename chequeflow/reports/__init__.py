# Reports Module
# Portfolio statistics over a cheque snapshot
#
# Components:
# - aggregator.py: Pure reductions (bank, status, month, deadlines, summary)
# - formatters.py: CSV export
# - schemas.py: Report rows

from .aggregator import (
    aggregate_by_bank,
    aggregate_by_status,
    aggregate_by_month,
    analyze_deadlines,
    summarize_portfolio,
    classify_portfolio,
    build_report,
    build_report_at,
)
from .formatters import export_checks_csv, export_filename
from .schemas import BankStat, StatusStat, MonthlyStat, DeadlineAnalysis, ReportSummary, CheckReport

__all__ = [
    "aggregate_by_bank",
    "aggregate_by_status",
    "aggregate_by_month",
    "analyze_deadlines",
    "summarize_portfolio",
    "classify_portfolio",
    "build_report",
    "build_report_at",
    "export_checks_csv",
    "export_filename",
    "BankStat",
    "StatusStat",
    "MonthlyStat",
    "DeadlineAnalysis",
    "ReportSummary",
    "CheckReport",
]
