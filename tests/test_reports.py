"""
Tests for the Report Aggregator and CSV export.

Tests cover each grouping, consistency with the alert generator,
idempotence and the export format.
"""

import csv
import io
from collections import Counter
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from dateutil import tz

from chequeflow.checks.schemas import NoticeStatus
from chequeflow.deadlines.alerts import generate_alerts
from chequeflow.deadlines.clock import FixedClock
from chequeflow.deadlines.schemas import AlertSeverity
from chequeflow.deadlines.stages import Stage
from chequeflow.exceptions import InvalidChequeDateError
from chequeflow.reports.aggregator import (
    aggregate_by_bank,
    aggregate_by_month,
    aggregate_by_status,
    analyze_deadlines,
    build_report,
    build_report_at,
    classify_portfolio,
    summarize_portfolio,
)
from chequeflow.reports.formatters import CSV_HEADERS, export_checks_csv, export_filename


@pytest.fixture
def portfolio(make_check, days_ago, now):
    """A mixed portfolio across banks, statuses and stages."""
    return [
        # Dishonor overdue
        make_check(bank_name="Sonali Bank", check_date=days_ago(200), check_amount=Decimal("5000")),
        # Dishonor due soon
        make_check(bank_name="Sonali Bank", check_date=days_ago(160), check_amount=None),
        # Notice overdue
        make_check(
            bank_name="Dutch-Bangla Bank",
            check_date=days_ago(100),
            dishonor_date=days_ago(40),
            check_amount=Decimal("20000"),
        ),
        # Notice due soon
        make_check(
            bank_name="BRAC Bank",
            check_date=days_ago(60),
            dishonor_date=days_ago(25),
            check_amount=Decimal("1500.50"),
        ),
        # Filing due soon
        make_check(
            bank_name="BRAC Bank",
            check_date=days_ago(120),
            dishonor_date=days_ago(80),
            legal_notice_date=days_ago(50),
            notice_status=NoticeStatus.DELIVERED,
            check_amount=Decimal("3000"),
        ),
        # Case filed
        make_check(
            bank_name="Sonali Bank",
            check_date=days_ago(300),
            dishonor_date=days_ago(200),
            legal_notice_date=days_ago(190),
            case_filed_date=days_ago(150),
            notice_status=NoticeStatus.AD_RECEIVED,
            check_amount=Decimal("7000"),
            created_at=now - timedelta(days=100),
        ),
    ]


# =============================================================================
# By bank
# =============================================================================

class TestBankAggregation:
    """Tests for per-bank rows."""

    def test_partition_covers_every_cheque(self, portfolio):
        rows = aggregate_by_bank(portfolio)

        assert sum(row.count for row in rows) == len(portfolio)

    def test_row_contents(self, portfolio):
        rows = {row.bank: row for row in aggregate_by_bank(portfolio)}

        sonali = rows["Sonali Bank"]
        assert sonali.count == 3
        assert sonali.amount == Decimal("12000")  # Missing amount counts as 0
        assert sonali.completed_count == 1
        assert sonali.rate == 33

    def test_busiest_bank_first(self, portfolio):
        rows = aggregate_by_bank(portfolio)

        assert [row.bank for row in rows] == ["Sonali Bank", "BRAC Bank", "Dutch-Bangla Bank"]

    def test_empty_portfolio(self):
        assert aggregate_by_bank([]) == []


# =============================================================================
# By status
# =============================================================================

class TestStatusAggregation:
    """Tests for per-notice-status rows."""

    def test_all_statuses_present(self, portfolio):
        rows = aggregate_by_status(portfolio)

        assert [row.status for row in rows] == list(NoticeStatus)
        assert sum(row.count for row in rows) == len(portfolio)

    def test_counts_and_share(self, portfolio):
        rows = {row.status: row for row in aggregate_by_status(portfolio)}

        assert rows[NoticeStatus.PENDING].count == 4
        assert rows[NoticeStatus.PENDING].percent == 67
        assert rows[NoticeStatus.DELIVERED].amount == Decimal("3000")
        assert rows[NoticeStatus.RETURNED_UNACCEPTED].count == 0
        assert rows[NoticeStatus.RETURNED_UNACCEPTED].percent == 0

    def test_empty_portfolio_zero_filled(self):
        rows = aggregate_by_status([])

        assert len(rows) == 5
        assert all(row.count == 0 and row.percent == 0 for row in rows)


# =============================================================================
# By month
# =============================================================================

class TestMonthlyAggregation:
    """Tests for the trailing six-month series."""

    def test_empty_portfolio_has_six_zero_months(self, now):
        rows = aggregate_by_month([], now)

        assert len(rows) == 6
        assert all(row.count == 0 and row.amount == 0 for row in rows)

    def test_month_keys_end_with_current_month(self, now):
        rows = aggregate_by_month([], now)

        assert [row.month for row in rows] == [
            "2025-10", "2025-11", "2025-12", "2026-01", "2026-02", "2026-03",
        ]
        assert rows[-1].label == "Mar 2026"

    def test_populated_portfolio(self, make_check, now):
        checks = [
            make_check(created_at=now, check_amount=Decimal("100")),
            make_check(created_at=datetime(2026, 3, 1, 0, 0, tzinfo=timezone.utc), check_amount=Decimal("50")),
            make_check(created_at=datetime(2025, 12, 31, 23, 59, tzinfo=timezone.utc)),
            make_check(created_at=datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc)),  # Too old
        ]

        rows = {row.month: row for row in aggregate_by_month(checks, now)}

        assert len(rows) == 6
        assert rows["2026-03"].count == 2
        assert rows["2026-03"].amount == Decimal("150")
        assert rows["2025-12"].count == 1
        assert rows["2026-01"].count == 0
        assert "2025-09" not in rows

    def test_months_follow_clock_timezone(self, make_check):
        dhaka_now = datetime(2026, 3, 15, 16, 30, tzinfo=tz.gettz("Asia/Dhaka"))
        # 05:30 on 1 March in Dhaka
        check = make_check(created_at=datetime(2026, 2, 28, 23, 30, tzinfo=timezone.utc))

        rows = {row.month: row for row in aggregate_by_month([check], dhaka_now)}

        assert rows["2026-03"].count == 1
        assert rows["2026-02"].count == 0

    def test_year_boundary(self, make_check):
        january = datetime(2026, 1, 10, tzinfo=timezone.utc)

        rows = aggregate_by_month([make_check(created_at=january)], january)

        assert [row.month for row in rows][0] == "2025-08"
        assert rows[-1].count == 1


# =============================================================================
# Deadline analysis and summary
# =============================================================================

class TestDeadlineAnalysis:
    """Tests for portfolio-wide deadline counters."""

    def test_counters(self, portfolio, now):
        analysis = analyze_deadlines(classify_portfolio(portfolio, now))

        assert analysis.dishonor_overdue == 1
        assert analysis.dishonor_upcoming == 1
        assert analysis.notice_overdue == 1
        assert analysis.notice_upcoming == 1
        assert analysis.case_overdue == 0
        assert analysis.case_upcoming == 1

    def test_matches_alert_generator(self, portfolio, clock, now):
        analysis = analyze_deadlines(classify_portfolio(portfolio, now))
        alerts = generate_alerts(portfolio, clock)

        critical = Counter(a.stage for a in alerts if a.severity == AlertSeverity.CRITICAL)
        warning = Counter(a.stage for a in alerts if a.severity == AlertSeverity.WARNING)

        assert analysis.dishonor_overdue == critical[Stage.DISHONOR]
        assert analysis.notice_overdue == critical[Stage.NOTICE]
        assert analysis.case_overdue == critical[Stage.FILING]
        assert analysis.dishonor_upcoming == warning[Stage.DISHONOR]
        assert analysis.notice_upcoming == warning[Stage.NOTICE]
        assert analysis.case_upcoming == warning[Stage.FILING]


class TestSummary:
    """Tests for headline figures."""

    def test_summary(self, portfolio, now):
        summary = summarize_portfolio(classify_portfolio(portfolio, now))

        assert summary.total_checks == 6
        assert summary.total_amount == Decimal("36500.50")
        assert summary.completed_amount == Decimal("7000")
        assert summary.pending_amount == Decimal("29500.50")
        assert summary.pending_dishonor == 2
        assert summary.pending_notice == 2
        assert summary.pending_case == 1
        assert summary.completed == 1
        assert summary.overdue == 2


# =============================================================================
# Full report
# =============================================================================

class TestBuildReport:
    """Tests for the combined report."""

    def test_idempotent(self, portfolio, clock):
        first = build_report(portfolio, clock)
        second = build_report(portfolio, clock)

        assert first.model_dump_json() == second.model_dump_json()

    def test_empty_portfolio(self, clock, now):
        report = build_report([], clock)

        assert report.generated_at == now
        assert report.summary.total_checks == 0
        assert len(report.monthly) == 6
        assert report.by_bank == []

    def test_clock_read_once(self, portfolio, now):
        calls = []

        class CountingClock(FixedClock):
            def now(self):
                calls.append(1)
                return super().now()

        build_report(portfolio, CountingClock(now))

        assert len(calls) == 1

    def test_malformed_record_propagates(self, make_check, now):
        bad = SimpleNamespace(
            id="bad-1",
            bank_name="X",
            check_amount=None,
            check_date="32-01-2026",
            dishonor_date=None,
            legal_notice_date=None,
            case_filed_date=None,
            notice_status="pending",
            created_at=now,
        )

        with pytest.raises(InvalidChequeDateError):
            build_report_at([make_check(), bad], now)


# =============================================================================
# CSV export
# =============================================================================

class TestCsvExport:
    """Tests for the export formatter."""

    def test_header_and_rows(self, portfolio):
        text = export_checks_csv(portfolio)
        rows = list(csv.reader(io.StringIO(text)))

        assert rows[0] == CSV_HEADERS
        assert len(rows) == len(portfolio) + 1

    def test_row_values(self, make_check, days_ago):
        check = make_check(check_number="A-1", check_amount=None, check_date=days_ago(3))

        rows = list(csv.reader(io.StringIO(export_checks_csv([check]))))

        assert rows[1] == ["A-1", "Sonali Bank", "0", days_ago(3).isoformat(), "", "", "Pending", ""]

    def test_embedded_commas_are_quoted(self, make_check):
        check = make_check(bank_name="Bank Asia, Motijheel")

        text = export_checks_csv([check])
        rows = list(csv.reader(io.StringIO(text)))

        assert '"Bank Asia, Motijheel"' in text
        assert rows[1][1] == "Bank Asia, Motijheel"
        assert len(rows[1]) == len(CSV_HEADERS)

    def test_empty_export_has_header(self):
        assert export_checks_csv([]) == ",".join(CSV_HEADERS) + "\n"

    def test_filename(self, now):
        assert export_filename(now) == "check-report-2026-03-15.csv"
