"""
Report Aggregator - Portfolio statistics

Pure reductions over a cheque snapshot:
1. By bank: volume, amount and how many reached case filing
2. By notice status: volume and share per delivery outcome
3. By month: cheques added over the trailing six months
4. Deadline analysis: overdue and due-soon stages, using the same
   classification as the alert generator
5. Summary: headline counts and amounts

Formatting (CSV and friends) lives in formatters.py.
"""

import logging
from collections import OrderedDict
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

from dateutil.relativedelta import relativedelta

from chequeflow.checks.schemas import NOTICE_STATUS_LABELS, NoticeStatus
from chequeflow.deadlines.clock import Clock, as_of_date
from chequeflow.deadlines.engine import calculate_stage_progress, is_due_soon, read_date
from chequeflow.deadlines.schemas import StageProgress
from chequeflow.deadlines.stages import Stage, StageState
from chequeflow.exceptions import ChequeEngineError
from .schemas import (
    BankStat,
    CheckReport,
    DeadlineAnalysis,
    MonthlyStat,
    ReportSummary,
    StatusStat,
)

logger = logging.getLogger(__name__)

MONTHS_IN_REPORT = 6

# Counter name prefix per stage in DeadlineAnalysis
DEADLINE_COUNTER_PREFIX = {
    Stage.DISHONOR: "dishonor",
    Stage.NOTICE: "notice",
    Stage.FILING: "case",
}

Classified = List[Tuple[Any, Dict[Stage, StageProgress]]]


def _amount(record: Any) -> Decimal:
    value = getattr(record, "check_amount", None)
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _percent(part: int, whole: int) -> int:
    """Whole percent, rounded half-up; 0 for an empty denominator."""
    if whole == 0:
        return 0
    value = Decimal(part) * 100 / Decimal(whole)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# =============================================================================
# Classification
# =============================================================================

def classify_portfolio(checks: Iterable[Any], now: Union[datetime, date]) -> Classified:
    """Run the deadline engine once per cheque."""
    classified = []
    for record in checks:
        try:
            classified.append((record, calculate_stage_progress(record, now)))
        except ChequeEngineError as e:
            logger.error(f"Report classification failed for check {getattr(record, 'id', None)}: {e}")
            raise
    return classified


# =============================================================================
# Groupings
# =============================================================================

def aggregate_by_bank(checks: Iterable[Any]) -> List[BankStat]:
    """Count, amount and completed cases per bank, busiest bank first."""
    totals: Dict[str, Dict[str, Any]] = {}
    for record in checks:
        bucket = totals.setdefault(
            record.bank_name, {"count": 0, "amount": Decimal("0"), "completed": 0}
        )
        bucket["count"] += 1
        bucket["amount"] += _amount(record)
        if record.case_filed_date is not None:
            bucket["completed"] += 1

    rows = [
        BankStat(
            bank=bank,
            count=data["count"],
            amount=data["amount"],
            completed_count=data["completed"],
            rate=_percent(data["completed"], data["count"]),
        )
        for bank, data in totals.items()
    ]
    rows.sort(key=lambda row: (-row.count, row.bank))
    return rows


def aggregate_by_status(checks: Iterable[Any]) -> List[StatusStat]:
    """Count, amount and share for each of the five notice statuses."""
    totals = OrderedDict((status, [0, Decimal("0")]) for status in NoticeStatus)
    for record in checks:
        bucket = totals[NoticeStatus(record.notice_status)]
        bucket[0] += 1
        bucket[1] += _amount(record)

    total_count = sum(count for count, _ in totals.values())
    return [
        StatusStat(
            status=status,
            label=NOTICE_STATUS_LABELS[status],
            count=count,
            amount=amount,
            percent=_percent(count, total_count),
        )
        for status, (count, amount) in totals.items()
    ]


def aggregate_by_month(
    checks: Iterable[Any],
    now: Union[datetime, date],
    months: int = MONTHS_IN_REPORT,
) -> List[MonthlyStat]:
    """Cheques added per month, oldest first, ending with the current month."""
    current = as_of_date(now).replace(day=1)
    zone = now.tzinfo if isinstance(now, datetime) else None

    buckets: "OrderedDict[Tuple[int, int], List[Any]]" = OrderedDict()
    for offset in range(months - 1, -1, -1):
        start = current - relativedelta(months=offset)
        buckets[(start.year, start.month)] = [start, 0, Decimal("0")]

    for record in checks:
        created = read_date(record, "created_at", zone)
        if created is None:
            continue
        bucket = buckets.get((created.year, created.month))
        if bucket is not None:
            bucket[1] += 1
            bucket[2] += _amount(record)

    return [
        MonthlyStat(
            month=start.strftime("%Y-%m"),
            label=start.strftime("%b %Y"),
            count=count,
            amount=amount,
        )
        for start, count, amount in buckets.values()
    ]


# =============================================================================
# Deadline analysis and summary
# =============================================================================

def analyze_deadlines(classified: Classified) -> DeadlineAnalysis:
    """Overdue and due-soon counts per stage across the portfolio."""
    counts = {}
    for prefix in DEADLINE_COUNTER_PREFIX.values():
        counts[f"{prefix}_overdue"] = 0
        counts[f"{prefix}_upcoming"] = 0

    for _, stages in classified:
        for stage, progress in stages.items():
            prefix = DEADLINE_COUNTER_PREFIX[stage]
            if progress.state == StageState.OVERDUE:
                counts[f"{prefix}_overdue"] += 1
            elif is_due_soon(progress):
                counts[f"{prefix}_upcoming"] += 1

    return DeadlineAnalysis(**counts)


def summarize_portfolio(classified: Classified) -> ReportSummary:
    """Headline counts: which step each cheque is waiting on, and amounts."""
    open_states = (StageState.PENDING, StageState.OVERDUE)
    total_amount = Decimal("0")
    completed_amount = Decimal("0")
    pending = {Stage.DISHONOR: 0, Stage.NOTICE: 0, Stage.FILING: 0}
    completed = 0
    overdue = 0

    for record, stages in classified:
        amount = _amount(record)
        total_amount += amount
        if stages[Stage.FILING].state == StageState.COMPLETED:
            completed += 1
            completed_amount += amount
        for stage, progress in stages.items():
            if progress.state in open_states:
                pending[stage] += 1
            if progress.state == StageState.OVERDUE:
                overdue += 1

    return ReportSummary(
        total_checks=len(classified),
        total_amount=total_amount,
        completed_amount=completed_amount,
        pending_amount=total_amount - completed_amount,
        pending_dishonor=pending[Stage.DISHONOR],
        pending_notice=pending[Stage.NOTICE],
        pending_case=pending[Stage.FILING],
        completed=completed,
        overdue=overdue,
    )


# =============================================================================
# Full report
# =============================================================================

def build_report_at(checks: Sequence[Any], now: Union[datetime, date]) -> CheckReport:
    """Full report for a snapshot at an already captured instant."""
    checks = tuple(checks)
    classified = classify_portfolio(checks, now)
    report = CheckReport(
        generated_at=now if isinstance(now, datetime) else datetime.combine(now, datetime.min.time()),
        summary=summarize_portfolio(classified),
        by_bank=aggregate_by_bank(checks),
        by_status=aggregate_by_status(checks),
        monthly=aggregate_by_month(checks, now),
        deadlines=analyze_deadlines(classified),
    )
    logger.info(
        f"Built report over {len(checks)} checks: "
        f"{report.summary.overdue} overdue stages, {report.summary.completed} cases filed"
    )
    return report


def build_report(checks: Sequence[Any], clock: Clock) -> CheckReport:
    """Full report for a snapshot, reading the clock once."""
    return build_report_at(checks, clock.now())
