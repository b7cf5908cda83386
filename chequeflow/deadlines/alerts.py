"""
Alert Generator

Runs the deadline engine over every cheque in a snapshot and emits at most
one alert per (cheque, stage):

- OVERDUE                                   -> critical
- PENDING within the stage's upcoming threshold -> warning
- anything else                             -> no alert

Alerts are recomputed on every pass and never persisted.
"""

import logging
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Tuple, Union

from chequeflow.exceptions import ChequeEngineError
from .clock import Clock
from .engine import calculate_stage_progress, days_overdue, is_due_soon
from .schemas import AlertSeverity, ChequeAlert, StageProgress
from .stages import STAGE_ORDER, StageState, get_stage_rule

logger = logging.getLogger(__name__)

SEVERITY_RANK = {
    AlertSeverity.CRITICAL: 0,
    AlertSeverity.WARNING: 1,
}


def check_label(record: Any) -> str:
    """Display number of a cheque, falling back to its id."""
    return str(getattr(record, "check_number", None) or record.id)


def _build_alert(record: Any, progress: StageProgress) -> Optional[ChequeAlert]:
    rule = get_stage_rule(progress.stage)
    number = check_label(record)

    if progress.state == StageState.OVERDUE:
        overdue_by = days_overdue(progress)
        return ChequeAlert(
            check_id=str(record.id),
            check_number=number,
            stage=progress.stage,
            severity=AlertSeverity.CRITICAL,
            message=(
                f"Cheque #{number}: {rule.label.lower()} deadline has passed "
                f"({overdue_by} days overdue)"
            ),
            is_overdue=True,
            days_overdue=overdue_by,
            deadline=progress.deadline,
        )

    if is_due_soon(progress):
        remaining = progress.days_remaining
        return ChequeAlert(
            check_id=str(record.id),
            check_number=number,
            stage=progress.stage,
            severity=AlertSeverity.WARNING,
            message=f"Cheque #{number}: {remaining} days left to {rule.action}",
            is_overdue=False,
            days_remaining=remaining,
            deadline=progress.deadline,
        )

    return None


def evaluate_check_alerts(record: Any, now: Union[datetime, date]) -> List[ChequeAlert]:
    """Alerts for a single cheque, in pipeline order."""
    stages = calculate_stage_progress(record, now)
    alerts = []
    for stage in STAGE_ORDER:
        alert = _build_alert(record, stages[stage])
        if alert is not None:
            alerts.append(alert)
    return alerts


def _sort_key(alert: ChequeAlert) -> Tuple[int, int, str, int]:
    # Overdue alerts rank as negative days remaining, most overdue first
    if alert.is_overdue:
        urgency = -(alert.days_overdue or 0)
    else:
        urgency = alert.days_remaining or 0
    return (
        SEVERITY_RANK[alert.severity],
        urgency,
        alert.check_id,
        STAGE_ORDER.index(alert.stage),
    )


def generate_alerts_at(checks: Iterable[Any], now: Union[datetime, date]) -> List[ChequeAlert]:
    """Alerts for a whole snapshot at an already captured instant."""
    alerts: List[ChequeAlert] = []
    for record in checks:
        try:
            alerts.extend(evaluate_check_alerts(record, now))
        except ChequeEngineError as e:
            logger.error(f"Alert generation failed for check {getattr(record, 'id', None)}: {e}")
            raise

    alerts.sort(key=_sort_key)

    critical = sum(1 for a in alerts if a.severity == AlertSeverity.CRITICAL)
    logger.info(f"Generated {len(alerts)} alerts ({critical} critical)")
    return alerts


def generate_alerts(checks: Iterable[Any], clock: Clock) -> List[ChequeAlert]:
    """Alerts for a whole snapshot, reading the clock once."""
    return generate_alerts_at(checks, clock.now())


def alerts_for_check(alerts: Iterable[ChequeAlert], check_id: str) -> List[ChequeAlert]:
    """Alerts belonging to one cheque, preserving order."""
    return [alert for alert in alerts if alert.check_id == check_id]
