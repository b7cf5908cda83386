"""
Deadline Engine

Derives, for one cheque and one captured instant, the state of each stage
of the legal process:

1. WAITING   - prerequisite milestone absent (prior stage not reached)
2. COMPLETED - completion milestone recorded
3. OVERDUE   - more days elapsed than the stage window allows
4. PENDING   - inside the window; progress and days remaining reported

Records are read by attribute, so both frozen ChequeRecord snapshots and
ORM rows can be evaluated. The engine never mutates its input.
"""

import logging
import math
from datetime import date, datetime, timedelta, tzinfo
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from dateutil.parser import isoparse

from chequeflow.exceptions import InvalidChequeDateError
from .clock import as_of_date
from .schemas import StageProgress
from .stages import STAGE_ORDER, Stage, StageRule, StageState, get_stage_rule

if TYPE_CHECKING:
    from chequeflow.checks.schemas import ChequeRecord

logger = logging.getLogger(__name__)


def read_date(record: Any, field: str, zone: Optional[tzinfo] = None) -> Optional[date]:
    """
    Read a milestone from a record as a calendar date.

    None means the milestone has not happened. Datetimes are converted to
    `zone` first when both are timezone-aware. Strings must be ISO-8601.
    Anything else is a contract violation.
    """
    value = getattr(record, field, None)
    if value is None:
        return None

    if isinstance(value, str):
        try:
            value = isoparse(value)
        except (ValueError, OverflowError) as e:
            raise InvalidChequeDateError(getattr(record, "id", None), field, value) from e

    if isinstance(value, datetime):
        if zone is not None and value.tzinfo is not None:
            value = value.astimezone(zone)
        return value.date()
    if isinstance(value, date):
        return value

    raise InvalidChequeDateError(getattr(record, "id", None), field, value)


def _progress(elapsed: int, window: int) -> int:
    """Percent of the window used, rounded half-up and clamped to 0-100."""
    percent = math.floor(elapsed / window * 100 + 0.5)
    return max(0, min(100, percent))


def _evaluate(record: Any, rule: StageRule, today: date) -> StageProgress:
    prerequisite = read_date(record, rule.prerequisite_field)
    if prerequisite is None:
        return StageProgress(stage=rule.stage, state=StageState.WAITING, progress=0)

    elapsed = (today - prerequisite).days
    deadline = prerequisite + timedelta(days=rule.window_days)

    if read_date(record, rule.completion_field) is not None:
        return StageProgress(
            stage=rule.stage,
            state=StageState.COMPLETED,
            progress=100,
            days_elapsed=elapsed,
            deadline=deadline,
        )

    if elapsed > rule.window_days:
        return StageProgress(
            stage=rule.stage,
            state=StageState.OVERDUE,
            progress=100,
            days_elapsed=elapsed,
            deadline=deadline,
        )

    return StageProgress(
        stage=rule.stage,
        state=StageState.PENDING,
        progress=_progress(elapsed, rule.window_days),
        days_remaining=rule.window_days - elapsed,
        days_elapsed=elapsed,
        deadline=deadline,
    )


def calculate_stage(
    record: Union["ChequeRecord", Any],
    stage: Union[Stage, str],
    now: Union[datetime, date],
) -> StageProgress:
    """Derive the state of a single stage."""
    return _evaluate(record, get_stage_rule(stage), as_of_date(now))


def calculate_stage_progress(
    record: Union["ChequeRecord", Any],
    now: Union[datetime, date],
) -> Dict[Stage, StageProgress]:
    """Derive all three stages for one cheque, in pipeline order."""
    today = as_of_date(now)
    stages = {
        stage: _evaluate(record, get_stage_rule(stage), today)
        for stage in STAGE_ORDER
    }
    logger.debug(
        f"Check {getattr(record, 'id', None)} stages: "
        + ", ".join(f"{s.value}={p.state.value}" for s, p in stages.items())
    )
    return stages


def is_due_soon(progress: StageProgress) -> bool:
    """True when a pending stage is within its upcoming threshold."""
    if progress.state != StageState.PENDING or progress.days_remaining is None:
        return False
    return progress.days_remaining <= get_stage_rule(progress.stage).upcoming_threshold_days


def days_overdue(progress: StageProgress) -> Optional[int]:
    """Days past the deadline for an overdue stage."""
    if progress.state != StageState.OVERDUE or progress.days_elapsed is None:
        return None
    return progress.days_elapsed - get_stage_rule(progress.stage).window_days
