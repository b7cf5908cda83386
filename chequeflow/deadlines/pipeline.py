"""
Deadline Pass - single-instant orchestration

Reads the clock once and derives everything the cheque dashboard shows
from one snapshot:
1. Stage progress for each cheque
2. Alerts, most urgent first
3. Portfolio report

Running the pass twice over the same snapshot and instant gives
identical results.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from chequeflow.exceptions import ChequeEngineError
from chequeflow.reports.aggregator import build_report_at
from chequeflow.reports.schemas import CheckReport
from .alerts import check_label, generate_alerts_at
from .clock import Clock
from .engine import calculate_stage_progress
from .schemas import ChequeAlert, CheckStages
from .stages import STAGE_ORDER

logger = logging.getLogger(__name__)


@dataclass
class DeadlinePassResult:
    """Result of one deadline pass."""
    run_at: datetime
    stages: List[CheckStages] = field(default_factory=list)
    alerts: List[ChequeAlert] = field(default_factory=list)
    report: Optional[CheckReport] = None

    # Performance; logged, not serialised
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "run_at": self.run_at.isoformat(),
            "stages": [s.model_dump(mode="json") for s in self.stages],
            "alerts": [a.model_dump(mode="json") for a in self.alerts],
            "report": self.report.model_dump(mode="json") if self.report else None,
        }


def check_stages_at(checks: Iterable[Any], now: Union[datetime, date]) -> List[CheckStages]:
    """Stage progress for each cheque, in pipeline order."""
    stages = []
    for record in checks:
        try:
            progress = calculate_stage_progress(record, now)
        except ChequeEngineError as e:
            logger.error(f"Deadline pass failed for check {getattr(record, 'id', None)}: {e}")
            raise
        stages.append(CheckStages(
            check_id=str(record.id),
            check_number=check_label(record),
            stages=[progress[stage] for stage in STAGE_ORDER],
        ))
    return stages


def run_deadline_pass(checks: Sequence[Any], clock: Clock) -> DeadlinePassResult:
    """Compute stages, alerts and report for a snapshot at one instant."""
    started = time.perf_counter()
    now = clock.now()
    checks = tuple(checks)

    result = DeadlinePassResult(
        run_at=now,
        stages=check_stages_at(checks, now),
        alerts=generate_alerts_at(checks, now),
        report=build_report_at(checks, now),
    )
    result.duration_ms = int((time.perf_counter() - started) * 1000)

    logger.info(
        f"Deadline pass over {len(checks)} checks: "
        f"{len(result.alerts)} alerts in {result.duration_ms}ms"
    )
    return result
