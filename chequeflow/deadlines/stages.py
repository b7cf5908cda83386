"""
Stage Table - Statutory Windows

The three steps a dishonored cheque moves through before a case can be
heard. Each step has a milestone that starts its clock (prerequisite),
a milestone that completes it, and a fixed window in days.

The "upcoming" thresholds are independent constants per stage and are not
a fixed fraction of the window.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union

from chequeflow.exceptions import UnknownStageError


class Stage(str, Enum):
    """Steps of the legal process, in pipeline order."""
    DISHONOR = "dishonor"
    NOTICE = "notice"
    FILING = "filing"


class StageState(str, Enum):
    """Derived state of a single stage."""
    WAITING = "waiting"        # Prior stage not reached yet
    PENDING = "pending"        # Clock running, inside the window
    COMPLETED = "completed"    # Completion milestone recorded
    OVERDUE = "overdue"        # Window elapsed without completion


@dataclass(frozen=True)
class StageRule:
    """Fixed rule for one stage."""
    stage: Stage
    label: str
    action: str  # What must happen before the deadline
    prerequisite_field: str
    completion_field: str
    window_days: int
    upcoming_threshold_days: int


STAGE_RULES: Dict[Stage, StageRule] = {
    Stage.DISHONOR: StageRule(
        stage=Stage.DISHONOR,
        label="Dishonor",
        action="record the dishonor",
        prerequisite_field="check_date",
        completion_field="dishonor_date",
        window_days=180,  # 6 months from the cheque date
        upcoming_threshold_days=30,
    ),
    Stage.NOTICE: StageRule(
        stage=Stage.NOTICE,
        label="Legal notice",
        action="send the legal notice",
        prerequisite_field="dishonor_date",
        completion_field="legal_notice_date",
        window_days=30,
        upcoming_threshold_days=10,
    ),
    Stage.FILING: StageRule(
        stage=Stage.FILING,
        label="Case filing",
        action="file the case",
        prerequisite_field="legal_notice_date",
        completion_field="case_filed_date",
        window_days=60,
        upcoming_threshold_days=15,
    ),
}

STAGE_ORDER: Tuple[Stage, ...] = (Stage.DISHONOR, Stage.NOTICE, Stage.FILING)


def get_stage_rule(stage: Union[Stage, str]) -> StageRule:
    """Look up the rule for a stage, rejecting anything outside the pipeline."""
    try:
        return STAGE_RULES[Stage(stage)]
    except (KeyError, ValueError) as e:
        raise UnknownStageError(stage) from e
