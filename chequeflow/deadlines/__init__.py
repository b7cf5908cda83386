# Deadlines Module
# Stage state and alerts for the dishonor -> notice -> filing process
#
# Components:
# - stages.py: Stage table (windows and upcoming thresholds)
# - clock.py: Clock capability (system and fixed)
# - engine.py: Per-cheque stage derivation
# - alerts.py: Portfolio alert generation
# - pipeline.py: Single-instant pass producing alerts and reports

from .stages import Stage, StageState, StageRule, STAGE_RULES, STAGE_ORDER, get_stage_rule
from .clock import Clock, SystemClock, FixedClock, get_clock
from .schemas import AlertSeverity, StageProgress, ChequeAlert, CheckStages
from .engine import calculate_stage, calculate_stage_progress, is_due_soon, days_overdue
from .alerts import generate_alerts, generate_alerts_at, evaluate_check_alerts, alerts_for_check

__all__ = [
    # Stages
    "Stage",
    "StageState",
    "StageRule",
    "STAGE_RULES",
    "STAGE_ORDER",
    "get_stage_rule",
    # Clock
    "Clock",
    "SystemClock",
    "FixedClock",
    "get_clock",
    # Schemas
    "AlertSeverity",
    "StageProgress",
    "ChequeAlert",
    "CheckStages",
    # Engine
    "calculate_stage",
    "calculate_stage_progress",
    "is_due_soon",
    "days_overdue",
    # Alerts
    "generate_alerts",
    "generate_alerts_at",
    "evaluate_check_alerts",
    "alerts_for_check",
]
