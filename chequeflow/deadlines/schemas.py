"""Pydantic schemas for derived stage state and alerts."""
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .stages import Stage, StageState


class AlertSeverity(str, Enum):
    """Severity levels for deadline alerts."""
    CRITICAL = "critical"  # Window already elapsed
    WARNING = "warning"    # Inside the upcoming threshold


class StageProgress(BaseModel):
    """Derived state of one stage for one cheque."""
    model_config = ConfigDict(frozen=True)

    stage: Stage
    state: StageState
    progress: int = Field(..., ge=0, le=100)
    days_remaining: Optional[int] = None  # Only while pending
    days_elapsed: Optional[int] = None
    deadline: Optional[date] = None


class ChequeAlert(BaseModel):
    """An overdue or due-soon stage surfaced to the user."""
    model_config = ConfigDict(frozen=True)

    check_id: str
    check_number: str
    stage: Stage
    severity: AlertSeverity
    message: str
    is_overdue: bool
    days_remaining: Optional[int] = None
    days_overdue: Optional[int] = None
    deadline: Optional[date] = None


class CheckStages(BaseModel):
    """Stage progress for a single cheque."""
    check_id: str
    check_number: str
    stages: List[StageProgress]
