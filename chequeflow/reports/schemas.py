"""Pydantic schemas for portfolio reports."""
from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field

from chequeflow.checks.schemas import NoticeStatus


class BankStat(BaseModel):
    """Cheques grouped by issuing bank."""
    bank: str
    count: int
    amount: Decimal
    completed_count: int  # Cases filed
    rate: int  # Completion rate, whole percent


class StatusStat(BaseModel):
    """Cheques grouped by legal notice status."""
    status: NoticeStatus
    label: str
    count: int
    amount: Decimal
    percent: int  # Share of all cheques, whole percent


class MonthlyStat(BaseModel):
    """Cheques added in one calendar month."""
    month: str  # YYYY-MM
    label: str  # e.g. "Mar 2026"
    count: int
    amount: Decimal


class DeadlineAnalysis(BaseModel):
    """Portfolio-wide overdue and due-soon counts per stage."""
    dishonor_overdue: int = 0
    notice_overdue: int = 0
    case_overdue: int = 0
    dishonor_upcoming: int = 0
    notice_upcoming: int = 0
    case_upcoming: int = 0


class ReportSummary(BaseModel):
    """Headline figures for the cheque dashboard."""
    total_checks: int
    total_amount: Decimal
    completed_amount: Decimal
    pending_amount: Decimal
    pending_dishonor: int
    pending_notice: int
    pending_case: int
    completed: int
    overdue: int  # Overdue stages across all cheques


class CheckReport(BaseModel):
    """Complete report computed from one snapshot at one instant."""
    generated_at: datetime
    summary: ReportSummary
    by_bank: List[BankStat] = Field(default_factory=list)
    by_status: List[StatusStat] = Field(default_factory=list)
    monthly: List[MonthlyStat] = Field(default_factory=list)
    deadlines: DeadlineAnalysis = Field(default_factory=DeadlineAnalysis)
