"""
Cheque Deadline Routes

Read-only endpoints over a user's cheques:
- Cheque list with filters
- Stage progress (all cheques, or one cheque with its alerts)
- Alerts, most urgent first
- Reports and CSV export
- Overview pass (stages + alerts + report at one instant)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from chequeflow.database import get_db
from chequeflow.deadlines.alerts import evaluate_check_alerts, generate_alerts
from chequeflow.deadlines.clock import Clock, get_clock
from chequeflow.deadlines.engine import calculate_stage_progress
from chequeflow.deadlines.pipeline import check_stages_at, run_deadline_pass
from chequeflow.deadlines.schemas import ChequeAlert, CheckStages
from chequeflow.deadlines.stages import STAGE_ORDER
from chequeflow.exceptions import ChequeEngineError
from chequeflow.reports.aggregator import build_report
from chequeflow.reports.formatters import export_checks_csv, export_filename
from chequeflow.reports.schemas import CheckReport

from .filters import CheckFilterCriteria, FilterType, SortField, SortOrder, filter_checks
from .schemas import CheckDetailResponse, ChequeRecord, NoticeStatus
from .store import get_check, load_snapshot

logger = logging.getLogger(__name__)

router = APIRouter()


def _unprocessable(e: ChequeEngineError) -> HTTPException:
    logger.error(f"Deadline computation rejected input: {e}")
    return HTTPException(status_code=422, detail=str(e))


@router.get("", response_model=List[ChequeRecord])
async def list_checks(
    user_id: str = Query(..., description="Owner of the cheques"),
    search: Optional[str] = Query(default=None),
    filter_type: FilterType = Query(default=FilterType.ALL),
    notice_status: Optional[NoticeStatus] = Query(default=None),
    bank: Optional[str] = Query(default=None),
    sort_field: SortField = Query(default=SortField.CREATED_AT),
    sort_order: SortOrder = Query(default=SortOrder.DESC),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """List cheques with the table's filters applied."""
    criteria = CheckFilterCriteria(
        search=search,
        filter_type=filter_type,
        notice_status=notice_status,
        bank=bank,
        sort_field=sort_field,
        sort_order=sort_order,
    )
    try:
        checks = await load_snapshot(db, user_id)
        return filter_checks(checks, clock.now(), criteria)
    except ChequeEngineError as e:
        raise _unprocessable(e) from e


@router.get("/alerts", response_model=List[ChequeAlert])
async def list_alerts(
    user_id: str = Query(..., description="Owner of the cheques"),
    overdue_only: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Overdue and due-soon stages, critical first."""
    try:
        checks = await load_snapshot(db, user_id)
        alerts = generate_alerts(checks, clock)
    except ChequeEngineError as e:
        raise _unprocessable(e) from e

    if overdue_only:
        alerts = [a for a in alerts if a.is_overdue]
    return alerts


@router.get("/stages", response_model=List[CheckStages])
async def list_stages(
    user_id: str = Query(..., description="Owner of the cheques"),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Stage progress for every cheque."""
    try:
        checks = await load_snapshot(db, user_id)
        return check_stages_at(checks, clock.now())
    except ChequeEngineError as e:
        raise _unprocessable(e) from e


@router.get("/overview")
async def get_overview(
    user_id: str = Query(..., description="Owner of the cheques"),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Stages, alerts and report computed at a single instant."""
    try:
        checks = await load_snapshot(db, user_id)
        return run_deadline_pass(checks, clock).to_dict()
    except ChequeEngineError as e:
        raise _unprocessable(e) from e


@router.get("/reports", response_model=CheckReport)
async def get_report(
    user_id: str = Query(..., description="Owner of the cheques"),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Portfolio report: by bank, by notice status, by month, deadlines."""
    try:
        checks = await load_snapshot(db, user_id)
        return build_report(checks, clock)
    except ChequeEngineError as e:
        raise _unprocessable(e) from e


@router.get("/reports/export")
async def export_report(
    user_id: str = Query(..., description="Owner of the cheques"),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Download the cheque list as CSV."""
    try:
        checks = await load_snapshot(db, user_id)
    except ChequeEngineError as e:
        raise _unprocessable(e) from e

    return Response(
        content=export_checks_csv(checks),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(clock.now())}"',
        },
    )


@router.get("/{check_id}/stages", response_model=CheckDetailResponse)
async def get_check_stages(
    check_id: str,
    user_id: str = Query(..., description="Owner of the cheque"),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Stage progress and alerts for one cheque."""
    try:
        check = await get_check(db, user_id, check_id)
        if check is None:
            raise HTTPException(status_code=404, detail="Check not found")

        now = clock.now()
        stages = calculate_stage_progress(check, now)
        alerts = evaluate_check_alerts(check, now)
    except ChequeEngineError as e:
        raise _unprocessable(e) from e

    return CheckDetailResponse(
        check=check,
        stages=[stages[stage] for stage in STAGE_ORDER],
        alerts=alerts,
    )
