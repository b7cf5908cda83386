"""
Cheque list filtering and sorting.

Backs the cheque table: a process filter (which step is open), notice
status and bank filters, free-text search, and sorting on a date or
amount column.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, List, Optional, Union

from pydantic import BaseModel

from chequeflow.deadlines.engine import calculate_stage_progress
from chequeflow.deadlines.stages import StageState
from .schemas import NoticeStatus


class FilterType(str, Enum):
    """Process filters offered above the cheque table."""
    ALL = "all"
    PENDING_DISHONOR = "pending_dishonor"
    PENDING_NOTICE = "pending_notice"
    PENDING_CASE = "pending_case"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class SortField(str, Enum):
    CHECK_DATE = "check_date"
    DISHONOR_DATE = "dishonor_date"
    LEGAL_NOTICE_DATE = "legal_notice_date"
    CHECK_AMOUNT = "check_amount"
    CREATED_AT = "created_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class CheckFilterCriteria(BaseModel):
    """Filter state for the cheque list. None means no restriction."""
    search: Optional[str] = None
    filter_type: FilterType = FilterType.ALL
    notice_status: Optional[NoticeStatus] = None
    bank: Optional[str] = None
    sort_field: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC


def _matches_process(record: Any, filter_type: FilterType, now: Union[datetime, date]) -> bool:
    if filter_type == FilterType.ALL:
        return True
    if filter_type == FilterType.PENDING_DISHONOR:
        return record.dishonor_date is None
    if filter_type == FilterType.PENDING_NOTICE:
        return record.dishonor_date is not None and record.legal_notice_date is None
    if filter_type == FilterType.PENDING_CASE:
        return record.legal_notice_date is not None and record.case_filed_date is None
    if filter_type == FilterType.COMPLETED:
        return record.case_filed_date is not None
    if filter_type == FilterType.OVERDUE:
        stages = calculate_stage_progress(record, now)
        return any(p.state == StageState.OVERDUE for p in stages.values())
    raise ValueError(f"Unsupported filter type: {filter_type}")


def _matches_search(record: Any, search: str) -> bool:
    needle = search.strip().lower()
    if not needle:
        return True
    haystack = [
        getattr(record, "check_number", None),
        record.bank_name,
        getattr(record, "client_name", None),
        getattr(record, "notes", None),
    ]
    return any(needle in str(value).lower() for value in haystack if value)


def sort_checks(
    checks: Iterable[Any],
    sort_field: SortField = SortField.CREATED_AT,
    sort_order: SortOrder = SortOrder.DESC,
) -> List[Any]:
    """Sort by a column; records without a value go last in either order."""
    field = SortField(sort_field).value
    checks = list(checks)
    present = [c for c in checks if getattr(c, field, None) is not None]
    missing = [c for c in checks if getattr(c, field, None) is None]
    present.sort(key=lambda c: getattr(c, field), reverse=sort_order == SortOrder.DESC)
    return present + missing


def filter_checks(
    checks: Iterable[Any],
    now: Union[datetime, date],
    criteria: Optional[CheckFilterCriteria] = None,
) -> List[Any]:
    """Apply list filters, then sort."""
    criteria = criteria or CheckFilterCriteria()
    selected = []
    for record in checks:
        if criteria.notice_status is not None and record.notice_status != criteria.notice_status:
            continue
        if criteria.bank and criteria.bank != "all" and record.bank_name != criteria.bank:
            continue
        if criteria.search and not _matches_search(record, criteria.search):
            continue
        if not _matches_process(record, criteria.filter_type, now):
            continue
        selected.append(record)
    return sort_checks(selected, criteria.sort_field, criteria.sort_order)


def list_banks(checks: Iterable[Any]) -> List[str]:
    """Distinct bank names for the bank filter, alphabetically."""
    return sorted({record.bank_name for record in checks})
