# Checks Module
# Cheque records as supplied to the deadline engine
#
# Components:
# - models.py: Check table, with the Client and Case names it joins
# - schemas.py: ChequeRecord snapshot, NoticeStatus
# - store.py: Read-only snapshot loading
# - filters.py: Cheque list filtering and sorting
# - routes.py: API endpoints

from .schemas import ChequeRecord, NoticeStatus, NOTICE_STATUS_LABELS, CheckDetailResponse
from .filters import CheckFilterCriteria, FilterType, SortField, SortOrder, filter_checks, list_banks

__all__ = [
    "ChequeRecord",
    "NoticeStatus",
    "NOTICE_STATUS_LABELS",
    "CheckDetailResponse",
    "CheckFilterCriteria",
    "FilterType",
    "SortField",
    "SortOrder",
    "filter_checks",
    "list_banks",
]
