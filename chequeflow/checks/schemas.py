"""Pydantic schemas for cheque records and cheque responses."""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from chequeflow.deadlines.schemas import ChequeAlert, StageProgress


class NoticeStatus(str, Enum):
    """Delivery outcome of the legal notice."""
    PENDING = "pending"
    AD_RECEIVED = "ad_received"  # Acknowledgment of delivery received
    RECIPIENT_NOT_FOUND = "recipient_not_found"
    RETURNED_UNACCEPTED = "returned_unaccepted"
    DELIVERED = "delivered"


NOTICE_STATUS_LABELS = {
    NoticeStatus.PENDING: "Pending",
    NoticeStatus.AD_RECEIVED: "AD Received",
    NoticeStatus.RECIPIENT_NOT_FOUND: "Recipient Not Found",
    NoticeStatus.RETURNED_UNACCEPTED: "Returned Unaccepted",
    NoticeStatus.DELIVERED: "Delivered",
}


class ChequeRecord(BaseModel):
    """
    Immutable snapshot of one cheque as supplied by the record store.

    Milestone dates are None until the corresponding step happens.
    """
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    user_id: Optional[str] = None
    check_number: Optional[str] = None
    bank_name: str
    check_amount: Optional[Decimal] = None
    check_date: date

    # Milestones
    dishonor_date: Optional[date] = None
    legal_notice_date: Optional[date] = None
    notice_status: NoticeStatus = NoticeStatus.PENDING
    case_filed_date: Optional[date] = None

    # Links
    client_id: Optional[str] = None
    case_id: Optional[str] = None
    client_name: Optional[str] = None
    case_title: Optional[str] = None

    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class CheckDetailResponse(BaseModel):
    """A cheque with its stage progress and alerts."""
    check: ChequeRecord
    stages: List[StageProgress]
    alerts: List[ChequeAlert] = Field(default_factory=list)
