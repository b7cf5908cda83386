"""
Cheque snapshot loading.

Reads a user's cheques once per computation pass and freezes them into
ChequeRecord snapshots, with the linked client name and case title joined
in. Nothing here writes to the database.
"""

import logging
from typing import Any, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chequeflow.exceptions import InvalidChequeRecordError
from .models import Case, Check, Client
from .schemas import ChequeRecord

logger = logging.getLogger(__name__)


def to_record(
    row: Any,
    client_name: Optional[str] = None,
    case_title: Optional[str] = None,
) -> ChequeRecord:
    """Freeze a stored row and its joined display names into a snapshot record."""
    try:
        record = ChequeRecord.model_validate(row)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise InvalidChequeRecordError(getattr(row, "id", None), f"invalid {fields}") from e
    if client_name is None and case_title is None:
        return record
    return record.model_copy(update={"client_name": client_name, "case_title": case_title})


def _with_names():
    """Cheques with their client name and case title; links may be empty."""
    return (
        select(Check, Client.name, Case.title)
        .outerjoin(Client, Check.client_id == Client.id)
        .outerjoin(Case, Check.case_id == Case.id)
    )


async def load_snapshot(db: AsyncSession, user_id: str) -> Tuple[ChequeRecord, ...]:
    """All cheques owned by a user, newest first."""
    result = await db.execute(
        _with_names()
        .where(Check.user_id == user_id)
        .order_by(Check.created_at.desc())
    )
    rows = result.all()
    snapshot = tuple(to_record(check, client_name, case_title) for check, client_name, case_title in rows)
    logger.debug(f"Loaded {len(snapshot)} checks for user {user_id}")
    return snapshot


async def get_check(db: AsyncSession, user_id: str, check_id: str) -> Optional[ChequeRecord]:
    """A single cheque owned by a user, or None."""
    result = await db.execute(
        _with_names()
        .where(Check.id == check_id)
        .where(Check.user_id == user_id)
    )
    row = result.one_or_none()
    if row is None:
        return None
    check, client_name, case_title = row
    return to_record(check, client_name, case_title)
