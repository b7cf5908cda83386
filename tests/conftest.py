"""Shared test fixtures and configuration for chequeflow tests."""
import itertools
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from chequeflow.checks.schemas import ChequeRecord, NoticeStatus
from chequeflow.deadlines.clock import FixedClock

# Mid-morning UTC on a fixed day; every test derives "today" from this
FIXED_NOW = datetime(2026, 3, 15, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """The captured instant used by all computations in a test."""
    return FIXED_NOW


@pytest.fixture
def today(now):
    return now.date()


@pytest.fixture
def clock(now):
    """Clock pinned to the fixed instant."""
    return FixedClock(now)


@pytest.fixture
def days_ago(today):
    """Date helper: days_ago(10) is ten calendar days before today."""
    def _days_ago(days: int):
        return today - timedelta(days=days)
    return _days_ago


@pytest.fixture
def make_check(now, days_ago):
    """Factory for cheque snapshots; defaults to a 10-day-old cheque."""
    counter = itertools.count(1)

    def _make(**overrides) -> ChequeRecord:
        n = next(counter)
        data = {
            "id": f"check-{n:03d}",
            "user_id": "test-user-123",
            "check_number": f"CHK-{n:03d}",
            "bank_name": "Sonali Bank",
            "check_amount": Decimal("10000"),
            "check_date": days_ago(10),
            "notice_status": NoticeStatus.PENDING,
            "created_at": now,
        }
        data.update(overrides)
        return ChequeRecord(**data)

    return _make
