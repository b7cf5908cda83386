"""CSV export of the cheque list."""
import csv
import io
from datetime import date, datetime
from typing import Any, Iterable, Union

from chequeflow.checks.schemas import NOTICE_STATUS_LABELS, NoticeStatus
from chequeflow.deadlines.clock import as_of_date

CSV_HEADERS = [
    "Check Number",
    "Bank",
    "Amount",
    "Check Date",
    "Dishonor Date",
    "Notice Date",
    "Notice Status",
    "Case Filed Date",
]


def _date_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def check_to_row(record: Any) -> list:
    amount = getattr(record, "check_amount", None)
    return [
        getattr(record, "check_number", None) or record.id,
        record.bank_name,
        str(amount) if amount is not None else "0",
        _date_cell(record.check_date),
        _date_cell(record.dishonor_date),
        _date_cell(record.legal_notice_date),
        NOTICE_STATUS_LABELS[NoticeStatus(record.notice_status)],
        _date_cell(record.case_filed_date),
    ]


def export_checks_csv(checks: Iterable[Any]) -> str:
    """
    Header row followed by one row per cheque.

    Fields containing commas, quotes or newlines are quoted.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in checks:
        writer.writerow(check_to_row(record))
    return buffer.getvalue()


def export_filename(now: Union[datetime, date]) -> str:
    return f"check-report-{as_of_date(now).isoformat()}.csv"
