"""Errors raised while deriving deadline state from cheque records."""
from typing import Any, Optional


class ChequeEngineError(ValueError):
    """Base class for failures of the deadline engine and its consumers."""


class InvalidChequeRecordError(ChequeEngineError):
    """Raised when a record from the store does not satisfy the input contract."""

    def __init__(self, check_id: Optional[str], reason: str):
        self.check_id = check_id
        self.reason = reason
        super().__init__(f"Check {check_id}: {reason}")


class InvalidChequeDateError(InvalidChequeRecordError):
    """Raised when a milestone date cannot be read as a calendar date."""

    def __init__(self, check_id: Optional[str], field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(check_id, f"unparseable {field} {value!r}")


class UnknownStageError(ChequeEngineError):
    """Raised when a stage outside the dishonor/notice/filing pipeline is requested."""

    def __init__(self, stage: Any):
        self.stage = stage
        super().__init__(f"Unknown stage: {stage!r}")
