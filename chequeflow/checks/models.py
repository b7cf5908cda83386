"""Cheque model - read by the deadline engine, written by the cheque screens."""
from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.sql import func

from chequeflow.database import Base, generate_id


class Check(Base):
    """A dishonored cheque moving through dishonor, legal notice and case filing."""

    __tablename__ = "checks"

    id = Column(String, primary_key=True, default=lambda: generate_id("check"))
    user_id = Column(String, nullable=False, index=True)

    # Links to the client and case screens
    client_id = Column(String, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True)
    case_id = Column(String, ForeignKey("cases.id", ondelete="SET NULL"), nullable=True, index=True)

    # Cheque details
    check_number = Column(String, nullable=False)
    check_amount = Column(Numeric(precision=14, scale=2), nullable=True)
    bank_name = Column(String, nullable=False)
    check_date = Column(Date, nullable=False)

    # Milestones (null until they happen)
    dishonor_date = Column(Date, nullable=True)
    legal_notice_date = Column(Date, nullable=True)
    notice_status = Column(String, nullable=False, default="pending")  # See NoticeStatus
    case_filed_date = Column(Date, nullable=True)

    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Client(Base):
    """Client a cheque was received from. Only the display name is read here."""

    __tablename__ = "clients"

    id = Column(String, primary_key=True, default=lambda: generate_id("client"))
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)


class Case(Base):
    """Court case a cheque is filed under. Only the title is read here."""

    __tablename__ = "cases"

    id = Column(String, primary_key=True, default=lambda: generate_id("case"))
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
