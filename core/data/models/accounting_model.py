"""SQLAlchemy ORM models for ledger postings and affiliate commissions."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)

from core.utils.datetime import utc_now

from .base import Base


class LedgerEntryModel(Base):
    """SQLAlchemy ORM model for ledger_entries table."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_code = Column(String(16), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    kind = Column(String(16), nullable=False)
    debit = Column(Numeric(12, 2), nullable=False, default=0)
    credit = Column(Numeric(12, 2), nullable=False, default=0)
    entry_date = Column(DateTime, nullable=False)
    description = Column(Text, nullable=False)
    reference_number = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_ledger_entries_order_kind", "order_id", "kind"),
    )


class AffiliateModel(Base):
    """SQLAlchemy ORM model for affiliates table."""

    __tablename__ = "affiliates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    voucher_code = Column(String(64), unique=True, nullable=False)
    commission_percentage = Column(Numeric(5, 2), nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)


class AffiliateCommissionModel(Base):
    """SQLAlchemy ORM model for affiliate_commissions table. One row per order."""

    __tablename__ = "affiliate_commissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    affiliate_id = Column(Integer, ForeignKey("affiliates.id"), nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, unique=True)
    order_total = Column(Numeric(12, 2), nullable=False)
    commission_amount = Column(Numeric(12, 2), nullable=False)
    commission_percentage = Column(Numeric(5, 2), nullable=False)
    order_date = Column(DateTime, nullable=False)
    payment_status = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)
