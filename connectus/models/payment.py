from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from connectus.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True, index=True)
    job_title = Column(String(255), nullable=False)

    # Display unit (SOL), converted from lamports.
    amount = Column(Float, nullable=False)

    # Base58 signatures are at most 88 chars.
    tx_signature = Column(String(128), nullable=False)

    date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("tx_signature", name="uq_payments_tx_signature"),
    )
