from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from connectus.database import Base


APPLICATION_STATUSES = ("submitted", "reviewed", "shortlisted", "rejected")


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Job poster at the time of applying.
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    contact_email = Column(String(255), nullable=False)
    contact_phone = Column(String(50), nullable=True)
    resume_url = Column(String(512), nullable=False)
    status = Column(String(32), nullable=False, default="submitted")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    job = relationship("Job")
    applicant = relationship("User", foreign_keys=[applicant_id])

    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_applications_job_applicant"),
    )
