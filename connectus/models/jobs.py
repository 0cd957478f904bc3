# jobs.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from connectus.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), index=True, nullable=False)
    description = Column(Text, nullable=False)
    skills = Column(JSON, nullable=False, default=list)
    budget = Column(String(100), nullable=True)
    salary = Column(String(100), nullable=True)
    deadline = Column(DateTime(timezone=True), nullable=False)
    date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    poster = relationship("User", backref="jobs")
