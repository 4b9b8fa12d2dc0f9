import uuid

from sqlalchemy import Column, String, DateTime, Text, Index
from sqlalchemy.sql import func
from .db import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Job(Base):
    __tablename__ = "jobs"
    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(300), nullable=False)
    company_name = Column(String(300), nullable=False)
    description = Column(Text, nullable=False, default="")
    job_type = Column(String(20), nullable=False, index=True)
    location_country = Column(String(8), nullable=False, index=True)
    location_state = Column(String(16), nullable=False, index=True)
    location_city = Column(String(120), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_jobs_created_id", "created_at", "id"),
    )
