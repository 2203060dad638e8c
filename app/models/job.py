import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class JobStatus(str, enum.Enum):
    """
    Application status of a tracked job.

    - PENDING: Applied, no response yet
    - INTERVIEW: Interview scheduled or in progress
    - DECLINED: Rejected or withdrawn
    """
    PENDING = "pending"
    INTERVIEW = "interview"
    DECLINED = "declined"


class JobType(str, enum.Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    INTERNSHIP = "internship"


class Job(Base):
    """
    Job model representing a position a user is tracking on the board.

    The user endpoints only ever count these rows.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    company = Column(String, nullable=False)
    position = Column(String, nullable=False, index=True)
    job_status = Column(Enum(JobStatus), default=JobStatus.PENDING, nullable=False, index=True)
    job_type = Column(Enum(JobType), default=JobType.FULL_TIME, nullable=False)
    job_location = Column(String, nullable=False, default="my city")

    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    owner = relationship("User", back_populates="jobs")

    def __repr__(self):
        return f"<Job(id={self.id}, position='{self.position}', status={self.job_status.value})>"
