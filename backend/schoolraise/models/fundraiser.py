"""
SQLAlchemy models for fundraisers and student enrollment.

One StudentFundraiser row is one ticket: a student joins a fundraiser at most once.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import relationship

from schoolraise.database import Base


class Fundraiser(Base):
    __tablename__ = "fundraisers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    school_id = Column(Integer, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    event_date = Column(DateTime, nullable=False)
    price = Column(Integer, nullable=False, default=1000, server_default=text("1000"))  # cents
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    school = relationship("School", back_populates="fundraisers")


class StudentFundraiser(Base):
    """Enrollment of a student in a fundraiser (one row = one ticket)."""
    __tablename__ = "student_fundraisers"
    __table_args__ = (
        UniqueConstraint("student_id", "fundraiser_id", name="uq_student_fundraiser"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    fundraiser_id = Column(Integer, ForeignKey("fundraisers.id", ondelete="CASCADE"), nullable=False)
    joined_at = Column(DateTime, server_default=func.now(), nullable=False)
