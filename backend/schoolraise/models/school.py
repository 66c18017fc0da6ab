"""
SQLAlchemy model for schools.
A school is owned by exactly one user with role=school.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from schoolraise.database import Base


class School(Base):
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    admin_name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="school")
    students = relationship("Student", back_populates="school", passive_deletes=True)
    fundraisers = relationship("Fundraiser", back_populates="school", passive_deletes=True)
