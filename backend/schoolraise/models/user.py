"""
SQLAlchemy model for users (admin, school and student accounts).
"""

import enum

from sqlalchemy import Column, DateTime, Integer, String, Text, func
from sqlalchemy.orm import relationship

from schoolraise.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    SCHOOL = "school"
    STUDENT = "student"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    username = Column(String(100), unique=True, nullable=False)
    password = Column(Text, nullable=False)  # passlib hash, never the plain value
    role = Column(String(20), nullable=False)  # admin, school, student
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    school = relationship("School", back_populates="user", uselist=False, passive_deletes=True)
    student = relationship("Student", back_populates="user", uselist=False, passive_deletes=True)
