"""
SQLAlchemy model for in-app notifications.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func, text

from schoolraise.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="info", server_default="info")  # info, success, warning, error
    read = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
