"""
Persisted session store: one row per browser session, keyed by the cookie value.
"""

from sqlalchemy import JSON, Column, DateTime, String

from schoolraise.database import Base


class Session(Base):
    __tablename__ = "session"

    sid = Column(String(128), primary_key=True)
    sess = Column(JSON, nullable=False)  # {"user_id": ..., "role": ...}
    expire = Column(DateTime, nullable=False, index=True)
