"""
Persisted session store.

A session row maps the opaque cookie value (sid) to a small JSON payload and an
expiry timestamp. Expired rows never authenticate and are purged by the scheduler.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.orm import Session

from schoolraise.config import settings
from schoolraise.models.session import Session as SessionRow
from schoolraise.models.user import User

logger = logging.getLogger(__name__)


def create_session(db: Session, user: User, max_age_seconds: Optional[int] = None) -> str:
    """Stores a new session for the user and returns its sid."""
    max_age = max_age_seconds or settings.SESSION_MAX_AGE_SECONDS
    sid = secrets.token_urlsafe(32)
    db.add(SessionRow(
        sid=sid,
        sess={"user_id": user.id, "role": user.role},
        expire=datetime.now() + timedelta(seconds=max_age),
    ))
    db.commit()
    return sid


def get_session_user(db: Session, sid: Optional[str]) -> Optional[User]:
    """Returns the user behind a valid, non-expired session, or None."""
    if not sid:
        return None

    row = db.get(SessionRow, sid)
    if row is None:
        return None
    if row.expire <= datetime.now():
        return None

    user_id = (row.sess or {}).get("user_id")
    if user_id is None:
        return None
    return db.get(User, user_id)


def destroy_session(db: Session, sid: Optional[str]) -> bool:
    """Deletes a session (logout). Returns False when it did not exist."""
    if not sid:
        return False
    row = db.get(SessionRow, sid)
    if row is None:
        return False
    db.delete(row)
    db.commit()
    return True


def purge_expired_sessions(db: Session) -> int:
    """Deletes every expired session and returns how many rows were removed."""
    result = db.execute(delete(SessionRow).where(SessionRow.expire <= datetime.now()))
    db.commit()
    count = result.rowcount or 0
    if count:
        logger.info("%d expired sessions purged", count)
    return count
