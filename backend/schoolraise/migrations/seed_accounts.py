"""
seed-accounts: creates (or resets the password of) one test account per role.

  admin@example.com    admin
  school@example.com   schooluser  -> "Example School"
  test@example.com     testuser    -> student of "Example School"

The password comes from SEED_PASSWORD.
"""

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from schoolraise.config import settings
from schoolraise.models.school import School
from schoolraise.models.student import Student
from schoolraise.models.user import UserRole
from schoolraise.services import auth_service, school_service, student_service

logger = logging.getLogger(__name__)

ADMIN = ("admin@example.com", "admin")
SCHOOL = ("school@example.com", "schooluser")
STUDENT = ("test@example.com", "testuser")


def run(engine: Engine) -> dict:
    """Returns {username: created} for the three accounts."""
    password = settings.SEED_PASSWORD
    outcome = {}
    with Session(engine) as db, db.begin():
        admin, outcome[ADMIN[1]] = auth_service.upsert_account(db, *ADMIN, password, UserRole.ADMIN)

        school_user, outcome[SCHOOL[1]] = auth_service.upsert_account(db, *SCHOOL, password, UserRole.SCHOOL)
        school = school_service.get_school_by_user_id(db, school_user.id)
        if school is None:
            school = School(name="Example School", admin_name="School Admin", user_id=school_user.id)
            db.add(school)
            db.flush()

        student_user, outcome[STUDENT[1]] = auth_service.upsert_account(db, *STUDENT, password, UserRole.STUDENT)
        if student_service.get_student_by_user_id(db, student_user.id) is None:
            db.add(Student(school_id=school.id, user_id=student_user.id))

    for username, created in outcome.items():
        logger.info("Account %s %s", username, "created" if created else "password updated")
    return outcome
