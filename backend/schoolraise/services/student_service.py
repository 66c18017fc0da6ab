"""
Business service for students: lookups and listings joined with user accounts.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from schoolraise.models.school import School
from schoolraise.models.student import Student
from schoolraise.models.user import User
from schoolraise.schemas.school import SchoolSummary
from schoolraise.schemas.student import StudentResponse, StudentUserInfo


def get_student(db: Session, student_id: int) -> Optional[Student]:
    return db.get(Student, student_id)


def get_student_by_user_id(db: Session, user_id: int) -> Optional[Student]:
    return db.execute(select(Student).where(Student.user_id == user_id)).scalar()


def get_students_by_school(db: Session, school_id: int) -> list[StudentResponse]:
    """Students of one school with their account details, newest first."""
    rows = db.execute(
        select(Student, User)
        .join(User, User.id == Student.user_id)
        .where(Student.school_id == school_id)
        .order_by(Student.created_at.desc(), Student.id.desc())
    ).all()
    return [_to_response(student, user) for student, user in rows]


def get_all_students(db: Session) -> list[StudentResponse]:
    """All students with account and school name (admin listing), newest first."""
    rows = db.execute(
        select(Student, User, School)
        .join(User, User.id == Student.user_id)
        .join(School, School.id == Student.school_id)
        .order_by(Student.created_at.desc(), Student.id.desc())
    ).all()
    return [_to_response(student, user, school) for student, user, school in rows]


def get_student_user_ids(db: Session, school_id: int) -> list[tuple[int, str]]:
    """(user_id, email) of every student of a school, used for mass notifications."""
    return db.execute(
        select(User.id, User.email)
        .join(Student, Student.user_id == User.id)
        .where(Student.school_id == school_id)
    ).all()


def _to_response(student: Student, user: User, school: Optional[School] = None) -> StudentResponse:
    return StudentResponse(
        id=student.id,
        school_id=student.school_id,
        user_id=student.user_id,
        created_at=student.created_at,
        user=StudentUserInfo.model_validate(user),
        school=SchoolSummary.model_validate(school) if school is not None else None,
    )
