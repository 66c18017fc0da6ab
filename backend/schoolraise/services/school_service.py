"""
Business service for schools: lookup, profile update and student counts.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from schoolraise.models.school import School
from schoolraise.models.student import Student
from schoolraise.schemas.school import SchoolResponse, SchoolUpdate, SchoolWithStudentCount
from schoolraise.schemas.student import DashboardStats

logger = logging.getLogger(__name__)


def get_school(db: Session, school_id: int) -> Optional[School]:
    return db.get(School, school_id)


def get_school_by_user_id(db: Session, user_id: int) -> Optional[School]:
    return db.execute(select(School).where(School.user_id == user_id)).scalar()


def get_all_schools(db: Session) -> list[School]:
    """All schools, most recently registered first."""
    return db.execute(
        select(School).order_by(School.created_at.desc(), School.id.desc())
    ).scalars().all()


def update_school(db: Session, school_id: int, data: SchoolUpdate) -> Optional[School]:
    """Updates the provided profile fields. Returns None when the school does not exist."""
    school = db.get(School, school_id)
    if school is None:
        return None

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if field == "address":
            value = value or None
        elif value is None:
            continue
        setattr(school, field, value)

    db.commit()
    db.refresh(school)
    logger.info("School %s updated (%s)", school.id, ", ".join(sorted(update_data)) or "no fields")
    return school


def get_school_with_student_count(db: Session, school_id: int) -> Optional[SchoolWithStudentCount]:
    school = db.get(School, school_id)
    if school is None:
        return None
    return _with_count(school, _count_students(db, school.id))


def get_all_schools_with_student_count(db: Session) -> list[SchoolWithStudentCount]:
    """Every school with its number of students, computed in one grouped query."""
    counts = dict(db.execute(
        select(Student.school_id, func.count(Student.id)).group_by(Student.school_id)
    ).all())
    return [_with_count(s, counts.get(s.id, 0)) for s in get_all_schools(db)]


def get_dashboard_stats(db: Session) -> DashboardStats:
    total_schools = db.execute(select(func.count()).select_from(School)).scalar() or 0
    total_students = db.execute(select(func.count()).select_from(Student)).scalar() or 0
    return DashboardStats(total_schools=total_schools, total_students=total_students)


def _count_students(db: Session, school_id: int) -> int:
    return db.execute(
        select(func.count())
        .select_from(Student)
        .where(Student.school_id == school_id)
    ).scalar() or 0


def _with_count(school: School, student_count: int) -> SchoolWithStudentCount:
    return SchoolWithStudentCount(
        school=SchoolResponse.model_validate(school),
        student_count=student_count,
    )
