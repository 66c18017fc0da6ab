"""
Account service: password hashing, registration and login.

Registration creates the user and, depending on the role, the attached school
or student row in the same transaction.
"""

import logging
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schoolraise.models.school import School
from schoolraise.models.student import Student
from schoolraise.models.user import User, UserRole
from schoolraise.schemas.school import SchoolSummary
from schoolraise.schemas.student import StudentWithSchool, UserInfoResponse
from schoolraise.schemas.user import RegisterRequest
from schoolraise.services import school_service, student_service

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Returns False for malformed or unknown hashes instead of raising."""
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        logger.warning("Unrecognized password hash format, login refused.")
        return False


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.execute(select(User).where(User.email == email)).scalar()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.execute(select(User).where(User.username == username)).scalar()


def register_user(db: Session, data: RegisterRequest) -> User:
    """
    Creates a school or student account (admins come from the seed-accounts script).

    - role=school: also creates the school owned by the user
    - role=student: the selected school must exist, a student row links both
    Raises ValueError when the email or username is taken or the school is unknown.
    """
    if get_user_by_email(db, data.email) is not None:
        raise ValueError("Email already exists")
    if get_user_by_username(db, data.username) is not None:
        raise ValueError("Username already exists")

    if data.role == UserRole.STUDENT and db.get(School, data.school_id) is None:
        raise ValueError("Selected school does not exist")

    user = User(
        email=data.email,
        username=data.username,
        password=hash_password(data.password),
        role=data.role.value,
    )
    db.add(user)
    db.flush()  # need user.id for the linked rows

    if data.role == UserRole.SCHOOL:
        db.add(School(
            name=data.name,
            admin_name=data.admin_name,
            address=data.address or None,
            user_id=user.id,
        ))
    elif data.role == UserRole.STUDENT:
        db.add(Student(school_id=data.school_id, user_id=user.id))

    try:
        db.commit()
    except IntegrityError:
        # Concurrent registration with the same email/username
        db.rollback()
        raise ValueError("Email or username already exists")
    db.refresh(user)

    logger.info("Account created: %s (%s, id=%s)", user.username, user.role, user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """Returns the user when the credentials match, None otherwise."""
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password):
        return None
    return user


def get_user_info(db: Session, user: User) -> UserInfoResponse:
    """
    Current user plus the record attached to its role:
    - school account: its school and student count
    - student account: the student row and its school
    """
    info = UserInfoResponse(
        id=user.id,
        email=user.email,
        username=user.username,
        role=user.role,
        created_at=user.created_at,
    )

    if user.role == UserRole.SCHOOL.value:
        school = school_service.get_school_by_user_id(db, user.id)
        if school is not None:
            info.school = school_service.get_school_with_student_count(db, school.id)
    elif user.role == UserRole.STUDENT.value:
        student = student_service.get_student_by_user_id(db, user.id)
        if student is not None:
            school = school_service.get_school(db, student.school_id)
            info.student = StudentWithSchool(
                id=student.id,
                school_id=student.school_id,
                user_id=student.user_id,
                created_at=student.created_at,
                school=SchoolSummary.model_validate(school) if school is not None else None,
            )
    return info


def upsert_account(db: Session, email: str, username: str, password: str, role: UserRole) -> tuple[User, bool]:
    """
    Creates the account or resets its password when the email or username exists.
    Returns (user, created). Used by the seed-accounts script.
    """
    user = db.execute(
        select(User).where(or_(User.email == email, User.username == username))
    ).scalar()
    if user is not None:
        user.password = hash_password(password)
        return user, False

    user = User(email=email, username=username, password=hash_password(password), role=role.value)
    db.add(user)
    db.flush()
    return user, True
