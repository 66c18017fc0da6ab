# Imports every model so its table is registered in Base.metadata
# before SQLAlchemy resolves foreign keys and relationships between models.

from schoolraise.models.user import User, UserRole  # noqa: F401  (must precede school/student)
from schoolraise.models.school import School  # noqa: F401
from schoolraise.models.student import Student  # noqa: F401
from schoolraise.models.fundraiser import Fundraiser, StudentFundraiser  # noqa: F401
from schoolraise.models.notification import Notification  # noqa: F401
from schoolraise.models.session import Session  # noqa: F401
