from gradebook.models.user import User, UserRole
from gradebook.models.school_class import SchoolClass
from gradebook.models.enrollment import Enrollment
from gradebook.models.subject import Subject
from gradebook.models.grade import Grade, MIN_GRADE, MAX_GRADE

__all__ = [
    "User",
    "UserRole",
    "SchoolClass",
    "Enrollment",
    "Subject",
    "Grade",
    "MIN_GRADE",
    "MAX_GRADE",
]
