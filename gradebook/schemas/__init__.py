from gradebook.schemas.auth import RegisterRequest, LoginRequest, AuthResponse
from gradebook.schemas.user import UserBrief, UserOut, AdminUserOut, ApproveResponse, MessageResponse
from gradebook.schemas.school_class import (
    ClassCreate,
    ClassUpdate,
    ClassOut,
    ClassDetailOut,
    ClassResponse,
    EnrollRequest,
    EnrollResponse,
)
from gradebook.schemas.subject import (
    SubjectCreate,
    SubjectUpdate,
    SubjectOut,
    SubjectDetail,
    SubjectDetailResponse,
    SubjectResponse,
)
from gradebook.schemas.grade import (
    GradeEntry,
    GradeAssignRequest,
    GradeUpdate,
    GradeOut,
    SubjectGradeOut,
    StudentGradeOut,
    GradesResponse,
    GradeResponse,
)

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse",
    "UserBrief",
    "UserOut",
    "AdminUserOut",
    "ApproveResponse",
    "MessageResponse",
    "ClassCreate",
    "ClassUpdate",
    "ClassOut",
    "ClassDetailOut",
    "ClassResponse",
    "EnrollRequest",
    "EnrollResponse",
    "SubjectCreate",
    "SubjectUpdate",
    "SubjectOut",
    "SubjectDetail",
    "SubjectDetailResponse",
    "SubjectResponse",
    "GradeEntry",
    "GradeAssignRequest",
    "GradeUpdate",
    "GradeOut",
    "SubjectGradeOut",
    "StudentGradeOut",
    "GradesResponse",
    "GradeResponse",
]
