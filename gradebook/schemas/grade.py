from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from gradebook.schemas.user import UserBrief


class GradeEntry(BaseModel):
    student_id: Optional[int] = None
    grade: Optional[float] = None
    assignment: Optional[str] = None
    comments: Optional[str] = None


class GradeAssignRequest(BaseModel):
    subject_id: Optional[int] = None
    grades: Optional[list[GradeEntry]] = None


class GradeUpdate(BaseModel):
    grade: Optional[float] = None
    assignment: Optional[str] = None
    comments: Optional[str] = None


class GradeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    subject_id: int
    grade: float
    assignment: Optional[str] = None
    comments: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubjectGradeOut(GradeOut):
    student: UserBrief


class ClassRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class GradeSubjectRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    school_class: ClassRef


class StudentGradeOut(GradeOut):
    subject: GradeSubjectRef


class GradesResponse(BaseModel):
    message: str
    grades: list[GradeOut]


class GradeResponse(BaseModel):
    message: str
    grade: GradeOut
