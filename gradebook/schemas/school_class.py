from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from gradebook.schemas.user import UserBrief


class ClassCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class ClassUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class SubjectBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None


class ClassOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    teacher_id: int
    created_at: Optional[datetime] = None


class ClassDetailOut(ClassOut):
    students: list[UserBrief] = []
    subjects: list[SubjectBrief] = []


class ClassResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    school_class: ClassOut = Field(alias="class")


class EnrollRequest(BaseModel):
    student_ids: Optional[list[int]] = None


class EnrollResponse(BaseModel):
    message: str
    class_id: int
    student_ids: list[int]
