from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from gradebook.schemas.user import UserBrief


class SubjectCreate(BaseModel):
    class_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None


class SubjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class SubjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    class_id: int
    created_at: Optional[datetime] = None


class SubjectDetail(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    class_id: int
    class_name: str


class SubjectDetailResponse(BaseModel):
    subject: SubjectDetail
    # only returned to the owning teacher
    students: Optional[list[UserBrief]] = None


class SubjectResponse(BaseModel):
    message: str
    subject: SubjectOut
