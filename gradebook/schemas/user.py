from typing import Optional
from pydantic import BaseModel, ConfigDict

from gradebook.models import UserRole


class UserBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: UserRole
    is_approved: bool


class AdminUserOut(UserOut):
    class_id: Optional[int] = None
    owned_class_ids: list[int] = []

    @classmethod
    def from_user(cls, user) -> "AdminUserOut":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            is_approved=user.is_approved,
            class_id=user.enrollment.class_id if user.enrollment else None,
            owned_class_ids=[c.id for c in user.owned_classes],
        )


class ApproveResponse(BaseModel):
    message: str
    user: UserOut


class MessageResponse(BaseModel):
    message: str
