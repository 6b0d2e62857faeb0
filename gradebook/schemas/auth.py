from typing import Optional
from pydantic import BaseModel

from gradebook.models import UserRole


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = UserRole.student.value


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    is_approved: bool
    token: str
    token_type: str = "bearer"
