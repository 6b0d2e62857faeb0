from fastapi import APIRouter, Depends, status

from gradebook.api.deps import get_auth_service, get_current_user
from gradebook.models import User
from gradebook.schemas.auth import RegisterRequest, LoginRequest, AuthResponse
from gradebook.schemas.user import UserOut
from gradebook.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        is_approved=user.is_approved,
        token=token,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, auth: AuthService = Depends(get_auth_service)) -> AuthResponse:
    user, token = auth.register(request.name, request.email, request.password, request.role)
    return _auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, auth: AuthService = Depends(get_auth_service)) -> AuthResponse:
    user, token = auth.authenticate(request.email, request.password)
    return _auth_response(user, token)


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)) -> UserOut:
    return UserOut.model_validate(current_user)
