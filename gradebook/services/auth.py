import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gradebook.core.errors import AuthError, ValidationFailed
from gradebook.core.security import create_access_token, decode_access_token, hash_password, verify_password
from gradebook.db.repositories import Repositories
from gradebook.models import User, UserRole

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
REGISTRABLE_ROLES = (UserRole.student, UserRole.teacher)


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def build_access_token(user: User) -> str:
    return create_access_token(user_id=user.id, role=UserRole(user.role).value)


class AuthService:
    """Registration, login and bearer token resolution."""

    def __init__(self, db: Session, repos: Repositories) -> None:
        self.db = db
        self.repos = repos

    def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role: Optional[str] = UserRole.student.value,
    ) -> tuple[User, str]:
        name = (name or "").strip()
        email = normalize_email(email)
        if not name or not email or not password:
            raise ValidationFailed("Name, email and password are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        try:
            user_role = UserRole(role or UserRole.student.value)
        except ValueError:
            raise ValidationFailed("Role must be student or teacher") from None
        if user_role not in REGISTRABLE_ROLES:
            raise ValidationFailed("Role must be student or teacher")

        if self.repos.users.get_by_email(self.db, email):
            raise ValidationFailed("User already exists")

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=user_role,
            is_approved=user_role != UserRole.teacher,
        )
        try:
            self.repos.users.add(self.db, user)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ValidationFailed("User already exists") from exc
        self.db.refresh(user)

        logger.info("Registered %s: %s", user_role.value, email)
        return user, build_access_token(user)

    def authenticate(self, email: Optional[str], password: Optional[str]) -> tuple[User, str]:
        email = normalize_email(email)
        user = self.repos.users.get_by_email(self.db, email) if email else None
        if not user or not password or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt for %s", email or "<empty>")
            raise AuthError("Invalid email or password")
        return user, build_access_token(user)

    def resolve_token(self, token: Optional[str]) -> User:
        if not token:
            raise AuthError("Not authorized, no token")
        user_id = decode_access_token(token)
        user = self.repos.users.get(self.db, user_id)
        if not user:
            raise AuthError("Could not validate credentials")
        return user
