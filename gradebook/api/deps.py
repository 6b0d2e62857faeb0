from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from gradebook.core.config import get_settings
from gradebook.db.repositories import Repositories
from gradebook.db.session import SessionLocal
from gradebook.models import User
from gradebook.services.auth import AuthService
from gradebook.services.catalog import CatalogService
from gradebook.services.enrollment import EnrollmentService
from gradebook.services.grades import GradeService
from gradebook.services.policy import Actor
from gradebook.services.users import UserAdminService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_repositories(request: Request) -> Repositories:
    return request.app.state.repositories


def get_auth_service(
    db: Session = Depends(get_db),
    repos: Repositories = Depends(get_repositories),
) -> AuthService:
    return AuthService(db=db, repos=repos)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    return auth.resolve_token(token)


def get_actor(current_user: User = Depends(get_current_user)) -> Actor:
    return Actor.from_user(current_user)


def _service_kwargs(db: Session, repos: Repositories) -> dict:
    return {"db": db, "repos": repos, "require_approval": get_settings().require_teacher_approval}


def get_catalog_service(
    db: Session = Depends(get_db),
    repos: Repositories = Depends(get_repositories),
) -> CatalogService:
    return CatalogService(**_service_kwargs(db, repos))


def get_enrollment_service(
    db: Session = Depends(get_db),
    repos: Repositories = Depends(get_repositories),
) -> EnrollmentService:
    return EnrollmentService(**_service_kwargs(db, repos))


def get_grade_service(
    db: Session = Depends(get_db),
    repos: Repositories = Depends(get_repositories),
) -> GradeService:
    return GradeService(**_service_kwargs(db, repos))


def get_user_admin_service(
    db: Session = Depends(get_db),
    repos: Repositories = Depends(get_repositories),
) -> UserAdminService:
    return UserAdminService(**_service_kwargs(db, repos))
