import logging

from gradebook.core.config import get_settings
from gradebook.core.security import hash_password
from gradebook.db.base import Base
from gradebook.db.session import SessionLocal, engine
from gradebook.models import User, UserRole

logger = logging.getLogger(__name__)


def seed_admin(db) -> User:
    """Create the configured administrator unless it already exists."""
    settings = get_settings()
    email = settings.admin_email.strip().lower()
    admin = db.query(User).filter(User.email == email).first()
    if admin:
        return admin

    admin = User(
        name=settings.admin_name,
        email=email,
        password_hash=hash_password(settings.admin_password),
        role=UserRole.admin,
        is_approved=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Seeded administrator %s", email)
    return admin


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
