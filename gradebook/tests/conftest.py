import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from gradebook.api.deps import get_db
from gradebook.core.security import create_access_token, hash_password
from gradebook.db.base import Base
from gradebook.db.repositories import Repositories
from gradebook.models import User, UserRole

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture()
def db_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def db_session(db_engine):
    session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def repos():
    return Repositories()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from gradebook.main import app

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, name, email, role, is_approved=True):
    user = User(name=name, email=email, password_hash=PASSWORD_HASH, role=role, is_approved=is_approved)
    db.add(user)
    db.flush()
    return user


@pytest.fixture()
def seed_data(db_session):
    users = {
        "admin": make_user(db_session, "Admin", "admin@example.com", UserRole.admin),
        "teacher": make_user(db_session, "Tom Teacher", "tom@example.com", UserRole.teacher),
        "teacher2": make_user(db_session, "Tina Teacher", "tina@example.com", UserRole.teacher),
        "pending": make_user(db_session, "Pat Pending", "pat@example.com", UserRole.teacher, is_approved=False),
        "student": make_user(db_session, "Sam Student", "sam@example.com", UserRole.student),
        "student2": make_user(db_session, "Sue Student", "sue@example.com", UserRole.student),
        "student3": make_user(db_session, "Sid Student", "sid@example.com", UserRole.student),
    }
    db_session.commit()
    return users


def auth_header(user: User) -> dict:
    token = create_access_token(user_id=user.id, role=UserRole(user.role).value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def headers(seed_data):
    return {key: auth_header(user) for key, user in seed_data.items()}


@pytest.fixture()
def algebra(client, headers, seed_data):
    """Class "Algebra-1" of the seeded teacher with the seeded student enrolled and a "Midterm" subject."""
    response = client.post("/api/classes", json={"name": "Algebra-1"}, headers=headers["teacher"])
    class_id = response.json()["class"]["id"]
    client.post(
        f"/api/classes/{class_id}/students",
        json={"student_ids": [seed_data["student"].id]},
        headers=headers["teacher"],
    )
    response = client.post(
        "/api/subjects",
        json={"class_id": class_id, "name": "Midterm"},
        headers=headers["teacher"],
    )
    return {"class_id": class_id, "subject_id": response.json()["subject"]["id"]}
