"""Query objects over the relational store.

Each repository is stateless: it is built once when the application starts and
every method receives the request's session. Ownership chains are resolved
with explicit joins instead of walking loaded relationships.
"""

from dataclasses import dataclass, field
from typing import Iterable, NamedTuple, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from gradebook.models import User, UserRole, SchoolClass, Enrollment, Subject, Grade


class SubjectOwnership(NamedTuple):
    subject: Subject
    class_id: int
    teacher_id: int


class GradeOwnership(NamedTuple):
    grade: Grade
    subject_id: int
    class_id: int
    teacher_id: int


def begin_write(db: Session) -> None:
    """Start the session's transaction holding the database write lock.

    Row locks taken with ``FOR UPDATE`` are enough on server databases, but
    SQLite ignores them, so there the transaction is opened ``IMMEDIATE``.
    """
    connection = db.connection()
    if connection.dialect.name == "sqlite" and not connection.connection.driver_connection.in_transaction:
        connection.exec_driver_sql("BEGIN IMMEDIATE")


class UserRepository:
    def get(self, db: Session, user_id: int) -> Optional[User]:
        return db.get(User, user_id)

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def list_students(self, db: Session) -> list[User]:
        return db.query(User).filter(User.role == UserRole.student).order_by(User.name, User.id).all()

    def list_non_admins(self, db: Session) -> list[User]:
        return (
            db.query(User)
            .options(selectinload(User.owned_classes), selectinload(User.enrollment))
            .filter(User.role.in_([UserRole.student, UserRole.teacher]))
            .order_by(User.id)
            .all()
        )

    def list_class_students(self, db: Session, class_id: int) -> list[User]:
        return (
            db.query(User)
            .join(Enrollment, Enrollment.student_id == User.id)
            .filter(Enrollment.class_id == class_id)
            .order_by(User.name, User.id)
            .all()
        )

    def get_students(self, db: Session, user_ids: Iterable[int]) -> list[User]:
        ids = list(user_ids)
        if not ids:
            return []
        return db.query(User).filter(User.id.in_(ids), User.role == UserRole.student).all()

    def add(self, db: Session, user: User) -> User:
        db.add(user)
        db.flush()
        return user

    def delete(self, db: Session, user: User) -> None:
        db.delete(user)


class ClassRepository:
    def get(self, db: Session, class_id: int) -> Optional[SchoolClass]:
        return db.get(SchoolClass, class_id)

    def get_with_members(self, db: Session, class_id: int) -> Optional[SchoolClass]:
        return (
            db.query(SchoolClass)
            .options(selectinload(SchoolClass.students), selectinload(SchoolClass.subjects))
            .filter(SchoolClass.id == class_id)
            .first()
        )

    def list_for_teacher(self, db: Session, teacher_id: int) -> list[SchoolClass]:
        return (
            db.query(SchoolClass)
            .options(selectinload(SchoolClass.students), selectinload(SchoolClass.subjects))
            .filter(SchoolClass.teacher_id == teacher_id)
            .order_by(SchoolClass.id)
            .all()
        )

    def add(self, db: Session, school_class: SchoolClass) -> SchoolClass:
        db.add(school_class)
        db.flush()
        return school_class

    def delete(self, db: Session, school_class: SchoolClass) -> None:
        db.delete(school_class)


class EnrollmentRepository:
    def get(self, db: Session, class_id: int, student_id: int, lock: bool = False) -> Optional[Enrollment]:
        query = db.query(Enrollment).filter(Enrollment.class_id == class_id, Enrollment.student_id == student_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    def is_enrolled(self, db: Session, class_id: int, student_id: int) -> bool:
        return self.get(db, class_id, student_id) is not None

    def enrolled_student_ids(self, db: Session, student_ids: Optional[Iterable[int]] = None) -> set[int]:
        """Ids of students holding an enrollment anywhere, optionally narrowed to ``student_ids``."""
        query = select(Enrollment.student_id)
        if student_ids is not None:
            ids = list(student_ids)
            if not ids:
                return set()
            query = query.where(Enrollment.student_id.in_(ids))
        return set(db.scalars(query).all())

    def lock_class_student_ids(self, db: Session, class_id: int) -> set[int]:
        """Ids enrolled in the class, with the rows locked until the transaction ends."""
        query = select(Enrollment.student_id).where(Enrollment.class_id == class_id).with_for_update()
        return set(db.scalars(query).all())

    def add_many(self, db: Session, class_id: int, student_ids: Iterable[int]) -> list[Enrollment]:
        enrollments = [Enrollment(class_id=class_id, student_id=student_id) for student_id in student_ids]
        db.add_all(enrollments)
        db.flush()
        return enrollments

    def delete(self, db: Session, enrollment: Enrollment) -> None:
        db.delete(enrollment)


class SubjectRepository:
    def get_ownership(self, db: Session, subject_id: int) -> Optional[SubjectOwnership]:
        row = (
            db.query(Subject, SchoolClass.id, SchoolClass.teacher_id)
            .join(SchoolClass, Subject.class_id == SchoolClass.id)
            .filter(Subject.id == subject_id)
            .first()
        )
        if row is None:
            return None
        return SubjectOwnership(*row)

    def list_for_class(self, db: Session, class_id: int) -> list[Subject]:
        return db.query(Subject).filter(Subject.class_id == class_id).order_by(Subject.id).all()

    def add(self, db: Session, subject: Subject) -> Subject:
        db.add(subject)
        db.flush()
        return subject

    def delete(self, db: Session, subject: Subject) -> None:
        db.delete(subject)


class GradeRepository:
    def get_ownership(self, db: Session, grade_id: int) -> Optional[GradeOwnership]:
        row = (
            db.query(Grade, Subject.id, SchoolClass.id, SchoolClass.teacher_id)
            .join(Subject, Grade.subject_id == Subject.id)
            .join(SchoolClass, Subject.class_id == SchoolClass.id)
            .filter(Grade.id == grade_id)
            .first()
        )
        if row is None:
            return None
        return GradeOwnership(*row)

    def for_subject_students(self, db: Session, subject_id: int, student_ids: Iterable[int]) -> dict[int, Grade]:
        ids = list(student_ids)
        if not ids:
            return {}
        grades = db.query(Grade).filter(Grade.subject_id == subject_id, Grade.student_id.in_(ids)).all()
        return {grade.student_id: grade for grade in grades}

    def list_for_subject(self, db: Session, subject_id: int) -> list[Grade]:
        return (
            db.query(Grade)
            .options(selectinload(Grade.student))
            .filter(Grade.subject_id == subject_id)
            .order_by(Grade.created_at.desc(), Grade.id.desc())
            .all()
        )

    def list_for_student(self, db: Session, student_id: int, subject_id: Optional[int] = None) -> list[Grade]:
        query = (
            db.query(Grade)
            .options(selectinload(Grade.subject).selectinload(Subject.school_class))
            .filter(Grade.student_id == student_id)
        )
        if subject_id is not None:
            query = query.filter(Grade.subject_id == subject_id)
        return query.order_by(Grade.created_at.desc(), Grade.id.desc()).all()

    def add(self, db: Session, grade: Grade) -> Grade:
        db.add(grade)
        return grade

    def delete(self, db: Session, grade: Grade) -> None:
        db.delete(grade)


@dataclass
class Repositories:
    users: UserRepository = field(default_factory=UserRepository)
    classes: ClassRepository = field(default_factory=ClassRepository)
    enrollments: EnrollmentRepository = field(default_factory=EnrollmentRepository)
    subjects: SubjectRepository = field(default_factory=SubjectRepository)
    grades: GradeRepository = field(default_factory=GradeRepository)
