import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from gradebook.core.errors import AccessDenied, NotFound, ValidationFailed
from gradebook.models import Enrollment, Grade, Subject
from gradebook.schemas.grade import GradeEntry
from gradebook.services.catalog import CatalogService
from gradebook.services.enrollment import EnrollmentService
from gradebook.services.grades import GradeService, validate_grade
from gradebook.services.policy import Actor


@pytest.fixture()
def actors(seed_data):
    return {key: Actor.from_user(user) for key, user in seed_data.items()}


@pytest.fixture()
def services(db_session, repos):
    return {
        "catalog": CatalogService(db_session, repos),
        "enrollment": EnrollmentService(db_session, repos),
        "grades": GradeService(db_session, repos),
    }


def test_validate_grade():
    assert validate_grade(0) == 0.0
    assert validate_grade(100) == 100.0
    for bad in (100.01, -0.01, float("nan"), True, "90"):
        with pytest.raises(ValidationFailed):
            validate_grade(bad)


def test_single_enrollment_holds_across_add_and_remove(services, actors, db_session):
    catalog, enrollment = services["catalog"], services["enrollment"]
    a = catalog.create_class(actors["teacher"], "A")
    b = catalog.create_class(actors["teacher2"], "B")
    sam = actors["student"].id

    enrollment.add_students(actors["teacher"], a.id, [sam])
    with pytest.raises(ValidationFailed):
        enrollment.add_students(actors["teacher2"], b.id, [sam])

    enrollment.remove_student(actors["teacher"], a.id, sam)
    enrollment.add_students(actors["teacher2"], b.id, [sam])
    with pytest.raises(ValidationFailed):
        enrollment.add_students(actors["teacher"], a.id, [sam])

    assert db_session.query(Enrollment).filter(Enrollment.student_id == sam).count() == 1


def test_duplicate_ids_in_batch_enroll_once(services, actors, db_session):
    school_class = services["catalog"].create_class(actors["teacher"], "A")
    sam = actors["student"].id
    enrollments = services["enrollment"].add_students(actors["teacher"], school_class.id, [sam, sam])
    assert [e.student_id for e in enrollments] == [sam]


def test_remove_from_missing_class(services, actors):
    with pytest.raises(NotFound):
        services["enrollment"].remove_student(actors["teacher"], 999, actors["student"].id)


def test_class_delete_leaves_no_orphan_grades(services, actors, db_session):
    catalog, enrollment, grades = services["catalog"], services["enrollment"], services["grades"]
    school_class = catalog.create_class(actors["teacher"], "A")
    enrollment.add_students(actors["teacher"], school_class.id, [actors["student"].id])
    first = catalog.create_subject(actors["teacher"], school_class.id, "Quiz")
    second = catalog.create_subject(actors["teacher"], school_class.id, "Final")
    for subject in (first, second):
        grades.assign_grades(actors["teacher"], subject.id, [GradeEntry(student_id=actors["student"].id, grade=50)])

    catalog.delete_class(actors["teacher"], school_class.id)

    assert db_session.query(Subject).count() == 0
    assert db_session.query(Grade).count() == 0


def test_assign_grades_atomic_at_service_level(services, actors, db_session):
    catalog, enrollment, grades = services["catalog"], services["enrollment"], services["grades"]
    school_class = catalog.create_class(actors["teacher"], "A")
    enrollment.add_students(actors["teacher"], school_class.id, [actors["student"].id, actors["student2"].id])
    subject = catalog.create_subject(actors["teacher"], school_class.id, "Quiz")

    entries = [
        GradeEntry(student_id=actors["student"].id, grade=90),
        GradeEntry(student_id=actors["student2"].id, grade=91),
        GradeEntry(student_id=actors["student3"].id, grade=92),
    ]
    with pytest.raises(ValidationFailed) as exc_info:
        grades.assign_grades(actors["teacher"], subject.id, entries)
    assert exc_info.value.extra == {"student_id": actors["student3"].id}
    assert db_session.query(Grade).count() == 0


def test_foreign_teacher_cannot_touch_chain(services, actors):
    catalog = services["catalog"]
    school_class = catalog.create_class(actors["teacher"], "A")
    subject = catalog.create_subject(actors["teacher"], school_class.id, "Quiz")
    with pytest.raises(AccessDenied):
        catalog.update_subject(actors["teacher2"], subject.id, name="Mine now")
    with pytest.raises(AccessDenied):
        services["grades"].list_for_subject(actors["teacher2"], subject.id)


def test_removal_cannot_slip_in_while_grades_are_written(services, actors, repos, db_engine, db_session, monkeypatch):
    catalog, enrollment, grades = services["catalog"], services["enrollment"], services["grades"]
    school_class = catalog.create_class(actors["teacher"], "A")
    sam = actors["student"].id
    enrollment.add_students(actors["teacher"], school_class.id, [sam])
    subject = catalog.create_subject(actors["teacher"], school_class.id, "Quiz")

    other_engine = create_engine(db_engine.url, connect_args={"timeout": 0})
    read_enrollments = repos.enrollments.lock_class_student_ids

    def read_then_remove(db, class_id):
        student_ids = read_enrollments(db, class_id)
        with Session(other_engine) as other:
            with pytest.raises(OperationalError):
                other.query(Enrollment).filter(Enrollment.student_id == sam).delete()
                other.commit()
        return student_ids

    monkeypatch.setattr(repos.enrollments, "lock_class_student_ids", read_then_remove)
    try:
        grades.assign_grades(actors["teacher"], subject.id, [GradeEntry(student_id=sam, grade=50)])
    finally:
        other_engine.dispose()

    assert db_session.query(Enrollment).filter(Enrollment.student_id == sam).count() == 1
    assert db_session.query(Grade).filter(Grade.student_id == sam).count() == 1


def test_removed_student_cannot_be_graded(services, actors, db_session):
    catalog, enrollment, grades = services["catalog"], services["enrollment"], services["grades"]
    school_class = catalog.create_class(actors["teacher"], "A")
    sam = actors["student"].id
    enrollment.add_students(actors["teacher"], school_class.id, [sam])
    subject = catalog.create_subject(actors["teacher"], school_class.id, "Quiz")

    enrollment.remove_student(actors["teacher"], school_class.id, sam)
    with pytest.raises(ValidationFailed):
        grades.assign_grades(actors["teacher"], subject.id, [GradeEntry(student_id=sam, grade=50)])
    assert db_session.query(Grade).count() == 0
