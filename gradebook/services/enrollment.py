import logging
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError

from gradebook.core.errors import NotFound, ValidationFailed
from gradebook.db.repositories import begin_write
from gradebook.models import Enrollment, SchoolClass, User
from gradebook.services.base import BaseService
from gradebook.services.catalog import CLASS_NOT_FOUND_OR_DENIED
from gradebook.services.policy import Action, Actor, Target

logger = logging.getLogger(__name__)

ALREADY_ENROLLED = "Some students are already enrolled in other classes"


class EnrollmentService(BaseService):
    """Student membership of classes.

    A student holds at most one enrollment in the whole system. Batches are
    all-or-nothing: any offending id rejects the entire request.
    """

    def add_students(self, actor: Actor, class_id: int, student_ids: Optional[Iterable[int]]) -> list[Enrollment]:
        self._require_role(actor, Action.manage_enrollment)
        school_class = self._owned_class(actor, class_id)

        ids = list(dict.fromkeys(student_ids or ()))
        if not ids:
            raise ValidationFailed("Student IDs array is required")

        found = {student.id for student in self.repos.users.get_students(self.db, ids)}
        missing = [student_id for student_id in ids if student_id not in found]
        if missing:
            raise ValidationFailed("Some students do not exist", missing_students=missing)

        enrolled = self.repos.enrollments.enrolled_student_ids(self.db, ids)
        if enrolled:
            raise ValidationFailed(ALREADY_ENROLLED, enrolled_students=sorted(enrolled))

        try:
            enrollments = self.repos.enrollments.add_many(self.db, school_class.id, ids)
            self.db.commit()
        except IntegrityError as exc:
            # another request enrolled one of them after our check
            self.db.rollback()
            raise ValidationFailed(ALREADY_ENROLLED) from exc

        logger.info("Enrolled students %s in class %s", ids, school_class.id)
        return enrollments

    def remove_student(self, actor: Actor, class_id: int, student_id: int) -> None:
        self._require_role(actor, Action.manage_enrollment)
        school_class = self._owned_class(actor, class_id)

        # waits for grade batches that hold this class's enrollment rows
        begin_write(self.db)
        enrollment = self.repos.enrollments.get(self.db, school_class.id, student_id, lock=True)
        if not enrollment:
            self.db.rollback()
            raise NotFound("Student not found in this class")

        self.repos.enrollments.delete(self.db, enrollment)
        self.db.commit()
        logger.info("Removed student %s from class %s", student_id, school_class.id)

    def available_students(self, actor: Actor) -> list[User]:
        self._require(actor, Action.list_available_students)
        enrolled = self.repos.enrollments.enrolled_student_ids(self.db)
        return [student for student in self.repos.users.list_students(self.db) if student.id not in enrolled]

    def _owned_class(self, actor: Actor, class_id: int) -> SchoolClass:
        school_class = self.repos.classes.get(self.db, class_id)
        if not school_class or school_class.teacher_id != actor.id:
            raise NotFound(CLASS_NOT_FOUND_OR_DENIED)
        self._require(actor, Action.manage_enrollment, Target(teacher_id=school_class.teacher_id))
        return school_class
