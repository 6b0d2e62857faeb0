import logging
import math
import numbers
from typing import Any, Callable, Optional, Sequence

from sqlalchemy.exc import IntegrityError

from gradebook.core.errors import NotFound, ValidationFailed
from gradebook.db.repositories import GradeOwnership, SubjectOwnership, begin_write
from gradebook.models import Grade, MIN_GRADE, MAX_GRADE
from gradebook.services.base import BaseService
from gradebook.services.policy import Action, Actor, Target

logger = logging.getLogger(__name__)


def validate_grade(value: Any) -> float:
    if value is None:
        raise ValidationFailed("Grade is required")
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationFailed("Grade must be a number")
    if math.isnan(value) or not MIN_GRADE <= value <= MAX_GRADE:
        raise ValidationFailed(f"Grade must be between {MIN_GRADE} and {MAX_GRADE}")
    return float(value)


class GradeService(BaseService):
    """Per-student, per-subject grades.

    Batch assignment is an upsert keyed by (student, subject): an existing
    grade of the student in the subject is overwritten, assignment label and
    comments included.
    """

    def assign_grades(self, actor: Actor, subject_id: Optional[int], entries: Optional[Sequence]) -> list[Grade]:
        self._require_role(actor, Action.assign_grades)
        if subject_id is None:
            raise ValidationFailed("Subject ID and grades array are required")

        ownership = self._subject(actor, subject_id, Action.assign_grades)
        if not entries:
            raise ValidationFailed("Subject ID and grades array are required")

        # enrollment rows stay locked from the check until the commit
        begin_write(self.db)
        try:
            grades = self._write_batch(ownership, entries)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ValidationFailed("Grades for this subject were changed concurrently, please retry") from exc
        except ValidationFailed:
            self.db.rollback()
            raise

        for grade in grades:
            self.db.refresh(grade)
        logger.info("Assigned %d grades for subject %s by teacher %s", len(grades), subject_id, actor.id)
        return grades

    def _write_batch(self, ownership: SubjectOwnership, entries: Sequence) -> list[Grade]:
        # the whole batch is validated before anything is written
        enrolled = self.repos.enrollments.lock_class_student_ids(self.db, ownership.class_id)
        accepted = {}
        for entry in entries:
            if entry.student_id is None or entry.grade is None:
                raise ValidationFailed("Student ID and grade are required for each entry")
            value = validate_grade(entry.grade)
            if entry.student_id not in enrolled:
                raise ValidationFailed(
                    f"Student with ID {entry.student_id} is not enrolled in this class",
                    student_id=entry.student_id,
                )
            # later entries for the same student win
            accepted[entry.student_id] = (value, entry.assignment or None, entry.comments or None)

        subject_id = ownership.subject.id
        existing = self.repos.grades.for_subject_students(self.db, subject_id, accepted)
        grades = []
        for student_id, (value, assignment, comments) in accepted.items():
            grade = existing.get(student_id)
            if grade is None:
                grade = self.repos.grades.add(self.db, Grade(student_id=student_id, subject_id=subject_id))
            grade.grade = value
            grade.assignment = assignment
            grade.comments = comments
            grades.append(grade)
        return grades

    def get_grade(self, actor: Actor, grade_id: int) -> Grade:
        ownership = self._grade(actor, grade_id, Action.read_grade)
        return ownership.grade

    def update_grade(
        self,
        actor: Actor,
        grade_id: int,
        grade: Any,
        assignment: Optional[str] = None,
        comments: Optional[str] = None,
    ) -> Grade:
        ownership = self._grade(actor, grade_id, Action.update_grade)
        record = ownership.grade
        record.grade = validate_grade(grade)
        if assignment is not None:
            record.assignment = assignment
        if comments is not None:
            record.comments = comments
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete_grade(self, actor: Actor, grade_id: int) -> None:
        ownership = self._grade(actor, grade_id, Action.delete_grade)
        self.repos.grades.delete(self.db, ownership.grade)
        self.db.commit()
        logger.info("Grade deleted: id=%s teacher=%s", grade_id, actor.id)

    def list_for_subject(self, actor: Actor, subject_id: int) -> list[Grade]:
        self._require_role(actor, Action.list_subject_grades)
        self._subject(actor, subject_id, Action.list_subject_grades)
        return self.repos.grades.list_for_subject(self.db, subject_id)

    def list_mine(self, actor: Actor) -> list[Grade]:
        self._require(actor, Action.list_own_grades)
        return self.repos.grades.list_for_student(self.db, actor.id)

    def list_mine_for_subject(self, actor: Actor, subject_id: int) -> list[Grade]:
        self._require_role(actor, Action.list_own_subject_grades)
        self._subject(actor, subject_id, Action.list_own_subject_grades, target=self._enrollment_target)
        return self.repos.grades.list_for_student(self.db, actor.id, subject_id=subject_id)

    def _subject(
        self,
        actor: Actor,
        subject_id: int,
        action: Action,
        target: Optional[Callable[[Actor, SubjectOwnership], Target]] = None,
    ) -> SubjectOwnership:
        ownership = self.repos.subjects.get_ownership(self.db, subject_id)
        if not ownership:
            raise NotFound("Subject not found")
        build = target or self._owner_target
        self._require(actor, action, build(actor, ownership))
        return ownership

    def _owner_target(self, actor: Actor, ownership: SubjectOwnership) -> Target:
        return Target(teacher_id=ownership.teacher_id)

    def _enrollment_target(self, actor: Actor, ownership: SubjectOwnership) -> Target:
        return Target(enrolled=self.repos.enrollments.is_enrolled(self.db, ownership.class_id, actor.id))

    def _grade(self, actor: Actor, grade_id: int, action: Action) -> GradeOwnership:
        self._require_role(actor, action)
        ownership = self.repos.grades.get_ownership(self.db, grade_id)
        if not ownership:
            raise NotFound("Grade not found")
        self._require(
            actor,
            action,
            Target(teacher_id=ownership.teacher_id, student_id=ownership.grade.student_id),
        )
        return ownership
