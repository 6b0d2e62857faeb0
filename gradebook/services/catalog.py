import logging
from typing import Optional

from gradebook.core.errors import NotFound, ValidationFailed
from gradebook.models import SchoolClass, Subject, User, UserRole
from gradebook.services.base import BaseService
from gradebook.services.policy import Action, Actor, Target

logger = logging.getLogger(__name__)

CLASS_NOT_FOUND_OR_DENIED = "Class not found or access denied"


def clean_name(value: Optional[str], what: str) -> str:
    name = (value or "").strip()
    if not name:
        raise ValidationFailed(f"{what} name is required")
    return name


class CatalogService(BaseService):
    """Classes and the subjects taught in them."""

    # classes

    def create_class(self, actor: Actor, name: Optional[str], description: Optional[str] = None) -> SchoolClass:
        self._require(actor, Action.create_class)
        school_class = SchoolClass(
            name=clean_name(name, "Class"),
            description=description,
            teacher_id=actor.id,
        )
        self.repos.classes.add(self.db, school_class)
        self.db.commit()
        self.db.refresh(school_class)
        logger.info("Class created: id=%s teacher=%s", school_class.id, actor.id)
        return school_class

    def list_classes(self, actor: Actor) -> list[SchoolClass]:
        self._require(actor, Action.list_classes)
        return self.repos.classes.list_for_teacher(self.db, actor.id)

    def get_class(self, actor: Actor, class_id: int) -> SchoolClass:
        self._require_role(actor, Action.read_class)
        school_class = self.repos.classes.get_with_members(self.db, class_id)
        if not school_class:
            raise NotFound("Class not found")
        self._require(actor, Action.read_class, self._class_target(actor, school_class))
        return school_class

    def update_class(
        self,
        actor: Actor,
        class_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> SchoolClass:
        school_class = self._owned_class(actor, class_id, Action.update_class)
        if name is not None:
            school_class.name = clean_name(name, "Class")
        if description is not None:
            school_class.description = description
        self.db.commit()
        self.db.refresh(school_class)
        return school_class

    def delete_class(self, actor: Actor, class_id: int) -> None:
        school_class = self._owned_class(actor, class_id, Action.delete_class)
        self.repos.classes.delete(self.db, school_class)
        self.db.commit()
        logger.info("Class deleted: id=%s teacher=%s", class_id, actor.id)

    # subjects

    def create_subject(
        self,
        actor: Actor,
        class_id: Optional[int],
        name: Optional[str],
        description: Optional[str] = None,
    ) -> Subject:
        self._require_role(actor, Action.create_subject)
        if class_id is None:
            raise ValidationFailed("Subject name and class ID are required")

        school_class = self.repos.classes.get(self.db, class_id)
        # missing and foreign classes are reported the same way
        if not school_class or school_class.teacher_id != actor.id:
            raise NotFound(CLASS_NOT_FOUND_OR_DENIED)
        self._require(actor, Action.create_subject, Target(teacher_id=school_class.teacher_id))

        subject = Subject(name=clean_name(name, "Subject"), description=description, class_id=school_class.id)
        self.repos.subjects.add(self.db, subject)
        self.db.commit()
        self.db.refresh(subject)
        logger.info("Subject created: id=%s class=%s", subject.id, class_id)
        return subject

    def list_subjects(self, actor: Actor, class_id: int) -> list[Subject]:
        self._require_role(actor, Action.list_subjects)
        school_class = self.repos.classes.get(self.db, class_id)
        if not school_class:
            raise NotFound("Class not found")
        self._require(actor, Action.list_subjects, self._class_target(actor, school_class))
        return self.repos.subjects.list_for_class(self.db, class_id)

    def get_subject(self, actor: Actor, subject_id: int) -> tuple[Subject, Optional[list[User]]]:
        """Return the subject and, for the owning teacher, the class roster."""
        self._require_role(actor, Action.read_subject)
        ownership = self.repos.subjects.get_ownership(self.db, subject_id)
        if not ownership:
            raise NotFound("Subject not found")
        enrolled = actor.role == UserRole.student and self.repos.enrollments.is_enrolled(
            self.db, ownership.class_id, actor.id
        )
        self._require(actor, Action.read_subject, Target(teacher_id=ownership.teacher_id, enrolled=enrolled))

        if ownership.teacher_id == actor.id:
            return ownership.subject, self.repos.users.list_class_students(self.db, ownership.class_id)
        return ownership.subject, None

    def update_subject(
        self,
        actor: Actor,
        subject_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Subject:
        subject = self._owned_subject(actor, subject_id, Action.update_subject)
        if name is not None:
            subject.name = clean_name(name, "Subject")
        if description is not None:
            subject.description = description
        self.db.commit()
        self.db.refresh(subject)
        return subject

    def delete_subject(self, actor: Actor, subject_id: int) -> None:
        subject = self._owned_subject(actor, subject_id, Action.delete_subject)
        self.repos.subjects.delete(self.db, subject)
        self.db.commit()
        logger.info("Subject deleted: id=%s teacher=%s", subject_id, actor.id)

    # helpers

    def _class_target(self, actor: Actor, school_class: SchoolClass) -> Target:
        enrolled = actor.role == UserRole.student and self.repos.enrollments.is_enrolled(
            self.db, school_class.id, actor.id
        )
        return Target(teacher_id=school_class.teacher_id, enrolled=enrolled)

    def _owned_class(self, actor: Actor, class_id: int, action: Action) -> SchoolClass:
        self._require_role(actor, action)
        school_class = self.repos.classes.get(self.db, class_id)
        if not school_class:
            raise NotFound("Class not found")
        self._require(actor, action, Target(teacher_id=school_class.teacher_id))
        return school_class

    def _owned_subject(self, actor: Actor, subject_id: int, action: Action) -> Subject:
        self._require_role(actor, action)
        ownership = self.repos.subjects.get_ownership(self.db, subject_id)
        if not ownership:
            raise NotFound("Subject not found")
        self._require(actor, action, Target(teacher_id=ownership.teacher_id))
        return ownership.subject
