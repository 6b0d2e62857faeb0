"""Role and ownership rules for every operation.

``authorize`` is a pure decision over already loaded facts: who is asking
(``Actor``), what they want to do (``Action``) and what is known about the
target (``Target``). Existence is checked by the callers before the policy is
consulted, so a missing entity is always reported as not-found first.
"""

import enum
from dataclasses import dataclass
from typing import Callable, Optional

from gradebook.core.errors import AccessDenied
from gradebook.models import User, UserRole


class Action(str, enum.Enum):
    create_class = "create_class"
    list_classes = "list_classes"
    read_class = "read_class"
    update_class = "update_class"
    delete_class = "delete_class"
    manage_enrollment = "manage_enrollment"
    list_available_students = "list_available_students"
    create_subject = "create_subject"
    list_subjects = "list_subjects"
    read_subject = "read_subject"
    update_subject = "update_subject"
    delete_subject = "delete_subject"
    assign_grades = "assign_grades"
    read_grade = "read_grade"
    update_grade = "update_grade"
    delete_grade = "delete_grade"
    list_subject_grades = "list_subject_grades"
    list_own_grades = "list_own_grades"
    list_own_subject_grades = "list_own_subject_grades"
    list_users = "list_users"
    approve_user = "approve_user"
    delete_user = "delete_user"


@dataclass(frozen=True)
class Actor:
    id: int
    role: UserRole
    is_approved: bool = True

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, role=UserRole(user.role), is_approved=bool(user.is_approved))


@dataclass(frozen=True)
class Target:
    """What the caller knows about the entity being acted on.

    ``teacher_id`` is the end of the ownership chain, ``student_id`` the graded
    student of a grade, ``enrolled`` whether the actor is enrolled in the class
    of the target, ``user_role`` the role of a user managed by an admin.
    """

    teacher_id: Optional[int] = None
    student_id: Optional[int] = None
    enrolled: bool = False
    user_role: Optional[UserRole] = None


NO_TARGET = Target()


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: str = "Access denied") -> Decision:
    return Decision(False, reason)


_TEACHER = frozenset({UserRole.teacher})
_STUDENT = frozenset({UserRole.student})
_ADMIN = frozenset({UserRole.admin})
_TEACHER_OR_STUDENT = frozenset({UserRole.teacher, UserRole.student})

ROLE_GATES: dict[Action, frozenset] = {
    Action.create_class: _TEACHER,
    Action.list_classes: _TEACHER,
    Action.read_class: _TEACHER_OR_STUDENT,
    Action.update_class: _TEACHER,
    Action.delete_class: _TEACHER,
    Action.manage_enrollment: _TEACHER,
    Action.list_available_students: _TEACHER,
    Action.create_subject: _TEACHER,
    Action.list_subjects: _TEACHER_OR_STUDENT,
    Action.read_subject: _TEACHER_OR_STUDENT,
    Action.update_subject: _TEACHER,
    Action.delete_subject: _TEACHER,
    Action.assign_grades: _TEACHER,
    Action.read_grade: _TEACHER_OR_STUDENT,
    Action.update_grade: _TEACHER,
    Action.delete_grade: _TEACHER,
    Action.list_subject_grades: _TEACHER,
    Action.list_own_grades: _STUDENT,
    Action.list_own_subject_grades: _STUDENT,
    Action.list_users: _ADMIN,
    Action.approve_user: _ADMIN,
    Action.delete_user: _ADMIN,
}

_ROLE_MESSAGES = {
    _TEACHER: "Access denied. Teacher role required.",
    _STUDENT: "Access denied. Student role required.",
    _ADMIN: "Access denied. Admin role required.",
    _TEACHER_OR_STUDENT: "Access denied",
}


def _anyone(actor: Actor, target: Target) -> Decision:
    return ALLOW


def _owner(actor: Actor, target: Target) -> Decision:
    if target.teacher_id is not None and target.teacher_id == actor.id:
        return ALLOW
    return deny()


def _owner_or_enrolled(actor: Actor, target: Target) -> Decision:
    if actor.role == UserRole.teacher:
        return _owner(actor, target)
    if actor.role == UserRole.student and target.enrolled:
        return ALLOW
    return deny()


def _owner_or_graded_student(actor: Actor, target: Target) -> Decision:
    if actor.role == UserRole.teacher:
        return _owner(actor, target)
    if actor.role == UserRole.student and target.student_id == actor.id:
        return ALLOW
    return deny()


def _enrolled(actor: Actor, target: Target) -> Decision:
    return ALLOW if target.enrolled else deny()


def _non_admin_user(actor: Actor, target: Target) -> Decision:
    if target.user_role == UserRole.admin:
        return deny("Cannot delete admin users")
    return ALLOW


_RULES: dict[Action, Callable[[Actor, Target], Decision]] = {
    Action.create_class: _anyone,
    Action.list_classes: _anyone,
    Action.read_class: _owner_or_enrolled,
    Action.update_class: _owner,
    Action.delete_class: _owner,
    Action.manage_enrollment: _owner,
    Action.list_available_students: _anyone,
    Action.create_subject: _owner,
    Action.list_subjects: _owner_or_enrolled,
    Action.read_subject: _owner_or_enrolled,
    Action.update_subject: _owner,
    Action.delete_subject: _owner,
    Action.assign_grades: _owner,
    Action.read_grade: _owner_or_graded_student,
    Action.update_grade: _owner,
    Action.delete_grade: _owner,
    Action.list_subject_grades: _owner,
    # both are scoped to the actor's own rows by the query itself
    Action.list_own_grades: _anyone,
    Action.list_own_subject_grades: _enrolled,
    Action.list_users: _anyone,
    Action.approve_user: _anyone,
    Action.delete_user: _non_admin_user,
}

assert set(ROLE_GATES) == set(Action) == set(_RULES), "every action needs a role gate and a rule"


def check_role(actor: Actor, action: Action, require_approval: bool = True) -> Decision:
    allowed = ROLE_GATES[action]
    if actor.role not in allowed:
        return deny(_ROLE_MESSAGES[allowed])
    if require_approval and actor.role == UserRole.teacher and not actor.is_approved:
        return deny("Teacher account is pending approval")
    return ALLOW


def authorize(actor: Actor, action: Action, target: Target = NO_TARGET, require_approval: bool = True) -> Decision:
    decision = check_role(actor, action, require_approval)
    if not decision:
        return decision
    return _RULES[action](actor, target)


def enforce(actor: Actor, action: Action, target: Target = NO_TARGET, require_approval: bool = True) -> None:
    decision = authorize(actor, action, target, require_approval)
    if not decision:
        raise AccessDenied(decision.reason)


def enforce_role(actor: Actor, action: Action, require_approval: bool = True) -> None:
    decision = check_role(actor, action, require_approval)
    if not decision:
        raise AccessDenied(decision.reason)
