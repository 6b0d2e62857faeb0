import logging

from gradebook.core.errors import NotFound, ValidationFailed
from gradebook.models import User, UserRole
from gradebook.services.base import BaseService
from gradebook.services.policy import Action, Actor, Target

logger = logging.getLogger(__name__)


class UserAdminService(BaseService):
    def list_users(self, actor: Actor) -> list[User]:
        self._require(actor, Action.list_users)
        return self.repos.users.list_non_admins(self.db)

    def approve_teacher(self, actor: Actor, user_id: int) -> User:
        user = self._target_user(actor, user_id, Action.approve_user)
        if user.role != UserRole.teacher:
            raise ValidationFailed("Only teacher accounts can be approved")
        user.is_approved = True
        self.db.commit()
        self.db.refresh(user)
        logger.info("Teacher %s approved by admin %s", user.id, actor.id)
        return user

    def delete_user(self, actor: Actor, user_id: int) -> None:
        """Delete a student or teacher together with everything hanging off it."""
        user = self._target_user(actor, user_id, Action.delete_user)
        self.repos.users.delete(self.db, user)
        self.db.commit()
        logger.info("User %s deleted by admin %s", user_id, actor.id)

    def _target_user(self, actor: Actor, user_id: int, action: Action) -> User:
        self._require_role(actor, action)
        user = self.repos.users.get(self.db, user_id)
        if not user:
            raise NotFound("User not found")
        self._require(actor, action, Target(user_role=UserRole(user.role)))
        return user
