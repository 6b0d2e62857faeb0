from sqlalchemy.orm import Session

from gradebook.db.repositories import Repositories
from gradebook.services.policy import Action, Actor, Target, NO_TARGET, enforce, enforce_role


class BaseService:
    def __init__(self, db: Session, repos: Repositories, require_approval: bool = True) -> None:
        self.db = db
        self.repos = repos
        self.require_approval = require_approval

    def _require_role(self, actor: Actor, action: Action) -> None:
        enforce_role(actor, action, self.require_approval)

    def _require(self, actor: Actor, action: Action, target: Target = NO_TARGET) -> None:
        enforce(actor, action, target, self.require_approval)
