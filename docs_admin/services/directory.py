import logging
from typing import Optional

from docs_admin.errors import (
    AuthenticationError,
    AuthorizationError,
    EmailSendError,
    NotFoundError,
)
from docs_admin.schemas.tokens import SessionClaim
from docs_admin.schemas.users import Account, UserCreate, UserSummary, to_summary
from docs_admin.services.email import Mailer
from docs_admin.services.passwords import generate_password
from docs_admin.services.users import UserStore

LOGGER = logging.getLogger(__name__)


class DirectoryService:
    """Administrator-only operations over the account directory."""

    def __init__(self, users: UserStore, mailer: Mailer) -> None:
        self._users = users
        self._mailer = mailer

    def list_users(self, caller: Optional[SessionClaim]) -> list[UserSummary]:
        self.authorize(caller, "view all users")
        return [to_summary(account) for account in self._users.list_users()]

    def create_user(self, caller: Optional[SessionClaim], payload: UserCreate) -> UserSummary:
        actor = self.authorize(caller, "create new users")
        password = payload.password or generate_password()
        account = self._users.create_user(payload.email, payload.name, payload.role, password)
        LOGGER.info("User %s created by %s", account.id, actor.email)
        try:
            self._mailer.send_welcome(account.email, account.name, account.role, password)
        except EmailSendError as exc:
            LOGGER.warning("Welcome email for %s was not delivered: %s", account.email, exc)
        return to_summary(account)

    def set_active(
        self, caller: Optional[SessionClaim], user_id: str, is_active: bool
    ) -> UserSummary:
        actor = self.authorize(caller, "update user status")
        account = self._users.set_active(user_id, is_active)
        if account is None:
            raise NotFoundError()
        LOGGER.info(
            "User %s %s by %s",
            user_id,
            "activated" if is_active else "deactivated",
            actor.email,
        )
        return to_summary(account)

    def delete_user(self, caller: Optional[SessionClaim], user_id: str) -> None:
        actor = self.authorize(caller, "delete users")
        if not self._users.delete_user(user_id):
            raise NotFoundError()
        LOGGER.info("User %s deleted by %s", user_id, actor.email)

    def authorize(self, caller: Optional[SessionClaim], action: str) -> Account:
        if caller is None:
            raise AuthenticationError()
        if not caller.is_admin:
            LOGGER.warning("Non-admin %s tried to %s", caller.email, action)
            raise AuthorizationError(f"Only administrators can {action}.")
        actor = self._users.get_by_id(caller.id)
        if actor is None or not actor.is_active or actor.role != "admin":
            LOGGER.warning("Stale admin session for %s tried to %s", caller.email, action)
            raise AuthorizationError(f"Only administrators can {action}.")
        return actor
