from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty, require_user_code, parse_enum
from ..core.constants import MIN_PASSWORD_LENGTH, ROOT_ADMIN_CODE
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from .model import Account
from .repository import AccountRepository
from .tokens import BearerTokens

logger = logging.getLogger(__name__)


def _password_matches(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except (ValueError, TypeError):
        # e.g. placeholder hashes or corrupted values
        return False


class AuthService:
    """Use case: authenticate accounts and resolve bearer tokens."""

    def __init__(self, accounts: AccountRepository, tokens: BearerTokens):
        self._accounts = accounts
        self._tokens = tokens

    def authenticate(self, username: str, password: str) -> Account:
        username = (username or "").strip()
        account = self._accounts.get_by_username(username) if username else None
        if not account or not _password_matches(account.password_hash, password or ""):
            logger.info("failed login for %r", username)
            raise AuthenticationError("Invalid credentials")
        return account

    def issue_token(self, account: Account) -> str:
        return self._tokens.issue(account_id=account.account_id, role=account.role.value)

    def verify_token(self, token: str) -> Account:
        claims = self._tokens.decode(token)
        account = self._accounts.get_by_id(int(claims["id"]))
        if not account:
            raise AuthenticationError("User not found")
        return account

    def change_password(self, account: Account, *, current_password: str, new_password: str) -> None:
        if not _password_matches(account.password_hash, current_password or ""):
            raise AuthenticationError("Current password is incorrect")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        self._accounts.update_password(account.account_id, password_hash=generate_password_hash(new_password))
        logger.info("password changed for account %s", account.account_id)


class AccountService:
    """Use case: manage accounts (admin)."""

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    @staticmethod
    def _require_admin(current: Account) -> None:
        if current.role != Role.ADMIN:
            raise AuthorizationError("Not authorized as admin")

    def _normalize(self, *, username: str, email: str, role, user_code: str) -> tuple[str, str, Role, str]:
        username = require_non_empty(username, "Username")
        email = require_non_empty(email, "Email").lower()
        role = parse_enum(Role, role, "role")
        user_code = require_user_code(role.value, user_code)
        return username, email, role, user_code

    def list_accounts(self, current: Account) -> Sequence[Account]:
        self._require_admin(current)
        return self._accounts.list_all()

    def get_account(self, current: Account, account_id: int) -> Account:
        self._require_admin(current)
        account = self._accounts.get_by_id(account_id)
        if not account:
            raise NotFoundError("User not found")
        return account

    def create_account(self, current: Account, *, username: str, email: str, role, user_code: str) -> Account:
        self._require_admin(current)
        username, email, role, user_code = self._normalize(
            username=username, email=email, role=role, user_code=user_code
        )

        conflicts = self._accounts.find_conflicts(username=username, email=email, user_code=user_code)
        if conflicts:
            raise DuplicateError(
                f"The following fields are already in use: {', '.join(conflicts)}",
                fields=conflicts,
                status_code=400,
            )

        # Initial password is the user code; users change it after first login.
        account_id = self._accounts.create(
            username=username,
            email=email,
            password_hash=generate_password_hash(user_code),
            role=role,
            user_code=user_code,
        )
        logger.info("account %s created (%s, %s)", account_id, role.value, user_code)
        return self._accounts.get_by_id(account_id)

    def update_account(
        self,
        current: Account,
        account_id: int,
        *,
        username: Optional[str] = None,
        email: Optional[str] = None,
        role=None,
        user_code: Optional[str] = None,
    ) -> Account:
        self._require_admin(current)
        existing = self._accounts.get_by_id(account_id)
        if not existing:
            raise NotFoundError("User not found")

        username, email, role, user_code = self._normalize(
            username=username or existing.username,
            email=email or existing.email,
            role=role or existing.role.value,
            user_code=user_code or existing.user_code,
        )

        conflicts = self._accounts.find_conflicts(
            username=username, email=email, user_code=user_code, exclude_id=existing.account_id
        )
        if conflicts:
            raise DuplicateError(
                f"The following fields are already in use: {', '.join(conflicts)}",
                fields=conflicts,
                status_code=400,
            )

        # A new user code also becomes the new password.
        password_hash = generate_password_hash(user_code) if user_code != existing.user_code else None
        self._accounts.update(
            account_id=existing.account_id,
            username=username,
            email=email,
            role=role,
            user_code=user_code,
            password_hash=password_hash,
        )
        return self._accounts.get_by_id(existing.account_id)

    def delete_account(self, current: Account, account_id: int) -> None:
        self._require_admin(current)
        target = self._accounts.get_by_id(account_id)
        if not target:
            raise NotFoundError("User not found")
        if target.account_id == current.account_id:
            raise ValidationError("Cannot delete your own account")
        if target.user_code == ROOT_ADMIN_CODE:
            raise ValidationError(f"Cannot delete the root admin account ({ROOT_ADMIN_CODE})")

        if not self._accounts.delete_by_id(target.account_id):
            raise NotFoundError("User not found")
        logger.info("account %s deleted by %s", target.account_id, current.account_id)
