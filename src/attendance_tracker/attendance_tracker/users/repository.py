from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Account


class AccountRepository(Protocol):
    """Repository interface for Account.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, account_id: int) -> Optional[Account]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Account]:
        raise NotImplementedError

    def get_by_user_code(self, user_code: str) -> Optional[Account]:
        raise NotImplementedError

    def find_conflicts(
        self,
        *,
        username: str,
        email: str,
        user_code: str,
        exclude_id: Optional[int] = None,
    ) -> Sequence[str]:
        """Names of the unique fields ('email', 'username', 'user ID') already taken."""

        raise NotImplementedError

    def create(self, *, username: str, email: str, password_hash: str, role: Role, user_code: str) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        account_id: int,
        username: str,
        email: str,
        role: Role,
        user_code: str,
        password_hash: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def update_password(self, account_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, account_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Account]:
        raise NotImplementedError
