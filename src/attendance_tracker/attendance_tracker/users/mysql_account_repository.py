from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Account
from .repository import AccountRepository

_COLUMNS = "account_id, username, email, password_hash, role, user_code, created_at, updated_at"


def _to_account(r: dict) -> Account:
    return Account(
        account_id=int(r["account_id"]),
        username=r["username"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        user_code=r["user_code"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def get_by_id(self, account_id: int) -> Optional[Account]:
        return self._get_one("account_id", int(account_id))

    def get_by_username(self, username: str) -> Optional[Account]:
        return self._get_one("username", username)

    def get_by_user_code(self, user_code: str) -> Optional[Account]:
        return self._get_one("user_code", user_code)

    def find_conflicts(
        self,
        *,
        username: str,
        email: str,
        user_code: str,
        exclude_id: Optional[int] = None,
    ) -> Sequence[str]:
        conflicts: list[str] = []
        with db_cursor(self._conn_factory) as (_, cur):
            for field, column, value in (
                ("email", "email", email),
                ("username", "username", username),
                ("user ID", "user_code", user_code),
            ):
                if exclude_id is None:
                    cur.execute(f"SELECT 1 AS hit FROM accounts WHERE {column}=%s LIMIT 1", (value,))
                else:
                    cur.execute(
                        f"SELECT 1 AS hit FROM accounts WHERE {column}=%s AND account_id<>%s LIMIT 1",
                        (value, int(exclude_id)),
                    )
                if fetchone(cur):
                    conflicts.append(field)
        return conflicts

    def create(self, *, username: str, email: str, password_hash: str, role: Role, user_code: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO accounts(username, email, password_hash, role, user_code)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (username, email, password_hash, role.value, user_code),
            )
            return int(cur.lastrowid)

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
        sets = ["username=%s", "email=%s", "role=%s", "user_code=%s"]
        params: list[object] = [username, email, role.value, user_code]
        if password_hash is not None:
            sets.append("password_hash=%s")
            params.append(password_hash)
        params.append(int(account_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE accounts SET {', '.join(sets)} WHERE account_id=%s", tuple(params))
            return cur.rowcount > 0

    def update_password(self, account_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE accounts SET password_hash=%s WHERE account_id=%s", (password_hash, int(account_id)))
            return cur.rowcount > 0

    def delete_by_id(self, account_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM accounts WHERE account_id=%s", (int(account_id),))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts ORDER BY account_id DESC")
            return [_to_account(r) for r in fetchall(cur)]
