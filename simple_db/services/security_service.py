from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from simple_db.core.settings import Settings
from simple_db.db.database import Database
from simple_db.db.table import Table
from simple_db.services.session_context import SessionContext

logger = logging.getLogger(__name__)

SECURITY_LOGIN_NAME = "simple_db.account_id"

# Returned by verify_credentials for both "no such account" and "wrong password".
INVALID_ACCOUNT_ID = -1

Account = Dict[str, Any]


class SecurityService:
    """Sign-up, login and role checks on top of an account table and a role table.

    The login state is one key in a caller-supplied SessionContext, bound to
    the account's primary key value.
    """

    def __init__(
        self,
        db: Database,
        *,
        login_name_field: str = "account_name",
        login_password_field: str = "account_password",
        accounts_table: str = "account",
        accounts_key: str = "account_id",
        roles_table: str = "role",
        roles_key: str = "role_id",
        role_name_field: str = "role_name",
        role_account_field: str = "account_id",
        session_key: str = SECURITY_LOGIN_NAME,
    ) -> None:
        self._db = db
        self._login_name_field = login_name_field
        self._login_password_field = login_password_field
        self._role_name_field = role_name_field
        self._role_account_field = role_account_field
        self._session_key = session_key

        self._accounts = Table(db, accounts_table, accounts_key)
        self._roles = Table(db, roles_table, roles_key)

        # argon2-cffi defaults: random salt per hash, constant-time verify.
        self._hasher = PasswordHasher()

    @classmethod
    def from_settings(cls, db: Database, settings: Settings) -> "SecurityService":
        return cls(
            db,
            login_name_field=settings.login_name_field,
            login_password_field=settings.login_password_field,
            accounts_table=settings.accounts_table,
            accounts_key=settings.accounts_key,
            roles_table=settings.roles_table,
            roles_key=settings.roles_key,
            role_name_field=settings.role_name_field,
            role_account_field=settings.role_account_field,
            session_key=settings.security_login_name,
        )

    @property
    def accounts(self) -> Table:
        return self._accounts

    @property
    def roles(self) -> Table:
        return self._roles

    @property
    def session_key(self) -> str:
        return self._session_key

    # -----------------
    # Passwords
    # -----------------

    def hash_password(self, password: str) -> str:
        return self._hasher.hash(password)

    def _check_hash(self, password: str, password_hash: Any) -> bool:
        if not isinstance(password_hash, str) or not password_hash:
            return False
        try:
            return self._hasher.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False

    def verify_password(self, account: Mapping[str, Any], password: str) -> bool:
        """Check ``password`` against an account row that was already fetched."""
        return self._check_hash(password, account.get(self._login_password_field))

    def verify_credentials(self, name: str, password: str) -> Any:
        """Return the account's primary key, or -1 if the credentials are not valid.

        Intentionally ambiguous: an unknown name and a wrong password look the same.
        """
        account = self.get_account_by_name(name)
        if account is not None and self.verify_password(account, password):
            return account[self._accounts.primary_key]
        return INVALID_ACCOUNT_ID

    # -----------------
    # Accounts
    # -----------------

    def signup(self, name: str, password: str, info: Optional[Mapping[str, Any]] = None) -> Optional[Account]:
        """Create an account. Returns the stored row, or None if the insert failed."""
        row = dict(info or {})
        row[self._login_name_field] = name
        row[self._login_password_field] = self.hash_password(password)

        result = self._accounts.insert(row)
        if result is None or result.count() == 0:
            return None
        return result.rows[0]

    def get_account(self, account_id: Any) -> Optional[Account]:
        result = self._accounts.select_one(account_id)
        if result.count() == 1:
            return result.rows[0]
        return None

    def get_account_by_name(self, name: str) -> Optional[Account]:
        result = self._accounts.select(where=f"{self._login_name_field} = {self._db.escape(name)}")
        if result.count() == 1:
            return result.rows[0]
        if result.count() > 1:
            logger.warning(
                "Ambiguous account name in %s.%s: %d rows match",
                self._accounts.name,
                self._login_name_field,
                result.count(),
            )
        return None

    def update(self, session: SessionContext, password: Optional[str], info: Mapping[str, Any]) -> bool:
        """Update the logged in account. Returns whether the update succeeded."""
        if not self.is_logged_in(session):
            return False
        return self.update_by_id(session.get(self._session_key), info, password=password)

    def update_by_id(self, account_id: Any, info: Mapping[str, Any], *, password: Optional[str] = None) -> bool:
        """Update any account. No permission check: callers must gate access."""
        row = dict(info or {})
        if password is not None:
            row[self._login_password_field] = self.hash_password(password)
        if not row:
            return False

        result = self._accounts.update_one(row, account_id)
        return result.ok

    # -----------------
    # Session
    # -----------------

    def login(self, session: SessionContext, name: str, password: str) -> bool:
        if not session.is_active():
            return False

        account_id = self.verify_credentials(name, password)
        if account_id == INVALID_ACCOUNT_ID:
            return False

        session.set(self._session_key, account_id)
        return True

    def logout(self, session: SessionContext) -> None:
        if not session.is_active():
            return
        session.unset(self._session_key)

    def is_logged_in(self, session: SessionContext) -> bool:
        if not session.is_active():
            return False
        return session.get(self._session_key) is not None

    def get_logged_in_account(self, session: SessionContext) -> Optional[Account]:
        if not self.is_logged_in(session):
            return None
        return self.get_account(session.get(self._session_key))

    # -----------------
    # Roles
    # -----------------

    def has_any_role_by_id(self, account_id: Any, roles: Iterable[str]) -> bool:
        if self.get_account(account_id) is None:
            return False

        wanted = set(roles)
        result = self._roles.select(where=f"{self._role_account_field} = {self._db.literal(account_id)}")
        return any(row.get(self._role_name_field) in wanted for row in result.rows)

    def has_any_role(self, session: SessionContext, roles: Iterable[str]) -> bool:
        if not self.is_logged_in(session):
            return False
        return self.has_any_role_by_id(session.get(self._session_key), roles)
