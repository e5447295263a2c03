from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_bool(key: str, default: str = "1") -> bool:
    return os.getenv(key, default).strip().lower() not in ("0", "false", "no", "off")


def _env_str(key: str, default: str) -> str:
    return os.getenv(key, default).strip()


@dataclass(frozen=True, slots=True)
class Settings:
    # Database
    database_url: str = field(default_factory=lambda: _env_str("DATABASE_URL", "sqlite:///./simple_db.db"))
    db_echo: bool = field(default_factory=lambda: _env_bool("DB_ECHO", "0"))
    # Empty means "leave the server default alone".
    db_charset: str = field(default_factory=lambda: _env_str("DB_CHARSET", ""))

    # Security / session binding
    security_login_name: str = field(default_factory=lambda: _env_str("SECURITY_LOGIN_NAME", "simple_db.account_id"))
    login_name_field: str = field(default_factory=lambda: _env_str("SECURITY_LOGIN_NAME_FIELD", "account_name"))
    login_password_field: str = field(
        default_factory=lambda: _env_str("SECURITY_LOGIN_PASSWORD_FIELD", "account_password")
    )
    accounts_table: str = field(default_factory=lambda: _env_str("SECURITY_ACCOUNTS_TABLE", "account"))
    accounts_key: str = field(default_factory=lambda: _env_str("SECURITY_ACCOUNTS_KEY", "account_id"))
    roles_table: str = field(default_factory=lambda: _env_str("SECURITY_ROLES_TABLE", "role"))
    roles_key: str = field(default_factory=lambda: _env_str("SECURITY_ROLES_KEY", "role_id"))
    role_name_field: str = field(default_factory=lambda: _env_str("SECURITY_ROLE_NAME_FIELD", "role_name"))
    role_account_field: str = field(default_factory=lambda: _env_str("SECURITY_ROLE_ACCOUNT_FIELD", "account_id"))
