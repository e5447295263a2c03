from .security_service import INVALID_ACCOUNT_ID, SECURITY_LOGIN_NAME, SecurityService
from .session_context import MemorySession, SessionContext

__all__ = [
    "INVALID_ACCOUNT_ID",
    "MemorySession",
    "SECURITY_LOGIN_NAME",
    "SecurityService",
    "SessionContext",
]
