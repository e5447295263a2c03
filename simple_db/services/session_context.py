from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class SessionContext(Protocol):
    """Per-request key/value store deciding whether a user is logged in.

    When ``is_active()`` is False every session operation of the security
    service is a no-op (or answers False).
    """

    def is_active(self) -> bool:
        ...

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def unset(self, key: str) -> None:
        ...


class MemorySession:
    """In-process SessionContext backed by a dict."""

    def __init__(self, data: Optional[Dict[str, Any]] = None, *, active: bool = True) -> None:
        self._data: Dict[str, Any] = dict(data or {})
        self.active = active

    def is_active(self) -> bool:
        return self.active

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def unset(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data
