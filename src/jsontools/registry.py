from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

Handler = Callable[[Dict[str, Any], Any], None]


class OperationRegistry:
    """
    Mapping of operation name to handler ``(descriptor, document) -> None``.

    Each ``Patch`` owns its own registry, so registering an operation on one
    interpreter never changes what another one accepts.
    """

    def __init__(self, handlers: Optional[Mapping[str, Handler]] = None):
        self._handlers: Dict[str, Handler] = dict(handlers or {})

    def register(self, name: str, handler: Handler) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("operation name must be a non-empty string")
        if not callable(handler):
            raise TypeError(f"handler for {name!r} is not callable")
        self._handlers[name] = handler

    def get(self, name: Any) -> Optional[Handler]:
        if not isinstance(name, str):
            return None
        return self._handlers.get(name)

    def merge(self, other: "OperationRegistry") -> "OperationRegistry":
        merged = self.copy()
        merged._handlers.update(other._handlers)
        return merged

    def copy(self) -> "OperationRegistry":
        return OperationRegistry(self._handlers)

    def names(self) -> list[str]:
        return sorted(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers
