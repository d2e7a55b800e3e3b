from __future__ import annotations

from typing import Any, Dict, List, Optional


class JsonToolsError(Exception):
    pass


class PointerError(JsonToolsError, LookupError):
    """Raised when a pointer cannot be evaluated against a document."""

    def __init__(self, message: str, *, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class PatchError(JsonToolsError):
    pass


class InvalidPatchDocumentError(PatchError, ValueError):
    """The patch document is not a sequence of operation descriptors."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class UnknownOperationError(PatchError):
    def __init__(self, operation: Dict[str, Any], index: Optional[int] = None):
        super().__init__(f"invalid operation: {operation.get('op')!r}")
        self.operation = operation
        self.index = index


class FailedOperationError(PatchError):
    """A single operation's preconditions were not met."""

    def __init__(self, operation: Dict[str, Any], message: Optional[str] = None, index: Optional[int] = None):
        super().__init__(message or f"operation failed: {operation.get('op')!r} at {operation.get('path')!r}")
        self.operation = operation
        self.index = index
