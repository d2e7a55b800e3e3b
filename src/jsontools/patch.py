"""
JSON Patch interpreter.

A ``Patch`` holds an ordered list of operation descriptors and applies them
one after another. Each operation either succeeds or raises
``FailedOperationError``; there is no rollback, so ``apply_in_place`` leaves
the operations before a failure applied. ``apply`` works on a deep copy and
leaves the caller's document untouched either way.

``apply_in_place`` follows a single-writer discipline: callers must not run
two in-place applies against the same document concurrently.
"""

from __future__ import annotations

import json
import logging
from functools import wraps
from typing import Any, Dict, Iterator, List, Optional

from . import value as values
from .config import JsonToolsConfig, get_config
from .errors import FailedOperationError, InvalidPatchDocumentError, PointerError, UnknownOperationError
from .logging import log_json
from .pointer import Pointer
from .predicates import PredicateSet
from .registry import Handler, OperationRegistry
from .schema import validate_patch_document
from .tracing import get_tracer

# Low-level errors a handler may raise that mean "this operation failed".
OPERATION_ERRORS = (PointerError, KeyError, IndexError, TypeError, ValueError)


def _operation(func: Handler) -> Handler:
    @wraps(func)
    def handler(operation: Dict[str, Any], document: Any) -> None:
        try:
            func(operation, document)
        except FailedOperationError:
            raise
        except OPERATION_ERRORS as exc:
            raise FailedOperationError(operation, f"{operation.get('op')} failed: {exc}") from exc

    return handler


def _pointer(operation: Dict[str, Any], field: str = "path") -> Pointer:
    if field not in operation:
        raise FailedOperationError(operation, f"{operation.get('op')} requires {field!r}")
    return Pointer.parse(operation[field])


def _value(operation: Dict[str, Any]) -> Any:
    if "value" not in operation:
        raise FailedOperationError(operation, f"{operation.get('op')} requires 'value'")
    return operation["value"]


def _add(ptr: Pointer, value: Any, document: Any) -> None:
    container = ptr.parent(document)
    if not values.is_container(container):
        raise PointerError(f"parent of {ptr.path!r} is not an object or array", path=ptr.path)
    values.insert(container, ptr.last, value)


@_operation
def add(operation: Dict[str, Any], document: Any) -> None:
    # Existing object members are overwritten.
    _add(_pointer(operation), _value(operation), document)


@_operation
def remove(operation: Dict[str, Any], document: Any) -> None:
    ptr = _pointer(operation)
    if ptr.is_root:
        raise FailedOperationError(operation, "cannot remove the document root")
    loc = ptr.locate(document)
    if not loc.exists:
        return
    values.delete(loc.container, loc.key)


@_operation
def replace(operation: Dict[str, Any], document: Any) -> None:
    ptr = _pointer(operation)
    new_value = _value(operation)
    loc = ptr.locate(document)
    if ptr.is_root or not loc.exists:
        raise FailedOperationError(operation, f"path does not exist: {ptr.path!r}")
    values.assign(loc.container, loc.key, new_value)


@_operation
def test(operation: Dict[str, Any], document: Any) -> None:
    ptr = _pointer(operation)
    expected = _value(operation)
    if not ptr.exists(document):
        raise FailedOperationError(operation, f"path does not exist: {ptr.path!r}")
    if not values.equals(ptr.value(document), expected):
        raise FailedOperationError(operation, f"test failed at {ptr.path!r}")


def _move_or_copy(operation: Dict[str, Any], document: Any, move: bool) -> None:
    source = _pointer(operation, "from")
    target = _pointer(operation, "path" if "path" in operation or "to" not in operation else "to")
    loc = source.locate(document)
    if source.is_root or not loc.exists:
        raise FailedOperationError(operation, f"source does not exist: {source.path!r}")
    if move and target.path.startswith(source.path + "/"):
        raise FailedOperationError(operation, f"cannot move {source.path!r} into its own child")
    if not values.is_container(target.parent(document)):
        raise FailedOperationError(operation, f"parent of {target.path!r} is not an object or array")
    # Read the value before removing it so array index shifts do not matter.
    moved = values.get(loc.container, loc.key)
    if move:
        values.delete(loc.container, loc.key)
    else:
        moved = values.deep_copy(moved)
    _add(target, moved, document)


@_operation
def move(operation: Dict[str, Any], document: Any) -> None:
    _move_or_copy(operation, document, True)


@_operation
def copy(operation: Dict[str, Any], document: Any) -> None:
    _move_or_copy(operation, document, False)


CORE_OPERATIONS: Dict[str, Handler] = {
    "add": add,
    "remove": remove,
    "replace": replace,
    "move": move,
    "copy": copy,
    "test": test,
}


def core_registry() -> OperationRegistry:
    return OperationRegistry(CORE_OPERATIONS)


def _decode(ops: Any) -> Any:
    try:
        if isinstance(ops, (bytes, bytearray)):
            ops = ops.decode("utf-8")
        if isinstance(ops, str):
            return json.loads(ops)
        if hasattr(ops, "read"):
            return json.load(ops)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidPatchDocumentError(f"patch document is not valid JSON: {exc}") from exc
    if isinstance(ops, tuple):
        return list(ops)
    return ops


class Patch:
    """An ordered sequence of patch operations and the registry that runs them."""

    def __init__(
        self,
        ops: Any,
        with_predicates: Optional[bool] = None,
        *,
        registry: Optional[OperationRegistry] = None,
        predicates: Optional[PredicateSet] = None,
        config: Optional[JsonToolsConfig] = None,
    ):
        self.config = config or get_config()
        self.operations: List[Dict[str, Any]] = validate_patch_document(
            _decode(ops), use_schema=self.config.validate_schema
        )
        if with_predicates is None:
            with_predicates = self.config.enable_predicates
        self.with_predicates = bool(with_predicates)
        self.registry = (registry or core_registry()).copy()
        self.predicates: Optional[PredicateSet] = None
        if self.with_predicates:
            self.predicates = predicates or PredicateSet.default()
            self.registry = self.registry.merge(self.predicates.as_operations())

    @classmethod
    def new_with_predicates(cls, ops: Any, **kwargs: Any) -> "Patch":
        return cls(ops, True, **kwargs)

    def register_operation(self, name: str, handler: Handler) -> None:
        self.registry.register(name, handler)

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.operations)

    def apply(self, document: Any) -> Any:
        """Apply to a deep copy of ``document`` and return the copy."""
        target = values.deep_copy(document)
        self.apply_in_place(target)
        return target

    def apply_in_place(self, document: Any) -> None:
        """Apply to ``document`` itself; earlier operations stay applied if a later one fails."""
        attributes = {"patch.operations": len(self.operations), "patch.predicates": self.with_predicates}
        with get_tracer().span("jsontools.patch.apply", attributes=attributes):
            log_json(logging.DEBUG, "patch_apply_started", operations=len(self.operations))
            for index, operation in enumerate(self.operations):
                self._run(index, operation, document)
            log_json(logging.DEBUG, "patch_apply_completed", operations=len(self.operations))

    def _run(self, index: int, operation: Dict[str, Any], document: Any) -> None:
        name = operation.get("op")
        handler = self.registry.get(name)
        if handler is None:
            log_json(logging.WARNING, "patch_unknown_operation", op=name, index=index)
            raise UnknownOperationError(operation, index=index)
        try:
            handler(operation, document)
        except FailedOperationError as exc:
            if exc.index is None:
                exc.index = index
            log_json(logging.WARNING, "patch_operation_failed", op=name, path=operation.get("path"), index=index, error=str(exc))
            raise
        except OPERATION_ERRORS as exc:
            log_json(logging.WARNING, "patch_operation_failed", op=name, path=operation.get("path"), index=index, error=str(exc))
            raise FailedOperationError(operation, f"{name} failed: {exc}", index=index) from exc
        if self.config.log_operations:
            log_json(logging.DEBUG, "patch_operation_applied", op=name, path=operation.get("path"), index=index)


def apply_patch(document: Any, ops: Any, *, with_predicates: bool = False) -> Any:
    """Apply ``ops`` to a copy of ``document`` and return the result."""
    return Patch(ops, with_predicates).apply(document)
