"""
JSON Predicate evaluation.

A predicate is a descriptor such as ``{"op": "contains", "path": "/a", "value":
"x"}`` evaluated against a document to a boolean. Evaluation never raises:
missing paths, wrong value kinds, bad patterns and unknown predicate names all
evaluate to ``False``, so the ``and``/``or``/``not`` combinators behave as
plain boolean algebra over their ``apply`` lists.

``not`` is true when *none* of its nested predicates are true (it is "nor",
not unary negation); with a single nested predicate that reduces to negation.

When predicates are enabled on a ``Patch``, every predicate name is also a
patch operation that fails the patch when the predicate is false.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from .errors import FailedOperationError, JsonToolsError
from .pointer import Pointer
from .registry import OperationRegistry
from .tracing import trace_span
from .value import ValueKind, type_name

logger = logging.getLogger(__name__)

Predicate = Callable[[Dict[str, Any], Any], bool]

TYPE_NAMES = frozenset(kind.value for kind in ValueKind)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _resolve(params: Dict[str, Any], target: Any) -> tuple[bool, Any]:
    ptr = Pointer.parse(params["path"])
    if not ptr.exists(target):
        return False, None
    return True, ptr.value(target)


def string_check(params: Dict[str, Any], target: Any, compare: Callable[[str, str], bool]) -> bool:
    found, val = _resolve(params, target)
    expected = params.get("value")
    if not found or not isinstance(val, str) or not isinstance(expected, str):
        return False
    if params.get("ignore_case"):
        val, expected = val.upper(), expected.upper()
    return bool(compare(val, expected))


def number_check(params: Dict[str, Any], target: Any, compare: Callable[[Any, Any], bool]) -> bool:
    found, val = _resolve(params, target)
    expected = params.get("value")
    if not found or not _is_number(val) or not _is_number(expected):
        return False
    return bool(compare(val, expected))


def contains(params: Dict[str, Any], target: Any) -> bool:
    return string_check(params, target, lambda x, y: y in x)


def starts(params: Dict[str, Any], target: Any) -> bool:
    return string_check(params, target, lambda x, y: x.startswith(y))


def ends(params: Dict[str, Any], target: Any) -> bool:
    return string_check(params, target, lambda x, y: x.endswith(y))


def less(params: Dict[str, Any], target: Any) -> bool:
    return number_check(params, target, lambda x, y: x < y)


def more(params: Dict[str, Any], target: Any) -> bool:
    return number_check(params, target, lambda x, y: x > y)


def matches(params: Dict[str, Any], target: Any) -> bool:
    # Unanchored search; the pattern itself is never case-folded.
    found, val = _resolve(params, target)
    pattern = params.get("value")
    if not found or not isinstance(val, str) or not isinstance(pattern, str):
        return False
    flags = re.IGNORECASE if params.get("ignore_case") else 0
    return re.search(pattern, val, flags) is not None


def defined(params: Dict[str, Any], target: Any) -> bool:
    return Pointer.parse(params["path"]).exists(target)


def undefined(params: Dict[str, Any], target: Any) -> bool:
    return not defined(params, target)


def type_is(params: Dict[str, Any], target: Any) -> bool:
    found, val = _resolve(params, target)
    expected = params.get("value")
    if not found:
        return expected == "undefined"
    if expected not in TYPE_NAMES:
        return False
    return type_name(val) == expected


BUILTIN_PREDICATES: Dict[str, Predicate] = {
    "contains": contains,
    "defined": defined,
    "ends": ends,
    "less": less,
    "matches": matches,
    "more": more,
    "starts": starts,
    "type": type_is,
    "undefined": undefined,
}


def _none(results: Iterable[bool]) -> bool:
    return not any(results)


class PredicateSet:
    """
    A registry of named predicates plus the logical combinators over it.

    ``and``, ``or`` and ``not`` evaluate their nested descriptors through the
    same set, so custom predicates registered here can be combined too.
    """

    def __init__(self, predicates: Optional[Mapping[str, Predicate]] = None, *, include_builtins: bool = True):
        self._predicates: Dict[str, Predicate] = {}
        if include_builtins:
            self._predicates.update(BUILTIN_PREDICATES)
            self._predicates["and"] = self._combinator(all)
            self._predicates["or"] = self._combinator(any)
            self._predicates["not"] = self._combinator(_none)
        self._predicates.update(predicates or {})

    @classmethod
    def default(cls) -> "PredicateSet":
        return cls()

    def register(self, name: str, predicate: Predicate) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("predicate name must be a non-empty string")
        self._predicates[name] = predicate

    def names(self) -> list[str]:
        return sorted(self._predicates)

    def __contains__(self, name: object) -> bool:
        return name in self._predicates

    def _combinator(self, quantifier: Callable[[Iterable[bool]], bool]) -> Predicate:
        def combine(params: Dict[str, Any], target: Any) -> bool:
            nested = params.get("apply")
            if not isinstance(nested, list):
                return False
            return quantifier(self.evaluate(p, target) for p in nested)

        return combine

    def evaluate(self, descriptor: Dict[str, Any], document: Any) -> bool:
        if not isinstance(descriptor, dict):
            return False
        name = descriptor.get("op")
        predicate = self._predicates.get(name) if isinstance(name, str) else None
        if predicate is None:
            return False
        try:
            return bool(predicate(descriptor, document))
        except (JsonToolsError, LookupError, TypeError, ValueError, re.error) as exc:
            logger.debug("predicate %r evaluated to false: %s", name, exc)
            return False

    def as_operations(self) -> OperationRegistry:
        """Patch handlers that fail the operation whenever the predicate is false."""
        registry = OperationRegistry()
        for name in self._predicates:
            registry.register(name, self._operation(name))
        return registry

    def _operation(self, name: str):
        def check(operation: Dict[str, Any], document: Any) -> None:
            if not self.evaluate(operation, document):
                raise FailedOperationError(
                    operation, f"predicate {name!r} is false at {operation.get('path')!r}"
                )

        return check


_default: Optional[PredicateSet] = None


def default_predicates() -> PredicateSet:
    global _default
    if _default is None:
        _default = PredicateSet()
    return _default


@trace_span("jsontools.predicates.evaluate")
def evaluate(descriptor: Dict[str, Any], document: Any) -> bool:
    """Evaluate one predicate descriptor with the built-in predicate set."""
    return default_predicates().evaluate(descriptor, document)
