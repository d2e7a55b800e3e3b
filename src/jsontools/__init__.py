"""
jsontools - JSON Pointer, JSON Patch and JSON Predicate evaluation
"""

__version__ = "0.1.0"

from .errors import (
    JsonToolsError,
    PointerError,
    PatchError,
    InvalidPatchDocumentError,
    UnknownOperationError,
    FailedOperationError,
)

from .value import ValueKind, kind_of, deep_copy, equals

from .pointer import Pointer, Location, escape_segment, unescape_segment, fix_key

from .registry import OperationRegistry

from .predicates import PredicateSet, evaluate

from .patch import Patch, apply_patch, core_registry

from .config import JsonToolsConfig, get_config, set_config

__all__ = [
    "__version__",
    # Errors
    "JsonToolsError",
    "PointerError",
    "PatchError",
    "InvalidPatchDocumentError",
    "UnknownOperationError",
    "FailedOperationError",
    # Value model
    "ValueKind",
    "kind_of",
    "deep_copy",
    "equals",
    # Pointer
    "Pointer",
    "Location",
    "escape_segment",
    "unescape_segment",
    "fix_key",
    # Patch
    "OperationRegistry",
    "Patch",
    "apply_patch",
    "core_registry",
    # Predicates
    "PredicateSet",
    "evaluate",
    # Config
    "JsonToolsConfig",
    "get_config",
    "set_config",
]
