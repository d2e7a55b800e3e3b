from __future__ import annotations

import json
from importlib import resources
from typing import Any, Dict, List

from jsonschema import Draft7Validator

from .errors import InvalidPatchDocumentError

PATCH_SCHEMA_NAME = "patch-document.schema.json"

_validator: Draft7Validator | None = None


def load_patch_schema() -> Dict[str, Any]:
    text = resources.files("jsontools.schemas").joinpath(PATCH_SCHEMA_NAME).read_text(encoding="utf-8")
    return json.loads(text)


def _get_validator() -> Draft7Validator:
    global _validator
    if _validator is None:
        schema = load_patch_schema()
        Draft7Validator.check_schema(schema)
        _validator = Draft7Validator(schema)
    return _validator


def patch_document_errors(ops: Any) -> List[str]:
    """Render every schema violation of a patch document as ``pointer: message``."""
    errors = sorted(_get_validator().iter_errors(ops), key=lambda e: [str(p) for p in e.path])
    rendered = []
    for e in errors:
        path = "/" + "/".join(str(p) for p in e.path) if e.path else "/"
        rendered.append(f"{path}: {e.message}")
    return rendered


def validate_patch_document(ops: Any, *, use_schema: bool = True) -> List[Dict[str, Any]]:
    """
    Check that ``ops`` is a list of operation descriptors.

    Raises ``InvalidPatchDocumentError`` listing every problem found. With
    ``use_schema=False`` only the minimal shape (a list of objects with a
    string ``op``) is checked.
    """
    if use_schema:
        errors = patch_document_errors(ops)
    else:
        errors = _shape_errors(ops)
    if errors:
        raise InvalidPatchDocumentError("invalid patch document: " + "; ".join(errors), errors=errors)
    return ops


def _shape_errors(ops: Any) -> List[str]:
    if not isinstance(ops, list):
        return [f"/: expected an array, got {type(ops).__name__}"]
    errors = []
    for i, op in enumerate(ops):
        if not isinstance(op, dict):
            errors.append(f"/{i}: expected an object")
        elif not isinstance(op.get("op"), str):
            errors.append(f"/{i}: 'op' must be a string")
    return errors
