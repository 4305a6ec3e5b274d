"""
validator.py - schema-lite validation for the documentation model
=================================================================

The renderer never trusts its input blindly: every contract record is walked
against the bundled ``doc_model.json`` schema before a single line of
Markdown is produced, so a malformed record aborts the whole render instead
of leaving a half-written page behind.

Public API
----------
SchemaError
    Raised for any schema violation (options, model, ...).

MalformedInputError
    Subclass of :class:`SchemaError` raised for malformed contract records.

validate(value, *, schema, path="root")
    Depth-first validation of ``type`` / ``enum`` / ``minimum`` / required
    ``fields`` / ``additionalProperties`` / list ``items`` / mapping
    ``values``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union, Tuple

__all__ = [
    "SchemaError",
    "MalformedInputError",
    "validate",
]

# --------------------------------------------------------------------------- #
# Exceptions                                                                  #
# --------------------------------------------------------------------------- #

class SchemaError(ValueError):
    """Raised when a value violates the supplied schema."""


class MalformedInputError(SchemaError):
    """Raised when a contract record is missing a required field or has the
    wrong shape."""


# --------------------------------------------------------------------------- #
# Type table                                                                  #
# --------------------------------------------------------------------------- #

_TYPE_MAP: dict[str, Union[type, Tuple[type, ...]]] = {
    "string": str,
    "integer": int,
    "number": (int, float),
    "boolean": bool,
    "object": Mapping,
    "list": (list, tuple),
    "null": type(None),
}


def _matches(value: Any, type_name: str) -> bool:
    # bool is an int subclass; keep "integer" strict
    if type_name in ("integer", "number") and isinstance(value, bool):
        return False
    return isinstance(value, _TYPE_MAP.get(type_name, object))


# --------------------------------------------------------------------------- #
# Core recursive validator                                                    #
# --------------------------------------------------------------------------- #

def validate(value: Any, *, schema: Mapping[str, Any], path: str = "root") -> None:
    """Recursively assert that *value* satisfies *schema*.

    Supported keywords:

    * ``type`` (list or scalar)
    * ``enum``
    * ``minimum`` for numbers
    * object validation via ``fields`` / ``required`` / ``additionalProperties``
    * arbitrary-key objects via ``values`` (schema applied to every value)
    * list validation via ``items``
    """

    stype = schema.get("type")
    if stype is None and "fields" in schema:
        stype = ["object"]

    # 1) type check ---------------------------------------------------------
    if stype:
        allowed = list(stype) if isinstance(stype, (list, tuple)) else [stype]
        if not any(_matches(value, t) for t in allowed):
            raise SchemaError(f"{path}: expected {allowed}, got {type(value).__name__}")

    # 2) enum ---------------------------------------------------------------
    if "enum" in schema and value not in schema["enum"]:
        raise SchemaError(f"{path}: '{value}' not in {schema['enum']}")

    # 3) minimum ------------------------------------------------------------
    if "minimum" in schema and _matches(value, "number") and value < schema["minimum"]:
        raise SchemaError(f"{path}: {value} is below minimum {schema['minimum']}")

    # 4) object recursion ---------------------------------------------------
    if isinstance(value, Mapping):
        fields = schema.get("fields")
        if fields is not None:
            required = {k for k, meta in fields.items() if meta.get("required")}
            missing = required - set(value)
            if missing:
                raise SchemaError(f"{path}: missing required {sorted(missing)}")

            extras = set(value) - set(fields)
            if schema.get("additionalProperties", True) is False and extras:
                raise SchemaError(f"{path}: unexpected fields {sorted(extras)}")

            for k, v in value.items():
                validate(v, schema=fields.get(k, {}), path=f"{path}.{k}")

        value_schema = schema.get("values")
        if value_schema is not None:
            for k, v in value.items():
                if not isinstance(k, str):
                    raise SchemaError(f"{path}: key {k!r} is not a string")
                validate(v, schema=value_schema, path=f"{path}.{k}")

    # 5) list recursion -----------------------------------------------------
    if isinstance(value, (list, tuple)) and "items" in schema:
        for idx, item in enumerate(value):
            validate(item, schema=schema["items"], path=f"{path}[{idx}]")
