"""
options.py - configuration for the Markdown renderer.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping

from . import loader
from . import validator

OPTIONS_SCHEMA_NAME = "render_options.json"


def _raw_options(source: None | str | Path | Mapping[str, Any]) -> dict[str, Any]:
    """Plain ``dict`` from a mapping, a JSON file or a JSON literal."""
    if source is None:
        return {}
    if isinstance(source, Mapping):
        return dict(source)
    if isinstance(source, (str, Path)):
        data = loader.load_json(source)
        if not isinstance(data, Mapping):
            raise validator.SchemaError(
                f"options: expected a JSON object, got {type(data).__name__}"
            )
        return dict(data)
    raise TypeError(f"Unsupported type for render options: {type(source)}")


@dataclass(frozen=True)
class RenderOptions:
    """Knobs the renderer consults; defaults come from ``render_options.json``."""

    code_language: str = "solidity"
    source_suffix: str = ".sol"
    placeholder: str = "-"
    max_workers: int = 1

    @classmethod
    def from_source(cls, source: None | str | Path | Mapping[str, Any] = None) -> "RenderOptions":
        """Load, default and validate options.

        1. Convert *source* into a plain ``dict`` (mapping / JSON file / JSON literal).
        2. Inject schema-defined defaults.
        3. Validate the result; :class:`~natspec_docs.validator.SchemaError`
           on failure.
        """
        schema = loader.load_schema(OPTIONS_SCHEMA_NAME)
        raw = _raw_options(source)
        for name, spec in schema.get("fields", {}).items():
            if name not in raw and "default" in spec:
                raw[name] = spec["default"]
        validator.validate(raw, schema=schema, path="options")
        return cls(**raw)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
