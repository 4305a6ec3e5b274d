"""
loader.py - access to the packaged JSON schemas and JSON model files.

Public API
----------
load_schema(name)  : fresh copy of a bundled (or on-disk) schema
load_json(source)  : decode a JSON document from a path or a JSON literal
"""

from __future__ import annotations

import copy
import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

def _read(path: Path) -> Any:
    """Read & parse a JSON file, raising crisp errors on failure."""
    try:
        with path.open(encoding="utf-8") as fd:
            return json.load(fd)
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"File not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


# --------------------------------------------------------------------------- #
# Public utilities                                                            #
# --------------------------------------------------------------------------- #

def load_schema(path: str | Path) -> dict:
    """Return a deep copy of the schema at *path*.

    A file on disk wins; otherwise the basename is looked up among the
    schemas shipped in ``natspec_docs.schemas``.
    """
    p = Path(path)

    # 1) direct file on disk ------------------------------------------------
    if p.is_file():
        return copy.deepcopy(_read(p))

    # 2) bundled resource ---------------------------------------------------
    pkg = resources.files("natspec_docs.schemas")
    for name in (p.name, str(path)):
        try:
            text = pkg.joinpath(name).read_text(encoding="utf-8")
        except FileNotFoundError:
            continue
        log.debug("Loaded bundled schema %s", name)
        return copy.deepcopy(json.loads(text))

    raise FileNotFoundError(f"Schema '{path}' not found on disk or in package data")


def load_json(source: str | Path) -> Any:
    """Decode *source*: a ``Path``, an existing file path string, or a JSON literal."""
    if isinstance(source, Path):
        return _read(source)

    p = Path(source)
    try:
        is_file = p.is_file()
    except OSError:  # overly long literals are not valid paths
        is_file = False
    if is_file:
        return _read(p)

    try:
        return json.loads(source)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Neither a JSON file nor a JSON literal: {exc}") from exc
