"""
model.py - the contract documentation model handed to the renderer.

The records are built upstream (from compiler ABI / devdoc / userdoc output)
and are read-only here.  Group mappings keep their insertion order; nothing in
this package ever sorts them.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from . import loader
from .validator import MalformedInputError, SchemaError, validate

__all__ = [
    "Parameter",
    "Method",
    "Event",
    "Error",
    "Contract",
    "load_contracts",
]

log = logging.getLogger(__name__)

MODEL_SCHEMA_NAME = "doc_model.json"


@functools.lru_cache(maxsize=None)
def _contract_schema() -> Mapping[str, Any]:
    return loader.load_schema(MODEL_SCHEMA_NAME)["contract"]


def _member_schema(group: str) -> Mapping[str, Any]:
    return _contract_schema()["fields"][group]["values"]["items"]


def _param_schema() -> Mapping[str, Any]:
    return _member_schema("methods")["fields"]["params"]["items"]


def _check(data: Any, schema: Mapping[str, Any], path: str) -> None:
    try:
        validate(data, schema=schema, path=path)
    except MalformedInputError:
        raise
    except SchemaError as exc:
        raise MalformedInputError(str(exc)) from exc


# --------------------------------------------------------------------------- #
# Records                                                                     #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class Parameter:
    """One input, output or event argument."""

    name: str
    kind: str
    doc: str
    indexed: Optional[bool] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, path: str = "param") -> "Parameter":
        _check(data, _param_schema(), path)
        return cls(
            name=data["name"],
            kind=data["kind"],
            doc=data["doc"],
            indexed=data.get("indexed"),
        )


def _params(items: Sequence[Mapping[str, Any]]) -> tuple[Parameter, ...]:
    return tuple(
        Parameter(name=p["name"], kind=p["kind"], doc=p["doc"], indexed=p.get("indexed"))
        for p in items
    )


@dataclass(frozen=True)
class Method:
    signature: str
    details: Optional[str] = None
    notice: Optional[str] = None
    params: tuple[Parameter, ...] = ()
    returns: tuple[Parameter, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, path: str = "method") -> "Method":
        _check(data, _member_schema("methods"), path)
        return cls._build(data)

    @classmethod
    def _build(cls, data: Mapping[str, Any]) -> "Method":
        return cls(
            signature=data["signature"],
            details=data.get("details"),
            notice=data.get("notice"),
            params=_params(data.get("params", ())),
            returns=_params(data.get("returns", ())),
        )


@dataclass(frozen=True)
class Event:
    signature: str
    details: Optional[str] = None
    notice: Optional[str] = None
    params: tuple[Parameter, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, path: str = "event") -> "Event":
        _check(data, _member_schema("events"), path)
        return cls._build(data)

    @classmethod
    def _build(cls, data: Mapping[str, Any]) -> "Event":
        return cls(
            signature=data["signature"],
            details=data.get("details"),
            notice=data.get("notice"),
            params=_params(data.get("params", ())),
        )


@dataclass(frozen=True)
class Error:
    """A custom Solidity error; shaped like an event minus the indexed flags."""

    signature: str
    details: Optional[str] = None
    notice: Optional[str] = None
    params: tuple[Parameter, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, path: str = "error") -> "Error":
        _check(data, _member_schema("errors"), path)
        return cls._build(data)

    @classmethod
    def _build(cls, data: Mapping[str, Any]) -> "Error":
        return cls(
            signature=data["signature"],
            details=data.get("details"),
            notice=data.get("notice"),
            params=_params(data.get("params", ())),
        )


def _expect(value: Any, record_type: type, path: str) -> None:
    if not isinstance(value, record_type):
        raise MalformedInputError(
            f"{path}: expected {record_type.__name__}, got {type(value).__name__}"
        )


def _params_dict(params: Any, path: str) -> Any:
    if not isinstance(params, (list, tuple)):
        return params
    out = []
    for idx, p in enumerate(params):
        _expect(p, Parameter, f"{path}[{idx}]")
        out.append({"name": p.name, "kind": p.kind, "doc": p.doc, "indexed": p.indexed})
    return out


def _members_dict(members: Any, member_type: type, path: str) -> Any:
    if not isinstance(members, (list, tuple)):
        return members
    out = []
    for idx, m in enumerate(members):
        member_path = f"{path}[{idx}]"
        _expect(m, member_type, member_path)
        item = {
            "signature": m.signature,
            "details": m.details,
            "notice": m.notice,
            "params": _params_dict(m.params, f"{member_path}.params"),
        }
        if member_type is Method:
            item["returns"] = _params_dict(m.returns, f"{member_path}.returns")
        out.append(item)
    return out


@dataclass(frozen=True)
class Contract:
    """Everything needed to render one contract page section."""

    name: str
    title: Optional[str] = None
    author: Optional[str] = None
    details: Optional[str] = None
    notice: Optional[str] = None
    methods: Mapping[str, Sequence[Method]] = field(default_factory=dict)
    events: Mapping[str, Sequence[Event]] = field(default_factory=dict)
    errors: Mapping[str, Sequence[Error]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, path: str = "contract") -> "Contract":
        """Validate *data* against ``doc_model.json`` and build a Contract.

        Raises :class:`~natspec_docs.validator.MalformedInputError` naming the
        offending path when the mapping does not fit the model.
        """
        _check(data, _contract_schema(), path)
        return cls(
            name=data["name"],
            title=data.get("title"),
            author=data.get("author"),
            details=data.get("details"),
            notice=data.get("notice"),
            methods={g: tuple(Method._build(m) for m in ms)
                     for g, ms in data.get("methods", {}).items()},
            events={g: tuple(Event._build(e) for e in es)
                    for g, es in data.get("events", {}).items()},
            errors={g: tuple(Error._build(e) for e in es)
                    for g, es in data.get("errors", {}).items()},
        )

    def to_dict(self, *, path: str = "contract") -> dict[str, Any]:
        """Plain-dict view of the record; nested records must have their own types."""
        groups = {}
        for group, member_type in (("methods", Method), ("events", Event), ("errors", Error)):
            value = getattr(self, group)
            if not isinstance(value, Mapping):
                groups[group] = value  # left for the schema to reject
                continue
            groups[group] = {
                name: _members_dict(members, member_type, f"{path}.{group}.{name}")
                for name, members in value.items()
            }
        return {
            "name": self.name,
            "title": self.title,
            "author": self.author,
            "details": self.details,
            "notice": self.notice,
            **groups,
        }

    def validate(self, *, path: str = "contract") -> None:
        """Re-check a directly constructed Contract against the model schema."""
        _check(self.to_dict(path=path), _contract_schema(), path)


# --------------------------------------------------------------------------- #
# Loading                                                                     #
# --------------------------------------------------------------------------- #

ContractSource = Union[str, Path, Sequence[Union[Contract, Mapping[str, Any]]]]


def load_contracts(source: ContractSource) -> list[Contract]:
    """Return validated :class:`Contract` records from *source*.

    *source* may be a JSON file (``Path`` or path string), a JSON literal, or
    a sequence mixing :class:`Contract` instances and mappings.  A JSON
    document is either a list of contracts or an object with a
    ``"contracts"`` list.
    """
    if isinstance(source, (str, Path)):
        data = loader.load_json(source)
        if isinstance(data, Mapping) and "contracts" in data:
            data = data["contracts"]
        log.debug("Loaded contract model from %s", source if isinstance(source, Path) else "JSON")
    else:
        data = source

    if not isinstance(data, (list, tuple)):
        raise MalformedInputError(
            f"contracts: expected a list of contracts, got {type(data).__name__}"
        )

    contracts: list[Contract] = []
    for idx, item in enumerate(data):
        path = f"contracts[{idx}]"
        if isinstance(item, Contract):
            item.validate(path=path)
            contracts.append(item)
        elif isinstance(item, Mapping):
            contracts.append(Contract.from_mapping(item, path=path))
        else:
            raise MalformedInputError(
                f"{path}: expected a Contract or mapping, got {type(item).__name__}"
            )
    return contracts
