"""
natspec_docs – Markdown documentation pages from Solidity natspec metadata.
"""
from .model import Contract, Method, Event, Error, Parameter, load_contracts
from .options import RenderOptions
from .render import render, render_contract, render_documents, render_summary
from .validator import SchemaError, MalformedInputError

__all__ = [
    "Contract",
    "Method",
    "Event",
    "Error",
    "Parameter",
    "load_contracts",
    "RenderOptions",
    "render",
    "render_contract",
    "render_documents",
    "render_summary",
    "SchemaError",
    "MalformedInputError",
]
