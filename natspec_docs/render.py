# natspec_docs/render.py
"""
render.py - Markdown pages for contract documentation.

Rendering is a pure function of the model and the options: the same input
always yields byte-identical output, and contracts, groups and members appear
exactly in the order they were supplied.
"""
from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import PurePosixPath
from typing import Any, Iterable, Mapping, Optional, Sequence

from .model import Contract, ContractSource, Error, Event, Method, Parameter, load_contracts
from .options import RenderOptions

__all__ = [
    "render",
    "render_contract",
    "render_documents",
    "render_summary",
]

log = logging.getLogger(__name__)

_NEWLINES = re.compile(r"\s*[\r\n]\s*")

_PARAM_HEADERS = ("Name", "Type", "Description")
_EVENT_PARAM_HEADERS = ("Name", "Type", "Indexed", "Description")

# --------------------------------------------------------------------------- #
# Formatting helpers                                                          #
# --------------------------------------------------------------------------- #

def _cell(text: Any, placeholder: str) -> str:
    """Return *text* as a single-line, pipe-safe table cell."""
    text = _NEWLINES.sub(" ", str(text)).strip()
    if not text:
        return placeholder
    return text.replace("|", "\\|")


def _format_flag(flag: Optional[bool], placeholder: str) -> str:
    if flag is True:  return "true"
    if flag is False: return "false"
    return placeholder


def _table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("-" * (len(h) + 2) for h in headers) + "|",
    ]
    lines.extend("| " + " | ".join(row) + " |" for row in rows)
    return "\n".join(lines)


def _param_table(params: Sequence[Parameter], opts: RenderOptions) -> str:
    ph = opts.placeholder
    return _table(
        _PARAM_HEADERS,
        ((_cell(p.name, ph), _cell(p.kind, ph), _cell(p.doc, ph)) for p in params),
    )


def _event_param_table(params: Sequence[Parameter], opts: RenderOptions) -> str:
    ph = opts.placeholder
    return _table(
        _EVENT_PARAM_HEADERS,
        (
            (_cell(p.name, ph), _cell(p.kind, ph), _format_flag(p.indexed, ph), _cell(p.doc, ph))
            for p in params
        ),
    )


def _code(signature: str, opts: RenderOptions) -> str:
    return f"```{opts.code_language}\n{signature}\n```"


def _natspec(details: Optional[str], notice: Optional[str]) -> list[str]:
    """Details as plain text, then the notice in emphasis."""
    parts: list[str] = []
    if details:
        parts.append(details)
    if notice:
        parts.append(f"*{notice}*")
    return parts

# --------------------------------------------------------------------------- #
# Sections                                                                    #
# --------------------------------------------------------------------------- #

def _method_blocks(method: Method, opts: RenderOptions) -> list[str]:
    parts = [_code(method.signature, opts), *_natspec(method.details, method.notice)]
    if method.params:
        parts += ["#### Parameters", _param_table(method.params, opts)]
    if method.returns:
        parts += ["#### Return Values", _param_table(method.returns, opts)]
    return parts


def _event_blocks(event: Event, opts: RenderOptions) -> list[str]:
    parts = [_code(event.signature, opts), *_natspec(event.details, event.notice)]
    if event.params:
        parts += ["#### Parameters", _event_param_table(event.params, opts)]
    return parts


def _error_blocks(error: Error, opts: RenderOptions) -> list[str]:
    parts = [_code(error.signature, opts), *_natspec(error.details, error.notice)]
    if error.params:
        parts += ["#### Parameters", _param_table(error.params, opts)]
    return parts


def _grouped(heading: str, groups: Mapping[str, Sequence[Any]], member_blocks, opts) -> list[str]:
    """A section of ``### {group}`` sub-sections; nothing at all if every group is empty."""
    parts: list[str] = []
    for group, members in groups.items():
        if not members:
            continue
        parts.append(f"### {group}")
        for member in members:
            parts.extend(member_blocks(member, opts))
    if parts:
        parts.insert(0, heading)
    return parts


def _contract_markdown(contract: Contract, opts: RenderOptions) -> str:
    parts = [f"# {contract.name}{opts.source_suffix}"]
    if contract.title:
        parts.append(contract.title)
    if contract.author:
        parts.append(f"**Author: {contract.author}**")
    parts.extend(_natspec(contract.details, contract.notice))

    parts.extend(_grouped("## Methods", contract.methods, _method_blocks, opts))
    parts.extend(_grouped("### Events", contract.events, _event_blocks, opts))
    parts.extend(_grouped("### Errors", contract.errors, _error_blocks, opts))
    return "\n\n".join(parts)


def _resolve(options: RenderOptions | Mapping[str, Any] | None) -> RenderOptions:
    if options is None:
        return RenderOptions()
    if isinstance(options, RenderOptions):
        return options
    return RenderOptions.from_source(options)

# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #

def render_contract(
    contract: Contract | Mapping[str, Any],
    options: RenderOptions | Mapping[str, Any] | None = None,
) -> str:
    """Render a single contract, without the trailing newline."""
    (checked,) = load_contracts([contract])
    return _contract_markdown(checked, _resolve(options))


def render(
    contracts: ContractSource,
    options: RenderOptions | Mapping[str, Any] | None = None,
) -> str:
    """
    Render *contracts* into one Markdown document.

    Parameters
    ----------
    contracts : sequence of Contract or mappings, JSON path or JSON literal
        The documentation model, in the order the pages should list it.
    options : RenderOptions or mapping, optional
        Rendering options; defaults from ``render_options.json``.

    Returns
    -------
    str
        Markdown text; contracts separated by a blank line and the document
        terminated by a newline.  An empty input yields ``""``.

    Raises
    ------
    MalformedInputError
        If any contract is malformed.  Validation covers every contract
        before rendering starts, so no partial output is ever produced.
    """
    checked = load_contracts(contracts)
    opts = _resolve(options)
    if not checked:
        return ""

    workers = min(opts.max_workers, len(checked))
    log.debug("Rendering %d contract(s) with %d worker(s)", len(checked), workers)
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map() yields results in submission order
            pages = list(pool.map(lambda c: _contract_markdown(c, opts), checked))
    else:
        pages = [_contract_markdown(c, opts) for c in checked]
    return "\n\n".join(pages) + "\n"


def render_documents(
    files: Mapping[str, ContractSource],
    options: RenderOptions | Mapping[str, Any] | None = None,
) -> dict[str, str]:
    """Render one page per source file.

    *files* maps a source path without extension (``"tokens/ERC20"``) to the
    contracts declared in it.  The result maps ``"tokens/ERC20.md"`` to its
    Markdown, in the same order.  Every file is validated before any is
    rendered.
    """
    opts = _resolve(options)
    checked = {name: load_contracts(contracts) for name, contracts in files.items()}
    return {f"{name}.md": render(contracts, opts) for name, contracts in checked.items()}


def render_summary(names: Iterable[str]) -> str:
    """Build an mdBook ``SUMMARY.md`` for the pages named in *names*.

    Each page is listed as ``- [{basename}]({name}.md)``, indented four spaces
    per directory level.  A bullet for the page's directory is emitted first
    unless the previous directory bullet is that directory or lies beneath it.
    """
    lines: list[str] = []
    current_base: Optional[PurePosixPath] = None
    for name in names:
        path = PurePosixPath(name)
        depth = len(path.parts) - 1
        base = path.parent
        # compare whole components: "tok" is not a prefix of "tokens"
        covered = current_base is not None and current_base.parts[: len(base.parts)] == base.parts
        if base.parts and not covered:
            current_base = base
            lines.append(f"{' ' * (4 * (len(base.parts) - 1))}- [{base.name}]({base}.md)")
        lines.append(f"{' ' * (4 * depth)}- [{path.name}]({path}.md)")
    return "".join(f"{line}\n" for line in lines)
