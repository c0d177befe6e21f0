"""
Indexer for extensible lambda calculus buffers.

Definitions are found with a plain scan for ``name :=`` so that symbols and
completion keep working while the buffer does not compile. The buffer is then
compiled; that runs reader matchers and compilers but never evaluates a
definition. Compile errors become diagnostics and successfully linked
definitions get a pretty-printed form for hover.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple
import re

from elc.config import get_max_steps
from elc.errors import ElcError
from elc.types.reader import CompileContext
from elc.compiler.compile import compile_unit
from elc.printer import print_term

DEFINITION_REGEX = re.compile(r"(\w+)\s*:=", re.ASCII)
WORD_REGEX = re.compile(r"\w+", re.ASCII)

# reader matchers in an editor buffer must not hang the server
DEFAULT_MAX_STEPS = 1_000_000
HOVER_LIMIT = 400


@dataclass
class SymbolDef:
    name: str
    line: int
    col: int
    offset: int


@dataclass
class DiagnosticInfo:
    message: str
    start: Tuple[int, int]  # (line, col), 0-based
    end: Tuple[int, int]
    kind: str


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    rendered: Dict[str, str] = field(default_factory=dict)  # name -> pretty printed term
    diagnostics: List[DiagnosticInfo] = field(default_factory=list)


def _position_from_offset(text: str, offset: int) -> Tuple[int, int]:
    # Return (line, col), 0-based
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset)
    last_nl = text.rfind("\n", 0, offset)
    col = offset if last_nl == -1 else offset - last_nl - 1
    return line, col


def offset_from_position(text: str, line: int, col: int) -> int:
    lines = text.splitlines(True)
    if line >= len(lines):
        return len(text)
    return sum(len(l) for l in lines[:line]) + min(col, len(lines[line]))


def build_index(text: str, max_steps: Optional[int] = None) -> DocumentIndex:
    idx = DocumentIndex()
    for m in DEFINITION_REGEX.finditer(text):
        line, col = _position_from_offset(text, m.start(1))
        # keep the first occurrence so navigation lands on the original definition
        idx.symbols.setdefault(m.group(1), SymbolDef(m.group(1), line, col, m.start(1)))

    if max_steps is None:
        max_steps = get_max_steps() or DEFAULT_MAX_STEPS
    context = CompileContext(max_steps=max_steps)
    try:
        compile_unit(text, context)
    except ElcError as exc:
        for diag in exc.diagnostics:
            span = diag.span
            start_off, end_off = (span.start, span.end) if span is not None else (0, 0)
            if end_off <= start_off:
                end_off = start_off + 1
            idx.diagnostics.append(
                DiagnosticInfo(
                    message=diag.message,
                    start=_position_from_offset(text, start_off),
                    end=_position_from_offset(text, end_off),
                    kind=type(exc).__name__,
                )
            )
    # definitions linked before an error are still useful
    for name, term in context.definitions.items():
        idx.rendered[name] = print_term(term, limit=HOVER_LIMIT)
    return idx


def word_at(text: str, line: int, col: int) -> Optional[str]:
    offset = offset_from_position(text, line, col)
    for m in WORD_REGEX.finditer(text):
        if m.start() <= offset <= m.end():
            return m.group(0)
        if m.start() > offset:
            break
    return None


def hover_text(idx: DocumentIndex, name: str) -> Optional[str]:
    sdef = idx.symbols.get(name)
    rendered = idx.rendered.get(name)
    if sdef is None and rendered is None:
        return None
    if rendered is None:
        return f"{name} (defined at {sdef.line + 1}:{sdef.col + 1}, not compiled)"
    if sdef is None:
        return f"{name} := {rendered}"
    return f"{name} := {rendered}\n\n(defined at {sdef.line + 1}:{sdef.col + 1})"
