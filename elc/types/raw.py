"""Name-based terms produced by the parsers, before de Bruijn resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from elc.errors import SourceSpan
from elc.types.term import Term


@dataclass(frozen=True)
class RawVariable:
    name: str
    span: SourceSpan | None = None


@dataclass(frozen=True)
class RawAbstraction:
    param: str
    body: RawTerm


@dataclass(frozen=True)
class RawApplication:
    left: RawTerm
    right: RawTerm


@dataclass(frozen=True)
class RawLiteral:
    """An already compiled, closed term (the output of a reader)."""
    term: Term


RawTerm = Union[RawVariable, RawAbstraction, RawApplication, RawLiteral]


@dataclass(frozen=True)
class Reference:
    """Placeholder left in a resolved term for a free name, filled by the linker."""
    name: str
    span: SourceSpan | None = None


@dataclass(frozen=True)
class Definition:
    name: str
    value: RawTerm
    span: SourceSpan | None = None


@dataclass(frozen=True)
class Import:
    path: str
    span: SourceSpan | None = None


Statement = Union[Definition, Import]
