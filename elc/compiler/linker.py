"""
Program linker.

Each definition is resolved on first use. A name that belongs to the unit
links its target right there, so each definition is linked at most once, and
an external is embedded as it is. Because every linked definition is closed,
it can be embedded anywhere without shifting, and nothing embedded is walked
again.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from elc.errors import Diagnostic, ResolutionError
from elc.types.term import Term
from elc.types.raw import RawTerm, Reference, Statement, Definition
from elc.compiler.resolve import to_de_bruijn


class Linker:
    def __init__(
        self,
        definitions: Mapping[str, RawTerm],
        externals: Optional[Mapping[str, Term]] = None,
        *,
        globals_first: bool = False,
    ):
        self.definitions = dict(definitions)
        # a unit definition hides an external of the same name
        self.externals = {
            name: term for name, term in (externals or {}).items() if name not in definitions
        }
        self.names = self.definitions.keys() | self.externals.keys()
        self.globals_first = globals_first
        self.linked: dict[str, Term] = {}
        self.failed: set[str] = set()
        self.in_progress: set[str] = set()
        self.errors: list[Diagnostic] = []

    def _error(self, message: str, ref: Reference) -> None:
        diagnostic = Diagnostic(message, ref.span)
        if diagnostic not in self.errors:
            self.errors.append(diagnostic)

    def link(self, name: str) -> Optional[Term]:
        if name in self.linked:
            return self.linked[name]
        if name in self.failed:
            return None
        self.in_progress.add(name)
        ok = True

        def resolve(ref: Reference) -> Term:
            nonlocal ok
            target = self._target(ref)
            if target is None:
                ok = False
                return ref
            return target

        term = to_de_bruijn(
            self.definitions[name],
            resolve,
            defined=self.names,
            globals_first=self.globals_first,
        )
        self.in_progress.discard(name)
        if not ok:
            self.failed.add(name)
            return None
        self.linked[name] = term
        return term

    def _target(self, ref: Reference) -> Optional[Term]:
        name = ref.name
        if name in self.definitions:
            if name in self.in_progress:
                self._error(f"recursion found in definition '{name}'", ref)
                return None
            return self.link(name)
        if name in self.externals:
            return self.externals[name]
        self._error(f"variable '{name}' does not exist", ref)
        return None

    def link_all(self) -> dict[str, Term]:
        for name in self.definitions:
            self.link(name)
        if self.errors:
            raise ResolutionError(self.errors)
        return {name: self.linked[name] for name in self.definitions}


def link_program(
    definitions: Mapping[str, RawTerm],
    externals: Optional[Mapping[str, Term]] = None,
    *,
    globals_first: bool = False,
) -> dict[str, Term]:
    """Link every definition into a closed term.

    Names defined in ``definitions`` take precedence over ``externals``. With
    ``globals_first`` any defined name also wins over a binder of the same
    name. All unbound and recursive names are reported together in one
    ResolutionError.
    """
    return Linker(definitions, externals, globals_first=globals_first).link_all()


def link_statements(
    statements: Iterable[Statement], externals: Optional[Mapping[str, Term]] = None
) -> dict[str, Term]:
    """Link the definitions among ``statements``; imports are the caller's job."""
    definitions: dict[str, RawTerm] = {}
    for statement in statements:
        if isinstance(statement, Definition):
            definitions[statement.name] = statement.value
    return link_program(definitions, externals)


def merge_programs(*programs: Mapping[str, Term]) -> dict[str, Term]:
    """Union of linked programs; later programs override earlier ones."""
    merged: dict[str, Term] = {}
    for program in programs:
        merged.update(program)
    return merged
