"""Whole-unit compilation helpers shared by the interpreter and the language server."""

from __future__ import annotations

from typing import Mapping, Optional

from elc.errors import ElcNameError
from elc.types.term import Term
from elc.types.reader import CompileContext
from elc.reader.parser import parse_program
from elc.evaluation.evaluator import Strategy, evaluate

ENTRY_POINT = "out"


def compile_unit(source: str, context: Optional[CompileContext] = None) -> CompileContext:
    """Compile a program into ``context`` (a fresh one by default) and return it."""
    if context is None:
        context = CompileContext()
    parse_program(source, context)
    return context


def entry_point(definitions: Mapping[str, Term], name: str = ENTRY_POINT) -> Term:
    try:
        return definitions[name]
    except KeyError:
        raise ElcNameError(f"no definition named '{name}'") from None


def run_program(
    source: str,
    context: Optional[CompileContext] = None,
    *,
    strategy: Strategy = Strategy.FULL_NORMAL,
) -> Term:
    """Compile ``source`` and evaluate its ``out`` definition."""
    context = compile_unit(source, context)
    return evaluate(entry_point(context.definitions), strategy, max_steps=context.max_steps)
