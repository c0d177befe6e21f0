from __future__ import annotations

from pathlib import Path
from typing import Optional

from elc.config import get_max_steps
from elc.types.term import Term
from elc.types.reader import CompileContext
from elc.reader.parser import parse_program, parse_expression
from elc.compiler.compile import entry_point, ENTRY_POINT
from elc.modules.import_loader import ImportLoader, load_library
from elc.evaluation.evaluator import Strategy, evaluate
from elc.evaluation.machine import MachineStats, StepHook
from elc.printer import print_term

_FROM_ENV = object()


class Interpreter:
    """
    Compiles and evaluates lambda calculus source.
    Keeps definitions and readers across calls, so later sources see earlier ones.
    """

    def __init__(
        self,
        prelude: str | None = None,
        *,
        libraries: tuple[str, ...] = (),
        max_steps: Optional[int] | object = _FROM_ENV,
    ):
        if max_steps is _FROM_ENV:
            max_steps = get_max_steps()
        self.context = CompileContext(max_steps=max_steps)
        self.stats = MachineStats()
        for name in libraries:
            self.context.definitions.update(load_library(name))
        if prelude:
            self.load(prelude)

    @property
    def definitions(self) -> dict[str, Term]:
        return self.context.definitions

    def load(self, source: str) -> dict[str, Term]:
        """Compile ``name := expr`` statements into the session."""
        return parse_program(source, self.context)

    def load_file(self, path: Path | str) -> dict[str, Term]:
        """Load a source file and its imports into the session. ``.arrow`` files use the arrow syntax."""
        program = ImportLoader().load(Path(path))
        self.context.definitions.update(program)
        return program

    def evaluate(
        self,
        term: Term,
        strategy: Strategy = Strategy.FULL_NORMAL,
        *,
        on_step: Optional[StepHook] = None,
    ) -> Term:
        self.stats = MachineStats()
        return evaluate(
            term,
            strategy,
            max_steps=self.context.max_steps,
            on_step=on_step,
            stats=self.stats,
        )

    def eval(
        self,
        source: str,
        strategy: Strategy = Strategy.FULL_NORMAL,
        *,
        on_step: Optional[StepHook] = None,
    ) -> Term:
        """Parse one expression against the session and evaluate it."""
        return self.evaluate(parse_expression(source, self.context), strategy, on_step=on_step)

    def run(self, source: str | None = None, name: str = ENTRY_POINT) -> Term:
        """Load ``source`` if given, then return the normal form of ``out``."""
        if source is not None:
            self.load(source)
        return self.evaluate(entry_point(self.context.definitions, name))

    def show(self, source: str, mode: str = "pretty") -> str:
        return print_term(self.eval(source), mode)
