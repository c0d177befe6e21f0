"""
Explicit-stack reduction machine.

Each Frame is one pending evaluation. A handler either returns a child frame
to run first, or finishes its own frame by setting ``done``. The child's value
lands in the parent's ``child`` field and the parent's handler resumes at
``step``. Contracting a redex in tail position rewrites the current frame
instead of pushing, so long reduction sequences use constant stack.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Optional

from elc.errors import EvaluationBudgetExceeded
from elc.types.term import Term, Abstraction, Application, Thunk
from elc.evaluation.substitution import contract, force_value


class Op(IntEnum):
    WHNF = 0
    NORMAL = 1


@dataclass
class Frame:
    op: Op
    term: Term
    step: int = 0
    aux: Any = None
    child: Optional[Term] = None
    value: Optional[Term] = None
    done: bool = False

    def finish(self, value: Term) -> None:
        self.value = value
        self.done = True


@dataclass
class MachineStats:
    steps: int = 0  # beta contractions
    thunk_evaluations: int = 0  # thunks reduced from their inner term
    thunk_hits: int = 0  # answered from either memo slot


StepHook = Callable[[int, Term], None]


class Machine:
    # memo slot read by each op
    SLOT = {Op.WHNF: "cbn", Op.NORMAL: "normal"}

    def __init__(self, max_steps: Optional[int] = None, on_step: Optional[StepHook] = None):
        self.max_steps = max_steps
        self.on_step = on_step
        self.stats = MachineStats()
        self._dispatch: dict[Op, Callable[[Frame], Optional[Frame]]] = {
            Op.WHNF: self.op_whnf,
            Op.NORMAL: self.op_normal,
        }

    def run(self, op: Op, term: Term) -> Term:
        root = Frame(op, term)
        stack = [root]
        dispatch = self._dispatch
        while stack:
            frame = stack[-1]
            child = dispatch[frame.op](frame)
            if child is not None:
                stack.append(child)
                continue
            if frame.done:
                stack.pop()
                if stack:
                    stack[-1].child = frame.value
        return root.value

    def whnf(self, term: Term) -> Term:
        return self.run(Op.WHNF, term)

    def normalize(self, term: Term) -> Term:
        return self.run(Op.NORMAL, term)

    def _contract(self, abstraction: Abstraction, argument: Term) -> Term:
        stats = self.stats
        stats.steps += 1
        if self.max_steps is not None and stats.steps > self.max_steps:
            raise EvaluationBudgetExceeded(self.max_steps)
        result = contract(abstraction, argument)
        if self.on_step is not None:
            self.on_step(stats.steps, result)
        return result

    # --- Thunks ---
    def _force(self, frame: Frame, resume: int) -> Optional[Frame]:
        """Finish from the memo cell, or start computing the missing slot."""
        thunk: Thunk = frame.term
        cell = thunk.cell
        memo = cell.get(self.SLOT[frame.op])
        if memo is not None:
            self.stats.thunk_hits += 1
            frame.finish(force_value(thunk, memo))
            return None
        frame.step = resume
        if frame.op is Op.WHNF and cell.normal is not None:
            # a normal form is already weak head normal
            self.stats.thunk_hits += 1
            frame.child = cell.normal
            return None
        if cell.cbn is not None:
            # the normal form of a term is the normal form of its weak head normal form
            self.stats.thunk_hits += 1
            return Frame(frame.op, cell.cbn)
        self.stats.thunk_evaluations += 1
        return Frame(frame.op, thunk.inner)

    def _store(self, frame: Frame) -> None:
        thunk: Thunk = frame.term
        value = thunk.cell.store(self.SLOT[frame.op], frame.child)
        frame.finish(force_value(thunk, value))

    # --- Per-op handlers ---
    def op_whnf(self, frame: Frame) -> Optional[Frame]:
        term = frame.term
        match frame.step:
            case 0:
                match term:
                    case Application(left=left):
                        frame.step = 1
                        return Frame(Op.WHNF, left)
                    case Thunk():
                        return self._force(frame, 2)
                    case _:
                        frame.finish(term)
                        return None
            case 1:
                head = frame.child
                if isinstance(head, Abstraction):
                    frame.term = self._contract(head, term.right)
                    frame.step = 0
                    return None
                if head is term.left:
                    frame.finish(term)
                else:
                    frame.finish(Application(head, term.right))
                return None
            case 2:
                self._store(frame)
                return None
        raise AssertionError(f"bad whnf step {frame.step}")

    def op_normal(self, frame: Frame) -> Optional[Frame]:
        term = frame.term
        match frame.step:
            case 0:
                match term:
                    case Abstraction(body=body):
                        frame.step = 1
                        return Frame(Op.NORMAL, body)
                    case Application(left=left):
                        frame.step = 2
                        return Frame(Op.WHNF, left)
                    case Thunk():
                        return self._force(frame, 5)
                    case _:
                        frame.finish(term)
                        return None
            case 1:
                body = frame.child
                frame.finish(term if body is term.body else Abstraction(body, term.param))
                return None
            case 2:
                head = frame.child
                if isinstance(head, Abstraction):
                    frame.term = self._contract(head, term.right)
                    frame.step = 0
                    return None
                # stuck head: normalize both sides independently
                frame.step = 3
                return Frame(Op.NORMAL, head)
            case 3:
                frame.aux = frame.child
                frame.step = 4
                return Frame(Op.NORMAL, term.right)
            case 4:
                left, right = frame.aux, frame.child
                if left is term.left and right is term.right:
                    frame.finish(term)
                else:
                    frame.finish(Application(left, right))
                return None
            case 5:
                self._store(frame)
                return None
        raise AssertionError(f"bad normal step {frame.step}")
