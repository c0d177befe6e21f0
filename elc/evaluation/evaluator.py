"""
Public evaluation entry points.

``call_by_name_eval`` reduces to weak head normal form. ``normal_eval`` is
normal-order full normalization. Both share arguments through memoized
thunks, so a duplicated argument is reduced once per strategy.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from elc.types.term import Term
from elc.evaluation.machine import Machine, MachineStats, Op, StepHook


class Strategy(Enum):
    CALL_BY_NAME = "call-by-name"
    FULL_NORMAL = "normal"


_OPS = {Strategy.CALL_BY_NAME: Op.WHNF, Strategy.FULL_NORMAL: Op.NORMAL}


def evaluate(
    term: Term,
    strategy: Strategy = Strategy.FULL_NORMAL,
    *,
    max_steps: Optional[int] = None,
    on_step: Optional[StepHook] = None,
    stats: Optional[MachineStats] = None,
) -> Term:
    """Evaluate ``term``. Does not terminate on divergent terms unless ``max_steps`` is set.

    Passing ``stats`` collects reduction counters for this run.
    """
    machine = Machine(max_steps=max_steps, on_step=on_step)
    if stats is not None:
        machine.stats = stats
    return machine.run(_OPS[strategy], term)


def call_by_name_eval(term: Term, **kwargs) -> Term:
    return evaluate(term, Strategy.CALL_BY_NAME, **kwargs)


def normal_eval(term: Term, **kwargs) -> Term:
    return evaluate(term, Strategy.FULL_NORMAL, **kwargs)
