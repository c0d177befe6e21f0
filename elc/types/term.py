"""
De Bruijn terms.

Variables carry indices only; the innermost enclosing binder is index 0.
Binder names on Abstraction are kept for display and ignored by equality.

A Thunk stands for ``shift(inner, 0, shift)`` whose evaluation is deferred.
Every copy of a thunk made while substituting one argument shares a single
MemoCell, so the argument is reduced at most once per evaluation strategy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


class MemoCell:
    __slots__ = ("cbn", "normal")

    SLOTS = ("cbn", "normal")

    def __init__(self):
        # weak head normal form and full normal form of the thunk's inner term
        self.cbn: Term | None = None
        self.normal: Term | None = None

    def get(self, slot: str) -> Term | None:
        return getattr(self, slot)

    def store(self, slot: str, value: Term) -> Term:
        """Write a slot once. Returns whichever value the slot ends up holding."""
        current = getattr(self, slot)
        if current is not None:
            return current
        setattr(self, slot, value)
        return value

    def __repr__(self):
        filled = [s for s in self.SLOTS if getattr(self, s) is not None]
        return f"MemoCell({', '.join(filled) or 'empty'})"


@dataclass(frozen=True)
class Variable:
    index: int


@dataclass(frozen=True)
class Abstraction:
    body: Term
    param: str = field(default="x", compare=False)


@dataclass(frozen=True)
class Application:
    left: Term
    right: Term


@dataclass(frozen=True, eq=False)
class Thunk:
    inner: Term
    cell: MemoCell
    shift: int = 0


Term = Union[Variable, Abstraction, Application, Thunk]
