"""
Index arithmetic on de Bruijn terms.

All walks here keep their own stack, so term depth is bounded by memory and
not by the interpreter's recursion limit. Terms are never mutated; unchanged
subterms are shared between input and output.
"""

from __future__ import annotations

from typing import Callable

from elc.types.term import Term, Variable, Abstraction, Application, Thunk, MemoCell


def rewrite(term: Term, leaf: Callable[[Term, int], Term]) -> Term:
    """Rebuild ``term`` bottom-up.

    ``leaf(node, depth)`` is called for every node that is not an abstraction
    or an application, where ``depth`` is the number of binders crossed.
    """
    out: list[Term] = []
    stack: list[tuple[Term, int, bool]] = [(term, 0, False)]
    while stack:
        node, depth, built = stack.pop()
        if built:
            if isinstance(node, Abstraction):
                body = out.pop()
                out.append(node if body is node.body else Abstraction(body, node.param))
            else:
                right = out.pop()
                left = out.pop()
                if left is node.left and right is node.right:
                    out.append(node)
                else:
                    out.append(Application(left, right))
            continue
        match node:
            case Abstraction(body=body):
                stack.append((node, depth, True))
                stack.append((body, depth + 1, False))
            case Application(left=left, right=right):
                stack.append((node, depth, True))
                stack.append((right, depth, False))
                stack.append((left, depth, False))
            case _:
                out.append(leaf(node, depth))
    return out[0]


def shift(term: Term, cutoff: int, amount: int) -> Term:
    """Add ``amount`` to every free index at or above ``cutoff``."""
    if amount == 0:
        return term

    def leaf(node: Term, depth: int) -> Term:
        if isinstance(node, Variable):
            if node.index >= cutoff + depth:
                return Variable(node.index + amount)
            return node
        if isinstance(node, Thunk):
            # a thunk only points outside the redex that made it
            return Thunk(node.inner, node.cell, node.shift + amount)
        return node

    return rewrite(term, leaf)


def substitute(term: Term, index: int, supplier: Callable[[], Term]) -> Term:
    """Replace free ``index`` with the supplied term and close the gap above it.

    The supplier is called at most once, and only if the index occurs.
    """
    supplied: list[Term] = []

    def leaf(node: Term, depth: int) -> Term:
        if isinstance(node, Variable):
            target = index + depth
            if node.index == target:
                if not supplied:
                    supplied.append(supplier())
                return shift(supplied[0], 0, depth)
            if node.index > target:
                return Variable(node.index - 1)
            return node
        if isinstance(node, Thunk):
            return Thunk(node.inner, node.cell, node.shift - 1)
        return node

    return rewrite(term, leaf)


def contract(abstraction: Abstraction, argument: Term) -> Term:
    """One beta step. Every occurrence of the parameter shares one memo cell."""
    thunk = Thunk(argument, MemoCell(), 0)
    return substitute(abstraction.body, 0, lambda: thunk)


def force_value(thunk: Thunk, value: Term) -> Term:
    """Move a memoized value from the thunk's origin to where the thunk sits."""
    return shift(value, 0, thunk.shift)


def resolve_all_thunks(term: Term) -> Term:
    """Replace every thunk by its shifted inner term, without evaluating."""
    def leaf(node: Term, depth: int) -> Term:
        if isinstance(node, Thunk):
            return resolve_all_thunks(shift(node.inner, 0, node.shift))
        return node

    return rewrite(term, leaf)


def ast_equals(a: Term, b: Term) -> bool:
    """Structural equality that ignores binder names. Thunks compare by identity."""
    stack = [(a, b)]
    while stack:
        x, y = stack.pop()
        if x is y:
            continue
        match x:
            case Variable(index=i):
                if not isinstance(y, Variable) or y.index != i:
                    return False
            case Abstraction(body=body):
                if not isinstance(y, Abstraction):
                    return False
                stack.append((body, y.body))
            case Application(left=left, right=right):
                if not isinstance(y, Application):
                    return False
                stack.append((right, y.right))
                stack.append((left, y.left))
            case _:
                if x != y:
                    return False
    return True


def free_indices(term: Term) -> set[int]:
    """Free indices of ``term``, relative to its root. Thunks are not entered."""
    found: set[int] = set()
    stack = [(term, 0)]
    while stack:
        node, depth = stack.pop()
        match node:
            case Variable(index=i):
                if i >= depth:
                    found.add(i - depth)
            case Abstraction(body=body):
                stack.append((body, depth + 1))
            case Application(left=left, right=right):
                stack.append((left, depth))
                stack.append((right, depth))
    return found
