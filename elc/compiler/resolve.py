"""Name to de Bruijn index resolution."""

from __future__ import annotations

from typing import Callable, Container, Optional

from elc.types.term import Term, Variable, Abstraction, Application
from elc.types.raw import (
    RawTerm,
    RawVariable,
    RawAbstraction,
    RawApplication,
    RawLiteral,
    Reference,
)

# scopes are cons cells (name, parent), innermost binder first
Scope = Optional[tuple]

Resolver = Callable[[Reference], Term]


def _lookup(scope: Scope, name: str) -> Optional[int]:
    index = 0
    while scope is not None:
        if scope[0] == name:
            return index
        scope = scope[1]
        index += 1
    return None


def _keep(ref: Reference) -> Term:
    return ref


def to_de_bruijn(
    raw: RawTerm,
    resolve: Resolver = _keep,
    *,
    defined: Container[str] = (),
    globals_first: bool = False,
) -> Term:
    """Resolve names to indices, handing every other name to ``resolve``.

    By default the nearest binder wins. With ``globals_first`` a name in
    ``defined`` goes to ``resolve`` even under a binder of the same name.
    ``resolve`` gets a Reference carrying the name and its span and returns
    the closed term to embed, or a Reference to leave a placeholder.
    Embedded terms are never walked, so shared definitions cost nothing.
    """
    out: list[Term] = []
    stack: list[tuple[RawTerm, Scope, bool]] = [(raw, None, False)]
    while stack:
        node, scope, built = stack.pop()
        if built:
            if isinstance(node, RawAbstraction):
                out.append(Abstraction(out.pop(), node.param))
            else:
                right = out.pop()
                left = out.pop()
                out.append(Application(left, right))
            continue
        match node:
            case RawVariable(name=name, span=span):
                index = None
                if not (globals_first and name in defined):
                    index = _lookup(scope, name)
                if index is not None:
                    out.append(Variable(index))
                else:
                    out.append(resolve(Reference(name, span)))
            case RawAbstraction(param=param, body=body):
                stack.append((node, scope, True))
                stack.append((body, (param, scope), False))
            case RawApplication(left=left, right=right):
                stack.append((node, scope, True))
                stack.append((right, scope, False))
                stack.append((left, scope, False))
            case RawLiteral(term=term):
                out.append(term)
            case _:
                raise TypeError(f"not a raw term: {node!r}")
    return out[0]
