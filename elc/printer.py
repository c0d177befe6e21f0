r"""
Term printer.

``raw`` mode prints one construct per node, fully parenthesized:
``(\x. (x x))``. ``pretty`` mode merges nested binders and application
spines: ``\f x. f (f x)``. Both print thunks as ``[thunk]`` without forcing
them, and rename binders that would shadow an enclosing binder so the output
parses back to the same term.
"""

from __future__ import annotations

from typing import Optional

from elc.types.term import Term, Variable, Abstraction, Application, Thunk
from elc.types.raw import Reference

MODES = ("pretty", "raw")
THUNK_TEXT = "[thunk]"
ELLIPSIS = "…"

# binder names, innermost first, as cons cells (name, parent)
Names = Optional[tuple]


def _bound(names: Names, name: str) -> bool:
    while names is not None:
        if names[0] == name:
            return True
        names = names[1]
    return False


def _fresh(name: str, names: Names) -> str:
    if not _bound(names, name):
        return name
    n = 1
    while _bound(names, f"{name}{n}"):
        n += 1
    return f"{name}{n}"


def _variable(index: int, names: Names, numeric: bool) -> str:
    if not numeric:
        i = index
        while names is not None:
            if i == 0:
                return names[0]
            names = names[1]
            i -= 1
    return str(index)


def _leaf(node: Term, names: Names, numeric: bool) -> str:
    match node:
        case Variable(index=index):
            return _variable(index, names, numeric)
        case Thunk():
            return THUNK_TEXT
        case Reference(name=name):
            return name
    raise TypeError(f"cannot print {node!r}")


def print_term(
    term: Term,
    mode: str = "pretty",
    numeric_variables: bool = False,
    limit: Optional[int] = None,
) -> str:
    """Render ``term``. With ``limit``, stop after that many characters and end with an ellipsis."""
    if mode not in MODES:
        raise ValueError(f"unknown print mode {mode!r}, expected one of {MODES}")
    pretty = mode == "pretty"
    out: list[str] = []
    size = 0
    # items are literal text or (term, names) pairs still to print
    work: list = [(term, None)]
    while work and (limit is None or size <= limit):
        item = work.pop()
        if isinstance(item, str):
            out.append(item)
            size += len(item)
            continue
        node, names = item
        if isinstance(node, Abstraction):
            if pretty:
                params = []
                while isinstance(node, Abstraction):
                    name = _fresh(node.param, names)
                    names = (name, names)
                    params.append(name)
                    node = node.body
                work.append((node, names))
                work.append(f"\\{' '.join(params)}. ")
            else:
                name = _fresh(node.param, names)
                work.append(")")
                work.append((node.body, (name, names)))
                work.append(f"(\\{name}. ")
        elif isinstance(node, Application):
            if pretty:
                args = []
                while isinstance(node, Application):
                    args.append(node.right)
                    node = node.left
                parts: list = []
                if isinstance(node, Abstraction):
                    parts += ["(", (node, names), ")"]
                else:
                    parts.append((node, names))
                for arg in reversed(args):
                    parts.append(" ")
                    if isinstance(arg, (Abstraction, Application)):
                        parts += ["(", (arg, names), ")"]
                    else:
                        parts.append((arg, names))
                work.extend(reversed(parts))
            else:
                work += [")", (node.right, names), " ", (node.left, names), "("]
        else:
            text = _leaf(node, names, numeric_variables)
            out.append(text)
            size += len(text)
    text = "".join(out)
    if limit is not None and len(text) > limit:
        return text[:limit - 1] + ELLIPSIS
    return text


def print_program(definitions: dict[str, Term], mode: str = "pretty") -> str:
    """Render definitions back as ``name := term`` lines."""
    return "\n".join(f"{name} := {print_term(term, mode)}" for name, term in definitions.items())
