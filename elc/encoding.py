r"""
Church encodings used at the boundary between Python data and terms.

    numeral n   = \f x. f (f ... (f x))        (n applications)
    nil         = \n c. n
    cons h t    = \n c. c h t                  (h a numeral, t a list)
    enum k of n = \v0 ... v(n-1). vk
    true/false  = \t f. t  /  \t f. f
"""

from __future__ import annotations

from typing import Iterable, Optional

from elc.types.term import Term, Variable, Abstraction, Application


def church_numeral(n: int) -> Term:
    if n < 0:
        raise ValueError("Church numerals are non-negative")
    body: Term = Variable(0)
    for _ in range(n):
        body = Application(Variable(1), body)
    return Abstraction(Abstraction(body, "x"), "f")


def decode_numeral(term: Term) -> Optional[int]:
    """Return n if ``term`` is exactly the normal form of numeral n, else None."""
    if not (isinstance(term, Abstraction) and isinstance(term.body, Abstraction)):
        return None
    body = term.body.body
    count = 0
    while isinstance(body, Application):
        if body.left != Variable(1):
            return None
        count += 1
        body = body.right
    return count if body == Variable(0) else None


NIL: Term = Abstraction(Abstraction(Variable(1), "c"), "n")


def cons(head: Term, tail: Term) -> Term:
    return Abstraction(
        Abstraction(Application(Application(Variable(0), head), tail), "c"), "n"
    )


def char_list(text: str | Iterable[int]) -> Term:
    """Encode text as a list of character-code numerals."""
    codes = [ord(c) for c in text] if isinstance(text, str) else list(text)
    result = NIL
    for code in reversed(codes):
        result = cons(church_numeral(code), result)
    return result


def decode_char_list(term: Term) -> Optional[str]:
    chars = []
    while True:
        if term == NIL:
            return "".join(chars)
        match term:
            case Abstraction(body=Abstraction(body=Application(
                    left=Application(left=Variable(index=0), right=head), right=tail))):
                code = decode_numeral(head)
                if code is None:
                    return None
                chars.append(chr(code))
                term = tail
            case _:
                return None


def decode_enum(term: Term) -> Optional[int]:
    """Variant index of n nested binders around one of their own variables."""
    arity = 0
    while isinstance(term, Abstraction):
        arity += 1
        term = term.body
    if isinstance(term, Variable) and term.index < arity:
        return arity - term.index - 1
    return None


def church_bool(value: bool) -> Term:
    return Abstraction(Abstraction(Variable(1 if value else 0), "f"), "t")


def decode_bool(term: Term) -> Optional[bool]:
    match term:
        case Abstraction(body=Abstraction(body=Variable(index=1))):
            return True
        case Abstraction(body=Abstraction(body=Variable(index=0))):
            return False
    return None
