"""
Reader for the arrow file syntax.

    program    := statement*
    statement  := NAME '=' term | 'import' STRING
    term       := NAME '=>' term | call
    call       := primary ('(' term ')')*
    primary    := NAME | '(' term ')'

Application is written as a call, ``f(x)(y)``, so juxtaposed names always
start a new statement. Statements and imports are shared with the
traditional syntax.
"""

from __future__ import annotations

import re

from elc.errors import ParseError
from elc.types.raw import RawTerm, RawVariable, RawAbstraction, RawApplication, Statement
from elc.reader.traditional import TraditionalParser


TOKEN_RE = re.compile(
    r"(?P<space>\s+)"
    r"|(?P<import>import\b)"
    r'|(?P<string>"[^"]*")'
    r"|(?P<arrow>=>)"
    r"|(?P<name>\w+)"
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<equals>=)",
    re.ASCII,
)


class ArrowParser(TraditionalParser):
    token_re = TOKEN_RE

    def parse_term(self) -> RawTerm:
        tok, nxt = self.peek(), self.peek(1)
        if tok is not None and tok[0] == "name" and nxt is not None and nxt[0] == "arrow":
            self.pos += 2
            return RawAbstraction(tok[1], self.parse_term())
        return self.parse_application()

    def parse_application(self) -> RawTerm:
        term = self.parse_primary()
        while (tok := self.peek()) is not None and tok[0] == "lparen":
            self.advance()
            term = RawApplication(term, self.parse_term())
            self.expect("rparen", "')'")
        return term

    def parse_primary(self) -> RawTerm:
        kind, text, span = self.advance()
        if kind == "name":
            return RawVariable(text, span)
        if kind == "lparen":
            term = self.parse_term()
            self.expect("rparen", "')'")
            return term
        raise ParseError(f"Unexpected '{text}'", span)


def parse_arrow_term(source: str) -> RawTerm:
    parser = ArrowParser(source)
    term = parser.parse_term()
    leftover = parser.peek()
    if leftover is not None:
        raise ParseError(f"Unexpected '{leftover[1]}'", leftover[2])
    return term


def parse_arrow_program(source: str) -> list[Statement]:
    return ArrowParser(source).parse_program()
