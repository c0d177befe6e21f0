r"""
Reader for the traditional file syntax.

    program    := statement*
    statement  := NAME '=' term | 'import' STRING
    term       := ('\' | 'λ') NAME+ '.' term | application
    application:= primary primary*
    primary    := NAME | '(' term ')'

An application stops before ``NAME =`` so statements need no terminator.
There are no reader macros here; names are resolved by the linker.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from elc.errors import SourceSpan, TokenizeError, ParseError
from elc.types.raw import (
    RawTerm,
    RawVariable,
    RawAbstraction,
    RawApplication,
    Definition,
    Import,
    Statement,
)


TOKEN_RE = re.compile(
    r"(?P<space>\s+)"
    r"|(?P<import>import\b)"
    r'|(?P<string>"[^"]*")'
    r"|(?P<lambda>[\\λ])"
    r"|(?P<dot>\.)"
    r"|(?P<name>\w+)"
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<equals>=)",
    re.ASCII,
)


def lex_statements(source: str, token_re: re.Pattern = TOKEN_RE) -> Iterator[tuple[str, str, SourceSpan]]:
    """Token generator: yields (kind, text, span) tuples, kind being the group name."""
    pos = 0
    n = len(source)
    while pos < n:
        m = token_re.match(source, pos)
        if m is None:
            raise TokenizeError(
                f"Unexpected character {source[pos]!r} at offset {pos}",
                SourceSpan(pos, pos + 1),
            )
        kind = m.lastgroup
        if kind != "space":
            yield kind, m.group(kind), SourceSpan(m.start(), m.end())
        pos = m.end()


class TraditionalParser:
    token_re = TOKEN_RE

    def __init__(self, source: str):
        self.tokens = list(lex_statements(source, self.token_re))
        self.pos = 0
        self.end = len(source)

    def peek(self, ahead: int = 0) -> Optional[tuple[str, str, SourceSpan]]:
        i = self.pos + ahead
        return self.tokens[i] if i < len(self.tokens) else None

    def advance(self) -> tuple[str, str, SourceSpan]:
        tok = self.peek()
        if tok is None:
            raise ParseError("Unexpected end of input", SourceSpan(self.end, self.end))
        self.pos += 1
        return tok

    def expect(self, kind: str, what: str) -> tuple[str, str, SourceSpan]:
        tok = self.advance()
        if tok[0] != kind:
            raise ParseError(f"Expected {what}", tok[2])
        return tok

    def _starts_statement(self) -> bool:
        tok, nxt = self.peek(), self.peek(1)
        if tok is None:
            return True
        if tok[0] == "import":
            return True
        return tok[0] == "name" and nxt is not None and nxt[0] == "equals"

    def parse_term(self) -> RawTerm:
        tok = self.peek()
        if tok is not None and tok[0] == "lambda":
            self.advance()
            params = [self.expect("name", "a parameter name")[1]]
            while (nxt := self.peek()) is not None and nxt[0] == "name":
                params.append(self.advance()[1])
            self.expect("dot", "'.'")
            body = self.parse_term()
            for param in reversed(params):
                body = RawAbstraction(param, body)
            return body
        return self.parse_application()

    def parse_application(self) -> RawTerm:
        term = self.parse_primary()
        while (tok := self.peek()) is not None and tok[0] in ("name", "lparen"):
            if self._starts_statement():
                break
            term = RawApplication(term, self.parse_primary())
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

    def parse_statement(self) -> Statement:
        kind, text, span = self.advance()
        if kind == "import":
            _, path, path_span = self.expect("string", "a quoted import path")
            return Import(path[1:-1], SourceSpan(span.start, path_span.end))
        if kind == "name":
            self.expect("equals", "'='")
            return Definition(text, self.parse_term(), span)
        raise ParseError("Expected a definition or an import", span)

    def parse_program(self) -> list[Statement]:
        statements = []
        while self.peek() is not None:
            statements.append(self.parse_statement())
        return statements


def parse_traditional_term(source: str) -> RawTerm:
    parser = TraditionalParser(source)
    term = parser.parse_term()
    leftover = parser.peek()
    if leftover is not None:
        raise ParseError(f"Unexpected '{leftover[1]}'", leftover[2])
    return term


def parse_traditional_program(source: str) -> list[Statement]:
    return TraditionalParser(source).parse_program()
