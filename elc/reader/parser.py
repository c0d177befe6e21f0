r"""
Pratt parser for the extensible syntax.

    program    := (NAME ':=' expr)*
    expr       := primary primary*              (application, left associative)
    primary    := VAR | READER | '(' expr ')' | ('\' | 'λ') VAR+ '.' expr

Binding powers: ':=' is -1, ')' is 0, everything else 1. A lambda body
extends as far right as possible.

Reader tokens are compiled as soon as they are parsed and embedded as closed
literals. A defined name wins over a binder of the same name.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from elc.errors import SourceSpan, ParseError, ResolutionError, TokenizeError, Diagnostic
from elc.types.term import Term, Application
from elc.types.raw import (
    RawTerm,
    RawVariable,
    RawAbstraction,
    RawApplication,
    RawLiteral,
    Definition,
    Reference,
)
from elc.types.reader import CompileContext
from elc.encoding import char_list
from elc.reader.lexer import Token, lex, directive_extent, READER_KEYWORD


def binding_power(token: Token) -> int:
    if token.kind == "assign":
        return -1
    if token.kind == "paren" and token.text == ")":
        return 0
    return 1


class Parser:
    def __init__(self, tokens: Iterable[Token], context: CompileContext, end: int = 0):
        self.tokens: Iterator[Token] = iter(tokens)
        self.context = context
        self.end = end  # offset reported for unexpected end of input
        self._peeked: Optional[Token] = None
        self._has_peeked = False

    def peek(self) -> Optional[Token]:
        if not self._has_peeked:
            self._peeked = next(self.tokens, None)
            self._has_peeked = True
        return self._peeked

    def advance(self) -> Optional[Token]:
        tok = self.peek()
        self._has_peeked = False
        self._peeked = None
        return tok

    def _eof(self) -> ParseError:
        return ParseError("Unexpected end of input", SourceSpan(self.end, self.end))

    def expect(self, kind: str, text: str) -> Token:
        tok = self.advance()
        if tok is None:
            raise ParseError(f"Expected '{text}' but reached end of input", SourceSpan(self.end, self.end))
        if tok.kind != kind or tok.text != text:
            raise ParseError(f"Expected '{text}'", tok.span)
        return tok

    def parse_expr(self, min_bp: int = 0) -> RawTerm:
        left = self.parse_primary()
        while True:
            tok = self.peek()
            if tok is None or binding_power(tok) <= min_bp:
                return left
            left = RawApplication(left, self.parse_primary())

    def parse_primary(self) -> RawTerm:
        tok = self.advance()
        if tok is None:
            raise self._eof()
        match tok.kind:
            case "var":
                return RawVariable(tok.text, tok.span)
            case "lambda":
                return self._parse_lambda(tok)
            case "paren" if tok.text == "(":
                expr = self.parse_expr(0)
                self.expect("paren", ")")
                return expr
            case "paren":
                raise ParseError("Unexpected ')'", tok.span)
            case "reader":
                return RawLiteral(self._compile_reader_token(tok))
            case "assign":
                raise ParseError("Cannot assign here", tok.span)
            case _:
                raise ParseError(f"Unexpected '{tok.text}'", tok.span)

    def _parse_lambda(self, tok: Token) -> RawTerm:
        names: list[str] = []
        while (nxt := self.peek()) is not None and nxt.kind == "var":
            names.append(self.advance().text)
        if not names:
            span = nxt.span if nxt is not None else tok.span
            raise ParseError("Expected a parameter name after lambda", span)
        dot = self.advance()
        if dot is None:
            raise ParseError("Expected '.' but reached end of input", SourceSpan(self.end, self.end))
        if dot.kind != "dot":
            raise ParseError("Expected '.'", dot.span)
        body = self.parse_expr(0)
        for name in reversed(names):
            body = RawAbstraction(name, body)
        return body

    def _compile_reader_token(self, tok: Token) -> Term:
        from elc.evaluation.evaluator import normal_eval

        return normal_eval(
            Application(tok.reader.compiler, char_list(tok.text)),
            max_steps=self.context.max_steps,
        )

    def parse_statements(self) -> Iterator[Definition]:
        while (tok := self.advance()) is not None:
            if tok.kind != "assign":
                if tok.kind == "paren" and tok.text == ")":
                    raise ParseError("Unexpected ')'", tok.span)
                raise ParseError("Expected a variable assignment", tok.span)
            value = self.parse_expr(0)
            yield Definition(tok.text, value, tok.span)

    def parse_whole_expr(self) -> RawTerm:
        expr = self.parse_expr(0)
        tok = self.peek()
        if tok is not None:
            if tok.kind == "assign":
                raise ParseError("Cannot assign here", tok.span)
            raise ParseError("Unexpected ')'", tok.span)
        return expr


def parse_raw_expression(
    source: str, context: Optional[CompileContext] = None, *, offset: int = 0
) -> RawTerm:
    if context is None:
        context = CompileContext()
    parser = Parser(lex(source, context, offset=offset), context, end=offset + len(source))
    return parser.parse_whole_expr()


def parse_expression(
    source: str, context: Optional[CompileContext] = None, *, offset: int = 0
) -> Term:
    """Parse one closed expression; names may refer to ``context.definitions``."""
    from elc.compiler.resolve import to_de_bruijn

    if context is None:
        context = CompileContext()
    definitions = context.definitions
    unbound: list[Reference] = []

    def resolve(ref: Reference) -> Term:
        if ref.name in definitions:
            return definitions[ref.name]
        unbound.append(ref)
        return ref

    raw = parse_raw_expression(source, context, offset=offset)
    term = to_de_bruijn(raw, resolve, defined=definitions, globals_first=True)
    if unbound:
        raise ResolutionError(
            [Diagnostic(f"variable '{ref.name}' does not exist", ref.span) for ref in unbound]
        )
    return term


def split_segments(source: str) -> list[tuple[int, int]]:
    """Cut a unit at each reader directive so earlier definitions are linked first."""
    bounds = [0]
    pos = source.find(READER_KEYWORD)
    while pos != -1:
        if pos > bounds[-1]:
            bounds.append(pos)
        try:
            end = directive_extent(source, pos).end
        except TokenizeError:
            break
        pos = source.find(READER_KEYWORD, end)
    bounds.append(len(source))
    return [(a, b) for a, b in zip(bounds, bounds[1:])]


def parse_definitions(
    source: str, context: CompileContext, *, offset: int = 0
) -> list[Definition]:
    parser = Parser(lex(source, context, offset=offset), context, end=offset + len(source))
    return list(parser.parse_statements())


def parse_program(source: str, context: Optional[CompileContext] = None) -> dict[str, Term]:
    """Compile ``name := expr`` statements. Later definitions replace earlier ones.

    Definitions are added to ``context.definitions``; the returned mapping holds
    only this unit's definitions.
    """
    from elc.compiler.linker import link_program

    if context is None:
        context = CompileContext()
    program: dict[str, Term] = {}
    for start, end in split_segments(source):
        statements = parse_definitions(source[start:end], context, offset=start)
        raw = {d.name: d.value for d in statements}
        linked = link_program(raw, context.definitions, globals_first=True)
        context.definitions.update(linked)
        program.update(linked)
    return program
