"""
Tokenizer with user defined token classes.

At each position, in order:

1. a ``~READER <d> matcher <d> compiler <d>`` directive registers a new
   reader for the rest of the compilation unit and emits nothing;
2. registered readers are tried in declaration order, first accept wins;
3. the fixed rules in TOKEN_RE, whitespace being dropped.

Readers grow a candidate one character at a time and ask the matcher, a
lambda term, whether to stop, continue or accept.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional

from elc.errors import SourceSpan, TokenizeError, ReaderSemanticError
from elc.types.term import Application
from elc.types.reader import Reader, CompileContext
from elc.encoding import char_list, decode_enum


READER_KEYWORD = "~READER"

# enum variants a matcher may return
STOP, CONTINUE, ACCEPT = 0, 1, 2

TOKEN_RE = re.compile(
    r"(?P<dot>\.)"
    r"|(?P<paren>[()])"
    r"|(?P<lambda>[\\λ])"
    r"|(?P<whitespace>\s+)"
    r"|(?P<assign>\w+\s*:=)"
    r"|(?P<var>\w+)",
    re.ASCII,
)

_KINDS = ("dot", "paren", "lambda", "whitespace", "assign", "var")
_NAME_RE = re.compile(r"\w+", re.ASCII)
_SPACE_RE = re.compile(r"\s*")
_DELIMITER_RE = re.compile(r"\S+")


@dataclass(frozen=True)
class Token:
    kind: str  # dot | paren | lambda | assign | var | reader
    text: str
    span: SourceSpan
    reader: Optional[Reader] = None

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end


@dataclass(frozen=True)
class DirectiveExtent:
    """Where the parts of a reader directive sit in the source."""
    matcher: tuple[int, int]
    compiler: tuple[int, int]
    end: int


def directive_extent(source: str, pos: int, offset: int = 0) -> DirectiveExtent:
    """Locate the matcher and compiler bodies of the directive at ``pos``."""
    i = _SPACE_RE.match(source, pos + len(READER_KEYWORD)).end()
    m = _DELIMITER_RE.match(source, i)
    if m is None:
        raise TokenizeError(
            "Failed to supply a proper reader delimiter",
            SourceSpan(pos + offset, i + offset),
        )
    delimiter = m.group(0)
    matcher_start = m.end()
    matcher_end = source.find(delimiter, matcher_start + 1)
    if matcher_end == -1:
        raise TokenizeError(
            "Failed to supply a proper reader matcher",
            SourceSpan(pos + offset, len(source) + offset),
        )
    compiler_start = matcher_end + len(delimiter)
    compiler_end = source.find(delimiter, compiler_start + 1)
    if compiler_end == -1:
        raise TokenizeError(
            "Failed to supply a proper reader compiler",
            SourceSpan(pos + offset, len(source) + offset),
        )
    return DirectiveExtent(
        (matcher_start, matcher_end),
        (compiler_start, compiler_end),
        compiler_end + len(delimiter),
    )


def _read_directive(source: str, pos: int, context: CompileContext, offset: int) -> int:
    # bodies are full expressions, compiled with whatever the unit defines so far
    from elc.reader.parser import parse_expression

    extent = directive_extent(source, pos, offset)
    (ms, me), (cs, ce) = extent.matcher, extent.compiler
    matcher = parse_expression(source[ms:me], context, offset=offset + ms)
    compiler = parse_expression(source[cs:ce], context, offset=offset + cs)
    context.readers.append(Reader(matcher, compiler))
    return extent.end


def _classify(reader: Reader, candidate: str, context: CompileContext, span: SourceSpan) -> int:
    from elc.evaluation.evaluator import normal_eval

    variant = reader.cache.get(candidate)
    if variant is not None:
        return variant
    result = normal_eval(
        Application(reader.matcher, char_list(candidate)),
        max_steps=context.max_steps,
    )
    variant = decode_enum(result)
    if variant is None:
        raise ReaderSemanticError("Reader did not return an enum variant", span)
    if variant > ACCEPT:
        raise ReaderSemanticError("Reader returned an enum variant which is too large", span)
    reader.cache[candidate] = variant
    return variant


def match_reader(
    reader: Reader, source: str, pos: int, context: CompileContext, offset: int = 0
) -> Optional[int]:
    """Length of the token ``reader`` accepts at ``pos``, or None."""
    length = 1
    while pos + length <= len(source):
        candidate = source[pos:pos + length]
        span = SourceSpan(pos + offset, pos + length + offset)
        variant = _classify(reader, candidate, context, span)
        if variant == STOP:
            return None
        if variant == ACCEPT:
            return length
        length += 1
    return None


def lex(
    source: str, context: Optional[CompileContext] = None, *, offset: int = 0
) -> Iterator[Token]:
    """Token generator. Spans are shifted by ``offset``."""
    if context is None:
        context = CompileContext()
    pos = 0
    n = len(source)
    while pos < n:
        if source.startswith(READER_KEYWORD, pos):
            pos = _read_directive(source, pos, context, offset)
            continue

        matched = False
        for reader in context.readers:
            length = match_reader(reader, source, pos, context, offset)
            if length is not None:
                yield Token(
                    "reader",
                    source[pos:pos + length],
                    SourceSpan(pos + offset, pos + length + offset),
                    reader,
                )
                pos += length
                matched = True
                break
        if matched:
            continue

        m = TOKEN_RE.match(source, pos)
        if m is None or m.end() == pos:
            raise TokenizeError(
                f"Unexpected character {source[pos]!r} at offset {pos + offset}",
                SourceSpan(pos + offset, pos + 1 + offset),
            )
        kind = next(k for k in _KINDS if m.group(k) is not None)
        span = SourceSpan(m.start() + offset, m.end() + offset)
        if kind == "assign":
            yield Token(kind, _NAME_RE.match(m.group(kind)).group(0), span)
        elif kind != "whitespace":
            yield Token(kind, m.group(kind), span)
        pos = m.end()


def tokenize(
    source: str, context: Optional[CompileContext] = None, *, offset: int = 0
) -> list[Token]:
    return list(lex(source, context, offset=offset))
