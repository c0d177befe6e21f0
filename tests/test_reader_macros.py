import pytest

from elc.errors import ParseError, ReaderSemanticError, ResolutionError
from elc.types.reader import CompileContext
from elc.encoding import church_numeral, decode_char_list, decode_bool
from elc.reader.lexer import tokenize
from elc.reader.parser import parse_expression, parse_program
from elc.evaluation.evaluator import normal_eval


# A matcher that accepts exactly "ab". Characters arrive as Church numerals and
# are compared through Scott numerals, whose predecessor is constant time.
AB_MATCHER = r"""
TRUE := \t f. t
FALSE := \t f. f
AND := \p q. p q p
NOT := \b. b FALSE TRUE
SZERO := \z s. z
SSUCC := \n z s. s n
SPRED := \n. n SZERO (\p. p)
SISZERO := \n. n TRUE (\p. FALSE)
TOSCOTT := \c. c SSUCC SZERO
EQ := \c k. (\s. AND (SISZERO (k SPRED s)) (NOT (SISZERO (k SPRED (SSUCC s))))) (TOSCOTT c)
STOP := \a b c. a
MORE := \a b c. b
DONE := \a b c. c
AB := \l. l STOP (\h t. EQ h N97 (t MORE (\h2 t2. EQ h2 N98 (t2 DONE (\h3 t3. STOP)) STOP)) STOP)
"""

DIRECTIVE = r"~READER | AB | \l. l |"


@pytest.fixture
def ab_context():
    context = CompileContext(max_steps=1_000_000)
    context.definitions["N97"] = church_numeral(ord("a"))
    context.definitions["N98"] = church_numeral(ord("b"))
    parse_program(AB_MATCHER, context)
    return context


def _kinds(tokens):
    return [(t.kind, t.text) for t in tokens]


@pytest.mark.parametrize(
    "source, expected",
    [
        ("ab x", [("reader", "ab"), ("var", "x")]),
        ("abc", [("reader", "ab"), ("var", "c")]),
        ("ax", [("var", "ax")]),
        ("ba", [("var", "ba")]),
        ("a", [("var", "a")]),
    ]
)
def test_reader_accepts_exactly_ab(ab_context, source, expected):
    tokens = tokenize(f"{DIRECTIVE} {source}", ab_context)
    assert _kinds(tokens) == expected


def test_reader_token_span(ab_context):
    source = f"{DIRECTIVE} ab"
    (token,) = tokenize(source, ab_context)
    assert (token.start, token.end) == (len(source) - 2, len(source))
    assert token.reader is ab_context.readers[0]


def test_directive_registers_reader_and_caches_candidates(ab_context):
    tokenize(f"{DIRECTIVE} ab", ab_context)
    assert len(ab_context.readers) == 1
    cache = ab_context.readers[0].cache
    assert cache["a"] == 1
    assert cache["ab"] == 2
    assert cache[" "] == 0


def test_reader_token_compiles_to_its_compiler_output(ab_context):
    term = parse_expression(rf"{DIRECTIVE} (\x. x) ab", ab_context)
    assert decode_char_list(normal_eval(term)) == "ab"


def test_reader_in_program_sees_earlier_definitions():
    context = CompileContext(max_steps=1_000_000)
    context.definitions["N97"] = church_numeral(ord("a"))
    context.definitions["N98"] = church_numeral(ord("b"))
    program = parse_program(AB_MATCHER + DIRECTIVE + "\nword := ab\n", context)
    assert decode_char_list(program["word"]) == "ab"
    assert "AB" in program


def test_readers_do_not_leak_between_units(ab_context):
    tokenize(f"{DIRECTIVE} ab", ab_context)
    fresh = CompileContext(definitions=dict(ab_context.definitions))
    assert _kinds(tokenize("ab", fresh)) == [("var", "ab")]


def test_directive_bodies_must_resolve():
    with pytest.raises(ResolutionError):
        tokenize(r"~READER | MISSING | \l. l | x")


@pytest.mark.parametrize(
    "matcher, message",
    [
        (r"\l. l", "Reader did not return an enum variant"),
        (r"\l. \a b c d. d", "Reader returned an enum variant which is too large"),
    ]
)
def test_bad_matcher_results_are_fatal(matcher, message):
    with pytest.raises(ReaderSemanticError) as exc:
        tokenize(rf"~READER | {matcher} | \l. l | x")
    assert exc.value.message == message


def test_always_continuing_reader_stops_at_end_of_input():
    tokens = tokenize(r"~READER | \l. \a b c. b | \l. l | xyz")
    assert _kinds(tokens) == [("var", "xyz")]


def test_reader_tokens_take_precedence_over_names(ab_context):
    with pytest.raises(ParseError) as exc:
        parse_expression(rf"{DIRECTIVE} \ab. ab", ab_context)
    assert exc.value.message == "Expected a parameter name after lambda"


ACCEPT_TRUE = r"~READER | \l. \a b c. c | \l. \t f. t |"
ACCEPT_FALSE = r"~READER | \l. \a b c. c | \l. \t f. f |"


@pytest.mark.parametrize("first, second, expected", [
    (ACCEPT_TRUE, ACCEPT_FALSE, True),
    (ACCEPT_FALSE, ACCEPT_TRUE, False),
])
def test_readers_are_tried_in_declaration_order(first, second, expected):
    context = CompileContext()
    (token,) = tokenize(first + second + "x", context)
    assert len(context.readers) == 2
    assert token.kind == "reader" and token.text == "x"
    assert token.reader is context.readers[0]
    assert decode_bool(parse_expression(first + second + "x", CompileContext())) is expected
