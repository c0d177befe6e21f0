import pytest

from elc.errors import ResolutionError, SourceSpan
from elc.types.term import Variable, Abstraction
from elc.types.raw import RawVariable, RawAbstraction, RawApplication, Definition, Import
from elc.types.reader import CompileContext
from elc.encoding import church_bool
from elc.reader.parser import parse_program, parse_expression
from elc.compiler.linker import link_program, link_statements, merge_programs
from elc.evaluation.evaluator import normal_eval
from elc.evaluation.substitution import ast_equals


def _messages(source):
    with pytest.raises(ResolutionError) as exc:
        parse_program(source)
    return [d.message for d in exc.value.diagnostics]


def test_self_reference_is_recursion():
    assert _messages("a := a") == ["recursion found in definition 'a'"]


def test_mutual_recursion_is_reported():
    messages = _messages("a := b\nb := a")
    assert messages == ["recursion found in definition 'a'"]


def test_unbound_names_are_aggregated_across_definitions():
    assert _messages("a := x\nb := \\v. y v") == [
        "variable 'x' does not exist",
        "variable 'y' does not exist",
    ]


def test_diagnostic_spans_point_into_the_unit():
    with pytest.raises(ResolutionError) as exc:
        parse_program("ok := \\x. x\nbad := nope")
    (diagnostic,) = exc.value.diagnostics
    assert diagnostic.span == SourceSpan(19, 23)


def test_forward_references_link():
    program = parse_program("b := a a\na := \\x. x")
    assert ast_equals(normal_eval(program["b"]), Abstraction(Variable(0)))


def test_later_definitions_win():
    program = parse_program("a := \\x. x\na := \\x y. x")
    assert ast_equals(program["a"], church_bool(True))


def test_linked_definitions_are_closed_and_shared():
    program = parse_program("id := \\x. x\napp := \\f. f id")
    assert program["app"].body.right is program["id"]


def test_unit_definitions_shadow_externals():
    context = CompileContext(definitions={"k": church_bool(False)})
    program = parse_program("k := \\x y. x\nuse := k", context)
    assert ast_equals(program["use"], church_bool(True))
    assert ast_equals(context.definitions["k"], church_bool(True))


def test_link_program_with_externals():
    raw = {"b": RawApplication(RawVariable("a"), RawAbstraction("x", RawVariable("x")))}
    linked = link_program(raw, {"a": Abstraction(Variable(0))})
    assert ast_equals(normal_eval(linked["b"]), Abstraction(Variable(0)))


def test_link_statements_skips_imports():
    statements = [
        Import("church"),
        Definition("id", RawAbstraction("x", RawVariable("x"))),
    ]
    assert list(link_statements(statements)) == ["id"]


def test_merge_programs_later_overrides():
    a, b, c = Variable(0), Variable(1), Variable(2)
    assert merge_programs({"x": a, "y": b}, {"x": c}) == {"x": c, "y": b}


# Each level uses the previous one twice, so the unfolded tree doubles per level.
DOUBLING = ["a0 := \\x. x"] + [f"a{n} := a{n - 1} a{n - 1}" for n in range(1, 61)]


def test_shared_definitions_are_embedded_not_walked():
    program = parse_program("\n".join(DOUBLING))
    assert program["a60"].left is program["a59"]
    assert program["a60"].right is program["a59"]


def test_shared_definitions_from_earlier_loads():
    context = CompileContext()
    for line in DOUBLING:
        parse_program(line, context)
    program = parse_program("b := a60", context)
    assert program["b"] is context.definitions["a60"]
    assert parse_expression("a60 a60", context).left is context.definitions["a60"]
