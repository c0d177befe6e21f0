import pytest

from elc.errors import ElcNameError, EvaluationBudgetExceeded
from elc.config import get_max_steps
from elc.encoding import decode_numeral, decode_bool
from elc.evaluation.evaluator import Strategy
from elc.interpreter import Interpreter
from elc.printer import print_term


def test_run_evaluates_out():
    itp = Interpreter(max_steps=None)
    result = itp.run("id := \\x. x\nout := id id")
    assert print_term(result) == "\\x. x"


def test_run_without_out():
    itp = Interpreter(max_steps=None)
    with pytest.raises(ElcNameError):
        itp.run("id := \\x. x")


def test_definitions_persist_between_calls(itp):
    itp.load("two := succ (succ zero)")
    itp.load("four := add two two")
    assert decode_numeral(itp.eval("mul four two")) == 8
    assert decode_bool(itp.eval("and true (not false)")) is True


def test_eval_strategies(itp):
    whnf = itp.eval("(\\x. x) (\\y. (\\z. z) y)", Strategy.CALL_BY_NAME)
    assert print_term(whnf) == "\\y. (\\z. z) y"
    assert print_term(itp.eval("(\\x. x) (\\y. (\\z. z) y)")) == "\\y. y"


def test_stats_and_tracing(itp):
    seen = []
    itp.eval("succ zero", on_step=lambda step, term: seen.append(step))
    assert itp.stats.steps == len(seen) > 0


def test_show(itp):
    assert itp.show("\\a b. a") == "\\a b. a"


def test_readers_persist_across_loads():
    itp = Interpreter(max_steps=None)
    itp.load("~READER | \\l. \\a b c. a | \\l. l |")
    assert len(itp.context.readers) == 1
    itp.load("id := \\x. x")
    assert len(itp.context.readers) == 1


def test_max_steps_from_environment(monkeypatch):
    monkeypatch.setenv("ELC_MAX_STEPS", "25")
    itp = Interpreter()
    assert itp.context.max_steps == 25
    with pytest.raises(EvaluationBudgetExceeded):
        itp.eval("(\\x. x x) (\\x. x x)")


@pytest.mark.parametrize("raw, expected", [("", None), ("  ", None), ("100", 100)])
def test_get_max_steps(monkeypatch, raw, expected):
    monkeypatch.setenv("ELC_MAX_STEPS", raw)
    assert get_max_steps() == expected


@pytest.mark.parametrize("raw", ["0", "-3", "lots"])
def test_get_max_steps_rejects_bad_values(monkeypatch, raw):
    monkeypatch.setenv("ELC_MAX_STEPS", raw)
    with pytest.raises(ValueError):
        get_max_steps()
