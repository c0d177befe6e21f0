import pytest

from elc.types.term import Variable, Abstraction, Application, Thunk, MemoCell
from elc.evaluation.substitution import (
    shift,
    substitute,
    contract,
    resolve_all_thunks,
    ast_equals,
    free_indices,
)


@pytest.mark.parametrize(
    "term, cutoff, amount, expected",
    [
        (Variable(0), 0, 2, Variable(2)),
        (Variable(0), 1, 2, Variable(0)),
        (Abstraction(Variable(0)), 0, 1, Abstraction(Variable(0))),
        (Abstraction(Variable(1)), 0, 1, Abstraction(Variable(2))),
        (Application(Variable(3), Abstraction(Variable(4))), 0, -1,
         Application(Variable(2), Abstraction(Variable(3)))),
    ]
)
def test_shift(term, cutoff, amount, expected):
    assert shift(term, cutoff, amount) == expected


def test_shift_does_not_enter_thunks():
    cell = MemoCell()
    thunk = Thunk(Variable(0), cell, 0)
    shifted = shift(Abstraction(thunk), 0, 3)
    assert isinstance(shifted.body, Thunk)
    assert shifted.body.cell is cell
    assert shifted.body.shift == 3
    # the original is untouched
    assert thunk.shift == 0


def test_substitute_replaces_and_closes_gap():
    term = Application(Variable(0), Variable(1))
    assert substitute(term, 0, lambda: Variable(5)) == Application(Variable(5), Variable(0))


def test_substitute_shifts_supplied_term_under_binders():
    term = Abstraction(Variable(1))
    assert substitute(term, 0, lambda: Variable(0)) == Abstraction(Variable(1))


def test_substitute_calls_supplier_at_most_once():
    calls = []

    def supplier():
        calls.append(1)
        return Variable(7)

    result = substitute(Application(Variable(0), Abstraction(Variable(1))), 0, supplier)
    assert result == Application(Variable(7), Abstraction(Variable(8)))
    assert len(calls) == 1

    substitute(Variable(3), 0, supplier)
    assert len(calls) == 1


def test_contract_shares_one_memo_cell():
    body = Application(Variable(0), Abstraction(Variable(1)))
    result = contract(Abstraction(body), Variable(9))
    left, right = result.left, result.right.body
    assert isinstance(left, Thunk) and isinstance(right, Thunk)
    assert left.cell is right.cell
    assert (left.shift, right.shift) == (0, 1)


def test_contract_decrements_thunks_in_body():
    inner = Thunk(Variable(0), MemoCell(), 2)
    result = contract(Abstraction(inner), Variable(0))
    assert result.shift == 1 and result.cell is inner.cell


def test_memo_cell_is_written_once():
    cell = MemoCell()
    assert cell.store("cbn", Variable(0)) == Variable(0)
    assert cell.store("cbn", Variable(1)) == Variable(0)
    assert cell.normal is None


def test_resolve_all_thunks():
    term = Abstraction(Application(Thunk(Variable(0), MemoCell(), 1), Variable(0)))
    assert resolve_all_thunks(term) == Abstraction(Application(Variable(1), Variable(0)))


def test_ast_equals_ignores_binder_names():
    assert ast_equals(Abstraction(Variable(0), "a"), Abstraction(Variable(0), "b"))
    assert not ast_equals(Abstraction(Variable(0)), Abstraction(Variable(1)))
    thunk = Thunk(Variable(0), MemoCell())
    assert ast_equals(Application(thunk, thunk), Application(thunk, thunk))
    assert not ast_equals(thunk, Thunk(Variable(0), MemoCell()))


def test_deep_terms_do_not_recurse():
    term = Variable(0)
    for _ in range(20_000):
        term = Abstraction(Application(term, Variable(0)))
    shifted = shift(term, 0, 1)
    assert ast_equals(shift(shifted, 0, -1), term)
    assert free_indices(term) == set()
