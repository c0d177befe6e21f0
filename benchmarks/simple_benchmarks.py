from timeit import timeit

from elc.interpreter import Interpreter
from elc.types.term import Application
from elc.encoding import church_numeral
from elc.reader.lexer import tokenize
from elc.reader.parser import parse_expression
from elc.evaluation.evaluator import Strategy, evaluate
from elc.evaluation.substitution import shift


CHURCH = r"""
succ := \n f x. f (n f x)
add := \m n f x. m f (n f x)
mul := \m n f. m (n f)
pred := \n f x. n (\g h. h (g f)) (\u. x) (\u. u)
"""


def time_strategy(itp: Interpreter, code: str, strategy: Strategy, rounds: int) -> float:
    """Time evaluation only: the expression is parsed once and evaluated repeatedly."""
    term = parse_expression(code, itp.context)
    # Warmup
    evaluate(term, strategy)
    # Timed
    return timeit(lambda: evaluate(term, strategy), number=rounds)


# Index arithmetic on a large closed term (no evaluation involved)

def bench_shift(n: int = 2000, rounds: int = 50) -> float:
    term = Application(church_numeral(n), church_numeral(n))
    shift(term, 0, 1)
    return timeit(lambda: shift(term, 0, 1), number=rounds)


def bench_tokenize(copies: int = 200, rounds: int = 20) -> float:
    source = CHURCH * copies
    tokenize(source)
    return timeit(lambda: tokenize(source), number=rounds)


ADD_CODE = "add (mul (succ (succ (\\f x. f x))) (\\f x. f (f (f x)))) (\\f x. f x)"

# Repeated predecessor is quadratic without sharing
PRED_CODE = "(\\n. pred (pred (pred n))) (mul (\\f x. f (f (f (f x)))) (\\f x. f (f (f (f (f x))))))"


def _print_pair(itp: Interpreter, name: str, code: str, rounds: int) -> None:
    tcbn = time_strategy(itp, code, Strategy.CALL_BY_NAME, rounds)
    tnorm = time_strategy(itp, code, Strategy.FULL_NORMAL, rounds)
    print(f"Benchmark: {name}")
    print(f"  call-by-name: {tcbn:.6f}s  |  normal: {tnorm:.6f}s  [rounds={rounds}]")


if __name__ == "__main__":
    print("Benchmark: shift over two 2000-deep numerals")
    print(f"  time: {bench_shift():.6f}s")
    print("Benchmark: tokenize church definitions")
    print(f"  time: {bench_tokenize():.6f}s")

    itp = Interpreter(CHURCH, max_steps=None)
    _print_pair(itp, "church arithmetic", ADD_CODE, rounds=200)
    _print_pair(itp, "repeated predecessor", PRED_CODE, rounds=50)
