import pytest

from elc.interpreter import Interpreter
from elc.types.reader import CompileContext


# Church encodings used across the suite, in the extensible syntax.
CHURCH = r"""
true := \t f. t
false := \t f. f
and := \p q. p q p
not := \b. b false true
zero := \f x. x
succ := \n f x. f (n f x)
add := \m n f x. m f (n f x)
mul := \m n f. m (n f)
"""


@pytest.fixture
def itp():
    return Interpreter(CHURCH, max_steps=None)


@pytest.fixture
def church(itp):
    return itp.definitions


@pytest.fixture
def context():
    return CompileContext()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # configuration is read from the environment on every call
    monkeypatch.delenv("ELC_MAX_STEPS", raising=False)
    monkeypatch.delenv("ELC_IMPORT_PATH", raising=False)
