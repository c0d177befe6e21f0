from elc.types.term import (
    Term,
    Variable,
    Abstraction,
    Application,
    Thunk,
    MemoCell,
)
from elc.types.raw import (
    RawTerm,
    RawVariable,
    RawAbstraction,
    RawApplication,
    RawLiteral,
    Reference,
    Definition,
    Import,
    Statement,
)
from elc.types.reader import Reader, CompileContext
