# Extensible lambda calculus.
#
# Source goes through the tokenizer (with user defined reader tokens), the
# Pratt parser, de Bruijn resolution and the linker, and comes out as closed
# Term values. Terms are evaluated by an explicit-stack call-by-need machine
# and rendered back to text by the printer.

from elc.errors import (
    ElcError,
    TokenizeError,
    ParseError,
    ResolutionError,
    ReaderSemanticError,
    EvaluationBudgetExceeded,
    ElcNameError,
    ImportResolutionError,
    SourceSpan,
    Diagnostic,
)
from elc.types import (
    Term,
    Variable,
    Abstraction,
    Application,
    Thunk,
    MemoCell,
    Reader,
    CompileContext,
)
from elc.evaluation import (
    Strategy,
    evaluate,
    call_by_name_eval,
    normal_eval,
    shift,
    substitute,
    resolve_all_thunks,
    ast_equals,
)
from elc.reader import tokenize, parse_expression, parse_program, parse_traditional_program, parse_arrow_program
from elc.compiler import link_program, link_statements, merge_programs
from elc.printer import print_term
from elc.interpreter import Interpreter
