from elc.compiler.resolve import to_de_bruijn
from elc.compiler.linker import Linker, link_program, link_statements, merge_programs
from elc.compiler.compile import compile_unit, run_program, entry_point, ENTRY_POINT
from elc.types.reader import CompileContext
