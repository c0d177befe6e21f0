from elc.evaluation.substitution import (
    shift,
    substitute,
    contract,
    resolve_all_thunks,
    ast_equals,
)
from elc.evaluation.machine import Machine, MachineStats
from elc.evaluation.evaluator import Strategy, evaluate, call_by_name_eval, normal_eval
