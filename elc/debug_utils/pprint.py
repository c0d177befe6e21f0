from typing import Optional

from elc.types.term import Term, Variable, Abstraction, Application, Thunk
from elc.types.raw import Reference

# ----------------- ANSI colors -----------------
RESET = "\033[0m"
COLOR_LAMBDA = "\033[92m"
COLOR_APPLICATION = "\033[90m"
COLOR_VARIABLE = "\033[94m"
COLOR_FREE_VARIABLE = "\033[91m"
COLOR_THUNK = "\033[95m"
COLOR_REFERENCE = "\033[93m"

# ----------------- Defaults -----------------
DEFAULT_OPTIONS = {
    "max_line_length": 80,
    "max_depth": 12,
    "display_legend": False,
    "color_lambda": True,
    "color_application": True,
    "color_variables": True,
    "color_free_variables": True,
    "color_thunks": True,
    "color_references": True,
}

PLAIN_OPTIONS = {
    **DEFAULT_OPTIONS,
    **{k: False for k in DEFAULT_OPTIONS if k.startswith("color_")},
}


# ----------------- Colorize utility -----------------
def colorize(text: str, kind: str, options: dict = DEFAULT_OPTIONS) -> str:
    color = {
        "lambda": COLOR_LAMBDA,
        "application": COLOR_APPLICATION,
        "variables": COLOR_VARIABLE,
        "free_variables": COLOR_FREE_VARIABLE,
        "thunks": COLOR_THUNK,
        "references": COLOR_REFERENCE,
    }[kind]
    if options.get(f"color_{kind}", True):
        return f"{color}{text}{RESET}"
    return text


def _legend() -> str:
    items = [
        f"{COLOR_LAMBDA}lam{RESET}",
        f"{COLOR_APPLICATION}app{RESET}",
        f"{COLOR_VARIABLE}bound var{RESET}",
        f"{COLOR_FREE_VARIABLE}free var{RESET}",
        f"{COLOR_THUNK}thunk{RESET}",
        f"{COLOR_REFERENCE}unlinked ref{RESET}",
    ]
    return "Color Key: " + " | ".join(items) + "\n"


# ----------------- Pretty printer -----------------
def sexpr(
    term: Term,
    indent: int = 0,
    options: dict = DEFAULT_OPTIONS,
    _names: Optional[tuple] = None,
    _current_depth: int = 0,
) -> str:
    """S-expression dump of a term: ``(lam x (app (var 0 x) (var 0 x)))``.

    Thunks are shown with their pending shift and are not forced. Subterms
    deeper than ``max_depth`` are elided.
    """
    legend_str = _legend() if options.get("display_legend", False) and indent == 0 else ""
    if _current_depth >= options.get("max_depth", 12):
        return legend_str + "…"

    def sub(child: Term, names) -> str:
        return sexpr(child, indent + 1, options, names, _current_depth + 1)

    if isinstance(term, Variable):
        names, i = _names, term.index
        while names is not None and i > 0:
            names, i = names[1], i - 1
        if names is None:
            return legend_str + colorize(f"(var {term.index})", "free_variables", options)
        return legend_str + colorize(f"(var {term.index} {names[0]})", "variables", options)
    if isinstance(term, Reference):
        return legend_str + colorize(f"(ref {term.name})", "references", options)

    if isinstance(term, Abstraction):
        head = colorize("lam", "lambda", options)
        parts = [f"{head} {term.param}", sub(term.body, (term.param, _names))]
    elif isinstance(term, Application):
        head = colorize("app", "application", options)
        parts = [head, sub(term.left, _names), sub(term.right, _names)]
    elif isinstance(term, Thunk):
        head = colorize(f"thunk {term.shift:+d}", "thunks", options)
        # the inner term lives outside the binders around the thunk
        parts = [head, sexpr(term.inner, indent + 1, options, None, _current_depth + 1)]
    else:
        raise TypeError(f"cannot print {term!r}")

    single_line = "(" + " ".join(parts) + ")"
    if "\n" not in single_line and len(single_line) + indent * 2 <= options.get("max_line_length", 80):
        return legend_str + single_line

    aligned_lines = ["(" + parts[0]]
    for part in parts[1:]:
        aligned_lines.append("  " * (indent + 1) + part)
    aligned_lines[-1] += ")"
    return legend_str + "\n".join(aligned_lines)
