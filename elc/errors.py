from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceSpan:
    """Half-open range of character offsets into a source string."""
    start: int
    end: int

    def __str__(self):
        return f"{self.start}..{self.end}"


@dataclass(frozen=True)
class Diagnostic:
    message: str
    span: SourceSpan | None = None

    def __str__(self):
        if self.span is None:
            return self.message
        return f"{self.message} at {self.span}"


class ElcError(Exception):
    """ Base class for all elc errors"""

    def __init__(self, message: str, span: SourceSpan | None = None):
        super().__init__(message)
        self.message = message
        self.span = span

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [Diagnostic(self.message, self.span)]


class TokenizeError(ElcError):
    """ Raised when no lexical rule matches, or a reader directive is malformed"""


class ParseError(ElcError):
    """ Raised when the token stream does not form a valid expression or program"""


class ReaderSemanticError(ElcError):
    """ Raised when a reader matcher does not return a valid enum variant"""


class ResolutionError(ElcError):
    """ Raised with every unbound or recursive name found while linking a unit"""

    def __init__(self, diagnostics: list[Diagnostic]):
        self._diagnostics = list(diagnostics)
        first = self._diagnostics[0] if self._diagnostics else None
        message = "; ".join(str(d) for d in self._diagnostics) or "resolution failed"
        super().__init__(message, first.span if first else None)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)


class EvaluationBudgetExceeded(ElcError):
    """ Raised when evaluation performs more beta reductions than allowed"""

    def __init__(self, max_steps: int):
        super().__init__(f"evaluation exceeded {max_steps} reduction steps")
        self.max_steps = max_steps


class ElcNameError(ElcError):
    """ Raised when a definition is looked up before it is defined"""


class ImportResolutionError(ElcError):
    """ Raised when an imported file cannot be found or imports itself"""
