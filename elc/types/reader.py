from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from elc.types.term import Term


@dataclass
class Reader:
    """A user defined token class.

    ``matcher`` is applied to the candidate text as a Church char list and must
    normalize to one of the three-way selectors (stop, continue, accept).
    ``compiler`` is applied to the accepted text and its normal form is the
    token's value.
    """

    matcher: Term
    compiler: Term
    cache: Dict[str, int] = field(default_factory=dict)


@dataclass
class CompileContext:
    """State shared by every step of one compilation unit."""

    readers: List[Reader] = field(default_factory=list)
    definitions: Dict[str, Term] = field(default_factory=dict)
    max_steps: Optional[int] = None

    def fork(self) -> CompileContext:
        return CompileContext(list(self.readers), dict(self.definitions), self.max_steps)
