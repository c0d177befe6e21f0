"""Language server for extensible lambda calculus buffers.

This package provides:
- A pygls-based Language Server.
- An indexer that compiles a buffer for diagnostics without evaluating definitions.
"""

__all__ = [
    "server",
    "indexer",
]
