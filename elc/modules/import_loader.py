from __future__ import annotations
from pathlib import Path
from typing import Optional

from elc.config import get_import_roots
from elc.errors import ImportResolutionError, SourceSpan
from elc.types.term import Term
from elc.types.raw import Import
from elc.reader.traditional import parse_traditional_program
from elc.reader.arrow import parse_arrow_program
from elc.compiler.linker import link_statements, merge_programs

SOURCE_SUFFIX = '.lc'

# file syntax by suffix; anything else is read as traditional
SYNTAXES = {'.arrow': parse_arrow_program}


# Map an import string to a file underneath the importer's directory or ELC_IMPORT_PATH

def _import_to_relpath(name: str) -> Path:
    rel = Path(name)
    return rel if rel.suffix else rel.with_suffix(SOURCE_SUFFIX)


def resolve_import(name: str, base_dir: Optional[Path] = None) -> Optional[Path]:
    rel = _import_to_relpath(name)
    if rel.is_absolute():
        return rel if rel.is_file() else None
    roots = ([base_dir] if base_dir is not None else []) + get_import_roots()
    for root in roots:
        candidate = root / rel
        if candidate.is_file():
            return candidate
    return None


class ImportLoader:
    """Loads source files and everything they import, once each."""

    def __init__(self):
        self.loaded: dict[Path, dict[str, Term]] = {}
        self.loading: list[Path] = []

    def load(self, path: Path, span: Optional[SourceSpan] = None) -> dict[str, Term]:
        path = Path(path).resolve()
        if path in self.loaded:
            return self.loaded[path]
        if path in self.loading:
            chain = " -> ".join(p.name for p in self.loading[self.loading.index(path):] + [path])
            raise ImportResolutionError(f"Import cycle: {chain}", span)
        if not path.is_file():
            raise ImportResolutionError(f"Cannot find file '{path}'", span)

        self.loading.append(path)
        try:
            parse = SYNTAXES.get(path.suffix, parse_traditional_program)
            statements = parse(path.read_text(encoding='utf-8'))
            imported: dict[str, Term] = {}
            for statement in statements:
                if isinstance(statement, Import):
                    target = resolve_import(statement.path, path.parent)
                    if target is None:
                        raise ImportResolutionError(
                            f"Cannot find import '{statement.path}' in ELC_IMPORT_PATH",
                            statement.span,
                        )
                    imported = merge_programs(imported, self.load(target, statement.span))
            program = merge_programs(imported, link_statements(statements, imported))
        finally:
            self.loading.pop()
        self.loaded[path] = program
        return program


def load_file(path: Path | str) -> dict[str, Term]:
    return ImportLoader().load(Path(path))


def load_library(name: str) -> dict[str, Term]:
    """Load a library such as ``church`` from ELC_IMPORT_PATH."""
    path = resolve_import(name)
    if path is None:
        raise ImportResolutionError(f"Cannot find library '{name}' in ELC_IMPORT_PATH")
    return load_file(path)
