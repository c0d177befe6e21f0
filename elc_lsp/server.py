"""
A minimal pygls-based Language Server for extensible lambda calculus.

Features:
- Text synchronization and document store
- Diagnostics: tokenize, parse and resolution errors from compiling the buffer
- Hover: pretty-printed definition of the name under the cursor
- Completion: names defined in the buffer
- Document Symbols: from indexer

Note: Compiling runs reader directives but no definition is ever evaluated.
"""

from __future__ import annotations

from typing import Dict, Optional, List
from dataclasses import dataclass

from pygls.server import LanguageServer
from lsprotocol.types import (
    TextDocumentSyncKind,
    DidOpenTextDocumentParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    Diagnostic,
    DiagnosticSeverity,
    Position,
    Range,
    Hover,
    MarkupContent,
    MarkupKind,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
    HoverParams,
    DocumentSymbolParams,
    DocumentSymbol,
    SymbolKind,
)

from elc_lsp.indexer import build_index, hover_text, word_at, DocumentIndex, DiagnosticInfo


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class ElcLanguageServer(LanguageServer):
    CMD_NAME = "elc-ls"
    VERSION = "0.1.0"

    def __init__(self):
        super().__init__(self.CMD_NAME, self.VERSION, text_document_sync_kind=TextDocumentSyncKind.Full)
        self.documents: Dict[str, DocumentState] = {}


ls = ElcLanguageServer()


# --- Text sync ---
@ls.feature("textDocument/didOpen")
def did_open(params: DidOpenTextDocumentParams):
    uri = params.text_document.uri
    _update(uri, params.text_document.text or "")


@ls.feature("textDocument/didChange")
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    if params.content_changes:
        text = params.content_changes[-1].text
    else:
        text = ls.documents[uri].text if uri in ls.documents else ""
    _update(uri, text)


@ls.feature("textDocument/didClose")
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    if uri in ls.documents:
        del ls.documents[uri]
    ls.publish_diagnostics(uri, [])


def _update(uri: str, text: str) -> None:
    idx = build_index(text)
    ls.documents[uri] = DocumentState(text=text, index=idx)
    ls.publish_diagnostics(uri, [_to_lsp_diagnostic(d) for d in idx.diagnostics])


# --- Diagnostics ---
def _to_lsp_diagnostic(info: DiagnosticInfo) -> Diagnostic:
    return Diagnostic(
        range=Range(
            start=Position(line=info.start[0], character=info.start[1]),
            end=Position(line=info.end[0], character=info.end[1]),
        ),
        message=info.message,
        severity=DiagnosticSeverity.Error,
        source=f"elc-ls ({info.kind})",
    )


# --- Hover ---
@ls.feature("textDocument/hover")
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    word = word_at(state.text, params.position.line, params.position.character)
    if not word:
        return None
    contents = hover_text(state.index, word)
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
@ls.feature("textDocument/completion")
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    items: List[CompletionItem] = []
    if not state:
        return CompletionList(is_incomplete=False, items=items)
    for name in state.index.symbols:
        items.append(
            CompletionItem(
                label=name,
                kind=CompletionItemKind.Function,
                detail=state.index.rendered.get(name),
            )
        )
    return CompletionList(is_incomplete=False, items=items)


# --- Document Symbols ---
@ls.feature("textDocument/documentSymbol")
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = Range(
            start=Position(line=sdef.line, character=sdef.col),
            end=Position(line=sdef.line, character=sdef.col + len(name)),
        )
        symbols.append(
            DocumentSymbol(
                name=name,
                kind=SymbolKind.Function,
                range=rng,
                selection_range=rng,
            )
        )
    return symbols


if __name__ == "__main__":
    # Run the language server over stdio
    ls.start_io()
