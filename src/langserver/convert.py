"""Conversions between analysis records and lsprotocol types."""

from __future__ import annotations

from lsprotocol import types as lsp

from analysis.model import (
    CompletionItem,
    CompletionKind,
    Diagnostic,
    Hover,
    Location,
    Position,
    Range,
    Severity,
    SymbolKind,
    SymbolRecord,
    TextEdit,
)

SEVERITIES = {
    Severity.ERROR: lsp.DiagnosticSeverity.Error,
    Severity.WARNING: lsp.DiagnosticSeverity.Warning,
}

SYMBOL_KINDS = {
    SymbolKind.TYPE: lsp.SymbolKind.Class,
    SymbolKind.ENUM: lsp.SymbolKind.Enum,
    SymbolKind.MODULE: lsp.SymbolKind.Module,
    SymbolKind.METHOD: lsp.SymbolKind.Method,
    SymbolKind.FUNCTION: lsp.SymbolKind.Function,
    SymbolKind.CONSTANT: lsp.SymbolKind.Constant,
    SymbolKind.VARIABLE: lsp.SymbolKind.Variable,
}

COMPLETION_KINDS = {
    CompletionKind.KEYWORD: lsp.CompletionItemKind.Keyword,
    CompletionKind.CLASS: lsp.CompletionItemKind.Class,
    CompletionKind.FUNCTION: lsp.CompletionItemKind.Function,
    CompletionKind.CONSTANT: lsp.CompletionItemKind.Constant,
    CompletionKind.METHOD: lsp.CompletionItemKind.Method,
    CompletionKind.MODULE: lsp.CompletionItemKind.Module,
    CompletionKind.VARIABLE: lsp.CompletionItemKind.Variable,
    CompletionKind.TEXT: lsp.CompletionItemKind.Text,
}


def from_lsp_position(pos: lsp.Position) -> Position:
    return Position(pos.line, pos.character)


def to_lsp_position(pos: Position) -> lsp.Position:
    return lsp.Position(line=pos.line, character=pos.character)


def to_lsp_range(rng: Range) -> lsp.Range:
    return lsp.Range(start=to_lsp_position(rng.start), end=to_lsp_position(rng.end))


def to_lsp_diagnostic(diag: Diagnostic) -> lsp.Diagnostic:
    return lsp.Diagnostic(
        range=to_lsp_range(diag.range),
        message=diag.message,
        severity=SEVERITIES[diag.severity],
        source=diag.source,
    )


def to_lsp_symbol(sym: SymbolRecord) -> lsp.DocumentSymbol:
    rng = to_lsp_range(sym.range)
    return lsp.DocumentSymbol(
        name=sym.name,
        kind=SYMBOL_KINDS[sym.kind],
        range=rng,
        selection_range=rng,
        detail=sym.detail,
    )


def to_lsp_hover(hover: Hover) -> lsp.Hover:
    return lsp.Hover(
        contents=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=hover.contents),
        range=to_lsp_range(hover.range) if hover.range else None,
    )


def to_lsp_location(loc: Location) -> lsp.Location:
    return lsp.Location(uri=loc.uri, range=to_lsp_range(loc.range))


def to_lsp_text_edit(edit: TextEdit) -> lsp.TextEdit:
    return lsp.TextEdit(range=to_lsp_range(edit.range), new_text=edit.replacement)


def to_lsp_completion(item: CompletionItem) -> lsp.CompletionItem:
    return lsp.CompletionItem(
        label=item.label,
        kind=COMPLETION_KINDS[item.kind],
        detail=item.detail,
        insert_text=item.insert_text,
        insert_text_format=lsp.InsertTextFormat.Snippet if item.snippet else None,
    )
