from .config import AnalyzerConfig, ConfigError
from .model import (
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
from .symbols import build_symbols
from .validator import validate
from .formatter import format_document, apply_edits
from .resolver import hover_at, definition_at
from .completion import complete
from .service import CollectingSink, DocumentStore, LanguageService

__all__ = [
    "AnalyzerConfig",
    "ConfigError",
    "CompletionItem",
    "CompletionKind",
    "Diagnostic",
    "Hover",
    "Location",
    "Position",
    "Range",
    "Severity",
    "SymbolKind",
    "SymbolRecord",
    "TextEdit",
    "build_symbols",
    "validate",
    "format_document",
    "apply_edits",
    "hover_at",
    "definition_at",
    "complete",
    "CollectingSink",
    "DocumentStore",
    "LanguageService",
]
