"""
Dragonstone language server.

Registers LSP capabilities on a pygls server and routes every request to a
``LanguageService`` that re-scans the document text held by the pygls
workspace.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from analysis.config import AnalyzerConfig, ConfigError
from analysis.model import Diagnostic
from analysis.service import LanguageService
from analysis.tables import TRIGGER_CHARACTERS

from . import __version__
from .convert import (
    from_lsp_position,
    to_lsp_completion,
    to_lsp_diagnostic,
    to_lsp_hover,
    to_lsp_location,
    to_lsp_symbol,
    to_lsp_text_edit,
)

logger = logging.getLogger(__name__)

SETTINGS_SECTION = "dragonstone"


class WorkspaceDocumentSource:
    """Document source reading the open documents of a pygls workspace."""

    def __init__(self, server: LanguageServer):
        self._server = server

    def get_text(self, uri: str) -> Optional[str]:
        doc = self._server.workspace.text_documents.get(uri)
        return doc.source if doc is not None else None


class PublishingSink:
    """Result sink sending ``textDocument/publishDiagnostics`` notifications."""

    def __init__(self, server: LanguageServer):
        self._server = server

    def publish_diagnostics(self, uri: str, diagnostics: List[Diagnostic]) -> None:
        self._server.text_document_publish_diagnostics(
            lsp.PublishDiagnosticsParams(
                uri=uri, diagnostics=[to_lsp_diagnostic(d) for d in diagnostics]
            )
        )


class DragonstoneLanguageServer(LanguageServer):
    def __init__(self, config: Optional[AnalyzerConfig] = None):
        super().__init__(
            "dragonstone-ls",
            __version__,
            text_document_sync_kind=lsp.TextDocumentSyncKind.Incremental,
        )
        self.service = LanguageService(
            WorkspaceDocumentSource(self), PublishingSink(self), config
        )

    def apply_options(self, options: Any) -> None:
        """Merge client options into the analyzer configuration.

        Invalid options are logged and the previous configuration is kept.
        """
        if not options:
            return
        if not isinstance(options, dict):
            logger.warning("ignoring non-object options: %r", options)
            return
        apply_log_level(options.get("logLevel"))
        try:
            self.service.update_config(self.service.config.merged(options))
        except ConfigError as e:
            logger.warning("invalid configuration: %s", e)

    def revalidate_open_documents(self) -> None:
        for uri in list(self.workspace.text_documents):
            self.service.did_change(uri)


def apply_log_level(raw: Optional[str]) -> None:
    if not raw:
        return
    level = logging.getLevelName(str(raw).upper())
    if isinstance(level, int):
        logging.getLogger().setLevel(level)
    else:
        logger.warning("unknown log level %r", raw)


def create_server(config: Optional[AnalyzerConfig] = None) -> DragonstoneLanguageServer:
    server = DragonstoneLanguageServer(config)
    service = server.service

    @server.feature(lsp.INITIALIZE)
    def on_initialize(params: lsp.InitializeParams):
        server.apply_options(params.initialization_options)
        logger.info("initialized with %s", service.config)

    @server.feature(lsp.WORKSPACE_DID_CHANGE_CONFIGURATION)
    def did_change_configuration(params: lsp.DidChangeConfigurationParams):
        settings = params.settings if isinstance(params.settings, dict) else {}
        server.apply_options(settings.get(SETTINGS_SECTION))
        server.revalidate_open_documents()

    @server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
    def did_open(params: lsp.DidOpenTextDocumentParams):
        service.did_open(params.text_document.uri)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
    def did_change(params: lsp.DidChangeTextDocumentParams):
        service.did_change(params.text_document.uri)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(params: lsp.DidCloseTextDocumentParams):
        service.did_close(params.text_document.uri)

    @server.feature(lsp.TEXT_DOCUMENT_HOVER)
    def hover(params: lsp.HoverParams) -> Optional[lsp.Hover]:
        result = service.hover(
            params.text_document.uri, from_lsp_position(params.position)
        )
        return to_lsp_hover(result) if result else None

    @server.feature(lsp.TEXT_DOCUMENT_DEFINITION)
    def definition(params: lsp.DefinitionParams) -> Optional[lsp.Location]:
        result = service.definition(
            params.text_document.uri, from_lsp_position(params.position)
        )
        return to_lsp_location(result) if result else None

    @server.feature(lsp.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
    def document_symbol(params: lsp.DocumentSymbolParams) -> List[lsp.DocumentSymbol]:
        return [to_lsp_symbol(s) for s in service.document_symbols(params.text_document.uri)]

    @server.feature(lsp.TEXT_DOCUMENT_FORMATTING)
    def formatting(params: lsp.DocumentFormattingParams) -> List[lsp.TextEdit]:
        return [to_lsp_text_edit(e) for e in service.format(params.text_document.uri)]

    @server.feature(
        lsp.TEXT_DOCUMENT_COMPLETION,
        lsp.CompletionOptions(
            trigger_characters=list(TRIGGER_CHARACTERS), resolve_provider=False
        ),
    )
    def completion(params: lsp.CompletionParams) -> List[lsp.CompletionItem]:
        items = service.complete(
            params.text_document.uri, from_lsp_position(params.position)
        )
        return [to_lsp_completion(item) for item in items]

    return server


__all__ = [
    "WorkspaceDocumentSource",
    "PublishingSink",
    "DragonstoneLanguageServer",
    "apply_log_level",
    "create_server",
]
