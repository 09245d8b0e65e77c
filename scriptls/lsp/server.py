"""pygls based Language Server entrypoint."""

from __future__ import annotations

from typing import Optional

from lsprotocol.types import INITIALIZE, INITIALIZED, InitializedParams, InitializeParams
from pygls.server import LanguageServer

from scriptls import __version__
from scriptls.config import settings_from_client
from scriptls.formatting import FormattingEngine, create_engine
from scriptls.observability.logging import get_logger

from .formatting import DocumentFormatter, FormattingService
from .handlers import register_all
from .protocol import FormattingCapabilities
from .workspace import WorkspaceService

logger = get_logger("scriptls.lsp.server")


class ScriptLanguageServer(LanguageServer):
    """Concrete LanguageServer wiring the workspace to the formatting service."""

    def __init__(self, engine: Optional[FormattingEngine] = None, engine_name: Optional[str] = None) -> None:
        super().__init__(name="scriptls", version=__version__)
        self.workspace_service = WorkspaceService()
        self._engine = engine
        self._engine_name = engine_name
        self.formatting_service = self.configure_formatting(FormattingCapabilities())
        register_all(self)
        self._register_lifecycle_handlers()

    def configure_formatting(self, capabilities: FormattingCapabilities) -> FormattingService:
        """Build the formatting service for the session's client capabilities."""

        engine = self._engine
        if engine is None:
            name = self._engine_name or self.workspace_service.settings.engine
            try:
                engine = create_engine(name)
            except ValueError as exc:
                logger.warning("%s; falling back to the builtin engine", exc)
                engine = create_engine("builtin")
        formatter = DocumentFormatter(engine, capabilities)
        self.formatting_service = FormattingService(self.workspace_service, formatter)
        return self.formatting_service

    def _register_lifecycle_handlers(self) -> None:
        workspace = self.workspace_service

        @self.feature(INITIALIZE)
        def _on_initialize(ls: "ScriptLanguageServer", params: InitializeParams) -> None:
            workspace.set_root(params.root_uri)
            workspace.load_settings()
            if params.initialization_options:
                workspace.update_settings(settings_from_client(params.initialization_options))
            capabilities = FormattingCapabilities.from_client(params.capabilities)
            service = ls.configure_formatting(capabilities)
            logger.info(
                "Formatting enabled (engine=%s, range=%s)",
                getattr(service.formatter.engine, "name", "unknown"),
                capabilities.range_formatting,
            )

        @self.feature(INITIALIZED)
        async def _on_initialized(ls: "ScriptLanguageServer", params: InitializedParams) -> None:  # noqa: ARG001
            logger.info("Workspace initialised at %s", workspace.root_path)


def create_server(engine: Optional[FormattingEngine] = None, engine_name: Optional[str] = None) -> ScriptLanguageServer:
    return ScriptLanguageServer(engine=engine, engine_name=engine_name)


__all__ = ["ScriptLanguageServer", "create_server"]
