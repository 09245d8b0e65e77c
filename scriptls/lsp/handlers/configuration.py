"""Configuration change handler."""

from __future__ import annotations

from lsprotocol.types import WORKSPACE_DID_CHANGE_CONFIGURATION, DidChangeConfigurationParams

from scriptls.config import settings_from_client

from ..workspace import WorkspaceService


def register(server) -> None:
    workspace: WorkspaceService = server.workspace_service

    @server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
    async def _did_change_configuration(ls, params: DidChangeConfigurationParams) -> None:
        workspace.update_settings(settings_from_client(params.settings))
