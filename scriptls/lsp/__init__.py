"""Language Server Protocol implementation for scriptls."""

from .server import ScriptLanguageServer, create_server

__all__ = [
    "ScriptLanguageServer",
    "create_server",
]
