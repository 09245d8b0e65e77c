"""Handler registration helpers."""

from __future__ import annotations

from . import configuration, documents, formatting


def register_all(server) -> None:
    documents.register(server)
    configuration.register(server)
    formatting.register(server)


__all__ = ["register_all"]
