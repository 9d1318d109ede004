"""
errors.py — Errores propios de la publicación.

Todas heredan de RuntimeError para que el CLI pueda atraparlas
juntas y salir con código 1. La excepción original siempre va
encadenada con `raise ... from e`.
"""

from __future__ import annotations


class PublishError(RuntimeError):
    """Error irrecuperable en cualquier paso de la publicación."""


class GitOperationError(PublishError):
    """Falló una operación Git (init, commit, remote, branch, push)."""


class GitHubAPIError(PublishError):
    """
    Falló una llamada a la API de GitHub.

    Args:
        message: Descripción legible del error.
        status_code: Código HTTP, si hubo respuesta.
        body: Cuerpo de la respuesta, si hubo.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
