"""
github_api.py — Creación de repositorios con la REST API de GitHub.

Solo se usan dos endpoints:
    POST /user/repos → crea un repo para el usuario autenticado
    GET  /user       → averigua el login cuando no hay owner configurado

Autenticación: token estático como header Bearer. Nada de OAuth
ni GitHub Apps.

Clasificación de la respuesta de POST /user/repos:
    2xx → CREATED
    422 → ALREADY_EXISTS si el cuerpo lo confirma ("name already exists"),
          si no, también se sigue adelante pero se marca como no confirmado
    otro → REJECTED

¿Por qué mirar el cuerpo del 422?
    GitHub responde 422 para cualquier error de validación (nombre
    inválido, por ejemplo), no solo para "ya existe". El código de
    estado solo no basta para saber qué pasó.

Uso:
    from repo_publisher.publishing.github_api import GitHubClient, RepoRequest
    client = GitHubClient(token, config.github)
    result = client.create_repo(RepoRequest(name="mi-repo", private=True))
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import requests

from repo_publisher.config import GitHubConfig
from repo_publisher.publishing.errors import GitHubAPIError
from repo_publisher.utils.logger import get_logger

logger = get_logger("repo_publisher.github")


class CreateOutcome(Enum):
    """Resultado de intentar crear el repositorio remoto."""
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    REJECTED = "rejected"


@dataclass
class RepoRequest:
    """Payload de POST /user/repos."""
    name: str
    description: str | None = None
    private: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description or "",
            "private": self.private,
        }


@dataclass
class CreateRepoResult:
    """
    Respuesta interpretada de POST /user/repos.

    Campos:
        outcome: CREATED, ALREADY_EXISTS o REJECTED
        status_code: Código HTTP recibido
        message: Mensaje de GitHub (campo "message") o razón HTTP
        body: Cuerpo crudo de la respuesta
        confirmed: False cuando un 422 no dice explícitamente "already exists"
        owner_login: owner.login del repo creado, si vino en la respuesta
    """
    outcome: CreateOutcome
    status_code: int
    message: str = ""
    body: str = ""
    confirmed: bool = True
    owner_login: str = ""


def _parse_json(response: requests.Response) -> dict[str, Any]:
    """Intenta parsear el cuerpo como JSON; si no se puede, dict vacío."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def is_already_exists_error(data: dict[str, Any]) -> bool:
    """
    Decide si un cuerpo de error 422 significa "el repo ya existe".

    GitHub lo reporta así:
        {"message": "Repository creation failed.",
         "errors": [{"resource": "Repository", "code": "custom",
                     "field": "name", "message": "name already exists on this account"}]}

    Args:
        data: Cuerpo JSON de la respuesta.

    Returns:
        True si algún error (o el mensaje principal) menciona "already exists".
    """
    for error in data.get("errors") or []:
        if isinstance(error, dict):
            if error.get("code") == "already_exists":
                return True
            if "already exists" in str(error.get("message", "")).lower():
                return True
        elif "already exists" in str(error).lower():
            return True
    return "already exists" in str(data.get("message", "")).lower()


class GitHubClient:
    """
    Cliente mínimo de la REST API de GitHub.

    Args:
        token: Personal access token (Bearer).
        config: Sección github de la configuración.
        session: Sesión de requests (inyectable para tests).
    """

    def __init__(
        self,
        token: str,
        config: GitHubConfig | None = None,
        session: requests.Session | None = None,
    ):
        self._token = token
        self._config = config or GitHubConfig()
        self._session = session or requests.Session()

    def close(self) -> None:
        """Cierra la sesión HTTP (libera las conexiones del pool)."""
        self._session.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
            "User-Agent": self._config.user_agent,
        }

    def _url(self, path: str) -> str:
        return f"{self._config.api_url.rstrip('/')}/{path.lstrip('/')}"

    def create_repo(self, request: RepoRequest) -> CreateRepoResult:
        """
        Crea el repositorio para el usuario autenticado.

        Args:
            request: Nombre, descripción y visibilidad.

        Returns:
            CreateRepoResult con la respuesta ya clasificada.

        Raises:
            GitHubAPIError: Si no hubo respuesta (red, DNS, timeout,
                header inválido).
        """
        url = self._url("/user/repos")
        try:
            response = self._session.post(
                url,
                headers=self._headers(),
                json=request.to_payload(),
                timeout=self._config.timeout,
            )
        except requests.RequestException as e:
            raise GitHubAPIError(f"Error de red al crear el repositorio: {e}") from e

        data = _parse_json(response)
        message = str(data.get("message") or response.reason or "")

        if 200 <= response.status_code < 300:
            owner = data.get("owner") or {}
            return CreateRepoResult(
                outcome=CreateOutcome.CREATED,
                status_code=response.status_code,
                message=message,
                body=response.text,
                owner_login=str(owner.get("login", "")) if isinstance(owner, dict) else "",
            )

        if response.status_code == 422:
            return CreateRepoResult(
                outcome=CreateOutcome.ALREADY_EXISTS,
                status_code=422,
                message=message,
                body=response.text,
                confirmed=is_already_exists_error(data),
            )

        return CreateRepoResult(
            outcome=CreateOutcome.REJECTED,
            status_code=response.status_code,
            message=message,
            body=response.text,
        )

    def get_authenticated_login(self) -> str:
        """
        Obtiene el login del usuario dueño del token (GET /user).

        Returns:
            Login de GitHub (ej: "devdannetworks").

        Raises:
            GitHubAPIError: Si la llamada falla o la respuesta no trae login.
        """
        try:
            response = self._session.get(
                self._url("/user"),
                headers=self._headers(),
                timeout=self._config.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            raise GitHubAPIError(
                f"No se pudo obtener el usuario autenticado: {e}",
                status_code=e.response.status_code if e.response is not None else None,
                body=e.response.text if e.response is not None else "",
            ) from e
        except requests.RequestException as e:
            raise GitHubAPIError(f"Error de red al consultar /user: {e}") from e

        login = _parse_json(response).get("login")
        if not login:
            raise GitHubAPIError(
                "La respuesta de /user no contiene 'login'",
                status_code=response.status_code,
                body=response.text,
            )

        logger.info(f"Usuario autenticado: {login}")
        return str(login)
