"""
publisher.py — El procedimiento completo de publicación.

Orden estricto, una sola vez, sin reintentos:
    1. Preparar el repo local (directorio, git init, README.md)
    2. Commit de todo el contenido
    3. Crear el repo en GitHub (POST /user/repos)
    4. Remoto "origin" y rama "main"
    5. Push de main

El paso 3 tiene una salida suave: si GitHub rechaza la creación por
algo que no es un 422, se imprime el cuerpo y la corrida termina sin
error (código de salida 0). Con strict=True ese caso, y un 422 que no
confirma "already exists", se vuelven errores.

Uso:
    from repo_publisher.publishing.publisher import RepoPublisher, PublishOptions
    publisher = RepoPublisher(token, config)
    result = publisher.publish(PublishOptions(path=Path("demo"), name="demo"))
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from repo_publisher.config import AppConfig
from repo_publisher.publishing.errors import GitHubAPIError
from repo_publisher.publishing.github_api import (
    CreateOutcome,
    CreateRepoResult,
    GitHubClient,
    RepoRequest,
)
from repo_publisher.publishing.local_repo import CommitInfo, LocalRepository, mask_url
from repo_publisher.utils.logger import error_console, get_logger
from repo_publisher.utils.validators import (
    validate_owner,
    validate_repo_name,
    validate_token,
)

logger = get_logger("repo_publisher.publisher")

TOTAL_STEPS = 5


@dataclass
class PublishOptions:
    """Entradas de una corrida."""
    path: Path
    name: str
    description: str | None = None
    private: bool = False
    message: str | None = None
    skip_unchanged: bool = False
    overwrite_readme: bool = False
    strict: bool = False


@dataclass
class PublishResult:
    """
    Lo que hizo una corrida.

    Campos:
        path: Directorio publicado
        commit: Commit creado (None si se saltó)
        create: Respuesta clasificada de GitHub
        remote_added: Si se agregó "origin" en esta corrida
        branch_created: Si se creó "main" en esta corrida
        pushed: Si el push terminó bien
        remote_url: URL del remoto con el token oculto
        stopped_early: True si GitHub rechazó la creación (salida suave)
    """
    path: Path
    commit: CommitInfo | None = None
    create: CreateRepoResult | None = None
    remote_added: bool = False
    branch_created: bool = False
    pushed: bool = False
    remote_url: str = ""
    stopped_early: bool = False


def build_remote_url(token: str, host: str, owner: str, name: str) -> str:
    """
    URL HTTPS con el token en la parte userinfo.

    Formato: https://{token}@{host}/{owner}/{name}.git
    """
    return f"https://{token}@{host}/{owner}/{name}.git"


def _require(check: tuple[bool, str]) -> None:
    valido, error = check
    if not valido:
        raise ValueError(error)


class RepoPublisher:
    """
    Publica un directorio local como repositorio nuevo en GitHub.

    Args:
        token: Personal access token de GitHub.
        config: Configuración de la app.
        client: Cliente de GitHub (inyectable para tests).
    """

    def __init__(
        self,
        token: str,
        config: AppConfig,
        client: GitHubClient | None = None,
    ):
        self._token = token
        self._config = config
        # Solo se cierra el cliente que se crea aquí
        self._owns_client = client is None
        self._client = client or GitHubClient(token, config.github)

    def publish(self, options: PublishOptions) -> PublishResult:
        """
        Ejecuta los cinco pasos en orden y libera la sesión HTTP al terminar.

        Returns:
            PublishResult; si stopped_early es True, no hubo remoto ni push.

        Raises:
            ValueError: Token, nombre u owner inválidos.
            OSError: No se pudo crear el directorio o escribir README.md.
            GitOperationError: Falló init, commit, remoto, rama o push.
            GitHubAPIError: Falla de red, o rechazo en modo estricto.
        """
        try:
            return self._run(options)
        finally:
            if self._owns_client:
                self._client.close()

    def _run(self, options: PublishOptions) -> PublishResult:
        _require(validate_token(self._token))
        _require(validate_repo_name(options.name))
        if self._config.github.owner:
            _require(validate_owner(self._config.github.owner))

        result = PublishResult(path=options.path)
        local = LocalRepository(options.path, self._config)

        # Paso 1: Repo local
        logger.step(1, TOTAL_STEPS, f"Preparando repositorio local en {options.path}")
        local.prepare(overwrite_placeholder=options.overwrite_readme)

        # Paso 2: Commit
        logger.step(2, TOTAL_STEPS, "Creando commit")
        result.commit = local.commit_all(
            message=options.message,
            skip_unchanged=options.skip_unchanged,
        )

        # Paso 3: Repo en GitHub
        logger.step(3, TOTAL_STEPS, f"Creando repositorio '{options.name}' en GitHub")
        result.create = self._client.create_repo(RepoRequest(
            name=options.name,
            description=options.description,
            private=options.private,
        ))
        if not self._handle_create_result(result.create, options):
            result.stopped_early = True
            return result

        # Paso 4: Remoto y rama
        logger.step(4, TOTAL_STEPS, "Configurando remoto y rama")
        remote_name = self._config.git.remote_name
        if local.has_remote(remote_name):
            result.remote_url = mask_url(local.repo.remote(remote_name).url)
            logger.info(
                f"El remoto '{remote_name}' ya existe ({result.remote_url}); no se modifica"
            )
        else:
            url = build_remote_url(
                self._token,
                self._config.github.host,
                self._resolve_owner(result.create),
                options.name,
            )
            result.remote_url = mask_url(url)
            logger.info(f"URL del remoto: {result.remote_url}")
            result.remote_added = local.ensure_remote(url, remote_name)
        result.branch_created = local.ensure_branch()

        # Paso 5: Push
        logger.step(5, TOTAL_STEPS, "Pusheando a GitHub")
        local.push()
        result.pushed = True

        return result

    def _handle_create_result(self, create: CreateRepoResult, options: PublishOptions) -> bool:
        """
        Decide si seguir después de POST /user/repos.

        Returns:
            False para la salida suave (REJECTED sin strict).
        """
        if create.outcome is CreateOutcome.CREATED:
            logger.success(f"Repositorio '{options.name}' creado en GitHub")
            return True

        if create.outcome is CreateOutcome.ALREADY_EXISTS:
            if create.confirmed:
                logger.info("El repositorio ya existe; se omite la creación")
                return True
            if options.strict:
                raise GitHubAPIError(
                    f"GitHub respondió 422 sin confirmar que el repo existe: {create.message}",
                    status_code=create.status_code,
                    body=create.body,
                )
            logger.warning(
                f"GitHub respondió 422 ({create.message}); se asume que el repo ya existe"
            )
            return True

        if options.strict:
            raise GitHubAPIError(
                f"No se pudo crear el repositorio ({create.status_code}): {create.body}",
                status_code=create.status_code,
                body=create.body,
            )
        logger.error(f"No se pudo crear el repositorio ({create.status_code})")
        # Cuerpo tal cual llegó: sin markup, emojis ni cortes de línea
        error_console.print(
            create.body, markup=False, emoji=False, highlight=False, soft_wrap=True
        )
        return False

    def _resolve_owner(self, create: CreateRepoResult) -> str:
        """
        Owner para la URL del remoto.

        Prioridad: configuración → owner.login de la respuesta → GET /user.
        """
        if self._config.github.owner:
            return self._config.github.owner
        if create.owner_login:
            return create.owner_login
        owner = self._client.get_authenticated_login()
        _require(validate_owner(owner))
        return owner
