"""
local_repo.py — Todo lo que pasa del lado Git local.

Usa GitPython para interactuar con el repositorio de forma programática.

Flujo:
    1. Crear el directorio si no existe
    2. Abrir el repo existente o hacer git init
    3. Escribir README.md de placeholder (solo si falta)
    4. git add -A
    5. Commit con la identidad configurada (HEAD como único padre, o raíz)
    6. Agregar el remoto "origin" si no existe (nunca se reescribe)
    7. Crear la rama "main" en HEAD si no existe (nunca se recrea)
    8. git push origin refs/heads/main:refs/heads/main

Init, remoto y rama son idempotentes: volver a correr no falla.
El commit no lo es: cada corrida agrega uno nuevo, salvo que se
pida saltarlo cuando el árbol no cambió.

Uso:
    from repo_publisher.publishing.local_repo import LocalRepository
    local = LocalRepository(path, config)
    local.prepare()
    info = local.commit_all()
    local.ensure_remote(url)
    local.ensure_branch()
    local.push()
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import git as gitpython

from repo_publisher.config import AppConfig
from repo_publisher.publishing.errors import GitOperationError
from repo_publisher.utils.logger import get_logger

logger = get_logger("repo_publisher.git")

_USERINFO_PATTERN = re.compile(r"(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*://)[^/@]+@")

_PUSH_FAILED = (
    gitpython.PushInfo.ERROR
    | gitpython.PushInfo.REJECTED
    | gitpython.PushInfo.REMOTE_REJECTED
    | gitpython.PushInfo.REMOTE_FAILURE
)


def mask_url(url: str) -> str:
    """
    Oculta las credenciales de una URL para poder loguearla.

    Ejemplo:
        "https://ghp_abc@github.com/o/r.git" → "https://***@github.com/o/r.git"
    """
    return _USERINFO_PATTERN.sub(r"\g<scheme>***@", url)


@dataclass
class CommitInfo:
    """Datos del commit creado en esta corrida."""
    hexsha: str
    parent_hexsha: str | None
    message: str

    @property
    def is_root(self) -> bool:
        return self.parent_hexsha is None


class LocalRepository:
    """
    Gestiona el repositorio Git local que se va a publicar.

    Args:
        path: Directorio del repositorio (se crea si no existe).
        config: Configuración de la app.
    """

    def __init__(self, path: str | Path, config: AppConfig):
        self._path = Path(path)
        self._config = config
        self._repo: gitpython.Repo | None = None

    @property
    def repo(self) -> gitpython.Repo:
        """Repo abierto; hay que llamar prepare() antes."""
        if self._repo is None:
            raise GitOperationError(
                f"El repositorio en {self._path} no está preparado. Llama prepare() primero."
            )
        return self._repo

    # ============================================================
    # Preparación
    # ============================================================

    def ensure_directory(self) -> bool:
        """
        Crea el directorio destino (recursivamente) si no existe.

        Returns:
            True si hubo que crearlo.

        Raises:
            OSError: Si no se puede crear (permisos, existe como archivo...).
        """
        if self._path.is_dir():
            return False
        self._path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Directorio creado: {self._path}")
        return True

    def open_or_init(self) -> gitpython.Repo:
        """
        Abre el repositorio en la ruta o lo inicializa.

        Solo se reutiliza un repo cuya raíz es exactamente la ruta;
        un directorio dentro de otro repo recibe su propio git init.
        Los repos nuevos nacen con HEAD en la rama por defecto, así
        los commits de corridas posteriores caen en ella.

        Raises:
            GitOperationError: Si la ruta es un repo bare o git init falla.
        """
        try:
            repo = gitpython.Repo(self._path)
            if repo.bare:
                raise GitOperationError(
                    f"{self._path} es un repositorio bare; no tiene árbol de trabajo para commitear"
                )
            logger.info(f"Usando repo existente en {self._path}")
        except (gitpython.InvalidGitRepositoryError, gitpython.NoSuchPathError):
            try:
                repo = gitpython.Repo.init(
                    self._path,
                    initial_branch=self._config.git.default_branch,
                )
            except gitpython.GitCommandError as e:
                raise GitOperationError(f"git init falló en {self._path}: {e}") from e
            logger.info(f"Repo inicializado en {self._path}")

        self._repo = repo
        return repo

    def write_placeholder(self, overwrite: bool = False) -> bool:
        """
        Escribe el README.md de placeholder para que el commit no quede vacío.

        Args:
            overwrite: Si es True, lo reescribe aunque ya exista.

        Returns:
            True si se escribió el archivo.
        """
        placeholder = self._path / self._config.git.placeholder_file
        if placeholder.exists() and not overwrite:
            logger.info(f"{placeholder.name} ya existe; se conserva")
            return False

        placeholder.write_text(self._config.git.placeholder_content, encoding="utf-8")
        logger.info(f"Archivo escrito: {placeholder.name}")
        return True

    def prepare(self, overwrite_placeholder: bool = False) -> gitpython.Repo:
        """Directorio + repo + placeholder, en ese orden."""
        self.ensure_directory()
        repo = self.open_or_init()
        self.write_placeholder(overwrite=overwrite_placeholder)
        return repo

    # ============================================================
    # Commit
    # ============================================================

    def head_commit(self) -> gitpython.Commit | None:
        """Commit al que apunta HEAD, o None si el repo no tiene historia."""
        head = self.repo.head
        if not head.is_valid():
            return None
        return head.commit

    def commit_all(
        self,
        message: str | None = None,
        skip_unchanged: bool = False,
    ) -> CommitInfo | None:
        """
        Hace git add -A y un commit con la identidad configurada.

        Si HEAD apunta a un commit, ese es el único padre; si no,
        el commit es raíz.

        Args:
            message: Mensaje del commit (default: config.git.commit_message).
            skip_unchanged: No commitear si el árbol es igual al de HEAD.

        Returns:
            CommitInfo del commit creado, o None si se saltó.

        Raises:
            GitOperationError: Si el staging o el commit fallan.
        """
        repo = self.repo
        message = message or self._config.git.commit_message
        actor = gitpython.Actor(self._config.author.name, self._config.author.email)

        try:
            repo.git.add(A=True)
            parent = self.head_commit()
            index = repo.index

            if skip_unchanged and parent is not None:
                tree = index.write_tree()
                if tree.binsha == parent.tree.binsha:
                    logger.info("Sin cambios desde HEAD; no se crea commit")
                    return None

            commit = index.commit(
                message,
                parent_commits=[parent] if parent is not None else [],
                author=actor,
                committer=actor,
                head=True,
            )
        except gitpython.GitCommandError as e:
            raise GitOperationError(f"Error creando el commit: {e}") from e

        logger.success(f"Commit creado: {commit.hexsha[:7]} — {message}")
        return CommitInfo(
            hexsha=commit.hexsha,
            parent_hexsha=parent.hexsha if parent is not None else None,
            message=message,
        )

    # ============================================================
    # Remoto y rama
    # ============================================================

    def has_remote(self, name: str | None = None) -> bool:
        name = name or self._config.git.remote_name
        return name in [r.name for r in self.repo.remotes]

    def ensure_remote(self, url: str, name: str | None = None) -> bool:
        """
        Agrega el remoto si no existe. Uno existente no se toca,
        aunque su URL sea distinta (por ejemplo, otro token).

        Returns:
            True si se agregó.
        """
        name = name or self._config.git.remote_name
        if self.has_remote(name):
            logger.info(f"El remoto '{name}' ya existe; no se modifica")
            return False

        try:
            self.repo.create_remote(name, url)
        except gitpython.GitCommandError as e:
            raise GitOperationError(f"No se pudo agregar el remoto '{name}': {e}") from e
        logger.success(f"Remoto '{name}' agregado: {mask_url(url)}")
        return True

    def ensure_branch(self, name: str | None = None) -> bool:
        """
        Crea la rama local en el commit de HEAD si no existe.

        Returns:
            True si se creó.

        Raises:
            GitOperationError: Si no hay commit en HEAD para apuntarla.
        """
        name = name or self._config.git.default_branch
        if name in [h.name for h in self.repo.heads]:
            logger.info(f"La rama '{name}' ya existe; no se recrea")
            return False

        head = self.head_commit()
        if head is None:
            raise GitOperationError(f"No hay commit en HEAD para crear la rama '{name}'")

        try:
            self.repo.create_head(name, head)
        except gitpython.GitCommandError as e:
            raise GitOperationError(f"No se pudo crear la rama '{name}': {e}") from e
        logger.success(f"Rama '{name}' creada en {head.hexsha[:7]}")
        return True

    # ============================================================
    # Push
    # ============================================================

    def push(self, branch: str | None = None, remote_name: str | None = None) -> None:
        """
        Pushea refs/heads/{branch} a refs/heads/{branch} del remoto.

        Raises:
            GitOperationError: Si el remoto rechaza el push (auth,
                non-fast-forward) o git falla.
        """
        branch = branch or self._config.git.default_branch
        remote_name = remote_name or self._config.git.remote_name
        refspec = f"refs/heads/{branch}:refs/heads/{branch}"

        try:
            remote = self.repo.remote(remote_name)
            results = remote.push(refspec=refspec)
        except (gitpython.GitCommandError, ValueError) as e:
            raise GitOperationError(f"Git push falló: {e}") from e

        error = getattr(results, "error", None)
        if error is not None:
            raise GitOperationError(f"Git push falló: {error}") from error

        rechazados = [r for r in results if r.flags & _PUSH_FAILED]
        if rechazados or not results:
            resumen = "; ".join(r.summary.strip() for r in rechazados) or "sin respuesta del remoto"
            raise GitOperationError(f"El remoto rechazó el push de {branch}: {resumen}")

        logger.success(f"Push exitoso a {remote_name}/{branch}")
