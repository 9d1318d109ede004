"""
config.py — Carga la configuración de repo-publisher.

Este archivo se encarga de:
1. Cargar .env (secretos: token de GitHub, identidad del autor)
2. Leer las variables de entorno conocidas
3. Convertir valores con tipo (timeout) con mensajes de error claros

No hay archivo de configuración propio: todo viene del entorno
(o de un .env) y las opciones del CLI tienen prioridad sobre ambos.

Variables reconocidas:
    GITHUB_TOKEN                 → token por defecto si no se pasa --token
    GITHUB_OWNER                 → owner de los repos (si no, se consulta /user)
    GITHUB_API_URL               → base de la API (default https://api.github.com)
    GITHUB_HOST                  → host para la URL del remoto (default github.com)
    REPO_PUBLISHER_AUTHOR_NAME   → nombre del autor de los commits
    REPO_PUBLISHER_AUTHOR_EMAIL  → email del autor de los commits
    REPO_PUBLISHER_TIMEOUT       → timeout HTTP en segundos

Uso:
    from repo_publisher.config import load_config
    config = load_config()
    print(config.github.api_url)  # "https://api.github.com"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


# ============================================================
# Dataclasses de configuración
# ============================================================

@dataclass
class AuthorConfig:
    """Identidad usada como author y committer."""
    name: str = "Devdannetworks"
    email: str = "officialdevduncan@gmail.com"


@dataclass
class GitHubConfig:
    """Configuración de la API de GitHub."""
    api_url: str = "https://api.github.com"
    host: str = "github.com"
    owner: str = ""
    user_agent: str = "GitHub-Repo-Manager"
    timeout: float = 30.0


@dataclass
class GitConfig:
    """Configuración del lado Git."""
    remote_name: str = "origin"
    default_branch: str = "main"
    commit_message: str = "Initial commit"
    placeholder_file: str = "README.md"
    placeholder_content: str = "# Initial Commit"


@dataclass
class AppConfig:
    """Configuración completa de la aplicación."""
    author: AuthorConfig = field(default_factory=AuthorConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    git: GitConfig = field(default_factory=GitConfig)

    # Valor del .env (nunca se imprime)
    github_token: str = ""


# ============================================================
# Funciones de carga
# ============================================================

def _find_env_file() -> Path | None:
    """
    Busca un .env hacia arriba desde el directorio actual.

    Permite ejecutar la herramienta desde cualquier subdirectorio
    de un proyecto que tenga su .env en la raíz.
    """
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


def _parse_timeout(value: str) -> float:
    """Convierte REPO_PUBLISHER_TIMEOUT a float positivo."""
    try:
        timeout = float(value)
    except ValueError as e:
        raise ValueError(
            f"REPO_PUBLISHER_TIMEOUT debe ser un número, no '{value}'"
        ) from e
    if timeout <= 0:
        raise ValueError("REPO_PUBLISHER_TIMEOUT debe ser mayor que cero")
    return timeout


def load_config(env_path: Path | None = None) -> AppConfig:
    """
    Carga la configuración completa desde .env y el entorno.

    Pasos:
    1. Carga .env (sin pisar variables ya definidas en el entorno)
    2. Lee cada variable conocida, usando el default si falta

    Args:
        env_path: Ruta a un .env. Si es None, busca automáticamente.

    Returns:
        AppConfig lista para usar.

    Raises:
        ValueError: Si REPO_PUBLISHER_TIMEOUT no es un número válido.
    """
    # Paso 1: Cargar .env
    if env_path is None:
        env_path = _find_env_file()
    if env_path is not None and env_path.exists():
        load_dotenv(env_path)

    # Paso 2: Leer variables
    config = AppConfig()
    env = os.environ

    config.github_token = env.get("GITHUB_TOKEN", "")

    config.author.name = env.get("REPO_PUBLISHER_AUTHOR_NAME") or config.author.name
    config.author.email = env.get("REPO_PUBLISHER_AUTHOR_EMAIL") or config.author.email

    config.github.owner = env.get("GITHUB_OWNER", "")
    config.github.api_url = (
        env.get("GITHUB_API_URL") or config.github.api_url
    ).rstrip("/")
    config.github.host = env.get("GITHUB_HOST") or config.github.host

    timeout = env.get("REPO_PUBLISHER_TIMEOUT")
    if timeout:
        config.github.timeout = _parse_timeout(timeout)

    return config
