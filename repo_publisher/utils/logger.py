"""
logger.py — Logging para repo-publisher usando Rich + archivo.

Dual output:
- Rich console: colores para uso interactivo en la terminal
- Archivo rotativo: logs/repo-publisher.log para revisar una corrida después

La ubicación del archivo se controla con REPO_PUBLISHER_LOG_DIR.
Si la variable existe pero está vacía, no se escribe archivo.

Uso:
    from repo_publisher.utils.logger import get_logger, console
    logger = get_logger("repo_publisher.git")
    logger.info("Inicializando repositorio...")
    logger.success("Push completado")
    logger.error("No se pudo crear el repositorio")
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

_in_pytest = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ

publisher_theme = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "step": "bold magenta",
})

# Consola global — se usa en todo el proyecto
console = Console(theme=publisher_theme)

# Errores van a stderr (el cuerpo de una respuesta rechazada, por ejemplo)
error_console = Console(theme=publisher_theme, stderr=True)

# ================================================================
# File logging setup
# ================================================================

_file_logger: logging.Logger | None = None


def _setup_file_logger() -> logging.Logger:
    """Configura el logger de archivo con rotacion."""
    global _file_logger
    if _file_logger is not None:
        return _file_logger

    log_dir_env = os.environ.get("REPO_PUBLISHER_LOG_DIR")

    # No crear logs en pytest ni cuando se desactivan explícitamente
    if _in_pytest or log_dir_env == "":
        _file_logger = logging.getLogger("repo_publisher.null")
        _file_logger.addHandler(logging.NullHandler())
        _file_logger.propagate = False
        return _file_logger

    log_dir = Path(log_dir_env or "logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    _file_logger = logging.getLogger("repo_publisher.file")
    _file_logger.setLevel(logging.DEBUG)
    _file_logger.propagate = False

    # Evitar handlers duplicados
    if not _file_logger.handlers:
        handler = RotatingFileHandler(
            log_dir / "repo-publisher.log",
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=5,
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        _file_logger.addHandler(handler)

    return _file_logger


class PublisherLogger:
    """
    Logger que usa Rich para la terminal + archivo para post-mortem.

    Cada módulo crea su propio logger con un nombre para
    identificar de dónde viene cada mensaje.

    Args:
        name: Nombre del módulo (ej: "repo_publisher.github")
    """

    def __init__(self, name: str):
        self._name = name
        self._file = _setup_file_logger()

    def info(self, message: str) -> None:
        """Mensaje informativo (cyan)."""
        console.print(f"[info]i  {escape(message)}[/info]", highlight=False)
        self._file.info(f"[{self._name}] {message}")

    def success(self, message: str) -> None:
        """Mensaje de éxito (verde)."""
        console.print(f"[success][OK] {escape(message)}[/success]", highlight=False)
        self._file.info(f"[{self._name}] OK: {message}")

    def warning(self, message: str) -> None:
        """Mensaje de advertencia (amarillo)."""
        console.print(f"[warning][!] {escape(message)}[/warning]", highlight=False)
        self._file.warning(f"[{self._name}] {message}")

    def error(self, message: str) -> None:
        """Mensaje de error (rojo, a stderr)."""
        error_console.print(f"[error][X] {escape(message)}[/error]", highlight=False)
        self._file.error(f"[{self._name}] {message}")

    def step(self, number: int, total: int, message: str) -> None:
        """Mensaje de paso en un proceso."""
        console.print(f"[step]  [{number}/{total}] {escape(message)}[/step]", highlight=False)
        self._file.info(f"[{self._name}] [{number}/{total}] {message}")


def get_logger(name: str = "repo_publisher") -> PublisherLogger:
    """
    Obtiene un logger para el módulo especificado.

    Args:
        name: Nombre del módulo.

    Returns:
        PublisherLogger configurado.
    """
    return PublisherLogger(name)
