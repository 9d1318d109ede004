"""
cli.py — Punto de entrada de repo-publisher.

Un solo comando: prepara el repo local, lo commitea, crea el repo
en GitHub, configura origin/main y pushea.

Ejemplos:
    repo-publisher --token ghp_xxx --path ./demo --name demo
    repo-publisher -t ghp_xxx -p ./demo -n demo -d "Mi demo" --private
    python -m repo_publisher --path ./demo --name demo   # token desde GITHUB_TOKEN

Códigos de salida:
    0 → publicado, o GitHub rechazó la creación (salida suave)
    1 → cualquier error irrecuperable
    2 → uso incorrecto (opción faltante)

Uso desde código (testing):
    from click.testing import CliRunner
    from repo_publisher.cli import main
    CliRunner().invoke(main, ["--token", "x", "--path", "p", "--name", "n"])
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.markup import escape
from rich.panel import Panel

from repo_publisher import __version__
from repo_publisher.config import load_config
from repo_publisher.publishing.errors import PublishError
from repo_publisher.publishing.publisher import (
    PublishOptions,
    PublishResult,
    RepoPublisher,
)
from repo_publisher.utils.logger import get_logger, console as rich_console

logger = get_logger("repo_publisher.cli")


@click.command()
@click.version_option(version=__version__, prog_name="GitHub Repo Manager")
@click.option(
    "--token", "-t",
    default=None,
    help="Personal access token de GitHub (default: $GITHUB_TOKEN)",
)
@click.option(
    "--path", "-p",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Ruta local donde inicializar el repositorio",
)
@click.option(
    "--name", "-n",
    required=True,
    help="Nombre del repositorio a crear en GitHub",
)
@click.option(
    "--description", "-d",
    default=None,
    help="Descripción del repositorio",
)
@click.option(
    "--private", "-r",
    is_flag=True,
    default=False,
    help="Crear un repositorio privado",
)
@click.option(
    "--owner",
    default=None,
    help="Owner para la URL del remoto (default: $GITHUB_OWNER o el usuario del token)",
)
@click.option("--author-name", default=None, help="Nombre del autor de los commits")
@click.option("--author-email", default=None, help="Email del autor de los commits")
@click.option("--message", "-m", default=None, help="Mensaje del commit")
@click.option(
    "--skip-unchanged",
    is_flag=True,
    default=False,
    help="No crear commit si nada cambió desde HEAD",
)
@click.option(
    "--overwrite-readme",
    is_flag=True,
    default=False,
    help="Reescribir README.md aunque ya exista",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Fallar (exit 1) si GitHub rechaza la creación",
)
def main(
    token: str | None,
    path: Path,
    name: str,
    description: str | None,
    private: bool,
    owner: str | None,
    author_name: str | None,
    author_email: str | None,
    message: str | None,
    skip_unchanged: bool,
    overwrite_readme: bool,
    strict: bool,
):
    """Crea un repositorio en GitHub a partir de un directorio local y lo pushea."""
    try:
        config = load_config()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    token = token or config.github_token
    if not token:
        raise click.UsageError(
            "Missing option '--token' / '-t' (o define GITHUB_TOKEN)."
        )

    # Las opciones del CLI pisan al entorno
    if owner:
        config.github.owner = owner
    if author_name:
        config.author.name = author_name
    if author_email:
        config.author.email = author_email

    options = PublishOptions(
        path=path,
        name=name,
        description=description,
        private=private,
        message=message,
        skip_unchanged=skip_unchanged,
        overwrite_readme=overwrite_readme,
        strict=strict,
    )

    try:
        result = RepoPublisher(token, config).publish(options)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)
    except OSError as e:
        logger.error(f"Error de sistema de archivos: {e}")
        sys.exit(1)
    except PublishError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error inesperado: {e}")
        sys.exit(1)

    if result.stopped_early:
        logger.warning("Publicación detenida: GitHub no creó el repositorio")
        return

    _show_summary(name, result)


# ============================================================
# Funciones auxiliares (privadas)
# ============================================================

def _show_summary(name: str, result: PublishResult) -> None:
    """Muestra resumen después de publicar."""
    commit = result.commit.hexsha[:7] if result.commit else "(sin cambios)"
    create = result.create.outcome.value if result.create else "-"
    rich_console.print(Panel(
        f"[bold]Repositorio:[/bold] {escape(name)}\n"
        f"[bold]Ruta:[/bold] {escape(str(result.path))}\n"
        f"[bold]Commit:[/bold] {commit}\n"
        f"[bold]GitHub:[/bold] {create}\n"
        f"[bold]Remoto:[/bold] {escape(result.remote_url)}\n"
        f"[bold]Origin agregado:[/bold] {'sí' if result.remote_added else 'no'}\n"
        f"[bold]Rama creada:[/bold] {'sí' if result.branch_created else 'no'}",
        title="Repositorio publicado",
        border_style="green",
        highlight=False,
    ))
    logger.success("Push del repositorio local a GitHub completado")


if __name__ == "__main__":
    main()
