"""
validators.py -- Validacion de entradas antes de tocar Git o la API.

Hay tres tipos de validacion:
1. Token: que pueda viajar en un header HTTP y dentro de una URL
2. Nombre del repositorio: que GitHub lo acepte tal cual
3. Owner: que sea un login valido de GitHub

Cada funcion retorna una tupla (es_valido, mensaje_de_error).
Si es_valido es True, el mensaje sera una cadena vacia.

Uso:
    from repo_publisher.utils.validators import validate_repo_name

    valido, error = validate_repo_name("mi-repo")
    if not valido:
        raise ValueError(error)
"""

from __future__ import annotations

import re


# =====================================================================
# Constantes de validacion
# =====================================================================

# GitHub acepta letras, numeros, guion, guion bajo y punto.
# Los nombres "." y ".." estan reservados.
REPO_NAME_PATTERN: re.Pattern[str] = re.compile(r"^[A-Za-z0-9._-]+$")
MAX_REPO_NAME_LENGTH: int = 100
RESERVED_REPO_NAMES: frozenset[str] = frozenset({".", ".."})

# Logins de GitHub: alfanumericos y guiones simples, sin guion al inicio o final.
OWNER_PATTERN: re.Pattern[str] = re.compile(
    r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$"
)

# Caracteres que rompen un header HTTP o la parte userinfo de una URL.
TOKEN_FORBIDDEN_PATTERN: re.Pattern[str] = re.compile(r"[\s\x00-\x1f\x7f@/:]")


def validate_token(token: str) -> tuple[bool, str]:
    """
    Valida que el token pueda usarse como header Bearer y en la URL del remoto.

    Un token con saltos de linea o espacios produciria un header
    invalido; uno con '@', '/' o ':' romperia la URL del remoto.

    Args:
        token: Personal access token de GitHub.

    Returns:
        Tupla (es_valido, mensaje_de_error).
    """
    if not isinstance(token, str) or not token:
        return False, "El token no puede estar vacio"

    match = TOKEN_FORBIDDEN_PATTERN.search(token)
    if match:
        return False, (
            f"El token contiene un caracter invalido en la posicion {match.start()}. "
            "Verifica que no tenga espacios ni saltos de linea"
        )

    return True, ""


def validate_repo_name(name: str) -> tuple[bool, str]:
    """
    Valida el nombre del repositorio a crear en GitHub.

    Es más estricta que GitHub: GitHub acepta nombres con caracteres
    no ASCII o terminados en ".git", pero los normaliza (los reemplaza
    por '-' o quita el sufijo) y el repo creado ya no coincide con la
    URL del remoto que se arma con el nombre pedido. Esos nombres se
    rechazan acá.

    Args:
        name: Nombre del repositorio (sin owner).

    Returns:
        Tupla (es_valido, mensaje_de_error).

    Ejemplo:
        validate_repo_name("mi-proyecto")   # (True, "")
        validate_repo_name("mi proyecto")   # (False, "...")
    """
    if not isinstance(name, str) or not name:
        return False, "El nombre del repositorio no puede estar vacio"

    if len(name) > MAX_REPO_NAME_LENGTH:
        return False, (
            f"El nombre del repositorio es demasiado largo "
            f"({len(name)} chars, max {MAX_REPO_NAME_LENGTH})"
        )

    if name in RESERVED_REPO_NAMES:
        return False, f"'{name}' es un nombre reservado"

    if not REPO_NAME_PATTERN.match(name):
        return False, (
            f"Nombre de repositorio invalido: '{name}'. "
            "Solo se permiten letras, numeros, '.', '-' y '_'"
        )

    if name.lower().endswith(".git"):
        return False, "El nombre del repositorio no debe terminar en '.git'"

    return True, ""


def validate_owner(owner: str) -> tuple[bool, str]:
    """Valida un login de GitHub (usuario u organizacion)."""
    if not isinstance(owner, str) or not owner:
        return False, "El owner no puede estar vacio"

    if not OWNER_PATTERN.match(owner):
        return False, (
            f"Owner invalido: '{owner}'. "
            "Debe ser un login de GitHub (letras, numeros y guiones, max 39)"
        )

    return True, ""
