"""
repo-publisher — Publica un directorio local como repositorio nuevo en GitHub.

Este paquete contiene:
- publishing/ → Git local, API de GitHub y el procedimiento completo
- utils/      → Logger y validaciones
- config.py   → Configuración desde .env y variables de entorno
- cli.py      → El comando de línea

Uso:
    repo-publisher --token ghp_xxx --path ./demo --name demo
    python -m repo_publisher --path ./demo --name demo --private
"""

__version__ = "1.0.0"
