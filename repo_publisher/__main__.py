"""
__main__.py — Permite ejecutar repo-publisher como módulo.

    python -m repo_publisher --token ghp_xxx --path ./demo --name demo
"""

from repo_publisher.cli import main

if __name__ == "__main__":
    main()
