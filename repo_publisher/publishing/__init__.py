"""
publishing/ — Todo lo relacionado con publicar el repositorio.

Módulos:
- local_repo.py → Operaciones Git locales (init, commit, remoto, rama, push)
- github_api.py → Creación del repo con la REST API de GitHub
- publisher.py  → El procedimiento completo, en orden
- errors.py     → Errores propios
"""
