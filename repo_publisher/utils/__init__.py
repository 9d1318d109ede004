"""
utils/ — Utilidades compartidas.

Módulos:
- logger.py     → Logging con Rich + archivo rotativo
- validators.py → Validación de token, nombre de repo y owner
"""
