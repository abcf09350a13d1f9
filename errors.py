# backend/errors.py
"""Errores de dominio con su tipo (kind) y el código HTTP asociado."""

VALIDATION = "validation"
NOT_FOUND = "not_found"
STORAGE = "storage"


class MusicStreamError(Exception):
    kind: str = "internal"
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MusicStreamError):
    """Entrada mal formada o faltante. Nunca se reintenta."""
    kind = VALIDATION
    status_code = 400


class NotFoundError(MusicStreamError):
    kind = NOT_FOUND
    status_code = 404


class StorageError(MusicStreamError):
    """Fallo de E/S al guardar o leer archivos."""
    kind = STORAGE
    status_code = 500
