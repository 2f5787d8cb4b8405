"""
Excepciones de dominio del inventario de farmacia.

Son resultados esperados y visibles para el usuario, no fallos internos.
No dependen del transporte: la capa HTTP las traduce en `app.main`.
"""

from fastapi import status


class InventoryException(Exception):
    """Base de los errores de negocio del inventario."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Operación de inventario rechazada"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationException(InventoryException):
    """Entrada mal formada o incompleta (422)."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Error de validación"


class PreconditionException(InventoryException):
    """Regla de negocio incumplida, ej: consumir un lote con stock en piso (400)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "La operación no está permitida en el estado actual"


class NotFoundException(InventoryException):
    """Insumo, lote o proveedor inexistente (404)."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Recurso no encontrado"


class ConflictException(InventoryException):
    """Carrera perdida contra otra modificación concurrente (409)."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "El recurso fue modificado por otra operación"
