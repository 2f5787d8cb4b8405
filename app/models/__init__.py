"""
Modelos SQLAlchemy: exportar todos para que Alembic los detecte.
"""

from app.models.farmacia import Lot, Supplier, Supply

__all__ = [
    "Lot",
    "Supplier",
    "Supply",
]
