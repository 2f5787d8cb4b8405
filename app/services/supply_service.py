"""
Lógica de negocio del catálogo de Farmacia.
Proveedores e insumos: alta, edición, listado, baja lógica y reactivación.
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.core.locks import supply_locks
from app.models.farmacia import Supplier, Supply
from app.schemas.farmacia import (
    SupplierCreate,
    SupplierResponse,
    SupplyCreate,
    SupplyResponse,
    SupplyUpdate,
)
from app.services.alert_service import evaluate_after_mutation, project_supply

logger = logging.getLogger(__name__)


# ── Helpers ───────────────────────────────────────────


async def load_supply(
    db: AsyncSession, supply_id: int, for_update: bool = False
) -> Supply:
    """
    Obtiene el insumo o lanza NotFoundException.
    Siempre relee la fila (y su proveedor) aunque ya esté en la sesión.
    """
    query = (
        select(Supply)
        .where(Supply.id == supply_id)
        .execution_options(populate_existing=True)
    )
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    supply = result.scalar_one_or_none()
    if not supply:
        raise NotFoundException("Insumo no encontrado")
    return supply


async def _ensure_supplier(db: AsyncSession, supplier_id: int | None) -> None:
    if supplier_id is None:
        return
    result = await db.execute(select(Supplier.id).where(Supplier.id == supplier_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundException("Proveedor no encontrado")


# ── Suppliers ─────────────────────────────────────────


async def create_supplier(db: AsyncSession, data: SupplierCreate) -> SupplierResponse:
    supplier = Supplier(
        nombre=data.nombre.strip(),
        ruc=data.ruc,
        telefono=data.telefono,
        email=data.email,
    )
    db.add(supplier)
    await db.commit()
    await db.refresh(supplier)
    return SupplierResponse.model_validate(supplier)


async def list_suppliers(
    db: AsyncSession, activo: bool | None = None
) -> list[SupplierResponse]:
    query = select(Supplier)
    if activo is not None:
        query = query.where(Supplier.activo == activo)
    result = await db.execute(query.order_by(Supplier.nombre.asc()))
    return [SupplierResponse.model_validate(s) for s in result.scalars().all()]


async def get_supplier(db: AsyncSession, supplier_id: int) -> SupplierResponse:
    result = await db.execute(select(Supplier).where(Supplier.id == supplier_id))
    supplier = result.scalar_one_or_none()
    if not supplier:
        raise NotFoundException("Proveedor no encontrado")
    return SupplierResponse.model_validate(supplier)


# ── Supplies ──────────────────────────────────────────


async def create_supply(db: AsyncSession, data: SupplyCreate) -> SupplyResponse:
    """Crea un insumo con su stock inicial y, opcionalmente, lote y vencimiento."""
    await _ensure_supplier(db, data.proveedor_id)

    supply = Supply(**data.model_dump())
    db.add(supply)
    await db.commit()
    supply = await load_supply(db, supply.id)

    logger.info(f"Insumo creado {supply.nombre} [{supply.id}] stock={supply.stock}")
    return evaluate_after_mutation(supply)


async def update_supply(
    db: AsyncSession, supply_id: int, data: SupplyUpdate
) -> SupplyResponse:
    """
    Actualización parcial. Toma la compuerta exclusiva del insumo porque
    puede escribir el stock en piso.
    """
    update_data = data.model_dump(exclude_unset=True)
    if "proveedor_id" in update_data:
        await _ensure_supplier(db, update_data["proveedor_id"])

    async with supply_locks.exclusive(supply_id):
        supply = await load_supply(db, supply_id, for_update=True)
        for key, value in update_data.items():
            if key in ("stock", "stock_minimo", "activo", "nombre") and value is None:
                continue
            setattr(supply, key, value)
        await db.commit()
        supply = await load_supply(db, supply_id)

    logger.info(f"Insumo actualizado [{supply_id}]: {sorted(update_data)}")
    return evaluate_after_mutation(supply)


async def set_active(db: AsyncSession, supply_id: int, activo: bool) -> SupplyResponse:
    """Baja lógica (activo=False) o reactivación. Nunca borra el historial."""
    async with supply_locks.exclusive(supply_id):
        supply = await load_supply(db, supply_id, for_update=True)
        supply.activo = activo
        await db.commit()
        supply = await load_supply(db, supply_id)

    logger.info(f"Insumo [{supply_id}] {'reactivado' if activo else 'dado de baja'}")
    return project_supply(supply)


async def get_supply(db: AsyncSession, supply_id: int) -> SupplyResponse:
    supply = await load_supply(db, supply_id)
    return project_supply(supply)


async def list_supplies(
    db: AsyncSession,
    activo: bool | None = None,
    search: str | None = None,
    categoria: str | None = None,
) -> list[SupplyResponse]:
    query = select(Supply)

    if activo is not None:
        query = query.where(Supply.activo == activo)

    if categoria:
        query = query.where(Supply.categoria == categoria)

    if search:
        query = query.where(
            or_(
                Supply.nombre.ilike(f"%{search}%"),
                Supply.codigo_referencia.ilike(f"%{search}%"),
            )
        )

    result = await db.execute(query.order_by(Supply.nombre.asc(), Supply.id.asc()))
    return [project_supply(s) for s in result.scalars().all()]
