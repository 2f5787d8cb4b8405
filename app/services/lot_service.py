"""
Libro de lotes de Farmacia.

Un lote es una reserva sellada. Solo se abre (se consume) cuando el stock en
piso del insumo llegó a cero, y se abre entero: toda su cantidad restante
pasa al stock en piso en un único paso. No hay consumo parcial.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import (
    ConflictException,
    NotFoundException,
    PreconditionException,
    ValidationException,
)
from app.core.locks import supply_locks
from app.models.farmacia import Lot
from app.schemas.farmacia import LotCreate, LotResponse, SupplyResponse
from app.services.alert_service import evaluate_after_mutation
from app.services.supply_service import load_supply

logger = logging.getLogger(__name__)


def _lot_to_response(lot: Lot) -> LotResponse:
    return LotResponse.model_validate(lot)


def fefo_order():
    """Vencimiento ascendente, sin fecha al final, empates por orden de alta."""
    return (
        Lot.fecha_vencimiento.is_(None).asc(),
        Lot.fecha_vencimiento.asc(),
        Lot.id.asc(),
    )


async def register_lot(
    db: AsyncSession, supply_id: int, data: LotCreate
) -> LotResponse:
    """
    Registra un lote recibido con cantidad_restante = cantidad.
    No modifica el stock en piso.
    """
    label = (data.lote or "").strip()
    if not label:
        raise ValidationException("El lote es obligatorio")
    if data.cantidad is None or data.cantidad <= 0:
        raise ValidationException("La cantidad debe ser mayor a 0")

    async with supply_locks.shared(supply_id):
        supply = await load_supply(db, supply_id)
        lot = Lot(
            insumo_id=supply.id,
            lote=label,
            cantidad=data.cantidad,
            cantidad_restante=data.cantidad,
            fecha_vencimiento=data.fecha_vencimiento,
            precio_unitario=data.precio_unitario,
            ubicacion=data.ubicacion,
            activo=True,
        )
        db.add(lot)
        await db.commit()
        await db.refresh(lot)

    logger.info(
        f"Lote {lot.lote} [{lot.id}] registrado para insumo {supply_id}: "
        f"{lot.cantidad} u, vence {lot.fecha_vencimiento}"
    )
    evaluate_after_mutation(supply)
    return _lot_to_response(lot)


async def list_lots(db: AsyncSession, supply_id: int) -> list[LotResponse]:
    """Lotes del insumo en orden FEFO."""
    await load_supply(db, supply_id)
    result = await db.execute(
        select(Lot).where(Lot.insumo_id == supply_id).order_by(*fefo_order())
    )
    return [_lot_to_response(lot) for lot in result.scalars().all()]


async def consume_lot(
    db: AsyncSession, supply_id: int, lot_id: int
) -> SupplyResponse:
    """
    Abre el lote `lot_id`: su cantidad restante pasa entera al stock en piso.

    - NotFoundException: insumo inexistente, lote ajeno o ya agotado.
    - PreconditionException: el stock en piso no es 0.
    - ConflictException: otra operación modificó el insumo en paralelo.

    Los cuatro cambios (stock, restante, lote/vencimiento/precio del insumo)
    se confirman juntos o no se aplica ninguno.
    """
    async with supply_locks.exclusive(supply_id):
        supply = await load_supply(db, supply_id, for_update=True)

        result = await db.execute(
            select(Lot)
            .where(Lot.id == lot_id, Lot.insumo_id == supply_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        lot = result.scalar_one_or_none()
        if not lot or lot.cantidad_restante == 0:
            await db.rollback()
            raise NotFoundException("Lote no encontrado o ya consumido")

        floor_stock = supply.stock
        if floor_stock != 0:
            await db.rollback()
            logger.info(
                f"Consumo de lote {lot_id} rechazado: insumo {supply_id} "
                f"tiene stock {floor_stock}"
            )
            raise PreconditionException(
                "Solo se puede consumir un lote cuando el stock en piso es 0 "
                f"(stock actual: {floor_stock})"
            )

        opened = lot.cantidad_restante
        supply.stock = opened
        supply.lote = lot.lote
        supply.fecha_vencimiento = lot.fecha_vencimiento
        supply.precio = lot.precio_unitario
        lot.cantidad_restante = 0
        lot.consumido_en = datetime.now(timezone.utc)

        try:
            await db.commit()
        except StaleDataError:
            await db.rollback()
            logger.warning(f"Conflicto al consumir lote {lot_id} del insumo {supply_id}")
            raise ConflictException(
                "El insumo fue modificado por otra operación, intente nuevamente"
            )
        supply = await load_supply(db, supply_id)

    logger.info(
        f"Lote {lot.lote} [{lot_id}] consumido: insumo {supply_id} stock={opened}"
    )
    return evaluate_after_mutation(supply)
