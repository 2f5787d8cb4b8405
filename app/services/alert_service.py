"""
Evaluador de alertas del inventario de farmacia.

Proyección de solo lectura sobre el estado actual de los insumos:
stock bajo, próximos a vencer, vencidos y banda de severidad del stock.
Se recalcula en cada consulta; no hay alertas persistidas ni caché.
"""

import logging
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.dates import days_between, today as current_date
from app.core.exceptions import ValidationException
from app.models.farmacia import Supply
from app.schemas.farmacia import (
    AlertSummary,
    ExpiryStatus,
    StockLevel,
    SupplierResponse,
    SupplyResponse,
)

logger = logging.getLogger(__name__)


# ── Reglas puras ──────────────────────────────────────


def is_low_stock(stock: int, stock_minimo: int) -> bool:
    """Un mínimo de 0 significa 'sin mínimo configurado' y nunca alerta."""
    return stock_minimo > 0 and stock <= stock_minimo


def stock_level(
    stock: int, stock_minimo: int, fallback: int | None = None
) -> StockLevel:
    """
    Banda de severidad para mostrar el stock en piso.

    - critical: hay mínimo configurado y stock <= mínimo
    - warning: stock <= 2 * mínimo, o <= `fallback` (25) si no hay mínimo
    - normal: el resto
    """
    if fallback is None:
        fallback = get_settings().STOCK_WARNING_FALLBACK
    if is_low_stock(stock, stock_minimo):
        return StockLevel.CRITICAL
    warning_threshold = stock_minimo * 2 if stock_minimo > 0 else fallback
    if stock <= warning_threshold:
        return StockLevel.WARNING
    return StockLevel.NORMAL


def expiry_status(
    fecha_vencimiento: date | None, today: date, horizon_days: int
) -> ExpiryStatus:
    if fecha_vencimiento is None:
        return ExpiryStatus.NO_DATE
    remaining = days_between(today, fecha_vencimiento)
    if remaining < 0:
        return ExpiryStatus.EXPIRED
    if remaining <= horizon_days:
        return ExpiryStatus.EXPIRING_SOON
    return ExpiryStatus.VALID


def project_supply(
    supply: Supply, today: date | None = None, horizon_days: int | None = None
) -> SupplyResponse:
    """Respuesta del insumo con los valores derivados por el evaluador."""
    today = today or current_date()
    if horizon_days is None:
        horizon_days = get_settings().EXPIRY_ALERT_DAYS

    return SupplyResponse(
        id=supply.id,
        nombre=supply.nombre,
        descripcion=supply.descripcion,
        stock=supply.stock,
        stock_minimo=supply.stock_minimo,
        precio=supply.precio,
        unidad_medida=supply.unidad_medida,
        codigo_referencia=supply.codigo_referencia,
        proveedor_id=supply.proveedor_id,
        proveedor=(
            SupplierResponse.model_validate(supply.proveedor)
            if supply.proveedor
            else None
        ),
        fecha_vencimiento=supply.fecha_vencimiento,
        lote=supply.lote,
        ubicacion_almacen=supply.ubicacion_almacen,
        activo=supply.activo,
        categoria=supply.categoria,
        created_at=supply.created_at,
        updated_at=supply.updated_at,
        nivel_stock=stock_level(supply.stock, supply.stock_minimo),
        stock_bajo=is_low_stock(supply.stock, supply.stock_minimo),
        dias_para_vencer=(
            days_between(today, supply.fecha_vencimiento)
            if supply.fecha_vencimiento
            else None
        ),
        estado_vencimiento=expiry_status(supply.fecha_vencimiento, today, horizon_days),
    )


def evaluate_after_mutation(supply: Supply, today: date | None = None) -> SupplyResponse:
    """
    Re-evalúa las alertas de un insumo recién modificado.
    Deja constancia en el log y devuelve la proyección para la respuesta.
    """
    projected = project_supply(supply, today=today)
    if supply.activo and projected.stock_bajo:
        logger.warning(
            f"Stock bajo para {supply.nombre} [{supply.id}]: "
            f"{supply.stock} <= min {supply.stock_minimo}"
        )
    if supply.activo and projected.estado_vencimiento == ExpiryStatus.EXPIRED:
        logger.warning(
            f"Insumo vencido {supply.nombre} [{supply.id}]: {supply.fecha_vencimiento}"
        )
    return projected


# ── Consultas ─────────────────────────────────────────


def _validate_horizon(horizon_days: int) -> None:
    if horizon_days < 0:
        raise ValidationException("El horizonte de días no puede ser negativo")


async def low_stock_alerts(
    db: AsyncSession, today: date | None = None
) -> list[SupplyResponse]:
    result = await db.execute(
        select(Supply).where(
            Supply.activo.is_(True),
            Supply.stock_minimo > 0,
            Supply.stock <= Supply.stock_minimo,
        ).order_by(Supply.stock.asc(), Supply.id.asc())
    )
    today = today or current_date()
    return [project_supply(s, today=today) for s in result.scalars().all()]


async def expired_alerts(
    db: AsyncSession, today: date | None = None
) -> list[SupplyResponse]:
    """Insumos activos cuya fecha de vencimiento ya pasó."""
    today = today or current_date()
    result = await db.execute(
        select(Supply).where(
            Supply.activo.is_(True),
            Supply.fecha_vencimiento.is_not(None),
            Supply.fecha_vencimiento < today,
        ).order_by(Supply.fecha_vencimiento.asc(), Supply.id.asc())
    )
    return [project_supply(s, today=today) for s in result.scalars().all()]


async def expiring_soon_alerts(
    db: AsyncSession,
    horizon_days: int | None = None,
    today: date | None = None,
    include_expired: bool = False,
) -> list[SupplyResponse]:
    """
    Insumos activos cuya `fecha_vencimiento` propia cae entre hoy y
    hoy + `horizon_days` (ambos inclusive).

    Los vencidos quedan fuera salvo `include_expired=True`; en ese caso se
    agregan al final, marcados con `estado_vencimiento = vencido`.
    """
    if horizon_days is None:
        horizon_days = get_settings().EXPIRY_ALERT_DAYS
    _validate_horizon(horizon_days)
    today = today or current_date()
    limit = today + timedelta(days=horizon_days)

    result = await db.execute(
        select(Supply).where(
            Supply.activo.is_(True),
            Supply.fecha_vencimiento.is_not(None),
            Supply.fecha_vencimiento >= today,
            Supply.fecha_vencimiento <= limit,
        ).order_by(Supply.fecha_vencimiento.asc(), Supply.id.asc())
    )
    upcoming = [
        project_supply(s, today=today, horizon_days=horizon_days)
        for s in result.scalars().all()
    ]
    if include_expired:
        upcoming.extend(await expired_alerts(db, today=today))
    return upcoming


async def alert_summary(
    db: AsyncSession, horizon_days: int | None = None, today: date | None = None
) -> AlertSummary:
    if horizon_days is None:
        horizon_days = get_settings().EXPIRY_ALERT_DAYS
    _validate_horizon(horizon_days)
    today = today or current_date()

    stock_bajo = await low_stock_alerts(db, today=today)
    proximos = await expiring_soon_alerts(db, horizon_days=horizon_days, today=today)
    vencidos = await expired_alerts(db, today=today)

    return AlertSummary(
        stock_bajo=stock_bajo,
        proximos_vencer=proximos,
        vencidos=vencidos,
        dias=horizon_days,
        total=len(stock_bajo) + len(proximos) + len(vencidos),
    )
