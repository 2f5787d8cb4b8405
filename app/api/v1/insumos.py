"""
Endpoints REST del catálogo de insumos de Farmacia y sus alertas.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.farmacia import (
    AlertSummary,
    SupplyActiveUpdate,
    SupplyCreate,
    SupplyResponse,
    SupplyUpdate,
)
from app.services import alert_service, supply_service

router = APIRouter()


# ── Alertas ───────────────────────────────────────────
# Declaradas antes de /{insumo_id} para que "alertas" no se lea como id.


@router.get("/alertas", response_model=AlertSummary)
async def get_alert_summary(
    dias: int | None = Query(None, ge=0, description="Horizonte de vencimiento en días"),
    db: AsyncSession = Depends(get_db),
):
    """Stock bajo, próximos a vencer y vencidos, con el total de alertas."""
    return await alert_service.alert_summary(db, horizon_days=dias)


@router.get("/alertas/stock-minimo", response_model=list[SupplyResponse])
async def get_low_stock_alerts(db: AsyncSession = Depends(get_db)):
    """Insumos activos con stock <= stock mínimo (mínimo configurado)."""
    return await alert_service.low_stock_alerts(db)


@router.get("/alertas/proximos-vencer", response_model=list[SupplyResponse])
async def get_expiring_soon_alerts(
    dias: int | None = Query(None, ge=0, description="Horizonte en días desde hoy"),
    incluir_vencidos: bool = Query(False, description="Agregar los ya vencidos"),
    db: AsyncSession = Depends(get_db),
):
    """Insumos activos que vencen entre hoy y hoy + `dias`."""
    return await alert_service.expiring_soon_alerts(
        db, horizon_days=dias, include_expired=incluir_vencidos
    )


@router.get("/alertas/vencidos", response_model=list[SupplyResponse])
async def get_expired_alerts(db: AsyncSession = Depends(get_db)):
    """Insumos activos con fecha de vencimiento pasada."""
    return await alert_service.expired_alerts(db)


# ── Insumos ───────────────────────────────────────────


@router.post("", response_model=SupplyResponse, status_code=201)
async def create_supply(
    data: SupplyCreate,
    db: AsyncSession = Depends(get_db),
):
    """Crea un insumo."""
    return await supply_service.create_supply(db, data)


@router.get("", response_model=list[SupplyResponse])
async def list_supplies(
    activo: bool | None = Query(None),
    search: str | None = Query(None, description="Buscar por nombre o código"),
    categoria: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Lista insumos con filtros opcionales."""
    return await supply_service.list_supplies(
        db, activo=activo, search=search, categoria=categoria
    )


@router.get("/{insumo_id}", response_model=SupplyResponse)
async def get_supply(
    insumo_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Detalle de un insumo."""
    return await supply_service.get_supply(db, insumo_id)


@router.put("/{insumo_id}", response_model=SupplyResponse)
async def update_supply(
    insumo_id: int,
    data: SupplyUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Actualiza un insumo (también reactiva con `{"activo": true}`)."""
    return await supply_service.update_supply(db, insumo_id, data)


@router.patch("/{insumo_id}/activo", response_model=SupplyResponse)
async def set_supply_active(
    insumo_id: int,
    data: SupplyActiveUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Activa o desactiva un insumo."""
    return await supply_service.set_active(db, insumo_id, data.activo)


@router.delete("/{insumo_id}", response_model=SupplyResponse)
async def deactivate_supply(
    insumo_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Baja lógica: marca el insumo como inactivo."""
    return await supply_service.set_active(db, insumo_id, False)
