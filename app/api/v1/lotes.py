"""
Endpoints REST de lotes de Farmacia: registro, listado FEFO y consumo.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.farmacia import (
    ConsumeLotRequest,
    LotCreate,
    LotResponse,
    SupplyResponse,
)
from app.services import lot_service

router = APIRouter()


@router.get("/{insumo_id}/lotes", response_model=list[LotResponse])
async def list_lots(
    insumo_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Lotes del insumo, primero los que vencen antes."""
    return await lot_service.list_lots(db, insumo_id)


@router.post("/{insumo_id}/lotes", response_model=LotResponse, status_code=201)
async def register_lot(
    insumo_id: int,
    data: LotCreate,
    db: AsyncSession = Depends(get_db),
):
    """Registra un lote recibido. No modifica el stock en piso."""
    return await lot_service.register_lot(db, insumo_id, data)


@router.patch("/{insumo_id}/consumir", response_model=SupplyResponse)
async def consume_lot(
    insumo_id: int,
    data: ConsumeLotRequest,
    db: AsyncSession = Depends(get_db),
):
    """Abre un lote sellado: solo con stock en piso igual a 0."""
    return await lot_service.consume_lot(db, insumo_id, data.lote_id)
