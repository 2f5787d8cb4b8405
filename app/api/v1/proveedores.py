"""
Endpoints REST de proveedores de Farmacia.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.farmacia import SupplierCreate, SupplierResponse
from app.services import supply_service

router = APIRouter()


@router.post("", response_model=SupplierResponse, status_code=201)
async def create_supplier(
    data: SupplierCreate,
    db: AsyncSession = Depends(get_db),
):
    """Crea un nuevo proveedor."""
    return await supply_service.create_supplier(db, data)


@router.get("", response_model=list[SupplierResponse])
async def list_suppliers(
    activo: bool | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await supply_service.list_suppliers(db, activo=activo)


@router.get("/{proveedor_id}", response_model=SupplierResponse)
async def get_supplier(
    proveedor_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Detalle de un proveedor."""
    return await supply_service.get_supplier(db, proveedor_id)
