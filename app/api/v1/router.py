"""
Router principal de la API v1.
Agrupa todos los sub-routers de la versión 1.
"""

from fastapi import APIRouter

from app.api.v1.insumos import router as insumos_router
from app.api.v1.lotes import router as lotes_router
from app.api.v1.proveedores import router as proveedores_router

api_v1_router = APIRouter()

api_v1_router.include_router(
    insumos_router,
    prefix="/insumos",
    tags=["Insumos"],
)

api_v1_router.include_router(
    lotes_router,
    prefix="/insumosFarmacia",
    tags=["Lotes"],
)

api_v1_router.include_router(
    proveedores_router,
    prefix="/proveedores",
    tags=["Proveedores"],
)
