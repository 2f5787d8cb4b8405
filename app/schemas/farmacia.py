"""
Schemas Pydantic para el módulo de Farmacia.
Proveedores, insumos, lotes y alertas.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from app.core.dates import parse_calendar_date


class StockLevel(str, Enum):
    """Banda de severidad del stock en piso."""
    CRITICAL = "critical"
    WARNING = "warning"
    NORMAL = "normal"


class ExpiryStatus(str, Enum):
    """Situación de la fecha de vencimiento respecto de hoy."""
    NO_DATE = "sin_fecha"
    VALID = "vigente"
    EXPIRING_SOON = "por_vencer"
    EXPIRED = "vencido"


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


# ── Proveedor Schemas ─────────────────────────────────


class SupplierCreate(BaseModel):
    nombre: str = Field(..., min_length=2, max_length=300, description="Razón social")
    ruc: str | None = Field(None, min_length=11, max_length=11)
    telefono: str | None = Field(None, max_length=20)
    email: str | None = Field(None, max_length=200)

    blank_to_none = field_validator("ruc", "telefono", "email", mode="before")(_blank_to_none)


class SupplierResponse(BaseModel):
    id: int
    nombre: str
    ruc: str | None = None
    telefono: str | None = None
    email: str | None = None
    activo: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


# ── Insumo Schemas ────────────────────────────────────


class SupplyCreate(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=300)
    descripcion: str | None = None
    stock: int = Field(0, ge=0, description="Stock inicial en piso")
    stock_minimo: int = Field(0, ge=0, description="0 = sin mínimo configurado")
    precio: Decimal | None = Field(None, ge=0)
    unidad_medida: str | None = Field(None, max_length=50)
    codigo_referencia: str | None = Field(None, max_length=100)
    proveedor_id: int | None = None
    fecha_vencimiento: date | None = None
    lote: str | None = Field(None, max_length=100)
    ubicacion_almacen: str | None = Field(None, max_length=200)
    activo: bool = True
    categoria: str | None = Field(None, max_length=100)

    @field_validator("fecha_vencimiento", mode="before")
    @classmethod
    def truncate_date(cls, v):
        return parse_calendar_date(v)

    @field_validator("nombre")
    @classmethod
    def strip_nombre(cls, v: str) -> str:
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("El nombre no puede estar vacío")
        return cleaned

    blank_to_none = field_validator(
        "descripcion", "unidad_medida", "codigo_referencia", "lote",
        "ubicacion_almacen", "categoria", "precio", "proveedor_id",
        mode="before",
    )(_blank_to_none)


class SupplyUpdate(BaseModel):
    nombre: str | None = Field(None, min_length=1, max_length=300)
    descripcion: str | None = None
    stock: int | None = Field(None, ge=0)
    stock_minimo: int | None = Field(None, ge=0)
    precio: Decimal | None = Field(None, ge=0)
    unidad_medida: str | None = Field(None, max_length=50)
    codigo_referencia: str | None = Field(None, max_length=100)
    proveedor_id: int | None = None
    fecha_vencimiento: date | None = None
    lote: str | None = Field(None, max_length=100)
    ubicacion_almacen: str | None = Field(None, max_length=200)
    activo: bool | None = None
    categoria: str | None = Field(None, max_length=100)

    @field_validator("fecha_vencimiento", mode="before")
    @classmethod
    def truncate_date(cls, v):
        return parse_calendar_date(v)

    blank_to_none = field_validator(
        "descripcion", "unidad_medida", "codigo_referencia", "lote",
        "ubicacion_almacen", "categoria", "precio", "proveedor_id",
        mode="before",
    )(_blank_to_none)


class SupplyActiveUpdate(BaseModel):
    activo: bool


class SupplyResponse(BaseModel):
    id: int
    nombre: str
    descripcion: str | None = None
    stock: int
    stock_minimo: int
    precio: Decimal | None = None
    unidad_medida: str | None = None
    codigo_referencia: str | None = None
    proveedor_id: int | None = None
    proveedor: SupplierResponse | None = None
    fecha_vencimiento: date | None = None
    lote: str | None = None
    ubicacion_almacen: str | None = None
    activo: bool
    categoria: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Derivados por el evaluador de alertas
    nivel_stock: StockLevel
    stock_bajo: bool
    dias_para_vencer: int | None = None
    estado_vencimiento: ExpiryStatus

    model_config = {"from_attributes": True}


# ── Lote Schemas ──────────────────────────────────────


class LotCreate(BaseModel):
    # Lote y cantidad se validan en el servicio (ValidationException)
    lote: str
    cantidad: int
    fecha_vencimiento: date | None = None
    precio_unitario: Decimal | None = Field(None, ge=0)
    ubicacion: str | None = Field(None, max_length=200)

    @field_validator("fecha_vencimiento", mode="before")
    @classmethod
    def truncate_date(cls, v):
        return parse_calendar_date(v)

    blank_to_none = field_validator("precio_unitario", "ubicacion", mode="before")(_blank_to_none)


class LotResponse(BaseModel):
    id: int
    insumo_id: int
    lote: str
    cantidad: int
    cantidad_restante: int
    fecha_vencimiento: date | None = None
    precio_unitario: Decimal | None = None
    ubicacion: str | None = None
    activo: bool
    agotado: bool
    created_at: datetime | None = None
    consumido_en: datetime | None = None

    model_config = {"from_attributes": True}


class ConsumeLotRequest(BaseModel):
    lote_id: int = Field(..., alias="loteId")

    model_config = {"populate_by_name": True}


# ── Alertas ───────────────────────────────────────────


class AlertSummary(BaseModel):
    stock_bajo: list[SupplyResponse]
    proximos_vencer: list[SupplyResponse]
    vencidos: list[SupplyResponse]
    dias: int
    total: int
