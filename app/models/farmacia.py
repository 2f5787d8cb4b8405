"""
Modelos de Farmacia: Proveedores, Insumos y Lotes.

El insumo lleva el stock en piso (lo abierto y dispensable); los lotes son
reservas selladas con fecha de vencimiento que se abren enteras cuando el
stock en piso llega a cero.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


# ── Proveedor ─────────────────────────────────────────


class Supplier(Base):
    __tablename__ = "proveedores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(300), nullable=False)
    ruc: Mapped[str | None] = mapped_column(String(11), unique=True)
    telefono: Mapped[str | None] = mapped_column(String(20))
    email: Mapped[str | None] = mapped_column(String(200))
    activo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<Supplier {self.id} - {self.nombre}>"


# ── Insumo ────────────────────────────────────────────


class Supply(Base):
    __tablename__ = "insumos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(300), nullable=False)
    descripcion: Mapped[str | None] = mapped_column(Text)
    unidad_medida: Mapped[str | None] = mapped_column(String(50))
    codigo_referencia: Mapped[str | None] = mapped_column(String(100))
    categoria: Mapped[str | None] = mapped_column(String(100))
    ubicacion_almacen: Mapped[str | None] = mapped_column(String(200))
    proveedor_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("proveedores.id")
    )

    stock: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
        comment="Stock en piso (abierto, dispensable)"
    )
    stock_minimo: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
        comment="Umbral de alerta; 0 = sin mínimo configurado"
    )
    precio: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    # Lote abierto actualmente (copiado desde el último lote consumido)
    lote: Mapped[str | None] = mapped_column(String(100))
    fecha_vencimiento: Mapped[date | None] = mapped_column(Date)

    activo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relaciones
    proveedor: Mapped["Supplier | None"] = relationship("Supplier", lazy="selectin")

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_insumo_stock_no_negativo"),
        CheckConstraint("stock_minimo >= 0", name="ck_insumo_stock_minimo_no_negativo"),
        Index("idx_insumo_activo", "activo"),
        Index("idx_insumo_vencimiento", "activo", "fecha_vencimiento"),
    )
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Supply {self.id} {self.nombre} stock={self.stock}>"


# ── Lote ──────────────────────────────────────────────


class Lot(Base):
    __tablename__ = "lotes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    insumo_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("insumos.id"), nullable=False
    )
    lote: Mapped[str] = mapped_column(
        String(100), nullable=False, comment="Etiqueta del lote (no única)"
    )
    cantidad: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="Cantidad recibida, inmutable"
    )
    cantidad_restante: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="Cantidad aún sellada"
    )
    fecha_vencimiento: Mapped[date | None] = mapped_column(Date)
    precio_unitario: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    ubicacion: Mapped[str | None] = mapped_column(String(200))
    activo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    consumido_en: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), comment="Momento en que se abrió el lote"
    )

    __table_args__ = (
        CheckConstraint("cantidad > 0", name="ck_lote_cantidad_positiva"),
        CheckConstraint(
            "cantidad_restante >= 0 AND cantidad_restante <= cantidad",
            name="ck_lote_restante_en_rango",
        ),
        Index("idx_lote_insumo", "insumo_id"),
        Index("idx_lote_insumo_vencimiento", "insumo_id", "fecha_vencimiento"),
    )

    @property
    def agotado(self) -> bool:
        return self.cantidad_restante == 0

    def __repr__(self) -> str:
        return f"<Lot {self.lote} {self.cantidad_restante}/{self.cantidad}>"
