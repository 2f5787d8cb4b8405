"""Create proveedores, insumos, lotes tables

Revision ID: a1f3c9e2b7d4
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = 'a1f3c9e2b7d4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── proveedores ────────────────────────────────
    op.create_table(
        'proveedores',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('nombre', sa.String(300), nullable=False),
        sa.Column('ruc', sa.String(11), nullable=True, unique=True),
        sa.Column('telefono', sa.String(20), nullable=True),
        sa.Column('email', sa.String(200), nullable=True),
        sa.Column('activo', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ── insumos ────────────────────────────────────
    op.create_table(
        'insumos',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('nombre', sa.String(300), nullable=False),
        sa.Column('descripcion', sa.Text(), nullable=True),
        sa.Column('unidad_medida', sa.String(50), nullable=True),
        sa.Column('codigo_referencia', sa.String(100), nullable=True),
        sa.Column('categoria', sa.String(100), nullable=True),
        sa.Column('ubicacion_almacen', sa.String(200), nullable=True),
        sa.Column('proveedor_id', sa.Integer(), sa.ForeignKey('proveedores.id'), nullable=True),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('stock_minimo', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('precio', sa.Numeric(12, 2), nullable=True),
        sa.Column('lote', sa.String(100), nullable=True),
        sa.Column('fecha_vencimiento', sa.Date(), nullable=True),
        sa.Column('activo', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('stock >= 0', name='ck_insumo_stock_no_negativo'),
        sa.CheckConstraint('stock_minimo >= 0', name='ck_insumo_stock_minimo_no_negativo'),
    )
    op.create_index('idx_insumo_activo', 'insumos', ['activo'])
    op.create_index('idx_insumo_vencimiento', 'insumos', ['activo', 'fecha_vencimiento'])

    # ── lotes ──────────────────────────────────────
    op.create_table(
        'lotes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('insumo_id', sa.Integer(), sa.ForeignKey('insumos.id'), nullable=False),
        sa.Column('lote', sa.String(100), nullable=False),
        sa.Column('cantidad', sa.Integer(), nullable=False),
        sa.Column('cantidad_restante', sa.Integer(), nullable=False),
        sa.Column('fecha_vencimiento', sa.Date(), nullable=True),
        sa.Column('precio_unitario', sa.Numeric(12, 2), nullable=True),
        sa.Column('ubicacion', sa.String(200), nullable=True),
        sa.Column('activo', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('consumido_en', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('cantidad > 0', name='ck_lote_cantidad_positiva'),
        sa.CheckConstraint(
            'cantidad_restante >= 0 AND cantidad_restante <= cantidad',
            name='ck_lote_restante_en_rango',
        ),
    )
    op.create_index('idx_lote_insumo', 'lotes', ['insumo_id'])
    op.create_index('idx_lote_insumo_vencimiento', 'lotes', ['insumo_id', 'fecha_vencimiento'])


def downgrade() -> None:
    op.drop_index('idx_lote_insumo_vencimiento', table_name='lotes')
    op.drop_index('idx_lote_insumo', table_name='lotes')
    op.drop_table('lotes')
    op.drop_index('idx_insumo_vencimiento', table_name='insumos')
    op.drop_index('idx_insumo_activo', table_name='insumos')
    op.drop_table('insumos')
    op.drop_table('proveedores')
