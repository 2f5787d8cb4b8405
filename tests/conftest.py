"""
Fixtures compartidas para Pytest.
Configura base de datos de test y clientes HTTP.
"""

from collections.abc import AsyncGenerator
from datetime import date

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import app.models  # noqa: F401
from app.database import Base, get_db
from app.main import app
from app.schemas.farmacia import LotCreate, SupplyCreate
from app.services import lot_service, supply_service

# ── Engine de test (SQLite async) ─────────────────────
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Crea y destruye las tablas para cada test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provee una sesión de DB de test."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP de test que usa la DB de test (una sesión por request)."""

    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Datos de ejemplo ──────────────────────────────────


@pytest_asyncio.fixture
async def make_supply(db_session: AsyncSession):
    async def _make(**fields):
        data = {"nombre": "Amoxicilina 500mg", "stock": 0, "stock_minimo": 0}
        data.update(fields)
        return await supply_service.create_supply(db_session, SupplyCreate(**data))

    return _make


@pytest_asyncio.fixture
async def make_lot(db_session: AsyncSession):
    async def _make(
        supply_id: int,
        lote: str,
        cantidad: int,
        fecha_vencimiento: date | str | None = None,
        **fields,
    ):
        return await lot_service.register_lot(
            db_session,
            supply_id,
            LotCreate(
                lote=lote,
                cantidad=cantidad,
                fecha_vencimiento=fecha_vencimiento,
                **fields,
            ),
        )

    return _make


@pytest_asyncio.fixture
async def depleted_supply(make_supply):
    """Insumo sin stock en piso, listo para abrir un lote."""
    return await make_supply(
        nombre="Paracetamol 1g", stock=0, stock_minimo=5, unidad_medida="tableta",
    )
