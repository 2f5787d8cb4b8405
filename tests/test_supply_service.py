"""
Tests del catálogo de insumos y proveedores.
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.core.exceptions import NotFoundException
from app.schemas.farmacia import SupplierCreate, SupplyCreate, SupplyUpdate
from app.services import supply_service


# ── Proveedores ───────────────────────────────────────


async def test_create_and_get_supplier(db_session):
    supplier = await supply_service.create_supplier(
        db_session,
        SupplierCreate(nombre="  Droguería Central  ", ruc="20123456789", telefono=""),
    )

    assert supplier.nombre == "Droguería Central"
    assert supplier.telefono is None
    assert supplier.activo is True

    fetched = await supply_service.get_supplier(db_session, supplier.id)
    assert fetched.ruc == "20123456789"


async def test_unknown_supplier(db_session):
    with pytest.raises(NotFoundException):
        await supply_service.get_supplier(db_session, 77)


async def test_list_suppliers_sorted_by_name(db_session):
    await supply_service.create_supplier(db_session, SupplierCreate(nombre="Zeta SAC"))
    await supply_service.create_supplier(db_session, SupplierCreate(nombre="Alfa SAC"))

    suppliers = await supply_service.list_suppliers(db_session)
    assert [s.nombre for s in suppliers] == ["Alfa SAC", "Zeta SAC"]


# ── Insumos ───────────────────────────────────────────


async def test_create_supply_with_supplier(db_session, make_supply):
    supplier = await supply_service.create_supplier(
        db_session, SupplierCreate(nombre="Droguería Central")
    )
    supply = await make_supply(
        nombre="  Gasa estéril  ",
        stock=12,
        stock_minimo=4,
        precio=Decimal("0.80"),
        proveedor_id=supplier.id,
        fecha_vencimiento="2026-01-31 00:00:00",
        codigo_referencia="",
    )

    assert supply.nombre == "Gasa estéril"
    assert supply.stock == 12
    assert supply.proveedor_id == supplier.id
    assert supply.proveedor.nombre == "Droguería Central"
    assert supply.fecha_vencimiento == date(2026, 1, 31)
    assert supply.codigo_referencia is None
    assert supply.activo is True


async def test_create_supply_unknown_supplier(make_supply):
    with pytest.raises(NotFoundException):
        await make_supply(proveedor_id=999)


def test_supply_rejects_negative_counters():
    with pytest.raises(ValidationError):
        SupplyCreate(nombre="X", stock=-1)
    with pytest.raises(ValidationError):
        SupplyCreate(nombre="X", stock_minimo=-3)


def test_supply_rejects_blank_name():
    with pytest.raises(ValidationError):
        SupplyCreate(nombre="   ")


def test_supply_rejects_malformed_date():
    with pytest.raises(ValidationError):
        SupplyCreate(nombre="X", fecha_vencimiento="31/01/2026")


async def test_get_unknown_supply(db_session):
    with pytest.raises(NotFoundException):
        await supply_service.get_supply(db_session, 1)


async def test_update_supply_is_partial(db_session, make_supply):
    supply = await make_supply(
        nombre="Alcohol 70%", stock=8, stock_minimo=2, categoria="antisepticos"
    )

    updated = await supply_service.update_supply(
        db_session, supply.id, SupplyUpdate(stock_minimo=10, ubicacion_almacen="B-2")
    )

    assert updated.stock == 8
    assert updated.stock_minimo == 10
    assert updated.ubicacion_almacen == "B-2"
    assert updated.categoria == "antisepticos"
    assert updated.stock_bajo is True


async def test_update_supply_ignores_null_counters(db_session, make_supply):
    supply = await make_supply(stock=8, stock_minimo=2)

    updated = await supply_service.update_supply(
        db_session, supply.id, SupplyUpdate(stock=None, nombre=None)
    )

    assert updated.stock == 8
    assert updated.nombre == supply.nombre


async def test_update_unknown_supply(db_session):
    with pytest.raises(NotFoundException):
        await supply_service.update_supply(db_session, 5, SupplyUpdate(stock=1))


async def test_deactivate_and_reactivate(db_session, make_supply):
    supply = await make_supply(stock=3)

    inactive = await supply_service.set_active(db_session, supply.id, False)
    assert inactive.activo is False
    assert inactive.stock == 3

    again = await supply_service.update_supply(
        db_session, supply.id, SupplyUpdate(activo=True)
    )
    assert again.activo is True


async def test_list_supplies_filters(db_session, make_supply):
    a = await make_supply(nombre="Jeringa 5ml", codigo_referencia="JER-5", categoria="material")
    b = await make_supply(nombre="Ibuprofeno 400mg", categoria="medicamento")
    c = await make_supply(nombre="Jeringa 10ml", categoria="material")
    await supply_service.set_active(db_session, c.id, False)

    everything = await supply_service.list_supplies(db_session)
    assert [s.id for s in everything] == [b.id, c.id, a.id]

    active = await supply_service.list_supplies(db_session, activo=True)
    assert {s.id for s in active} == {a.id, b.id}

    by_category = await supply_service.list_supplies(db_session, categoria="material")
    assert {s.id for s in by_category} == {a.id, c.id}

    by_code = await supply_service.list_supplies(db_session, search="jer-5")
    assert [s.id for s in by_code] == [a.id]


async def test_update_supply_changes_supplier(db_session, make_supply):
    first = await supply_service.create_supplier(db_session, SupplierCreate(nombre="Primero SAC"))
    second = await supply_service.create_supplier(db_session, SupplierCreate(nombre="Segundo SAC"))
    supply = await make_supply(proveedor_id=first.id)

    updated = await supply_service.update_supply(
        db_session, supply.id, SupplyUpdate(proveedor_id=second.id)
    )

    assert updated.proveedor_id == second.id
    assert updated.proveedor.nombre == "Segundo SAC"


async def test_update_supply_unknown_supplier(db_session, make_supply):
    supply = await make_supply()
    with pytest.raises(NotFoundException):
        await supply_service.update_supply(db_session, supply.id, SupplyUpdate(proveedor_id=42))
