"""
Exclusión por insumo.

Cada insumo tiene una compuerta compartida/exclusiva:
- `shared`: registrar lotes (solo agregan filas, pueden solaparse entre sí).
- `exclusive`: consumir un lote o editar el stock en piso.

Las compuertas se crean bajo demanda y se descartan cuando nadie las usa,
de modo que insumos distintos nunca se bloquean entre sí.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from app.config import get_settings
from app.core.exceptions import ConflictException

logger = logging.getLogger(__name__)


class _SupplyGate:
    def __init__(self) -> None:
        self.condition = asyncio.Condition()
        self.readers = 0
        self.writer = False
        self.holders = 0


class SupplyLocks:
    """Registro de compuertas indexado por id de insumo."""

    def __init__(self, timeout: float | None = None) -> None:
        self._gates: dict[int, _SupplyGate] = {}
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        if self._timeout is not None:
            return self._timeout
        return get_settings().LOCK_TIMEOUT_SECONDS

    def _checkout(self, supply_id: int) -> _SupplyGate:
        gate = self._gates.get(supply_id)
        if gate is None:
            gate = _SupplyGate()
            self._gates[supply_id] = gate
        gate.holders += 1
        return gate

    def _checkin(self, supply_id: int, gate: _SupplyGate) -> None:
        gate.holders -= 1
        if gate.holders == 0 and self._gates.get(supply_id) is gate:
            del self._gates[supply_id]

    def in_use(self, supply_id: int) -> bool:
        return supply_id in self._gates

    async def _wait(self, supply_id: int, acquire) -> None:
        try:
            await asyncio.wait_for(acquire(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Timeout esperando la compuerta del insumo {supply_id}")
            raise ConflictException(
                "El insumo está siendo modificado por otra operación, intente nuevamente"
            )

    @asynccontextmanager
    async def shared(self, supply_id: int) -> AsyncIterator[None]:
        gate = self._checkout(supply_id)
        try:
            async def acquire() -> None:
                async with gate.condition:
                    await gate.condition.wait_for(lambda: not gate.writer)
                    gate.readers += 1

            await self._wait(supply_id, acquire)
            try:
                yield
            finally:
                async with gate.condition:
                    gate.readers -= 1
                    gate.condition.notify_all()
        finally:
            self._checkin(supply_id, gate)

    @asynccontextmanager
    async def exclusive(self, supply_id: int) -> AsyncIterator[None]:
        gate = self._checkout(supply_id)
        try:
            async def acquire() -> None:
                async with gate.condition:
                    await gate.condition.wait_for(
                        lambda: not gate.writer and gate.readers == 0
                    )
                    gate.writer = True

            await self._wait(supply_id, acquire)
            try:
                yield
            finally:
                async with gate.condition:
                    gate.writer = False
                    gate.condition.notify_all()
        finally:
            self._checkin(supply_id, gate)


supply_locks = SupplyLocks()
