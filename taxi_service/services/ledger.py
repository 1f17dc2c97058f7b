"""
Driver Ledger - balance as a running total backed by ``transactions``.

Invariant: ``drivers.balance == SUM(transactions.amount)`` per driver.

Every mutation is one ``UPDATE drivers SET balance = balance + :delta``
statement plus exactly one ``transactions`` row, both inside the caller's
unit of work.  The ledger never commits on behalf of an order transition;
``top_up`` is the only entry point that owns its transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from taxi_service.domain.enums import TransactionKind
from taxi_service.domain.errors import DriverNotFound, InsufficientBalance, InvalidAmount
from taxi_service.domain.pricing import to_money
from taxi_service.infrastructure.models import TransactionModel
from taxi_service.infrastructure.repositories import (
    DriverRepository,
    TransactionRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reconciliation:
    driver_id: int
    balance: Decimal
    ledger_total: Decimal

    @property
    def drift(self) -> Decimal:
        return self.balance - self.ledger_total


class DriverLedger:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.drivers = DriverRepository(session)
        self.transactions = TransactionRepository(session)

    async def apply_transaction(
        self,
        driver_id: int,
        amount: Decimal,
        kind: TransactionKind,
        description: str,
        *,
        order_id: Optional[int] = None,
        actor_id: Optional[int] = None,
    ) -> TransactionModel:
        """Move the balance by the signed *amount* and record it."""
        amount = to_money(amount)
        # A debit may never take the balance below zero
        floor = -amount if amount < 0 else None
        updated = await self.drivers.add_to_balance(driver_id, amount, floor=floor)
        if not updated:
            if await self.drivers.get_by_id(driver_id) is None:
                raise DriverNotFound(driver_id=driver_id)
            raise InsufficientBalance(driver_id=driver_id, required=str(-amount))

        entry = await self.transactions.add(
            TransactionModel(
                driver_id=driver_id,
                order_id=order_id,
                amount=amount,
                kind=kind,
                description=description,
                created_by=actor_id,
            )
        )
        logger.info(
            "Ledger %s of %s for driver %d (order=%s)",
            kind.value,
            amount,
            driver_id,
            order_id,
        )
        return entry

    async def debit(
        self, driver_id: int, amount: Decimal, *, order_id: Optional[int] = None,
        description: str = "Service fee for accepting order",
    ) -> TransactionModel:
        if amount < 0:
            raise InvalidAmount(amount=str(amount))
        return await self.apply_transaction(
            driver_id, -amount, TransactionKind.DEBIT, description, order_id=order_id
        )

    async def credit(
        self,
        driver_id: int,
        amount: Decimal,
        *,
        kind: TransactionKind = TransactionKind.CREDIT,
        order_id: Optional[int] = None,
        actor_id: Optional[int] = None,
        description: str = "Balance credit",
    ) -> TransactionModel:
        if amount <= 0:
            raise InvalidAmount(amount=str(amount))
        return await self.apply_transaction(
            driver_id, amount, kind, description, order_id=order_id, actor_id=actor_id
        )

    async def top_up(
        self, driver_id: int, amount: Decimal, actor_id: Optional[int] = None
    ) -> TransactionModel:
        """Admin credit; commits its own transaction."""
        try:
            entry = await self.credit(
                driver_id,
                amount,
                actor_id=actor_id,
                description="Balance added by admin",
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(entry)
        return entry

    async def history(self, driver_id: int, limit: int = 100) -> list[TransactionModel]:
        return await self.transactions.list_for_driver(driver_id, limit)

    async def reconcile(self, driver_id: int) -> Reconciliation:
        driver = await self.drivers.get_by_id(driver_id, refresh=True)
        if driver is None:
            raise DriverNotFound(driver_id=driver_id)
        total = await self.transactions.sum_for_driver(driver_id)
        result = Reconciliation(
            driver_id=driver_id,
            balance=to_money(Decimal(str(driver.balance))),
            ledger_total=to_money(total),
        )
        if result.drift:
            logger.error(
                "Ledger drift for driver %d: balance=%s ledger=%s",
                driver_id,
                result.balance,
                result.ledger_total,
            )
        return result
