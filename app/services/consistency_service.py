# app/services/consistency_service.py
"""
Multi-statement writes that must land as one unit.

Every other write in the services is a single statement on its own session;
only the customer soft delete touches two tables and needs a transaction.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from app.core.exceptions import CRMError, NotFoundError, storage_failure
from app.services import customer_service, relationship_service

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    One session, one transaction.

    Commits when the block exits normally and rolls back when it raises,
    so an exception or early return never leaves half of the work applied.
    """

    def __init__(self, store: sessionmaker):
        self._store = store
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "UnitOfWork":
        self.session = self._store()
        await self.session.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc_type is None:
                await self.commit()
            else:
                await self.rollback()
        finally:
            await self.session.close()
        return False

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


async def soft_delete_cascade(store: sessionmaker, customer_id: UUID) -> int:
    """
    Remove every relationship touching the customer, then deactivate it.

    Returns the number of relationships removed. If either step fails,
    nothing is changed.
    """
    try:
        async with UnitOfWork(store) as uow:
            removed = await relationship_service.delete_for_customer(uow.session, customer_id)
            if not await customer_service.deactivate(uow.session, customer_id):
                # Someone else deleted it after our existence check.
                raise NotFoundError("Customer not found")
    except CRMError:
        raise
    except Exception as e:
        raise storage_failure(e, "soft delete customer", logger) from e

    logger.info("Customer %s deactivated, %d relationship(s) removed", customer_id, removed)
    return removed
