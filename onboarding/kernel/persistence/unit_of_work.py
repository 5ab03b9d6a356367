"""
Transactional unit of work over the identity tables.

Usage:
    async with unit_of_work.transaction() as tx:
        user = await tx.find_one(User, email_address=email)
        ...
        await tx.commit()

Leaving the block through an exception, or without calling ``commit()``,
rolls the transaction back. The session is closed on every exit path.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Type, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from onboarding.kernel.errors import PersistenceError, UniqueViolation
from onboarding.kernel.models.base import Base
from onboarding.logging_config import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


def _translate(exc: SQLAlchemyError, action: str) -> PersistenceError:
    if isinstance(exc, IntegrityError) and "unique" in str(exc.orig).lower():
        return UniqueViolation(f"Storage rejected {action}: unique constraint violated")
    return PersistenceError(f"Storage failure during {action}")


class Transaction:
    """Handle for one open database transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.committed = False
        self.rolled_back = False

    async def find_one(
        self,
        model: Type[ModelT],
        *,
        for_update: bool = False,
        **criteria: Any,
    ) -> Optional[ModelT]:
        """
        Fetch a single row matching equality criteria.

        Args:
            model: Mapped class to query
            for_update: Lock the row until the transaction ends
            **criteria: Column/value pairs

        Returns:
            The entity, or None if no row matches
        """
        query = select(model).filter_by(**criteria)
        if for_update:
            query = query.with_for_update()
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise _translate(exc, f"lookup of {model.__name__}") from exc
        return result.scalar_one_or_none()

    async def save(self, entity: ModelT) -> ModelT:
        """Insert or update an entity and flush it so constraints are checked now."""
        self.session.add(entity)
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise _translate(exc, f"save of {type(entity).__name__}") from exc
        return entity

    async def remove(self, entity: Base) -> None:
        """
        Delete an entity by primary key.

        Raises:
            PersistenceError: The row was already gone
        """
        removed = await self.remove_where(type(entity), id=entity.id)
        if removed != 1:
            raise PersistenceError(f"{type(entity).__name__} {entity.id} no longer exists")

    async def remove_where(self, model: Type[Base], **criteria: Any) -> int:
        """Delete every row matching equality criteria; returns the row count."""
        statement = delete(model).filter_by(**criteria)
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as exc:
            raise _translate(exc, f"bulk removal of {model.__name__}") from exc
        return result.rowcount or 0

    async def commit(self) -> None:
        if self.committed:
            raise RuntimeError("Transaction already committed")
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise _translate(exc, "commit") from exc
        self.committed = True

    async def rollback(self) -> None:
        if self.committed or self.rolled_back:
            return
        self.rolled_back = True
        try:
            await self.session.rollback()
        except SQLAlchemyError as exc:
            raise _translate(exc, "rollback") from exc


class UnitOfWork:
    """Opens transactions against a session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        async with self.session_factory() as session:
            try:
                await session.begin()
            except SQLAlchemyError as exc:
                raise _translate(exc, "begin") from exc

            tx = Transaction(session)
            try:
                yield tx
            except Exception:
                try:
                    await tx.rollback()
                except PersistenceError:
                    # The original failure is the one worth surfacing
                    logger.exception("Rollback failed")
                raise
            if not tx.committed:
                await tx.rollback()
