"""Thin write helpers around `AsyncSession` with uniform store-error handling."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import delete as sa_delete
from sqlalchemy import update as sa_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, select

from taskdeck.core.errors import StoreError
from taskdeck.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlmodel.ext.asyncio.session import AsyncSession

ModelT = TypeVar("ModelT", bound=SQLModel)

logger = get_logger(__name__)


async def commit_session(session: AsyncSession) -> None:
    """Commit the session; roll back and raise `StoreError` on failure.

    `IntegrityError` is re-raised untouched so callers can translate
    constraint violations into domain errors.
    """
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    except SQLAlchemyError as exc:
        logger.exception("db.commit.failed")
        await session.rollback()
        raise StoreError() from exc


async def save(session: AsyncSession, obj: ModelT, *, commit: bool = True) -> ModelT:
    """Add `obj` to the session, optionally commit, and refresh it."""
    session.add(obj)
    if not commit:
        try:
            await session.flush()
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("db.flush.failed model=%s", type(obj).__name__)
            raise StoreError() from exc
        return obj
    await commit_session(session)
    try:
        await session.refresh(obj)
    except SQLAlchemyError as exc:
        raise StoreError() from exc
    return obj


async def get_or_create(
    session: AsyncSession,
    model: type[ModelT],
    *,
    defaults: Mapping[str, Any] | None = None,
    **lookup: Any,
) -> tuple[ModelT, bool]:
    """Return the row matching `lookup`, inserting it with `defaults` when absent.

    A concurrent insert of the same key is resolved by re-reading the winner.
    """
    statement = select(model).filter_by(**lookup)
    existing = (await session.exec(statement)).first()
    if existing is not None:
        return existing, False
    obj = model(**lookup, **dict(defaults or {}))
    try:
        return await save(session, obj), True
    except IntegrityError:
        winner = (await session.exec(statement)).first()
        if winner is None:
            raise
        return winner, False


async def patch(
    session: AsyncSession,
    obj: ModelT,
    updates: Mapping[str, Any],
    *,
    commit: bool = True,
) -> ModelT:
    """Apply a field mapping to `obj` and persist it."""
    for key, value in updates.items():
        setattr(obj, key, value)
    return await save(session, obj, commit=commit)


async def delete(session: AsyncSession, obj: SQLModel, *, commit: bool = True) -> None:
    await session.delete(obj)
    if commit:
        await commit_session(session)


async def delete_where(
    session: AsyncSession,
    model: type[SQLModel],
    *conditions: Any,
    commit: bool = True,
) -> None:
    """Bulk-delete rows of `model` matching all `conditions`."""
    statement = sa_delete(model).where(*conditions)
    try:
        await session.exec(statement)  # type: ignore[call-overload]
    except SQLAlchemyError as exc:
        logger.exception("db.delete_where.failed model=%s", model.__name__)
        raise StoreError() from exc
    if commit:
        await commit_session(session)


async def update_where(
    session: AsyncSession,
    model: type[SQLModel],
    *conditions: Any,
    values: Mapping[str, Any],
    commit: bool = True,
) -> int:
    """Bulk-update rows of `model` matching all `conditions`; returns the row count."""
    statement = sa_update(model).where(*conditions).values(**dict(values))
    try:
        result = await session.exec(statement)  # type: ignore[call-overload]
    except SQLAlchemyError as exc:
        logger.exception("db.update_where.failed model=%s", model.__name__)
        raise StoreError() from exc
    updated = int(result.rowcount or 0)
    if commit:
        await commit_session(session)
    return updated
