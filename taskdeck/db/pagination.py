"""Pagination helper wrapping fastapi-pagination's SQLModel integration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi_pagination.ext.sqlmodel import paginate as _paginate

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sqlmodel.ext.asyncio.session import AsyncSession
    from sqlmodel.sql.expression import Select, SelectOfScalar


async def paginate(
    session: AsyncSession,
    statement: Select[Any] | SelectOfScalar[Any],
    *,
    transformer: Callable[[Sequence[Any]], Sequence[Any]] | None = None,
) -> Any:
    """Run a limit/offset page query using the request's page params."""
    if transformer is None:
        return await _paginate(session, statement)
    return await _paginate(session, statement, transformer=transformer)
