"""Small chainable query helpers exposed as `Model.objects`."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlmodel import SQLModel, col, select

if TYPE_CHECKING:
    from sqlmodel.ext.asyncio.session import AsyncSession
    from sqlmodel.sql.expression import SelectOfScalar

ModelT = TypeVar("ModelT", bound=SQLModel)


@dataclass(frozen=True)
class QuerySet(Generic[ModelT]):
    """Immutable wrapper around a select statement for a single model."""

    model: type[ModelT]
    statement: SelectOfScalar[ModelT]

    def filter(self, *conditions: Any) -> QuerySet[ModelT]:
        return replace(self, statement=self.statement.where(*conditions))

    def filter_by(self, **kwargs: Any) -> QuerySet[ModelT]:
        return replace(self, statement=self.statement.filter_by(**kwargs))

    def order_by(self, *clauses: Any) -> QuerySet[ModelT]:
        return replace(self, statement=self.statement.order_by(*clauses))

    def limit(self, value: int) -> QuerySet[ModelT]:
        return replace(self, statement=self.statement.limit(value))

    def offset(self, value: int) -> QuerySet[ModelT]:
        return replace(self, statement=self.statement.offset(value))

    async def all(self, session: AsyncSession) -> list[ModelT]:
        return list(await session.exec(self.statement))

    async def first(self, session: AsyncSession) -> ModelT | None:
        return (await session.exec(self.statement)).first()

    async def exists(self, session: AsyncSession) -> bool:
        return (await session.exec(self.statement.limit(1))).first() is not None


class ModelManager(Generic[ModelT]):
    """Entry point for building `QuerySet`s of one model."""

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    def _queryset(self) -> QuerySet[ModelT]:
        return QuerySet(model=self.model, statement=select(self.model))

    def all(self) -> QuerySet[ModelT]:
        return self._queryset()

    def by_id(self, obj_id: Any) -> QuerySet[ModelT]:
        return self.by_field("id", obj_id)

    def by_ids(self, obj_ids: Iterable[Any]) -> QuerySet[ModelT]:
        return self.by_field_in("id", obj_ids)

    def by_field(self, field_name: str, value: Any) -> QuerySet[ModelT]:
        return self._queryset().filter(col(getattr(self.model, field_name)) == value)

    def by_field_in(self, field_name: str, values: Iterable[Any]) -> QuerySet[ModelT]:
        return self._queryset().filter(col(getattr(self.model, field_name)).in_(list(values)))

    def filter(self, *conditions: Any) -> QuerySet[ModelT]:
        return self._queryset().filter(*conditions)

    def filter_by(self, **kwargs: Any) -> QuerySet[ModelT]:
        return self._queryset().filter_by(**kwargs)


class ManagerDescriptor:
    """Class-level descriptor returning a `ModelManager` bound to the owner class."""

    def __get__(self, instance: object, owner: type[Any]) -> ModelManager[Any]:
        return ModelManager(owner)
