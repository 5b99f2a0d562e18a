"""Shared SQLModel base class with query-manager support."""

from __future__ import annotations

from typing import ClassVar

from sqlmodel import SQLModel

from taskdeck.db.query_manager import ManagerDescriptor


class QueryModel(SQLModel, table=False):
    """Base for table models; exposes `Model.objects` query helpers."""

    objects: ClassVar[ManagerDescriptor] = ManagerDescriptor()
