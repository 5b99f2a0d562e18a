# ruff: noqa: INP001
"""Direct sharing tests: recipient resolution, duplicates and owner-only management."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from taskdeck.core.errors import (
    AccessDeniedError,
    AlreadySharedError,
    NotFoundError,
    SelfShareRejectedError,
    UserNotFoundError,
)
from taskdeck.models.profiles import Profile
from taskdeck.models.task_shares import TaskShare
from taskdeck.models.tasks import Task
from taskdeck.services import task_access, task_sharing


async def _make_engine() -> AsyncEngine:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.connect() as conn, conn.begin():
        await conn.run_sync(SQLModel.metadata.create_all)
    return engine


async def _seed(session: AsyncSession) -> tuple[Profile, Profile, Profile, Task]:
    owner = Profile(clerk_user_id=f"user_{uuid4().hex}", email="owner@example.com")
    recipient = Profile(clerk_user_id=f"user_{uuid4().hex}", email="ravi@example.com")
    stranger = Profile(clerk_user_id=f"user_{uuid4().hex}", email="sam@example.com")
    session.add_all([owner, recipient, stranger])
    await session.commit()
    task = Task(owner_id=owner.id, title="Shared report", due_date=datetime(2026, 5, 1, 12, 0))
    session.add(task)
    await session.commit()
    await session.refresh(task)
    return owner, recipient, stranger, task


@pytest.mark.asyncio
async def test_share_resolves_recipient_case_insensitively() -> None:
    engine = await _make_engine()
    try:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            owner, recipient, _, task = await _seed(session)

            share = await task_sharing.share_task(
                session,
                owner.id,
                task.id,
                "  Ravi@Example.COM ",
                "edit",
            )

            assert share.task_id == task.id
            assert share.shared_by_user_id == owner.id
            assert share.shared_with_user_id == recipient.id
            assert share.permission == "edit"
            view = await task_access.resolve_task_view(session, recipient.id, task.id)
            assert view.can_edit is True
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_second_share_to_same_recipient_is_rejected_without_new_row() -> None:
    engine = await _make_engine()
    try:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            owner, _, _, task = await _seed(session)
            await task_sharing.share_task(session, owner.id, task.id, "ravi@example.com")

            with pytest.raises(AlreadySharedError):
                await task_sharing.share_task(
                    session,
                    owner.id,
                    task.id,
                    "ravi@example.com",
                    "edit",
                )

            shares = await TaskShare.objects.filter_by(task_id=task.id).all(session)
        assert len(shares) == 1
        assert shares[0].permission == "view"
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_store_uniqueness_backs_the_duplicate_check() -> None:
    engine = await _make_engine()
    try:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            _, recipient, _, task = await _seed(session)
            task_id, recipient_id = task.id, recipient.id
            await task_sharing.create_share(
                session,
                task=task,
                recipient_id=recipient.id,
                permission="view",
            )

            with pytest.raises(AlreadySharedError):
                await task_sharing.create_share(
                    session,
                    task=task,
                    recipient_id=recipient.id,
                    permission="edit",
                )

            # The failed insert rolled back the session; the first share survives.
            assert await task_sharing.is_shared_with(session, task_id, recipient_id)
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_self_share_and_unknown_recipient_are_rejected() -> None:
    engine = await _make_engine()
    try:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            owner, _, _, task = await _seed(session)

            with pytest.raises(SelfShareRejectedError):
                await task_sharing.share_task(session, owner.id, task.id, "OWNER@example.com")
            with pytest.raises(UserNotFoundError) as exc_info:
                await task_sharing.share_task(session, owner.id, task.id, "nobody@example.com")

            assert exc_info.value.status_code == 404
            assert exc_info.value.code == "user_not_found"
            assert not await TaskShare.objects.filter_by(task_id=task.id).exists(session)
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_only_the_owner_may_share() -> None:
    engine = await _make_engine()
    try:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            owner, recipient, stranger, task = await _seed(session)
            await task_sharing.share_task(session, owner.id, task.id, "ravi@example.com", "edit")

            # Edit rights on the task do not extend to managing its shares.
            with pytest.raises(AccessDeniedError):
                await task_sharing.share_task(session, recipient.id, task.id, "sam@example.com")
            with pytest.raises(NotFoundError):
                await task_sharing.share_task(session, stranger.id, task.id, "ravi@example.com")
            with pytest.raises(AccessDeniedError):
                await task_sharing.list_task_shares(session, recipient.id, task.id)
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_owner_updates_lists_and_revokes_shares() -> None:
    engine = await _make_engine()
    try:
        async with AsyncSession(engine, expire_on_commit=False) as session:
            owner, recipient, stranger, task = await _seed(session)
            share = await task_sharing.share_task(session, owner.id, task.id, "ravi@example.com")

            updated = await task_sharing.update_share_permission(
                session,
                owner.id,
                share.id,
                "edit",
            )
            assert updated.permission == "edit"

            listed = await task_sharing.list_task_shares(session, owner.id, task.id)
            assert [item.share.id for item in listed] == [share.id]
            assert listed[0].recipient is not None
            assert listed[0].recipient.email == "ravi@example.com"

            with pytest.raises(AccessDeniedError):
                await task_sharing.revoke_share(session, recipient.id, share.id)
            with pytest.raises(NotFoundError):
                await task_sharing.revoke_share(session, stranger.id, share.id)

            await task_sharing.revoke_share(session, owner.id, share.id)

            assert not await task_sharing.is_shared_with(session, task.id, recipient.id)
            with pytest.raises(NotFoundError):
                await task_access.resolve_task_view(session, recipient.id, task.id)
            with pytest.raises(NotFoundError):
                await task_sharing.revoke_share(session, owner.id, share.id)
    finally:
        await engine.dispose()
