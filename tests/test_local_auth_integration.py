# ruff: noqa: INP001
"""Integration tests for local auth mode on protected API routes."""

from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi import APIRouter, FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from taskdeck.api.auth import router as auth_router
from taskdeck.api.profiles import router as profiles_router
from taskdeck.core import auth as auth_module
from taskdeck.core.config import AuthMode, settings
from taskdeck.core.error_handling import install_error_handling
from taskdeck.db.session import get_session

TOKEN = "integration-token-" + "x" * 40


async def _make_engine() -> AsyncEngine:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.connect() as conn, conn.begin():
        await conn.run_sync(SQLModel.metadata.create_all)
    return engine


def _build_test_app(session_maker: async_sessionmaker[AsyncSession]) -> FastAPI:
    app = FastAPI()
    install_error_handling(app)
    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(auth_router)
    api_v1.include_router(profiles_router)
    app.include_router(api_v1)

    async def _override_get_session() -> AsyncSession:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = _override_get_session
    return app


@pytest.mark.asyncio
async def test_local_auth_profile_requires_and_accepts_valid_token(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    suffix = uuid4().hex
    expected_subject = f"local-auth-integration-{suffix}"
    expected_email = f"local-{suffix}@localhost"

    monkeypatch.setattr(settings, "auth_mode", AuthMode.LOCAL)
    monkeypatch.setattr(settings, "local_auth_token", TOKEN)
    monkeypatch.setattr(auth_module, "LOCAL_AUTH_SUBJECT", expected_subject)
    monkeypatch.setattr(auth_module, "LOCAL_AUTH_EMAIL", expected_email)
    monkeypatch.setattr(auth_module, "LOCAL_AUTH_NAME", "Local Integration User")

    engine = await _make_engine()
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    app = _build_test_app(session_maker)

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://testserver",
        ) as client:
            missing = await client.get("/api/v1/profiles/me")
            assert missing.status_code == 401
            assert missing.json()["request_id"]

            invalid = await client.get(
                "/api/v1/profiles/me",
                headers={"Authorization": "Bearer wrong-token"},
            )
            assert invalid.status_code == 401

            authorized = await client.post(
                "/api/v1/auth/bootstrap",
                headers={"Authorization": f"Bearer {TOKEN}"},
            )
            assert authorized.status_code == 200
            payload = authorized.json()
            assert payload["email"] == expected_email
            assert payload["full_name"] == "Local Integration User"

            repeat = await client.get(
                "/api/v1/profiles/me",
                headers={"Authorization": f"Bearer {TOKEN}"},
            )
            assert repeat.status_code == 200
            assert repeat.json()["id"] == payload["id"]
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_profile_update_validates_timezone(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "auth_mode", AuthMode.LOCAL)
    monkeypatch.setattr(settings, "local_auth_token", TOKEN)

    engine = await _make_engine()
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    app = _build_test_app(session_maker)
    headers = {"Authorization": f"Bearer {TOKEN}"}

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://testserver",
        ) as client:
            bad = await client.patch(
                "/api/v1/profiles/me",
                json={"timezone": "Nowhere/Special"},
                headers=headers,
            )
            assert bad.status_code == 422

            unknown_field = await client.patch(
                "/api/v1/profiles/me",
                json={"email": "someone-else@example.com"},
                headers=headers,
            )
            assert unknown_field.status_code == 422

            ok = await client.patch(
                "/api/v1/profiles/me",
                json={"timezone": "Asia/Tokyo", "full_name": "Renamed"},
                headers=headers,
            )
            assert ok.status_code == 200
            body = ok.json()
            assert body["timezone"] == "Asia/Tokyo"
            assert body["full_name"] == "Renamed"
    finally:
        await engine.dispose()


def test_bearer_parsing_and_claim_hints() -> None:
    assert auth_module._bearer_token(None) is None
    assert auth_module._bearer_token("Basic abc") is None
    assert auth_module._bearer_token("Bearer   ") is None
    assert auth_module._bearer_token("bearer tok-1") == "tok-1"

    hints = auth_module.hints_from_claims(
        {
            "email_addresses": [{"email_address": "  Sam@Example.COM "}],
            "given_name": "Sam",
            "family_name": "Lee",
        },
    )
    assert hints.email == "sam@example.com"
    assert hints.full_name == "Sam Lee"
    assert hints.avatar_url is None
