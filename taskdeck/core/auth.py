"""Request authentication for Clerk session tokens and the local shared token."""

from __future__ import annotations

from dataclasses import dataclass
from hmac import compare_digest
from typing import TYPE_CHECKING, Literal

import httpx
from clerk_backend_api import Clerk
from clerk_backend_api.models.clerkerrors import ClerkErrors
from clerk_backend_api.models.sdkerror import SDKError
from clerk_backend_api.security.types import AuthenticateRequestOptions, AuthStatus, RequestState
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from taskdeck.core.config import AuthMode, settings
from taskdeck.core.logging import get_logger
from taskdeck.core.time import utcnow
from taskdeck.db import crud
from taskdeck.db.session import get_session
from taskdeck.models.profiles import Profile

if TYPE_CHECKING:
    from clerk_backend_api.models.user import User as ClerkUser
    from sqlmodel.ext.asyncio.session import AsyncSession

logger = get_logger(__name__)
security = HTTPBearer(auto_error=False)
SECURITY_DEP = Depends(security)
SESSION_DEP = Depends(get_session)
LOCAL_AUTH_SUBJECT = "local-auth-user"
LOCAL_AUTH_EMAIL = "owner@taskdeck.local"
LOCAL_AUTH_NAME = "Local User"


class ClerkTokenPayload(BaseModel):
    """JWT claims required from Clerk session tokens."""

    sub: str


@dataclass
class AuthContext:
    """Authenticated actor resolved from the inbound request."""

    actor_type: Literal["user"]
    profile: Profile


@dataclass(frozen=True)
class IdentityHints:
    """Email and display name discovered for an external identity."""

    email: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None


def normalize_email(value: object) -> str | None:
    """Trim and lower-case an email-like value; `None` when blank."""
    if not isinstance(value, str):
        return None
    cleaned = value.strip().lower()
    return cleaned or None


def _text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def _joined_name(first: str | None, last: str | None) -> str | None:
    parts = [part for part in (first, last) if part]
    return " ".join(parts) if parts else None


def hints_from_claims(claims: dict[str, object]) -> IdentityHints:
    """Pull email/name/avatar out of session token claims."""
    email = next(
        (
            found
            for key in ("email", "email_address", "primary_email_address")
            if (found := normalize_email(claims.get(key)))
        ),
        None,
    )
    if email is None:
        addresses = claims.get("email_addresses")
        if isinstance(addresses, list):
            for item in addresses:
                raw = item.get("email_address") if isinstance(item, dict) else item
                email = normalize_email(raw)
                if email:
                    break
    full_name = _text(claims.get("name")) or _text(claims.get("full_name"))
    if full_name is None:
        full_name = _joined_name(
            _text(claims.get("given_name")) or _text(claims.get("first_name")),
            _text(claims.get("family_name")) or _text(claims.get("last_name")),
        )
    avatar_url = _text(claims.get("image_url")) or _text(claims.get("picture"))
    return IdentityHints(email=email, full_name=full_name, avatar_url=avatar_url)


def _hints_from_clerk_user(user: ClerkUser | None) -> IdentityHints:
    if user is None:
        return IdentityHints()
    primary_id = _text(getattr(user, "primary_email_address_id", None))
    email: str | None = None
    for item in getattr(user, "email_addresses", None) or []:
        candidate = normalize_email(getattr(item, "email_address", None))
        if candidate is None:
            continue
        if email is None or _text(getattr(item, "id", None)) == primary_id:
            email = candidate
    full_name = _joined_name(
        _text(getattr(user, "first_name", None)),
        _text(getattr(user, "last_name", None)),
    ) or _text(getattr(user, "username", None))
    return IdentityHints(
        email=email,
        full_name=full_name,
        avatar_url=_text(getattr(user, "image_url", None)),
    )


def _clerk_server_url() -> str | None:
    server_url = (settings.clerk_api_url or "").strip().rstrip("/")
    if not server_url:
        return None
    return server_url if server_url.endswith("/v1") else f"{server_url}/v1"


async def _authenticate_clerk_request(request: Request) -> RequestState:
    options = AuthenticateRequestOptions(
        secret_key=settings.clerk_secret_key.strip(),
        clock_skew_in_ms=int(settings.clerk_leeway * 1000),
        accepts_token=["session_token"],
    )
    httpx_request = httpx.Request(request.method, str(request.url), headers=dict(request.headers))
    sdk = Clerk(bearer_auth=options.secret_key or "")
    return await run_in_threadpool(sdk.authenticate_request, httpx_request, options)


async def _fetch_clerk_hints(clerk_user_id: str) -> IdentityHints:
    subject_log = clerk_user_id[-6:]
    try:
        async with Clerk(
            bearer_auth=settings.clerk_secret_key.strip(),
            server_url=_clerk_server_url(),
            timeout_ms=5000,
        ) as clerk:
            user = await clerk.users.get_async(user_id=clerk_user_id)
    except ClerkErrors as exc:
        logger.warning(
            "auth.clerk.profile.fetch_failed subject=%s reason=clerk_errors error_type=%s",
            subject_log,
            exc.__class__.__name__,
        )
    except SDKError as exc:
        logger.warning(
            "auth.clerk.profile.fetch_failed subject=%s reason=sdk_error status=%s",
            subject_log,
            exc.status_code,
        )
    except httpx.HTTPError as exc:
        logger.warning(
            "auth.clerk.profile.fetch_failed subject=%s reason=transport error=%s",
            subject_log,
            str(exc) or exc.__class__.__name__,
        )
    else:
        return _hints_from_clerk_user(user)
    return IdentityHints()


async def sync_profile(
    session: AsyncSession,
    *,
    clerk_user_id: str,
    hints: IdentityHints,
    fetch_missing: bool = True,
) -> Profile:
    """Get-or-create the profile for an external subject and fill missing fields.

    The identity provider is only consulted when the local row still lacks an
    email or a display name.
    """
    profile, created = await crud.get_or_create(
        session,
        Profile,
        clerk_user_id=clerk_user_id,
        defaults={
            "email": hints.email,
            "full_name": hints.full_name,
            "avatar_url": hints.avatar_url,
        },
    )
    if fetch_missing and (not profile.email or not profile.full_name):
        fetched = await _fetch_clerk_hints(clerk_user_id)
        hints = IdentityHints(
            email=fetched.email or hints.email,
            full_name=fetched.full_name or hints.full_name,
            avatar_url=fetched.avatar_url or hints.avatar_url,
        )

    updates: dict[str, object] = {}
    if hints.email and profile.email != hints.email:
        updates["email"] = hints.email
    if hints.full_name and not profile.full_name:
        updates["full_name"] = hints.full_name
    if hints.avatar_url and not profile.avatar_url:
        updates["avatar_url"] = hints.avatar_url
    if updates:
        updates["updated_at"] = utcnow()
        profile = await crud.patch(session, profile, updates)
        logger.info(
            "auth.profile.sync subject=%s created=%s fields=%s",
            clerk_user_id[-6:],
            created,
            ",".join(sorted(updates)),
        )
    if not profile.email:
        logger.warning("auth.profile.missing_email subject=%s", clerk_user_id[-6:])
    return profile


async def _local_auth_context(request: Request, session: AsyncSession) -> AuthContext | None:
    token = _bearer_token(request.headers.get("Authorization"))
    expected = settings.local_auth_token.strip()
    if token is None or not expected or not compare_digest(token, expected):
        return None
    profile = await sync_profile(
        session,
        clerk_user_id=LOCAL_AUTH_SUBJECT,
        hints=IdentityHints(email=LOCAL_AUTH_EMAIL, full_name=LOCAL_AUTH_NAME),
        fetch_missing=False,
    )
    return AuthContext(actor_type="user", profile=profile)


async def _clerk_auth_context(request: Request, session: AsyncSession) -> AuthContext | None:
    request_state = await _authenticate_clerk_request(request)
    if request_state.status != AuthStatus.SIGNED_IN or not isinstance(request_state.payload, dict):
        return None
    claims: dict[str, object] = {str(k): v for k, v in request_state.payload.items()}
    try:
        subject = ClerkTokenPayload.model_validate(claims).sub
    except ValidationError:
        return None
    if not subject:
        return None
    profile = await sync_profile(
        session,
        clerk_user_id=subject,
        hints=hints_from_claims(claims),
    )
    return AuthContext(actor_type="user", profile=profile)


async def resolve_auth_context(request: Request, session: AsyncSession) -> AuthContext | None:
    """Authenticate `request` in the configured mode; `None` when unauthenticated."""
    if settings.auth_mode == AuthMode.LOCAL:
        return await _local_auth_context(request, session)
    return await _clerk_auth_context(request, session)


async def get_auth_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = SECURITY_DEP,
    session: AsyncSession = SESSION_DEP,
) -> AuthContext:
    """Resolve the signed-in profile or fail with 401."""
    ctx = await resolve_auth_context(request, session)
    if ctx is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return ctx

