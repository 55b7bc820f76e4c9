"""
Bearer Token Identity Middleware

Resolves the opaque user context for a request from an
``Authorization: Bearer <jwt>`` header. Requests without a token proceed
as anonymous visitors; requests with a bad or revoked token are rejected.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import jwt
from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from ..core.config import Settings, settings
from ..core.session import SessionManager, UserSession, session_manager
from ..database.users import UserDatabase, user_db

logger = logging.getLogger(__name__)


class TokenError(Exception):
    """Token could not be decoded or its session no longer exists"""


class TokenService:
    """Issues and verifies session tokens"""

    def __init__(self, config: Settings, sessions: SessionManager):
        self.config = config
        self.sessions = sessions

    def issue(self, session: UserSession) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": session.user_id,
            "sid": session.session_id,
            "iat": now,
            "exp": now + timedelta(minutes=self.config.token_ttl_minutes),
        }
        return jwt.encode(payload, self.config.secret_key, algorithm=self.config.token_algorithm)

    def verify(self, token: str) -> UserSession:
        try:
            payload = jwt.decode(
                token,
                self.config.secret_key,
                algorithms=[self.config.token_algorithm],
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise TokenError(f"Invalid token: {exc}") from exc

        session = self.sessions.get_session(payload.get("sid", ""))
        if not session or session.user_id != payload.get("sub"):
            raise TokenError("Session has ended")

        session.touch()
        return session


token_service = TokenService(settings, session_manager)


class IdentityMiddleware(BaseHTTPMiddleware):
    """
    Middleware that resolves bearer tokens on requests.

    If a request carries a bearer token, it is verified.
    If verification fails, the request is rejected with 401.
    If there is no token, the request proceeds anonymously.
    """

    def __init__(self, app, tokens: TokenService):
        super().__init__(app)
        self.tokens = tokens

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.user_id = None
        request.state.session_id = None

        authorization = request.headers.get("Authorization")
        if authorization and authorization.lower().startswith("bearer "):
            token = authorization[7:].strip()
            try:
                session = self.tokens.verify(token)
            except TokenError as exc:
                logger.warning(f"Token rejected: {exc}")
                return JSONResponse(status_code=401, content={"detail": str(exc)})

            request.state.user_id = session.user_id
            request.state.session_id = session.session_id

        response = await call_next(request)
        return response


class IdentityDependency:
    """
    FastAPI dependency yielding the caller's user context.

    The context is the user id string, or None for anonymous callers.
    """

    def __init__(self, require_user: bool = False):
        self.require_user = require_user

    async def __call__(self, request: Request) -> Optional[Any]:
        user_id = getattr(request.state, "user_id", None)

        if self.require_user and user_id is None:
            raise HTTPException(
                status_code=401,
                detail="Please login to continue",
            )

        return user_id


class AdminDependency:
    """
    FastAPI dependency admitting only administrators.

    Anonymous callers get 401, logged-in customers get 403.
    """

    def __init__(self, users: UserDatabase):
        self.users = users

    async def __call__(self, request: Request) -> str:
        user_id = getattr(request.state, "user_id", None)
        if user_id is None:
            raise HTTPException(status_code=401, detail="Please login to continue")

        profile = self.users.get_by_id(user_id)
        if not profile or not profile.is_admin:
            logger.warning(f"User {user_id} denied admin access to {request.url.path}")
            raise HTTPException(status_code=403, detail="Admin access required")

        return user_id


def current_session_id(request: Request) -> Optional[str]:
    return getattr(request.state, "session_id", None)


# Dependency instances
require_user = IdentityDependency(require_user=True)
optional_user = IdentityDependency(require_user=False)
require_admin = AdminDependency(user_db)
