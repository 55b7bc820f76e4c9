# Identity

from .identity import (
    AdminDependency,
    IdentityDependency,
    IdentityMiddleware,
    TokenError,
    TokenService,
    current_session_id,
    optional_user,
    require_admin,
    require_user,
    token_service,
)

__all__ = [
    "AdminDependency",
    "IdentityDependency",
    "IdentityMiddleware",
    "TokenError",
    "TokenService",
    "current_session_id",
    "optional_user",
    "require_admin",
    "require_user",
    "token_service",
]
