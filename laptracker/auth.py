from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional

from fastapi import Depends, HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .security import SessionToken, TokenCodec
from .settings import Settings, request_settings

COOKIE_NAME = "laptracker_session"


class Role(str, Enum):
    HELPER = "helper"
    SUPERADMIN = "superadmin"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Role"]:
        try:
            return cls(value)
        except ValueError:
            return None


STAFF_ROLES = frozenset({Role.HELPER, Role.SUPERADMIN})


def is_permitted(token: Optional[SessionToken], allowed: Iterable[Role]) -> bool:
    """Return True when the token's role is one of ``allowed``.

    Pure predicate: no token, an empty role or a role outside the enumeration
    is never permitted.
    """
    if token is None:
        return False
    role = Role.parse(token.user_role)
    if role is None:
        return False
    return role in frozenset(allowed)


def token_codec(settings: Settings) -> TokenCodec:
    return TokenCodec(settings.LAPTRACKER_SECRET_KEY, max_age=settings.LAPTRACKER_SESSION_MAX_AGE)


def get_token(request: Request, settings: Settings = Depends(request_settings)) -> Optional[SessionToken]:
    return token_codec(settings).loads(request.cookies.get(COOKIE_NAME))


def require_roles(*roles: Role):
    allowed = frozenset(roles)

    def dependency(token: Optional[SessionToken] = Depends(get_token)) -> SessionToken:
        if token is None or not token.email:
            raise HTTPException(status_code=401, detail="Login required")
        if not is_permitted(token, allowed):
            raise HTTPException(status_code=403, detail="Forbidden")
        return token

    return dependency


staff_required = require_roles(Role.HELPER, Role.SUPERADMIN)
superadmin_required = require_roles(Role.SUPERADMIN)


def set_login_cookie(request: Request, token: SessionToken, settings: Settings) -> None:
    request.state._set_auth_cookie = token_codec(settings).dumps(token)

def clear_login_cookie(request: Request) -> None:
    request.state._clear_auth_cookie = True


class AuthCookieMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, max_age: int, secure: bool = False) -> None:
        super().__init__(app)
        self.max_age = max_age
        self.secure = secure

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)

        token = getattr(request.state, "_set_auth_cookie", None)
        if token:
            response.set_cookie(
                COOKIE_NAME,
                token,
                httponly=True,
                samesite="lax",
                secure=self.secure,
                max_age=self.max_age,
            )
        if getattr(request.state, "_clear_auth_cookie", False):
            response.delete_cookie(COOKIE_NAME)
        return response
