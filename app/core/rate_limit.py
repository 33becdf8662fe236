"""
Rate limiting for the AddedEmail API.

Inserts are throttled per signed-in user, so one account cannot flood the
table by rotating addresses. Callers without a usable token are throttled
by client address instead.
"""

from fastapi import HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.utils.auth import principal_from_token


def client_address(request: Request) -> str:
    """Originating client address, honouring proxy headers."""
    for header in ("X-Forwarded-For", "X-Real-IP"):
        value = request.headers.get(header)
        if value:
            # X-Forwarded-For lists the client first, then each proxy
            return value.split(",")[0].strip()
    return get_remote_address(request)


def rate_limit_key(request: Request) -> str:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and token:
        try:
            principal = principal_from_token(token.strip())
        except HTTPException:
            # Rejected later by the endpoint; count it against the address
            principal = None
        if principal is not None and principal.authenticated:
            return f"user:{principal.user_id}"
    return f"ip:{client_address(request)}"


limiter = Limiter(key_func=rate_limit_key)
