from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError

from app.constants import SECRET_KEY, ALGORITHM, JWT_AUDIENCE

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The caller as seen by the row level security policies.

    ``user_id`` plays the role of ``auth.uid()``; it is ``None`` for
    anonymous callers.
    """

    user_id: Optional[UUID] = None

    @property
    def authenticated(self) -> bool:
        return self.user_id is not None

    def __str__(self) -> str:
        return str(self.user_id) if self.user_id else "anonymous"


ANONYMOUS = Principal()


def principal_from_token(token: str) -> Principal:
    """Decode a Supabase-style access token into a Principal.

    Tokens carrying the ``anon`` role identify no user. Anything else must
    carry a UUID ``sub`` claim.
    """
    try:
        payload = jwt.decode(
            token, SECRET_KEY, algorithms=[ALGORITHM], audience=JWT_AUDIENCE
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    if payload.get("role") == "anon":
        return ANONYMOUS

    subject = payload.get("sub")
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload"
        )
    try:
        return Principal(user_id=UUID(str(subject)))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject"
        )


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    # A missing header is not an error here: the policies decide what an
    # anonymous caller may do.
    if credentials is None:
        return ANONYMOUS
    return principal_from_token(credentials.credentials)


def create_access_token(user_id: UUID, expires_minutes: int = 60) -> str:
    """Mint an access token shaped like the ones the identity provider issues."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    payload = {
        "sub": str(user_id),
        "role": "authenticated",
        "aud": JWT_AUDIENCE,
        "exp": expire,
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)
