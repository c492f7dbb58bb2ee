from dataclasses import dataclass
from datetime import datetime, timedelta
from jose import jwt, JWTError
from fastapi import HTTPException, status

from config.auth_settings import JWT_SECRET_KEY, JWT_ALGORITHM, ACCESS_TOKEN_EXPIRE_HOURS


@dataclass
class TokenClaims:
    user_id: str
    username: str
    expires_at: datetime


def issue_token(user_id: str, username: str, expires_in: timedelta | None = None) -> str:
    """Issue a signed session token for a user."""
    now = datetime.utcnow()
    expires_at = now + (expires_in or timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS))
    payload = {
        "sub": user_id,
        "username": username,
        "iat": now,
        "exp": expires_at,
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and verify a session token."""
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def extract_claims(token: str) -> TokenClaims:
    """Extract user claims from a session token."""
    payload = decode_token(token)

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user identifier",
        )

    return TokenClaims(
        user_id=user_id,
        username=payload.get("username", ""),
        expires_at=datetime.utcfromtimestamp(payload.get("exp", 0)),
    )
