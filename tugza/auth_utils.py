# auth_utils.py
# Operator credentials: argon2 password hashes and scoped bearer tokens.

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import settings

OPERATOR_SCOPE = "operator"

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


@dataclass(frozen=True)
class OperatorClaims:
    email: str
    expires_at: datetime


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # unknown or malformed stored hash
        return False


def issue_operator_token(email: str, now: Optional[datetime] = None) -> str:
    """
    Sign a bearer token for an operator.

    The token carries the operator email as `sub`, the `operator` scope and
    an expiry of ACCESS_TOKEN_EXPIRE_MINUTES from `now`.
    """
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "sub": email,
        "scope": OPERATOR_SCOPE,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def read_operator_token(token: str) -> Optional[OperatorClaims]:
    """Return the claims of a valid operator token, None for anything else."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    email = payload.get("sub")
    if not isinstance(email, str) or not email or payload.get("scope") != OPERATOR_SCOPE:
        return None
    return OperatorClaims(email=email, expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc))
