"""Bearer token verification.

Tokens are issued by the identity service and only verified here: the
signature, ``exp`` and a non-empty ``sub`` (the user id the actor is
loaded from). create_access_token signs tokens with the same key for
tooling and tests.
"""

from datetime import timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import get_settings
from app.shared.utils.datetime import utc_now

DEFAULT_TOKEN_TTL = timedelta(minutes=60)
REQUIRED_CLAIMS = {"require_exp": True, "require_sub": True}


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign claims (``sub`` = user id) with an expiry of expires_delta or one hour."""
    settings = get_settings()
    claims = {**data, "exp": utc_now() + (expires_delta or DEFAULT_TOKEN_TTL)}
    return jwt.encode(claims, settings.secret_key.get_secret_value(), algorithm=settings.algorithm)


def verify_token(token: str) -> dict[str, Any]:
    """Decode token and return its claims.

    Raises:
        ValueError: Bad signature or format, expired, or no usable ``sub``.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options=REQUIRED_CLAIMS,
        )
    except ExpiredSignatureError as e:
        raise ValueError("Token has expired") from e
    except JWTError as e:
        raise ValueError(f"Invalid token: {e}") from e
    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        raise ValueError("Token subject must be a non-empty user id")
    return claims
