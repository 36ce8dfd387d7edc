"""Session token creation and verification.

The token is an HS256 JWT stored in the ``auth-token`` cookie. It carries the
team member id (``sub``), the email and an 8-hour ``exp``.

NOTE: No rotation, revocation list or refresh flow. A token stays valid until
it expires; logout only removes the cookie from the browser.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.op_common.errors import InvalidSessionError

_ALGORITHM = settings.JWT_ALGORITHM
_SESSION_EXPIRE = timedelta(hours=settings.SESSION_EXPIRE_HOURS)


def create_session_token(member_id: str, email: str) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": member_id,
        "email": email,
        "iat": now,
        "exp": now + _SESSION_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_session_token(token: str) -> dict[str, str]:
    """Decode and validate a session token.

    Raises:
        InvalidSessionError: bad signature, malformed, expired, or no subject.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidSessionError() from None

    if not payload.get("sub"):
        raise InvalidSessionError()
    return payload


def session_max_age() -> int:
    """Cookie max-age in seconds, matching the token lifetime."""
    return int(_SESSION_EXPIRE.total_seconds())
