"""JWT issue and verification for the voting API.

Two token kinds, both HS256 over JWT_SECRET:

  access   sub + email, JWT_EXPIRE_MINUTES (24 h by default). Sent as a Bearer
           token on POST /features, PATCH/DELETE /features/{id} and every
           /features/{id}/vote route.
  refresh  sub only, JWT_REFRESH_EXPIRE_DAYS (7 days by default). Accepted only
           by POST /auth/refresh, which returns a new access token and leaves
           the refresh token as it is.

The "type" claim is checked on decode so neither kind can stand in for the
other. Tokens are not revoked; deleting a user makes the next refresh fail in
UserService instead.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.fv_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)

ACCESS = "access"
REFRESH = "refresh"


def create_access_token(user_id: str, email: str | None = None) -> str:
    extra = {"email": email} if email is not None else {}
    return _encode(user_id, ACCESS, _ACCESS_EXPIRE, extra)


def create_refresh_token(user_id: str) -> str:
    return _encode(user_id, REFRESH, _REFRESH_EXPIRE, {})


def decode_token(token: str, expected_type: str) -> dict[str, str]:
    """Decode a token and check its kind.

    Raises:
        InvalidCredentialsError: bad, expired or wrong-kind token where an
            access token was expected (surfaces as 401 on protected routes).
        InvalidRefreshTokenError: the same, on the refresh endpoint.
    """
    error = InvalidCredentialsError if expected_type == ACCESS else InvalidRefreshTokenError
    try:
        payload: dict[str, str] = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[_ALGORITHM]
        )
    except JWTError as exc:
        raise error() from exc
    if payload.get("type") != expected_type:
        raise error()
    return payload


def _encode(user_id: str, token_type: str, lifetime: timedelta, extra: dict[str, str]) -> str:
    now = datetime.now(UTC)
    claims = {"sub": user_id, "type": token_type, "iat": now, "exp": now + lifetime, **extra}
    return str(jwt.encode(claims, settings.JWT_SECRET, algorithm=_ALGORITHM))
