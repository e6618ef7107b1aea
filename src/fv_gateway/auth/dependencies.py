"""FastAPI dependency: get_current_user.

Usage in any protected router:
    from src.fv_gateway.auth.dependencies import get_current_user

    @router.post("/features")
    async def create(user: UserModel = Depends(get_current_user)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.fv_common.database import get_db_session
from src.fv_common.errors import InvalidCredentialsError
from src.fv_gateway.auth.jwt_handler import decode_token
from src.fv_gateway.user.db_models import UserModel
from src.fv_gateway.user.repository import UserRepository, UserRepositoryProtocol

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


def get_user_repository() -> UserRepositoryProtocol:
    """Overridable in tests with an in-memory repository."""
    return UserRepository()


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
    users: UserRepositoryProtocol = Depends(get_user_repository),
) -> UserModel:
    """Extract and validate the JWT Bearer token, return the UserModel.

    Raises HTTP 401 if the token is missing, invalid, expired, or names a user
    that no longer exists.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user_id: str | None = payload.get("sub")
    if not user_id:
        raise _CREDENTIALS_EXCEPTION

    user = await users.get_user_by_id(db, user_id)
    if user is None:
        raise _CREDENTIALS_EXCEPTION
    return user
