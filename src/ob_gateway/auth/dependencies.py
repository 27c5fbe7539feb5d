"""FastAPI dependency: get_current_principal.

Usage in any protected router:
    from src.ob_gateway.auth.dependencies import Principal, get_current_principal

    @router.get("/protected")
    async def protected(principal: Principal = Depends(get_current_principal)):
        ...
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.ob_common.errors import InvalidCredentialsError
from src.ob_gateway.auth.jwt_handler import decode_access_token

# tokenUrl points at the external identity provider's token endpoint (Swagger "Authorize")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


@dataclass(frozen=True)
class Principal:
    user_id: str
    org_id: str


async def get_current_principal(token: str = Depends(oauth2_scheme)) -> Principal:
    """Validate the Bearer token and return the caller's user and tenant.

    Raises HTTP 401 if the token is invalid, expired, or lacks sub/org_id.
    """
    try:
        payload = decode_access_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user_id = payload.get("sub")
    org_id = payload.get("org_id")
    if not user_id or not org_id:
        raise _CREDENTIALS_EXCEPTION
    return Principal(user_id=str(user_id), org_id=str(org_id))
