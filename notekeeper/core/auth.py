from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notekeeper.core.security import verify_token
from notekeeper.domains.identity.entities import ActorContext, Role

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_actor(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> ActorContext:
    """Зависимость: актор из уже выданного токена (sub + role)"""
    if credentials is None:
        raise _unauthorized("Not authenticated")

    payload = verify_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Could not validate credentials")

    try:
        user_id = int(payload.get("sub"))
        role = Role.parse(payload.get("role"))
    except (TypeError, ValueError):
        raise _unauthorized("Could not validate credentials")

    return ActorContext(user_id=user_id, role=role)
