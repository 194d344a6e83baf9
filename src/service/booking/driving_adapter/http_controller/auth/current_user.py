from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.platform.config.di import Container
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import (
    CurrentUser,
    JwtAuth,
)


bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> CurrentUser:
    """Stateless: the token is verified locally, no identity lookup."""
    token = credentials.credentials if credentials else None
    return jwt_auth.get_current_user_from_jwt(token)
