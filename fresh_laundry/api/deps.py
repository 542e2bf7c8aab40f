from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from fresh_laundry.core.config import Settings
from fresh_laundry.core.errors import Forbidden
from fresh_laundry.core.security import TokenIssuer
from fresh_laundry.services.accounts_service import AccountsService
from fresh_laundry.services.orders_service import OrdersService
from fresh_laundry.services.stats_service import StatsService

oauth2 = OAuth2PasswordBearer(tokenUrl="/api/admin/login", auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_accounts_service(request: Request) -> AccountsService:
    return request.app.state.accounts_service


def get_orders_service(request: Request) -> OrdersService:
    return request.app.state.orders_service


def get_stats_service(request: Request) -> StatsService:
    return request.app.state.stats_service


def require_admin(
    token: Optional[str] = Depends(oauth2),
    settings: Settings = Depends(get_settings),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """Admin bearer-token gate, a no-op unless ENFORCE_ADMIN_AUTH is on."""
    if not settings.ENFORCE_ADMIN_AUTH:
        return None
    claims = issuer.verify(token)
    if claims.get("role") != "admin":
        raise Forbidden("Admin role required")
    return claims
