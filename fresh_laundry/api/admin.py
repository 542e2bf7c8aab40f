from datetime import timedelta

from fastapi import APIRouter, Depends, status

from fresh_laundry.api.deps import get_accounts_service, get_settings, get_token_issuer
from fresh_laundry.core.config import Settings
from fresh_laundry.core.security import TokenIssuer
from fresh_laundry.models.schemas import AdminLoggedIn, AdminRegistered, LoginRequest, RegisterRequest
from fresh_laundry.services.accounts_service import ADMIN, AccountsService

router = APIRouter()


@router.post("/register", response_model=AdminRegistered, status_code=status.HTTP_201_CREATED)
def register_admin(payload: RegisterRequest, accounts: AccountsService = Depends(get_accounts_service)):
    admin = accounts.register(ADMIN, payload.name, payload.email, payload.password)
    return {"message": "Admin registered successfully", "admin": admin}


@router.post("/login", response_model=AdminLoggedIn)
def login_admin(
    payload: LoginRequest,
    accounts: AccountsService = Depends(get_accounts_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
):
    admin = accounts.authenticate(ADMIN, payload.email, payload.password)
    # Admin tokens carry role=admin and live longer than user tokens.
    token = issuer.issue(admin, timedelta(minutes=settings.ADMIN_TOKEN_EXPIRE_MINUTES))
    return {"message": "Admin login successful", "token": token, "admin": admin}
