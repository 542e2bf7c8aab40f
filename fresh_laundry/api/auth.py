from datetime import timedelta

from fastapi import APIRouter, Depends, status

from fresh_laundry.api.deps import get_accounts_service, get_settings, get_token_issuer
from fresh_laundry.core.config import Settings
from fresh_laundry.core.security import TokenIssuer
from fresh_laundry.models.schemas import LoginRequest, RegisterRequest, UserLoggedIn, UserRegistered
from fresh_laundry.services.accounts_service import USER, AccountsService

router = APIRouter()


@router.post("/register", response_model=UserRegistered, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, accounts: AccountsService = Depends(get_accounts_service)):
    user = accounts.register(USER, payload.name, payload.email, payload.password)
    return {"message": "User registered successfully", "user": user}


@router.post("/login", response_model=UserLoggedIn)
def login(
    payload: LoginRequest,
    accounts: AccountsService = Depends(get_accounts_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
):
    user = accounts.authenticate(USER, payload.email, payload.password)
    token = issuer.issue(user, timedelta(minutes=settings.USER_TOKEN_EXPIRE_MINUTES))
    return {"message": "Login successful", "token": token, "user": user}
