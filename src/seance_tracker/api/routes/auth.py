"""Authentication API routes.

Provides endpoints for user registration, login, token refresh and user
info.
"""

from fastapi import APIRouter, Depends, Request, status

from ..deps import get_account_service
from ..middleware.auth import CurrentUser, get_current_user
from ..middleware.rate_limit import limiter, login_limit, register_limit
from ..schemas import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)
from ...services.account_service import AccountService
from ...utils.dates import to_iso


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(register_limit)
async def register(
    request: Request,
    register_request: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
) -> RegisterResponse:
    """Register a new user account and return its first tokens."""
    user, tokens = accounts.register(
        email=register_request.email,
        password=register_request.password,
        display_name=register_request.display_name,
    )
    return RegisterResponse(userId=user.id, **tokens.model_dump())


@router.post("/login", response_model=TokenResponse)
@limiter.limit(login_limit)
async def login(
    request: Request,
    login_request: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
) -> TokenResponse:
    """Authenticate a user and return tokens."""
    _, tokens = accounts.login(login_request.email, login_request.password)
    return TokenResponse(**tokens.model_dump())


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    refresh_request: RefreshRequest,
    accounts: AccountService = Depends(get_account_service),
) -> TokenResponse:
    """Exchange a refresh token for a new token pair."""
    tokens = accounts.refresh(refresh_request.refresh_token)
    return TokenResponse(**tokens.model_dump())


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
) -> UserResponse:
    """Get the profile of the currently authenticated user."""
    user = accounts.me(current_user.user_id)
    return UserResponse(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        created_at=to_iso(user.created_at),
        last_login_at=to_iso(user.last_login_at),
    )
