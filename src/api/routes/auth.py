from datetime import timedelta
from typing import Awaitable, Optional, TypeVar

from fastapi import APIRouter, Body, Depends, status
from pydantic import Field

from config import ApplicationConfig
from libs.result import Result
from src.api.error import ServerError, raise_for_error
from src.app.services.clock import Clock
from src.app.services.deadline import store_deadline
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import AccessClaims, ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AuthResponse,
    ChangePasswordUseCase,
    GetCurrentIdentityUseCase,
    LoginUseCase,
    LogoutAllResponse,
    LogoutUseCase,
    MessageResponse,
    ProfileResponse,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
)
from src.app.use_cases.auth.dtos import CamelModel
from src.depends import (
    get_clock,
    get_current_claims,
    get_password_hasher,
    get_refresh_token_ttl,
    get_token_issuer,
    get_unit_of_work,
)
from src.domain.errors import AuthError

router = APIRouter(prefix="/auth", tags=["Authentication"])

T = TypeVar("T")


async def run_use_case(call: Awaitable[Result[T]]) -> T:
    """
    Await a use case under the request deadline and unwrap its Result.

    Raises ClientError/ServerError for failed results and STORAGE_TIMEOUT
    when the store does not answer in time. The deadline stops at commit:
    once a change is being committed the request waits for it.
    """
    try:
        async with store_deadline(ApplicationConfig.STORE_TIMEOUT_SECONDS):
            result = await call
    except TimeoutError:
        raise ServerError(AuthError.storage_timeout())

    if result.is_err():
        raise_for_error(result.error)
    return result.value


class RegisterRequest(CamelModel):
    """
    Register HTTP request payload

    Fields are loosely typed here; the use case reports per-field errors.
    """

    email: Optional[str] = Field(None, description="Email address")
    password: Optional[str] = Field(None, description="Password (min 8 chars)")
    confirm_password: Optional[str] = Field(None, description="Password again")
    display_name: Optional[str] = Field(None, description="Optional display name")


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse
)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
    clock: Clock = Depends(get_clock),
    refresh_token_ttl: timedelta = Depends(get_refresh_token_ttl),
):
    """
    Register a new identity and sign it in.

    Raises:
        - 409 Conflict: Email already registered
        - 422 Unprocessable Entity: Invalid email, password or confirmation
    """
    command = RegisterCommand(
        email=request.email or "",
        password=request.password or "",
        confirm_password=request.confirm_password or "",
        display_name=request.display_name,
    )
    use_case = RegisterUseCase(
        uow, password_hasher, token_issuer, clock, refresh_token_ttl
    )
    return await run_use_case(use_case.execute(command))


class LoginRequest(CamelModel):
    """Login HTTP request payload"""

    email: str = Field("", description="User email address")
    password: str = Field("", description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
    clock: Clock = Depends(get_clock),
    refresh_token_ttl: timedelta = Depends(get_refresh_token_ttl),
):
    """
    Authenticate with email and password.

    Raises:
        - 401 Unauthorized: Invalid credentials (same response for every cause)
    """
    use_case = LoginUseCase(uow, password_hasher, token_issuer, clock, refresh_token_ttl)
    return await run_use_case(use_case.execute(request.email, request.password))


class RefreshRequest(CamelModel):
    """Refresh token HTTP request payload"""

    refresh_token: str = Field("", description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
    clock: Clock = Depends(get_clock),
    refresh_token_ttl: timedelta = Depends(get_refresh_token_ttl),
):
    """
    Exchange a refresh token for a new pair (rotation).

    The presented token is single-use; concurrent refreshes of it produce at
    most one success.

    Raises:
        - 401 Unauthorized: Unknown, expired or already used token
    """
    use_case = RefreshTokenUseCase(uow, token_issuer, clock, refresh_token_ttl)
    return await run_use_case(use_case.execute(request.refresh_token))


class LogoutRequest(CamelModel):
    """Optional logout body"""

    refresh_token: Optional[str] = Field(None, description="Refresh token to revoke")


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def logout(
    request: Optional[LogoutRequest] = Body(None),
    claims: AccessClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
    clock: Clock = Depends(get_clock),
):
    """
    Revoke the refresh token bound to the caller's session.

    Raises:
        - 401 Unauthorized: Missing or invalid access token
    """
    refresh_token = request.refresh_token if request else None
    use_case = LogoutUseCase(uow, token_issuer, clock)
    return await run_use_case(use_case.execute(claims, refresh_token))


@router.post(
    "/logout-all", status_code=status.HTTP_200_OK, response_model=LogoutAllResponse
)
async def logout_all(
    claims: AccessClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
    clock: Clock = Depends(get_clock),
):
    """Revoke every refresh token of the caller"""
    use_case = LogoutUseCase(uow, token_issuer, clock)
    return await run_use_case(use_case.revoke_all(claims))


@router.get("/me", status_code=status.HTTP_200_OK, response_model=ProfileResponse)
async def get_me(
    claims: AccessClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current identity.

    Raises:
        - 401 Unauthorized: Missing or invalid access token
        - 404 Not Found: Identity no longer exists
    """
    use_case = GetCurrentIdentityUseCase(uow)
    return await run_use_case(use_case.execute(claims.identity_id))


@router.put("/profile", status_code=status.HTTP_200_OK, response_model=ProfileResponse)
async def update_profile(
    request: UpdateProfileCommand,
    claims: AccessClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update display name and/or avatar reference.

    Raises:
        - 401 Unauthorized: Missing or invalid access token
        - 422 Unprocessable Entity: Field too long
    """
    use_case = UpdateProfileUseCase(uow)
    return await run_use_case(use_case.execute(claims.identity_id, request))


class ChangePasswordRequest(CamelModel):
    """Change password HTTP request payload"""

    current_password: str = Field("", description="Current password")
    new_password: str = Field("", description="New password")


@router.put(
    "/change-password", status_code=status.HTTP_200_OK, response_model=MessageResponse
)
async def change_password(
    request: ChangePasswordRequest,
    claims: AccessClaims = Depends(get_current_claims),
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    Change the caller's password.

    Raises:
        - 401 Unauthorized: Invalid access token or wrong current password
        - 422 Unprocessable Entity: New password fails the password rules
    """
    use_case = ChangePasswordUseCase(uow, password_hasher)
    return await run_use_case(
        use_case.execute(
            claims.identity_id, request.current_password, request.new_password
        )
    )
