from datetime import timedelta
from typing import Optional

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from src.adapter.services.jwt_token_issuer import JwtTokenIssuer
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.services.clock import Clock, SystemClock
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import AccessClaims, ITokenIssuer
from src.domain.errors import AuthError


def _connect_args(db_uri: str) -> dict:
    # SQLite waits on a locked database instead of failing straight away
    if db_uri.startswith("sqlite"):
        return {"timeout": ApplicationConfig.DB_BUSY_TIMEOUT_SECONDS}
    return {}


engine = create_async_engine(
    ApplicationConfig.DB_URI,
    echo=False,
    future=True,
    connect_args=_connect_args(ApplicationConfig.DB_URI),
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

_clock = SystemClock()
_password_hasher = BcryptPasswordHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)
_token_issuer = JwtTokenIssuer(
    secret=ApplicationConfig.JWT_SECRET,
    clock=_clock,
    algorithm=ApplicationConfig.JWT_ALGORITHM,
    access_token_ttl=timedelta(minutes=ApplicationConfig.ACCESS_TOKEN_EXPIRE_MINUTES),
)


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_clock() -> Clock:
    return _clock


def get_password_hasher() -> IPasswordHasher:
    return _password_hasher


def get_token_issuer() -> ITokenIssuer:
    return _token_issuer


def get_refresh_token_ttl() -> timedelta:
    return timedelta(days=ApplicationConfig.REFRESH_TOKEN_EXPIRE_DAYS)


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
) -> AccessClaims:
    """
    Dependency to extract and verify the access token from the Authorization header.

    Returns:
        Verified claims: identity id, session id, issue and expiry times

    Raises:
        ClientError: 401 if the header is missing or the token is invalid or expired
    """
    claims = None
    if credentials is not None:
        claims = token_issuer.verify_access_token(credentials.credentials)

    if claims is None:
        raise ClientError(
            AuthError.invalid_access_token(), status_code=status.HTTP_401_UNAUTHORIZED
        )

    return claims
