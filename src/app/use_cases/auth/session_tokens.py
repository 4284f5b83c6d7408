"""
Token pair issuance shared by register, login and refresh.

The refresh record is staged in the caller's unit of work; it only exists
once the caller commits. The access token names that record as its session.
"""

from datetime import timedelta
from typing import Optional, Tuple
from uuid import UUID, uuid4

from src.app.services.clock import Clock
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Identity, RefreshTokenRecord
from .dtos import AuthResponse, IdentityInfo


async def stage_refresh_token(
    uow: UnitOfWork,
    token_issuer: ITokenIssuer,
    clock: Clock,
    refresh_token_ttl: timedelta,
    identity_id: UUID,
    parent: Optional[RefreshTokenRecord] = None,
) -> Tuple[str, RefreshTokenRecord]:
    """
    Mint a refresh token and add its record to the open transaction.

    Without a parent the record starts a new chain; with one it continues
    the parent's chain.
    """
    refresh_token = token_issuer.issue_refresh_token()
    now = clock.now()
    record = RefreshTokenRecord(
        identity_id=identity_id,
        token_hash=token_issuer.hash_refresh_token(refresh_token),
        parent_id=parent.id if parent else None,
        family_id=parent.family_id if parent else uuid4(),
        issued_at=now,
        expires_at=now + refresh_token_ttl,
    )
    record = await uow.refresh_tokens.create(record)
    return refresh_token, record


def build_auth_response(
    token_issuer: ITokenIssuer,
    identity: Identity,
    refresh_token: str,
    record: RefreshTokenRecord,
) -> AuthResponse:
    access_token = token_issuer.issue_access_token(identity.id, record.id)
    return AuthResponse(
        identity=IdentityInfo.from_entity(identity),
        access_token=access_token,
        refresh_token=refresh_token,  # Plain token (client receives this once)
        expires_in=token_issuer.access_token_ttl_seconds,
        session_id=str(record.id),
    )
