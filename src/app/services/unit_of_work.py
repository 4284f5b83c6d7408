from abc import ABC, abstractmethod

from src.app.repositories.identity_repository import IIdentityRepository
from src.app.repositories.refresh_token_repository import IRefreshTokenRepository


class UnitOfWork(ABC):
    """
    Abstract UnitOfWork - defines repository access and transaction management.

    Everything done inside one ``async with uow`` block is a single
    transaction: it becomes visible on commit() and is rolled back on exit
    otherwise, including when the block is cancelled or times out.
    """

    # Repository properties (initialized in __aenter__)
    identities: IIdentityRepository
    refresh_tokens: IRefreshTokenRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
