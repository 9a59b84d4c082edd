"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from interspace.config import Settings
from interspace.domain.repository import (
    AccountRepository,
    DelegationRepository,
    IdentityChallengeRepository,
    IdentityLinkRepository,
    LinkedAccountRepository,
    ProfileAccountRepository,
    ProfileRepository,
)
from interspace.persistence.database import create_engine, create_session_factory
from interspace.persistence.repository import (
    PostgresAccountRepository,
    PostgresDelegationRepository,
    PostgresIdentityChallengeRepository,
    PostgresIdentityLinkRepository,
    PostgresLinkedAccountRepository,
    PostgresProfileAccountRepository,
    PostgresProfileRepository,
)
from interspace.util.di.base import ProviderBase
from interspace.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        Committed when the request finishes cleanly, rolled back otherwise.
        The graph advisory lock taken by identity link writes is released
        with the transaction.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.info("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_account_repository(self, session: AsyncSession) -> AccountRepository:
        """Provide Account repository."""
        return PostgresAccountRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_identity_link_repository(
        self, session: AsyncSession
    ) -> IdentityLinkRepository:
        """Provide IdentityLink repository."""
        return PostgresIdentityLinkRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_profile_repository(self, session: AsyncSession) -> ProfileRepository:
        """Provide Profile repository."""
        return PostgresProfileRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_profile_account_repository(
        self, session: AsyncSession
    ) -> ProfileAccountRepository:
        """Provide ProfileAccount repository."""
        return PostgresProfileAccountRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_linked_account_repository(
        self, session: AsyncSession
    ) -> LinkedAccountRepository:
        """Provide LinkedAccount repository."""
        return PostgresLinkedAccountRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_delegation_repository(
        self, session: AsyncSession
    ) -> DelegationRepository:
        """Provide AccountDelegation repository."""
        return PostgresDelegationRepository(session)

    @provide(scope=Scope.APP)
    def get_identity_challenge_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> IdentityChallengeRepository:
        """Provide IdentityChallenge repository.

        Challenges commit independently of the request transaction.
        """
        return PostgresIdentityChallengeRepository(session_factory)
