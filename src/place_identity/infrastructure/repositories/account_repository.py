"""Account Repository implementation using SQLAlchemy asyncio.

Each method runs in its own short transaction obtained from the session
factory, so a retried read-modify-write always starts from a fresh read.

Optimistic concurrency is a single guarded statement::

    UPDATE accounts SET ..., version = version + 1
    WHERE id = :id AND version = :expected

Zero affected rows means another writer got there first.
"""

from dataclasses import replace
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from place_identity.core.exceptions import ConcurrencyConflictError, EmailAlreadyInUseError
from place_identity.domain.entities.account import Account
from place_identity.domain.interfaces.repositories import ICredentialStore
from place_identity.infrastructure.database.models import AccountTable

logger = get_logger(__name__)


class SqlAccountRepository(ICredentialStore):
    """SQLAlchemy implementation of ``ICredentialStore``.

    Args:
        session_factory: Produces ``AsyncSession`` objects bound to the
            credential database.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find_by_email(self, normalized_email: str) -> Optional[Account]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(AccountTable).where(AccountTable.normalized_email == normalized_email)
            )
            row = result.scalars().first()
            return row.to_account() if row else None

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        async with self._session_factory() as session:
            row = await session.get(AccountTable, account_id)
            return row.to_account() if row else None

    async def create(self, account: Account) -> Account:
        async with self._session_factory() as session:
            session.add(AccountTable.from_account(account))
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                logger.info("Account insert rejected by unique constraint", error=str(e.orig))
                raise EmailAlreadyInUseError() from e
        return account

    async def save(self, account: Account) -> Account:
        new_version = account.version + 1
        statement = (
            update(AccountTable)
            .where(AccountTable.id == account.account_id)
            .where(AccountTable.version == account.version)
            .values(
                email=account.email,
                normalized_email=account.normalized_email,
                password_hash=account.password_hash,
                security_stamp=account.security_stamp,
                email_confirmed=account.email_confirmed,
                failed_access_count=account.failed_access_count,
                lockout_end_utc=account.lockout_end_utc,
                lockout_enabled=account.lockout_enabled,
                updated_at=account.updated_at,
                version=new_version,
            )
            .execution_options(synchronize_session=False)
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                if result.rowcount != 1:
                    await session.rollback()
                    logger.info(
                        "Stale account write rejected",
                        account_id=account.account_id,
                        expected_version=account.version,
                    )
                    raise ConcurrencyConflictError()
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise EmailAlreadyInUseError() from e

        return replace(account, version=new_version)
