"""In-process credential store for development and tests.

Implements the same compare-and-set semantics as the SQL store, guarded by
an ``asyncio.Lock``.
"""

import asyncio
from dataclasses import replace
from typing import Dict, Optional

from structlog import get_logger

from place_identity.core.exceptions import ConcurrencyConflictError, EmailAlreadyInUseError
from place_identity.domain.entities.account import Account
from place_identity.domain.interfaces.repositories import ICredentialStore

logger = get_logger(__name__)


class InMemoryAccountRepository(ICredentialStore):
    def __init__(self):
        self._accounts: Dict[str, Account] = {}
        self._ids_by_email: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def find_by_email(self, normalized_email: str) -> Optional[Account]:
        account_id = self._ids_by_email.get(normalized_email)
        return self._accounts.get(account_id) if account_id else None

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        return self._accounts.get(account_id)

    async def create(self, account: Account) -> Account:
        async with self._lock:
            if account.normalized_email in self._ids_by_email or account.account_id in self._accounts:
                raise EmailAlreadyInUseError()
            self._accounts[account.account_id] = account
            self._ids_by_email[account.normalized_email] = account.account_id
        return account

    async def save(self, account: Account) -> Account:
        async with self._lock:
            stored = self._accounts.get(account.account_id)
            if stored is None or stored.version != account.version:
                logger.info(
                    "Stale account write rejected",
                    account_id=account.account_id,
                    expected_version=account.version,
                )
                raise ConcurrencyConflictError()

            holder = self._ids_by_email.get(account.normalized_email)
            if holder is not None and holder != account.account_id:
                raise EmailAlreadyInUseError()

            saved = replace(account, version=account.version + 1)
            if stored.normalized_email != saved.normalized_email:
                del self._ids_by_email[stored.normalized_email]
            self._accounts[saved.account_id] = saved
            self._ids_by_email[saved.normalized_email] = saved.account_id
            return saved

    def __len__(self) -> int:
        return len(self._accounts)
