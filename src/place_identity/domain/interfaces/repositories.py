"""Repository interfaces for abstracting data persistence in the domain layer.

The domain uses ``ICredentialStore`` to load and persist accounts without
being coupled to a particular database. Concrete adapters live in
``place_identity.infrastructure.repositories``.
"""

from abc import ABC, abstractmethod
from typing import Optional

from place_identity.domain.entities.account import Account


class ICredentialStore(ABC):
    """An interface defining the contract for account persistence.

    Every write is a compare-and-set on ``Account.version``: a ``save`` built
    from a stale read must fail rather than overwrite a concurrent change.
    """

    @abstractmethod
    async def find_by_email(self, normalized_email: str) -> Optional[Account]:
        """Retrieves an account by its normalized email.

        Args:
            normalized_email: Trimmed, lowercased email address.

        Returns:
            The account, or ``None`` if no account uses that email.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieves an account by its identifier.

        Returns:
            The account, or ``None`` if it does not exist.
        """
        raise NotImplementedError

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """Inserts a new account.

        Returns:
            The stored account.

        Raises:
            EmailAlreadyInUseError: If the normalized email is already taken.
        """
        raise NotImplementedError

    @abstractmethod
    async def save(self, account: Account) -> Account:
        """Persists ``account`` if the stored version still equals ``account.version``.

        Returns:
            The stored account, with ``version`` incremented.

        Raises:
            ConcurrencyConflictError: If the stored version moved on, or the
                account no longer exists.
            EmailAlreadyInUseError: If the new normalized email is taken.
        """
        raise NotImplementedError
