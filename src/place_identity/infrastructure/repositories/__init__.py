from .account_repository import SqlAccountRepository
from .in_memory_account_repository import InMemoryAccountRepository

__all__ = ["InMemoryAccountRepository", "SqlAccountRepository"]
