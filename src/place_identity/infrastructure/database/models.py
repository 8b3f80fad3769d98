"""SQLModel table backing the SQL credential store.

The table row is a persistence detail; the domain works with the immutable
``Account`` value and the repository maps between the two.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel

from place_identity.domain.entities.account import Account


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite returns naive datetimes; every stored instant is UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AccountTable(SQLModel, table=True):
    """Stored account row.

    Attributes:
        id: Account id (uuid4 string).
        normalized_email: Unique lookup key.
        version: Optimistic-concurrency counter; every UPDATE is guarded by
            ``WHERE version = :expected``.
    """

    __tablename__ = "accounts"

    id: str = Field(primary_key=True, max_length=36)
    email: str = Field(max_length=254)
    normalized_email: str = Field(max_length=254, unique=True, index=True)
    password_hash: str = Field(max_length=255)
    security_stamp: str = Field(max_length=64)
    email_confirmed: bool = Field(default=False)
    failed_access_count: int = Field(default=0)
    lockout_end_utc: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    lockout_enabled: bool = Field(default=True)
    version: int = Field(default=0)
    created_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    updated_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    @classmethod
    def from_account(cls, account: Account) -> "AccountTable":
        return cls(
            id=account.account_id,
            email=account.email,
            normalized_email=account.normalized_email,
            password_hash=account.password_hash,
            security_stamp=account.security_stamp,
            email_confirmed=account.email_confirmed,
            failed_access_count=account.failed_access_count,
            lockout_end_utc=account.lockout_end_utc,
            lockout_enabled=account.lockout_enabled,
            version=account.version,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )

    def to_account(self) -> Account:
        return Account(
            account_id=self.id,
            email=self.email,
            normalized_email=self.normalized_email,
            password_hash=self.password_hash,
            security_stamp=self.security_stamp,
            email_confirmed=self.email_confirmed,
            failed_access_count=self.failed_access_count,
            lockout_end_utc=_as_utc(self.lockout_end_utc),
            lockout_enabled=self.lockout_enabled,
            version=self.version,
            created_at=_as_utc(self.created_at),
            updated_at=_as_utc(self.updated_at),
        )
