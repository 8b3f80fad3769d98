"""Lockout policy.

Pure state transitions over an ``Account``'s failed-access counter and lockout
deadline. No I/O: callers pass the current time and persist the result.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from place_identity.domain.entities.account import Account


@dataclass(frozen=True, slots=True)
class LockoutPolicy:
    """Locks an account for ``lockout_duration`` after ``max_failed_attempts`` failures.

    When the threshold is reached the counter restarts at zero, so once the
    lockout elapses the account gets a fresh window of attempts.

    Attributes:
        max_failed_attempts: Failures that trigger a lockout.
        lockout_duration: How long a triggered lockout lasts.
        allowed_for_new_accounts: Whether newly registered accounts can be
            locked out at all.
    """

    max_failed_attempts: int = 3
    lockout_duration: timedelta = timedelta(minutes=2)
    allowed_for_new_accounts: bool = True

    @classmethod
    def from_settings(cls, settings) -> "LockoutPolicy":
        return cls(
            max_failed_attempts=settings.LOCKOUT_MAX_FAILED_ATTEMPTS,
            lockout_duration=timedelta(minutes=settings.LOCKOUT_DURATION_MINUTES),
            allowed_for_new_accounts=settings.LOCKOUT_ALLOWED_FOR_NEW_ACCOUNTS,
        )

    def is_locked_out(self, account: Account, now: datetime) -> bool:
        return account.lockout_end_utc is not None and now < account.lockout_end_utc

    def record_failure(self, account: Account, now: datetime) -> Account:
        count = account.failed_access_count + 1
        if account.lockout_enabled and count >= self.max_failed_attempts:
            return replace(
                account,
                failed_access_count=0,
                lockout_end_utc=now + self.lockout_duration,
                updated_at=now,
            )
        return replace(account, failed_access_count=count, updated_at=now)

    def record_success(self, account: Account) -> Account:
        # Already clean: hand back the same object so callers can skip the write.
        if account.failed_access_count == 0 and account.lockout_end_utc is None:
            return account
        return replace(account, failed_access_count=0, lockout_end_utc=None)
