"""Account Lifecycle Domain Service.

This service implements every credential operation of the identity service:
registration, email confirmation and change, login with lockout, confirmation
resend, forgotten-password recovery, session refresh and self-service account
management.

Rules that hold across all operations:

- Every read-modify-write replays from a fresh read when it loses an
  optimistic-concurrency race, up to ``LifecycleOptions.conflict_retries``
  attempts.
- Password hashing never runs inside the retry loop and never blocks the
  event loop (it is pushed to a worker thread).
- Notifications are enqueued only after the store accepted the change, and a
  delivery failure never changes the outcome of the command.
- Operations reachable by unauthenticated callers with only an email address
  (login, resend confirmation, forgot password, reset password) do not reveal
  whether that address is registered.
"""

import asyncio
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Callable, NoReturn, Optional

import structlog

from place_identity.core.concurrency import retry_on_conflict
from place_identity.core.exceptions import (
    AccountLockedOutError,
    AccountNotFoundError,
    EmailAlreadyInUseError,
    EmailNotConfirmedError,
    InvalidCredentialsError,
    InvalidOldPasswordError,
    InvalidOrExpiredTokenError,
    TokenFailure,
)
from place_identity.core.logging import mask_email
from place_identity.domain.entities.account import Account, utc_now
from place_identity.domain.events.account_events import (
    AccountLockedOutEvent,
    AccountRegisteredEvent,
    BaseDomainEvent,
    EmailChangedEvent,
    EmailConfirmedEvent,
    LoginFailedEvent,
    LoginSucceededEvent,
    PasswordChangedEvent,
    PasswordResetCompletedEvent,
    PasswordResetRequestedEvent,
)
from place_identity.domain.interfaces import (
    ICredentialStore,
    IEventPublisher,
    INotificationDispatcher,
    IPasswordHasher,
    ISessionTokenService,
    ITokenCodec,
)
from place_identity.domain.services.authentication.lockout_policy import LockoutPolicy
from place_identity.domain.value_objects.email import Email, normalize_email
from place_identity.domain.value_objects.notification import NotificationKind, OutboundMessage
from place_identity.domain.value_objects.password_policy import PasswordPolicy
from place_identity.domain.value_objects.security_token import SessionTokens, TokenPurpose

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True, slots=True)
class LifecycleOptions:
    """Tunables of the account lifecycle.

    Attributes:
        email_confirmation_ttl: Lifetime of confirmation tokens.
        email_change_ttl: Lifetime of email-change tokens.
        password_reset_ttl: Lifetime of password-reset tokens.
        require_confirmed_email: Refuse logins until the email is confirmed.
        conflict_retries: Attempts for a read-modify-write cycle.
    """

    email_confirmation_ttl: timedelta = timedelta(hours=24)
    email_change_ttl: timedelta = timedelta(hours=24)
    password_reset_ttl: timedelta = timedelta(minutes=15)
    require_confirmed_email: bool = True
    conflict_retries: int = 3

    @classmethod
    def from_settings(cls, settings) -> "LifecycleOptions":
        return cls(
            email_confirmation_ttl=timedelta(minutes=settings.EMAIL_CONFIRMATION_TOKEN_EXPIRE_MINUTES),
            email_change_ttl=timedelta(minutes=settings.EMAIL_CHANGE_TOKEN_EXPIRE_MINUTES),
            password_reset_ttl=timedelta(minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES),
            require_confirmed_email=settings.REQUIRE_CONFIRMED_EMAIL,
            conflict_retries=settings.STORE_CONFLICT_RETRIES,
        )


@dataclass(frozen=True, slots=True)
class AccountInfo:
    """What an authenticated owner may see about their own account."""

    account_id: str
    email: str
    email_confirmed: bool
    is_locked_out: bool
    lockout_end_utc: Optional[datetime]


def _correlation_id() -> Optional[str]:
    return structlog.contextvars.get_contextvars().get("correlation_id")


class AccountLifecycle:
    """Domain service orchestrating the credential lifecycle of accounts.

    The service is stateless apart from its collaborators, so one instance
    may be built per request or shared.
    """

    def __init__(
        self,
        store: ICredentialStore,
        password_hasher: IPasswordHasher,
        token_codec: ITokenCodec,
        session_tokens: ISessionTokenService,
        notifications: INotificationDispatcher,
        event_publisher: IEventPublisher,
        password_policy: Optional[PasswordPolicy] = None,
        lockout_policy: Optional[LockoutPolicy] = None,
        options: Optional[LifecycleOptions] = None,
        clock: Clock = utc_now,
    ):
        self._store = store
        self._hasher = password_hasher
        self._tokens = token_codec
        self._session_tokens = session_tokens
        self._notifications = notifications
        self._events = event_publisher
        self._password_policy = password_policy or PasswordPolicy()
        self._lockout = lockout_policy or LockoutPolicy()
        self._options = options or LifecycleOptions()
        self._clock = clock

    # ------------------------------------------------------------------
    # Registration and email confirmation
    # ------------------------------------------------------------------

    async def register(self, email: str, password: str) -> Account:
        """Create an unconfirmed account and send its confirmation link.

        Raises:
            InvalidEmailError: If ``email`` is malformed.
            WeakPasswordError: If ``password`` fails the password policy.
            EmailAlreadyInUseError: If the email is already registered.
        """
        address = Email(email)
        self._password_policy.validate(password)

        if await self._store.find_by_email(address.normalized) is not None:
            logger.info("Registration rejected, email in use", email=address.mask_for_logging())
            raise EmailAlreadyInUseError()

        password_hash = await asyncio.to_thread(self._hasher.hash, password)
        account = Account.register(
            address,
            password_hash,
            lockout_enabled=self._lockout.allowed_for_new_accounts,
            now=self._clock(),
        )
        account = await self._store.create(account)

        logger.info(
            "Account registered",
            account_id=account.account_id,
            email=address.mask_for_logging(),
        )
        self._send_confirmation(account)
        await self._publish(AccountRegisteredEvent, account.account_id, email=account.email)
        return account

    async def confirm_email(self, account_id: str, token: str) -> Account:
        """Mark the account's email confirmed.

        Confirmation rotates the security stamp, so the token cannot be
        replayed.

        Raises:
            AccountNotFoundError: If ``account_id`` does not exist.
            InvalidOrExpiredTokenError: If the token does not validate.
        """

        def confirm(account: Account) -> Account:
            self._tokens.validate(token, TokenPurpose.EMAIL_CONFIRMATION, account)
            return account.confirm_email(self._clock())

        account = await self._update(account_id, confirm)
        logger.info("Email confirmed", account_id=account_id)
        await self._publish(EmailConfirmedEvent, account_id, email=account.email)
        return account

    async def change_email(self, account_id: str, token: str, new_email: str) -> Account:
        """Switch the account to ``new_email`` using a token sent to that address.

        Raises:
            InvalidEmailError: If ``new_email`` is malformed.
            AccountNotFoundError: If ``account_id`` does not exist.
            InvalidOrExpiredTokenError: If the token does not validate for
                this account and this new email.
            EmailAlreadyInUseError: If another account uses ``new_email``.
        """
        address = Email(new_email)
        old_email = None

        async def change() -> Account:
            nonlocal old_email
            account = await self._require(account_id)
            self._tokens.validate(
                token, TokenPurpose.EMAIL_CHANGE, account, new_email=address.normalized
            )
            holder = await self._store.find_by_email(address.normalized)
            if holder is not None and holder.account_id != account.account_id:
                raise EmailAlreadyInUseError()
            old_email = account.email
            return await self._store.save(account.change_email(address, self._clock()))

        account = await retry_on_conflict(change, self._options.conflict_retries)
        logger.info(
            "Email changed",
            account_id=account_id,
            new_email=address.mask_for_logging(),
        )
        await self._publish(
            EmailChangedEvent, account_id, old_email=old_email or "", new_email=account.email
        )
        return account

    async def resend_confirmation(self, email: str) -> None:
        """Send a fresh confirmation link if ``email`` belongs to an unconfirmed account.

        Returns nothing either way; callers cannot tell whether a message went out.
        """
        account = await self._store.find_by_email(normalize_email(email))
        if account is None or account.email_confirmed:
            logger.info("Confirmation resend skipped", email=mask_email(email))
            return
        self._send_confirmation(account)
        logger.info("Confirmation resent", account_id=account.account_id)

    # ------------------------------------------------------------------
    # Login and sessions
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> SessionTokens:
        """Authenticate with email and password.

        Returns:
            Access and refresh tokens bound to the account's security stamp.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password.
            AccountLockedOutError: The account is locked out, including by
                parallel failed attempts that landed first; the password of an
                account already locked is not checked.
            EmailNotConfirmedError: Correct password, unconfirmed email.
        """
        account = await self._store.find_by_email(normalize_email(email))
        if account is None:
            await asyncio.to_thread(self._hasher.verify_against_dummy, password)
            logger.info("Login failed", reason="unknown_email", email=mask_email(email))
            await self._publish(LoginFailedEvent, None, reason="unknown_email")
            raise InvalidCredentialsError()

        now = self._clock()
        if self._lockout.is_locked_out(account, now):
            await self._refuse_locked_out(account.account_id, account.lockout_end_utc)

        verified = await asyncio.to_thread(self._hasher.verify, account.password_hash, password)
        if not verified:
            await self._record_failed_login(account, now)
            raise InvalidCredentialsError()

        if self._options.require_confirmed_email and not account.email_confirmed:
            logger.info("Login refused, email not confirmed", account_id=account.account_id)
            await self._publish(LoginFailedEvent, account.account_id, reason="email_not_confirmed")
            raise EmailNotConfirmedError()

        def succeed(current: Account) -> Account:
            # Parallel failures may have locked the account while the
            # password was being verified.
            if self._lockout.is_locked_out(current, now):
                raise AccountLockedOutError(current.lockout_end_utc)
            # Always written so the version check catches a concurrent lock.
            return replace(self._lockout.record_success(current), updated_at=now)

        try:
            account = await self._update(account.account_id, succeed, current=account)
        except AccountLockedOutError as e:
            await self._refuse_locked_out(account.account_id, e.lockout_end_utc)
        tokens = self._session_tokens.issue(account)
        logger.info("Login succeeded", account_id=account.account_id)
        await self._publish(LoginSucceededEvent, account.account_id)
        return tokens

    async def refresh(self, refresh_token: str) -> SessionTokens:
        """Exchange a refresh token for a new pair of session tokens.

        Raises:
            InvalidOrExpiredTokenError: If the token is invalid, expired, or
                issued before the account's credentials last changed.
        """
        account = await self._account_for_token(refresh_token, TokenPurpose.REFRESH)
        logger.info("Session refreshed", account_id=account.account_id)
        return self._session_tokens.issue(account)

    async def authenticate(self, access_token: str) -> Account:
        """Resolve a bearer access token to its account.

        Raises:
            InvalidOrExpiredTokenError: If the token does not validate.
        """
        return await self._account_for_token(access_token, TokenPurpose.ACCESS)

    # ------------------------------------------------------------------
    # Password recovery
    # ------------------------------------------------------------------

    async def forgot_password(self, email: str) -> None:
        """Send a password-reset code if ``email`` belongs to a confirmed account.

        Returns nothing either way; callers cannot tell whether a message went out.
        """
        account = await self._store.find_by_email(normalize_email(email))
        if account is None or not account.email_confirmed:
            logger.info("Password reset request skipped", email=mask_email(email))
            return

        ttl = self._options.password_reset_ttl
        token = self._tokens.issue(account, TokenPurpose.PASSWORD_RESET, ttl)
        self._notifications.enqueue(
            OutboundMessage(
                kind=NotificationKind.PASSWORD_RESET,
                destination=account.email,
                context={"account_id": account.account_id, "token": token},
            )
        )
        logger.info("Password reset requested", account_id=account.account_id)
        await self._publish(
            PasswordResetRequestedEvent,
            account.account_id,
            token_expires_at=self._clock() + ttl,
        )

    async def reset_password(self, email: str, token: str, new_password: str) -> None:
        """Set a new password using a reset code.

        An unknown or unconfirmed email is reported exactly like a bad code.

        Raises:
            WeakPasswordError: If ``new_password`` fails the password policy.
            InvalidOrExpiredTokenError: If the account is unknown or
                unconfirmed, or the code does not validate.
        """
        self._password_policy.validate(new_password)

        account = await self._store.find_by_email(normalize_email(email))
        if account is None or not account.email_confirmed:
            logger.info("Password reset rejected", email=mask_email(email))
            raise InvalidOrExpiredTokenError(TokenFailure.SUBJECT_MISMATCH)

        # Reject bad codes before paying for a hash.
        self._tokens.validate(token, TokenPurpose.PASSWORD_RESET, account)
        password_hash = await asyncio.to_thread(self._hasher.hash, new_password)

        def reset(current: Account) -> Account:
            self._tokens.validate(token, TokenPurpose.PASSWORD_RESET, current)
            return current.change_password_hash(password_hash, self._clock())

        await self._update(account.account_id, reset, current=account)
        logger.info("Password reset completed", account_id=account.account_id)
        await self._publish(PasswordResetCompletedEvent, account.account_id)

    # ------------------------------------------------------------------
    # Self-service account management
    # ------------------------------------------------------------------

    async def get_info(self, account_id: str) -> AccountInfo:
        account = await self._require(account_id)
        return AccountInfo(
            account_id=account.account_id,
            email=account.email,
            email_confirmed=account.email_confirmed,
            is_locked_out=self._lockout.is_locked_out(account, self._clock()),
            lockout_end_utc=account.lockout_end_utc,
        )

    async def change_password(self, account_id: str, old_password: str, new_password: str) -> Account:
        """Replace the password of an authenticated owner.

        Raises:
            WeakPasswordError: If ``new_password`` fails the password policy.
            AccountNotFoundError: If ``account_id`` does not exist.
            InvalidOldPasswordError: If ``old_password`` is wrong.
        """
        self._password_policy.validate(new_password)
        account = await self._require(account_id)

        if not await asyncio.to_thread(self._hasher.verify, account.password_hash, old_password):
            raise InvalidOldPasswordError()
        password_hash = await asyncio.to_thread(self._hasher.hash, new_password)

        def change(current: Account) -> Account:
            # The old password was verified against this exact hash.
            if current.password_hash != account.password_hash:
                raise InvalidOldPasswordError()
            return current.change_password_hash(password_hash, self._clock())

        account = await self._update(account_id, change, current=account)
        logger.info("Password changed", account_id=account_id)
        await self._publish(PasswordChangedEvent, account_id)
        return account

    async def request_email_change(self, account_id: str, new_email: str) -> None:
        """Send an email-change link to ``new_email``.

        Nothing is sent when ``new_email`` is the current address. Whether
        the address is free is checked when the link is used.

        Raises:
            InvalidEmailError: If ``new_email`` is malformed.
            AccountNotFoundError: If ``account_id`` does not exist.
        """
        address = Email(new_email)
        account = await self._require(account_id)
        if address.normalized == account.normalized_email:
            return

        token = self._tokens.issue(
            account,
            TokenPurpose.EMAIL_CHANGE,
            self._options.email_change_ttl,
            new_email=address.normalized,
        )
        self._notifications.enqueue(
            OutboundMessage(
                kind=NotificationKind.EMAIL_CHANGE,
                destination=address.value,
                context={
                    "account_id": account.account_id,
                    "token": token,
                    "new_email": address.value,
                },
            )
        )
        logger.info(
            "Email change requested",
            account_id=account_id,
            new_email=address.mask_for_logging(),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _require(self, account_id: str) -> Account:
        account = await self._store.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError()
        return account

    async def _update(
        self,
        account_id: str,
        mutate: Callable[[Account], Account],
        current: Optional[Account] = None,
    ) -> Account:
        """Apply ``mutate`` and save, replaying from a fresh read on conflict.

        ``current`` seeds the first attempt when the caller already holds a
        fresh copy. When ``mutate`` returns its argument unchanged nothing is
        written.
        """
        seed = current

        async def attempt() -> Account:
            nonlocal seed
            account = seed if seed is not None else await self._require(account_id)
            seed = None
            changed = mutate(account)
            if changed is account:
                return account
            return await self._store.save(changed)

        return await retry_on_conflict(attempt, self._options.conflict_retries)

    async def _refuse_locked_out(self, account_id: str, lockout_end_utc: datetime) -> NoReturn:
        logger.warning(
            "Login refused, account locked out",
            account_id=account_id,
            lockout_end_utc=lockout_end_utc.isoformat(),
        )
        await self._publish(LoginFailedEvent, account_id, reason="locked_out")
        raise AccountLockedOutError(lockout_end_utc)

    async def _record_failed_login(self, account: Account, now: datetime) -> None:
        def fail(current: Account) -> Account:
            # A concurrent failure may already have locked the account; this
            # attempt is then refused uncounted.
            if self._lockout.is_locked_out(current, now):
                raise AccountLockedOutError(current.lockout_end_utc)
            return self._lockout.record_failure(current, now)

        try:
            updated = await self._update(account.account_id, fail, current=account)
        except AccountLockedOutError as e:
            await self._refuse_locked_out(account.account_id, e.lockout_end_utc)
        logger.info(
            "Login failed",
            reason="invalid_password",
            account_id=account.account_id,
            failed_access_count=updated.failed_access_count,
        )
        await self._publish(
            LoginFailedEvent,
            account.account_id,
            reason="invalid_password",
            failed_access_count=updated.failed_access_count,
        )
        if updated.lockout_end_utc is not None and updated.lockout_end_utc != account.lockout_end_utc:
            logger.warning(
                "Account locked out",
                account_id=account.account_id,
                lockout_end_utc=updated.lockout_end_utc.isoformat(),
            )
            await self._publish(
                AccountLockedOutEvent, account.account_id, lockout_end_utc=updated.lockout_end_utc
            )

    async def _account_for_token(self, token: str, purpose: TokenPurpose) -> Account:
        claims = self._tokens.decode(token, purpose)
        account = await self._store.find_by_id(claims.account_id)
        if account is None:
            raise InvalidOrExpiredTokenError(TokenFailure.SUBJECT_MISMATCH)
        self._tokens.validate(token, purpose, account)
        return account

    def _send_confirmation(self, account: Account) -> None:
        token = self._tokens.issue(
            account, TokenPurpose.EMAIL_CONFIRMATION, self._options.email_confirmation_ttl
        )
        self._notifications.enqueue(
            OutboundMessage(
                kind=NotificationKind.EMAIL_CONFIRMATION,
                destination=account.email,
                context={"account_id": account.account_id, "token": token},
            )
        )

    async def _publish(self, event_type: Callable[..., BaseDomainEvent], account_id, **fields) -> None:
        await self._events.publish(
            event_type(
                occurred_at=self._clock(),
                account_id=account_id,
                correlation_id=_correlation_id(),
                **fields,
            )
        )
