"""Shared password and session management.

There is exactly one credential: a shared password stored as a bcrypt hash
under `auth:password`. It is created once with `setup()` and can never be
replaced through the API. Logging in issues an opaque session token which is
valid for 7 days.

Example:
    >>> credentials = CredentialManager(InMemoryKeyValueStore())
    >>> credentials.status(None)
    AuthStatus(is_setup=False, is_authenticated=False)
    >>> session = credentials.setup('correct horse')
    >>> credentials.verify(session.token)
    True
"""

import math
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, UTC

import bcrypt

from qrlinks.constants import TTL, Password, Session
from qrlinks.dao.base import KeyValueBaseStore
from qrlinks.dao.key_schema import KeySchema
from qrlinks.exceptions import (
    AlreadySetUpError,
    InvalidPasswordError,
    LoginLockedError,
    MissingPasswordError,
    NotSetUpError,
    WeakPasswordError,
)
from qrlinks.models import AuthRecord, SessionRecord, to_millis
from qrlinks.services.rate_limiter import LoginRateLimiter


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthStatus:
    is_setup: bool
    is_authenticated: bool


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes and newer releases refuse longer input
    return password.encode('utf-8')[: Password.BCRYPT_MAX_BYTES]


def _minutes_left(until: datetime, now: datetime) -> int:
    return max(1, math.ceil((until - now).total_seconds() / 60))


def _seconds_left(until: datetime, now: datetime) -> int:
    return max(1, math.ceil((until - now).total_seconds()))


def _plural(count: int, word: str) -> str:
    return word if count == 1 else f'{word}s'


class CredentialManager:
    """Shared password setup, login and session verification

    Methods:
        status(token: str | None) -> AuthStatus:
            Report whether a password exists and whether `token` is a live session.

        setup(password: str) -> SessionRecord:
            Create the shared password (once) and open a session.

        login(password: str, client_ip: str) -> SessionRecord:
            Check the password under rate limiting and open a session.

        logout(token: str | None) -> None:
            End a session on the client side.

        verify(token: str | None) -> bool:
            True if `token` names a non-expired session.

        session(token: str | None) -> SessionRecord | None:
            Load a non-expired session.
    """

    def __init__(
        self,
        store: KeyValueBaseStore,
        prefix: str | None = None,
        rate_limiter: LoginRateLimiter | None = None,
        bcrypt_rounds: int = Password.BCRYPT_ROUNDS,
    ):
        self.store = store
        self.keys = KeySchema(prefix=prefix)
        self.rate_limiter = rate_limiter or LoginRateLimiter(store, prefix=prefix)
        self.bcrypt_rounds = bcrypt_rounds

    def _auth_record(self) -> AuthRecord | None:
        document = self.store.get(self.keys.auth_password_key())
        return None if document is None else AuthRecord.from_document(document)

    def _create_session(self) -> SessionRecord:
        now = datetime.now(UTC)
        session = SessionRecord(
            token=secrets.token_hex(Session.TOKEN_BYTES),
            created_at=now,
            expires_at=now + Session.LIFETIME,
        )
        self.store.set(self.keys.session_key(session.token), session.to_document(), ttl=TTL.SESSION)
        return session

    def is_setup(self) -> bool:
        return self._auth_record() is not None

    def status(self, token: str | None) -> AuthStatus:
        return AuthStatus(is_setup=self.is_setup(), is_authenticated=self.verify(token))

    def setup(self, password: str | None) -> SessionRecord:
        if self.is_setup():
            raise AlreadySetUpError('Password already set up')
        if not password or len(password) < Password.MIN_LENGTH:
            raise WeakPasswordError(f'Password must be at least {Password.MIN_LENGTH} characters')

        password_hash = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=self.bcrypt_rounds))
        record = AuthRecord(password_hash=password_hash.decode('utf-8'), created_at=datetime.now(UTC))

        # Concurrent setups race on the same key: only the first write lands
        if not self.store.set(self.keys.auth_password_key(), record.to_document(), nx=True):
            raise AlreadySetUpError('Password already set up')

        logger.info('Shared password set up.')
        return self._create_session()

    def login(self, password: str | None, client_ip: str) -> SessionRecord:
        """Check the shared password and open a session.

        Raises:
            LoginLockedError: The client is locked out, or this failure locked it out.
            NotSetUpError: No password was set up yet.
            MissingPasswordError: Empty password.
            InvalidPasswordError: Wrong password. Carries `remainingAttempts`.
        """
        now = datetime.now(UTC)
        decision = self.rate_limiter.check(client_ip)
        if not decision.allowed:
            minutes = _minutes_left(decision.locked_until, now)
            raise LoginLockedError(
                f'Too many failed attempts. Please try again in {minutes} {_plural(minutes, "minute")}.',
                retry_after=_seconds_left(decision.locked_until, now),
                locked=True,
                lockedUntil=to_millis(decision.locked_until),
            )

        record = self._auth_record()
        if record is None:
            raise NotSetUpError('Password not set up yet')
        if not password:
            raise MissingPasswordError('Password required')

        if not bcrypt.checkpw(_password_bytes(password), record.password_hash.encode('utf-8')):
            failure = self.rate_limiter.record_failure(client_ip)
            logger.info(
                'Failed login attempt.',
                extra={'clientIp': client_ip, 'remainingAttempts': failure.remaining_attempts},
            )
            if failure.locked:
                minutes = _minutes_left(failure.locked_until, now)
                raise LoginLockedError(
                    f'Too many failed attempts. Account locked for {minutes} {_plural(minutes, "minute")}.',
                    retry_after=_seconds_left(failure.locked_until, now),
                    locked=True,
                )
            raise InvalidPasswordError(
                f'Invalid password. {failure.remaining_attempts} {_plural(failure.remaining_attempts, "attempt")} remaining.',
                remainingAttempts=failure.remaining_attempts,
            )

        self.rate_limiter.clear(client_ip)
        logger.info('Successful login.', extra={'clientIp': client_ip})
        return self._create_session()

    def logout(self, token: str | None) -> None:
        # Sessions are not revoked server-side; the record expires through its TTL
        logger.info('Logout requested.', extra={'hadSession': token is not None})

    def session(self, token: str | None) -> SessionRecord | None:
        if not token:
            return None
        document = self.store.get(self.keys.session_key(token))
        if document is None:
            return None
        session = SessionRecord.from_document(token, document)
        return None if session.is_expired() else session

    def verify(self, token: str | None) -> bool:
        return self.session(token) is not None
