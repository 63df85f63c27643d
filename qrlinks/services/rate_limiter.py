"""Failed login rate limiting per client identity.

Each client identity (normally an IP address) moves through three states,
driven only by login attempts:

    Fresh         no record, the window anchored at `firstAttempt` elapsed,
                  or a past lock expired.
    Accumulating  1..max_attempts-1 failures inside the window.
    Locked        `lockedUntil` is in the future. Every attempt is rejected,
                  even with the right password.

The window is anchored at the first failure and is never extended by later
failures. A successful login deletes the record.

Example:
    >>> limiter = LoginRateLimiter(store)
    >>> limiter.check('203.0.113.7').allowed
    True
    >>> limiter.record_failure('203.0.113.7')
    FailedAttempt(remaining_attempts=4, locked=False, locked_until=None)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC

from qrlinks.constants import TTL, LoginLimits
from qrlinks.dao.base import KeyValueBaseStore
from qrlinks.dao.key_schema import KeySchema
from qrlinks.models import RateLimitRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining_attempts: int = 0
    locked_until: datetime | None = None


@dataclass(frozen=True)
class FailedAttempt:
    remaining_attempts: int
    locked: bool
    locked_until: datetime | None = None


class LoginRateLimiter:
    """Sliding-window failed login counter with lockout

    Methods:
        check(identity: str) -> RateLimitDecision:
            Decide whether a login attempt from `identity` may proceed.

        record_failure(identity: str) -> FailedAttempt:
            Count a failed attempt, locking the identity on reaching the limit.

        clear(identity: str) -> None:
            Forget all failed attempts of `identity`.
    """

    def __init__(
        self,
        store: KeyValueBaseStore,
        prefix: str | None = None,
        max_attempts: int = LoginLimits.MAX_ATTEMPTS,
        window: timedelta = LoginLimits.ATTEMPT_WINDOW,
        lockout: timedelta = LoginLimits.LOCKOUT,
    ):
        if max_attempts < 1:
            raise ValueError(f'max_attempts must be a positive integer (given value: {max_attempts}).')

        self.store = store
        self.keys = KeySchema(prefix=prefix)
        self.max_attempts = max_attempts
        self.window = window
        self.lockout = lockout

    def _load(self, identity: str) -> RateLimitRecord | None:
        document = self.store.get(self.keys.rate_limit_key(identity))
        return None if document is None else RateLimitRecord.from_document(document)

    def _save(self, identity: str, record: RateLimitRecord) -> None:
        self.store.set(self.keys.rate_limit_key(identity), record.to_document(), ttl=TTL.RATE_LIMIT)

    def _is_fresh(self, record: RateLimitRecord | None, now: datetime) -> bool:
        if record is None:
            return True
        if record.locked_until is not None and record.locked_until <= now:
            return True
        return now - record.first_attempt > self.window

    def check(self, identity: str) -> RateLimitDecision:
        now = datetime.now(UTC)
        record = self._load(identity)

        if record is not None and record.is_locked(now):
            return RateLimitDecision(allowed=False, locked_until=record.locked_until)

        if self._is_fresh(record, now):
            return RateLimitDecision(allowed=True, remaining_attempts=self.max_attempts)

        if record.attempts >= self.max_attempts:
            # Limit reached without a lock on record: lock now
            locked = RateLimitRecord(record.attempts, record.first_attempt, locked_until=now + self.lockout)
            self._save(identity, locked)
            logger.warning('Client locked out of login.', extra={'clientIp': identity, 'attempts': record.attempts})
            return RateLimitDecision(allowed=False, locked_until=locked.locked_until)

        return RateLimitDecision(allowed=True, remaining_attempts=self.max_attempts - record.attempts)

    def record_failure(self, identity: str) -> FailedAttempt:
        now = datetime.now(UTC)
        record = self._load(identity)

        if self._is_fresh(record, now):
            updated = RateLimitRecord(attempts=1, first_attempt=now)
        else:
            updated = RateLimitRecord(record.attempts + 1, record.first_attempt, record.locked_until)

        if updated.attempts >= self.max_attempts:
            updated = RateLimitRecord(updated.attempts, updated.first_attempt, locked_until=now + self.lockout)
            logger.warning('Client locked out of login.', extra={'clientIp': identity, 'attempts': updated.attempts})

        self._save(identity, updated)
        return FailedAttempt(
            remaining_attempts=max(0, self.max_attempts - updated.attempts),
            locked=updated.locked_until is not None,
            locked_until=updated.locked_until,
        )

    def clear(self, identity: str) -> None:
        self.store.delete(self.keys.rate_limit_key(identity))
