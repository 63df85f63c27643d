"""Data models persisted in the key-value store.

Every model serializes to a JSON document with camelCase field names and
timestamps as integer epoch milliseconds. Identifiers which are part of the
store key (session token, link slug) are not repeated inside the document.

Example:
    >>> record = LinkRecord.from_document('promo', {
    ...     'destination': 'https://example.com/sale',
    ...     'createdAt': 1760486400000,
    ...     'updatedAt': 1760486400000,
    ...     'clicks': 0,
    ...     'status': 'active',
    ... })
    >>> record.created_at
    datetime.datetime(2025, 10, 15, 0, 0, tzinfo=datetime.timezone.utc)
"""

from dataclasses import dataclass, replace
from datetime import datetime, UTC

from qrlinks.constants import LinkStatus
from qrlinks.types import JSONDocument


def to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def from_millis(millis: int | float) -> datetime:
    return datetime.fromtimestamp(millis / 1000, tz=UTC)


# fmt: off
@dataclass(frozen=True)
class AuthRecord:
    password_hash: str                  # bcrypt hash of the shared password
    created_at: datetime
# fmt: on

    def to_document(self) -> JSONDocument:
        return {
            'passwordHash': self.password_hash,
            'createdAt': to_millis(self.created_at),
        }

    @classmethod
    def from_document(cls, document: JSONDocument) -> 'AuthRecord':
        return cls(
            password_hash=document['passwordHash'],
            created_at=from_millis(document['createdAt']),
        )


# fmt: off
@dataclass(frozen=True)
class SessionRecord:
    token: str                          # Opaque bearer token, also the cookie value
    created_at: datetime
    expires_at: datetime
# fmt: on

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(UTC)
        return self.expires_at <= now

    @property
    def max_age(self) -> int:
        """Lifetime of the session in seconds (cookie Max-Age)."""
        return int((self.expires_at - self.created_at).total_seconds())

    def to_document(self) -> JSONDocument:
        return {
            'createdAt': to_millis(self.created_at),
            'expiresAt': to_millis(self.expires_at),
        }

    @classmethod
    def from_document(cls, token: str, document: JSONDocument) -> 'SessionRecord':
        return cls(
            token=token,
            created_at=from_millis(document['createdAt']),
            expires_at=from_millis(document['expiresAt']),
        )


# fmt: off
@dataclass(frozen=True)
class RateLimitRecord:
    attempts: int                       # Failed logins in the current window
    first_attempt: datetime             # Window anchor
    locked_until: datetime | None = None
# fmt: on

    def is_locked(self, now: datetime) -> bool:
        return self.locked_until is not None and self.locked_until > now

    def to_document(self) -> JSONDocument:
        document = {
            'attempts': self.attempts,
            'firstAttempt': to_millis(self.first_attempt),
        }
        if self.locked_until is not None:
            document['lockedUntil'] = to_millis(self.locked_until)
        return document

    @classmethod
    def from_document(cls, document: JSONDocument) -> 'RateLimitRecord':
        locked_until = document.get('lockedUntil')
        return cls(
            attempts=int(document['attempts']),
            first_attempt=from_millis(document['firstAttempt']),
            locked_until=None if locked_until is None else from_millis(locked_until),
        )


# fmt: off
@dataclass(frozen=True)
class LinkRecord:
    slug: str                           # Immutable identifier in the short URL path
    destination: str                    # Redirect target
    created_at: datetime
    updated_at: datetime
    clicks: int = 0
    status: LinkStatus = LinkStatus.ACTIVE
    qr_code: str | None = None          # Cached QR code image (data URL)
# fmt: on

    def with_changes(self, **changes) -> 'LinkRecord':
        return replace(self, **changes)

    def to_document(self) -> JSONDocument:
        document = {
            'destination': self.destination,
            'createdAt': to_millis(self.created_at),
            'updatedAt': to_millis(self.updated_at),
            'clicks': self.clicks,
            'status': str(self.status),
        }
        if self.qr_code:
            document['qrCode'] = self.qr_code
        return document

    @classmethod
    def from_document(cls, slug: str, document: JSONDocument) -> 'LinkRecord':
        status = document.get('status', LinkStatus.ACTIVE)
        return cls(
            slug=slug,
            destination=document['destination'],
            created_at=from_millis(document['createdAt']),
            updated_at=from_millis(document['updatedAt']),
            clicks=int(document.get('clicks', 0)),
            status=LinkStatus.DRAFT if status == LinkStatus.DRAFT else LinkStatus.ACTIVE,
            qr_code=document.get('qrCode'),
        )
