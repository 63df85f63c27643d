"""Short link persistence.

A link maps a permanent slug to a mutable destination URL and counts the
redirects made through it. Slugs never change after creation; destination,
status and the cached QR code can be updated.

Example:
    >>> registry = LinkRegistry(InMemoryKeyValueStore())
    >>> link = registry.create('promo', 'https://example.com/sale')
    >>> link.clicks, link.status
    (0, <LinkStatus.ACTIVE: 'active'>)
    >>> registry.record_click('promo')
    1
"""

import logging
from datetime import datetime, UTC

from qrlinks.constants import LinkStatus, LinkType
from qrlinks.dao.base import KeyValueBaseStore
from qrlinks.dao.key_schema import KeySchema
from qrlinks.exceptions import (
    DuplicateSlugError,
    InvalidDestinationError,
    InvalidSlugError,
    InvalidStatusError,
    LinkNotFoundError,
    ValidationError,
)
from qrlinks.models import LinkRecord
from qrlinks.types import JSONDocument
from qrlinks.utils.links import is_valid_destination, is_valid_slug, link_type


logger = logging.getLogger(__name__)


def to_response(link: LinkRecord) -> JSONDocument:
    """JSON representation of a link for API responses (document + slug + type)"""
    return {**link.to_document(), 'slug': link.slug, 'type': str(link_type(link.destination))}


class LinkRegistry:
    """Create, read, update, delete and list short links

    Methods:
        create(slug, destination, status=None, qr_code=None) -> LinkRecord
        update(slug, destination=None, status=None, qr_code=None) -> LinkRecord
        delete(slug) -> None
        get(slug) -> LinkRecord
        list(link_type=None) -> list[LinkRecord]
        record_click(slug) -> int | None

    NOTE: Callers are responsible for authorization.
    """

    def __init__(self, store: KeyValueBaseStore, prefix: str | None = None):
        self.store = store
        self.keys = KeySchema(prefix=prefix)

    def _load(self, slug: str) -> LinkRecord | None:
        document = self.store.get(self.keys.link_key(slug))
        return None if document is None else LinkRecord.from_document(slug, document)

    def create(
        self,
        slug: str | None,
        destination: str | None,
        status: str | None = None,
        qr_code: str | None = None,
    ) -> LinkRecord:
        """Create a new link.

        Raises:
            ValidationError: Missing slug or destination.
            InvalidSlugError: Slug contains characters outside [A-Za-z0-9_-].
            DuplicateSlugError: A link with this slug already exists.
            InvalidDestinationError: Destination isn't an acceptable absolute URL.
        """
        if not slug or not destination:
            raise ValidationError('slug and destination are required')
        if not is_valid_slug(slug):
            raise InvalidSlugError('slug can only contain letters, numbers, hyphens, and underscores')
        if self.store.get(self.keys.link_key(slug)) is not None:
            raise DuplicateSlugError('slug already exists')
        if not is_valid_destination(destination):
            raise InvalidDestinationError('destination must be a valid URL')

        now = datetime.now(UTC)
        link = LinkRecord(
            slug=slug,
            destination=destination,
            created_at=now,
            updated_at=now,
            clicks=0,
            status=LinkStatus.DRAFT if status == LinkStatus.DRAFT else LinkStatus.ACTIVE,
            qr_code=qr_code or None,
        )

        if not self.store.set(self.keys.link_key(slug), link.to_document(), nx=True):
            raise DuplicateSlugError('slug already exists')

        logger.info('Link created.', extra={'slug': slug, 'status': str(link.status)})
        return link

    def update(
        self,
        slug: str | None,
        destination: str | None = None,
        status: str | None = None,
        qr_code: str | None = None,
    ) -> LinkRecord:
        """Update the supplied fields of an existing link.

        Fields left as None are kept. Every supplied field is validated before
        anything is written.

        Raises:
            ValidationError: Missing slug.
            LinkNotFoundError: No link with this slug.
            InvalidDestinationError: Supplied destination isn't an acceptable absolute URL.
            InvalidStatusError: Supplied status is neither 'draft' nor 'active'.
        """
        if not slug:
            raise ValidationError('slug is required')

        link = self._load(slug)
        if link is None:
            raise LinkNotFoundError('Link not found')

        changes = {'updated_at': datetime.now(UTC)}
        if destination is not None:
            if not is_valid_destination(destination):
                raise InvalidDestinationError('destination must be a valid URL')
            changes['destination'] = destination
        if status is not None:
            if status not in {s.value for s in LinkStatus}:
                raise InvalidStatusError("status must be 'draft' or 'active'")
            changes['status'] = LinkStatus(status)
        if qr_code is not None:
            changes['qr_code'] = qr_code

        updated = link.with_changes(**changes)
        self.store.set(self.keys.link_key(slug), updated.to_document())

        logger.info('Link updated.', extra={'slug': slug, 'fields': sorted(changes)})
        return updated

    def delete(self, slug: str) -> None:
        key = self.keys.link_key(slug)
        if self.store.get(key) is None:
            raise LinkNotFoundError('Link not found')
        self.store.delete(key)
        logger.info('Link deleted.', extra={'slug': slug})

    def get(self, slug: str) -> LinkRecord:
        link = self._load(slug)
        if link is None:
            raise LinkNotFoundError('Link not found')
        return link

    def list(self, link_type: LinkType | str | None = None) -> list[LinkRecord]:
        """Return all links, most recently updated first.

        Args:
            link_type (LinkType | str | None):
                Only return links whose destination is of this type.
        """
        links = []
        for key in self.store.keys(self.keys.link_pattern()):
            # A key may disappear between SCAN and GET
            link = self._load(self.keys.slug_from_link_key(key))
            if link is not None:
                links.append(link)

        if link_type is not None:
            links = [link for link in links if _link_type_of(link) == link_type]

        links.sort(key=lambda link: link.updated_at, reverse=True)
        return links

    def record_click(self, slug: str) -> int | None:
        return self.store.hincrby(self.keys.link_key(slug), 'clicks', 1)


def _link_type_of(link: LinkRecord) -> LinkType:
    return link_type(link.destination)
