"""Unit tests for the RedirectResolver

Test coverage includes:
    1. Resolution returns the destination and counts the click in the background.
    2. Unknown slugs raise LinkNotFoundError without counting.
    3. Click failures are logged and never reach the caller.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from qrlinks.dao.exceptions import DataStoreError
from qrlinks.exceptions import LinkNotFoundError
from qrlinks.services.link_registry import LinkRegistry
from qrlinks.services.redirect_resolver import RedirectResolver, click_executor


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def registry(store):
    _registry = LinkRegistry(store)
    _registry.create('promo', 'https://example.com/sale')
    return _registry


@pytest.fixture
def executor():
    _executor = ThreadPoolExecutor(max_workers=1)
    yield _executor
    _executor.shutdown(wait=True)


# -------------------------------
# 1. Resolution
# -------------------------------


def test_resolve_counts_click(registry, executor):
    resolver = RedirectResolver(registry, executor=executor)

    target = resolver.resolve('promo')

    assert target.slug == 'promo'
    assert target.destination == 'https://example.com/sale'
    assert isinstance(target.click, Future)
    assert target.click.result(timeout=5) == 1
    assert registry.get('promo').clicks == 1


def test_resolve_many_clicks(registry, executor):
    resolver = RedirectResolver(registry, executor=executor)

    clicks = [resolver.resolve('promo').click for _ in range(20)]
    for click in clicks:
        click.result(timeout=5)

    assert registry.get('promo').clicks == 20


def test_default_executor_is_shared(registry):
    assert RedirectResolver(registry).executor is click_executor


def test_draft_links_resolve(registry, executor):
    registry.update('promo', status='draft')
    target = RedirectResolver(registry, executor=executor).resolve('promo')

    assert target.destination == 'https://example.com/sale'
    target.click.result(timeout=5)


# -------------------------------
# 2. Unknown slugs
# -------------------------------


def test_resolve_unknown_slug(registry):
    executor = MagicMock(spec=ThreadPoolExecutor)

    with pytest.raises(LinkNotFoundError):
        RedirectResolver(registry, executor=executor).resolve('missing')

    executor.submit.assert_not_called()


# -------------------------------
# 3. Click failures
# -------------------------------


def test_click_failure_is_logged(registry, executor, monkeypatch, caplog):
    def failing_click(slug):
        raise DataStoreError("Can't connect to Redis at redis.test:6379/0.")

    monkeypatch.setattr(registry, 'record_click', failing_click)
    resolver = RedirectResolver(registry, executor=executor)

    with caplog.at_level(logging.ERROR, logger='qrlinks.services.redirect_resolver'):
        target = resolver.resolve('promo')
        assert target.destination == 'https://example.com/sale'
        with pytest.raises(DataStoreError):
            target.click.result(timeout=5)
        executor.shutdown(wait=True)

    assert any(record.message == 'Failed to record click.' and record.slug == 'promo' for record in caplog.records)
