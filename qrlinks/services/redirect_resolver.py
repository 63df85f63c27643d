"""Slug to destination resolution for redirects.

The click increment runs on a thread pool so a slow or failing store never
breaks a redirect. Callers may wait on `RedirectTarget.click` for a bounded
time before responding. Failed increments are logged and dropped.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from qrlinks.exceptions import LinkNotFoundError
from qrlinks.services.link_registry import LinkRegistry


logger = logging.getLogger(__name__)

# Shared by every resolver in the process, threads outlive single invocations
click_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix='click-counter')


@dataclass(frozen=True)
class RedirectTarget:
    slug: str
    destination: str
    click: Future


def _log_click_failure(slug: str):
    def callback(future: Future) -> None:
        error = future.exception()
        if error is not None:
            logger.error(
                'Failed to record click.',
                extra={'slug': slug, 'error': error.__class__.__name__, 'reason': str(error)},
            )
        elif future.result() is None:
            logger.info('Link vanished before its click was recorded.', extra={'slug': slug})

    return callback


class RedirectResolver:
    def __init__(self, registry: LinkRegistry, executor: ThreadPoolExecutor | None = None):
        self.registry = registry
        self.executor = executor or click_executor

    def resolve(self, slug: str) -> RedirectTarget:
        """Look up the destination of `slug` and submit its click increment

        Raises:
            LinkNotFoundError: No link with this slug.
        """
        link = self.registry.get(slug)

        click = self.executor.submit(self.registry.record_click, slug)
        click.add_done_callback(_log_click_failure(slug))
        return RedirectTarget(slug=slug, destination=link.destination, click=click)
