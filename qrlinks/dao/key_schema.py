import functools
from collections.abc import Callable


__all__ = ['KeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class KeySchema:
    """Provide standardized store keys for all persisted records.

    An optional prefix can be provided to namespace all generated keys,
    e.g. "qrlinks:prod" or "qrlinks:dev". Without a prefix the keys are
    `auth:password`, `session:<token>`, `ratelimit:<ip>` and `link:<slug>`.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def auth_password_key(self) -> str:
        return 'auth:password'

    @prefix_key
    def session_key(self, token: str) -> str:
        return f'session:{token}'

    @prefix_key
    def rate_limit_key(self, identity: str) -> str:
        return f'ratelimit:{identity}'

    @prefix_key
    def link_key(self, slug: str) -> str:
        return f'link:{slug}'

    @prefix_key
    def link_pattern(self) -> str:
        return 'link:*'

    def slug_from_link_key(self, key: str) -> str:
        return key.removeprefix(self.link_key(''))
