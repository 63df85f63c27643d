"""Session cookie helpers.

The session token travels in an HTTP-only, SameSite=Lax cookie named
`session`. Incoming cookies are read from the `Cookie` header (REST API
payloads) or from the `cookies` list (HTTP API v2 payloads).
"""

from http.cookies import SimpleCookie

from qrlinks.constants import Session
from qrlinks.types import LambdaEvent
from qrlinks.utils.helpers import get_header


def _cookie_value(raw: str, name: str) -> str | None:
    # Lenient: pairs without '=' are skipped and one layer of quotes is dropped
    for pair in raw.split(';'):
        key, sep, value = pair.partition('=')
        if sep and key.strip() == name:
            return value.strip().strip('"')
    return None


def session_token(event: LambdaEvent) -> str | None:
    """Return the session token sent by the client, or None"""
    raw_cookies = list(event.get('cookies') or [])
    header = get_header(event, 'Cookie')
    if header:
        raw_cookies.append(header)

    for raw in raw_cookies:
        token = _cookie_value(raw, Session.COOKIE_NAME)
        if token:
            return token
    return None


def _session_cookie(value: str, max_age: int, secure: bool) -> str:
    jar = SimpleCookie()
    jar[Session.COOKIE_NAME] = value
    morsel = jar[Session.COOKIE_NAME]
    morsel['httponly'] = True
    morsel['samesite'] = 'Lax'
    morsel['secure'] = secure
    morsel['max-age'] = max_age
    morsel['path'] = '/'
    return morsel.OutputString()


def set_session_cookie(token: str, max_age: int, secure: bool) -> str:
    """Return a Set-Cookie header value issuing the session token"""
    return _session_cookie(token, max_age, secure)


def clear_session_cookie(secure: bool) -> str:
    """Return a Set-Cookie header value deleting the session cookie"""
    return _session_cookie('', 0, secure)
