"""Unit tests for session cookie helpers in cookies.py"""

import pytest

from qrlinks.utils.cookies import clear_session_cookie, session_token, set_session_cookie


@pytest.mark.parametrize(
    "event, expected",
    [
        ({'headers': {'Cookie': 'theme=dark; session=abc123'}}, 'abc123'),
        ({'headers': {'cookie': 'session=abc123'}}, 'abc123'),
        ({'cookies': ['theme=dark', 'session=abc123']}, 'abc123'),
        ({'headers': {'Cookie': 'theme=dark'}}, None),
        ({'headers': {'Cookie': 'session='}}, None),
        ({'headers': {'Cookie': 'prefs={"theme":"dark"}; session=abc123'}}, 'abc123'),
        ({'headers': {'Cookie': 'a=b c; session=abc123'}}, 'abc123'),
        ({'headers': {'Cookie': 'flag; session=abc123; other=1'}}, 'abc123'),
        ({'headers': {'Cookie': 'session="abc123"'}}, 'abc123'),
        ({'headers': {'Cookie': 'my_session=xyz'}}, None),
        ({'cookies': ['prefs={"a": 1}', 'session=abc123']}, 'abc123'),
        ({}, None),
    ],
)
def test_session_token(event, expected):
    assert session_token(event) == expected


def test_set_session_cookie():
    cookie = set_session_cookie('abc123', 604800, secure=True)
    attributes = [part.strip() for part in cookie.split(';')]

    assert attributes[0] == 'session=abc123'
    assert 'Max-Age=604800' in attributes
    assert 'Path=/' in attributes
    assert 'HttpOnly' in attributes
    assert 'SameSite=Lax' in attributes
    assert 'Secure' in attributes


def test_set_session_cookie_without_secure():
    cookie = set_session_cookie('abc123', 604800, secure=False)
    assert 'Secure' not in [part.strip() for part in cookie.split(';')]


def test_clear_session_cookie():
    attributes = [part.strip() for part in clear_session_cookie(secure=False).split(';')]

    assert attributes[0] == 'session=""'
    assert 'Max-Age=0' in attributes
    assert 'Path=/' in attributes
