"""End-to-end tests driving the lambda handlers against the in-memory store

The store is selected the way it is in production (kv_store() with no Redis
configured), so every handler in a test shares the same process-local data.

Test coverage includes:
    1. The full operator journey: setup, create, redirect, update, delete.
    2. Password round trip and lockout boundary over HTTP.
    3. Session expiry over HTTP.
    4. Link invariants: uniqueness, idempotent reads, update semantics,
       click monotonicity and validation.
"""

import json
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, UTC
from typing import cast

import pytest
from freezegun import freeze_time

from qrlinks.dao.factory import kv_store
from qrlinks.lambdas.auth import app as auth_app
from qrlinks.lambdas.links import app as links_app
from qrlinks.lambdas.redirect_link import app as redirect_app
from qrlinks.lambdas.view_link import app as view_app
from qrlinks.services import redirect_resolver
from qrlinks.types import LambdaEvent


PASSWORD = 'secret1'
CLIENT = '203.0.113.7'
START = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
REQUEST_CONTEXT = {'domainName': 'qr.example.com', 'stage': 'Prod'}


# -------------------------------
# Helpers
# -------------------------------


def auth(action: str, password: str | None = None, ip: str = CLIENT) -> dict:
    body = {'action': action}
    if password is not None:
        body['password'] = password
    event = {
        'httpMethod': 'POST',
        'headers': {'X-Forwarded-For': ip},
        'body': json.dumps(body),
        'requestContext': REQUEST_CONTEXT,
    }
    return auth_app.lambda_handler(cast(LambdaEvent, event), None)


def auth_status(cookie: str | None) -> dict:
    event = {
        'httpMethod': 'GET',
        'headers': {'Cookie': cookie} if cookie else {},
        'queryStringParameters': {'action': 'status'},
        'requestContext': REQUEST_CONTEXT,
    }
    return json.loads(auth_app.lambda_handler(cast(LambdaEvent, event), None)['body'])


def links(method: str, cookie: str, query: dict | None = None, body: dict | None = None) -> dict:
    event = {
        'httpMethod': method,
        'headers': {'Cookie': cookie},
        'queryStringParameters': query,
        'body': json.dumps(body) if body is not None else None,
        'requestContext': REQUEST_CONTEXT,
    }
    return links_app.lambda_handler(cast(LambdaEvent, event), None)


def visit(slug: str) -> dict:
    event = {'httpMethod': 'GET', 'pathParameters': {'slug': slug}, 'requestContext': REQUEST_CONTEXT}
    return redirect_app.lambda_handler(cast(LambdaEvent, event), None)


def cookie_of(response: dict) -> str:
    return response['headers']['Set-Cookie'].split(';')[0]


def clicks(cookie: str, slug: str) -> int:
    return json.loads(links('GET', cookie, query={'slug': slug})['body'])['clicks']


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture(autouse=True)
def executor(monkeypatch):
    """Single click worker, so draining it means every earlier click is stored."""
    _executor = ThreadPoolExecutor(max_workers=1)
    monkeypatch.setattr(redirect_resolver, 'click_executor', _executor)
    yield _executor
    _executor.shutdown(wait=True)


@pytest.fixture
def drain(executor):
    return lambda: executor.submit(lambda: None).result(timeout=5)


@pytest.fixture
def cookie() -> str:
    return cookie_of(auth('setup', PASSWORD))


# -------------------------------
# 1. Operator journey
# -------------------------------


def test_end_to_end_scenario(drain):
    assert kv_store().is_local is True

    response = auth('setup', PASSWORD)
    assert response['statusCode'] == 200
    cookie = cookie_of(response)
    assert auth_status(cookie) == {'isSetup': True, 'isAuthenticated': True}

    response = links('POST', cookie, body={'slug': 'promo', 'destination': 'https://example.com/sale'})
    assert response['statusCode'] == 201
    assert json.loads(response['body'])['redirectUrl'] == 'https://qr.example.com/r/promo'

    response = visit('promo')
    assert response['statusCode'] == 307
    assert response['headers']['Location'] == 'https://example.com/sale'
    drain()
    assert clicks(cookie, 'promo') == 1

    response = links('PUT', cookie, body={'slug': 'promo', 'destination': 'https://example.com/newsale'})
    assert response['statusCode'] == 200

    response = visit('promo')
    assert response['headers']['Location'] == 'https://example.com/newsale'
    drain()
    assert clicks(cookie, 'promo') == 2

    response = links('DELETE', cookie, query={'slug': 'promo'})
    assert json.loads(response['body']) == {'success': True, 'deleted': 'promo'}

    response = visit('promo')
    assert response['statusCode'] == 307
    assert response['headers']['Location'] == 'https://qr.example.com/'


def test_logout_clears_cookie_but_session_stays_valid(cookie):
    response = auth('logout')

    assert 'Max-Age=0' in response['headers']['Set-Cookie']
    assert auth_status(cookie)['isAuthenticated'] is True


def test_view_endpoint(cookie, drain):
    links('POST', cookie, body={'slug': 'call', 'destination': 'tel:+15551234567'})

    event = {'httpMethod': 'GET', 'pathParameters': {'slug': 'call'}, 'requestContext': REQUEST_CONTEXT}
    response = view_app.lambda_handler(cast(LambdaEvent, event), None)

    assert json.loads(response['body'])['type'] == 'phone'
    drain()
    assert clicks(cookie, 'call') == 0


# -------------------------------
# 2. Password round trip and lockout
# -------------------------------


def test_password_round_trip(cookie):
    assert auth('login', PASSWORD)['statusCode'] == 200
    assert auth('login', 'secret2')['statusCode'] == 401
    assert auth('login', PASSWORD.upper())['statusCode'] == 401


def test_lockout_boundary(cookie):
    with freeze_time(START) as frozen:
        for _ in range(5):
            auth('login', 'wrong password')

        response = auth('login', PASSWORD)
        assert response['statusCode'] == 429
        assert 'Set-Cookie' not in response['headers']

        frozen.tick(timedelta(minutes=15, seconds=1))
        response = auth('login', PASSWORD)
        assert response['statusCode'] == 200
        assert auth_status(cookie_of(response))['isAuthenticated'] is True


# -------------------------------
# 3. Session expiry
# -------------------------------


def test_session_expiry():
    with freeze_time(START) as frozen:
        cookie = cookie_of(auth('setup', PASSWORD))
        assert links('GET', cookie)['statusCode'] == 200

        frozen.tick(timedelta(days=7))
        assert links('GET', cookie)['statusCode'] == 401
        assert auth_status(cookie) == {'isSetup': True, 'isAuthenticated': False}


# -------------------------------
# 4. Link invariants
# -------------------------------


@pytest.mark.parametrize('second_destination', ['https://example.com/sale', 'https://example.org', 'not a url'])
def test_slug_uniqueness(cookie, second_destination):
    links('POST', cookie, body={'slug': 'promo', 'destination': 'https://example.com/sale'})

    response = links('POST', cookie, body={'slug': 'promo', 'destination': second_destination})
    assert response['statusCode'] == 409


def test_idempotent_read(cookie):
    links('POST', cookie, body={'slug': 'promo', 'destination': 'https://example.com'})

    first = links('GET', cookie, query={'slug': 'promo'})
    second = links('GET', cookie, query={'slug': 'promo'})
    assert first == second


def test_update_preserves_unspecified_fields(cookie):
    links('POST', cookie, body={'slug': 'promo', 'destination': 'https://a.com'})

    response = links('PUT', cookie, body={'slug': 'promo', 'status': 'draft'})
    updated = json.loads(response['body'])

    assert updated['destination'] == 'https://a.com'
    assert updated['status'] == 'draft'


def test_click_monotonicity(cookie, drain):
    links('POST', cookie, body={'slug': 'promo', 'destination': 'https://example.com'})

    for expected in range(1, 6):
        visit('promo')
        drain()
        assert clicks(cookie, 'promo') == expected


def test_slug_format(cookie):
    assert links('POST', cookie, body={'slug': 'bad slug!', 'destination': 'https://a.com'})['statusCode'] == 400
    assert links('POST', cookie, body={'slug': 'ok-slug_2', 'destination': 'https://a.com'})['statusCode'] == 201


def test_destination_validation(cookie):
    assert links('POST', cookie, body={'slug': 'x', 'destination': 'not a url'})['statusCode'] == 400

    links('POST', cookie, body={'slug': 'x', 'destination': 'https://a.com'})
    before = links('GET', cookie, query={'slug': 'x'})['body']

    response = links('PUT', cookie, body={'slug': 'x', 'destination': 'also not a url'})
    assert response['statusCode'] == 400
    assert links('GET', cookie, query={'slug': 'x'})['body'] == before
