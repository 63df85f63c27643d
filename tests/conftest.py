from typing import cast

import pytest
from pytest import MonkeyPatch

from qrlinks.dao.factory import kv_store
from qrlinks.dao.memory import InMemoryKeyValueStore
from qrlinks.types import LambdaContext


# Environment variables read by qrlinks which must not leak in from the host
APP_ENVIRONMENT = (
    'APP_ENV',
    'APP_NAME',
    'AWS_SAM_LOCAL',
    'PUBLIC_BASE_URL',
    'REDIS_URL',
    'KV_URL',
    'APPCONFIG_APP_ID',
    'APPCONFIG_ENV_ID',
    'APPCONFIG_PROFILE_ID',
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: MonkeyPatch) -> None:
    for name in APP_ENVIRONMENT:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_store_selection():
    kv_store.cache_clear()
    yield
    kv_store.cache_clear()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'qrlinks-test'})
