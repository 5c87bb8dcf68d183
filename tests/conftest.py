"""Shared fixtures: a scoped fake store and clients built on it."""

import json

import pytest
import structlog

from secret_tree.application.services.retry_policy import RetryPolicy
from secret_tree.application.services.secrets_client import SecretsClient
from secret_tree.domain.entities.store_options import StoreOptions
from tests.fakes import FakeSecretStore


@pytest.fixture(autouse=True)
def reset_structlog():
    """CLI runs bind structlog to a captured stderr; drop that after each test."""
    yield
    structlog.reset_defaults()


async def _no_sleep(_seconds: float) -> None:
    return None


@pytest.fixture
def fast_retry() -> RetryPolicy:
    """Default attempt count, no real waiting."""
    return RetryPolicy(sleep=_no_sleep)


@pytest.fixture
def options() -> StoreOptions:
    return StoreOptions(region="us-east-1", delimiter="/", environment="dev", namespace="ns")


@pytest.fixture
def store() -> FakeSecretStore:
    return FakeSecretStore(
        {
            "ns/dev/a/b": json.dumps("1"),
            "ns/dev/a/c": json.dumps({"x": True}),
            "ns/dev/word": "pumpkins",
            "ns/prod/a/b": "2",
            "other/dev/a/b": "3",
        }
    )


@pytest.fixture
def client(store, options, fast_retry) -> SecretsClient:
    return SecretsClient(store, options, retry=fast_retry)
