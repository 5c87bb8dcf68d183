"""Unit tests for assembling the config tree from scoped secrets."""

import json

import pytest

from secret_tree.application.services.secrets_client import SecretsClient
from secret_tree.domain.entities.store_options import StoreOptions
from secret_tree.domain.errors import SecretStoreError
from tests.fakes import FakeSecretStore


@pytest.mark.unit
class TestConfig:
    async def test_builds_nested_tree_for_scope(self, client):
        tree = await client.config()

        assert tree == {"a": {"b": "1", "c": {"x": True}}, "word": "pumpkins"}

    async def test_non_json_value_kept_verbatim(self, client):
        tree = await client.config()

        assert tree["word"] == "pumpkins"

    async def test_empty_scope_returns_empty_tree(self, fast_retry):
        client = SecretsClient(FakeSecretStore({"x/y": "1"}), StoreOptions(namespace="ns"), retry=fast_retry)

        assert await client.config() == {}

    async def test_repeated_calls_are_identical_and_refetch(self, client, store):
        first = await client.config()
        second = await client.config()

        assert first == second
        fetches = [call for call in store.calls if call[0] == "get_secret_value"]
        assert len(fetches) == 6

    async def test_fetch_failure_aborts_the_call(self, client, store):
        store.fail("get_secret_value", SecretStoreError("denied", "AccessDeniedException"))

        with pytest.raises(SecretStoreError) as exc_info:
            await client.config()

        assert exc_info.value.code == "AccessDeniedException"

    async def test_fixture_set_from_bulk_file(self, fast_retry):
        values = {
            "secret1": {"key": "peter@example.com", "secret": "pumpkins"},
            "secret2": "pumpkins",
            "secret3": 4,
            "secret4": True,
            "secret5": [1, 2, 3],
            "secret6": [1, "peach", None, ["apple"], {"yes": True}],
            "nested/secret/1": 5,
            "nested/secret/2": ["apple", "peach", "banana"],
            "nested/secret/auth": {"username": "joe@example.com", "password": "p3@ches"},
        }
        store = FakeSecretStore(
            {f"__secrets__/unit-testing/{name}": json.dumps(value) for name, value in values.items()},
            page_size=4,
        )
        client = SecretsClient(
            store,
            StoreOptions(environment="unit-testing", namespace="__secrets__"),
            retry=fast_retry,
        )

        tree = await client.config()

        assert tree == {
            "secret1": {"key": "peter@example.com", "secret": "pumpkins"},
            "secret2": "pumpkins",
            "secret3": 4,
            "secret4": True,
            "secret5": [1, 2, 3],
            "secret6": [1, "peach", None, ["apple"], {"yes": True}],
            "nested": {
                "secret": {
                    "1": 5,
                    "2": ["apple", "peach", "banana"],
                    "auth": {"username": "joe@example.com", "password": "p3@ches"},
                }
            },
        }

    async def test_all_mode_keeps_environment_segment(self, store, fast_retry):
        client = SecretsClient(store, StoreOptions(namespace="ns"), retry=fast_retry)

        tree = await client.config()

        assert tree["dev"]["a"]["b"] == "1"
        assert tree["prod"]["a"]["b"] == 2
