"""Unit tests for StoreOptions resolution and bridge serialization."""

import pytest

from secret_tree.domain.entities.secret import SecretIdentity
from secret_tree.domain.entities.store_options import StoreOptions


@pytest.mark.unit
class TestStoreOptionsCreate:
    def test_environment_falls_back_to_variable(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "staging")

        assert StoreOptions.create().environment == "staging"

    def test_explicit_environment_wins(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "staging")

        assert StoreOptions.create(environment="production").environment == "production"

    def test_all_clears_environment(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "staging")

        options = StoreOptions.create(environment="production", all=True)

        assert options.environment is None

    def test_namespace_list_joined_by_delimiter(self):
        options = StoreOptions.create(namespace=["team", "app"], delimiter=":")

        assert options.namespace == "team:app"

    def test_empty_values_are_absent(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        options = StoreOptions.create(namespace="", environment="")

        assert options.namespace is None
        assert options.environment is None
        assert options.delimiter == "/"

    def test_region_from_environment(self, monkeypatch):
        monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")

        assert StoreOptions.create().region == "eu-west-1"

    def test_options_are_immutable(self):
        options = StoreOptions.create(environment="dev")

        with pytest.raises(AttributeError):
            options.environment = "prod"


@pytest.mark.unit
class TestStoreOptionsSerialization:
    def test_dict_round_trip_keeps_absent_environment(self, monkeypatch):
        options = StoreOptions.create(environment="dev", namespace="ns", all=True)
        monkeypatch.setenv("ENVIRONMENT", "staging")

        restored = StoreOptions.from_dict(options.to_dict())

        assert restored == options
        assert restored.environment is None

    def test_unknown_keys_are_ignored(self):
        restored = StoreOptions.from_dict({"region": "us-west-2", "bogus": 1})

        assert restored.region == "us-west-2"


@pytest.mark.unit
class TestSecretIdentity:
    def test_full_name(self):
        identity = SecretIdentity(path_segments=("db", "password"), namespace="ns", environment="dev")

        assert identity.full_name() == "ns/dev/db/password"

    def test_requires_segments(self):
        with pytest.raises(ValueError):
            SecretIdentity(path_segments=())
