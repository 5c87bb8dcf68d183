"""Unit tests for error payloads crossing the bridge."""

import pytest

from secret_tree.domain.errors import (
    BridgeOutputTooLarge,
    RateLimitExceeded,
    SecretStoreError,
    SecretTreeError,
    error_from_payload,
    error_to_payload,
)


@pytest.mark.unit
class TestErrorPayloads:
    def test_store_error_keeps_code(self):
        original = SecretStoreError("Secret not found", "ResourceNotFoundException")

        rebuilt = error_from_payload(original.to_payload())

        assert type(rebuilt) is SecretStoreError
        assert rebuilt.code == "ResourceNotFoundException"
        assert rebuilt.message == "Secret not found"

    def test_rate_limit_keeps_attempts(self):
        rebuilt = error_from_payload(RateLimitExceeded("slow down", attempts=3).to_payload())

        assert isinstance(rebuilt, RateLimitExceeded)
        assert rebuilt.attempts == 3

    def test_buffer_error_keeps_limit(self):
        rebuilt = error_from_payload(BridgeOutputTooLarge("too big", limit=10).to_payload())

        assert isinstance(rebuilt, BridgeOutputTooLarge)
        assert rebuilt.limit == 10

    def test_foreign_exception_becomes_base_error(self):
        payload = error_to_payload(KeyError("id"))

        rebuilt = error_from_payload(payload)

        assert type(rebuilt) is SecretTreeError
        assert rebuilt.code == "KeyError"

    def test_message_falls_back_to_code(self):
        rebuilt = error_from_payload({"code": "AccessDeniedException"})

        assert rebuilt.message == "AccessDeniedException"
