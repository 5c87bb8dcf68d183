"""In-memory ISecretStore used by application-layer tests."""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional

from secret_tree.domain.entities.secret import (
    CreatedSecret,
    DeletedSecret,
    SecretListItem,
    SecretPage,
    SecretRecord,
)
from secret_tree.domain.errors import SecretStoreError
from secret_tree.domain.ports.secret_store_port import ISecretStore


class FakeSecretStore(ISecretStore):
    """Secrets kept in insertion order, listed *page_size* at a time.

    Errors can be queued per operation with fail(); each queued error is raised
    once, in order, before the operation starts succeeding again.
    """

    def __init__(self, secrets: Optional[dict[str, str]] = None, page_size: int = 2) -> None:
        self.page_size = page_size
        self.secrets: dict[str, str] = {}
        self.calls: list[tuple] = []
        self._errors: dict[str, list[Exception]] = defaultdict(list)
        for name, value in (secrets or {}).items():
            self.secrets[name] = value

    def fail(self, operation: str, *errors: Exception) -> None:
        self._errors[operation].extend(errors)

    def _maybe_fail(self, operation: str) -> None:
        if self._errors[operation]:
            raise self._errors[operation].pop(0)

    @staticmethod
    def arn(name: str) -> str:
        return f"arn:aws:secretsmanager:us-east-1:123456789012:secret:{name}-AbCdEf"

    def _find(self, secret_id: str) -> str:
        for name in self.secrets:
            if secret_id in (name, self.arn(name)):
                return name
        raise SecretStoreError(f"Secrets Manager can't find the specified secret: {secret_id}", "ResourceNotFoundException")

    async def list_secrets_page(self, next_token: Optional[str] = None) -> SecretPage:
        self.calls.append(("list_secrets_page", next_token))
        self._maybe_fail("list_secrets_page")
        start = int(next_token or 0)
        names = list(self.secrets)
        chunk = names[start:start + self.page_size]
        end = start + self.page_size
        return SecretPage(
            items=[SecretListItem(name=name, arn=self.arn(name)) for name in chunk],
            next_token=str(end) if end < len(names) else None,
        )

    async def get_secret_value(self, secret_id, version_id=None, version_stage=None) -> SecretRecord:
        self.calls.append(("get_secret_value", secret_id, version_id, version_stage))
        self._maybe_fail("get_secret_value")
        name = self._find(secret_id)
        return SecretRecord(
            name=name,
            arn=self.arn(name),
            version_id=version_id or "v1",
            raw_value=self.secrets[name],
            created_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
            version_stages=(version_stage or "AWSCURRENT",),
        )

    async def create_secret(self, name, secret_string=None, secret_binary=None, kms_key_id=None,
                            description=None, client_request_token=None, tags=None) -> CreatedSecret:
        self.calls.append(("create_secret", name, secret_string, kms_key_id, description, client_request_token, tags))
        self._maybe_fail("create_secret")
        if name in self.secrets:
            raise SecretStoreError(f"The secret {name} already exists.", "ResourceExistsException")
        self.secrets[name] = secret_string
        return CreatedSecret(name=name, arn=self.arn(name), version_id="v1")

    async def delete_secret(self, secret_id, force=False) -> DeletedSecret:
        self.calls.append(("delete_secret", secret_id, force))
        self._maybe_fail("delete_secret")
        name = self._find(secret_id)
        del self.secrets[name]
        return DeletedSecret(name=name, arn=self.arn(name), deletion_date=datetime(2024, 2, 1, tzinfo=timezone.utc))


class RecordingBridge:
    """ISyncBridge stand-in returning a canned result and recording the call."""

    def __init__(self, result=None, error: Optional[Exception] = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple] = []

    def call(self, method, options, arguments=None, max_output_bytes=None):
        self.calls.append((method, options, arguments, max_output_bytes))
        if self.error is not None:
            raise self.error
        return self.result
