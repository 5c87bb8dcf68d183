"""
Port (interface) for secret stores.
Infrastructure adapters (e.g. SecretsManagerAdapter) must implement this interface.

All methods are coroutines. Adapters raise RateLimited for throttled calls and
SecretStoreError for every other rejection from the backing store.
"""

from abc import ABC, abstractmethod
from typing import Optional

from secret_tree.domain.entities.secret import (
    CreatedSecret,
    DeletedSecret,
    SecretPage,
    SecretRecord,
)


class ISecretStore(ABC):
    @abstractmethod
    async def list_secrets_page(self, next_token: Optional[str] = None) -> SecretPage:
        """Fetch one page of the secret listing, starting at *next_token*."""
        ...

    @abstractmethod
    async def get_secret_value(
        self,
        secret_id: str,
        version_id: Optional[str] = None,
        version_stage: Optional[str] = None,
    ) -> SecretRecord:
        """Fetch a secret version by name or ARN."""
        ...

    @abstractmethod
    async def create_secret(
        self,
        name: str,
        secret_string: Optional[str] = None,
        secret_binary: Optional[bytes] = None,
        kms_key_id: Optional[str] = None,
        description: Optional[str] = None,
        client_request_token: Optional[str] = None,
        tags: Optional[list[dict]] = None,
    ) -> CreatedSecret: ...

    @abstractmethod
    async def delete_secret(self, secret_id: str, force: bool = False) -> DeletedSecret:
        """Delete a secret. Without *force* the store keeps a recovery window."""
        ...
