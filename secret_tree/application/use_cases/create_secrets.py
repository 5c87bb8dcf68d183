"""
Use-case: create secrets under the client's namespace/environment.
Depends only on Domain ports and entities; no infrastructure imports.

create() writes one secret; create_from_tree() flattens a declarative config
tree and writes every leaf concurrently, settling each write independently so a
single rejection does not stop the rest.
"""

import asyncio
from typing import Any, Optional, Sequence, Union

import structlog

from secret_tree.domain.entities.secret import BulkOutcome, ConfigTree, CreatedSecret, FlatEntry
from secret_tree.domain.entities.store_options import StoreOptions
from secret_tree.domain.ports.secret_store_port import ISecretStore
from secret_tree.domain.services.key_codec import encode, flatten, serialize_value

logger = structlog.get_logger(__name__)


class CreateSecretsUseCase:
    def __init__(self, store: ISecretStore, options: StoreOptions) -> None:
        self._store = store
        self._options = options

    def qualified_name(self, name: Union[str, Sequence[str]]) -> str:
        if not isinstance(name, str):
            name = self._options.delimiter.join(name)
        if not name:
            raise ValueError("secret name must be a non-empty string")
        return encode(
            self._options.environment,
            self._options.namespace,
            self._options.delimiter,
            name,
        )

    async def create(
        self,
        name: Union[str, Sequence[str]],
        secrets: Any = None,
        secrets_binary: Optional[bytes] = None,
        description: Optional[str] = None,
        token: Optional[str] = None,
        kms: Optional[str] = None,
        tags: Optional[list[dict]] = None,
    ) -> CreatedSecret:
        """Create one secret named ``namespace/env/<name>``.

        Args:
            name:           Secret path; a list is joined by the delimiter.
            secrets:        Secret value. Non-strings are stored as JSON.
            secrets_binary: Binary payload, sent instead of *secrets*.
            description:    Secret description.
            token:          ClientRequestToken for idempotent retries.
            kms:            KMS key id or ARN used by the store for encryption.
            tags:           List of ``{"Key": ..., "Value": ...}`` dicts.
        """
        full_name = self.qualified_name(name)
        created = await self._store.create_secret(
            full_name,
            secret_string=None if secrets_binary is not None else serialize_value(secrets),
            secret_binary=secrets_binary,
            kms_key_id=kms or None,
            description=description or None,
            client_request_token=token or None,
            tags=tags if isinstance(tags, list) else None,
        )
        logger.info("secret_created", name=created.name, version_id=created.version_id)
        return created

    async def create_from_tree(self, tree: ConfigTree, kms: Optional[str] = None) -> list[BulkOutcome]:
        """Create one secret per flattened leaf of *tree*.

        Returns one BulkOutcome per leaf, in flatten order. A leaf whose name
        cannot be qualified (an empty key) is reported as failed and not sent.
        """
        outcomes: list[BulkOutcome] = []
        pending: list[tuple[int, FlatEntry]] = []
        for entry in flatten(tree, self._options.delimiter):
            try:
                name = self.qualified_name(entry.key)
            except ValueError as exc:
                logger.error("secret_create_failed", name=entry.key, error=str(exc))
                outcomes.append(BulkOutcome(name=entry.key, error=exc))
                continue
            pending.append((len(outcomes), entry))
            outcomes.append(BulkOutcome(name=name))

        results = await asyncio.gather(
            *(self.create(entry.key, entry.value, kms=kms) for _, entry in pending),
            return_exceptions=True,
        )
        for (index, _), result in zip(pending, results):
            name = outcomes[index].name
            if isinstance(result, Exception):
                logger.error("secret_create_failed", name=name, error=str(result))
                outcomes[index] = BulkOutcome(name=name, error=result)
            else:
                outcomes[index] = BulkOutcome(name=name, result=result)
        return outcomes
