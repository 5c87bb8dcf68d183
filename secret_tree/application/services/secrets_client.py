"""
Application service: the SecretsClient facade.

A SecretsClient is built once from an immutable StoreOptions plus the store and
bridge adapters, and exposes every secret-tree operation. Changing scope means
building a new client.

Infrastructure adapters (ISecretStore, ISyncBridge) are injected; no imports from
boto3, subprocess, or any other external I/O library appear here.
"""

from typing import Any, Optional, Sequence, Union

from secret_tree.application.services.retry_policy import RetryPolicy
from secret_tree.application.use_cases.assemble_config import AssembleConfigUseCase
from secret_tree.application.use_cases.create_secrets import CreateSecretsUseCase
from secret_tree.application.use_cases.delete_secrets import DeleteSecretsUseCase
from secret_tree.application.use_cases.get_secret import GetSecretUseCase
from secret_tree.application.use_cases.list_secrets import ListSecretsUseCase
from secret_tree.domain.entities.secret import (
    BulkOutcome,
    ConfigTree,
    CreatedSecret,
    DeletedSecret,
    SecretListItem,
    SecretRecord,
)
from secret_tree.domain.entities.store_options import (
    DEFAULT_CONFIG_MAX_OUTPUT_BYTES,
    DEFAULT_SECRET_MAX_OUTPUT_BYTES,
    StoreOptions,
)
from secret_tree.domain.ports.secret_store_port import ISecretStore
from secret_tree.domain.ports.sync_bridge_port import ISyncBridge


class SecretsClient:
    def __init__(
        self,
        store: ISecretStore,
        options: StoreOptions,
        bridge: Optional[ISyncBridge] = None,
        retry: Optional[RetryPolicy] = None,
    ) -> None:
        """
        Args:
            store:   ISecretStore implementation (e.g. SecretsManagerAdapter).
            options: Resolved scope and limits for this client.
            bridge:  ISyncBridge used by config_sync() / get_secret_sync().
            retry:   Throttling policy shared by listing and single fetches.
        """
        self.options = options
        self._store = store
        self._bridge = bridge
        retry = retry or RetryPolicy()

        self._lister = ListSecretsUseCase(store, options, retry)
        self._getter = GetSecretUseCase(store, retry)
        self._assembler = AssembleConfigUseCase(self._lister, self._getter, options)
        self._creator = CreateSecretsUseCase(store, options)
        self._deleter = DeleteSecretsUseCase(store, self._lister)

    @property
    def delimiter(self) -> str:
        return self.options.delimiter

    @property
    def environment(self) -> Optional[str]:
        return self.options.environment

    @property
    def namespace(self) -> Optional[str]:
        return self.options.namespace

    # ------------------------------------------------------------------
    # Async API
    # ------------------------------------------------------------------

    async def config(self) -> ConfigTree:
        """Fetch every in-scope secret and fold them into a nested config tree."""
        return await self._assembler.execute()

    async def list_secrets(self) -> list[SecretListItem]:
        return await self._lister.execute()

    async def get_secret(
        self,
        id: str,
        version: Optional[str] = None,
        stage: Optional[str] = None,
        raw: bool = False,
        parse: bool = False,
    ) -> Any:
        """See GetSecretUseCase.execute()."""
        return await self._getter.execute(id, version=version, stage=stage, raw=raw, parse=parse)

    async def create_secret(
        self,
        name: Union[str, Sequence[str]],
        secrets: Any = None,
        secrets_binary: Optional[bytes] = None,
        description: Optional[str] = None,
        token: Optional[str] = None,
        kms: Optional[str] = None,
        tags: Optional[list[dict]] = None,
    ) -> CreatedSecret:
        """See CreateSecretsUseCase.create()."""
        return await self._creator.create(
            name,
            secrets,
            secrets_binary=secrets_binary,
            description=description,
            token=token,
            kms=kms,
            tags=tags,
        )

    async def create_secrets(self, tree: ConfigTree, kms: Optional[str] = None) -> list[BulkOutcome]:
        """Create one secret per leaf of a declarative config tree."""
        return await self._creator.create_from_tree(tree, kms=kms)

    async def delete_secret(self, id: str, force: bool = False) -> DeletedSecret:
        return await self._deleter.delete(id, force=force)

    async def delete_secrets(
        self,
        force: bool = False,
        dry_run: bool = False,
        listing: Optional[Sequence[SecretListItem]] = None,
    ) -> list[BulkOutcome]:
        """Delete every in-scope secret, or exactly *listing* when given.
        Destructive unless *dry_run*."""
        return await self._deleter.delete_all(force=force, dry_run=dry_run, listing=listing)

    # ------------------------------------------------------------------
    # Sync API (runs the async call in a bridge worker process)
    # ------------------------------------------------------------------

    def config_sync(self, max_output_bytes: Optional[int] = None) -> ConfigTree:
        """Blocking config(). The whole tree must fit in *max_output_bytes*
        (default: the client's max_output_bytes, else 3 MiB)."""
        limit = max_output_bytes or self.options.max_output_bytes or DEFAULT_CONFIG_MAX_OUTPUT_BYTES
        result = self._require_bridge().call("config", self.options.to_dict(), {}, limit)
        return result or {}

    def get_secret_sync(
        self,
        id: str,
        version: Optional[str] = None,
        stage: Optional[str] = None,
        raw: bool = False,
        parse: bool = False,
        max_output_bytes: Optional[int] = None,
    ) -> Any:
        """Blocking get_secret(). The encoded result must fit in *max_output_bytes*
        (default 64 KiB)."""
        limit = max_output_bytes or DEFAULT_SECRET_MAX_OUTPUT_BYTES
        arguments = {"id": id, "version": version, "stage": stage, "raw": raw, "parse": parse}
        result = self._require_bridge().call("get_secret", self.options.to_dict(), arguments, limit)
        if raw and isinstance(result, dict):
            return SecretRecord.from_dict(result)
        return result

    def _require_bridge(self) -> ISyncBridge:
        if self._bridge is None:
            raise RuntimeError("This SecretsClient was built without a sync bridge")
        return self._bridge

