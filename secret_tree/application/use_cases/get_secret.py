"""
Use-case: fetch a single secret, optionally pinned to a version or stage.
Depends only on Domain ports and entities; no infrastructure imports.
"""

from typing import Any, Optional

from secret_tree.application.services.retry_policy import RetryPolicy
from secret_tree.domain.entities.secret import SecretRecord
from secret_tree.domain.ports.secret_store_port import ISecretStore
from secret_tree.domain.services.key_codec import parse_value


class GetSecretUseCase:
    def __init__(self, store: ISecretStore, retry: RetryPolicy) -> None:
        self._store = store
        self._retry = retry

    async def fetch_record(
        self,
        secret_id: str,
        version: Optional[str] = None,
        stage: Optional[str] = None,
    ) -> SecretRecord:
        """Fetch the full record; *version* takes precedence over *stage*."""
        if not secret_id:
            raise ValueError("secret id must be a non-empty string")
        version_stage = None if version else stage
        return await self._retry.run(
            lambda: self._store.get_secret_value(
                secret_id, version_id=version, version_stage=version_stage
            ),
            description=f"get_secret:{secret_id}",
        )

    async def execute(
        self,
        secret_id: str,
        version: Optional[str] = None,
        stage: Optional[str] = None,
        raw: bool = False,
        parse: bool = False,
    ) -> Any:
        """Fetch *secret_id*.

        Args:
            secret_id: Secret name or ARN.
            version:   VersionId to fetch.
            stage:     Staging label (e.g. 'AWSPREVIOUS'); ignored with *version*.
            raw:       Return the whole SecretRecord.
            parse:     Return the value parsed as JSON (string fallback) instead
                       of the stored string.

        Raises:
            RateLimitExceeded: the store kept throttling.
            SecretStoreError:  any other store rejection (e.g. not found).
        """
        record = await self.fetch_record(secret_id, version=version, stage=stage)
        if raw:
            return record
        if parse:
            return parse_value(record.raw_value)
        return record.raw_value
