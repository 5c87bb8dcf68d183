"""
Use-case: delete every secret in the client's namespace/environment scope.
Depends only on Domain ports and entities; no infrastructure imports.
"""

import asyncio
from typing import Optional, Sequence

import structlog

from secret_tree.application.use_cases.list_secrets import ListSecretsUseCase
from secret_tree.domain.entities.secret import BulkOutcome, DeletedSecret, SecretListItem
from secret_tree.domain.ports.secret_store_port import ISecretStore

logger = structlog.get_logger(__name__)


class DeleteSecretsUseCase:
    def __init__(self, store: ISecretStore, lister: ListSecretsUseCase) -> None:
        self._store = store
        self._lister = lister

    async def delete(self, secret_id: str, force: bool = False) -> DeletedSecret:
        """Delete one secret; *force* skips the store's recovery window."""
        if not secret_id:
            raise ValueError("secret id must be a non-empty string")
        deleted = await self._store.delete_secret(secret_id, force=force)
        logger.info("secret_deleted", name=deleted.name, force=force)
        return deleted

    async def delete_all(
        self,
        force: bool = False,
        dry_run: bool = False,
        listing: Optional[Sequence[SecretListItem]] = None,
    ) -> list[BulkOutcome]:
        """Delete every in-scope secret, settling each delete independently.

        Pass *listing* to delete exactly those items (e.g. the ones a user
        confirmed); otherwise the scope is listed first. With *dry_run* nothing
        is deleted and each outcome carries the listed SecretListItem instead
        of a DeletedSecret.
        """
        if listing is None:
            listing = await self._lister.execute()
        if dry_run:
            return [BulkOutcome(name=item.name, result=item) for item in listing]

        results = await asyncio.gather(
            *(self.delete(item.arn, force=force) for item in listing),
            return_exceptions=True,
        )
        outcomes = []
        for item, result in zip(listing, results):
            if isinstance(result, Exception):
                logger.error("secret_delete_failed", name=item.name, error=str(result))
                outcomes.append(BulkOutcome(name=item.name, error=result))
            else:
                outcomes.append(BulkOutcome(name=item.name, result=result))
        return outcomes
