"""
Use-case: list every secret in the client's namespace/environment scope.
Depends only on Domain ports and entities; no infrastructure imports.
"""

import re
from typing import Optional

import structlog

from secret_tree.application.services.retry_policy import RetryPolicy
from secret_tree.domain.entities.secret import SecretListItem
from secret_tree.domain.entities.store_options import StoreOptions
from secret_tree.domain.ports.secret_store_port import ISecretStore

logger = structlog.get_logger(__name__)


def build_scope_pattern(options: StoreOptions) -> Optional[re.Pattern]:
    """Regex matching names that start with ``[delim]namespace/env/``.

    Returns None when neither namespace nor environment is set, meaning every
    secret is in scope.
    """
    if not options.namespace and not options.environment:
        return None
    delimiter = re.escape(options.delimiter)
    pattern = f"^{delimiter}?"
    if options.namespace:
        pattern += f"{re.escape(options.namespace)}{delimiter}"
    if options.environment:
        pattern += f"{re.escape(options.environment)}{delimiter}"
    return re.compile(pattern)


class ListSecretsUseCase:
    def __init__(self, store: ISecretStore, options: StoreOptions, retry: RetryPolicy) -> None:
        self._store = store
        self._options = options
        self._retry = retry

    async def execute(self) -> list[SecretListItem]:
        """Page through the whole listing, then keep the in-scope names.

        Pages are fetched one at a time since each continuation token comes from
        the previous response. Relative order of the listing is preserved.
        """
        secrets: list[SecretListItem] = []
        next_token: Optional[str] = None
        pages = 0

        while True:
            token = next_token
            page = await self._retry.run(
                lambda: self._store.list_secrets_page(token),
                description="list_secrets",
            )
            pages += 1
            secrets.extend(page.items)
            next_token = page.next_token
            if not next_token:
                break

        pattern = build_scope_pattern(self._options)
        if pattern is not None:
            secrets = [item for item in secrets if pattern.match(item.name)]

        logger.debug(
            "secrets_listed",
            pages=pages,
            matched=len(secrets),
            namespace=self._options.namespace,
            environment=self._options.environment,
        )
        return secrets
