"""
Use-case: build the nested config tree from every in-scope secret.
Depends only on Domain ports and entities; no infrastructure imports.

Flow: list → fetch all values concurrently → strip prefix → parse → unflatten.
Nothing is cached; every call reads the store again.
"""

import asyncio
import base64

import structlog

from secret_tree.application.use_cases.get_secret import GetSecretUseCase
from secret_tree.application.use_cases.list_secrets import ListSecretsUseCase
from secret_tree.domain.entities.secret import ConfigTree, ConfigValue, SecretRecord
from secret_tree.domain.entities.store_options import StoreOptions
from secret_tree.domain.services.key_codec import decode, parse_value, unflatten

logger = structlog.get_logger(__name__)


class AssembleConfigUseCase:
    def __init__(
        self,
        lister: ListSecretsUseCase,
        getter: GetSecretUseCase,
        options: StoreOptions,
    ) -> None:
        self._lister = lister
        self._getter = getter
        self._options = options

    async def execute(self) -> ConfigTree:
        """Return the config tree for the client's scope.

        Raises:
            The first error from listing or from any single fetch. A partial tree
            is never returned.
        """
        listing = await self._lister.execute()
        if not listing:
            return {}

        records = await asyncio.gather(
            *(self._getter.fetch_record(item.name) for item in listing)
        )

        pairs = [(self._path_for(record), self._value_for(record)) for record in records]
        logger.info(
            "config_assembled",
            secrets=len(pairs),
            namespace=self._options.namespace,
            environment=self._options.environment,
        )
        return unflatten(pairs, self._options.delimiter)

    def _path_for(self, record: SecretRecord) -> list[str]:
        return decode(
            record.name,
            self._options.environment,
            self._options.namespace,
            self._options.delimiter,
        )

    @staticmethod
    def _value_for(record: SecretRecord) -> ConfigValue:
        if record.raw_value is None and record.binary_value is not None:
            return base64.b64encode(record.binary_value).decode("ascii")
        return parse_value(record.raw_value)
