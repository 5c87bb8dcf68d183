"""
Composition Root for library callers.

Wires the Secrets Manager adapter and the subprocess bridge into a
SecretsClient. The module-level helpers mirror the client methods for one-off
calls:

    tree = await config(environment="production", namespace="billing")
    tree = config_sync(environment="production", namespace="billing")
    password = secret_sync(id="billing/production/db/password", parse=True)
"""

from typing import Any, Optional, Sequence, Union

from secret_tree.application.services.secrets_client import SecretsClient
from secret_tree.domain.entities.secret import ConfigTree
from secret_tree.domain.entities.store_options import StoreOptions
from secret_tree.infrastructure.bridge.subprocess_bridge import SubprocessSyncBridge
from secret_tree.infrastructure.secrets.secrets_manager_adapter import SecretsManagerAdapter


def build_client(
    region: Optional[str] = None,
    delimiter: Optional[str] = None,
    environment: Optional[str] = None,
    namespace: Union[str, Sequence[str], None] = None,
    all: bool = False,
    max_output_bytes: Optional[int] = None,
) -> SecretsClient:
    """Build a SecretsClient backed by AWS Secrets Manager.

    Args mirror StoreOptions.create().
    """
    options = StoreOptions.create(
        region=region,
        delimiter=delimiter,
        environment=environment,
        namespace=namespace,
        all=all,
        max_output_bytes=max_output_bytes,
    )
    return SecretsClient(
        store=SecretsManagerAdapter(region=options.region),
        options=options,
        bridge=SubprocessSyncBridge(),
    )


async def config(**options: Any) -> ConfigTree:
    return await build_client(**options).config()


def config_sync(**options: Any) -> ConfigTree:
    return build_client(**options).config_sync()


def secret_sync(
    id: str,
    region: Optional[str] = None,
    version: Optional[str] = None,
    stage: Optional[str] = None,
    raw: bool = False,
    parse: bool = False,
    max_output_bytes: Optional[int] = None,
) -> Any:
    """Blocking fetch of one secret by full name or ARN (no namespace scoping)."""
    client = build_client(region=region, all=True)
    return client.get_secret_sync(
        id,
        version=version,
        stage=stage,
        raw=raw,
        parse=parse,
        max_output_bytes=max_output_bytes,
    )
