"""
Bridge worker: runs one SecretsClient coroutine for a synchronous parent.

Reads a single request line from stdin, builds its own client from the
forwarded options, awaits the requested method and prints exactly one response
line. Operation failures travel in-band as an error envelope; the exit status is
0 whenever a response line was written.

Run by SubprocessSyncBridge as:
    python -m secret_tree.infrastructure.bridge.worker
"""

import asyncio
import sys
from typing import Callable, Optional, TextIO

import structlog
from pydantic import ValidationError

from secret_tree.application.services.secrets_client import SecretsClient
from secret_tree.domain.entities.store_options import StoreOptions
from secret_tree.domain.errors import error_to_payload
from secret_tree.domain.ports.secret_store_port import ISecretStore
from secret_tree.infrastructure.bridge.protocol import (
    BridgeRequest,
    encode_error,
    encode_result,
)
from secret_tree.infrastructure.logging.structlog_config import configure_logging
from secret_tree.infrastructure.secrets.secrets_manager_adapter import SecretsManagerAdapter

logger = structlog.get_logger(__name__)


def _default_store(options: StoreOptions) -> ISecretStore:
    return SecretsManagerAdapter(region=options.region)


def handle_request(
    line: str,
    store_factory: Callable[[StoreOptions], ISecretStore] = _default_store,
) -> str:
    """Turn one request line into one response line (without the newline)."""
    try:
        request = BridgeRequest.model_validate_json(line)
    except ValidationError as exc:
        logger.error("bridge_request_invalid", error=str(exc))
        return encode_error(
            {"type": "ValueError", "message": f"Invalid bridge request: {exc}", "code": "InvalidRequest"}
        )

    try:
        options = StoreOptions.from_dict(request.options)
        client = SecretsClient(store_factory(options), options)
        method = getattr(client, request.method)
        result = asyncio.run(method(**request.arguments))
    except Exception as exc:
        logger.info("bridge_call_failed", method=request.method, error=type(exc).__name__)
        return encode_error(error_to_payload(exc))

    return encode_result(result)


def main(
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    store_factory: Callable[[StoreOptions], ISecretStore] = _default_store,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    line = stdin.readline()
    stdout.write(handle_request(line, store_factory) + "\n")
    stdout.flush()
    return 0


if __name__ == "__main__":
    configure_logging()
    sys.exit(main())
