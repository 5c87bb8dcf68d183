"""
Infrastructure adapter: child Python process → ISyncBridge.

The calling thread writes one request line to a fresh worker process, then
blocks until the worker exits, reading at most max_output_bytes of its stdout.
There is no timeout: a worker that hangs hangs the caller.

The worker's stderr is inherited, so its logs land in the caller's stderr.
"""

import subprocess
import sys
from typing import Any, Optional, Sequence

import structlog

from secret_tree.domain.entities.store_options import DEFAULT_CONFIG_MAX_OUTPUT_BYTES
from secret_tree.domain.errors import BridgeOutputTooLarge, error_from_payload
from secret_tree.domain.ports.sync_bridge_port import ISyncBridge
from secret_tree.infrastructure.bridge.protocol import (
    BridgeRequest,
    decode_response,
    encode_request,
)

logger = structlog.get_logger(__name__)

WORKER_MODULE = "secret_tree.infrastructure.bridge.worker"
READ_CHUNK_BYTES = 64 * 1024


class SubprocessSyncBridge(ISyncBridge):
    """Runs SecretsClient coroutines in `python -m secret_tree...worker`."""

    def __init__(self, command: Optional[Sequence[str]] = None) -> None:
        """
        Args:
            command: argv used to start the worker. Defaults to the current
                     interpreter running the bundled worker module.
        """
        self._command = list(command) if command else [sys.executable, "-m", WORKER_MODULE]

    def call(
        self,
        method: str,
        options: dict,
        arguments: Optional[dict] = None,
        max_output_bytes: Optional[int] = None,
    ) -> Any:
        limit = max_output_bytes or DEFAULT_CONFIG_MAX_OUTPUT_BYTES
        request = encode_request(
            BridgeRequest(method=method, options=options, arguments=arguments or {})
        )
        output = self._run(request, limit, method)

        response = decode_response(output)
        if response.error is not None:
            raise error_from_payload(response.error.model_dump())
        return response.config

    def _run(self, request: bytes, limit: int, method: str) -> bytes:
        with subprocess.Popen(
            self._command,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            bufsize=0,
        ) as proc:
            try:
                proc.stdin.write(request)
            except BrokenPipeError:
                # Worker exited before reading; its output still decides the result.
                logger.debug("bridge_stdin_closed_early", method=method)
            finally:
                proc.stdin.close()

            chunks: list[bytes] = []
            size = 0
            while True:
                chunk = proc.stdout.read(READ_CHUNK_BYTES)
                if not chunk:
                    break
                size += len(chunk)
                if size > limit:
                    proc.kill()
                    logger.warning("bridge_output_exceeded", method=method, limit=limit)
                    raise BridgeOutputTooLarge(
                        f"Bridge output for '{method}' exceeded {limit} bytes",
                        limit=limit,
                    )
                chunks.append(chunk)

            returncode = proc.wait()

        if returncode:
            logger.warning("bridge_worker_failed", method=method, returncode=returncode)
        return b"".join(chunks)
