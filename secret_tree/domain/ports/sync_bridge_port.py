"""
Port (interface) for running an async SecretsClient method from synchronous code.
Infrastructure adapters (e.g. SubprocessSyncBridge) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class ISyncBridge(ABC):
    @abstractmethod
    def call(
        self,
        method: str,
        options: dict,
        arguments: Optional[dict] = None,
        max_output_bytes: Optional[int] = None,
    ) -> Any:
        """Run *method* with *arguments* on a client built from *options* and block
        until its JSON-serializable result is available.

        Raises:
            BridgeOutputTooLarge: the result exceeded *max_output_bytes*.
            MalformedBridgeResponse: the result could not be decoded.
            SecretTreeError (or subclass): the method itself failed.
        """
        ...
