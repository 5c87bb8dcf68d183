"""
Domain errors raised by secret-tree.

Every error can be flattened into a JSON-safe payload (to_payload) and rebuilt on
the other side of the synchronous bridge (error_from_payload), so sync callers
see the same exception classes as async callers.
"""

from typing import Any, Optional


class SecretTreeError(Exception):
    """Base class for all secret-tree errors."""

    default_code = "SecretTreeError"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_payload(self) -> dict[str, Any]:
        return {"type": type(self).__name__, "message": self.message, "code": self.code}

    @classmethod
    def _from_payload(cls, payload: dict[str, Any]) -> "SecretTreeError":
        return cls(payload.get("message") or payload.get("code") or "", payload.get("code"))


class SecretStoreError(SecretTreeError):
    """The backing store rejected a call (not found, access denied, validation...)."""

    default_code = "SecretStoreError"


class RateLimited(SecretStoreError):
    """A single store call was throttled. Retried by RetryPolicy."""

    default_code = "ThrottlingException"


class RateLimitExceeded(SecretStoreError):
    """A store call was still throttled after every allowed attempt."""

    default_code = "RateLimitExceeded"

    def __init__(self, message: str, code: Optional[str] = None, attempts: int = 0) -> None:
        super().__init__(message, code)
        self.attempts = attempts

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["attempts"] = self.attempts
        return payload

    @classmethod
    def _from_payload(cls, payload: dict[str, Any]) -> "RateLimitExceeded":
        return cls(
            payload.get("message") or "Rate limit exceeded",
            payload.get("code"),
            attempts=int(payload.get("attempts") or 0),
        )


class BridgeError(SecretTreeError):
    """The synchronous bridge could not deliver a result."""

    default_code = "BridgeError"


class BridgeOutputTooLarge(BridgeError):
    """The worker wrote more than the configured byte ceiling."""

    default_code = "BridgeOutputTooLarge"

    def __init__(self, message: str, code: Optional[str] = None, limit: int = 0) -> None:
        super().__init__(message, code)
        self.limit = limit

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["limit"] = self.limit
        return payload

    @classmethod
    def _from_payload(cls, payload: dict[str, Any]) -> "BridgeOutputTooLarge":
        return cls(payload.get("message") or "", payload.get("code"), limit=int(payload.get("limit") or 0))


class MalformedBridgeResponse(BridgeError):
    """The worker's output was not a valid response envelope."""

    default_code = "MalformedBridgeResponse"


_ERROR_TYPES: dict[str, type[SecretTreeError]] = {
    cls.__name__: cls
    for cls in (
        SecretTreeError,
        SecretStoreError,
        RateLimited,
        RateLimitExceeded,
        BridgeError,
        BridgeOutputTooLarge,
        MalformedBridgeResponse,
    )
}


def error_to_payload(exc: BaseException) -> dict[str, Any]:
    """Describe any exception as a bridge error payload."""
    if isinstance(exc, SecretTreeError):
        return exc.to_payload()
    return {"type": type(exc).__name__, "message": str(exc), "code": type(exc).__name__}


def error_from_payload(payload: dict[str, Any]) -> SecretTreeError:
    """Rebuild the exception described by *payload*.

    Unknown types (e.g. a ValueError raised inside the worker) come back as a
    plain SecretTreeError that keeps the original message and code.
    """
    cls = _ERROR_TYPES.get(payload.get("type") or "", SecretTreeError)
    return cls._from_payload(payload)
