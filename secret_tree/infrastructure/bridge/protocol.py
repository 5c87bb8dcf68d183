"""
Wire format of the synchronous bridge: one JSON line each way.

    request:  {"method": "config", "options": {...}, "arguments": {...}}
    response: {"config": <result>}  or  {"error": {"type", "message", "code", ...}}

Pydantic validates both envelopes so a garbled line fails loudly instead of
being half-read.
"""

import dataclasses
import json
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from secret_tree.domain.entities.secret import SecretRecord
from secret_tree.domain.errors import MalformedBridgeResponse


class BridgeRequest(BaseModel):
    method: Literal["config", "get_secret"] = "config"
    options: dict[str, Any] = {}
    arguments: dict[str, Any] = {}


class BridgeErrorPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: str = ""
    code: Optional[str] = None
    type: Optional[str] = None


class BridgeResponse(BaseModel):
    config: Any = None
    error: Optional[BridgeErrorPayload] = None

    @model_validator(mode="before")
    @classmethod
    def _require_envelope(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not ({"config", "error"} & data.keys()):
            raise ValueError("response must carry a 'config' or 'error' key")
        return data


def to_jsonable(value: Any) -> Any:
    """Convert operation results (records, dataclasses, dates) to JSON values."""
    if isinstance(value, SecretRecord):
        return value.to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(dataclasses.asdict(value))
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def encode_request(request: BridgeRequest) -> bytes:
    return (request.model_dump_json() + "\n").encode("utf-8")


def encode_result(result: Any) -> str:
    return json.dumps({"config": to_jsonable(result)})


def encode_error(payload: dict[str, Any]) -> str:
    return json.dumps({"error": payload})


def decode_response(output: bytes) -> BridgeResponse:
    """Parse the worker's single output line.

    Raises:
        MalformedBridgeResponse: empty output, invalid JSON, or no envelope.
    """
    text = output.decode("utf-8", errors="replace").strip()
    if not text:
        raise MalformedBridgeResponse("Bridge worker produced no output")
    line = text.splitlines()[-1]
    try:
        return BridgeResponse.model_validate_json(line)
    except ValidationError as exc:
        raise MalformedBridgeResponse(
            f"Bridge worker produced an invalid response: {line[:200]!r}"
        ) from exc
