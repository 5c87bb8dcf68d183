"""
Domain entities for secrets as seen by the config assembler.
Zero external dependencies: pure Python dataclasses only.
"""

import base64
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Union

# A JSON value. Secret payloads are parsed into this closed set.
ConfigValue = Union[str, int, float, bool, None, list, dict]
ConfigTree = dict[str, Any]


@dataclass(frozen=True)
class SecretIdentity:
    path_segments: tuple[str, ...]
    namespace: Optional[str] = None
    environment: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.path_segments:
            raise ValueError("path_segments must not be empty")

    def full_name(self, delimiter: str = "/") -> str:
        """Join as ``namespace/env/path``, omitting an absent namespace or env."""
        prefix = [part for part in (self.namespace, self.environment) if part]
        return delimiter.join([*prefix, *self.path_segments])


@dataclass(frozen=True)
class SecretListItem:
    name: str
    arn: str
    description: Optional[str] = None
    created_date: Optional[datetime] = None


@dataclass(frozen=True)
class SecretRecord:
    name: str
    arn: str
    version_id: str
    raw_value: Optional[str]
    created_date: Optional[datetime]
    binary_value: Optional[bytes] = None
    version_stages: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """JSON-safe form: ISO dates, base64 binary."""
        return {
            "name": self.name,
            "arn": self.arn,
            "version_id": self.version_id,
            "raw_value": self.raw_value,
            "created_date": self.created_date.isoformat() if self.created_date else None,
            "binary_value": (
                base64.b64encode(self.binary_value).decode("ascii")
                if self.binary_value is not None
                else None
            ),
            "version_stages": list(self.version_stages),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SecretRecord":
        created = data.get("created_date")
        binary = data.get("binary_value")
        return cls(
            name=data["name"],
            arn=data["arn"],
            version_id=data["version_id"],
            raw_value=data.get("raw_value"),
            created_date=datetime.fromisoformat(created) if created else None,
            binary_value=base64.b64decode(binary) if binary is not None else None,
            version_stages=tuple(data.get("version_stages") or ()),
        )


@dataclass(frozen=True)
class CreatedSecret:
    name: str
    arn: str
    version_id: Optional[str]


@dataclass(frozen=True)
class DeletedSecret:
    name: str
    arn: str
    deletion_date: Optional[datetime]


@dataclass(frozen=True)
class SecretPage:
    """One page of a paginated listing."""

    items: list[SecretListItem]
    next_token: Optional[str] = None


@dataclass(frozen=True)
class FlatEntry:
    key: str
    value: Any


@dataclass(frozen=True)
class BulkOutcome:
    """Settled result of one item in a bulk create or delete."""

    name: str
    result: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None
