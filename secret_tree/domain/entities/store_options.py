"""
Domain entity: the immutable scope a SecretsClient operates in.

Defaults (region, environment) are resolved once in StoreOptions.create(); the
plain constructor and from_dict() take values verbatim so a bridge worker sees
exactly the scope its parent resolved.
"""

import os
from dataclasses import asdict, dataclass
from typing import Optional, Sequence, Union

DEFAULT_REGION = "us-east-1"
DEFAULT_DELIMITER = "/"
ENVIRONMENT_VARIABLE = "ENVIRONMENT"

# Output ceilings for the synchronous bridge.
DEFAULT_CONFIG_MAX_OUTPUT_BYTES = 3 * 1024 * 1024
DEFAULT_SECRET_MAX_OUTPUT_BYTES = 64 * 1024


@dataclass(frozen=True)
class StoreOptions:
    region: str = DEFAULT_REGION
    delimiter: str = DEFAULT_DELIMITER
    environment: Optional[str] = None
    namespace: Optional[str] = None
    max_output_bytes: Optional[int] = None

    @classmethod
    def create(
        cls,
        region: Optional[str] = None,
        delimiter: Optional[str] = None,
        environment: Optional[str] = None,
        namespace: Union[str, Sequence[str], None] = None,
        all: bool = False,
        max_output_bytes: Optional[int] = None,
    ) -> "StoreOptions":
        """Resolve caller knobs into a StoreOptions.

        Args:
            region:           AWS region. Falls back to AWS_DEFAULT_REGION.
            delimiter:        Segment separator in secret names (default '/').
            environment:      Deployment stage. Falls back to $ENVIRONMENT.
            namespace:        Top-level prefix; a list is joined by *delimiter*.
            all:              Ignore the environment and return every secret
                              under the namespace.
            max_output_bytes: Ceiling for synchronous bridge output.
        """
        delimiter = delimiter or DEFAULT_DELIMITER

        if all:
            environment = None
        else:
            environment = environment or os.environ.get(ENVIRONMENT_VARIABLE) or None

        if namespace is not None and not isinstance(namespace, str):
            namespace = delimiter.join(namespace)

        return cls(
            region=region or os.environ.get("AWS_DEFAULT_REGION", DEFAULT_REGION),
            delimiter=delimiter,
            environment=environment,
            namespace=namespace or None,
            max_output_bytes=max_output_bytes,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "StoreOptions":
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        return cls(**known)
