"""
Domain service: mapping between delimited secret names and config tree paths.

Pure functions, no I/O. Used by the use cases to qualify names on create,
strip the namespace/env prefix on read, and fold flat name/value pairs into a
nested config tree (and back again for bulk creation).
"""

import json
from typing import Any, Iterable, Optional, Sequence, Union

from secret_tree.domain.entities.secret import (
    ConfigTree,
    ConfigValue,
    FlatEntry,
    SecretIdentity,
)


def encode(
    env: Optional[str],
    namespace: Optional[str],
    delimiter: str,
    segments: Union[str, Sequence[str]],
) -> str:
    """Build the full secret name ``namespace/env/a/b``.

    Absent or empty namespace and env components are omitted.
    """
    if isinstance(segments, str):
        segments = [segments]
    identity = SecretIdentity(tuple(segments), namespace=namespace, environment=env)
    return identity.full_name(delimiter)


def decode(
    full_name: str,
    env: Optional[str],
    namespace: Optional[str],
    delimiter: str,
) -> list[str]:
    """Strip the namespace and env prefix from *full_name* and split the rest.

    The strip is a literal replacement of the first occurrence of
    ``namespace + delimiter`` and then ``env + delimiter``, wherever it sits in
    the name. A namespace or env that recurs deeper in the path is therefore
    stripped from the wrong place.
    """
    name = full_name
    if namespace:
        name = name.replace(f"{namespace}{delimiter}", "", 1)
    if env:
        name = name.replace(f"{env}{delimiter}", "", 1)
    if name.startswith(delimiter):
        name = name[len(delimiter):]
    return name.split(delimiter)


def _is_mapping(value: Any) -> bool:
    return isinstance(value, dict)


def flatten(tree: ConfigTree, delimiter: str = "/") -> list[FlatEntry]:
    """Flatten a nested tree into delimited ``FlatEntry(key, value)`` pairs.

    A mapping is only descended into when at least one of its values is itself a
    mapping. Mappings of plain values are leaves, so a secret can hold a whole
    JSON object such as ``{"username": ..., "password": ...}``.
    """
    entries: list[FlatEntry] = []

    def walk(node: ConfigTree, prefix: Optional[str]) -> None:
        for key, value in node.items():
            path = f"{prefix}{delimiter}{key}" if prefix else str(key)
            if _is_mapping(value) and any(_is_mapping(child) for child in value.values()):
                walk(value, path)
            else:
                entries.append(FlatEntry(key=path, value=value))

    walk(tree, None)
    return entries


def unflatten(
    pairs: Iterable[Union[FlatEntry, tuple[str, Any]]],
    delimiter: str = "/",
) -> ConfigTree:
    """Fold flat ``(key, value)`` pairs into a nested tree.

    Later pairs overwrite earlier ones at the same path. A leaf found where an
    intermediate node is needed is replaced by a new mapping.
    """
    tree: ConfigTree = {}
    for pair in pairs:
        key, value = (pair.key, pair.value) if isinstance(pair, FlatEntry) else pair
        parts = key.split(delimiter) if isinstance(key, str) else list(key)
        *parents, leaf = parts
        node = tree
        for part in parents:
            child = node.get(part)
            if not _is_mapping(child):
                child = node[part] = {}
            node = child
        node[leaf] = value
    return tree


def parse_value(raw: Optional[str]) -> ConfigValue:
    """Parse a secret string as JSON, keeping the literal string when it isn't."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def serialize_value(value: Any) -> str:
    """Strings are stored verbatim; everything else as JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value)
