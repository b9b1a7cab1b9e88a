"""Loads the ``metric_id -> query`` mapping from a YAML file.

The file is read once at startup. Any problem with it is a ConfigError,
which the CLI treats as fatal.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import yaml

from ..common.errors import ConfigError

logger = logging.getLogger(__name__)

MetricQuerySpec = Mapping[str, str]


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects duplicate mapping keys instead of keeping the last one."""

    def construct_mapping(self, node, deep=False):
        if not isinstance(node, yaml.MappingNode):
            return super().construct_mapping(node, deep=deep)
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def parse_query_config(content: str, source: str = "<string>") -> MetricQuerySpec:
    """Parse YAML text into an immutable MetricQuerySpec."""
    try:
        data = yaml.load(content, Loader=_UniqueKeyLoader)
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config file {source}: {e}") from e

    if not data:
        raise ConfigError(f"no queries configured in {source}")
    if not isinstance(data, dict):
        raise ConfigError(
            f"config file {source} must be a mapping of metric id to query, "
            f"got {type(data).__name__}"
        )

    queries: dict[str, str] = {}
    for metric_id, query in data.items():
        if not isinstance(metric_id, str) or not metric_id.strip():
            raise ConfigError(f"invalid metric id {metric_id!r} in {source}")
        if not isinstance(query, str) or not query.strip():
            raise ConfigError(f"metric {metric_id!r} in {source} has no query")
        queries[metric_id] = query

    return MappingProxyType(queries)


def load_query_config(path: Path) -> MetricQuerySpec:
    """Read and parse the query config file.

    Raises:
        ConfigError: unreadable file, malformed YAML, duplicate metric ids,
            or a document that is not a non-empty string mapping.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config file: {e}") from e

    queries = parse_query_config(content, source=str(path))
    logger.info("Loaded query config path=%s metrics=%d", path, len(queries))
    return queries
