"""Serialized graph index for fast cold start."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from domain.taxonomy.graph import TaxonomyGraph
from domain.taxonomy.normalizer import AliasTable
from infrastructure.constants import INDEX_FORMAT_VERSION
from infrastructure.io.fs import ensure_exists, write_text_atomic

logger = logging.getLogger(__name__)


class GraphIndex(BaseModel):
    """On-disk snapshot of a built graph and its alias table."""

    format_version: int = INDEX_FORMAT_VERSION
    built_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat(timespec="seconds"))
    graph: TaxonomyGraph
    aliases: AliasTable = Field(default_factory=AliasTable)


def save_graph_index(graph: TaxonomyGraph, aliases: AliasTable, path: Path) -> Path:
    """Write the graph + alias table as JSON (atomic replace)."""
    index = GraphIndex(graph=graph, aliases=aliases)
    write_text_atomic(path, index.model_dump_json(indent=2))
    logger.info("Saved graph index to %s (%s)", path, graph.summary())
    return path


def load_graph_index(path: Path) -> tuple[TaxonomyGraph, AliasTable]:
    """
    Load a graph index written by ``save_graph_index``.

    Raises:
        FileNotFoundError: If the index file does not exist
        ValueError: If the file is not a valid index or has another format version
    """
    ensure_exists(path, "graph index")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as err:
        raise ValueError(f"Graph index {path} is not valid JSON: {err}") from err

    version = raw.get("format_version") if isinstance(raw, dict) else None
    if version != INDEX_FORMAT_VERSION:
        raise ValueError(f"Graph index {path} has format_version={version!r}; expected {INDEX_FORMAT_VERSION}")

    try:
        index = GraphIndex.model_validate(raw)
    except ValidationError as err:
        raise ValueError(f"Graph index {path} is invalid: {err}") from err

    logger.info("Loaded graph index from %s (built_at=%s, %s)", path, index.built_at, index.graph.summary())
    return index.graph, index.aliases
