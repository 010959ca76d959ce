"""Query-serving facade over a swappable taxonomy snapshot."""

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from domain.schemas import DocumentDescriptor, ResolutionQuery, ResolutionResult, Violation
from domain.taxonomy import (
    AliasTable,
    MatchingSettings,
    TaxonomyGraph,
    TopicResolver,
    build_taxonomy_graph,
    check_taxonomy,
)
from infrastructure.config.models import EngineConfig
from infrastructure.io import DocumentStore, load_graph_index, make_document_store, save_graph_index
from infrastructure.observability import clear_query_context, next_query_id, set_log_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Everything a query needs, built together and replaced together."""

    graph: TaxonomyGraph
    aliases: AliasTable
    resolver: TopicResolver
    documents: tuple[DocumentDescriptor, ...]


class TaxonomyService:
    """
    Serves resolve/check over the current graph snapshot.

    ``reload()`` builds a complete new snapshot before swapping a single
    reference, so readers never observe a partially built graph and never
    take a lock. A failed rebuild keeps the previous snapshot.
    """

    def __init__(
        self,
        store: DocumentStore | None,
        *,
        alias_overrides: Mapping[str, Mapping[str, str]] | None = None,
        settings: MatchingSettings | None = None,
    ) -> None:
        self._store = store
        self._alias_overrides = {k: dict(v) for k, v in (alias_overrides or {}).items()}
        self._settings = settings or MatchingSettings()
        self._snapshot: Snapshot | None = None
        self._rebuild_lock = threading.Lock()

    @classmethod
    def from_config(cls, cfg: EngineConfig) -> "TaxonomyService":
        return cls(make_document_store(cfg), alias_overrides=cfg.aliases, settings=cfg.matching)

    @classmethod
    def from_index(cls, path: Path, settings: MatchingSettings | None = None) -> "TaxonomyService":
        """Serve from a serialized graph index; ``reload()`` is unavailable."""
        graph, aliases = load_graph_index(path)
        service = cls(None, settings=settings)
        service._snapshot = service._make_snapshot(graph, aliases, tuple(graph.documents.values()))
        return service

    def _make_snapshot(
        self,
        graph: TaxonomyGraph,
        aliases: AliasTable,
        documents: tuple[DocumentDescriptor, ...],
    ) -> Snapshot:
        return Snapshot(
            graph=graph,
            aliases=aliases,
            resolver=TopicResolver(graph, aliases, self._settings),
            documents=documents,
        )

    def reload(self) -> TaxonomyGraph:
        """
        Rebuild the graph from the document store and swap it in.

        Raises:
            MalformedDocumentError / DuplicateIdentifierError: corpus must be fixed;
                the previous snapshot stays in place
            RuntimeError: If the service was created from an index (no store)
        """
        return self._rebuild().graph

    def _rebuild(self) -> Snapshot:
        if self._store is None:
            raise RuntimeError("TaxonomyService has no document store to reload from")

        with self._rebuild_lock:
            documents = tuple(self._store.iter_documents())
            graph = build_taxonomy_graph(documents)
            aliases = AliasTable.from_graph(graph, self._alias_overrides)
            snapshot = self._make_snapshot(graph, aliases, documents)
            self._snapshot = snapshot
        logger.info("Taxonomy snapshot swapped in: %s", graph.summary())
        return snapshot

    def _current(self) -> Snapshot:
        snapshot = self._snapshot
        if snapshot is None:
            snapshot = self._rebuild()
        return snapshot

    @property
    def graph(self) -> TaxonomyGraph:
        return self._current().graph

    @property
    def aliases(self) -> AliasTable:
        return self._current().aliases

    def resolve(
        self,
        component: str,
        topic_hint: str | None = None,
        variant: str | None = None,
    ) -> ResolutionResult:
        """Resolve a component reference against the current snapshot."""
        snapshot = self._current()
        set_log_context(query_id=next_query_id())
        try:
            result = snapshot.resolver.resolve(
                ResolutionQuery(component=component, topic_hint=topic_hint, variant=variant)
            )
            logger.info(
                "resolve(component=%r, topic=%r, variant=%r) -> %s",
                component,
                topic_hint,
                variant,
                result.status,
            )
            return result
        finally:
            clear_query_context()

    def check(self) -> list[Violation]:
        """
        Run the consistency checker.

        With a document store the corpus is re-read and built leniently so
        duplicate identifiers are reported instead of raised; an index-backed
        service checks its loaded snapshot.
        """
        if self._store is None:
            snapshot = self._current()
            return check_taxonomy(snapshot.graph, snapshot.aliases)

        documents = list(self._store.iter_documents())
        graph = build_taxonomy_graph(documents, strict=False)
        return check_taxonomy(graph, AliasTable.from_graph(graph, self._alias_overrides))

    def save_index(self, path: Path) -> Path:
        snapshot = self._current()
        return save_graph_index(snapshot.graph, snapshot.aliases, path)
