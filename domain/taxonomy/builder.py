"""Build an immutable TaxonomyGraph from document descriptors."""

import logging
from collections.abc import Iterable

from domain.schemas import DocumentDescriptor, DocumentKind
from domain.taxonomy.errors import DuplicateIdentifierError, MalformedDocumentError
from domain.taxonomy.graph import Component, Group, TaxonomyGraph, Topic, split_link

logger = logging.getLogger(__name__)


def _resolve_topic_groups(documents: list[DocumentDescriptor]) -> dict[str, str]:
    """
    Determine the owning group of every topic.

    A topic's group may be declared on any of its documents (usually the
    index); undeclared documents inherit it. Conflicting declarations and
    topics with no group at all are malformed.
    """
    groups: dict[str, str] = {}
    first_path: dict[str, str] = {}
    for doc in documents:
        topic = doc.topic
        if topic is None:
            raise MalformedDocumentError(doc.path, "document does not belong to a topic")
        first_path.setdefault(topic, doc.path)
        if doc.group is None:
            continue
        existing = groups.get(topic)
        if existing is not None and existing != doc.group:
            raise MalformedDocumentError(
                doc.path, f"topic {topic!r} is declared under groups {existing!r} and {doc.group!r}"
            )
        groups[topic] = doc.group

    for topic, path in first_path.items():
        if topic not in groups:
            raise MalformedDocumentError(path, f"topic {topic!r} has no group")
    return groups


def _index_order(index: DocumentDescriptor | None) -> dict[str, int]:
    """Map linked document paths to their position in the topic index."""
    if index is None:
        return {}
    order: dict[str, int] = {}
    for pos, link in enumerate(index.links):
        path, _ = split_link(link)
        if path:
            order.setdefault(path, pos)
    return order


def build_taxonomy_graph(documents: Iterable[DocumentDescriptor], *, strict: bool = True) -> TaxonomyGraph:
    """
    Build the taxonomy graph in a single pass over the descriptors.

    This is a pure function - it does NOT perform file I/O and never exposes a
    partially built graph: on error nothing is returned.

    Args:
        documents: Descriptors enumerated by a document store
        strict: If False, duplicate identifiers within a topic do not raise; the
            first declaration is registered and every descriptor stays in
            ``graph.documents`` so the consistency checker can report them.

    Returns:
        Frozen TaxonomyGraph

    Raises:
        MalformedDocumentError: If a rule document lacks an identifier, a topic lacks
            a group, or paths/indexes collide
        DuplicateIdentifierError: If two documents in one topic share an identifier (strict only)
    """
    docs = list(documents)

    by_path: dict[str, DocumentDescriptor] = {}
    for doc in docs:
        if doc.path in by_path:
            raise MalformedDocumentError(doc.path, "path is declared by more than one document")
        by_path[doc.path] = doc

    topic_groups = _resolve_topic_groups(docs)

    indexes: dict[str, DocumentDescriptor] = {}
    for doc in docs:
        if doc.kind is not DocumentKind.INDEX:
            continue
        topic = str(doc.topic)
        if topic in indexes:
            raise MalformedDocumentError(
                doc.path, f"topic {topic!r} already has an index document: {indexes[topic].path}"
            )
        indexes[topic] = doc

    components: dict[str, dict[str, Component]] = {t: {} for t in topic_groups}
    guides: dict[str, list[str]] = {t: [] for t in topic_groups}

    for doc in sorted(docs, key=lambda d: d.path):
        topic = str(doc.topic)
        if doc.kind is DocumentKind.INDEX:
            continue
        if doc.kind is DocumentKind.GUIDE:
            guides[topic].append(doc.path)
        if doc.identifier is None:
            if doc.kind is DocumentKind.RULE:
                raise MalformedDocumentError(doc.path, "component document has no canonical identifier")
            continue

        existing = components[topic].get(doc.identifier)
        if existing is not None:
            if strict:
                raise DuplicateIdentifierError(topic, doc.identifier, [existing.path, doc.path])
            logger.warning(
                "Duplicate identifier %r in topic %s (%s, %s); keeping the first",
                doc.identifier,
                topic,
                existing.path,
                doc.path,
            )
            continue

        components[topic][doc.identifier] = Component(
            topic=topic,
            identifier=doc.identifier,
            name=doc.display_name or doc.identifier,
            path=doc.path,
            kind=doc.kind,
            anchors=doc.anchors,
            aliases=doc.aliases,
            related=doc.related,
        )

    topics: dict[str, Topic] = {}
    groups: dict[str, list[str]] = {}
    for topic, group in topic_groups.items():
        order = _index_order(indexes.get(topic))
        ordered = sorted(
            components[topic].values(),
            key=lambda c: (order.get(c.path, len(order)), c.path),
        )
        components[topic] = {c.identifier: c for c in ordered}
        index = indexes.get(topic)
        topics[topic] = Topic(
            name=topic,
            group=group,
            index_path=index.path if index is not None else None,
            components=tuple(c.identifier for c in ordered),
            guides=tuple(guides[topic]),
        )
        groups.setdefault(group, []).append(topic)

    graph = TaxonomyGraph(
        groups={name: Group(name=name, topics=tuple(names)) for name, names in groups.items()},
        topics=topics,
        components=components,
        documents=by_path,
    )
    logger.info("Taxonomy graph built: %s", graph.summary())
    return graph
