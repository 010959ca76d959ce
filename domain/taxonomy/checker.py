"""
Consistency checks over a taxonomy graph.

Read-only and advisory: every pass returns findings, none of them raises or
mutates the graph. All passes always run so a single call reports everything.
"""

import logging
from collections import Counter, deque

from domain.schemas import DocumentKind, Violation, ViolationKind
from domain.taxonomy.graph import TaxonomyGraph, split_link
from domain.taxonomy.normalizer import AliasTable

logger = logging.getLogger(__name__)


def _uniqueness_pass(graph: TaxonomyGraph) -> list[Violation]:
    declared: dict[tuple[str, str], list[str]] = {}
    for doc in graph.documents.values():
        if doc.kind is DocumentKind.INDEX or doc.identifier is None or doc.topic is None:
            continue
        declared.setdefault((doc.topic, doc.identifier), []).append(doc.path)

    found: list[Violation] = []
    for (topic, identifier), paths in declared.items():
        if len(paths) < 2:
            continue
        first, *rest = sorted(paths)
        for path in rest:
            found.append(
                Violation(
                    kind=ViolationKind.DUPLICATE_IDENTIFIER,
                    source=path,
                    target=first,
                    message=f"identifier {identifier!r} in topic {topic!r} is also declared by {first}",
                )
            )
    return found


def _link_integrity_pass(graph: TaxonomyGraph, aliases: AliasTable | None) -> list[Violation]:
    found: list[Violation] = []

    for doc in graph.documents.values():
        topic = doc.topic or ""
        for ref in doc.related:
            if graph.resolve_reference(topic, ref) is None:
                found.append(
                    Violation(
                        kind=ViolationKind.DANGLING_LINK,
                        source=doc.path,
                        target=ref,
                        message=f"related component {ref!r} does not exist",
                    )
                )

        for link in doc.links:
            path, anchor = split_link(link)
            path = path or doc.path
            target = graph.documents.get(path)
            if target is None:
                # index links to missing documents are reported by the coverage pass
                if doc.kind is not DocumentKind.INDEX:
                    found.append(
                        Violation(
                            kind=ViolationKind.DANGLING_LINK,
                            source=doc.path,
                            target=link,
                            message=f"linked document {path} does not exist",
                        )
                    )
                continue
            if anchor is not None and anchor not in target.anchors:
                found.append(
                    Violation(
                        kind=ViolationKind.DANGLING_LINK,
                        source=doc.path,
                        target=link,
                        message=f"anchor #{anchor} is not declared by {path}",
                    )
                )

    if aliases is not None:
        for topic, key, identifier in aliases.items():
            if graph.get_component(topic, identifier) is None:
                found.append(
                    Violation(
                        kind=ViolationKind.DANGLING_LINK,
                        source=f"aliases/{topic}/{key}",
                        target=identifier,
                        message=f"alias {key!r} points at unknown identifier {identifier!r} in topic {topic!r}",
                    )
                )
    return found


def _index_coverage_pass(graph: TaxonomyGraph) -> list[Violation]:
    found: list[Violation] = []
    reachable: set[str] = set()
    queue: deque[str] = deque()

    for doc in graph.documents.values():
        if doc.kind is not DocumentKind.INDEX:
            continue
        reachable.add(doc.path)
        queue.append(doc.path)
        for link in doc.links:
            path, _ = split_link(link)
            if path and path not in graph.documents:
                found.append(
                    Violation(
                        kind=ViolationKind.MISSING_DOCUMENT,
                        source=doc.path,
                        target=path,
                        message=f"index lists {path}, which has no document",
                    )
                )

    while queue:
        current = graph.documents[queue.popleft()]
        for link in current.links:
            path, _ = split_link(link)
            if path in graph.documents and path not in reachable:
                reachable.add(path)
                queue.append(path)

    for path, doc in graph.documents.items():
        if path not in reachable:
            found.append(
                Violation(
                    kind=ViolationKind.ORPHAN_DOCUMENT,
                    source=path,
                    message=f"not reachable from any topic index (topic {doc.topic!r})",
                )
            )
    return found


def _symmetry_pass(graph: TaxonomyGraph) -> list[Violation]:
    found: list[Violation] = []
    for comp in graph.iter_components():
        for ref in comp.related:
            target = graph.resolve_reference(comp.topic, ref)
            if target is None or target.key == comp.key:
                continue
            backs = [graph.resolve_reference(target.topic, r) for r in target.related]
            if comp.key not in {b.key for b in backs if b is not None}:
                found.append(
                    Violation(
                        kind=ViolationKind.ASYMMETRIC_LINK,
                        source=comp.path,
                        target=target.path,
                        message=f"{comp.key} relates to {target.key}, which does not relate back",
                    )
                )
    return found


def check_taxonomy(graph: TaxonomyGraph, aliases: AliasTable | None = None) -> list[Violation]:
    """
    Run every consistency pass and aggregate the findings.

    Args:
        graph: Graph to validate (build with ``strict=False`` to see duplicates)
        aliases: Optional alias table; dangling alias targets are reported too

    Returns:
        Deduplicated violations in a stable order (kind, source, target)
    """
    violations = [
        *_uniqueness_pass(graph),
        *_link_integrity_pass(graph, aliases),
        *_index_coverage_pass(graph),
        *_symmetry_pass(graph),
    ]
    unique = sorted(set(violations), key=lambda v: (v.kind.value, v.source, v.target))

    counts = Counter(v.kind.value for v in unique)
    logger.info("Consistency check finished: %d violation(s) %s", len(unique), dict(sorted(counts.items())))
    return unique
