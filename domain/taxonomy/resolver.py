"""Resolve a component query to one document (or subsection) of the taxonomy graph."""

import logging

from domain.schemas import Ambiguous, Found, NotFound, RelatedRef, ResolutionQuery, ResolutionResult
from domain.taxonomy.graph import Component, TaxonomyGraph
from domain.taxonomy.normalizer import (
    AliasNormalizer,
    AliasTable,
    AmbiguousAlias,
    MatchingSettings,
    UnknownAlias,
)

logger = logging.getLogger(__name__)


class TopicResolver:
    """
    Stateless resolver over one (graph, alias table) snapshot.

    Safe to call from any number of threads: nothing is written after ``__init__``.
    """

    def __init__(
        self,
        graph: TaxonomyGraph,
        aliases: AliasTable,
        settings: MatchingSettings | None = None,
    ) -> None:
        self.graph = graph
        self.normalizer = AliasNormalizer(graph, aliases, settings)

    def _related(self, comp: Component) -> list[RelatedRef]:
        """Resolve declared related references one level deep (no transitive closure)."""
        refs: list[RelatedRef] = []
        seen: set[str] = set()
        for ref in comp.related:
            target = self.graph.resolve_reference(comp.topic, ref)
            if target is None:
                logger.debug("Skipping unresolved related reference %r on %s", ref, comp.key)
                continue
            if target.key in seen:
                continue
            seen.add(target.key)
            refs.append(
                RelatedRef(topic=target.topic, identifier=target.identifier, name=target.name, path=target.path)
            )
        return refs

    def resolve(self, query: ResolutionQuery) -> ResolutionResult:
        """
        Resolve a query.

        Returns:
            Found with path (and '#anchor' when the variant matched a declared
            subsection), Ambiguous with every candidate, or NotFound with the
            nearest suggestions.
        """
        outcome = self.normalizer.normalize(query.component, query.topic_hint)

        if isinstance(outcome, AmbiguousAlias):
            return Ambiguous(query=query.component, candidates=outcome.candidates)

        if isinstance(outcome, UnknownAlias):
            suggestions = self.normalizer.suggest(query.component)
            logger.debug("No match for %r; suggestions=%s", query.component, [s.name for s in suggestions])
            return NotFound(query=query.component, suggestions=suggestions)

        comp = self.graph.get_component(outcome.topic, outcome.identifier)
        if comp is None:
            # normalizer only returns identifiers present in the graph
            raise LookupError(f"Normalized to unknown component {outcome.topic}/{outcome.identifier}")

        anchor: str | None = None
        note: str | None = None
        if query.variant is not None and query.variant.strip():
            matched = self.normalizer.match_anchor(comp, query.variant)
            if matched is not None:
                anchor = f"#{matched}"
            else:
                note = (
                    f"Variant {query.variant.strip()!r} is not a distinct subsection of {comp.name}; "
                    "pointing at the document root."
                )

        return Found(
            topic=comp.topic,
            identifier=comp.identifier,
            name=comp.name,
            path=comp.path,
            anchor=anchor,
            confidence=outcome.confidence,
            note=note,
            related=self._related(comp),
        )

    def resolve_text(
        self,
        component: str,
        topic_hint: str | None = None,
        variant: str | None = None,
    ) -> ResolutionResult:
        return self.resolve(ResolutionQuery(component=component, topic_hint=topic_hint, variant=variant))
