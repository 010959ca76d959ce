"""Alias normalization: map informal component names to canonical identifiers."""

import logging
import re
from collections.abc import Iterator, Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from rapidfuzz.distance import Levenshtein

from domain.schemas import Candidate
from domain.taxonomy.graph import Component, TaxonomyGraph

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\W_]+")


def normalize_key(raw: object) -> str:
    """
    Normalize a name, identifier, alias or anchor into a comparison key.

    Examples:
        >>> normalize_key("  Icon   Button ")
        'icon button'
        >>> normalize_key("#number-input")
        'number input'
        >>> normalize_key("Number Input (subsection)")
        'number input subsection'
    """
    if raw is None:
        return ""
    return _SEPARATORS.sub(" ", str(raw).casefold()).strip()


class MatchingSettings(BaseModel):
    """Bounds for fuzzy matching and suggestions."""

    max_edit_distance: int = Field(default=2, ge=0, le=2)
    short_query_length: int = Field(default=5, ge=0)
    short_query_max_edit_distance: int = Field(default=1, ge=0)
    suggestion_limit: int = Field(default=3, ge=0)
    suggestion_max_distance: int = Field(default=3, ge=0)

    def edit_budget(self, query_key: str) -> int:
        if len(query_key) <= self.short_query_length:
            return min(self.short_query_max_edit_distance, self.max_edit_distance)
        return self.max_edit_distance


def is_fuzzy_match(query_key: str, target_key: str, settings: MatchingSettings) -> bool:
    """Edit distance within budget, or every query token appears in the target."""
    budget = settings.edit_budget(query_key)
    if Levenshtein.distance(query_key, target_key, score_cutoff=budget) <= budget:
        return True
    query_tokens = set(query_key.split())
    return bool(query_tokens) and query_tokens <= set(target_key.split())


def suggestion_distance(query_key: str, target_key: str) -> tuple[int, int]:
    """
    Rank a target for suggestions.

    Returns ``(best, whole)`` where ``whole`` is the edit distance to the full
    target and ``best`` also considers every window of target tokens the same
    length as the query (so "raido" is 2 away from "radio group").
    """
    whole = Levenshtein.distance(query_key, target_key)
    best = whole
    width = len(query_key.split())
    tokens = target_key.split()
    for start in range(len(tokens) - width + 1):
        best = min(best, Levenshtein.distance(query_key, " ".join(tokens[start : start + width])))
    return best, whole


class AliasTable(BaseModel):
    """
    Per-topic alias table: normalized alias -> canonical identifier.

    Passed explicitly to the normalizer so several corpora can coexist in one process.
    """

    model_config = ConfigDict(frozen=True)

    entries: dict[str, dict[str, str]] = Field(default_factory=dict)  # topic -> alias key -> identifier

    @classmethod
    def from_graph(
        cls,
        graph: TaxonomyGraph,
        overrides: Mapping[str, Mapping[str, str]] | None = None,
    ) -> "AliasTable":
        """
        Collect aliases declared by documents, then apply configured overrides.

        A redefined alias overwrites the previous target (never merges).
        """
        entries: dict[str, dict[str, str]] = {}

        def _define(topic: str, alias: str, identifier: str, origin: str) -> None:
            key = normalize_key(alias)
            if not key:
                return
            table = entries.setdefault(topic, {})
            previous = table.get(key)
            if previous is not None and previous != identifier:
                logger.warning(
                    "Alias %r in topic %s redefined by %s: %s -> %s", key, topic, origin, previous, identifier
                )
            table[key] = identifier

        for comp in graph.iter_components():
            for alias in comp.aliases:
                _define(comp.topic, alias, comp.identifier, comp.path)

        for topic_name, mapping in (overrides or {}).items():
            topic = graph.find_topic(topic_name)
            name = topic.name if topic is not None else str(topic_name)
            if topic is None:
                logger.warning("Alias overrides reference unknown topic %r", topic_name)
            for alias, identifier in mapping.items():
                _define(name, alias, str(identifier).strip(), "alias config")

        return cls(entries=entries)

    def lookup(self, topic: str, key: str) -> str | None:
        return self.entries.get(topic, {}).get(key)

    def topics(self) -> list[str]:
        return list(self.entries)

    def items(self) -> Iterator[tuple[str, str, str]]:
        """Yield ``(topic, alias_key, identifier)`` triples."""
        for topic, table in self.entries.items():
            for key, identifier in table.items():
                yield topic, key, identifier


class CanonicalIdentifier(BaseModel):
    status: Literal["canonical"] = "canonical"
    topic: str
    identifier: str
    confidence: Literal["exact", "fuzzy"] = "exact"


class AmbiguousAlias(BaseModel):
    status: Literal["ambiguous"] = "ambiguous"
    raw: str
    candidates: list[Candidate] = Field(default_factory=list)


class UnknownAlias(BaseModel):
    status: Literal["unknown"] = "unknown"
    raw: str


NormalizationResult = CanonicalIdentifier | AmbiguousAlias | UnknownAlias


class AliasNormalizer:
    """
    Deterministic name -> identifier normalization over one graph snapshot.

    Matching order (first match wins):
    1. identifier or canonical name within the hinted topic
    2. alias within the hinted topic
    3. identifier, name or alias in any topic (several components -> ambiguous)
    4. bounded fuzzy match (single component -> fuzzy, several -> ambiguous)
    5. unknown

    Lookup tables are built once in ``__init__`` and only read afterwards.
    """

    def __init__(
        self,
        graph: TaxonomyGraph,
        aliases: AliasTable,
        settings: MatchingSettings | None = None,
    ) -> None:
        self.graph = graph
        self.aliases = aliases
        self.settings = settings or MatchingSettings()

        self._exact: dict[str, dict[str, dict[str, Component]]] = {}  # topic -> key -> component.key -> component
        self._fuzzy_keys: list[tuple[str, Component]] = []

        for comp in graph.iter_components():
            by_key = self._exact.setdefault(comp.topic, {})
            for raw in (comp.identifier, comp.name):
                key = normalize_key(raw)
                if key:
                    by_key.setdefault(key, {})[comp.key] = comp
                    self._fuzzy_keys.append((key, comp))

        for topic, key, identifier in aliases.items():
            comp = graph.get_component(topic, identifier)
            if comp is not None:
                self._fuzzy_keys.append((key, comp))

    def _alias_target(self, topic: str, key: str) -> Component | None:
        identifier = self.aliases.lookup(topic, key)
        if identifier is None:
            return None
        comp = self.graph.get_component(topic, identifier)
        if comp is None:
            logger.debug("Alias %r in topic %s points at unknown identifier %r", key, topic, identifier)
        return comp

    def _decide(
        self,
        raw: str,
        matches: dict[str, Component],
        confidence: Literal["exact", "fuzzy"],
    ) -> NormalizationResult:
        if len(matches) == 1:
            comp = next(iter(matches.values()))
            if confidence == "fuzzy":
                logger.info("Fuzzy match %r -> %s", raw, comp.key)
            return CanonicalIdentifier(topic=comp.topic, identifier=comp.identifier, confidence=confidence)
        candidates = sorted((c.as_candidate() for c in matches.values()), key=lambda c: (c.topic, c.identifier))
        logger.debug("Ambiguous %s match for %r: %s", confidence, raw, [f"{c.topic}/{c.identifier}" for c in candidates])
        return AmbiguousAlias(raw=raw, candidates=candidates)

    def normalize(self, raw: object, topic_hint: str | None = None) -> NormalizationResult:
        """
        Normalize a free-text component reference.

        Args:
            raw: Component name, identifier or alias as typed by the caller
            topic_hint: Optional topic/framework name (case-insensitive)

        Returns:
            CanonicalIdentifier, AmbiguousAlias or UnknownAlias
        """
        text = "" if raw is None else str(raw).strip()
        key = normalize_key(text)
        if not key:
            return UnknownAlias(raw=text)

        topic = self.graph.find_topic(topic_hint)
        if topic_hint and topic is None:
            logger.debug("Unknown topic hint %r; searching all topics", topic_hint)

        if topic is not None:
            hits = self._exact.get(topic.name, {}).get(key, {})
            if hits:
                return self._decide(text, dict(hits), "exact")
            comp = self._alias_target(topic.name, key)
            if comp is not None:
                return CanonicalIdentifier(topic=comp.topic, identifier=comp.identifier)

        matches: dict[str, Component] = {}
        for by_key in self._exact.values():
            matches.update(by_key.get(key, {}))
        for topic_name in self.aliases.topics():
            comp = self._alias_target(topic_name, key)
            if comp is not None:
                matches[comp.key] = comp
        if matches:
            return self._decide(text, matches, "exact")

        fuzzy = {c.key: c for k, c in self._fuzzy_keys if is_fuzzy_match(key, k, self.settings)}
        if topic is not None:
            scoped = {k: c for k, c in fuzzy.items() if c.topic == topic.name}
            if scoped:
                fuzzy = scoped
        if fuzzy:
            return self._decide(text, fuzzy, "fuzzy")

        return UnknownAlias(raw=text)

    def suggest(self, raw: object, limit: int | None = None) -> list[Candidate]:
        """Return up to ``limit`` nearest components across all topics."""
        key = normalize_key(raw)
        if not key:
            return []
        limit = self.settings.suggestion_limit if limit is None else limit

        best: dict[str, tuple[int, int, Component]] = {}
        for target_key, comp in self._fuzzy_keys:
            near, whole = suggestion_distance(key, target_key)
            if near > self.settings.suggestion_max_distance:
                continue
            current = best.get(comp.key)
            if current is None or (near, whole) < current[:2]:
                best[comp.key] = (near, whole, comp)

        ranked = sorted(best.values(), key=lambda t: (t[0], t[1], t[2].name, t[2].topic))
        return [comp.as_candidate() for _, _, comp in ranked[:limit]]

    def match_anchor(self, comp: Component, variant: object) -> str | None:
        """
        Match a variant against a component's declared anchors.

        Exact normalized match first, then a single fuzzy match. Never invents an anchor.
        """
        key = normalize_key(variant)
        if not key:
            return None
        for anchor in comp.anchors:
            if normalize_key(anchor) == key:
                return anchor
        fuzzy = [a for a in comp.anchors if is_fuzzy_match(key, normalize_key(a), self.settings)]
        return fuzzy[0] if len(fuzzy) == 1 else None
