"""Immutable taxonomy graph: groups -> topics -> components -> documents -> anchors."""

from collections.abc import Iterator
from functools import cached_property

from pydantic import BaseModel, ConfigDict, Field

from domain.schemas import Candidate, DocumentDescriptor, DocumentKind


class Group(BaseModel):
    """Top-level category bundling topics."""

    model_config = ConfigDict(frozen=True)

    name: str
    topics: tuple[str, ...] = ()


class Topic(BaseModel):
    """A framework or technology area with its own index and component set."""

    model_config = ConfigDict(frozen=True)

    name: str
    group: str
    index_path: str | None = None
    components: tuple[str, ...] = ()  # canonical identifiers, index order first
    guides: tuple[str, ...] = ()  # guide document paths


class Component(BaseModel):
    """A named UI element or concept, documented under exactly one identifier per topic."""

    model_config = ConfigDict(frozen=True)

    topic: str
    identifier: str
    name: str
    path: str
    kind: DocumentKind = DocumentKind.RULE
    anchors: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    related: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return f"{self.topic}/{self.identifier}"

    def as_candidate(self) -> Candidate:
        return Candidate(topic=self.topic, identifier=self.identifier, name=self.name, path=self.path)


def split_link(link: str) -> tuple[str, str | None]:
    """Split ``path#anchor`` into ``(path, anchor)``; a missing anchor is None."""
    path, sep, anchor = link.partition("#")
    return path, (anchor if sep and anchor else None)


class TaxonomyGraph(BaseModel):
    """
    Structural index built from a document store snapshot.

    Built once by ``build_taxonomy_graph`` and never mutated afterwards, so a
    single instance can be shared by any number of concurrent readers.
    """

    model_config = ConfigDict(frozen=True)

    groups: dict[str, Group] = Field(default_factory=dict)
    topics: dict[str, Topic] = Field(default_factory=dict)
    components: dict[str, dict[str, Component]] = Field(default_factory=dict)  # topic -> identifier -> component
    documents: dict[str, DocumentDescriptor] = Field(default_factory=dict)  # path -> descriptor

    @cached_property
    def _topic_lookup(self) -> dict[str, str]:
        """Case-insensitive topic name lookup."""
        return {name.strip().lower(): name for name in self.topics}

    def find_topic(self, hint: str | None) -> Topic | None:
        """Return the topic named by ``hint`` (case-insensitive), or None."""
        if not hint:
            return None
        name = self._topic_lookup.get(str(hint).strip().lower())
        return self.topics.get(name) if name is not None else None

    def get_component(self, topic: str, identifier: str | None) -> Component | None:
        if identifier is None:
            return None
        return self.components.get(topic, {}).get(identifier)

    def iter_components(self) -> Iterator[Component]:
        """Yield every component, topics in insertion order."""
        for by_id in self.components.values():
            yield from by_id.values()

    def resolve_reference(self, topic: str, ref: str) -> Component | None:
        """
        Resolve a related reference.

        A bare identifier is looked up in ``topic``; ``Topic/identifier``
        crosses into another topic.
        """
        ref = ref.strip()
        if ref in self.components.get(topic, {}):
            return self.components[topic][ref]
        other, sep, identifier = ref.partition("/")
        if sep:
            target = self.find_topic(other)
            if target is not None:
                return self.get_component(target.name, identifier.strip())
        return None

    def summary(self) -> dict[str, int]:
        return {
            "groups": len(self.groups),
            "topics": len(self.topics),
            "components": sum(len(v) for v in self.components.values()),
            "documents": len(self.documents),
        }
