"""Pydantic models for document descriptors, resolution results and checker findings."""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class DocumentKind(str, Enum):
    """Role a document plays inside its topic."""

    INDEX = "index"
    RULE = "rule"
    GUIDE = "guide"


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    return tuple(str(v).strip() for v in value if v is not None and str(v).strip())


class DocumentDescriptor(BaseModel):
    """
    One document as enumerated by a document store.

    The engine trusts descriptors to be parsed already; it never opens the
    document itself. Paths and links are corpus-relative posix paths.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str
    group: str | None = None
    topic: str | None = None
    kind: DocumentKind = DocumentKind.RULE
    identifier: str | None = Field(
        default=None,
        validation_alias=AliasChoices("identifier", "canonicalIdentifier", "canonical_identifier"),
    )
    display_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("display_name", "displayName", "name"),
    )
    aliases: tuple[str, ...] = ()
    anchors: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("anchors", "subsectionAnchors", "subsection_anchors"),
    )
    related: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("related", "relatedIdentifiers", "related_identifiers"),
    )
    links: tuple[str, ...] = ()

    @field_validator("group", "topic", "identifier", "display_name", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @field_validator("kind", mode="before")
    @classmethod
    def _kind_lower(cls, v: Any) -> Any:
        if v is None:
            return DocumentKind.RULE
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("aliases", "related", "links", mode="before")
    @classmethod
    def _coerce_list(cls, v: Any) -> tuple[str, ...]:
        return _as_tuple(v)

    @field_validator("anchors", mode="before")
    @classmethod
    def _strip_hash(cls, v: Any) -> tuple[str, ...]:
        return tuple(a.lstrip("#") for a in _as_tuple(v) if a.lstrip("#"))


class ResolutionQuery(BaseModel):
    """A single resolution request."""

    component: str
    topic_hint: str | None = None
    variant: str | None = None


class Candidate(BaseModel):
    """A (topic, component) pair offered for disambiguation or as a suggestion."""

    model_config = ConfigDict(frozen=True)

    topic: str
    identifier: str
    name: str
    path: str


class RelatedRef(BaseModel):
    """A related component, resolved one level deep."""

    model_config = ConfigDict(frozen=True)

    topic: str
    identifier: str
    name: str
    path: str


class Found(BaseModel):
    """The query resolved to exactly one document (and maybe one anchor)."""

    status: Literal["found"] = "found"
    topic: str
    identifier: str
    name: str
    path: str
    anchor: str | None = Field(default=None, description="'#anchor' when a variant matched a subsection.")
    confidence: Literal["exact", "fuzzy"] = "exact"
    note: str | None = None
    related: list[RelatedRef] = Field(default_factory=list)

    @property
    def target(self) -> str:
        return f"{self.path}{self.anchor or ''}"


class Ambiguous(BaseModel):
    """Several components in different topics match; the caller must supply a topic hint."""

    status: Literal["ambiguous"] = "ambiguous"
    query: str
    candidates: list[Candidate] = Field(default_factory=list)


class NotFound(BaseModel):
    """Nothing matched; up to a few nearest suggestions are attached."""

    status: Literal["not_found"] = "not_found"
    query: str
    suggestions: list[Candidate] = Field(default_factory=list)


ResolutionResult = Annotated[Found | Ambiguous | NotFound, Field(discriminator="status")]


class ViolationKind(str, Enum):
    """Kinds of consistency findings."""

    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    DANGLING_LINK = "dangling_link"
    ORPHAN_DOCUMENT = "orphan_document"
    MISSING_DOCUMENT = "missing_document"
    ASYMMETRIC_LINK = "asymmetric_link"


class Violation(BaseModel):
    """One advisory finding from the consistency checker."""

    model_config = ConfigDict(frozen=True)

    kind: ViolationKind
    source: str
    target: str = ""
    message: str = ""
