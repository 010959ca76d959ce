"""
Document store bindings.

A document store only enumerates descriptors; the engine never reads document
content. The filesystem binding is the one place that looks inside markdown
files, and only at YAML front matter, headings and relative links.
"""

import logging
import posixpath
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

import yaml
from pydantic import ValidationError

from domain.schemas import DocumentDescriptor, DocumentKind
from infrastructure.config.models import EngineConfig
from infrastructure.io.datasets import read_manifest
from infrastructure.io.fs import ensure_exists, read_text

logger = logging.getLogger(__name__)

_FRONT_MATTER = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
_FENCE = re.compile(r"^(```|~~~).*?^\1[^\n]*$", re.MULTILINE | re.DOTALL)
_HEADING = re.compile(r"^#{1,6}[ \t]+(.+?)[ \t]*#*[ \t]*$", re.MULTILINE)
_EXPLICIT_ANCHOR = re.compile(r"\{#([\w-]+)\}\s*$")
_LINK = re.compile(r"\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)")
_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")

INDEX_FILENAMES = {"index.md"}
RULE_SUFFIX = ".rules.md"

# Front matter keys carrying component data, in every spelling DocumentDescriptor accepts
COMPONENT_KEYS = (
    "identifier",
    "canonicalIdentifier",
    "canonical_identifier",
    "name",
    "display_name",
    "displayName",
    "aliases",
    "anchors",
    "subsectionAnchors",
    "subsection_anchors",
    "related",
    "relatedIdentifiers",
    "related_identifiers",
)
ANCHOR_KEYS = ("anchors", "subsectionAnchors", "subsection_anchors")
KNOWN_KEYS = frozenset((*COMPONENT_KEYS, "group", "topic", "kind", "links"))


class DocumentStore(Protocol):
    """Anything that can enumerate document descriptors."""

    def iter_documents(self) -> Iterable[DocumentDescriptor]: ...


class InMemoryDocumentStore:
    """Holds descriptors in memory (tests, embedding callers)."""

    def __init__(self, documents: Iterable[DocumentDescriptor]) -> None:
        self._documents = list(documents)

    def iter_documents(self) -> list[DocumentDescriptor]:
        return list(self._documents)


class ManifestDocumentStore:
    """Reads descriptors from a YAML or CSV/Excel manifest on every enumeration."""

    def __init__(self, manifest_file: Path) -> None:
        self.manifest_file = manifest_file

    def iter_documents(self) -> list[DocumentDescriptor]:
        return read_manifest(self.manifest_file)


def heading_anchor(heading: str) -> str:
    """
    GitHub-style anchor for a markdown heading; ``{#id}`` wins when present.

    Examples:
        >>> heading_anchor("Number Input")
        'number-input'
        >>> heading_anchor("Sizes & Variants {#sizes}")
        'sizes'
    """
    explicit = _EXPLICIT_ANCHOR.search(heading)
    if explicit:
        return explicit.group(1)
    text = re.sub(r"[^\w\- ]", "", heading.strip().lower())
    return text.replace(" ", "-")


def split_front_matter(text: str, *, origin: str = "<document>") -> tuple[dict[str, Any] | None, str]:
    """
    Split YAML front matter from a markdown body.

    Returns:
        (front matter dict or None when absent, remaining body)

    Raises:
        ValueError: If the front matter is not valid YAML or not a mapping
    """
    match = _FRONT_MATTER.match(text)
    if match is None:
        return None, text
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as err:
        raise ValueError(f"Invalid front matter in {origin}: {err}") from err
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Front matter in {origin} must be a mapping, got {type(data).__name__}")
    return data, text[match.end() :]


def extract_anchors(body: str) -> list[str]:
    """Anchors of every heading outside fenced code blocks, in document order."""
    prose = _FENCE.sub("", body)
    anchors: list[str] = []
    for heading in _HEADING.findall(prose):
        anchor = heading_anchor(heading)
        if anchor and anchor not in anchors:
            anchors.append(anchor)
    return anchors


def extract_links(body: str, doc_path: str) -> list[str]:
    """
    Corpus-relative targets of relative markdown links to other .md documents.

    External URLs, absolute paths and links escaping the corpus are ignored;
    ``#anchor`` links point back at ``doc_path``.
    """
    prose = _FENCE.sub("", body)
    links: list[str] = []
    for target in _LINK.findall(prose):
        if _SCHEME.match(target) or target.startswith("/"):
            continue
        path, _, anchor = target.partition("#")
        if path:
            if not path.lower().endswith(".md"):
                continue
            path = posixpath.normpath(posixpath.join(posixpath.dirname(doc_path), path))
            if path.startswith("../") or path == "..":
                continue
        else:
            path = doc_path
        link = f"{path}#{anchor}" if anchor else path
        if link not in links:
            links.append(link)
    return links




def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _infer_kind(filename: str, meta: dict[str, Any]) -> DocumentKind:
    """
    Kind of a document that does not declare one.

    index.md is the topic index; *.rules.md files and files whose front matter
    carries component data are rules; everything else is a guide.
    """
    name = filename.lower()
    if name in INDEX_FILENAMES:
        return DocumentKind.INDEX
    if name.endswith(RULE_SUFFIX) or any(meta.get(key) for key in COMPONENT_KEYS):
        return DocumentKind.RULE
    return DocumentKind.GUIDE


class FileSystemDocumentStore:
    """
    Walks a markdown corpus and builds descriptors from front matter.

    Front matter keys: group, topic, kind, identifier, name, aliases, anchors,
    related, links (camelCase spellings such as canonicalIdentifier, displayName,
    subsectionAnchors and relatedIdentifiers are accepted too). Missing values
    are derived: topic from the first directory, kind from the file name and
    front matter, anchors from headings, links from relative markdown links.
    """

    def __init__(self, root: Path, pattern: str = "**/*.md") -> None:
        self.root = root
        self.pattern = pattern

    def _describe(self, file: Path) -> DocumentDescriptor | None:
        rel = file.relative_to(self.root).as_posix()
        meta, body = split_front_matter(read_text(file), origin=rel)
        parts = rel.split("/")

        if meta is None and len(parts) == 1:
            logger.debug("Skipping %s: top-level file without front matter", rel)
            return None

        record: dict[str, Any] = {}
        for key, value in (meta or {}).items():
            if str(key) in KNOWN_KEYS:
                record[str(key)] = value
            else:
                logger.warning("Ignoring unknown front matter key %r in %s", key, rel)

        if record.get("kind") is None:
            record["kind"] = _infer_kind(parts[-1], record)
        if not any(key in record for key in ANCHOR_KEYS):
            record["anchors"] = extract_anchors(body)

        links = _as_list(record.get("links"))
        for link in extract_links(body, rel):
            if link not in links:
                links.append(link)
        record["links"] = links

        record["path"] = rel
        if not record.get("topic") and len(parts) > 1:
            record["topic"] = parts[0]

        try:
            return DocumentDescriptor.model_validate(record)
        except ValidationError as err:
            raise ValueError(f"Invalid front matter in {rel}: {err}") from err

    def iter_documents(self) -> list[DocumentDescriptor]:
        ensure_exists(self.root, "corpus root")
        descriptors: list[DocumentDescriptor] = []
        for file in sorted(self.root.glob(self.pattern)):
            if not file.is_file():
                continue
            descriptor = self._describe(file)
            if descriptor is not None:
                descriptors.append(descriptor)
        logger.info("Enumerated %d document(s) under %s", len(descriptors), self.root)
        return descriptors


def make_document_store(cfg: EngineConfig) -> DocumentStore:
    """Pick the document store binding configured in engine.yaml."""
    if cfg.corpus_root is not None:
        return FileSystemDocumentStore(cfg.corpus_root, cfg.document_glob)
    if cfg.manifest_file is not None:
        return ManifestDocumentStore(cfg.manifest_file)
    raise ValueError("No document source configured (corpus_root or manifest_file)")
