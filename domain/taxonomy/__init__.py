"""
Taxonomy graph, alias normalization, resolution and consistency checks.

All functions in this module are pure (no file I/O).
"""

from domain.taxonomy.builder import build_taxonomy_graph
from domain.taxonomy.checker import check_taxonomy
from domain.taxonomy.errors import DuplicateIdentifierError, MalformedDocumentError, TaxonomyError
from domain.taxonomy.graph import Component, Group, TaxonomyGraph, Topic
from domain.taxonomy.loader import parse_alias_config, parse_document_manifest
from domain.taxonomy.normalizer import (
    AliasNormalizer,
    AliasTable,
    AmbiguousAlias,
    CanonicalIdentifier,
    MatchingSettings,
    UnknownAlias,
    normalize_key,
)
from domain.taxonomy.resolver import TopicResolver

__all__ = [
    # Graph
    "TaxonomyGraph",
    "Group",
    "Topic",
    "Component",
    "build_taxonomy_graph",
    # Errors
    "TaxonomyError",
    "MalformedDocumentError",
    "DuplicateIdentifierError",
    # Normalization
    "AliasTable",
    "AliasNormalizer",
    "MatchingSettings",
    "CanonicalIdentifier",
    "AmbiguousAlias",
    "UnknownAlias",
    "normalize_key",
    # Resolution / checks
    "TopicResolver",
    "check_taxonomy",
    # Parsing
    "parse_alias_config",
    "parse_document_manifest",
]
