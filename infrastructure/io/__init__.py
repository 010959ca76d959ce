"""I/O utilities: filesystem operations, manifests, document stores and the graph index."""

from infrastructure.io.datasets import read_manifest, read_table
from infrastructure.io.fs import ensure_exists, read_text, write_text_atomic
from infrastructure.io.index_cache import GraphIndex, load_graph_index, save_graph_index
from infrastructure.io.store import (
    DocumentStore,
    FileSystemDocumentStore,
    InMemoryDocumentStore,
    ManifestDocumentStore,
    make_document_store,
)

__all__ = [
    "ensure_exists",
    "read_text",
    "write_text_atomic",
    "read_table",
    "read_manifest",
    "DocumentStore",
    "InMemoryDocumentStore",
    "ManifestDocumentStore",
    "FileSystemDocumentStore",
    "make_document_store",
    "GraphIndex",
    "save_graph_index",
    "load_graph_index",
]
