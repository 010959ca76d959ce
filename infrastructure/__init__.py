"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Configuration loading (YAML, environment)
- Document stores (markdown corpus, manifests, in-memory)
- Graph index persistence
- Observability (logging)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import EngineConfig, load_engine_config
from infrastructure.io import DocumentStore, make_document_store

__all__ = [
    "load_engine_config",
    "EngineConfig",
    "DocumentStore",
    "make_document_store",
]
