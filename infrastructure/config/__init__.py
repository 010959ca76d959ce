"""
Configuration management: models, loading, and validation.

Handles:
- EngineConfig: document source, alias file, index cache, matching bounds
- Alias overrides loading from YAML
- Environment variable overrides

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import load_alias_config, load_engine_config
from infrastructure.config.models import EngineConfig

__all__ = [
    "EngineConfig",
    "load_engine_config",
    "load_alias_config",
]
