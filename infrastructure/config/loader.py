"""Configuration loading from YAML files."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from domain.taxonomy.loader import parse_alias_config
from domain.taxonomy.normalizer import MatchingSettings
from infrastructure.config.models import EngineConfig
from infrastructure.constants import (
    ALIASES_FILE,
    DOCUMENT_GLOB,
    ENV_CORPUS_ROOT,
    ENV_INDEX_FILE,
    ENV_MANIFEST_FILE,
    INDEX_FILE,
)

logger = logging.getLogger(__name__)


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def load_alias_config(path: Path) -> dict[str, dict[str, str]]:
    """
    Load per-topic alias overrides from YAML file.

    This function handles file I/O, then delegates parsing to domain layer.
    A missing file means "no overrides".
    """
    if not path.exists():
        logger.info("No alias file at %s; using aliases declared by documents only", path)
        return {}
    return parse_alias_config(_load_yaml(path))


def _optional_path(value: Any) -> Path | None:
    if value is None or not str(value).strip():
        return None
    return Path(str(value).strip())


def load_engine_config(config_path: Path, env: Mapping[str, str] | None = None) -> EngineConfig:
    """
    Load engine.yaml and construct a fully-resolved EngineConfig.

    Environment variables (TOPIC_ENGINE_CORPUS_ROOT, TOPIC_ENGINE_MANIFEST,
    TOPIC_ENGINE_INDEX_FILE) take precedence over the YAML values. Relative
    paths are kept relative to the working directory.

    Args:
        config_path: Path to engine.yaml
        env: Environment mapping (defaults to os.environ)

    Returns:
        EngineConfig with alias overrides loaded

    Raises:
        FileNotFoundError: If engine.yaml is missing
        ValueError: If keys have invalid types or no document source is configured
    """
    env = os.environ if env is None else env
    raw = _load_yaml(config_path)

    matching_raw = raw.get("matching") or {}
    if not isinstance(matching_raw, dict):
        raise ValueError(f"'matching' must be a mapping in {config_path}")

    aliases_file = Path(raw.get("aliases_file") or ALIASES_FILE)

    cfg = EngineConfig(
        corpus_root=_optional_path(env.get(ENV_CORPUS_ROOT) or raw.get("corpus_root")),
        manifest_file=_optional_path(env.get(ENV_MANIFEST_FILE) or raw.get("manifest_file")),
        document_glob=str(raw.get("document_glob") or DOCUMENT_GLOB),
        aliases_file=aliases_file,
        aliases=load_alias_config(aliases_file),
        index_file=_optional_path(env.get(ENV_INDEX_FILE) or raw.get("index_file")) or INDEX_FILE,
        matching=MatchingSettings(**matching_raw),
    )
    logger.debug("Loaded engine config from %s: %s", config_path, cfg.model_dump(mode="json", exclude={"aliases"}))
    return cfg
