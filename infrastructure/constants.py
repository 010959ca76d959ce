from pathlib import Path

# Repo-root conventional directories/files (overrideable via engine.yaml / environment)
CONFIG_DIR = Path("configs")
ENGINE_CONFIG_FILE = CONFIG_DIR / "engine.yaml"
ALIASES_FILE = CONFIG_DIR / "aliases.yaml"

INDEX_FILE = Path(".topic-index") / "graph.json"
DOCUMENT_GLOB = "**/*.md"

# Environment overrides (applied after .env is loaded)
ENV_CORPUS_ROOT = "TOPIC_ENGINE_CORPUS_ROOT"
ENV_MANIFEST_FILE = "TOPIC_ENGINE_MANIFEST"
ENV_INDEX_FILE = "TOPIC_ENGINE_INDEX_FILE"

# Serialized graph index
INDEX_FORMAT_VERSION = 1
