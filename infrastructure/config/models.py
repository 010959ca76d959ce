"""Configuration models (Pydantic classes)."""

from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from domain.taxonomy.normalizer import MatchingSettings
from infrastructure.constants import ALIASES_FILE, DOCUMENT_GLOB, INDEX_FILE


class EngineConfig(BaseModel):
    """
    Runtime configuration.
    - Loaded from engine.yaml
    - Validated and enriched by configuration loader
    - Consumed by the document store factory and TaxonomyService
    """

    # Document source (exactly one is used; corpus_root wins when both are set)
    corpus_root: Path | None = Field(
        default=None,
        description="Root directory of a markdown corpus with YAML front matter.",
    )
    manifest_file: Path | None = Field(
        default=None,
        description="YAML or CSV/Excel manifest listing document descriptors.",
    )
    document_glob: str = Field(default=DOCUMENT_GLOB, description="Glob (relative to corpus_root) of documents.")

    # Aliases
    aliases_file: Path = Field(default_factory=lambda: ALIASES_FILE)
    aliases: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Per-topic alias overrides (resolved by loader from aliases_file).",
    )

    # Serialized graph index for fast cold start
    index_file: Path = Field(default_factory=lambda: INDEX_FILE)

    matching: MatchingSettings = Field(default_factory=MatchingSettings)

    @model_validator(mode="after")
    def _validate(self) -> "EngineConfig":
        if self.corpus_root is None and self.manifest_file is None:
            raise ValueError("engine.yaml must set corpus_root or manifest_file")
        if not self.document_glob.strip():
            raise ValueError("document_glob must not be empty")
        return self
