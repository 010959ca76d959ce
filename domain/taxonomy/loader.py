"""Parse alias configuration and document manifests from pre-loaded dicts."""

from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from domain.schemas import DocumentDescriptor


def parse_alias_config(data: dict[str, Any]) -> dict[str, dict[str, str]]:
    """
    Parse pre-loaded YAML dict into per-topic alias overrides.

    This is a pure function - it does NOT perform file I/O.
    The YAML loading happens in infrastructure.config.loader.

    Expected shape::

        aliases:
          WebAwesome:
            icon button: icon-button
          Angular:
            row: WaCluster

    Args:
        data: Dictionary from yaml.safe_load()

    Returns:
        Mapping topic -> {alias: identifier}, keys and values stripped

    Raises:
        ValueError: If required keys have wrong types
    """
    aliases_raw = data.get("aliases", {}) or {}
    if not isinstance(aliases_raw, dict):
        raise ValueError("aliases must be a mapping of topic -> {alias: identifier}")

    overrides: dict[str, dict[str, str]] = {}
    for topic, mapping in aliases_raw.items():
        if mapping is None:
            continue
        if not isinstance(mapping, dict):
            raise ValueError(f"aliases.{topic} must be a mapping of alias -> identifier")
        overrides[str(topic).strip()] = {
            str(alias).strip(): str(identifier).strip()
            for alias, identifier in mapping.items()
            if identifier is not None and str(identifier).strip()
        }
    return overrides


def parse_document_manifest(records: Iterable[dict[str, Any]], *, origin: str = "<manifest>") -> list[DocumentDescriptor]:
    """
    Validate manifest records into document descriptors.

    Args:
        records: One dict per document (snake_case or camelCase keys)
        origin: Label used in error messages

    Returns:
        List of DocumentDescriptor in manifest order

    Raises:
        ValueError: If a record is not a mapping or fails validation
    """
    descriptors: list[DocumentDescriptor] = []
    for pos, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"{origin}: document #{pos} must be a mapping, got {type(record).__name__}")
        try:
            descriptors.append(DocumentDescriptor.model_validate(record))
        except ValidationError as err:
            raise ValueError(f"{origin}: invalid document #{pos} ({record.get('path')!r}): {err}") from err
    return descriptors
