"""Manifest loading utilities."""

from pathlib import Path
from typing import Any

import pandas as pd
import yaml

from domain.schemas import DocumentDescriptor
from domain.taxonomy.loader import parse_document_manifest

# Columns holding lists in tabular manifests, written as "a; b; c"
LIST_COLUMNS = (
    "aliases",
    "anchors",
    "subsectionAnchors",
    "subsection_anchors",
    "related",
    "relatedIdentifiers",
    "related_identifiers",
    "links",
)
LIST_SEPARATOR = ";"


def read_table(path: Path) -> pd.DataFrame:
    """
    Read tabular data file (Excel or CSV) based on file extension.

    Supported formats:
    - Excel: .xlsx, .xls
    - CSV: .csv

    Args:
        path: Path to data file

    Returns:
        pandas DataFrame

    Raises:
        ValueError: If file format is not supported
        FileNotFoundError: If file does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in [".xlsx", ".xls"]:
        return pd.read_excel(path, dtype=str)
    elif suffix == ".csv":
        return pd.read_csv(path, dtype=str)
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Supported formats: .xlsx, .xls, .csv")


def _split_list(value: Any) -> list[str]:
    if value is None:
        return []
    return [part.strip() for part in str(value).split(LIST_SEPARATOR) if part.strip()]


def _table_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Turn manifest rows into descriptor dicts (NaN -> None, list columns split)."""
    df = df.astype(object).where(df.notna(), None)
    records: list[dict[str, Any]] = []
    for record in df.to_dict(orient="records"):
        for col in LIST_COLUMNS:
            if col in record:
                record[col] = _split_list(record[col])
        records.append({str(k): v for k, v in record.items()})
    return records


def read_manifest(path: Path) -> list[DocumentDescriptor]:
    """
    Read a document manifest.

    Supported formats:
    - YAML: a list of documents, or a mapping with a ``documents`` list
    - CSV / Excel: one row per document; list columns separated by ';'

    Raises:
        FileNotFoundError: If the manifest does not exist
        ValueError: If the manifest shape or a record is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Manifest not found: {path}")

    if path.suffix.lower() in [".yaml", ".yml"]:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            data = data.get("documents")
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of documents (or a 'documents' key) in {path}")
        return parse_document_manifest(data, origin=str(path))

    return parse_document_manifest(_table_records(read_table(path)), origin=str(path))
