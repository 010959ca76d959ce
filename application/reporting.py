"""Violation report tables and summary logging."""

import logging
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from application.constants import (
    REPORT_COLUMNS,
    REPORT_KIND_COL,
    REPORT_MESSAGE_COL,
    REPORT_SOURCE_COL,
    REPORT_TARGET_COL,
    SUMMARY_COUNT_COL,
)
from domain.schemas import Violation, ViolationKind

logger = logging.getLogger(__name__)


def violations_to_frame(violations: Sequence[Violation]) -> pd.DataFrame:
    """
    Build a table with one row per violation.

    Columns: Kind, Source, Target, Message. Rows are ordered by kind (in
    ViolationKind declaration order), then source and target.
    """
    if not violations:
        return pd.DataFrame(columns=REPORT_COLUMNS)

    df = pd.DataFrame(
        [
            {
                REPORT_KIND_COL: v.kind.value,
                REPORT_SOURCE_COL: v.source,
                REPORT_TARGET_COL: v.target,
                REPORT_MESSAGE_COL: v.message,
            }
            for v in violations
        ],
        columns=REPORT_COLUMNS,
    )
    kind_order = pd.CategoricalDtype(categories=[k.value for k in ViolationKind], ordered=True)
    df[REPORT_KIND_COL] = df[REPORT_KIND_COL].astype(kind_order)
    df = df.sort_values([REPORT_KIND_COL, REPORT_SOURCE_COL, REPORT_TARGET_COL]).reset_index(drop=True)
    df[REPORT_KIND_COL] = df[REPORT_KIND_COL].astype(str)
    return df


def summarize_violations(violations: Sequence[Violation]) -> pd.DataFrame:
    """Count of violations per kind, every kind listed (zeros included)."""
    counts = pd.Series([v.kind.value for v in violations], dtype=object).value_counts()
    kinds = [k.value for k in ViolationKind]
    return pd.DataFrame(
        {
            REPORT_KIND_COL: kinds,
            SUMMARY_COUNT_COL: [int(counts.get(k, 0)) for k in kinds],
        }
    )


def save_violation_report(violations: Sequence[Violation], path: Path) -> Path:
    """Write the violation table as CSV."""
    path.parent.mkdir(parents=True, exist_ok=True)
    violations_to_frame(violations).to_csv(path, index=False)
    logger.info("Saved violation report (%d rows) to %s", len(violations), path)
    return path


def log_check_summary(violations: Sequence[Violation], report_path: Path | None = None) -> None:
    """Log a human-readable summary of a consistency check."""
    summary = summarize_violations(violations)
    if not violations:
        logger.info("Consistency check passed: no violations.")
    else:
        logger.warning("Consistency check found %d violation(s):\n%s", len(violations), summary.to_string(index=False))
        for v in violations:
            logger.debug("%s | %s -> %s | %s", v.kind.value, v.source, v.target or "-", v.message)
    if report_path is not None:
        logger.info("Report: %s", report_path)
