"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure, serving
resolution queries over a swappable graph snapshot and reporting
consistency findings.
"""

from application.reporting import (
    log_check_summary,
    save_violation_report,
    summarize_violations,
    violations_to_frame,
)
from application.serialize import dump_result, dump_violations, result_to_dict, violations_to_records
from application.service import Snapshot, TaxonomyService

__all__ = [
    # Main workflows
    "TaxonomyService",
    "Snapshot",
    # Reporting
    "violations_to_frame",
    "summarize_violations",
    "save_violation_report",
    "log_check_summary",
    # Serialization
    "result_to_dict",
    "violations_to_records",
    "dump_result",
    "dump_violations",
]
