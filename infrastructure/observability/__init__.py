"""
Observability: structured logging and context management.

Provides:
- Contextual logging with run/query IDs
- Log rotation and file management
"""

from infrastructure.observability.logging import (
    clear_query_context,
    configure_logging,
    get_log_context,
    make_run_tag,
    next_query_id,
    set_log_context,
)

__all__ = [
    "configure_logging",
    "set_log_context",
    "get_log_context",
    "clear_query_context",
    "next_query_id",
    "make_run_tag",
]
