"""Application-level constants."""

from pathlib import Path

# Violation report columns
REPORT_KIND_COL = "Kind"
REPORT_SOURCE_COL = "Source"
REPORT_TARGET_COL = "Target"
REPORT_MESSAGE_COL = "Message"
REPORT_COLUMNS = [REPORT_KIND_COL, REPORT_SOURCE_COL, REPORT_TARGET_COL, REPORT_MESSAGE_COL]
SUMMARY_COUNT_COL = "Count"

# Output locations
OUTPUT_ROOT = Path("outputs")
VIOLATIONS_REPORT_FILENAME = "violations.csv"
LOG_FILENAME = "topic-engine.log"

# CLI exit codes
EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_BUILD_ERROR = 2
