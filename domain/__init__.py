"""
Domain layer: Business logic with minimal external dependencies.

Contains:
- schemas: Pydantic models for document descriptors, results and violations
- taxonomy: Graph construction, alias normalization, resolution and checks
"""

from domain.schemas import (
    Ambiguous,
    Candidate,
    DocumentDescriptor,
    DocumentKind,
    Found,
    NotFound,
    RelatedRef,
    ResolutionQuery,
    ResolutionResult,
    Violation,
    ViolationKind,
)

__all__ = [
    "DocumentDescriptor",
    "DocumentKind",
    "ResolutionQuery",
    "ResolutionResult",
    "Found",
    "Ambiguous",
    "NotFound",
    "Candidate",
    "RelatedRef",
    "Violation",
    "ViolationKind",
]
