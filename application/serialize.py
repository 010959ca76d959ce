"""JSON serialization of resolution results and violations."""

import json
from collections.abc import Sequence
from typing import Any

from domain.schemas import ResolutionResult, Violation


def result_to_dict(result: ResolutionResult) -> dict[str, Any]:
    """Plain-JSON dict of a resolution result; Found also carries the joined ``target``."""
    data = result.model_dump(mode="json")
    if result.status == "found":
        data["target"] = result.target
    return data


def violations_to_records(violations: Sequence[Violation]) -> list[dict[str, Any]]:
    return [v.model_dump(mode="json") for v in violations]


def dump_result(result: ResolutionResult) -> str:
    return json.dumps(result_to_dict(result), ensure_ascii=False, indent=2)


def dump_violations(violations: Sequence[Violation]) -> str:
    return json.dumps(violations_to_records(violations), ensure_ascii=False, indent=2)
