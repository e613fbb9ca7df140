"""Write computed schedule dates back into a planning YAML file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

from .logger import get_logger
from .scheduler import TimelineResult

logger = get_logger()

ESTIMATED_START_KEY = "estimated_start"
ESTIMATED_END_KEY = "estimated_end"


def write_schedule_annotations(file_path: Path, result: TimelineResult) -> int:
    """Annotate use cases in a planning file with their computed dates.

    Comments, key order and quoting of the original file are preserved.
    Use cases without a timeline lose any stale annotation.

    Args:
        file_path: Path to the planning YAML file
        result: Calculation result for the same file

    Returns:
        Number of use cases annotated

    Raises:
        ValueError: If the file has no use_cases section
    """
    yaml_rt = YAML()
    yaml_rt.preserve_quotes = True  # type: ignore[assignment]

    with file_path.open(encoding="utf-8") as f:
        data: Any = yaml_rt.load(f)  # type: ignore[no-untyped-call]

    if not data or "use_cases" not in data or data["use_cases"] is None:
        raise ValueError(f"No use_cases section found in {file_path}")

    annotated = 0
    for use_case_id, entry in data["use_cases"].items():
        timeline = result.get(str(use_case_id))
        if timeline is None:
            for key in (ESTIMATED_START_KEY, ESTIMATED_END_KEY):
                if key in entry:
                    del entry[key]
            continue

        entry[ESTIMATED_START_KEY] = timeline.start_date
        entry[ESTIMATED_END_KEY] = timeline.end_date
        annotated += 1
        logger.changes(
            f"Annotated {use_case_id}: {timeline.start_date} -> {timeline.end_date}"
        )

    with file_path.open("w", encoding="utf-8") as f:
        yaml_rt.dump(data, f)  # type: ignore[no-untyped-call]

    return annotated
