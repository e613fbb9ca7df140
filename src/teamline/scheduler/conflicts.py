"""Capacity conflict detection over computed timelines."""

from collections.abc import Sequence

from teamline.logger import checks_enabled, get_logger

from .core import CapacityConflict, Timeline

logger = get_logger()


def _overlap_groups(timelines: list[Timeline]) -> list[list[Timeline]]:
    """Group timelines into maximal sets of transitively overlapping spans.

    Expects timelines sorted by start day. Spans that merely touch
    (one ends the day the other starts) do not overlap.
    """
    groups: list[list[Timeline]] = []
    current: list[Timeline] = []
    current_end = 0

    for timeline in timelines:
        if current and timeline.start_day < current_end:
            current.append(timeline)
            current_end = max(current_end, timeline.end_day)
            continue
        if len(current) > 1:
            groups.append(current)
        current = [timeline]
        current_end = timeline.end_day

    if len(current) > 1:
        groups.append(current)
    return groups


def detect_conflicts(timelines: Sequence[Timeline]) -> list[CapacityConflict]:
    """Report items whose computed spans overlap on a shared developer.

    Each developer's items are swept in start order and grouped while their
    spans keep overlapping. Groups found with the same item set on several
    developers are reported once, listing all of those developers.

    Args:
        timelines: Computed timelines (zero-length timelines never conflict)

    Returns:
        Conflicts ordered by start day, then item IDs
    """
    by_developer: dict[str, list[Timeline]] = {}
    for timeline in timelines:
        if timeline.duration <= 0:
            continue
        for developer_id in timeline.developer_ids:
            by_developer.setdefault(developer_id, []).append(timeline)

    # item_ids -> (developer_ids, group)
    found: dict[tuple[str, ...], tuple[list[str], list[Timeline]]] = {}
    for developer_id in sorted(by_developer):
        ordered = sorted(by_developer[developer_id], key=lambda t: (t.start_day, t.item_id))
        for group in _overlap_groups(ordered):
            item_ids = tuple(t.item_id for t in group)
            if item_ids in found:
                found[item_ids][0].append(developer_id)
            else:
                found[item_ids] = ([developer_id], group)

    conflicts: list[CapacityConflict] = []
    for item_ids, (developer_ids, group) in found.items():
        conflict = CapacityConflict(
            developer_ids=tuple(developer_ids),
            item_ids=item_ids,
            start_day=min(t.start_day for t in group),
            end_day=max(t.end_day for t in group),
            start_date=min(t.start_date for t in group),
            end_date=max(t.end_date for t in group),
        )
        if checks_enabled():
            logger.checks(
                f"  Conflict: {', '.join(conflict.item_ids)} overlap on "
                f"{', '.join(conflict.developer_ids)} (days {conflict.start_day}-{conflict.end_day})"
            )
        conflicts.append(conflict)

    conflicts.sort(key=lambda c: (c.start_day, c.item_ids))
    return conflicts
