"""Narrow metrics, activities and comments to a date window and platform."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from gamepulse.breakdown import resolve_for_platform
from gamepulse.models import (
    ALL,
    ActivityRecord,
    CommentRecord,
    FilteredDataset,
    FilterSpec,
    MetricRecord,
)

logger = logging.getLogger(__name__)


def _in_window(day: str, spec: FilterSpec) -> bool:
    if spec.date_range == ALL:
        return True
    return spec.date_range.contains(day)


def filter_metrics(
    metrics: Sequence[MetricRecord], spec: FilterSpec
) -> list[MetricRecord]:
    """Keep days inside the window; resolve each one to the selected platform."""
    kept = [m for m in metrics if _in_window(m.date, spec)]
    if spec.platform == ALL:
        return kept
    return [resolve_for_platform(m, spec.platform) for m in kept]


def filter_activities(
    activities: Sequence[ActivityRecord], spec: FilterSpec
) -> list[ActivityRecord]:
    """Keep activities inside the window that target the selected platform.

    An activity with no platforms applies everywhere.
    """
    return [
        a
        for a in activities
        if _in_window(a.date, spec)
        and (spec.platform == ALL or not a.platforms or spec.platform in a.platforms)
    ]


def filter_comments(
    comments: Sequence[CommentRecord], spec: FilterSpec
) -> list[CommentRecord]:
    """Keep comments posted inside the window on the selected platform."""
    return [
        c
        for c in comments
        if _in_window(c.day, spec)
        and (spec.platform == ALL or c.source == spec.platform)
    ]


def filter_dataset(
    metrics: Sequence[MetricRecord],
    activities: Sequence[ActivityRecord],
    comments: Sequence[CommentRecord],
    spec: FilterSpec,
) -> FilteredDataset:
    """Apply *spec* to all three collections, preserving input order."""
    dataset = FilteredDataset(
        metrics=filter_metrics(metrics, spec),
        activities=filter_activities(activities, spec),
        comments=filter_comments(comments, spec),
    )
    logger.debug(
        "Filter [%s, platform=%s]: metrics %d → %d, activities %d → %d, comments %d → %d",
        spec.date_range if spec.date_range == ALL else f"{spec.date_range.start}..{spec.date_range.end}",
        spec.platform,
        len(metrics),
        len(dataset.metrics),
        len(activities),
        len(dataset.activities),
        len(comments),
        len(dataset.comments),
    )
    return dataset
