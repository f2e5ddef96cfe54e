"""Period-over-period change: sparkline deltas and activity impact."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta

from gamepulse.models import (
    ActivityImpact,
    ActivityRecord,
    CommentRecord,
    MetricChange,
    MetricRecord,
)

_SERIES_FIELDS: frozenset[str] = frozenset(
    {
        "daily_mentions",
        "engagement_score",
        "sentiment_percent",
        "likes",
        "total_comments",
        "reach",
        "negative_comments",
    }
)


def percent_change(current: float, previous: float | None) -> float:
    """Percentage change from *previous* to *current*.

    A missing or zero baseline reports no change rather than infinite growth.
    """
    if previous is None or previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def latest_change(
    metrics: Sequence[MetricRecord], field: str
) -> MetricChange | None:
    """Compare the last two days of *field*; ``None`` for an empty series."""
    if field not in _SERIES_FIELDS:
        raise ValueError(f"Unknown metric field '{field}'")
    if not metrics:
        return None

    current = getattr(metrics[-1], field)
    previous = getattr(metrics[-2], field) if len(metrics) > 1 else None
    return MetricChange(
        field=field,
        current=current,
        previous=previous,
        change=percent_change(current, previous),
    )


# Days after an activity ends at which its effect is read.
_IMPACT_LAG_DAYS = 3
_IMPACT_SAMPLE = 3


def activity_impact(
    activity: ActivityRecord,
    metrics: Sequence[MetricRecord],
    comments: Sequence[CommentRecord],
) -> ActivityImpact | None:
    """How the metrics moved from an activity's start to a few days after it ended.

    Returns ``None`` for upcoming activities and when either end of the
    comparison has no metric record.
    """
    if activity.status == "Upcoming":
        return None

    by_date = {m.date: m for m in metrics}
    start_day = activity.start_date or activity.date
    end_day = activity.end_date or activity.date
    impact_day = (date.fromisoformat(end_day) + timedelta(days=_IMPACT_LAG_DAYS)).isoformat()

    start = by_date.get(start_day)
    end = by_date.get(impact_day) or by_date.get(end_day)
    if start is None or end is None:
        return None

    related = [c for c in comments if c.activity_id == activity.id]
    return ActivityImpact(
        activity_id=activity.id,
        start_date=start.date,
        impact_date=end.date,
        changes={
            f: percent_change(getattr(end, f), getattr(start, f)) for f in sorted(_SERIES_FIELDS)
        },
        comments=related,
        positive_comments=[c for c in related if c.sentiment == "Positive"][:_IMPACT_SAMPLE],
        negative_comments=[c for c in related if c.sentiment == "Negative"][:_IMPACT_SAMPLE],
    )
