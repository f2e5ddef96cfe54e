"""Summary statistics over a filtered window of daily metrics."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from gamepulse.models import MetricRecord, PlatformShare, Summary
from gamepulse.rounding import round2, round_half_up

logger = logging.getLogger(__name__)

NO_PLATFORM = "N/A"

# MetricRecord field → PlatformMetrics field
_PLATFORM_FIELDS: dict[str, str] = {
    "daily_mentions": "daily_mentions",
    "likes": "likes",
    "total_comments": "comments",
    "reach": "reach",
    "negative_comments": "negative_comments",
}


def _positive(metric: MetricRecord) -> float:
    if metric.positive_comments is not None:
        return metric.positive_comments
    return max(0, metric.total_comments - metric.negative_comments)


def platform_totals(
    metrics: Sequence[MetricRecord], field: str = "daily_mentions"
) -> dict[str, float]:
    """Sum one breakdown field per platform, in first-seen order."""
    try:
        attr = _PLATFORM_FIELDS[field]
    except KeyError:
        raise ValueError(f"No per-platform breakdown for field '{field}'") from None

    totals: dict[str, float] = {}
    for metric in metrics:
        for platform, data in (metric.by_platform or {}).items():
            totals[platform] = totals.get(platform, 0) + getattr(data, attr)
    return totals


def top_platform(metrics: Sequence[MetricRecord]) -> tuple[str, float]:
    """Platform with the most mentions; the first one seen wins a tie."""
    best, best_mentions = NO_PLATFORM, 0.0
    seen = False
    for platform, mentions in platform_totals(metrics).items():
        if not seen or mentions > best_mentions:
            best, best_mentions = platform, mentions
            seen = True
    return best, best_mentions


def aggregate(metrics: Sequence[MetricRecord]) -> Summary | None:
    """Reduce a window of daily metrics to totals, averages and rates.

    Returns ``None`` for an empty window so callers can tell "no data"
    apart from a window of genuine zeros.
    """
    if not metrics:
        return None

    count = len(metrics)
    mentions = sum(m.daily_mentions for m in metrics)
    engagement = sum(m.engagement_score for m in metrics)
    sentiment = sum(m.sentiment_percent for m in metrics)
    reach = sum(m.reach for m in metrics)
    platform, platform_mentions = top_platform(metrics)

    summary = Summary(
        days=count,
        total_mentions=mentions,
        total_engagement=engagement,
        total_sentiment=sentiment,
        total_likes=sum(m.likes for m in metrics),
        total_comments=sum(m.total_comments for m in metrics),
        total_reach=reach,
        total_negative_comments=sum(m.negative_comments for m in metrics),
        total_positive_comments=sum(_positive(m) for m in metrics),
        avg_sentiment_percent=round_half_up(sentiment / count),
        avg_mentions_per_day=round_half_up(mentions / count),
        engagement_rate=round2(engagement / reach * 100) if reach > 0 else 0.0,
        top_platform=platform,
        top_platform_mentions=platform_mentions,
    )
    logger.debug(
        "Aggregated %d days: mentions=%s engagement=%s top=%s",
        count,
        mentions,
        engagement,
        platform,
    )
    return summary


def platform_distribution(
    metrics: Sequence[MetricRecord], field: str = "daily_mentions"
) -> list[PlatformShare]:
    """Each platform's share of *field* across the window, largest first.

    Platforms with a zero total are left out.
    """
    totals = {p: v for p, v in platform_totals(metrics, field).items() if v > 0}
    grand_total = sum(totals.values())
    shares = [
        PlatformShare(
            platform=platform,
            value=value,
            percentage=value / grand_total * 100 if grand_total > 0 else 0.0,
        )
        for platform, value in totals.items()
    ]
    return sorted(shares, key=lambda s: s.value, reverse=True)
