"""Re-derive a day's metrics as if a single platform's data existed."""

from __future__ import annotations

from gamepulse.models import MetricRecord
from gamepulse.rounding import round_half_up

# ── Engagement weights ─────────────────────────────────────────────────────
_W_LIKE = 1.5
_W_COMMENT = 2.0
_W_REACH = 0.1

NEUTRAL_SENTIMENT = 50


def engagement_score(likes: float, comments: float, reach: float) -> int:
    """Engagement from raw counts: ``likes×1.5 + comments×2 + reach×0.1``."""
    return round_half_up(likes * _W_LIKE + comments * _W_COMMENT + reach * _W_REACH)


def sentiment_percent(positive: float, total: float) -> int:
    """Share of *positive* in *total* as 0..100; neutral 50 when *total* is 0."""
    if total <= 0:
        return NEUTRAL_SENTIMENT
    return round_half_up(positive / total * 100)


def resolve_for_platform(metric: MetricRecord, platform: str) -> MetricRecord:
    """Return a copy of *metric* rebuilt from ``by_platform[platform]``.

    Days without data for *platform* come back zeroed with a neutral
    sentiment. The resolved record keeps only the selected platform in
    its breakdown.
    """
    data = (metric.by_platform or {}).get(platform)
    if data is None:
        return MetricRecord(
            date=metric.date,
            sentiment_percent=NEUTRAL_SENTIMENT,
            positive_comments=0,
        )

    positive = max(0, data.comments - data.negative_comments)
    return MetricRecord(
        date=metric.date,
        daily_mentions=data.daily_mentions,
        engagement_score=engagement_score(data.likes, data.comments, data.reach),
        sentiment_percent=sentiment_percent(positive, data.comments),
        likes=data.likes,
        total_comments=data.comments,
        reach=data.reach,
        negative_comments=data.negative_comments,
        positive_comments=positive,
        by_platform={platform: data},
    )
