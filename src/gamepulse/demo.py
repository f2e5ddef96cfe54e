"""Synthetic dataset used when the backend is unconfigured, unreachable or empty."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from datetime import UTC, date, datetime, time, timedelta

from gamepulse.breakdown import engagement_score, sentiment_percent
from gamepulse.models import (
    ActivityRecord,
    CommentRecord,
    MetricRecord,
    PlatformMetrics,
    Sentiment,
)

logger = logging.getLogger(__name__)

PLATFORMS: tuple[str, ...] = ("Reddit", "Youtube", "Discord", "Tiktok", "Vk")
# Rough share of daily volume per platform.
_PLATFORM_WEIGHTS: tuple[float, ...] = (0.35, 0.25, 0.2, 0.12, 0.08)

_FIRST_NAMES = ("Aethel", "Kael", "Lyra", "Zane", "Fenris", "Sorin", "Elara", "Jax")
_LAST_NAMES = ("Ironhand", "Swiftblade", "Shadowmend", "Stormcaller", "Voidgazer", "Fireheart")

_PHRASES: dict[Sentiment, tuple[str, ...]] = {
    "Positive": (
        "hyped for CBT", "love the art style", "fog of war is sick",
        "Blast Medic feels great", "finally a real MMO", "devs are listening",
    ),
    "Negative": (
        "server lag", "Champion is broken", "hate the nerf", "quest is bugged",
        "game keeps crashing", "another wipe?", "fix this",
    ),
    "Neutral": (
        "when is next beta", "need a roadmap", "open beta when",
        "class balance thoughts", "more keys please",
    ),
}


def _day(today: date, offset: int) -> str:
    return (today - timedelta(days=offset)).isoformat()


def generate_activities(today: date | None = None) -> list[ActivityRecord]:
    """A fixed timeline of releases, campaigns and community events around *today*."""
    today = today or datetime.now(UTC).date()

    def d(offset: int) -> str:
        return _day(today, offset)

    return [
        ActivityRecord(
            id=1, type="Release", date=d(25), status="Completed",
            description="Champion Class Rebalance (Nerf)", platforms=["In-Game"],
        ),
        ActivityRecord(
            id=2, type="Community Event", date=d(18), status="Completed",
            description="Server Stress Test Weekend", platforms=["In-Game"],
        ),
        ActivityRecord(
            id=3, type="Marketing Campaign", date=d(10), start_date=d(10), end_date=d(7),
            status="Completed", description="New Trailer: 'The Faidens'",
            platforms=["Tiktok", "Youtube", "X"],
        ),
        ActivityRecord(
            id=4, type="Community Event", date=d(1), status="In Progress",
            description="AMA with Lead Designer on Discord", platforms=["Discord"],
        ),
        ActivityRecord(
            id=5, type="PR Publication", date=d(12), status="Completed",
            description="IGN First Look at Crafting System", platforms=["Web"],
        ),
        ActivityRecord(
            id=6, type="Marketing Campaign", date=d(-3), start_date=d(-3), end_date=d(-7),
            status="Upcoming", description="Next Wave of CBT Invites", platforms=[],
        ),
        ActivityRecord(
            id=7, type="Release", date=d(0), status="In Progress",
            description="Closed Beta Patch 0.2: Elani Highlands Zone", platforms=["In-Game"],
        ),
    ]


def _activity_days(activities: Sequence[ActivityRecord]) -> dict[str, list[ActivityRecord]]:
    by_day: dict[str, list[ActivityRecord]] = {}
    for activity in activities:
        if activity.start_date and activity.end_date:
            current = date.fromisoformat(activity.start_date)
            end = date.fromisoformat(activity.end_date)
            while current <= end:
                by_day.setdefault(current.isoformat(), []).append(activity)
                current += timedelta(days=1)
        else:
            by_day.setdefault(activity.date, []).append(activity)
    return by_day


def generate_metrics(
    activities: Sequence[ActivityRecord],
    days: int = 90,
    today: date | None = None,
    seed: int | None = None,
) -> list[MetricRecord]:
    """One record per day for the last *days* days, oldest first.

    Activities shape the curve: releases drive negative comments, campaigns
    multiply likes and reach, stress tests bring more mentions.
    """
    rng = random.Random(seed)
    today = today or datetime.now(UTC).date()
    by_day = _activity_days(activities)
    metrics: list[MetricRecord] = []

    for offset in range(days - 1, -1, -1):
        day = _day(today, offset)
        trend = days - offset
        mentions = 120 + rng.randint(-25, 25) + trend
        likes = 500 + rng.randint(0, 200)
        comments = 80 + rng.randint(0, 30)
        reach = 10_000 + rng.randint(0, 2000)
        negative_share = 0.15 + rng.random() * 0.1

        for activity in by_day.get(day, []):
            if activity.type == "Release":
                negative_share *= 2.5
            elif activity.type == "Hotfix":
                negative_share *= 0.5
            elif activity.type == "Marketing Campaign":
                mentions *= 1.2
                likes *= 10
                reach *= 8
            elif activity.type == "PR Publication":
                likes *= 2
                reach *= 1.5
            elif activity.type == "Community Event":
                if "Stress Test" in activity.description:
                    mentions *= 1.5
                    negative_share *= 1.5
                likes *= 1.2

        negative_share = min(negative_share, 0.9)
        by_platform: dict[str, PlatformMetrics] = {}
        for platform, weight in zip(PLATFORMS, _PLATFORM_WEIGHTS):
            p_comments = int(comments * weight)
            by_platform[platform] = PlatformMetrics(
                daily_mentions=int(mentions * weight),
                likes=int(likes * weight),
                comments=p_comments,
                reach=int(reach * weight),
                negative_comments=int(p_comments * negative_share),
            )

        total_mentions = sum(p.daily_mentions for p in by_platform.values())
        total_likes = sum(p.likes for p in by_platform.values())
        total_comments = sum(p.comments for p in by_platform.values())
        total_reach = sum(p.reach for p in by_platform.values())
        negative = sum(p.negative_comments for p in by_platform.values())
        positive = max(0, total_comments - negative)

        metrics.append(
            MetricRecord(
                date=day,
                daily_mentions=total_mentions,
                engagement_score=engagement_score(total_likes, total_comments, total_reach),
                sentiment_percent=sentiment_percent(positive, total_comments),
                likes=total_likes,
                total_comments=total_comments,
                reach=total_reach,
                negative_comments=negative,
                positive_comments=positive,
                by_platform=by_platform,
            )
        )

    logger.info("Generated %d days of demo metrics", len(metrics))
    return metrics


def _comment_text(rng: random.Random, sentiment: Sentiment, activity: ActivityRecord) -> str:
    base = f"Re: {activity.description[:20]}..."
    phrase = rng.choice(_PHRASES[sentiment])
    if sentiment == "Positive":
        return f"{base} I'm so {phrase}! Keep it up."
    if sentiment == "Negative":
        return f"{base} The {phrase} is making the test unplayable."
    return f"{base} {phrase}?"


def _pick_sentiment(rng: random.Random, activity: ActivityRecord) -> Sentiment:
    negative = 0.45 if activity.type == "Release" else 0.2
    roll = rng.random()
    if roll < negative:
        return "Negative"
    if roll < negative + 0.25:
        return "Neutral"
    return "Positive"


def generate_comments(
    activities: Sequence[ActivityRecord],
    today: date | None = None,
    seed: int | None = None,
    posts_per_activity: int = 3,
) -> list[CommentRecord]:
    """Posts with replies reacting to every activity that has already started."""
    rng = random.Random(seed)
    today = today or datetime.now(UTC).date()
    comments: list[CommentRecord] = []

    for activity in activities:
        day = date.fromisoformat(activity.start_date or activity.date)
        if day > today:
            continue
        player = bool({"In-Game", "Discord"} & set(activity.platforms))

        for n in range(posts_per_activity):
            platform = rng.choice(PLATFORMS)
            post_id = f"demo-{activity.id}-{n}"
            posted_at = datetime.combine(day, time(hour=rng.randint(8, 20)), tzinfo=UTC)
            thread_size = rng.randint(0, 4)

            for i in range(thread_size + 1):
                sentiment = _pick_sentiment(rng, activity)
                comments.append(
                    CommentRecord(
                        id=len(comments) + 1,
                        activity_id=activity.id,
                        text=_comment_text(rng, sentiment, activity),
                        author=f"{rng.choice(_FIRST_NAMES)}{rng.choice(_LAST_NAMES)}",
                        sentiment=sentiment,
                        user_type="Player" if player else "Viewer",
                        source=platform,
                        timestamp=posted_at + timedelta(minutes=17 * i),
                        metadata={
                            "is_post": i == 0,
                            "post_id": post_id,
                            "post_title": activity.description if i == 0 else None,
                            "score": rng.randint(0, 250),
                            "likes": rng.randint(0, 80),
                            "views": rng.randint(0, 5000),
                        },
                    )
                )

    logger.info("Generated %d demo comments", len(comments))
    return comments
