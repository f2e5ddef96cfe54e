"""Turn raw backend event rows into metric, comment and activity records.

Every row in the backend ``events`` table carries a platform, an event type
and a free-form ``properties`` bag. Developer activity types (releases,
hotfixes, ...) become :class:`ActivityRecord` s; posts and comments become
:class:`CommentRecord` s and are also rolled up per day into
:class:`MetricRecord` s.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from gamepulse.breakdown import engagement_score, sentiment_percent
from gamepulse.models import (
    ActivityRecord,
    ActivityStatus,
    ActivityType,
    CommentRecord,
    MetricRecord,
    PlatformMetrics,
    Sentiment,
    UserType,
)

logger = logging.getLogger(__name__)

# ── Event types ────────────────────────────────────────────────────────────
ACTIVITY_EVENT_TYPES: dict[str, ActivityType] = {
    "release": "Release",
    "hotfix": "Hotfix",
    "marketing_campaign": "Marketing Campaign",
    "community_event": "Community Event",
    "pr_publication": "PR Publication",
}
SNAPSHOT_EVENT_TYPE = "video_stats_snapshot"
_MENTION_EVENT_TYPES = {"video_mention", "vk_mention"}

# ── Platform labels ────────────────────────────────────────────────────────
_PLATFORM_LABELS: dict[str, str] = {
    "tiktok": "Tiktok",
    "reddit": "Reddit",
    "youtube": "Youtube",
    "instagram": "Instagram",
    "twitter": "Twitter",
    "vk": "Vk",
    "discord": "Discord",
}
_PLAYER_PLATFORMS = {"discord", "game"}

# ── Sentiment lexicons ─────────────────────────────────────────────────────
_NEGATIVE_WORDS: tuple[str, ...] = (
    "bad", "hate", "worst", "terrible", "broken", "bug", "trash", "sucks",
    "awful", "horrible", "disappointing", "disappointed", "poor", "shit", "useless",
    "waste", "dead", "dying", "fail", "failed", "failure", "never", "boring",
    "stupid", "dumb", "lag", "laggy", "crash", "crashes",
)
_POSITIVE_WORDS: tuple[str, ...] = (
    "love", "great", "awesome", "best", "good", "amazing", "excellent",
    "perfect", "fantastic", "wonderful", "brilliant", "outstanding",
    "beautiful", "nice", "thanks", "thank", "appreciate", "helpful",
    "cool", "fun", "enjoy", "enjoyed", "favorite", "impressive",
)

_TEXT_KEYS = (
    "title", "selftext", "description", "comment_text", "comment_body",
    "text", "message_content", "body", "content",
)
_SENTIMENT_TEXT_KEYS = ("text", "comment_text", "comment_body", "message_content", "body")
_AUTHOR_KEYS = ("author", "author_name", "username", "user")
_AUTHOR_PREFIX_RE = re.compile(r"^(reddit_|youtube_|vk_|discord_|tiktok_)", re.IGNORECASE)


class RawEvent(BaseModel):
    """One row of the backend ``events`` table."""

    event_id: str = ""
    event_timestamp: datetime
    platform: str = ""
    event_type: str
    user_id: str | None = None
    content_id: str | None = None
    value: float | None = None
    properties: dict[str, Any] = Field(default_factory=dict)
    external_event_id: str | None = None

    @field_validator("properties", mode="before")
    @classmethod
    def _empty_properties(cls, value: object) -> object:
        return {} if value is None else value

    @field_validator("event_id", "content_id", "external_event_id", "user_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("event_timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def day(self) -> str:
        return self.event_timestamp.date().isoformat()


# ── Classification helpers ────────────────────────────────────────────────


def is_post_event(event_type: str) -> bool:
    return "post" in event_type or event_type in _MENTION_EVENT_TYPES


def is_comment_event(event_type: str) -> bool:
    return "comment" in event_type


def is_activity_event(event_type: str) -> bool:
    return event_type in ACTIVITY_EVENT_TYPES


def normalize_platform(name: str) -> str:
    """Canonical platform label (``reddit`` → ``Reddit``, ``tiktok`` → ``Tiktok``)."""
    if not name:
        return name
    return _PLATFORM_LABELS.get(name.lower(), name[0].upper() + name[1:])


def _first(props: dict[str, Any], keys: Sequence[str], default: Any = "") -> Any:
    for key in keys:
        value = props.get(key)
        if value:
            return value
    return default


def _has_word(text: str, words: Sequence[str]) -> bool:
    return any(word in text for word in words)


def keyword_sentiment(text: str) -> Sentiment:
    """Lexicon sentiment; a negative hit outranks a positive one."""
    lowered = text.lower()
    if _has_word(lowered, _NEGATIVE_WORDS):
        return "Negative"
    if _has_word(lowered, _POSITIVE_WORDS):
        return "Positive"
    return "Neutral"


def classify_sentiment(props: dict[str, Any]) -> Sentiment:
    """Use the analysed ``sentiment`` property when present, else the lexicons."""
    label = str(props.get("sentiment") or "").lower()
    if label == "positive":
        return "Positive"
    if label == "negative":
        return "Negative"
    if label == "neutral":
        return "Neutral"
    return keyword_sentiment(str(_first(props, _SENTIMENT_TEXT_KEYS)))


def rollup_sentiment(props: dict[str, Any]) -> Sentiment:
    """Sentiment counted in the daily metrics.

    An analysed ``positive``/``negative`` label wins. Otherwise a comment
    counts only when it hits exactly one lexicon; mixed text stays Neutral.
    """
    label = str(props.get("sentiment") or "").lower()
    if label == "negative":
        return "Negative"
    if label == "positive":
        return "Positive"
    text = str(_first(props, _SENTIMENT_TEXT_KEYS)).lower()
    negative = _has_word(text, _NEGATIVE_WORDS)
    positive = _has_word(text, _POSITIVE_WORDS)
    if negative and not positive:
        return "Negative"
    if positive and not negative:
        return "Positive"
    return "Neutral"


def _mask(value: str) -> str:
    if not value:
        return "Anonymous"
    if len(value) == 1:
        return "*"
    if len(value) == 2:
        return value[0] + "*"
    if len(value) == 3:
        return value[0] + "*" + value[2]
    visible = max(2, int(len(value) * 0.25))
    hidden = max(4, len(value) - visible * 2)
    return value[:visible] + "*" * hidden + value[-visible:]


def anonymize_username(username: str | None) -> str:
    """Mask the middle of a username, e.g. ``JohnDoe123`` → ``Jo******23``."""
    if not username or username in ("Anonymous", "[deleted]"):
        return "Anonymous"

    clean = _AUTHOR_PREFIX_RE.sub("", username)
    if not clean:
        return "Anonymous"
    if len(clean) <= 3:
        return clean[0] + "*" + (clean[-1] if len(clean) > 1 else "")
    if "@" in clean:
        local, _, domain = clean.partition("@")
        return f"{_mask(local)}@{domain}"
    return _mask(clean)


def _user_type(platform: str) -> UserType:
    return "Player" if platform.lower() in _PLAYER_PLATFORMS else "Viewer"


# ── Metrics ────────────────────────────────────────────────────────────────


def _number(value: Any) -> float:
    """Numeric property as a float; missing or unparsable values count as 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _event_likes(event: RawEvent) -> float:
    props = event.properties
    likes = 0.0
    score = _number(props.get("score"))
    if score > 1:
        likes += score - 1  # Reddit score counts the author's own upvote
    likes += _number(props.get("like_count"))
    likes += _number(props.get("likes"))

    if event.value and is_post_event(event.event_type):
        if event.event_type in _MENTION_EVENT_TYPES:
            likes += event.value
        else:
            likes += max(0, event.value - 1)
    return likes


def _event_reach(props: dict[str, Any]) -> float:
    return sum(_number(props.get(key)) for key in ("view_count", "views", "impressions"))


class _DayTotals:
    def __init__(self) -> None:
        self.posts = 0
        self.comments = 0
        self.likes = 0.0
        self.reach = 0.0
        self.positive = 0
        self.negative = 0
        self.platforms: dict[str, dict[str, float]] = {}

    def platform(self, name: str) -> dict[str, float]:
        return self.platforms.setdefault(
            name,
            {"daily_mentions": 0, "likes": 0, "comments": 0, "reach": 0, "negative_comments": 0},
        )


def events_to_metrics(events: Sequence[RawEvent]) -> list[MetricRecord]:
    """Roll post and comment events up into one record per day, oldest first."""
    days: dict[str, _DayTotals] = {}

    for event in events:
        etype = event.event_type
        if is_activity_event(etype) or etype == SNAPSHOT_EVENT_TYPE:
            continue

        totals = days.setdefault(event.day, _DayTotals())
        platform = totals.platform(normalize_platform(event.platform))
        props = event.properties

        if is_post_event(etype):
            totals.posts += 1
            platform["daily_mentions"] += 1
        if is_comment_event(etype):
            totals.comments += 1
            platform["comments"] += 1
            platform["daily_mentions"] += 1

            sentiment = rollup_sentiment(props)
            if sentiment == "Negative":
                totals.negative += 1
                platform["negative_comments"] += 1
            elif sentiment == "Positive":
                totals.positive += 1

        if is_post_event(etype) or is_comment_event(etype):
            likes = _event_likes(event)
            totals.likes += likes
            platform["likes"] += likes

        reach = _event_reach(props)
        totals.reach += reach
        platform["reach"] += reach

    metrics = [
        MetricRecord(
            date=day,
            daily_mentions=t.posts + t.comments,
            engagement_score=engagement_score(t.likes, t.comments, t.reach),
            sentiment_percent=sentiment_percent(t.positive, t.positive + t.negative),
            likes=t.likes,
            total_comments=t.comments,
            reach=t.reach,
            negative_comments=t.negative,
            positive_comments=t.positive,
            posts=t.posts,
            by_platform={name: PlatformMetrics(**data) for name, data in t.platforms.items()},
        )
        for day, t in sorted(days.items())
    ]
    logger.info("Aggregated %d events into %d days of metrics", len(events), len(metrics))
    return metrics


# ── Comments ───────────────────────────────────────────────────────────────


def _post_id(event: RawEvent, is_post: bool) -> str | None:
    props = event.properties
    if is_post:
        if event.event_type == "vk_mention":
            return event.content_id
        return (
            props.get("post_id")
            or props.get("video_id")
            or event.content_id
            or event.external_event_id
        )
    return props.get("post_id") or props.get("video_id")


def event_to_comment(event: RawEvent, comment_id: int) -> CommentRecord:
    props = event.properties
    text = str(_first(props, _TEXT_KEYS, "No text"))
    is_post = is_post_event(event.event_type)
    post_id = _post_id(event, is_post)

    return CommentRecord(
        id=comment_id,
        activity_id=0,
        text=text,
        author=anonymize_username(str(_first(props, _AUTHOR_KEYS, "Anonymous"))),
        sentiment=classify_sentiment(props),
        user_type=_user_type(event.platform),
        source=normalize_platform(event.platform),
        timestamp=event.event_timestamp,
        metadata={
            "score": _number(props.get("score")) or event.value or 0,
            "likes": _number(props.get("like_count")) or _number(props.get("likes")),
            "views": _number(props.get("view_count")) or _number(props.get("views")),
            "url": props.get("url") or props.get("permalink"),
            "is_post": is_post,
            "post_id": str(post_id) if post_id is not None else None,
            "post_title": props.get("post_title") or (text if is_post else None),
            "video_urls": props.get("video_urls") or [],
        },
    )


def events_to_comments(events: Sequence[RawEvent]) -> list[CommentRecord]:
    """Convert community post/comment events, numbered from 1.

    Activity and snapshot rows are ignored; rows that fail validation are
    skipped with a warning.
    """
    comments: list[CommentRecord] = []
    for event in events:
        if is_activity_event(event.event_type) or event.event_type == SNAPSHOT_EVENT_TYPE:
            continue
        try:
            comments.append(event_to_comment(event, len(comments) + 1))
        except ValidationError as exc:
            logger.warning("Skipping comment event %s: %s", event.event_id, exc)
    return comments


# ── Activities ─────────────────────────────────────────────────────────────


def _activity_status(event: RawEvent, now: datetime) -> ActivityStatus:
    if event.event_timestamp > now:
        return "Upcoming"
    if event.properties.get("status") == "in_progress":
        return "In Progress"
    return "Completed"


def events_to_activities(
    events: Sequence[RawEvent], now: datetime | None = None
) -> list[ActivityRecord]:
    """Convert developer activity events; rows with an inverted span are skipped."""
    now = now or datetime.now(UTC)
    activities: list[ActivityRecord] = []

    for event in events:
        if not is_activity_event(event.event_type):
            continue
        props = event.properties
        platforms = props.get("platforms") or ([event.platform] if event.platform else [])
        try:
            activities.append(
                ActivityRecord(
                    id=len(activities) + 1,
                    type=ACTIVITY_EVENT_TYPES[event.event_type],
                    date=event.day,
                    start_date=props.get("start_date"),
                    end_date=props.get("end_date"),
                    description=props.get("description") or props.get("title") or event.event_type,
                    status=_activity_status(event, now),
                    platforms=[normalize_platform(p) for p in platforms],
                )
            )
        except ValidationError as exc:
            logger.warning("Skipping activity event %s: %s", event.event_id, exc)

    return activities
