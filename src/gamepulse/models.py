"""Domain models shared by the filtering, aggregation and grouping code."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

Sentiment = Literal["Positive", "Negative", "Neutral"]
UserType = Literal["Player", "Viewer"]
ActivityStatus = Literal["Upcoming", "In Progress", "Completed"]
ActivityType = Literal[
    "Release",
    "Hotfix",
    "Marketing Campaign",
    "Community Event",
    "PR Publication",
]

ALL = "all"


class _Record(BaseModel):
    """Immutable record; accepts both snake_case and the backend's camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ── Metrics ────────────────────────────────────────────────────────────────


class PlatformMetrics(_Record):
    daily_mentions: float = Field(default=0, ge=0)
    likes: float = Field(default=0, ge=0)
    comments: float = Field(default=0, ge=0)
    reach: float = Field(default=0, ge=0)
    negative_comments: float = Field(default=0, ge=0)


class MetricRecord(_Record):
    """One calendar day of aggregate social metrics."""

    date: str  # YYYY-MM-DD
    daily_mentions: float = Field(default=0, ge=0)
    engagement_score: float = Field(default=0, ge=0)
    sentiment_percent: float = Field(default=0, ge=0, le=100)
    likes: float = Field(default=0, ge=0)
    total_comments: float = Field(default=0, ge=0)
    reach: float = Field(default=0, ge=0)
    negative_comments: float = Field(default=0, ge=0)
    positive_comments: float | None = Field(default=None, ge=0)
    posts: float | None = Field(default=None, ge=0)
    by_platform: dict[str, PlatformMetrics] | None = None


# ── Activities ─────────────────────────────────────────────────────────────


class ActivityRecord(_Record):
    """A production or marketing event shown on the timeline."""

    id: int
    type: ActivityType = "Community Event"
    date: str
    start_date: str | None = None
    end_date: str | None = None
    description: str = ""
    status: ActivityStatus = "Completed"
    platforms: list[str] = Field(default_factory=list)  # empty = every platform

    @model_validator(mode="after")
    def _check_span(self) -> ActivityRecord:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
        return self


# ── Comments ───────────────────────────────────────────────────────────────


class CommentMetadata(_Record):
    is_post: bool | None = None
    post_id: str | None = None
    post_title: str | None = None
    score: float | None = None
    likes: float | None = None
    views: float | None = None
    url: str | None = None
    video_urls: list[str] = Field(default_factory=list)

    @field_validator("post_id", mode="before")
    @classmethod
    def _stringify_post_id(cls, value: object) -> object:
        # Backends hand out numeric ids for some platforms.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class CommentRecord(_Record):
    """A single community post or reply."""

    id: int
    activity_id: int = 0
    text: str = ""
    author: str = "Anonymous"
    sentiment: Sentiment = "Neutral"
    user_type: UserType = "Viewer"
    source: str = ""
    timestamp: datetime
    metadata: CommentMetadata = Field(default_factory=CommentMetadata)

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @field_validator("metadata", mode="before")
    @classmethod
    def _empty_metadata(cls, value: object) -> object:
        return {} if value is None else value

    @property
    def day(self) -> str:
        """Date portion of the timestamp as ``YYYY-MM-DD``."""
        return self.timestamp.date().isoformat()


class PostGroup(_Record):
    post: CommentRecord
    replies: list[CommentRecord] = Field(default_factory=list)
    reply_count: int = 0


# ── Filter spec ────────────────────────────────────────────────────────────


class DateRange(_Record):
    """Inclusive ``[start, end]`` window of ``YYYY-MM-DD`` days."""

    start: str
    end: str

    def contains(self, day: str) -> bool:
        return self.start <= day <= self.end


class FilterSpec(_Record):
    date_range: DateRange | Literal["all"] = ALL
    platform: str = ALL

    @classmethod
    def all(cls, platform: str = ALL) -> FilterSpec:
        return cls(date_range=ALL, platform=platform)

    @classmethod
    def today(cls, platform: str = ALL, today: date | None = None) -> FilterSpec:
        day = (today or datetime.now(UTC).date()).isoformat()
        return cls(date_range=DateRange(start=day, end=day), platform=platform)

    @classmethod
    def custom(
        cls,
        start: str,
        end: str,
        platform: str = ALL,
        max_days: int = 90,
    ) -> FilterSpec:
        """Build a custom window, refusing spans longer than *max_days*."""
        start_day = date.fromisoformat(start)
        end_day = date.fromisoformat(end)
        if start_day > end_day:
            raise ValueError(f"Range start {start} is after range end {end}")
        if end_day - start_day > timedelta(days=max_days):
            raise ValueError(
                f"Range {start}..{end} exceeds the {max_days}-day maximum"
            )
        return cls(
            date_range=DateRange(start=start_day.isoformat(), end=end_day.isoformat()),
            platform=platform,
        )


class FilteredDataset(BaseModel):
    metrics: list[MetricRecord] = Field(default_factory=list)
    activities: list[ActivityRecord] = Field(default_factory=list)
    comments: list[CommentRecord] = Field(default_factory=list)


# ── Derived views ──────────────────────────────────────────────────────────


class Summary(BaseModel):
    days: int
    total_mentions: float = 0
    total_engagement: float = 0
    total_sentiment: float = 0
    total_likes: float = 0
    total_comments: float = 0
    total_reach: float = 0
    total_negative_comments: float = 0
    total_positive_comments: float = 0
    avg_sentiment_percent: int = 0
    avg_mentions_per_day: int = 0
    engagement_rate: float = 0.0
    top_platform: str = "N/A"
    top_platform_mentions: float = 0


class SentimentPulse(BaseModel):
    score: int = 50
    verdict: Sentiment = "Neutral"


class KeyComments(BaseModel):
    positive: CommentRecord | None = None
    negative: CommentRecord | None = None


class PlatformShare(BaseModel):
    platform: str
    value: float
    percentage: float


class MetricChange(BaseModel):
    field: str
    current: float
    previous: float | None = None
    change: float = 0.0


class StrategicBrief(BaseModel):
    date: str
    platform_filter: str = ALL
    brief_text: str
    created_at: datetime | None = None


class ActivityImpact(BaseModel):
    activity_id: int
    start_date: str
    impact_date: str
    changes: dict[str, float] = Field(default_factory=dict)
    comments: list[CommentRecord] = Field(default_factory=list)
    positive_comments: list[CommentRecord] = Field(default_factory=list)
    negative_comments: list[CommentRecord] = Field(default_factory=list)


class DashboardView(BaseModel):
    """Everything the rendering layer needs for one filter selection."""

    spec: FilterSpec
    dataset: FilteredDataset
    summary: Summary | None = None
    changes: list[MetricChange] = Field(default_factory=list)
    platform_shares: list[PlatformShare] = Field(default_factory=list)
    pulse: SentimentPulse = Field(default_factory=SentimentPulse)
    key_comments: KeyComments = Field(default_factory=KeyComments)
    posts: list[PostGroup] = Field(default_factory=list)
    impacts: dict[int, ActivityImpact] = Field(default_factory=dict)
    brief: StrategicBrief | None = None

    @property
    def range_label(self) -> str:
        if self.spec.date_range == ALL:
            return "all time"
        rng = self.spec.date_range
        return rng.start if rng.start == rng.end else f"{rng.start} – {rng.end}"
