"""Unit tests for the date/platform filter engine."""

from datetime import date

import pytest

from gamepulse.filters import filter_dataset
from gamepulse.models import (
    ActivityRecord,
    CommentRecord,
    DateRange,
    FilterSpec,
    MetricRecord,
    PlatformMetrics,
)


def _metric(day: str, **platforms: PlatformMetrics) -> MetricRecord:
    return MetricRecord(date=day, daily_mentions=10, likes=5, by_platform=platforms or None)


def _activity(activity_id: int, day: str, platforms: list[str] | None = None) -> ActivityRecord:
    return ActivityRecord(id=activity_id, date=day, platforms=platforms or [])


def _comment(comment_id: int, timestamp: str, source: str = "Reddit") -> CommentRecord:
    return CommentRecord(id=comment_id, timestamp=timestamp, source=source)


def _days(n: int) -> list[MetricRecord]:
    return [_metric(f"2024-01-0{i}") for i in range(1, n + 1)]


def _window(start: str, end: str, platform: str = "all") -> FilterSpec:
    return FilterSpec(date_range=DateRange(start=start, end=end), platform=platform)


class TestDateWindow:
    def test_inclusive_bounds(self) -> None:
        result = filter_dataset(_days(5), [], [], _window("2024-01-02", "2024-01-04"))
        assert [m.date for m in result.metrics] == ["2024-01-02", "2024-01-03", "2024-01-04"]

    def test_single_day(self) -> None:
        result = filter_dataset(_days(5), [], [], _window("2024-01-03", "2024-01-03"))
        assert [m.date for m in result.metrics] == ["2024-01-03"]

    def test_all_passes_everything(self) -> None:
        comments = [_comment(1, "1999-01-01T00:00:00Z")]
        result = filter_dataset(_days(5), [_activity(1, "2030-01-01")], comments, FilterSpec.all())
        assert len(result.metrics) == 5
        assert len(result.activities) == 1
        assert len(result.comments) == 1

    def test_comments_use_date_portion(self) -> None:
        comments = [
            _comment(1, "2024-01-01T23:59:59Z"),
            _comment(2, "2024-01-02T00:00:00Z"),
            _comment(3, "2024-01-04T23:59:59+00:00"),
            _comment(4, "2024-01-05T00:00:01Z"),
        ]
        result = filter_dataset([], [], comments, _window("2024-01-02", "2024-01-04"))
        assert [c.id for c in result.comments] == [2, 3]

    def test_activities_by_date(self) -> None:
        activities = [_activity(1, "2024-01-01"), _activity(2, "2024-01-03")]
        result = filter_dataset([], activities, [], _window("2024-01-02", "2024-01-04"))
        assert [a.id for a in result.activities] == [2]


class TestPlatform:
    def test_metrics_resolved_not_dropped(self) -> None:
        metrics = [
            _metric("2024-01-01", Reddit=PlatformMetrics(likes=10, comments=2, reach=100)),
            _metric("2024-01-02", Youtube=PlatformMetrics(likes=50)),
        ]
        result = filter_dataset(metrics, [], [], FilterSpec.all(platform="Reddit"))
        assert [m.date for m in result.metrics] == ["2024-01-01", "2024-01-02"]
        assert result.metrics[0].engagement_score == 29
        assert result.metrics[1].likes == 0
        assert result.metrics[1].sentiment_percent == 50

    def test_comments_by_source(self) -> None:
        comments = [
            _comment(1, "2024-01-01T10:00:00Z", "Reddit"),
            _comment(2, "2024-01-01T10:00:00Z", "Youtube"),
            _comment(3, "2024-01-01T11:00:00Z", "Reddit"),
        ]
        result = filter_dataset([], [], comments, FilterSpec.all(platform="Reddit"))
        assert [c.id for c in result.comments] == [1, 3]

    def test_activities_listing_platform_or_none(self) -> None:
        activities = [
            _activity(1, "2024-01-01", ["Reddit", "Discord"]),
            _activity(2, "2024-01-01", ["Youtube"]),
            _activity(3, "2024-01-01", []),
        ]
        result = filter_dataset([], activities, [], FilterSpec.all(platform="Reddit"))
        assert [a.id for a in result.activities] == [1, 3]

    def test_combined_with_window(self) -> None:
        metrics = [_metric(f"2024-01-0{i}", Reddit=PlatformMetrics(likes=i)) for i in range(1, 6)]
        result = filter_dataset(metrics, [], [], _window("2024-01-02", "2024-01-03", "Reddit"))
        assert [m.likes for m in result.metrics] == [2, 3]


class TestPurity:
    def test_inputs_untouched_and_repeatable(self) -> None:
        metrics = [_metric("2024-01-01", Reddit=PlatformMetrics(likes=10, comments=2))]
        activities = [_activity(1, "2024-01-01", ["Reddit"])]
        comments = [_comment(1, "2024-01-01T10:00:00Z")]
        spec = FilterSpec.all(platform="Reddit")
        before = [m.model_dump() for m in metrics]

        first = filter_dataset(metrics, activities, comments, spec)
        second = filter_dataset(metrics, activities, comments, spec)

        assert first == second
        assert [m.model_dump() for m in metrics] == before
        assert metrics[0].engagement_score == 0

    def test_empty(self) -> None:
        result = filter_dataset([], [], [], FilterSpec.all(platform="Reddit"))
        assert result.metrics == []
        assert result.activities == []
        assert result.comments == []


class TestFilterSpec:
    def test_custom_range(self) -> None:
        spec = FilterSpec.custom("2024-01-01", "2024-03-31")
        assert spec.date_range == DateRange(start="2024-01-01", end="2024-03-31")

    def test_custom_range_too_long(self) -> None:
        with pytest.raises(ValueError, match="90-day"):
            FilterSpec.custom("2024-01-01", "2024-04-01")

    def test_custom_range_inverted(self) -> None:
        with pytest.raises(ValueError):
            FilterSpec.custom("2024-01-05", "2024-01-01")

    def test_today(self) -> None:
        spec = FilterSpec.today(platform="Vk", today=date(2024, 6, 1))
        assert spec.date_range == DateRange(start="2024-06-01", end="2024-06-01")
        assert spec.platform == "Vk"
