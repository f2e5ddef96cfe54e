"""Unit tests for the synthetic fallback dataset."""

from datetime import date, timedelta

from gamepulse.breakdown import engagement_score
from gamepulse.demo import PLATFORMS, generate_activities, generate_comments, generate_metrics
from gamepulse.posts import group_posts

TODAY = date(2024, 6, 30)


class TestActivities:
    def test_timeline(self) -> None:
        activities = generate_activities(TODAY)
        assert [a.id for a in activities] == [1, 2, 3, 4, 5, 6, 7]
        upcoming = [a for a in activities if a.status == "Upcoming"]
        assert [a.id for a in upcoming] == [6]
        assert upcoming[0].platforms == []
        assert upcoming[0].start_date > TODAY.isoformat()


class TestMetrics:
    def test_one_record_per_day_oldest_first(self) -> None:
        metrics = generate_metrics(generate_activities(TODAY), days=30, today=TODAY, seed=7)
        assert len(metrics) == 30
        assert metrics[0].date == (TODAY - timedelta(days=29)).isoformat()
        assert metrics[-1].date == TODAY.isoformat()
        assert [m.date for m in metrics] == sorted(m.date for m in metrics)

    def test_seeded_runs_match(self) -> None:
        activities = generate_activities(TODAY)
        first = generate_metrics(activities, days=10, today=TODAY, seed=3)
        second = generate_metrics(activities, days=10, today=TODAY, seed=3)
        assert first == second

    def test_totals_match_breakdown(self) -> None:
        for m in generate_metrics(generate_activities(TODAY), days=20, today=TODAY, seed=1):
            assert m.by_platform is not None
            assert list(m.by_platform) == list(PLATFORMS)
            parts = m.by_platform.values()
            assert m.daily_mentions == sum(p.daily_mentions for p in parts)
            assert m.likes == sum(p.likes for p in parts)
            assert m.total_comments == sum(p.comments for p in parts)
            assert m.negative_comments == sum(p.negative_comments for p in parts)
            assert m.engagement_score == engagement_score(m.likes, m.total_comments, m.reach)
            assert 0 <= m.sentiment_percent <= 100


class TestComments:
    def test_threads_are_complete(self) -> None:
        activities = generate_activities(TODAY)
        comments = generate_comments(activities, today=TODAY, seed=5)
        groups = group_posts(comments)

        # six activities have started, three posts each
        assert len(groups) == 18
        assert sum(g.reply_count for g in groups) + len(groups) == len(comments)
        assert all(c.activity_id != 6 for c in comments)
        assert [c.id for c in comments] == list(range(1, len(comments) + 1))

    def test_seeded_runs_match(self) -> None:
        activities = generate_activities(TODAY)
        assert generate_comments(activities, today=TODAY, seed=2) == generate_comments(
            activities, today=TODAY, seed=2
        )
