"""Unit tests for post grouping, ranking and filtering."""

import pytest

from gamepulse.models import CommentRecord
from gamepulse.posts import filter_posts, group_posts, importance, select_posts, sort_posts


def _make(
    comment_id: int,
    post_id: str | None,
    is_post: bool = False,
    score: float | None = None,
    timestamp: str = "2024-06-01T10:00:00Z",
    sentiment: str = "Neutral",
    source: str = "Reddit",
) -> CommentRecord:
    return CommentRecord(
        id=comment_id,
        text=f"comment {comment_id}",
        sentiment=sentiment,
        source=source,
        timestamp=timestamp,
        metadata={"is_post": is_post, "post_id": post_id, "score": score},
    )


class TestGroupPosts:
    def test_replies_attach_in_order(self) -> None:
        comments = [
            _make(1, "p1", is_post=True),
            _make(2, "p1"),
            _make(3, "p2", is_post=True),
            _make(4, "p1"),
            _make(5, "p2"),
        ]
        groups = {g.post.id: g for g in group_posts(comments)}
        assert [r.id for r in groups[1].replies] == [2, 4]
        assert groups[1].reply_count == 2
        assert [r.id for r in groups[3].replies] == [5]

    def test_reply_before_post(self) -> None:
        groups = group_posts([_make(2, "p1"), _make(1, "p1", is_post=True)])
        assert [r.id for r in groups[0].replies] == [2]

    def test_orphan_reply_dropped(self) -> None:
        comments = [_make(1, "p1", is_post=True), _make(2, "missing")]
        groups = group_posts(comments)
        assert len(groups) == 1
        assert groups[0].replies == []
        for view in (
            select_posts(groups, sentiment="Neutral"),
            select_posts(groups, platform="Reddit"),
        ):
            assert all(r.id != 2 for g in view for r in g.replies)
            assert all(g.post.id != 2 for g in view)

    def test_records_without_post_id_dropped(self) -> None:
        comments = [
            _make(1, None, is_post=True),
            _make(2, None),
            CommentRecord(id=3, timestamp="2024-06-01T10:00:00Z"),
        ]
        assert group_posts(comments) == []

    def test_numeric_post_ids_match(self) -> None:
        post = CommentRecord(
            id=1, timestamp="2024-06-01T10:00:00Z", metadata={"isPost": True, "postId": 42}
        )
        reply = CommentRecord(
            id=2, timestamp="2024-06-01T10:00:00Z", metadata={"post_id": "42"}
        )
        groups = group_posts([post, reply])
        assert groups[0].reply_count == 1

    def test_default_order_by_importance(self) -> None:
        comments = [
            _make(1, "a", is_post=True, score=10),
            _make(2, "b", is_post=True, score=0),
            _make(3, "b"),
            _make(4, "b"),
            _make(5, "b"),
        ]
        groups = group_posts(comments)
        # b: 0 + 3*5 = 15 beats a: 10
        assert [g.post.id for g in groups] == [2, 1]
        assert importance(groups[0]) == 15

    def test_empty(self) -> None:
        assert group_posts([]) == []

    def test_input_untouched(self) -> None:
        comments = [_make(1, "p1", is_post=True), _make(2, "p1")]
        before = [c.model_dump() for c in comments]
        assert group_posts(comments) == group_posts(comments)
        assert [c.model_dump() for c in comments] == before


class TestSortPosts:
    def _groups(self):
        return group_posts(
            [
                _make(1, "a", is_post=True, score=5, timestamp="2024-06-01T10:00:00Z"),
                _make(2, "b", is_post=True, score=50, timestamp="2024-06-03T10:00:00Z"),
                _make(3, "c", is_post=True, score=5, timestamp="2024-06-02T10:00:00Z"),
                _make(4, "a"),
                _make(5, "a"),
                _make(6, "c"),
            ]
        )

    def test_recent(self) -> None:
        assert [g.post.id for g in sort_posts(self._groups(), "recent")] == [2, 3, 1]

    def test_comments(self) -> None:
        assert [g.post.id for g in sort_posts(self._groups(), "comments")] == [1, 3, 2]
        assert [g.post.id for g in sort_posts(self._groups(), "mostComments")] == [1, 3, 2]

    def test_score_ties_keep_order(self) -> None:
        groups = self._groups()
        expected = [2] + [g.post.id for g in groups if g.post.id != 2]
        assert [g.post.id for g in sort_posts(groups, "score")] == expected
        assert [g.post.id for g in sort_posts(groups, "highestScore")] == expected

    def test_stable_on_exact_ties(self) -> None:
        groups = group_posts(
            [_make(i, f"p{i}", is_post=True, score=1) for i in range(1, 6)]
        )
        assert [g.post.id for g in sort_posts(groups, "importance")] == [1, 2, 3, 4, 5]

    def test_unknown_criterion(self) -> None:
        with pytest.raises(ValueError):
            sort_posts(self._groups(), "likes")


class TestFilterPosts:
    def test_uses_post_sentiment_only(self) -> None:
        groups = group_posts(
            [
                _make(1, "a", is_post=True, sentiment="Positive"),
                _make(2, "a", sentiment="Negative"),
                _make(3, "b", is_post=True, sentiment="Negative"),
            ]
        )
        positive = filter_posts(groups, sentiment="Positive")
        assert [g.post.id for g in positive] == [1]
        assert [r.id for r in positive[0].replies] == [2]

    def test_platform(self) -> None:
        groups = group_posts(
            [
                _make(1, "a", is_post=True, source="Reddit"),
                _make(2, "b", is_post=True, source="Vk"),
                _make(3, "b", source="Reddit"),
            ]
        )
        assert [g.post.id for g in filter_posts(groups, platform="Reddit")] == [1]

    def test_select_filters_then_sorts(self) -> None:
        groups = group_posts(
            [
                _make(1, "a", is_post=True, sentiment="Positive", timestamp="2024-06-01T10:00:00Z"),
                _make(2, "b", is_post=True, sentiment="Negative", timestamp="2024-06-05T10:00:00Z"),
                _make(3, "c", is_post=True, sentiment="Positive", timestamp="2024-06-03T10:00:00Z"),
            ]
        )
        selected = select_posts(groups, sentiment="Positive", criterion="recent")
        assert [g.post.id for g in selected] == [3, 1]
