"""Unit tests for the community sentiment pulse."""

from gamepulse.models import CommentRecord
from gamepulse.pulse import key_comments, sentiment_pulse, verdict_for


def _comments(positive: int = 0, negative: int = 0, neutral: int = 0) -> list[CommentRecord]:
    labels = ["Positive"] * positive + ["Negative"] * negative + ["Neutral"] * neutral
    return [
        CommentRecord(id=i, sentiment=label, timestamp="2024-06-01T10:00:00Z")
        for i, label in enumerate(labels, start=1)
    ]


def _weighted(comment_id: int, sentiment: str, score: float = 0, likes: float = 0, views: float = 0) -> CommentRecord:
    return CommentRecord(
        id=comment_id,
        sentiment=sentiment,
        timestamp="2024-06-01T10:00:00Z",
        metadata={"score": score, "likes": likes, "views": views},
    )


class TestSentimentPulse:
    def test_just_positive(self) -> None:
        pulse = sentiment_pulse(_comments(positive=61, negative=39))
        assert (pulse.score, pulse.verdict) == (61, "Positive")

    def test_upper_bound_is_neutral(self) -> None:
        pulse = sentiment_pulse(_comments(positive=60, negative=40))
        assert (pulse.score, pulse.verdict) == (60, "Neutral")

    def test_lower_bound_is_neutral(self) -> None:
        pulse = sentiment_pulse(_comments(positive=40, negative=60))
        assert (pulse.score, pulse.verdict) == (40, "Neutral")

    def test_just_negative(self) -> None:
        pulse = sentiment_pulse(_comments(positive=39, negative=61))
        assert (pulse.score, pulse.verdict) == (39, "Negative")

    def test_no_opinions(self) -> None:
        pulse = sentiment_pulse(_comments(neutral=10))
        assert (pulse.score, pulse.verdict) == (50, "Neutral")

    def test_empty(self) -> None:
        pulse = sentiment_pulse([])
        assert (pulse.score, pulse.verdict) == (50, "Neutral")

    def test_neutral_not_in_denominator(self) -> None:
        pulse = sentiment_pulse(_comments(positive=3, negative=1, neutral=10))
        assert (pulse.score, pulse.verdict) == (75, "Positive")

    def test_prefiltered_by_sentiment(self) -> None:
        pulse = sentiment_pulse(_comments(positive=5, negative=2), sentiment="Negative")
        assert (pulse.score, pulse.verdict) == (0, "Negative")


class TestVerdict:
    def test_bands(self) -> None:
        assert verdict_for(61) == "Positive"
        assert verdict_for(60) == "Neutral"
        assert verdict_for(40) == "Neutral"
        assert verdict_for(39) == "Negative"


class TestKeyComments:
    def test_weightiest_of_each(self) -> None:
        comments = [
            _weighted(1, "Positive", score=10),
            _weighted(2, "Positive", likes=5, views=1000),  # 15
            _weighted(3, "Negative", score=3),
            _weighted(4, "Neutral", score=100),
        ]
        picked = key_comments(comments)
        assert picked.positive is not None and picked.positive.id == 2
        assert picked.negative is not None and picked.negative.id == 3

    def test_missing_side(self) -> None:
        picked = key_comments([_weighted(1, "Positive")])
        assert picked.negative is None
