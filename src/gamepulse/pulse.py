"""Community sentiment pulse: an overall verdict and a 0-100 score."""

from __future__ import annotations

from collections.abc import Sequence

from gamepulse.breakdown import NEUTRAL_SENTIMENT
from gamepulse.models import ALL, CommentRecord, KeyComments, Sentiment, SentimentPulse
from gamepulse.rounding import round_half_up

# Scores inside [40, 60] read as Neutral.
_POSITIVE_ABOVE = 60
_NEGATIVE_BELOW = 40


def verdict_for(score: int) -> Sentiment:
    if score > _POSITIVE_ABOVE:
        return "Positive"
    if score < _NEGATIVE_BELOW:
        return "Negative"
    return "Neutral"


def sentiment_pulse(
    comments: Sequence[CommentRecord], sentiment: str = ALL
) -> SentimentPulse:
    """Positive share of opinionated comments; Neutral ones carry no vote."""
    if sentiment != ALL:
        comments = [c for c in comments if c.sentiment == sentiment]

    positive = sum(1 for c in comments if c.sentiment == "Positive")
    negative = sum(1 for c in comments if c.sentiment == "Negative")
    if positive + negative == 0:
        return SentimentPulse(score=NEUTRAL_SENTIMENT, verdict="Neutral")

    score = round_half_up(positive / (positive + negative) * 100)
    return SentimentPulse(score=score, verdict=verdict_for(score))


def comment_weight(comment: CommentRecord) -> float:
    m = comment.metadata
    return (m.score or 0) + (m.likes or 0) + (m.views or 0) / 100


def key_comments(comments: Sequence[CommentRecord]) -> KeyComments:
    """The weightiest Positive and Negative comment, if any."""
    ranked = sorted(comments, key=comment_weight, reverse=True)
    return KeyComments(
        positive=next((c for c in ranked if c.sentiment == "Positive"), None),
        negative=next((c for c in ranked if c.sentiment == "Negative"), None),
    )
