"""Rebuild posts with their replies and rank them for the posts sidebar."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Sequence
from typing import Literal

from gamepulse.models import ALL, CommentRecord, PostGroup

logger = logging.getLogger(__name__)

SortCriterion = Literal["importance", "recent", "comments", "score"]

_CRITERIA: dict[str, SortCriterion] = {
    "importance": "importance",
    "recent": "recent",
    "comments": "comments",
    "mostComments": "comments",
    "score": "score",
    "highestScore": "score",
}

# Each reply is worth this many score points when ranking by importance.
_W_REPLY = 5


def parse_criterion(value: str) -> SortCriterion:
    """Map a sort option (including UI aliases) to its canonical name."""
    try:
        return _CRITERIA[value]
    except KeyError:
        raise ValueError(
            f"Unknown sort criterion '{value}'; expected one of {sorted(_CRITERIA)}"
        ) from None


def _post_score(group: PostGroup) -> float:
    return group.post.metadata.score or 0


def importance(group: PostGroup) -> float:
    """Ranking score: the post's own score plus 5 points per reply."""
    return _post_score(group) + group.reply_count * _W_REPLY


_SORT_KEYS: dict[SortCriterion, Callable[[PostGroup], object]] = {
    "importance": importance,
    "recent": lambda g: g.post.timestamp,
    "comments": lambda g: g.reply_count,
    "score": _post_score,
}


def group_posts(comments: Sequence[CommentRecord]) -> list[PostGroup]:
    """Group replies under their post, most important first.

    Records without a ``post_id`` and replies whose post is not in
    *comments* are dropped.
    """
    posts: list[CommentRecord] = []
    replies: dict[str, list[CommentRecord]] = defaultdict(list)

    for comment in comments:
        post_id = comment.metadata.post_id
        if not post_id:
            continue
        if comment.metadata.is_post:
            posts.append(comment)
        else:
            replies[post_id].append(comment)

    groups: list[PostGroup] = []
    for post in posts:
        thread = list(replies.get(post.metadata.post_id, []))
        groups.append(PostGroup(post=post, replies=thread, reply_count=len(thread)))

    post_ids = {p.metadata.post_id for p in posts}
    orphans = sum(len(r) for pid, r in replies.items() if pid not in post_ids)
    logger.info(
        "Grouped %d records into %d posts (%d orphan replies dropped)",
        len(comments),
        len(groups),
        orphans,
    )
    return sort_posts(groups)


def sort_posts(
    groups: Sequence[PostGroup], criterion: str = "importance"
) -> list[PostGroup]:
    """Sort descending by *criterion*; exact ties keep their input order."""
    key = _SORT_KEYS[parse_criterion(criterion)]
    return sorted(groups, key=key, reverse=True)  # type: ignore[arg-type]


def filter_posts(
    groups: Sequence[PostGroup],
    sentiment: str = ALL,
    platform: str = ALL,
) -> list[PostGroup]:
    """Keep groups whose *post* matches; replies are never inspected."""
    return [
        g
        for g in groups
        if (sentiment == ALL or g.post.sentiment == sentiment)
        and (platform == ALL or g.post.source == platform)
    ]


def select_posts(
    groups: Sequence[PostGroup],
    sentiment: str = ALL,
    platform: str = ALL,
    criterion: str = "importance",
) -> list[PostGroup]:
    """Filter by the post's sentiment and platform, then sort."""
    return sort_posts(filter_posts(groups, sentiment, platform), criterion)
