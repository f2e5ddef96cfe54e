"""Render a dashboard view as a Markdown report."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from gamepulse.models import ALL, CommentRecord, DashboardView, Summary
from gamepulse.posts import importance

logger = logging.getLogger(__name__)

_FIELD_LABELS: dict[str, str] = {
    "daily_mentions": "Daily mentions",
    "engagement_score": "Engagement score",
    "sentiment_percent": "Sentiment %",
    "likes": "Likes",
    "total_comments": "Comments",
    "reach": "Reach",
    "negative_comments": "Negative comments",
}
_TOP_POSTS = 10
_SNIPPET = 160


def _snippet(text: str) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= _SNIPPET else flat[: _SNIPPET - 1] + "…"


def _comment_line(label: str, comment: CommentRecord | None) -> str:
    if comment is None:
        return f"- **{label}:** _none_"
    return f"- **{label}** ({comment.source}, {comment.author}): {_snippet(comment.text)}"


def _summary_table(summary: Summary) -> list[str]:
    rows = [
        ("Days", f"{summary.days}"),
        ("Total mentions", f"{summary.total_mentions:,.0f}"),
        ("Avg mentions / day", f"{summary.avg_mentions_per_day:,}"),
        ("Total engagement", f"{summary.total_engagement:,.0f}"),
        ("Engagement rate", f"{summary.engagement_rate:.2f}%"),
        ("Avg sentiment", f"{summary.avg_sentiment_percent}%"),
        ("Likes", f"{summary.total_likes:,.0f}"),
        ("Comments", f"{summary.total_comments:,.0f}"),
        ("Positive / negative", f"{summary.total_positive_comments:,.0f} / {summary.total_negative_comments:,.0f}"),
        ("Reach", f"{summary.total_reach:,.0f}"),
        ("Top platform", f"{summary.top_platform} ({summary.top_platform_mentions:,.0f} mentions)"),
    ]
    lines = ["| Metric | Value |", "|---|---|"]
    lines.extend(f"| {name} | {value} |" for name, value in rows)
    return lines


def render_report(view: DashboardView, generated_at: datetime | None = None) -> str:
    """Return the report for *view* as a Markdown string."""
    generated_at = generated_at or datetime.now(UTC)
    platform = "All platforms" if view.spec.platform == ALL else view.spec.platform
    lines: list[str] = [
        f"# Community Pulse — {platform}, {view.range_label}",
        "",
        f"_Generated {generated_at.strftime('%Y-%m-%d %H:%M UTC')}_",
        "",
        "## Summary",
        "",
    ]

    if view.summary is None:
        lines.append("_No metrics in the selected range._")
    else:
        lines.extend(_summary_table(view.summary))

    if view.changes:
        lines += ["", "## Latest day", ""]
        for change in view.changes:
            label = _FIELD_LABELS.get(change.field, change.field)
            lines.append(f"- {label}: {change.current:,.0f} ({change.change:+.1f}%)")

    if view.platform_shares:
        lines += ["", "## Platform share of mentions", ""]
        for share in view.platform_shares:
            pct = f"{share.percentage:.1f}" if share.percentage < 1 else f"{share.percentage:.0f}"
            lines.append(f"- {share.platform}: {share.value:,.0f} ({pct}%)")

    lines += [
        "",
        "## Community pulse",
        "",
        f"**{view.pulse.verdict}** — {view.pulse.score}/100",
        "",
        _comment_line("Top positive", view.key_comments.positive),
        _comment_line("Top negative", view.key_comments.negative),
    ]

    lines += ["", f"## Top posts ({len(view.posts)} total)", ""]
    if not view.posts:
        lines.append("_No posts in the selected range._")
    for group in view.posts[:_TOP_POSTS]:
        title = group.post.metadata.post_title or group.post.text
        lines.append(
            f"- [{group.post.source}] {_snippet(title)} "
            f"— {group.reply_count} replies, importance {importance(group):,.0f}"
        )

    if view.dataset.activities:
        lines += ["", "## Activities", ""]
        for activity in view.dataset.activities:
            span = (
                f"{activity.start_date} → {activity.end_date}"
                if activity.start_date and activity.end_date
                else activity.date
            )
            line = f"- {span} · {activity.type} · {activity.status}: {activity.description}"
            impact = view.impacts.get(activity.id)
            if impact is not None:
                line += (
                    f" (engagement {impact.changes['engagement_score']:+.0f}%, "
                    f"sentiment {impact.changes['sentiment_percent']:+.0f}% "
                    f"by {impact.impact_date})"
                )
            lines.append(line)

    if view.brief is not None:
        lines += ["", "## Strategic brief", "", view.brief.brief_text.strip()]

    return "\n".join(lines) + "\n"


def write_report(
    view: DashboardView,
    output_dir: Path,
    generated_at: datetime | None = None,
) -> Path:
    """Write the report to ``output_dir/report-<platform>-<timestamp>.md``."""
    generated_at = generated_at or datetime.now(UTC)
    output_dir.mkdir(parents=True, exist_ok=True)
    slug = view.spec.platform.lower().replace(" ", "-")
    path = output_dir / f"report-{slug}-{generated_at.strftime('%Y%m%d-%H%M%S')}.md"
    path.write_text(render_report(view, generated_at), encoding="utf-8")
    logger.info("Wrote report to %s", path)
    return path
