"""Pipeline orchestration: load, filter, compute views, brief, report."""

from __future__ import annotations

import logging
import sys
from datetime import UTC, date, datetime
from pathlib import Path

from gamepulse import config
from gamepulse.aggregate import aggregate, platform_distribution
from gamepulse.backend import NON_COMMUNITY_EVENT_TYPES, BackendClient, BackendError
from gamepulse.change import activity_impact, latest_change
from gamepulse.demo import generate_activities, generate_comments, generate_metrics
from gamepulse.events import (
    ACTIVITY_EVENT_TYPES,
    events_to_activities,
    events_to_comments,
    events_to_metrics,
)
from gamepulse.filters import filter_dataset
from gamepulse.llm import BriefWriter
from gamepulse.models import ALL, DashboardView, FilteredDataset, FilterSpec, StrategicBrief
from gamepulse.posts import group_posts, select_posts
from gamepulse.pulse import key_comments, sentiment_pulse
from gamepulse.report import write_report
from gamepulse.store import BriefStore

logger = logging.getLogger(__name__)

CHANGE_FIELDS: tuple[str, ...] = (
    "daily_mentions",
    "engagement_score",
    "sentiment_percent",
    "likes",
    "total_comments",
    "reach",
    "negative_comments",
)
_ACTIVITY_LIMIT = 100


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


# ── Loading ────────────────────────────────────────────────────────────────


def demo_dataset(
    days: int = config.DAYS, today: date | None = None, seed: int | None = None
) -> FilteredDataset:
    activities = generate_activities(today)
    return FilteredDataset(
        metrics=generate_metrics(activities, days=days, today=today, seed=seed),
        activities=activities,
        comments=generate_comments(activities, today=today, seed=seed),
    )


def fetch_dataset(client: BackendClient, days: int = config.DAYS) -> FilteredDataset:
    """Pull the last *days* days from the backend and convert them to records."""
    activity_events = client.fetch_events(
        days,
        include_types=list(ACTIVITY_EVENT_TYPES),
        newest_first=True,
        limit=_ACTIVITY_LIMIT,
    )
    community = client.fetch_events(days, exclude_types=NON_COMMUNITY_EVENT_TYPES)
    newest = sorted(community, key=lambda e: e.event_timestamp, reverse=True)

    return FilteredDataset(
        metrics=events_to_metrics(community),
        activities=events_to_activities(activity_events),
        comments=events_to_comments(newest[: config.EVENT_LIMIT]),
    )


def load_dataset(days: int = config.DAYS, demo: bool = False) -> tuple[FilteredDataset, str]:
    """Return the raw dataset and its source (``"backend"`` or ``"demo"``).

    Falls back to the synthetic dataset when the backend is not configured,
    fails, or has nothing for the window.
    """
    if demo:
        return demo_dataset(days), "demo"
    if not config.backend_enabled():
        logger.warning("Backend not configured — using demo data.")
        return demo_dataset(days), "demo"

    try:
        client = BackendClient(config.BACKEND_URL, config.BACKEND_API_KEY)
        dataset = fetch_dataset(client, days)
    except BackendError:
        logger.exception("Backend unavailable — falling back to demo data")
        return demo_dataset(days), "demo"

    if not dataset.metrics and not dataset.comments:
        logger.warning("Backend returned no data for the last %d days — using demo data.", days)
        return demo_dataset(days), "demo"
    return dataset, "backend"


# ── Views ──────────────────────────────────────────────────────────────────


def build_view(
    dataset: FilteredDataset,
    spec: FilterSpec,
    sort: str = "importance",
    sentiment: str = ALL,
) -> DashboardView:
    """Compute every dashboard view for one filter selection."""
    filtered = filter_dataset(dataset.metrics, dataset.activities, dataset.comments, spec)
    changes = [
        change
        for field in CHANGE_FIELDS
        if (change := latest_change(filtered.metrics, field)) is not None
    ]
    # Impacts look past the selected window, so only the platform narrows them.
    history = filter_dataset(dataset.metrics, [], dataset.comments, FilterSpec.all(spec.platform))
    impacts = {
        activity.id: impact
        for activity in filtered.activities
        if (impact := activity_impact(activity, history.metrics, history.comments)) is not None
    }
    return DashboardView(
        spec=spec,
        dataset=filtered,
        summary=aggregate(filtered.metrics),
        changes=changes,
        platform_shares=platform_distribution(filtered.metrics),
        pulse=sentiment_pulse(filtered.comments),
        key_comments=key_comments(filtered.comments),
        posts=select_posts(group_posts(filtered.comments), sentiment=sentiment, criterion=sort),
        impacts=impacts,
    )


def run_dashboard(
    spec: FilterSpec,
    sort: str = "importance",
    demo: bool = False,
    dry_run: bool = False,
) -> Path | None:
    """Execute the full pipeline for *spec*; return the written report path."""
    logger.info("=== gamepulse start [platform=%s] ===", spec.platform)

    dataset, source = load_dataset(config.DAYS, demo=demo)
    logger.info(
        "Loaded %d metric days, %d activities, %d comments from %s",
        len(dataset.metrics),
        len(dataset.activities),
        len(dataset.comments),
        source,
    )

    view = build_view(dataset, spec, sort=sort)
    if view.summary is None:
        logger.warning("No metrics in %s for %s.", view.range_label, spec.platform)

    if dry_run:
        logger.info("Dry-run mode — skipping brief and report write.")
        if view.summary is not None:
            logger.info(
                "  %d days, %d mentions/day, engagement rate %.2f%%, top platform %s",
                view.summary.days,
                view.summary.avg_mentions_per_day,
                view.summary.engagement_rate,
                view.summary.top_platform,
            )
        logger.info("  Pulse %s (%d/100), %d posts", view.pulse.verdict, view.pulse.score, len(view.posts))
        return None

    writer = BriefWriter(
        provider=config.LLM_PROVIDER,
        api_key=config.LLM_API_KEY,
        model=config.LLM_MODEL,
    )
    brief = StrategicBrief(
        date=datetime.now(UTC).date().isoformat(),
        platform_filter=spec.platform,
        brief_text=writer.strategic_brief(
            view.summary, view.pulse, view.dataset.activities, view.posts
        ),
    )
    if writer.enabled:
        brief = BriefStore(config.brief_db_path()).save(brief)
    view.brief = brief

    out_path = write_report(view, config.OUTPUT_DIR)
    logger.info("=== gamepulse done [platform=%s] — %s ===", spec.platform, out_path)
    return out_path
