"""CLI entry-point: ``python -m gamepulse run`` / ``posts`` / ``ask``."""

from __future__ import annotations

import argparse
import logging
import sys

from gamepulse import config
from gamepulse.filters import filter_dataset
from gamepulse.llm import BriefWriter
from gamepulse.models import ALL, FilterSpec
from gamepulse.pipeline import load_dataset, run_dashboard, setup_logging
from gamepulse.posts import group_posts, importance, select_posts

logger = logging.getLogger(__name__)

_SORT_CHOICES = ["importance", "recent", "comments", "mostComments", "score", "highestScore"]


def _build_spec(args: argparse.Namespace) -> FilterSpec:
    """Translate ``--range/--start/--end/--platform`` into a filter spec."""
    if args.range == "all":
        return FilterSpec.all(platform=args.platform)
    if args.range == "today":
        return FilterSpec.today(platform=args.platform)
    if not (args.start and args.end):
        raise ValueError("--range custom requires --start and --end (YYYY-MM-DD).")
    return FilterSpec.custom(
        args.start, args.end, platform=args.platform, max_days=config.MAX_RANGE_DAYS
    )


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--range",
        choices=["today", "all", "custom"],
        default="all",
        help="Date range to show (default: all).",
    )
    parser.add_argument("--start", help="First day of a custom range (YYYY-MM-DD).")
    parser.add_argument("--end", help="Last day of a custom range (YYYY-MM-DD).")
    parser.add_argument(
        "--platform",
        default=ALL,
        help="Restrict to one platform, e.g. Reddit (default: all).",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use the synthetic dataset instead of the backend.",
    )


def _list_posts(args: argparse.Namespace, spec: FilterSpec) -> None:
    dataset, source = load_dataset(config.DAYS, demo=args.demo)
    filtered = filter_dataset(dataset.metrics, dataset.activities, dataset.comments, spec)
    groups = select_posts(
        group_posts(filtered.comments),
        sentiment=args.sentiment,
        criterion=args.sort,
    )
    logger.info("Showing %d posts from %s", min(len(groups), args.limit), source)
    for group in groups[: args.limit]:
        post = group.post
        title = post.metadata.post_title or post.text
        print(
            f"[{importance(group):>6.0f}] {post.timestamp:%Y-%m-%d} {post.source:<10} "
            f"{post.sentiment:<8} {group.reply_count:>3} replies  {title[:80]}"
        )


def _ask(args: argparse.Namespace, spec: FilterSpec) -> None:
    dataset, _ = load_dataset(config.DAYS, demo=args.demo)
    filtered = filter_dataset(dataset.metrics, dataset.activities, dataset.comments, spec)
    writer = BriefWriter(
        provider=config.LLM_PROVIDER,
        api_key=config.LLM_API_KEY,
        model=config.LLM_MODEL,
    )
    print(writer.answer(args.question, filtered))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="gamepulse",
        description="Community and social metrics dashboard for a game project.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── run ────────────────────────────────────────────────────────────
    run_parser = sub.add_parser("run", help="Build the dashboard report.")
    _add_filter_args(run_parser)
    run_parser.add_argument(
        "--sort",
        choices=_SORT_CHOICES,
        default="importance",
        help="Order of the top posts (default: importance).",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and log the views but skip the AI brief and report write.",
    )

    # ── posts ──────────────────────────────────────────────────────────
    posts_parser = sub.add_parser("posts", help="List posts with their reply counts.")
    _add_filter_args(posts_parser)
    posts_parser.add_argument(
        "--sentiment",
        choices=[ALL, "Positive", "Negative", "Neutral"],
        default=ALL,
        help="Only posts with this sentiment (default: all).",
    )
    posts_parser.add_argument("--sort", choices=_SORT_CHOICES, default="recent")
    posts_parser.add_argument("--limit", type=int, default=20)

    # ── ask ────────────────────────────────────────────────────────────
    ask_parser = sub.add_parser("ask", help="Ask the AI analyst about the data.")
    _add_filter_args(ask_parser)
    ask_parser.add_argument("question", help="Question to ask.")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    setup_logging()
    try:
        spec = _build_spec(args)
    except ValueError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    if args.command == "run":
        run_dashboard(spec, sort=args.sort, demo=args.demo, dry_run=args.dry_run)
    elif args.command == "posts":
        _list_posts(args, spec)
    elif args.command == "ask":
        _ask(args, spec)


if __name__ == "__main__":
    main()
