"""LLM-powered analyst: strategic brief and chat answers over the dashboard data."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from openai import OpenAI

from gamepulse.models import (
    ActivityRecord,
    FilteredDataset,
    PostGroup,
    SentimentPulse,
    Summary,
)

logger = logging.getLogger(__name__)

# ── System prompts ─────────────────────────────────────────────────────────
_ANALYST_PROMPT = (
    "You are an expert game project analyst embedded in a community dashboard. "
    "You receive the latest metrics, production activities and community "
    "comments with every question. Find correlations in the data (for example "
    "a class rebalance followed by a spike in negative comments about a nerf) "
    "and explain them concisely. Use markdown."
)

_BRIEF_PROMPT = (
    "You are a game project analyst. Given a summary of social metrics, the "
    "community sentiment pulse, recent production activities and the most "
    "discussed posts, write a strategic brief:\n"
    "1. One paragraph on the most significant trend and its impact.\n"
    "2. 3-5 bullet-point recommendations for the team.\n"
    "Be factual and do not repeat the raw data."
)

_METRIC_TAIL = 5
_COMMENT_SAMPLE = 10
_POST_SAMPLE = 5


class BriefWriter:
    """Provider-agnostic analyst. Ships with OpenAI; returns placeholders without a key."""

    def __init__(self, provider: str, api_key: str, model: str) -> None:
        self._provider = provider.lower()
        self._model = model
        self._client: Any = None

        if not api_key:
            logger.warning("LLM_API_KEY not set — briefs will use placeholder text.")
            return

        if self._provider == "openai":
            self._client = OpenAI(api_key=api_key)
        else:
            logger.warning("Unknown LLM_PROVIDER '%s'; using placeholders.", provider)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    # ── public ──────────────────────────────────────────────────────────

    def strategic_brief(
        self,
        summary: Summary | None,
        pulse: SentimentPulse,
        activities: Sequence[ActivityRecord],
        posts: Sequence[PostGroup],
    ) -> str:
        """Write the brief for the current window."""
        if summary is None:
            return "_No metrics in the selected range — nothing to brief._"
        if self._client is None:
            return self._stub_brief(summary, pulse)

        context = {
            "summary": summary.model_dump(),
            "sentiment_pulse": pulse.model_dump(),
            "activities": [
                {"date": a.date, "type": a.type, "status": a.status, "description": a.description}
                for a in activities
            ],
            "top_posts": [
                {
                    "source": g.post.source,
                    "sentiment": g.post.sentiment,
                    "text": g.post.text[:200],
                    "replies": g.reply_count,
                }
                for g in posts[:_POST_SAMPLE]
            ],
        }
        return self._chat(_BRIEF_PROMPT, json.dumps(context, default=str))

    def answer(self, question: str, dataset: FilteredDataset) -> str:
        """Answer a free-form question using the filtered data as context."""
        if self._client is None:
            return f"**DEMO MODE**: LLM_API_KEY not configured.\n\nQuestion: {question}"
        context = (
            "DATA CONTEXT (do not repeat it in the answer):\n"
            f"- Metrics (last {_METRIC_TAIL} days): "
            f"{json.dumps([m.model_dump() for m in dataset.metrics[-_METRIC_TAIL:]])}\n"
            f"- Activities: {json.dumps([a.model_dump() for a in dataset.activities])}\n"
            f"- Comments (sample of {_COMMENT_SAMPLE}): "
            + json.dumps(
                [
                    {"sentiment": c.sentiment, "text": c.text, "source": c.source}
                    for c in dataset.comments[:_COMMENT_SAMPLE]
                ]
            )
            + f"\n\nUser question: {question}"
        )
        return self._chat(_ANALYST_PROMPT, context)

    # ── private ─────────────────────────────────────────────────────────

    def _chat(self, system: str, user: str) -> str:
        resp = self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=0.3,
            max_tokens=700,
        )
        return resp.choices[0].message.content or ""

    @staticmethod
    def _stub_brief(summary: Summary, pulse: SentimentPulse) -> str:
        """Placeholder when no LLM is available; headline numbers only."""
        return (
            "(AI brief unavailable) "
            f"{summary.days} days, {summary.avg_mentions_per_day} mentions/day, "
            f"engagement rate {summary.engagement_rate:.2f}%, "
            f"top platform {summary.top_platform}, "
            f"community pulse {pulse.verdict} ({pulse.score}/100)."
        )
