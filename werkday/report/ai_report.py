"""Single-call language-model report over a range's activity counts."""

from dataclasses import dataclass
import logging
from typing import Any

from crewai import LLM

from werkday.common.json_extract import parse_json_object
from werkday.shared import ai_enabled

logger = logging.getLogger(__name__)

MAX_COMMIT_PREVIEWS = 5
MAX_ISSUE_PREVIEWS = 3
MAX_NOTE_PREVIEWS = 3
MAX_HIGHLIGHTS = 5
MAX_NEXT_STEPS = 3
RANGE_MAX_TOKENS = 500
DAY_MAX_TOKENS = 400


@dataclass
class AiReport:
    """Structured narrative parsed from the model's JSON answer."""

    executive_summary: str
    highlights: list[str]
    next_steps: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "executiveSummary": self.executive_summary,
            "highlights": list(self.highlights),
            "nextSteps": list(self.next_steps),
        }


@dataclass
class ReportPreviews:
    commit_titles: list[str]
    issue_lines: list[str]
    note_titles: list[str]


def _normalize_lines(value: Any, limit: int) -> list[str]:
    if not isinstance(value, list):
        return []
    lines: list[str] = []
    for item in value:
        line = str(item).strip() if isinstance(item, (str, int, float)) else ""
        if line:
            lines.append(line)
    return lines[:limit]


def build_report_prompt(counts: dict[str, Any], previews: ReportPreviews, *, is_range: bool) -> str:
    """Bounded prompt: counts plus a handful of titles per source."""
    commits = ", ".join(previews.commit_titles[:MAX_COMMIT_PREVIEWS]) or "none"
    issues = ", ".join(previews.issue_lines[:MAX_ISSUE_PREVIEWS]) or "none"
    notes = ", ".join(previews.note_titles[:MAX_NOTE_PREVIEWS]) or "none"
    time_logged = f", {counts['timeLogged']} logged" if counts.get("timeLogged") else ""
    highlight_count = "4-5" if is_range else "3-4"
    return (
        "You are a JSON generator. Based on this developer's work activity, generate a structured summary.\n\n"
        "Activity:\n"
        f"- {counts.get('commits', 0)} commits: {commits}\n"
        f"- {counts.get('pullRequests', 0)} pull requests, {counts.get('reviews', 0)} code reviews\n"
        f"- {counts.get('issuesWorkedOn', 0)} JIRA issues: {issues}\n"
        f"- {counts.get('transitions', 0)} status changes{time_logged}\n"
        f"- {counts.get('notes', 0)} notes: {notes}\n\n"
        "Respond with ONLY a JSON object, no other text before or after:\n"
        '{"executiveSummary": "2-3 sentences summarizing accomplishments", '
        '"highlights": ["accomplishment 1", "accomplishment 2", "accomplishment 3"], '
        '"nextSteps": ["next step 1", "next step 2"]}\n\n'
        "Requirements:\n"
        "- executiveSummary: Brief professional overview of work done\n"
        f"- highlights: {highlight_count} specific accomplishments (NOT metrics like \"5 commits\")\n"
        "- nextSteps: 2-3 logical follow-up tasks based on the work done"
    )


def parse_ai_report(text: str) -> AiReport | None:
    """Lenient parse of the model answer; None when no usable report is present."""
    data = parse_json_object(text)
    if data is None:
        return None
    summary = data.get("executiveSummary")
    if not isinstance(summary, str) or not summary.strip():
        return None
    return AiReport(
        executive_summary=summary.strip(),
        highlights=_normalize_lines(data.get("highlights"), MAX_HIGHLIGHTS),
        next_steps=_normalize_lines(data.get("nextSteps"), MAX_NEXT_STEPS),
    )


def total_activity(counts: dict[str, Any]) -> int:
    keys = ("commits", "pullRequests", "reviews", "issuesWorkedOn", "transitions", "comments", "worklogs", "notes")
    return sum(int(counts.get(key) or 0) for key in keys)


def generate_ai_report(
    counts: dict[str, Any],
    previews: ReportPreviews,
    *,
    api_key: str | None,
    model: str,
    is_range: bool,
) -> AiReport | None:
    """
    Ask the configured model for a structured report.

    Args:
        counts: Range counts from the aggregator.
        previews: Titles used to ground the narrative.
        api_key: Language-model key; no call is made without one.
        model: Model id in provider/model form.
        is_range: Whether the range spans more than one day.
    Returns:
        AiReport, or None when skipped, when the call fails, or when the answer is unusable.
    """
    if not ai_enabled():
        logger.info("AI report skipped: disabled via WERKDAY_AI_ENABLED.")
        return None
    if not api_key:
        return None
    if total_activity(counts) == 0:
        logger.info("AI report skipped: no activity in range.")
        return None

    prompt = build_report_prompt(counts, previews, is_range=is_range)
    try:
        llm = LLM(model=model, api_key=api_key, max_tokens=RANGE_MAX_TOKENS if is_range else DAY_MAX_TOKENS)
        raw = llm.call([{"role": "user", "content": prompt}])
    except Exception:
        logger.exception("AI report call failed for model %s.", model)
        return None

    report = parse_ai_report(str(raw or ""))
    if report is None:
        logger.warning("AI report unparseable; raw output: %s", str(raw or "")[:500])
    return report
