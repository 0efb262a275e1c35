"""
ASCII terminal formatters for CLI commands.

All formatters accept in-memory models and return plain multi-line strings
suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Recommendation table
--------------------
One block per recommendation type, most important first within each block::

  [EXPERT]
     #  Priority  Conf  Title
    ------------------------------------------------------------
     1  high      0.92  Industry-Specialized Experts for DeFi
        - Matched based on your DeFi industry focus
"""

from __future__ import annotations

from consult_recommender.models.feedback import RecommendationFeedback
from consult_recommender.models.profile import UserProfile
from consult_recommender.models.recommendation import AIRecommendation, Notification
from consult_recommender.recommendations.ranker import group_by_type

_TITLE_WIDTH = 56


# ── Recommendations ──────────────────────────────────────────────────────────


def format_recommendation_table(
    recs: list[AIRecommendation],
    user_id: str = "",
    show_reasoning: bool = True,
) -> str:
    """Format recommendations grouped by type as an ASCII table.

    Args:
        recs:           Recommendations (any order; grouped and ranked here).
        user_id:        Optional user id for the header.
        show_reasoning: Print each reasoning line under its row.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Recommendations ===")
    if user_id:
        lines.append(f"  User:   {user_id}")
    lines.append(f"  Total:  {len(recs)}")

    if not recs:
        lines.append("")
        lines.append("  (no recommendations for this profile)")
        return "\n".join(lines)

    for rec_type, items in group_by_type(recs).items():
        lines.append("")
        lines.append(f"  [{rec_type.upper()}]")
        header = f"    {'#':>2}  {'Priority':<8}  {'Conf':>4}  {'Title':<{_TITLE_WIDTH}}"
        lines.append(header)
        lines.append("    " + "-" * (len(header) - 4))
        for rank, rec in enumerate(items, start=1):
            title = rec.title[:_TITLE_WIDTH]
            lines.append(
                f"    {rank:>2}  {rec.priority.value:<8}  {rec.confidence:>4.2f}  {title}"
            )
            if show_reasoning:
                for reason in rec.reasoning:
                    lines.append(f"        - {reason}")

    return "\n".join(lines)


# ── Notifications ────────────────────────────────────────────────────────────


def format_notifications(notifications: list[Notification]) -> str:
    """Format notifications as a numbered list with their action URLs."""
    lines: list[str] = []
    lines.append("")
    lines.append("=== Notifications ===")

    if not notifications:
        lines.append("  (none)")
        return "\n".join(lines)

    for i, notif in enumerate(notifications, start=1):
        lines.append(f"  {i}. [{notif.priority.value.upper()}] {notif.title}")
        lines.append(f"     {notif.message}")
        lines.append(f"     -> {notif.action_url}")
    return "\n".join(lines)


# ── Profile ──────────────────────────────────────────────────────────────────


def format_profile_summary(profile: UserProfile) -> str:
    budget = f"${profile.budget:,.0f}" if profile.budget is not None else "-"
    lines = [
        "",
        "=== Profile ===",
        f"  User:          {profile.id} ({profile.role})",
        f"  Industry:      {profile.industry or '-'}",
        f"  Experience:    {profile.experience or '-'}",
        f"  Company size:  {profile.company_size or '-'}",
        f"  Budget:        {budget}",
        f"  Consultations: {len(profile.consultation_history)}",
    ]
    if profile.interests:
        lines.append(f"  Interests:     {', '.join(profile.interests)}")
    return "\n".join(lines)


# ── Feedback ─────────────────────────────────────────────────────────────────


def format_feedback_table(records: list[RecommendationFeedback], user_id: str) -> str:
    """Format stored feedback rows for one user, newest first as given."""
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Feedback for {user_id} ===")

    if not records:
        lines.append("  (no feedback recorded)")
        return "\n".join(lines)

    header = f"    {'ID':>4}  {'Recorded':<19}  {'Action':<9}  {'Rating':>6}  Recommendation"
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    for rec in records:
        rating = str(rec.rating) if rec.rating is not None else "-"
        recorded = rec.recorded_at.strftime("%Y-%m-%d %H:%M:%S")
        lines.append(
            f"    {rec.feedback_id or '':>4}  {recorded:<19}  {rec.action.value:<9}  "
            f"{rating:>6}  {rec.recommendation_id}"
        )
        if rec.feedback:
            lines.append(f"          \"{rec.feedback}\"")
    return "\n".join(lines)
