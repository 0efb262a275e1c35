"""
Recommendation report writer: CSV and JSON output for ranked recommendations.

All functions are pure I/O with no DB access. They consume an in-memory
ranked ``AIRecommendation`` list and write human-readable + machine-readable
files.

Output files
------------
  data/outputs/recommendations/
    recommendations_{user}_{date}.csv   -- one row per recommendation, ranked
    recommendations_{user}_{date}.json  -- same data with full metadata
"""

from __future__ import annotations

import csv
import json
import logging
import re
from datetime import date
from pathlib import Path

from consult_recommender.models.recommendation import AIRecommendation
from consult_recommender.recommendations.ranker import group_by_type, rank_recommendations

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v1.0.0"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def report_stem(user_id: str, run_date: date) -> str:
    """File stem for a user's report; anything outside ``[A-Za-z0-9_-]`` becomes ``_``."""
    label = _UNSAFE_FILENAME_CHARS.sub("_", user_id).strip("_") or "unknown"
    return f"recommendations_{label}_{run_date}"


def write_recommendation_csv(
    recs: list[AIRecommendation],
    output_dir: Path,
    user_id: str,
    run_date: date | None = None,
) -> Path:
    """Write ranked recommendations to a CSV file.

    Columns: rank, id, type, priority, confidence, title, description,
             reasoning (``" | "``-joined), actionable.

    Args:
        recs:       Recommendations (ranked again here, so order is irrelevant).
        output_dir: Directory to write the file (created if missing).
        user_id:    Used in the filename (sanitised by ``report_stem``).
        run_date:   Date label for the filename. Defaults to today.

    Returns:
        Path to the written CSV file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = output_dir / f"{report_stem(user_id, run_date)}.csv"

    fieldnames = [
        "rank", "id", "type", "priority", "confidence",
        "title", "description", "reasoning", "actionable",
    ]

    ranked = rank_recommendations(recs)
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for rank, rec in enumerate(ranked, start=1):
            writer.writerow(
                {
                    "rank":        rank,
                    "id":          rec.id,
                    "type":        rec.type.value,
                    "priority":    rec.priority.value,
                    "confidence":  rec.confidence,
                    "title":       rec.title,
                    "description": rec.description,
                    "reasoning":   " | ".join(rec.reasoning),
                    "actionable":  rec.actionable,
                }
            )

    logger.info("Recommendation CSV written: %s (%d rows)", csv_path, len(ranked))
    return csv_path


def write_recommendation_json(
    recs: list[AIRecommendation],
    output_dir: Path,
    user_id: str,
    run_date: date | None = None,
) -> Path:
    """Write ranked recommendations to a structured JSON file.

    Args:
        recs:       Recommendations.
        output_dir: Target directory.
        user_id:    Used in filename + payload.
        run_date:   Date label. Defaults to today.

    Returns:
        Path to the written JSON file.
    """
    if run_date is None:
        run_date = date.today()

    output_dir.mkdir(parents=True, exist_ok=True)
    json_path = output_dir / f"{report_stem(user_id, run_date)}.json"

    ranked = rank_recommendations(recs)
    payload: dict = {
        "schema_version":  SCHEMA_VERSION,
        "user_id":         user_id,
        "generated_at":    run_date.isoformat(),
        "counts_by_type":  {t: len(items) for t, items in sorted(group_by_type(ranked).items())},
        "recommendations": [
            {"rank": rank, **rec.model_dump(mode="json")}
            for rank, rec in enumerate(ranked, start=1)
        ],
    }

    json_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info("Recommendation JSON written: %s", json_path)
    return json_path
