"""
Consult Recommender — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (DB init, recommendation run, feedback write, etc.).
  5. Report result to stdout.

Profile inputs are JSON files. A file holding a ``UserProfile`` is used as
is; a file holding an account record (it has ``created_at``) is turned into
a profile with the inference heuristics first.

Install and run::

    pip install -e .
    consult-recommender --help
    consult-recommender init-db
    consult-recommender seed-experts
    consult-recommender recommend profile.json --save
    consult-recommender notify profile.json
    consult-recommender insights account.json --kind all
    consult-recommender record-feedback --user-id u1 --recommendation-id strategy-risk-1 --action accepted
"""

from __future__ import annotations

import asyncio
import json
from datetime import date
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="consult-recommender",
    help="Blockchain consulting recommendation engine — local-first CLI.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from consult_recommender.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from consult_recommender.utils.logging import configure_logging
    configure_logging(config.logging)


def _read_json_or_exit(path: Path):
    if not path.exists():
        typer.echo(f"[ERROR] File not found: {path}", err=True)
        raise typer.Exit(code=1)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        typer.echo(f"[ERROR] JSON parse error: {exc}", err=True)
        raise typer.Exit(code=1)


def _load_profile_or_exit(profile_file: str):
    """Read a ``UserProfile`` (or an account record to infer one from)."""
    from pydantic import ValidationError

    from consult_recommender.models.profile import AccountRecord, ConsultationRecord, UserProfile
    from consult_recommender.profiles.inference import build_user_profile

    raw = _read_json_or_exit(Path(profile_file))
    if not isinstance(raw, dict):
        typer.echo("[ERROR] Profile file must contain a JSON object.", err=True)
        raise typer.Exit(code=1)

    try:
        if "created_at" in raw:
            history = [ConsultationRecord(**r) for r in raw.get("consultation_history", [])]
            account_fields = {k: v for k, v in raw.items() if k in AccountRecord.model_fields}
            return build_user_profile(
                AccountRecord(**account_fields),
                history=history,
                interests=raw.get("interests"),
            )
        return UserProfile(**raw)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Profile validation failed:\n{exc}", err=True)
        raise typer.Exit(code=1)


def _build_engine_or_exit(config, db_path: Optional[str] = None):
    from consult_recommender.recommendations.engine import RecommendationEngine

    try:
        return RecommendationEngine.from_config(config, db_path=db_path)
    except ValueError as exc:
        typer.echo(f"[ERROR] Provider setup failed: {exc}", err=True)
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("init-db")
def init_db(
    db_path: Optional[str] = typer.Option(
        None,
        "--db-path",
        help="Override DB path from config (e.g. data/db/test.db).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Initialize the SQLite database and apply the full schema.

    Safe to run multiple times — all DDL uses IF NOT EXISTS.
    """
    from consult_recommender.db.connection import open_from_config
    from consult_recommender.db.schema import ALL_TABLE_NAMES, apply_schema

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target_path = db_path or config.database.db_path
    typer.echo(f"Initializing database at: {target_path}")

    with open_from_config(config, db_path=target_path) as conn:
        apply_schema(conn)

    typer.echo(f"  Tables: {len(ALL_TABLE_NAMES)} created/verified.")
    typer.echo("[OK] Database ready.")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Database path:      {config.database.db_path}")
    typer.echo(f"  Expert source:      {config.providers.expert_source}")
    typer.echo(f"  Provider timeout:   {config.engine.provider_timeout_s}s")
    typer.echo(f"  Notification limit: {config.engine.notification_limit}")
    typer.echo(f"  Random seed:        {config.providers.random_seed}")
    typer.echo(f"  Log level:          {config.logging.level}")
    typer.echo(f"  Debug mode:         {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("seed-experts")
def seed_experts(
    experts_file: Optional[str] = typer.Option(
        None,
        "--file",
        "-f",
        help="JSON array of expert objects. Defaults to the built-in sample experts.",
    ),
    db_path: Optional[str] = typer.Option(
        None,
        "--db-path",
        help="Override DB path from config.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Load experts into the database for the ``sqlite`` expert source.

    Uses UPSERT semantics — existing experts with the same id are updated
    and their industry list is replaced.
    """
    from pydantic import ValidationError

    from consult_recommender.db.connection import open_from_config
    from consult_recommender.db.repositories.expert_repo import ExpertRepository
    from consult_recommender.db.schema import apply_schema
    from consult_recommender.models.recommendation import Expert
    from consult_recommender.providers.static import SAMPLE_EXPERTS

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    experts: list[Expert]
    if experts_file:
        raw = _read_json_or_exit(Path(experts_file))
        if not isinstance(raw, list):
            typer.echo("[ERROR] Experts file must contain an array.", err=True)
            raise typer.Exit(code=1)
        errors: list[tuple[int, str]] = []
        experts = []
        for i, item in enumerate(raw):
            try:
                experts.append(Expert(**item))
            except (ValidationError, TypeError) as exc:
                errors.append((i, str(exc)))
        if errors:
            typer.echo(f"[ERROR] {len(errors)} expert(s) failed validation:", err=True)
            for idx, msg in errors[:5]:
                typer.echo(f"  Expert #{idx}: {msg}", err=True)
            raise typer.Exit(code=1)
    else:
        experts = list(SAMPLE_EXPERTS)

    with open_from_config(config, db_path=db_path) as conn:
        apply_schema(conn)
        repo = ExpertRepository(conn)
        for expert in experts:
            repo.upsert(expert)

    typer.echo(f"  Upserted {len(experts)} expert(s).")
    typer.echo("[OK] Experts seeded.")


@app.command("infer-profile")
def infer_profile(
    account_file: str = typer.Argument(..., help="Account JSON (id, role, email, created_at, ...)."),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the inferred profile JSON to this path.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Infer industry, experience, company size and budget for an account."""
    from consult_recommender.reporting.formatters import format_profile_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    profile = _load_profile_or_exit(account_file)
    typer.echo(format_profile_summary(profile))

    if output:
        out_path = Path(output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(profile.model_dump_json(indent=2), encoding="utf-8")
        typer.echo(f"\n  Profile written: {out_path}")

    typer.echo("")
    typer.echo("[OK] Profile inferred.")


@app.command("recommend")
def recommend(
    profile_file: str = typer.Argument(..., help="UserProfile (or account) JSON file."),
    consultation_type: Optional[str] = typer.Option(
        None,
        "--consultation-type",
        help="Consultation type hint for expert matching (default from config).",
    ),
    save: bool = typer.Option(
        False,
        "--save",
        help="Write CSV + JSON reports to the output directory.",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Override [output].recommendation_dir.",
    ),
    db_path: Optional[str] = typer.Option(
        None,
        "--db-path",
        help="Override DB path (sqlite expert source only).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Generate ranked recommendations for one client profile."""
    from consult_recommender.recommendations.reporter import (
        write_recommendation_csv,
        write_recommendation_json,
    )
    from consult_recommender.reporting.formatters import format_recommendation_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    profile = _load_profile_or_exit(profile_file)
    engine = _build_engine_or_exit(config, db_path=db_path)

    recs = asyncio.run(
        engine.generate_all_recommendations(profile, consultation_type=consultation_type)
    )
    typer.echo(format_recommendation_table(recs, user_id=profile.id))

    if save:
        target_dir = Path(output_dir or config.output.recommendation_dir)
        run_date = date.today()
        csv_path = write_recommendation_csv(recs, target_dir, profile.id, run_date)
        json_path = write_recommendation_json(recs, target_dir, profile.id, run_date)
        typer.echo("")
        typer.echo(f"  CSV:  {csv_path}")
        typer.echo(f"  JSON: {json_path}")

    typer.echo("")
    typer.echo(f"[OK] {len(recs)} recommendation(s) generated.")


@app.command("notify")
def notify(
    profile_file: str = typer.Argument(..., help="UserProfile (or account) JSON file."),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        help="Number of notifications (default: engine.notification_limit).",
    ),
    db_path: Optional[str] = typer.Option(
        None,
        "--db-path",
        help="Override DB path (sqlite expert source only).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Show the top recommendations as dashboard notifications."""
    from consult_recommender.recommendations.notifications import SmartNotificationEngine
    from consult_recommender.reporting.formatters import format_notifications

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    profile = _load_profile_or_exit(profile_file)
    engine = _build_engine_or_exit(config, db_path=db_path)
    notifier = SmartNotificationEngine(
        engine,
        limit=limit if limit is not None else config.engine.notification_limit,
    )

    notifications = asyncio.run(notifier.generate_smart_notifications(profile))
    typer.echo(format_notifications(notifications))
    typer.echo("")
    typer.echo(f"[OK] {len(notifications)} notification(s).")


@app.command("insights")
def insights(
    profile_file: str = typer.Argument(..., help="UserProfile (or account) JSON file."),
    kind: str = typer.Option(
        "all",
        "--kind",
        help="recommendations | notifications | all",
    ),
    db_path: Optional[str] = typer.Option(
        None,
        "--db-path",
        help="Override DB path (sqlite expert source only).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Print the insights bundle for a profile as JSON."""
    from consult_recommender.recommendations.insights import INSIGHTS_KINDS, build_insights

    if kind not in INSIGHTS_KINDS:
        typer.echo(
            f"[ERROR] --kind must be one of {', '.join(INSIGHTS_KINDS)}; got '{kind}'.",
            err=True,
        )
        raise typer.Exit(code=1)

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    profile = _load_profile_or_exit(profile_file)
    engine = _build_engine_or_exit(config, db_path=db_path)

    report = asyncio.run(
        build_insights(
            engine,
            profile,
            kind=kind,
            notification_limit=config.engine.notification_limit,
        )
    )
    typer.echo(report.model_dump_json(indent=2))


@app.command("record-feedback")
def record_feedback(
    user_id: str = typer.Option(..., "--user-id", help="Client user id."),
    recommendation_id: str = typer.Option(
        ..., "--recommendation-id", help="Id of the recommendation as delivered."
    ),
    action: str = typer.Option(..., "--action", help="accepted | dismissed | completed"),
    rating: Optional[int] = typer.Option(None, "--rating", help="Optional 1-5 rating."),
    feedback: Optional[str] = typer.Option(None, "--feedback", help="Optional comment."),
    db_path: Optional[str] = typer.Option(
        None,
        "--db-path",
        help="Override DB path from config.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Record what a client did with a recommendation."""
    from pydantic import ValidationError

    from consult_recommender.db.connection import open_from_config
    from consult_recommender.db.repositories.feedback_repo import FeedbackRepository
    from consult_recommender.db.schema import apply_schema
    from consult_recommender.models.feedback import RecommendationFeedback
    from consult_recommender.utils.time_utils import utcnow

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        record = RecommendationFeedback(
            user_id=user_id,
            recommendation_id=recommendation_id,
            action=action,
            rating=rating,
            feedback=feedback,
            recorded_at=utcnow(),
        )
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid feedback:\n{exc}", err=True)
        raise typer.Exit(code=1)

    with open_from_config(config, db_path=db_path) as conn:
        apply_schema(conn)
        feedback_id = FeedbackRepository(conn).insert(record)

    typer.echo(
        f"  feedback_id={feedback_id} | user={record.user_id} | "
        f"recommendation={record.recommendation_id} | action={record.action.value}"
    )
    typer.echo("[OK] Feedback recorded.")


@app.command("list-feedback")
def list_feedback(
    user_id: str = typer.Option(..., "--user-id", help="Client user id."),
    limit: int = typer.Option(50, "--limit", help="Maximum rows to show."),
    db_path: Optional[str] = typer.Option(
        None,
        "--db-path",
        help="Override DB path from config.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """List stored feedback for a user, newest first."""
    from consult_recommender.db.connection import open_from_config
    from consult_recommender.db.repositories.feedback_repo import FeedbackRepository
    from consult_recommender.db.schema import apply_schema
    from consult_recommender.reporting.formatters import format_feedback_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    with open_from_config(config, db_path=db_path) as conn:
        apply_schema(conn)
        repo = FeedbackRepository(conn)
        records = repo.list_for_user(user_id, limit=limit)
        counts = repo.count_by_action(user_id)

    typer.echo(format_feedback_table(records, user_id))
    if counts:
        summary = ", ".join(f"{k}={v}" for k, v in sorted(counts.items()))
        typer.echo("")
        typer.echo(f"  Totals: {summary}")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
