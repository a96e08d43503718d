"""Recompute scheduler — rebuilds every user's progression aggregates.

Window-based state (personal-best expiry, streaks, muscle balance) goes
stale without new logs, so the job replays each user's history nightly
and writes the refreshed aggregates back to the store.

Usage:
    python -m scheduler.recompute --once      # single run (for cron)
    python -m scheduler.recompute --daemon    # APScheduler loop
"""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from typing import Optional

from profile_store import JsonProfileRepository, ProfileRepository
from progression_engine.engine import ProgressionEngine

from scheduler.config import PROFILE_STORE_DIR, RECOMPUTE_HOUR, RECOMPUTE_MINUTE

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def recompute_user(
    repository: ProfileRepository,
    engine: ProgressionEngine,
    user_id: str,
    now: Optional[datetime] = None,
) -> None:
    """Recompute and save one user's aggregates."""
    profile = repository.load_profile(user_id)
    logs = repository.load_logs(user_id)
    library = repository.load_library()

    report = engine.recompute(profile, logs, library, now)
    repository.save_profile(user_id, report.aggregates)

    skipped = len(report.trace.diagnostics)
    logger.info(
        "Recomputed %s: level %d, %d-day streak, %d logs (%d diagnostics)",
        user_id,
        report.level.level,
        report.streaks.daily_streak,
        report.trace.logs_considered,
        skipped,
    )


def recompute_job(
    repository: Optional[ProfileRepository] = None,
    now: Optional[datetime] = None,
) -> tuple[int, int]:
    """Execute one recompute cycle over every user in the store.

    A failure for one user is logged and the run moves on.

    Returns:
        ``(succeeded, failed)`` user counts.
    """
    if repository is None:
        repository = JsonProfileRepository(PROFILE_STORE_DIR)
    engine = ProgressionEngine()
    logger.info("Starting recompute job")

    try:
        users = repository.list_users()
    except Exception as exc:
        logger.error("Failed to list users: %s", exc)
        return (0, 0)

    succeeded = failed = 0
    for user_id in users:
        try:
            recompute_user(repository, engine, user_id, now)
            succeeded += 1
        except Exception:
            logger.exception("Recompute failed for %s", user_id)
            failed += 1

    logger.info("Recompute job complete: %d ok, %d failed", succeeded, failed)
    return (succeeded, failed)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Progression recompute scheduler")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--once", action="store_true", help="Run once and exit")
    group.add_argument("--daemon", action="store_true", help="Run as APScheduler daemon")
    args = parser.parse_args(argv)

    if args.once:
        recompute_job()
    else:
        from apscheduler.schedulers.blocking import BlockingScheduler

        scheduler = BlockingScheduler()
        scheduler.add_job(
            recompute_job,
            "cron",
            hour=RECOMPUTE_HOUR,
            minute=RECOMPUTE_MINUTE,
            id="recompute_job",
        )
        logger.info(
            "Scheduler started — recompute job at %02d:%02d",
            RECOMPUTE_HOUR,
            RECOMPUTE_MINUTE,
        )
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
