"""Tests for scheduler.recompute — in-memory store and mocks, no real I/O."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from profile_store import InMemoryProfileRepository, ProfileStoreIOError
from progression_engine.models.profile import ProfileAggregates
from scheduler.recompute import main, recompute_job


@pytest.fixture
def repository(library, history) -> InMemoryProfileRepository:
    return InMemoryProfileRepository(
        library=library,
        logs={"u1": history, "u2": history[:2]},
        profiles={"u1": ProfileAggregates(total_xp=815, muscle_scores={"forearms": 1.0})},
    )


class TestRecomputeJob:
    def test_recomputes_every_user(self, repository, now) -> None:
        assert recompute_job(repository, now) == (2, 0)
        u1 = repository.load_profile("u1")
        assert u1.total_xp == 815
        assert "forearms" not in u1.muscle_scores
        assert "chest" in u1.muscle_scores
        assert "abs" in repository.load_profile("u2").muscle_scores

    def test_one_failure_does_not_stop_the_run(self, repository, now) -> None:
        original = repository.load_logs

        def flaky(user_id: str):
            if user_id == "u1":
                raise ProfileStoreIOError("disk on fire", "logs/u1.json")
            return original(user_id)

        repository.load_logs = flaky
        assert recompute_job(repository, now) == (1, 1)
        assert "abs" in repository.load_profile("u2").muscle_scores

    def test_listing_failure_aborts_cleanly(self, now) -> None:
        repo = MagicMock()
        repo.list_users.side_effect = ProfileStoreIOError("unreachable")
        assert recompute_job(repo, now) == (0, 0)
        repo.save_profile.assert_not_called()

    def test_empty_store(self, now) -> None:
        assert recompute_job(InMemoryProfileRepository(), now) == (0, 0)


class TestMain:
    def test_once_runs_job(self) -> None:
        with patch("scheduler.recompute.recompute_job") as job:
            main(["--once"])
        job.assert_called_once_with()

    def test_daemon_schedules_cron_job(self) -> None:
        with patch("apscheduler.schedulers.blocking.BlockingScheduler") as scheduler_cls:
            main(["--daemon"])
        scheduler = scheduler_cls.return_value
        _, kwargs = scheduler.add_job.call_args
        assert kwargs["id"] == "recompute_job"
        scheduler.start.assert_called_once_with()

    def test_mode_required(self) -> None:
        with pytest.raises(SystemExit):
            main([])
