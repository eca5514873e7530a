"""
Unit tests for pangenome.grid.sge

Tests qsub command construction, job id parsing and qstat polling.
"""
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pangenome.exceptions import GridError
from pangenome.grid.sge import (
    GridJob,
    build_qsub_command,
    job_is_running,
    launch_grid_job,
    parse_job_id,
    wait_for_grid_jobs,
)


class TestParseJobId:
    """Tests for parse_job_id."""

    def test_array_job(self):
        output = 'Your job-array 4242.1-3:1 ("grid_blast.sh") has been submitted\n'
        assert parse_job_id(output) == "4242"

    def test_plain_job(self):
        output = 'Your job 17 ("grid_blast.sh") has been submitted\n'
        assert parse_job_id(output) == "17"

    def test_no_job_id(self):
        with pytest.raises(GridError):
            parse_job_id("Unable to run job: denied\n")


class TestBuildQsubCommand:
    """Tests for build_qsub_command."""

    def test_array_size(self, settings):
        """Test that the array spans 1..N."""
        cmd = build_qsub_command(
            "0000", Path("/work"), Path("/work/blast/grid_blast.sh"),
            "blast.stdout", "blast.stderr", array_size=7, settings=settings,
        )

        assert cmd[0] == "qsub"
        assert cmd[cmd.index("-t") + 1] == "1-7"
        assert cmd[cmd.index("-P") + 1] == "0000"
        assert cmd[cmd.index("-o") + 1] == "/work/blast.stdout"
        assert cmd[cmd.index("-e") + 1] == "/work/blast.stderr"
        assert cmd[cmd.index("-S") + 1] == "/bin/tcsh"
        assert cmd[-1] == "/work/blast/grid_blast.sh"

    def test_single_task_is_still_array(self, settings):
        cmd = build_qsub_command(
            "0000", Path("/work"), Path("run.sh"), "o", "e", array_size=1, settings=settings,
        )
        assert cmd[cmd.index("-t") + 1] == "1-1"

    def test_queue(self, settings):
        cmd = build_qsub_command(
            "0000", Path("/work"), Path("run.sh"), "o", "e", queue="fast", settings=settings,
        )
        assert cmd[cmd.index("-q") + 1] == "fast"

    def test_zero_array_size(self, settings):
        with pytest.raises(GridError):
            build_qsub_command(
                "0000", Path("/work"), Path("run.sh"), "o", "e", array_size=0, settings=settings,
            )


class TestLaunchGridJob:
    """Tests for launch_grid_job."""

    @patch("pangenome.grid.sge.subprocess.run")
    def test_successful_submission(self, mock_run, settings):
        mock_run.return_value = MagicMock(
            returncode=0,
            stdout='Your job-array 99.1-3:1 ("grid_blast.sh") has been submitted\n',
            stderr="",
        )

        job = launch_grid_job(
            "0000", Path("/work"), Path("run.sh"), "o", "e", array_size=3, settings=settings,
        )

        assert job == GridJob(job_id="99", array_size=3)

    @patch("pangenome.grid.sge.subprocess.run")
    def test_qsub_failure(self, mock_run, settings):
        mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="invalid project")

        with pytest.raises(GridError) as exc_info:
            launch_grid_job("bad", Path("/work"), Path("run.sh"), "o", "e", settings=settings)

        assert "invalid project" in str(exc_info.value)

    @patch("pangenome.grid.sge.subprocess.run", side_effect=FileNotFoundError("qsub"))
    def test_qsub_missing(self, mock_run, settings):
        with pytest.raises(GridError):
            launch_grid_job("0000", Path("/work"), Path("run.sh"), "o", "e", settings=settings)


class TestWaitForGridJobs:
    """Tests for job_is_running and wait_for_grid_jobs."""

    @patch("pangenome.grid.sge.subprocess.run")
    def test_job_is_running(self, mock_run, settings):
        mock_run.return_value = MagicMock(returncode=0)

        assert job_is_running(GridJob("5"), settings) is True
        assert mock_run.call_args[0][0] == ["qstat", "-j", "5"]

    @patch("pangenome.grid.sge.subprocess.run")
    def test_job_finished(self, mock_run, settings):
        mock_run.return_value = MagicMock(returncode=1)
        assert job_is_running(GridJob("5"), settings) is False

    @patch("pangenome.grid.sge.subprocess.run")
    def test_polls_until_gone(self, mock_run, settings):
        """Test that waiting keeps polling while qstat knows the job."""
        mock_run.side_effect = [
            MagicMock(returncode=0),
            MagicMock(returncode=0),
            MagicMock(returncode=1),
        ]
        sleep = MagicMock()

        wait_for_grid_jobs([GridJob("5", 3)], poll_interval=10, settings=settings, sleep=sleep)

        assert mock_run.call_count == 3
        assert sleep.call_count == 2
        sleep.assert_called_with(10)

    @patch("pangenome.grid.sge.subprocess.run")
    def test_no_jobs(self, mock_run, settings):
        wait_for_grid_jobs([], settings=settings, sleep=MagicMock())
        mock_run.assert_not_called()

    @patch("pangenome.grid.sge.subprocess.run")
    def test_timeout(self, mock_run, settings):
        """Test that a job that never finishes times out."""
        mock_run.return_value = MagicMock(returncode=0)

        with pytest.raises(GridError) as exc_info:
            wait_for_grid_jobs(
                [GridJob("5")], poll_interval=0, timeout=0, settings=settings, sleep=MagicMock(),
            )

        assert "5" in str(exc_info.value)
