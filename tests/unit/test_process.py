"""Tests for ProcessRunner using real child processes."""

import asyncio
import os
import signal
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from bzp.runtime.process import ProcessRunner
from bzp.runtime.types import FailureKind

PY = sys.executable
MISSING = "bzp-definitely-not-a-command"


class TestRunAttached:
    """Test attached execution."""

    @pytest.mark.asyncio
    async def test_success(self):
        result = await ProcessRunner().run_attached([PY, "-c", "pass"])
        assert result.ok
        assert result.returncode == 0

    @pytest.mark.asyncio
    async def test_nonzero_exit_is_failure(self):
        result = await ProcessRunner().run_attached([PY, "-c", "import sys; sys.exit(3)"])
        assert not result.ok
        assert result.returncode == 3
        assert result.failure is FailureKind.RECOVERABLE
        assert "exit code 3" in result.error

    @pytest.mark.asyncio
    async def test_spawn_error_is_failure(self):
        """Test that a missing executable is reported, not raised."""
        result = await ProcessRunner().run_attached([MISSING, "pull", "x"])
        assert not result.ok
        assert result.failure is FailureKind.UNAVAILABLE
        assert MISSING in result.error


class TestProbe:
    """Test bounded probes."""

    @pytest.mark.asyncio
    async def test_captures_stdout(self):
        result = await ProcessRunner().probe([PY, "-c", "print('NAME ID')"], timeout=10)
        assert result.ok
        assert result.stdout.strip() == "NAME ID"

    @pytest.mark.asyncio
    async def test_timeout(self):
        result = await ProcessRunner().probe(
            [PY, "-c", "import time; time.sleep(30)"], timeout=0.3
        )
        assert not result.ok
        assert result.failure is FailureKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_nonzero_exit_keeps_output(self):
        result = await ProcessRunner().probe(
            [PY, "-c", "print('partial'); import sys; sys.exit(1)"], timeout=10
        )
        assert not result.ok
        assert result.returncode == 1
        assert "partial" in result.stdout

    @pytest.mark.asyncio
    async def test_missing_command(self):
        result = await ProcessRunner().probe([MISSING, "list"], timeout=1)
        assert not result.ok


class TestStartDetached:
    """Test fire-and-forget starts."""

    def test_starts(self):
        result = ProcessRunner().start_detached([PY, "-c", "pass"])
        assert result.ok

    def test_missing_command(self):
        result = ProcessRunner().start_detached([MISSING, "serve"])
        assert not result.ok
        assert MISSING in result.error


class TestRunPiped:
    """Test producer | consumer execution."""

    @pytest.mark.asyncio
    async def test_consumer_reads_producer_output(self):
        producer = [PY, "-c", "print('import sys; sys.exit(7)')"]
        result = await ProcessRunner().run_piped(producer, [PY, "-"])
        assert not result.ok
        assert result.returncode == 7

    @pytest.mark.asyncio
    async def test_success(self):
        producer = [PY, "-c", "print('x = 1')"]
        result = await ProcessRunner().run_piped(producer, [PY, "-"])
        assert result.ok

    @pytest.mark.asyncio
    async def test_judged_by_consumer_only(self):
        """Test that a failing producer alone does not fail the pipe."""
        producer = [PY, "-c", "import sys; sys.exit(4)"]
        result = await ProcessRunner().run_piped(producer, [PY, "-"])
        assert result.ok

    @pytest.mark.asyncio
    async def test_missing_producer(self):
        result = await ProcessRunner().run_piped([MISSING], [PY, "-"])
        assert not result.ok
        assert MISSING in result.error

    @pytest.mark.asyncio
    async def test_missing_consumer(self):
        result = await ProcessRunner().run_piped([PY, "-c", "pass"], [MISSING])
        assert not result.ok
        assert MISSING in result.error

    @pytest.mark.asyncio
    async def test_unconnected_streams(self):
        """Test that children spawned without pipes are reported, not asserted."""
        child = MagicMock(stdout=None, stdin=None, returncode=0)
        with patch(
            "bzp.runtime.process.asyncio.create_subprocess_exec",
            AsyncMock(return_value=child),
        ):
            result = await ProcessRunner().run_piped(["curl"], ["sh"])

        assert not result.ok
        assert "Could not connect curl to sh" in result.error

    @pytest.mark.asyncio
    async def test_consumer_exits_before_reading(self):
        """Test that a consumer quitting early doesn't leave the producer blocked."""
        producer = [PY, "-c", "import sys; sys.stdout.write('x' * 1_000_000)"]
        consumer = [PY, "-c", "import sys; sys.exit(3)"]

        result = await asyncio.wait_for(ProcessRunner().run_piped(producer, consumer), 10)

        assert not result.ok
        assert result.returncode == 3

    @pytest.mark.asyncio
    async def test_producer_that_never_finishes(self):
        """Test that a producer still running after the consumer exits is stopped."""
        producer = [PY, "-c", "import time; print('x = 1', flush=True); time.sleep(30)"]
        consumer = [PY, "-c", "import sys; sys.stdin.readline()"]

        result = await asyncio.wait_for(ProcessRunner().run_piped(producer, consumer), 10)

        assert result.ok


SLEEPER = (
    "import os, sys, time\n"
    "with open(sys.argv[1], 'w') as f:\n"
    "    f.write(str(os.getpid()))\n"
    "time.sleep(30)\n"
)


def pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    return True


async def start_sleeper(runner: ProcessRunner, tmp_path: Path) -> tuple[asyncio.Task, int]:
    pid_file = tmp_path / "child.pid"
    task = asyncio.create_task(runner.run_attached([PY, "-c", SLEEPER, str(pid_file)]))
    for _ in range(100):
        if pid_file.exists() and pid_file.read_text():
            break
        await asyncio.sleep(0.05)
    return task, int(pid_file.read_text())


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
class TestCancellation:
    """Test what happens to a child when the awaiting task is cancelled."""

    @pytest.mark.asyncio
    async def test_terminates_child(self, tmp_path: Path):
        task, pid = await start_sleeper(ProcessRunner(terminate_on_cancel=True), tmp_path)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert not pid_alive(pid)

    @pytest.mark.asyncio
    async def test_leaves_child_running(self, tmp_path: Path):
        task, pid = await start_sleeper(ProcessRunner(terminate_on_cancel=False), tmp_path)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        try:
            assert pid_alive(pid)
        finally:
            os.kill(pid, signal.SIGKILL)
