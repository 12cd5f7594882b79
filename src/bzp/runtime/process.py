"""Spawning external commands for the runtime bootstrapper.

Three modes:

- attached: the child inherits our console, we wait for it to exit
- detached: the child runs in its own session and outlives us
- piped: a producer's stdout is pumped into a consumer's stdin
  (``curl ... | sh``)

plus a bounded ``probe`` that captures stdout. Every mode returns a
:class:`ProcessResult`; spawn errors and non-zero exits never raise.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
import sys
from pathlib import Path

from bzp.runtime.types import FailureKind, ProcessResult

logger = logging.getLogger(__name__)

# Grace period between SIGTERM and SIGKILL for abandoned children
TERMINATE_GRACE = 2.0

# Bytes moved per read when piping producer -> consumer
PIPE_CHUNK_SIZE = 64 * 1024

# How long the pump may keep running once the consumer has exited
PUMP_GRACE = 1.0


def _describe(cmd: list[str]) -> str:
    return " ".join(cmd)


def _spawn_failed(verb: str, cmd: list[str], error: OSError) -> ProcessResult:
    failure = (
        FailureKind.UNAVAILABLE
        if isinstance(error, FileNotFoundError)
        else FailureKind.RECOVERABLE
    )
    return ProcessResult.failed(f"Could not {verb} {cmd[0]}: {error}", failure=failure)


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    """Terminate a child we stopped waiting for, killing it if it lingers."""
    if proc.returncode is not None:
        return
    try:
        proc.terminate()
        await asyncio.wait_for(proc.wait(), TERMINATE_GRACE)
    except ProcessLookupError:
        pass
    except asyncio.TimeoutError:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()


class ProcessRunner:
    """Run commands attached, detached, piped, or as bounded probes.

    Attributes:
        terminate_on_cancel: Terminate attached/piped/probe children when the
            awaiting task is cancelled. When False they are left running.
    """

    def __init__(self, terminate_on_cancel: bool = True) -> None:
        self.terminate_on_cancel = terminate_on_cancel

    async def _abandon(self, proc: asyncio.subprocess.Process, cmd: list[str]) -> None:
        if self.terminate_on_cancel:
            logger.debug(f"Cancelled, terminating: {_describe(cmd)}")
            await _terminate(proc)
        else:
            logger.debug(f"Cancelled, leaving running: {_describe(cmd)}")

    async def run_attached(self, cmd: list[str], cwd: Path | None = None) -> ProcessResult:
        """Run a command with inherited stdio and wait for it to exit.

        Cancellation of the awaiting task is handled per ``terminate_on_cancel``.
        """
        logger.debug(f"Running: {_describe(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(*cmd, cwd=cwd)
        except OSError as e:
            return _spawn_failed("run", cmd, e)

        try:
            returncode = await proc.wait()
        except asyncio.CancelledError:
            await self._abandon(proc, cmd)
            raise

        if returncode != 0:
            return ProcessResult.failed(
                f"Command failed with exit code {returncode}",
                returncode=returncode,
            )
        return ProcessResult.success()

    async def probe(self, cmd: list[str], timeout: float) -> ProcessResult:
        """Run a read-only command with a timeout, capturing stdout."""
        logger.debug(f"Probing ({timeout:g}s): {_describe(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            return _spawn_failed("run", cmd, e)

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout)
        except asyncio.TimeoutError:
            await _terminate(proc)
            return ProcessResult.timed_out(timeout)
        except asyncio.CancelledError:
            await self._abandon(proc, cmd)
            raise

        output = stdout.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            result = ProcessResult.failed(
                f"Command failed with exit code {proc.returncode}",
                returncode=proc.returncode,
            )
            result.stdout = output
            return result
        return ProcessResult.success(stdout=output)

    def start_detached(self, cmd: list[str]) -> ProcessResult:
        """Start a long-lived command decoupled from this process.

        Fire-and-forget: no handle is kept and no completion is awaited.
        """
        logger.debug(f"Starting detached: {_describe(cmd)}")
        kwargs: dict[str, object] = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
        }
        if sys.platform == "win32":
            kwargs["creationflags"] = getattr(subprocess, "DETACHED_PROCESS", 0) | getattr(
                subprocess, "CREATE_NEW_PROCESS_GROUP", 0
            )
        else:
            kwargs["start_new_session"] = True  # Detach from parent

        try:
            subprocess.Popen(cmd, **kwargs)  # type: ignore[call-overload]
        except OSError as e:
            return _spawn_failed("start", cmd, e)
        return ProcessResult.success()

    async def run_piped(self, producer: list[str], consumer: list[str]) -> ProcessResult:
        """Pipe ``producer``'s stdout into ``consumer``'s stdin.

        The consumer's stdin is closed once the producer's output is
        exhausted. Success is judged by the consumer's exit code alone.
        """
        logger.debug(f"Running: {_describe(producer)} | {_describe(consumer)}")
        try:
            source = await asyncio.create_subprocess_exec(
                *producer,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return _spawn_failed("run", producer, e)

        try:
            sink = await asyncio.create_subprocess_exec(*consumer, stdin=asyncio.subprocess.PIPE)
        except OSError as e:
            await _terminate(source)
            return _spawn_failed("run", consumer, e)

        if source.stdout is None or sink.stdin is None:
            await _terminate(source)
            await _terminate(sink)
            return ProcessResult.failed(f"Could not connect {producer[0]} to {consumer[0]}")

        pump = asyncio.create_task(_pump(source.stdout, sink.stdin))
        try:
            sink_code = await sink.wait()
            # The consumer may exit just before the pump sees EOF
            await asyncio.wait({pump}, timeout=PUMP_GRACE)
            if not pump.done():
                pump.cancel()
                await asyncio.wait({pump})
            delivered = not pump.cancelled() and pump.exception() is None and pump.result()
            if not delivered:
                # Unread output would block the producer forever
                await _terminate(source)
            source_code = await source.wait()
        except asyncio.CancelledError:
            pump.cancel()
            await self._abandon(source, producer)
            await self._abandon(sink, consumer)
            raise

        if source_code != 0:
            logger.warning(f"{producer[0]} exited with code {source_code}")
        if sink_code != 0:
            return ProcessResult.failed(
                f"Installation failed with exit code {sink_code}",
                returncode=sink_code,
            )
        return ProcessResult.success()


async def _pump(source: asyncio.StreamReader, sink: asyncio.StreamWriter) -> bool:
    """Copy bytes until EOF, then close the sink so the consumer can finish.

    Returns False if the consumer stopped reading before EOF.
    """
    delivered = False
    try:
        while True:
            chunk = await source.read(PIPE_CHUNK_SIZE)
            if not chunk:
                delivered = True
                break
            sink.write(chunk)
            await sink.drain()
    except (BrokenPipeError, ConnectionResetError):
        logger.debug("Consumer closed its input early")
    finally:
        sink.close()
        try:
            await sink.wait_closed()
        except (BrokenPipeError, ConnectionResetError):
            pass
    return delivered


__all__ = ["ProcessRunner"]
