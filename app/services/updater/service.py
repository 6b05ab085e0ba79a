"""Auto-updater - periodically re-runs the data refresh script in a child process."""

import asyncio
import math
import signal
import sys
import time
from collections.abc import Awaitable, Callable
from pathlib import Path

from loguru import logger

from app.models.updater import AutoUpdateState, UpdateResult, iso_ms
from app.repositories.storage import TempFileStore
from settings import UPDATE_INITIAL_DELAY, UPDATE_INTERVAL

PROJECT_ROOT = Path(__file__).resolve().parents[3]
SYNC_SCRIPT = PROJECT_ROOT / "sync_data.py"

Runner = Callable[[list[str]], Awaitable[tuple[int, str, str]]]


async def run_process(command: list[str], cwd: Path = PROJECT_ROOT) -> tuple[int, str, str]:
    """(exit code, stdout, stderr) of a child process."""
    proc = await asyncio.create_subprocess_exec(
        *command,
        cwd=str(cwd),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    out, err = await proc.communicate()
    return proc.returncode, out.decode(errors="replace"), err.decode(errors="replace")


class AutoUpdater:
    """One timer per process: `stopped -> running` on start(), back on stop().

    Every trigger is guarded by the in-flight flag and the minimum interval;
    a guarded call is a no-op that reports the time remaining.
    """

    def __init__(
        self,
        files: TempFileStore,
        interval: float = UPDATE_INTERVAL,
        initial_delay: float = UPDATE_INITIAL_DELAY,
        command: list[str] | None = None,
        runner: Runner | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._files = files
        self._interval = interval
        self._initial_delay = initial_delay
        self._command = command or [sys.executable, str(SYNC_SCRIPT)]
        self._runner = runner or run_process
        self._clock = clock
        self._state = AutoUpdateState(interval_ms=int(interval * 1000))
        self._task: asyncio.Task | None = None
        self._previous_handlers: dict[int, object] = {}

    @property
    def state(self) -> AutoUpdateState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    # Lifecycle

    def start(self) -> bool:
        """Schedule the loop on the running event loop; False if already running."""
        if self._state.is_running:
            logger.debug("Auto-updater already running")
            return False

        self._task = asyncio.get_running_loop().create_task(self._run())
        self._state.is_running = True
        logger.info(
            "Auto-updater started: first run in {}s, then every {} min",
            self._initial_delay,
            self._interval / 60,
        )
        return True

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        if self._state.is_running:
            logger.info("Auto-updater stopped")
        self._state.is_running = False

    async def _run(self) -> None:
        await asyncio.sleep(self._initial_delay)
        while True:
            result = await self.trigger()
            if result.success:
                logger.info("Scheduled update finished")
            else:
                logger.info("Scheduled update skipped or failed: {}", result.message)
            await asyncio.sleep(self._interval)

    def install_signal_handlers(self) -> list[int]:
        """Stop on SIGTERM/SIGINT, then hand the signal to whatever handled it before."""
        loop = asyncio.get_running_loop()
        installed = []
        for sig in (signal.SIGTERM, signal.SIGINT):
            previous = signal.getsignal(sig)

            def handler(signum, frame, previous=previous):
                loop.call_soon_threadsafe(self.stop)
                if callable(previous):
                    previous(signum, frame)

            try:
                signal.signal(sig, handler)
            except ValueError:
                # Not the main thread (e.g. under a test client)
                logger.debug("Signal handlers not installed outside the main thread")
                break
            self._previous_handlers[sig] = previous
            installed.append(sig)
        return installed

    def restore_signal_handlers(self) -> None:
        for sig, previous in self._previous_handlers.items():
            signal.signal(sig, previous)
        self._previous_handlers.clear()

    # Trigger

    def _times(self) -> tuple[str | None, str | None]:
        last = self._state.last_update_time
        if not last:
            return None, None
        return iso_ms(last), iso_ms(self._state.next_update_time())

    async def trigger(self, force: bool = False) -> UpdateResult:
        now = self._now_ms()
        last_update, next_update = self._times()

        if self._state.is_updating:
            return UpdateResult(
                success=False,
                message="Update already in progress",
                last_update=last_update,
                next_update=next_update,
                time_remaining_ms=self._state.time_remaining_ms(now),
            )

        if not force and now - self._state.last_update_time < self._state.interval_ms:
            remaining = self._state.time_remaining_ms(now)
            return UpdateResult(
                success=False,
                message=f"Too soon to update. Next update in {math.ceil(remaining / 60000)} minutes",
                last_update=last_update,
                next_update=next_update,
                time_remaining_ms=remaining,
            )

        self._state.is_updating = True
        logger.info("Starting automatic chart data update: {}", " ".join(self._command))
        try:
            code, output, error = await self._runner(self._command)
        except OSError as e:
            logger.error("Could not start update process: {}", e)
            return UpdateResult(
                success=False, message="Error running automatic update", status_code=500, error=str(e)
            )
        finally:
            self._state.is_updating = False

        if code != 0:
            logger.error("Update process exited with code {}", code)
            return UpdateResult(
                success=False,
                message="Failed to update chart data automatically",
                status_code=500,
                output=output,
                error=error,
            )

        self._state.last_update_time = self._now_ms()
        last_update, next_update = self._times()
        try:
            self._files.stamp_summary(
                autoUpdateEnabled=True,
                lastAutoUpdate=last_update,
                nextScheduledUpdate=next_update,
            )
        except (OSError, ValueError) as e:
            logger.warning("Failed to update summary with auto-update info: {}", e)

        logger.info("Chart data updated, next update at {}", next_update)
        return UpdateResult(
            success=True,
            message="Chart data updated automatically",
            output=output,
            last_update=last_update,
            next_update=next_update,
        )

    def status(self) -> dict:
        now = self._now_ms()
        last_update, next_update = self._times()
        remaining = self._state.time_remaining_ms(now)
        return {
            "isRunning": self._state.is_running,
            "isUpdating": self._state.is_updating,
            "lastUpdate": last_update,
            "nextUpdate": next_update,
            "timeUntilNextMs": remaining,
            "timeUntilNextMinutes": math.ceil(remaining / 60000),
            "updateIntervalMinutes": self._state.interval_ms / 60000,
        }
