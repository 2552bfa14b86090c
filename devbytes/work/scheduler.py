"""Unique periodic job scheduling backed by Redis.

A job registration lives in the Redis hash ``devbytes:work:<name>`` with the
fields ``request`` (the serialized :class:`PeriodicWorkRequest`),
``last_run_at`` (unix time of the last completed run) and ``last_result``.
Because registrations outlive the process, a KEEP enqueue after a restart
resumes the stored schedule instead of starting a new one.
"""

import asyncio
import logging
import time
from enum import Enum
from functools import partial
from typing import Protocol

from redis.asyncio import Redis
from redis.exceptions import RedisError

from devbytes.work.constraints import (
    Constraints,
    DeviceStateProbe,
    PeriodicWorkRequest,
    StaticDeviceStateProbe,
)

logger = logging.getLogger(__name__)


class WorkResult(str, Enum):
    """Outcome of one run of a background job."""

    SUCCESS = "success"
    RETRY = "retry"
    FAILURE = "failure"


class ExistingPeriodicWorkPolicy(str, Enum):
    """What to do when a job with the same name is already registered."""

    KEEP = "keep"
    REPLACE = "replace"


class Worker(Protocol):
    async def do_work(self) -> WorkResult:
        ...


def _key(name: str) -> str:
    """Generate Redis key for a job registration."""
    return f"devbytes:work:{name}"


def _log_runner_exit(name: str, task: asyncio.Task) -> None:
    if task.cancelled():
        return
    if exc := task.exception():
        logger.error("Work runner exited name=%s", name, exc_info=exc)


class WorkScheduler:
    """Runs named periodic jobs, at most one runner per name."""

    def __init__(
        self,
        redis: Redis,
        probe: DeviceStateProbe | None = None,
        retry_backoff_seconds: float = 30,
        constraint_poll_seconds: float = 900,
    ):
        self._redis = redis
        self._probe = probe or StaticDeviceStateProbe()
        self._retry_backoff_seconds = retry_backoff_seconds
        self._constraint_poll_seconds = constraint_poll_seconds
        self._tasks: dict[str, asyncio.Task] = {}

    def is_running(self, name: str) -> bool:
        task = self._tasks.get(name)
        return task is not None and not task.done()

    async def enqueue_unique_periodic_work(
        self,
        name: str,
        policy: ExistingPeriodicWorkPolicy,
        request: PeriodicWorkRequest,
        worker: Worker,
    ) -> bool:
        """Register a periodic job under a unique name.

        Args:
            name: Unique job name
            policy: KEEP leaves an existing registration in place, REPLACE
                overwrites it and restarts the runner
            request: Interval and constraints for a new registration
            worker: Object whose ``do_work`` is invoked on every run

        Returns:
            True if ``request`` was registered, False if an existing
            registration was kept
        """
        key = _key(name)
        payload = request.model_dump_json()

        if policy is ExistingPeriodicWorkPolicy.KEEP:
            created = await self._redis.hsetnx(key, "request", payload)  # type: ignore[misc]
            if not created:
                stored = await self._redis.hget(key, "request")  # type: ignore[misc]
                kept = PeriodicWorkRequest.model_validate_json(stored)
                logger.info("Keeping existing periodic work name=%s", name)
                if not self.is_running(name):
                    self._start(name, kept, worker)
                return False
        else:
            await self._redis.hset(key, "request", payload)  # type: ignore[misc]

        await self._stop(name)

        logger.info(
            "Enqueued periodic work name=%s interval=%s",
            name,
            request.repeat_interval,
        )
        self._start(name, request, worker)
        return True

    async def cancel_unique_work(self, name: str) -> None:
        """Stop the runner and drop the registration."""
        await self._stop(name)
        await self._redis.delete(_key(name))
        logger.info("Cancelled periodic work name=%s", name)

    async def shutdown(self) -> None:
        """Stop every runner, keeping registrations for the next start."""
        for name in list(self._tasks):
            await self._stop(name)

    def _start(self, name: str, request: PeriodicWorkRequest, worker: Worker) -> None:
        task = asyncio.create_task(self._run(name, request, worker), name=f"work:{name}")
        task.add_done_callback(partial(_log_runner_exit, name))
        self._tasks[name] = task

    async def _stop(self, name: str) -> None:
        task = self._tasks.pop(name, None)
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(
        self, name: str, request: PeriodicWorkRequest, worker: Worker
    ) -> None:
        key = _key(name)
        interval = request.repeat_interval.total_seconds()
        backoff = self._retry_backoff_seconds

        while True:
            try:
                await asyncio.sleep(await self._seconds_until_due(key, interval))

                if not await self._constraints_met(name, request.constraints):
                    logger.info("Constraints not met, deferring work name=%s", name)
                    await asyncio.sleep(self._constraint_poll_seconds)
                    continue

                result = await self._execute(name, worker)

                if result is WorkResult.RETRY:
                    delay = min(backoff, interval)
                    logger.info("Retrying work name=%s in %.0fs", name, delay)
                    backoff *= 2
                    await asyncio.sleep(delay)
                    continue

                backoff = self._retry_backoff_seconds
                await self._redis.hset(  # type: ignore[misc]
                    key,
                    mapping={"last_run_at": str(time.time()), "last_result": result.value},
                )
            except RedisError:
                logger.exception("Redis error in work runner name=%s", name)
                await asyncio.sleep(self._constraint_poll_seconds)

    async def _seconds_until_due(self, key: str, interval: float) -> float:
        last_run_at = await self._redis.hget(key, "last_run_at")  # type: ignore[misc]
        if last_run_at is None:
            return 0
        return max(0.0, float(last_run_at) + interval - time.time())

    async def _constraints_met(self, name: str, constraints: Constraints) -> bool:
        try:
            state = await self._probe.current_state()
        except Exception:
            logger.exception("Device state probe failed name=%s", name)
            return False
        return constraints.satisfied_by(state)

    async def _execute(self, name: str, worker: Worker) -> WorkResult:
        logger.info("Running work name=%s", name)
        try:
            result = await worker.do_work()
        except Exception:
            logger.exception("Work raised name=%s", name)
            return WorkResult.FAILURE
        logger.info("Work finished name=%s result=%s", name, result.value)
        return result
