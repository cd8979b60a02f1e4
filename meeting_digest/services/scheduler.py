# process-wide timer that re-runs the network diagnostics on a fixed interval
# one instance lives on app.state; start() replaces any running timer, stop() is idempotent

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from meeting_digest.schemas.diagnostics import NetworkDiagnostics
from meeting_digest.services.diagnostics import format_report, run_network_diagnostics

logger = logging.getLogger(__name__)

DiagnosticsRunner = Callable[[Optional[str]], Awaitable[NetworkDiagnostics]]

JOB_ID = "network_diagnostics"


class DiagnosticsScheduler:
    def __init__(
        self,
        *,
        interval_hours: float = 12.0,
        runner: DiagnosticsRunner = run_network_diagnostics,
    ) -> None:
        self._interval_hours = interval_hours
        self._runner = runner
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._last_run: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    @property
    def last_run(self) -> Optional[datetime]:
        return self._last_run

    def start(self, api_key: Optional[str] = None) -> None:
        """Run one pass right away, then every interval. Must be called on the event loop."""
        if self._scheduler is not None:
            self.stop()

        scheduler = AsyncIOScheduler(timezone=timezone.utc)
        scheduler.add_job(
            self._run_logged,
            trigger=IntervalTrigger(hours=self._interval_hours),
            args=[api_key],
            id=JOB_ID,
            name="Scheduled network diagnostics",
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("network diagnostics timer started (every %g hours)", self._interval_hours)

    def stop(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("network diagnostics timer stopped")

    def status(self) -> Dict[str, Any]:
        return {"isTimerRunning": self.is_running, "lastRun": self._last_run}

    async def run_once(self, api_key: Optional[str] = None) -> NetworkDiagnostics:
        # on-demand pass; does not count as a timer run
        return await self._runner(api_key)

    async def _run_logged(self, api_key: Optional[str]) -> None:
        try:
            logger.info("running scheduled network diagnostics")
            started = datetime.now(timezone.utc)
            diagnostics = await self._runner(api_key)
            report = format_report(diagnostics)
            self._last_run = datetime.now(timezone.utc)
            elapsed_ms = int((self._last_run - started).total_seconds() * 1000)
            logger.info(
                "scheduled diagnostics report (%s)\n%sdiagnostics completed in %dms",
                self._last_run.isoformat(), report, elapsed_ms,
            )
        except Exception:
            logger.exception("scheduled diagnostics failed")
