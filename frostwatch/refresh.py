"""Periodic and focus-triggered advisory refresh.

Re-fetches the forecast every `interval_seconds` (15 minutes by default)
and whenever the consuming view regains focus. Climate normals are served
from the orchestrator's cache and only re-fetched by `force_refresh()`.

Usage:
    async with AdvisoryRefresher(orchestrator, "65616", on_update=show):
        ...
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from frostwatch.ingest.errors import FrostwatchError
from frostwatch.models.forecast import Advisory
from frostwatch.pipeline.advisory_pipeline import AdvisoryOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 15 * 60

UpdateCallback = Callable[[Advisory], Awaitable[None] | None]


class AdvisoryRefresher:
    """Keeps one ZIP's advisory current until stopped."""

    def __init__(
        self,
        orchestrator: AdvisoryOrchestrator,
        zip_code: str | None,
        interval_seconds: float = DEFAULT_INTERVAL,
        on_update: UpdateCallback | None = None,
    ):
        self.orchestrator = orchestrator
        self.zip_code = zip_code
        self.interval_seconds = interval_seconds
        self.on_update = on_update
        self.latest: Advisory | None = None
        self._task: asyncio.Task | None = None
        self._total_refreshes = 0
        self._total_failures = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Load once, then schedule the periodic refresh."""
        if self.running:
            return
        await self.refresh_now()
        self._task = asyncio.create_task(self._loop())
        logger.info(
            "Advisory refresh started for ZIP %s every %ds",
            self.zip_code, self.interval_seconds,
        )

    async def stop(self) -> None:
        """Cancel the refresh timer."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Advisory refresh loop for ZIP %s had crashed", self.zip_code)
        logger.info(
            "Advisory refresh stopped: %d refreshes (%d failed)",
            self._total_refreshes, self._total_failures,
        )

    async def notify_focus(self) -> Advisory | None:
        """The consuming view regained focus."""
        return await self.refresh_now()

    async def refresh_now(self) -> Advisory | None:
        if not self.zip_code:
            return None
        return await self._refresh(force=False)

    async def force_refresh(self) -> Advisory | None:
        """Refresh including a new normals fetch."""
        if not self.zip_code:
            return None
        return await self._refresh(force=True)

    async def _refresh(self, force: bool) -> Advisory | None:
        self._total_refreshes += 1
        try:
            if force:
                advisory = await self.orchestrator.get_advisory(
                    self.zip_code, force_refresh=True
                )
            else:
                advisory = await self.orchestrator.refresh_forecast(self.zip_code)
        except FrostwatchError:
            self._total_failures += 1
            logger.exception("Advisory refresh #%d failed", self._total_refreshes)
            return None

        self.latest = advisory
        if self.on_update is not None:
            try:
                result = self.on_update(advisory)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception("Advisory update callback failed for ZIP %s", self.zip_code)
        return advisory

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.refresh_now()
            except Exception:
                # the timer outlives a bad refresh
                self._total_failures += 1
                logger.exception("Advisory refresh #%d crashed", self._total_refreshes)

    async def __aenter__(self) -> "AdvisoryRefresher":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
