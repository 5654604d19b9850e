"""Concurrent per-cycle fetching with one shared deadline."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait

from status_core.models import Source, SourceResult
from status_core.sources import failed, timed_out

logger = logging.getLogger(__name__)


class FetchScheduler:
    """Runs every source's fetch once per cycle.

    A source whose previous fetch is still running is not submitted again; it
    keeps reporting ``timed out`` until that fetch finishes.
    """

    def __init__(self, sources: list[Source], timeout: float):
        self.sources = sources
        self.timeout = timeout
        # One worker per source is enough: at most one fetch per source is in flight.
        self._pool = ThreadPoolExecutor(max_workers=max(1, len(sources)), thread_name_prefix="fetch")
        self._inflight: dict[str, Future] = {}

    def _submit(self, source: Source) -> Future:
        pending = self._inflight.get(source.key)
        if pending is not None and not pending.done():
            return pending
        future = self._pool.submit(source.fetch)
        self._inflight[source.key] = future
        return future

    def _resolve(self, source: Source, future: Future) -> SourceResult:
        if not future.done():
            logger.warning("%s fetch exceeded %ss", source.key, self.timeout)
            return timed_out(source.key, source.title, self.timeout)
        try:
            result = future.result()
        except Exception as exc:  # adapters are fail-soft; this only guards against bugs
            logger.exception("%s fetch raised", source.key)
            return failed(source.key, source.title, type(exc).__name__)
        if not isinstance(result, SourceResult):
            return failed(source.key, source.title, "no result")
        return result

    def run_cycle(self) -> dict[str, SourceResult]:
        started = time.monotonic()
        futures = {source.key: self._submit(source) for source in self.sources}
        wait(list(futures.values()), timeout=self.timeout)

        results: dict[str, SourceResult] = {}
        for source in self.sources:
            result = self._resolve(source, futures[source.key])
            source.last = result
            results[source.key] = result
        logger.debug("fetch cycle finished in %.2fs", time.monotonic() - started)
        return results

    def close(self) -> None:
        self._pool.shutdown(wait=False, cancel_futures=True)
