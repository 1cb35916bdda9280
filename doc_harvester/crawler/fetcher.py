# doc_harvester/crawler/fetcher.py
"""
Crawl engine: fetches registered tasks with a bounded worker pool, retry/backoff
and timeout, and yields one outcome per task.
"""
from __future__ import annotations

import asyncio
import random
from typing import AsyncIterator, Iterable, List, Optional, Protocol, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from doc_harvester.config import HarvestConfig
from doc_harvester.crawler.models import FetchedPage, FetchFailure, FetchOutcome, FetchTask
from doc_harvester.logger import logger

__all__ = ("CrawlEngine", "AsyncCrawlEngine")


class CrawlEngine(Protocol):
    """Anything that accepts tasks and streams back one outcome per task."""

    def add_requests(self, tasks: Iterable[FetchTask]) -> None: ...

    def stream(self) -> AsyncIterator[FetchOutcome]: ...


class AsyncCrawlEngine:
    """aiohttp-based engine with a worker pool, retry on 5xx/429 and per-request timeout."""
    _RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)
    _HTML_MIME = ("text/html", "application/xhtml+xml")
    backoff_base: float = 1.0

    def __init__(self, config: HarvestConfig) -> None:
        self.config = config
        self.concurrency = config.max_concurrency
        self.retry_times = config.retry_times
        self.session: Optional[ClientSession] = None
        self._pending: List[FetchTask] = []

    async def __aenter__(self) -> AsyncCrawlEngine:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def add_requests(self, tasks: Iterable[FetchTask]) -> None:
        self._pending.extend(tasks)

    async def stream(self) -> AsyncIterator[FetchOutcome]:
        """Fetch every pending task and yield its outcome; ends once all tasks settled."""
        if not self.session:
            raise RuntimeError("Session not initialized")
        tasks, self._pending = self._pending, []
        if not tasks:
            return

        queue: asyncio.Queue[FetchTask] = asyncio.Queue()
        for task in tasks:
            queue.put_nowait(task)
        outcomes: asyncio.Queue[FetchOutcome] = asyncio.Queue()
        workers = [
            asyncio.create_task(self._worker(queue, outcomes))
            for _ in range(min(self.concurrency, len(tasks)))
        ]
        logger.info("Crawling %d URL(s) with %d worker(s)", len(tasks), len(workers))
        try:
            for _ in range(len(tasks)):
                yield await outcomes.get()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

    async def _worker(
        self, queue: asyncio.Queue[FetchTask], outcomes: asyncio.Queue[FetchOutcome]
    ) -> None:
        while True:
            try:
                task = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            await outcomes.put(await self._fetch(task))
            queue.task_done()

    async def _fetch(self, task: FetchTask) -> FetchOutcome:
        assert self.session is not None
        attempts = 0
        while True:
            try:
                async with self.session.get(task.url) as resp:
                    if resp.status in self._RETRY_STATUS:
                        raise ClientError(f"retryable status {resp.status}")
                    mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                    if mime and mime not in self._HTML_MIME:
                        return FetchFailure(task, f"unsupported content type {mime!r}")
                    html = await resp.text(errors="replace")
                    return FetchedPage(task, html, resp.status)
            except (ClientError, asyncio.TimeoutError) as e:
                attempts += 1
                if attempts > self.retry_times:
                    return FetchFailure(task, str(e) or type(e).__name__)
                backoff = min(60, self.backoff_base * (2**attempts + random.random()))
                logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.retry_times, task.url, backoff)
                await asyncio.sleep(backoff)
            except Exception as e:
                return FetchFailure(task, str(e) or type(e).__name__)
