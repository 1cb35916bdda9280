# File: doc_harvester/enqueue.py
"""doc_harvester.enqueue: проверка robots.txt для всего каталога и постановка задач в движок."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Sequence

from doc_harvester.catalog import CatalogEntry
from doc_harvester.crawler.fetcher import CrawlEngine
from doc_harvester.crawler.models import FetchTask, PolicyDecision
from doc_harvester.logger import logger

__all__ = ["EnqueueCoordinator", "PolicyCheck"]

PolicyCheck = Callable[[str], Awaitable[PolicyDecision]]


class EnqueueCoordinator:
    """Runs the policy gate over the catalog with at most *limit* checks in flight."""

    def __init__(self, gate: PolicyCheck, engine: CrawlEngine, limit: int = 10) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.gate = gate
        self.engine = engine
        self.limit = limit
        self.skipped: List[CatalogEntry] = []

    async def enqueue(self, entries: Sequence[CatalogEntry]) -> int:
        """Register a FetchTask for every allowed entry and return how many were registered."""
        self.skipped = []
        semaphore = asyncio.Semaphore(self.limit)

        async def _one(entry: CatalogEntry) -> bool:
            async with semaphore:
                decision = await self.gate(entry.doc_url)
            if not decision:
                logger.warning("Skipping %s: Not allowed by robots.txt", entry.doc_url)
                self.skipped.append(entry)
                return False
            self.engine.add_requests([FetchTask(url=entry.doc_url, api_name=entry.api_name)])
            logger.info("Enqueued: %s", entry.doc_url)
            return True

        results = await asyncio.gather(*(_one(e) for e in entries))
        return sum(results)
