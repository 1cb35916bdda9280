# File: doc_harvester/engine.py
"""doc_harvester.engine: оркестрация: каталог → robots.txt → загрузка → курирование."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from aiohttp import ClientSession

from doc_harvester.catalog import load_catalog
from doc_harvester.config import HarvestConfig
from doc_harvester.crawler.fetcher import AsyncCrawlEngine, CrawlEngine
from doc_harvester.crawler.robots import CrawlPolicyGate
from doc_harvester.curator import CurationReport, DatasetCurator
from doc_harvester.enqueue import EnqueueCoordinator, PolicyCheck
from doc_harvester.logger import logger
from doc_harvester.recorder import PageRecorder

__all__ = ["HarvestReport", "harvest", "run_harvest"]


@dataclass(slots=True)
class HarvestReport:
    """Итог одного прогона."""

    loaded: int = 0
    enqueued: int = 0
    skipped: int = 0
    scraped: int = 0
    failed: int = 0
    curation: CurationReport = field(default_factory=CurationReport)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


async def harvest(
    config: HarvestConfig,
    *,
    engine: Optional[CrawlEngine] = None,
    gate: Optional[PolicyCheck] = None,
) -> HarvestReport:
    """Run the whole pipeline once.

    *engine* and *gate* default to :class:`AsyncCrawlEngine` and
    :class:`CrawlPolicyGate`; tests inject fakes. Only
    :class:`~doc_harvester.exceptions.CatalogReadError` propagates.
    """
    entries = load_catalog(config.catalog_path, config.name_column, config.url_column)
    logger.info("Loaded %d API URLs.", len(entries))
    report = HarvestReport(loaded=len(entries))

    curator = DatasetCurator(config.staging_dir, config.dataset_dir, config.not_found_marker)
    recorder = PageRecorder(config.staging_dir)

    async with AsyncExitStack() as stack:
        if engine is None:
            engine = await stack.enter_async_context(AsyncCrawlEngine(config))

        if gate is None:
            session = await stack.enter_async_context(ClientSession())
            gate = CrawlPolicyGate(session, config).check
        coordinator = EnqueueCoordinator(gate, engine, config.policy_concurrency)
        report.enqueued = await coordinator.enqueue(entries)
        report.skipped = len(coordinator.skipped)

        if report.enqueued == 0:
            logger.info("No requests were enqueued. Cleaning up the staging folder.")
            report.curation = curator.discard_staging()
        else:
            try:
                async for outcome in engine.stream():
                    recorder.handle(outcome)
            finally:
                report.scraped = recorder.scraped
                report.failed = recorder.failed
                report.curation = curator.curate()

    for warning in report.curation.warnings:
        logger.warning("Run finished with a cleanup warning: %s", warning)
    logger.info("Scraping completed. Datasets saved in %s", config.dataset_dir)
    return report


def run_harvest(config: HarvestConfig) -> HarvestReport:
    """Синхронная обёртка для CLI."""
    return asyncio.run(harvest(config))
