# File: doc_harvester/recorder.py
"""doc_harvester.recorder: запись успешно загруженных страниц во временную папку."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Optional, Union

from doc_harvester.crawler.models import FetchedPage, FetchFailure, FetchOutcome, PageRecord
from doc_harvester.exceptions import FetchTaskError
from doc_harvester.logger import logger
from doc_harvester.parser.html_parser import ParsedPage, parse_html

__all__ = ["PageRecorder", "safe_filename"]

_UNSAFE = re.compile(r"[\s/\\]")


def safe_filename(api_name: str) -> str:
    """``"Stripe API"`` -> ``"Stripe_API.json"``."""
    return f"{_UNSAFE.sub('_', api_name)}.json"


class PageRecorder:
    """Turns engine outcomes into staged PageRecord files, one per API."""

    def __init__(
        self,
        staging_dir: Union[str, Path],
        parser: Callable[[str], ParsedPage] = parse_html,
    ) -> None:
        self.staging_dir = Path(staging_dir)
        self.parser = parser
        self.scraped = 0
        self.failed = 0

    def handle(self, outcome: FetchOutcome) -> Optional[Path]:
        if isinstance(outcome, FetchFailure):
            self.fail(outcome)
            return None
        return self.record(outcome)

    def record(self, page: FetchedPage) -> Optional[Path]:
        """Extract title/body and (over)write the staged file for the page's API."""
        parsed = self.parser(page.html)
        record = PageRecord(
            api_name=page.task.api_name,
            url=page.task.url,
            title=parsed.title,
            content=parsed.text,
        )
        target = self.staging_dir / safe_filename(record.api_name)
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
            target.write_text(record.to_json(), encoding="utf-8")
        except OSError as exc:
            self.failed += 1
            logger.error("Failed to save %s: %s", target, exc)
            return None
        self.scraped += 1
        logger.info("Scraped: %s", page.task.url)
        return target

    def fail(self, failure: FetchFailure) -> None:
        self.failed += 1
        logger.error("Failed to scrape %s", FetchTaskError(failure.task.url, failure.error))
