# File: tests/conftest.py
import logging
from pathlib import Path
from typing import AsyncIterator, Callable, Dict, Iterable, List, Optional

import pytest

from doc_harvester.config import HarvestConfig
from doc_harvester.crawler.models import FetchedPage, FetchFailure, FetchTask, PolicyDecision


def write_catalog(path: Path, rows: Iterable[tuple[str, str]]) -> Path:
    """Write a catalog CSV with the default header."""
    lines = ["API_Name,Official_Documentation_URL"]
    lines += [f"{name},{url}" for name, url in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def page_html(title: str, body: str) -> str:
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


class FakeEngine:
    """Crawl engine stand-in: *pages* maps URL -> HTML, missing URLs fail."""

    def __init__(self, pages: Optional[Dict[str, str]] = None) -> None:
        self.pages = pages or {}
        self.tasks: List[FetchTask] = []

    def add_requests(self, tasks: Iterable[FetchTask]) -> None:
        self.tasks.extend(tasks)

    async def stream(self) -> AsyncIterator:
        for task in self.tasks:
            html = self.pages.get(task.url)
            if html is None:
                yield FetchFailure(task, "connection refused")
            else:
                yield FetchedPage(task, html)


def fake_gate(denied: Iterable[str] = ()) -> Callable:
    blocked = set(denied)

    async def check(url: str) -> PolicyDecision:
        return PolicyDecision(url, url not in blocked)

    return check


@pytest.fixture()
def harvest_config(tmp_path) -> HarvestConfig:
    """Config with every path inside tmp_path and fast network settings."""
    return HarvestConfig(
        catalog_path=tmp_path / "api-docs-urls.csv",
        staging_dir=tmp_path / "storage",
        dataset_dir=tmp_path / "datasets",
        policy_timeout=1.0,
        timeout=2.0,
        retry_times=0,
    )


@pytest.fixture()
def log_records(caplog):
    """caplog wired to the project logger (it does not propagate to root)."""
    lg = logging.getLogger("DocHarvester")
    lg.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger="DocHarvester")
    yield caplog
    lg.removeHandler(caplog.handler)
