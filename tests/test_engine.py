# File: tests/test_engine.py
"""End-to-end tests of the harvest pipeline."""
from __future__ import annotations

import json
from collections.abc import AsyncIterator

import pytest
from aiohttp import web

from conftest import FakeEngine, fake_gate, page_html, write_catalog
from doc_harvester.engine import harvest, run_harvest
from doc_harvester.exceptions import CatalogReadError


@pytest.mark.asyncio()
async def test_empty_catalog_runs_zero_mode(harvest_config):
    write_catalog(harvest_config.catalog_path, [])
    harvest_config.staging_dir.mkdir()
    (harvest_config.staging_dir / "stale.json").write_text("{}", encoding="utf-8")
    engine = FakeEngine()

    report = await harvest(harvest_config, engine=engine, gate=fake_gate())

    assert report.loaded == report.enqueued == 0
    assert engine.tasks == []
    assert not harvest_config.staging_dir.exists()
    assert not harvest_config.dataset_dir.exists()


@pytest.mark.asyncio()
async def test_everything_denied_skips_crawl(harvest_config):
    write_catalog(harvest_config.catalog_path, [("A", "https://a.example/docs")])
    report = await harvest(
        harvest_config, engine=FakeEngine(), gate=fake_gate({"https://a.example/docs"})
    )
    assert report.enqueued == 0 and report.skipped == 1
    assert not harvest_config.staging_dir.exists()


@pytest.mark.asyncio()
async def test_full_run_with_fake_engine(harvest_config, log_records):
    write_catalog(
        harvest_config.catalog_path,
        [
            ("Stripe API", "https://stripe.example/docs"),
            ("Blocked", "https://blocked.example/docs"),
            ("Gone", "https://gone.example/docs"),
            ("Down", "https://down.example/docs"),
        ],
    )
    harvest_config.dataset_dir.mkdir()
    existing = harvest_config.dataset_dir / "Stripe_API.json"
    existing.write_text('{"apiName": "Stripe API"}', encoding="utf-8")
    engine = FakeEngine(
        {
            "https://stripe.example/docs": page_html("Stripe Docs", "Payments"),
            "https://gone.example/docs": page_html("404 Not Found", "Nothing here"),
        }
    )

    report = await harvest(
        harvest_config, engine=engine, gate=fake_gate({"https://blocked.example/docs"})
    )

    assert (report.loaded, report.enqueued, report.skipped) == (4, 3, 1)
    assert (report.scraped, report.failed) == (2, 1)
    assert report.curation.deleted == ["Gone.json"]
    assert len(report.curation.renamed) == 1
    renamed = harvest_config.dataset_dir / report.curation.renamed[0]
    assert renamed.name.startswith("Stripe_API_") and len(renamed.stem) == len("Stripe_API_") + 12
    assert json.loads(renamed.read_text(encoding="utf-8"))["title"] == "Stripe Docs"
    assert existing.read_text(encoding="utf-8") == '{"apiName": "Stripe API"}'
    assert not harvest_config.staging_dir.exists()
    assert "Skipping https://blocked.example/docs" in log_records.text
    assert "Failed to scrape https://down.example/docs" in log_records.text


@pytest.mark.asyncio()
async def test_staging_removed_when_stream_raises(harvest_config):
    write_catalog(harvest_config.catalog_path, [("A", "https://a.example/docs")])

    class ExplodingEngine(FakeEngine):
        async def stream(self):
            harvest_config.staging_dir.mkdir()
            (harvest_config.staging_dir / "partial.json").write_text("{", encoding="utf-8")
            raise RuntimeError("engine crashed")
            yield  # pragma: no cover

    with pytest.raises(RuntimeError):
        await harvest(harvest_config, engine=ExplodingEngine(), gate=fake_gate())
    assert not harvest_config.staging_dir.exists()


@pytest.mark.asyncio()
async def test_unusable_dataset_dir_does_not_abort_run(harvest_config, log_records):
    write_catalog(harvest_config.catalog_path, [("Stripe API", "https://stripe.example/docs")])
    harvest_config.dataset_dir.write_text("not a folder", encoding="utf-8")
    engine = FakeEngine({"https://stripe.example/docs": page_html("Stripe Docs", "Payments")})

    report = await harvest(harvest_config, engine=engine, gate=fake_gate())

    assert report.scraped == 1
    assert report.curation.moved == []
    assert any("Error creating the dataset folder" in w for w in report.curation.warnings)
    assert "Run finished with a cleanup warning" in log_records.text
    assert not harvest_config.staging_dir.exists()


@pytest.mark.asyncio()
async def test_missing_catalog_propagates(harvest_config):
    with pytest.raises(CatalogReadError):
        await harvest(harvest_config, engine=FakeEngine(), gate=fake_gate())


# --------------------------------------------------------------------------- #
#                       Real engine + real robots gate                        #
# --------------------------------------------------------------------------- #


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


def docs_site(robots: str) -> web.Application:
    app = web.Application()

    async def handle_robots(_):
        return web.Response(text=robots, content_type="text/plain")

    async def handle_docs(_):
        return web.Response(
            text=page_html("Stripe API Reference", "<h1>Charges</h1>"), content_type="text/html"
        )

    async def handle_missing(_):
        return web.Response(
            status=404, text=page_html("404 Not Found", "Nothing"), content_type="text/html"
        )

    app.router.add_get("/robots.txt", handle_robots)
    app.router.add_get("/docs", handle_docs)
    app.router.add_get("/missing", handle_missing)
    return app


@pytest.mark.asyncio()
async def test_harvest_against_live_servers(harvest_config, unused_tcp_port_factory):
    open_port, closed_port = unused_tcp_port_factory(), unused_tcp_port_factory()
    async for open_base in _serve_app(docs_site("User-agent: *\nDisallow:"), open_port):
        async for closed_base in _serve_app(docs_site("User-agent: *\nDisallow: /"), closed_port):
            write_catalog(
                harvest_config.catalog_path,
                [
                    ("Stripe API", f"{open_base}/docs"),
                    ("Ghost API", f"{open_base}/missing"),
                    ("Private API", f"{closed_base}/docs"),
                ],
            )
            report = await harvest(harvest_config)

    assert (report.enqueued, report.skipped, report.scraped) == (2, 1, 2)
    assert report.curation.moved == ["Stripe_API.json"]
    assert report.curation.deleted == ["Ghost_API.json"]
    stored = json.loads((harvest_config.dataset_dir / "Stripe_API.json").read_text(encoding="utf-8"))
    assert stored == {
        "apiName": "Stripe API",
        "url": f"{open_base}/docs",
        "title": "Stripe API Reference",
        "content": "Charges",
    }
    assert not harvest_config.staging_dir.exists()


def test_run_harvest_sync_wrapper(harvest_config):
    write_catalog(harvest_config.catalog_path, [])
    report = run_harvest(harvest_config)
    assert report.loaded == 0
    assert not harvest_config.staging_dir.exists()
