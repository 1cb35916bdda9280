# doc_harvester/crawler/robots.py
"""
Coarse robots.txt gate.

Only one rule is evaluated: a site whose robots.txt contains the broad
``Disallow: /`` directive is skipped entirely. There is no per-path matching,
no user-agent sections and no crawl-delay; a fully disallowed site is the only
thing this gate keeps us away from.
"""
from __future__ import annotations

from urllib.parse import urlparse, urlunparse

from aiohttp import ClientSession, ClientTimeout

from doc_harvester.config import HarvestConfig
from doc_harvester.crawler.models import PolicyDecision
from doc_harvester.exceptions import PolicyCheckError
from doc_harvester.logger import logger


def robots_url_for(url: str) -> str:
    """Return ``<scheme>://<netloc>/robots.txt`` for *url*."""
    parsed = urlparse(url)
    return urlunparse((parsed.scheme, parsed.netloc, "/robots.txt", "", "", ""))


class CrawlPolicyGate:
    """Decides whether a documentation URL may be crawled at all."""

    def __init__(self, session: ClientSession, config: HarvestConfig) -> None:
        self.session = session
        self.config = config
        self._headers = {"User-Agent": config.user_agent, "Accept": "text/plain"}

    async def check(self, url: str) -> PolicyDecision:
        """Fetch robots.txt for *url*; deny only on a reachable disallow-all file."""
        robots_url = robots_url_for(url)
        try:
            async with self.session.get(
                robots_url,
                headers=self._headers,
                timeout=ClientTimeout(total=self.config.policy_timeout),
            ) as resp:
                if not 200 <= resp.status < 300:
                    logger.warning(
                        "Could not fetch robots.txt for %s (HTTP %s). Defaulting to allow.",
                        url,
                        resp.status,
                    )
                    return PolicyDecision(url, True, f"HTTP {resp.status}")
                text = await resp.text(errors="replace")
        except Exception as exc:
            err = PolicyCheckError(url, str(exc) or type(exc).__name__)
            logger.warning("%s. Defaulting to allow.", err)
            return PolicyDecision(url, True, "unreachable")

        if self.config.disallow_marker in text:
            return PolicyDecision(url, False, "disallow-all")
        return PolicyDecision(url, True, "allowed")


__all__ = ["CrawlPolicyGate", "robots_url_for"]
