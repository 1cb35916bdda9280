# File: doc_harvester/exceptions.py
"""Error taxonomy for the harvesting pipeline."""
from __future__ import annotations


class HarvestError(Exception):
    """Base class for all DocHarvester errors."""


class CatalogReadError(HarvestError):
    """The catalog file is missing, unreadable or not well-formed CSV."""


class PolicyCheckError(HarvestError):
    """robots.txt could not be fetched; the gate resolves it to *allow*."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"robots.txt check failed for {url}: {reason}")
        self.url = url
        self.reason = reason


class FetchTaskError(HarvestError):
    """A single page fetch failed after the engine gave up on it."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class RecordParseError(HarvestError):
    """A staged record file is not a JSON object."""


__all__ = [
    "HarvestError",
    "CatalogReadError",
    "PolicyCheckError",
    "FetchTaskError",
    "RecordParseError",
]
