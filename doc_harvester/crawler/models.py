# doc_harvester/crawler/models.py
"""
Data models exchanged between the policy gate, the crawl engine and the recorder.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Union

from doc_harvester.exceptions import RecordParseError


@dataclass(frozen=True, slots=True)
class FetchTask:
    """A URL queued for fetching, tagged with the API it documents."""

    url: str
    api_name: str


@dataclass(frozen=True, slots=True)
class PolicyDecision:
    """Outcome of the robots.txt gate for one URL."""

    url: str
    allowed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


@dataclass(slots=True)
class FetchedPage:
    """Successful fetch: raw HTML plus the task it belongs to."""

    task: FetchTask
    html: str
    status: int = 200


@dataclass(slots=True)
class FetchFailure:
    """Fetch the engine gave up on."""

    task: FetchTask
    error: str


FetchOutcome = Union[FetchedPage, FetchFailure]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(slots=True)
class PageRecord:
    """One harvested documentation page, stored as ``{apiName, url, title, content}``."""

    api_name: str
    url: str
    title: str
    content: str

    def is_valid(self, not_found_marker: str = "404") -> bool:
        """All fields non-empty and the title is not a not-found page."""
        return (
            all((self.api_name, self.url, self.title, self.content))
            and not_found_marker not in self.title
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "apiName": self.api_name,
            "url": self.url,
            "title": self.title,
            "content": self.content,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)

    @classmethod
    def from_json(cls, text: str) -> PageRecord:
        """Parse a staged file. Missing fields become empty strings (and thus invalid)."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RecordParseError(f"invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise RecordParseError(f"expected a JSON object, got {type(data).__name__}")
        return cls(
            api_name=_as_text(data.get("apiName")),
            url=_as_text(data.get("url")),
            title=_as_text(data.get("title")),
            content=_as_text(data.get("content")),
        )


__all__ = [
    "FetchTask",
    "PolicyDecision",
    "FetchedPage",
    "FetchFailure",
    "FetchOutcome",
    "PageRecord",
]
