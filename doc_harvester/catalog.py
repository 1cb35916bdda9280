# File: doc_harvester/catalog.py
"""doc_harvester.catalog: чтение CSV-каталога API в список CatalogEntry."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Union
from urllib.parse import urlparse

from doc_harvester.exceptions import CatalogReadError
from doc_harvester.logger import logger

__all__: Sequence[str] = ("CatalogEntry", "load_catalog")


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One API and the URL of its official documentation."""

    api_name: str
    doc_url: str


def _is_absolute(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def load_catalog(
    path: Union[str, Path],
    name_column: str = "API_Name",
    url_column: str = "Official_Documentation_URL",
) -> List[CatalogEntry]:
    """Read the catalog CSV and return its entries in file order.

    Rows with an empty API name or a non-absolute URL are skipped with a
    warning. Raises :class:`CatalogReadError` when the file cannot be read,
    is not valid CSV or lacks one of the required columns.
    """
    p = Path(path)
    entries: List[CatalogEntry] = []
    seen: set[str] = set()
    try:
        with p.open(newline="", encoding="utf-8-sig") as fh:
            reader = csv.DictReader(fh, strict=True)
            header = reader.fieldnames or []
            missing = [c for c in (name_column, url_column) if c not in header]
            if missing:
                raise CatalogReadError(f"Catalog {p} lacks required column(s): {', '.join(missing)}")
            for row in reader:
                name = (row.get(name_column) or "").strip()
                url = (row.get(url_column) or "").strip()
                if not name or not _is_absolute(url):
                    logger.warning("Skipping catalog row %d: %r -> %r", reader.line_num, name, url)
                    continue
                if name in seen:
                    logger.debug("Duplicate API name in catalog: %s", name)
                seen.add(name)
                entries.append(CatalogEntry(api_name=name, doc_url=url))
    except OSError as exc:
        raise CatalogReadError(f"Cannot open catalog {p}: {exc}") from exc
    except (csv.Error, UnicodeDecodeError) as exc:
        raise CatalogReadError(f"Malformed catalog {p}: {exc}") from exc

    logger.debug("Loaded %d entries from catalog %s", len(entries), p)
    return entries
