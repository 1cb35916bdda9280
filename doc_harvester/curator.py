# File: doc_harvester/curator.py
"""doc_harvester.curator: проверка временных записей, перенос в датасет и очистка staging."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Union

from doc_harvester.crawler.models import PageRecord
from doc_harvester.exceptions import RecordParseError
from doc_harvester.logger import logger

__all__ = ["CurationReport", "DatasetCurator", "timestamp_suffix"]


def timestamp_suffix(now: datetime) -> str:
    """``MMDDYYHHMMSS``, zero-padded."""
    return now.strftime("%m%d%y%H%M%S")


@dataclass(slots=True)
class CurationReport:
    """What happened to the staged files of one run."""

    moved: List[str] = field(default_factory=list)
    renamed: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    unparsed: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class DatasetCurator:
    """Validates staged records, moves the good ones into the dataset and removes staging."""

    def __init__(
        self,
        staging_dir: Union[str, Path],
        dataset_dir: Union[str, Path],
        not_found_marker: str = "404",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.staging_dir = Path(staging_dir)
        self.dataset_dir = Path(dataset_dir)
        self.not_found_marker = not_found_marker
        self.clock = clock

    def discard_staging(self) -> CurationReport:
        """Nothing was enqueued: drop staging if it exists, leave the dataset alone."""
        report = CurationReport()
        if self.staging_dir.exists():
            self._remove_staging(report)
            logger.info("Deleted the staging folder since no requests were enqueued.")
        return report

    def curate(self) -> CurationReport:
        """Move valid staged records into the dataset; staging is always removed afterwards."""
        report = CurationReport()
        try:
            try:
                self.dataset_dir.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                msg = f"Error creating the dataset folder {self.dataset_dir}: {exc}"
                logger.error(msg)
                report.warnings.append(msg)
            else:
                if self.staging_dir.is_dir():
                    for path in sorted(self.staging_dir.glob("*.json")):
                        self._curate_file(path, report)
        finally:
            if self.staging_dir.exists():
                self._remove_staging(report)
        logger.info(
            "Curation done: %d moved, %d renamed, %d deleted, %d unparsable",
            len(report.moved),
            len(report.renamed),
            len(report.deleted),
            len(report.unparsed),
        )
        return report

    def _curate_file(self, path: Path, report: CurationReport) -> None:
        try:
            record = PageRecord.from_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, RecordParseError) as exc:
            logger.error("Error reading or parsing file %s: %s", path.name, exc)
            report.unparsed.append(path.name)
            return

        if not record.is_valid(self.not_found_marker):
            try:
                path.unlink()
            except OSError as exc:
                self._file_error(path, exc, report)
                return
            logger.info("Deleting invalid file: %s", path.name)
            report.deleted.append(path.name)
            return

        target = self.dataset_dir / path.name
        renamed = target.exists()
        if renamed:
            target = self._collision_free(path)
        try:
            shutil.move(str(path), str(target))
        except OSError as exc:
            self._file_error(path, exc, report)
            return
        if renamed:
            logger.info("File with the same name exists. Moved and renamed: %s", target.name)
            report.renamed.append(target.name)
        else:
            logger.info("Moved valid file: %s", path.name)
            report.moved.append(target.name)

    @staticmethod
    def _file_error(path: Path, exc: OSError, report: CurationReport) -> None:
        msg = f"Error processing file {path.name}: {exc}"
        logger.error(msg)
        report.warnings.append(msg)

    def _collision_free(self, path: Path) -> Path:
        stem = f"{path.stem}_{timestamp_suffix(self.clock())}"
        candidate = self.dataset_dir / f"{stem}{path.suffix}"
        n = 1
        while candidate.exists():
            candidate = self.dataset_dir / f"{stem}_{n}{path.suffix}"
            n += 1
        return candidate

    def _remove_staging(self, report: CurationReport) -> None:
        try:
            shutil.rmtree(self.staging_dir)
        except OSError as exc:
            msg = f"Error deleting the staging folder {self.staging_dir}: {exc}"
            logger.error(msg)
            report.warnings.append(msg)
        else:
            logger.debug("Removed staging folder %s", self.staging_dir)
