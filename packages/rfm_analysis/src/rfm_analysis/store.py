"""Saved analyses -- one JSON blob per run under a store directory.

Each file holds the run parameters (name, months, segments, source file)
next to the full serialized result, so a saved analysis can be reopened
without the source spreadsheet.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from rfm_analysis.exceptions import AnalysisNotFoundError, StorageError
from rfm_analysis.types import RFMResult

logger = logging.getLogger(__name__)

DEFAULT_STORE_DIR = Path("saved_analyses")
BLOB_VERSION = 1


@dataclass(frozen=True)
class SavedAnalysis:
    """A stored RFM run."""

    id: str
    name: str
    months: int
    segments: list[str]
    file_name: str
    result_data: dict
    created_at: str
    version: int = BLOB_VERSION

    @property
    def result(self) -> RFMResult:
        return RFMResult.from_dict(self.result_data)


class AnalysisStore:
    """Directory-backed store of saved analyses."""

    def __init__(self, store_dir: Path = DEFAULT_STORE_DIR) -> None:
        self.store_dir = Path(store_dir)

    def _path(self, analysis_id: str) -> Path:
        # ids are uuid hex; reject anything that could escape the directory
        if not analysis_id or not analysis_id.isalnum():
            raise AnalysisNotFoundError(analysis_id)
        return self.store_dir / f"{analysis_id}.json"

    def create(
        self,
        name: str,
        months: int,
        segments: list[str],
        file_name: str,
        result: RFMResult,
    ) -> SavedAnalysis:
        """Persist a result and return the stored record."""
        if not name.strip():
            raise StorageError("Analysis name must not be blank")
        record = SavedAnalysis(
            id=uuid.uuid4().hex,
            name=name.strip(),
            months=months,
            segments=list(segments),
            file_name=file_name,
            result_data=result.to_dict(),
            created_at=datetime.now().isoformat(),
        )
        try:
            self.store_dir.mkdir(parents=True, exist_ok=True)
            self._path(record.id).write_text(
                json.dumps(asdict(record), default=str), encoding="utf-8"
            )
        except OSError as e:
            raise StorageError(f"Failed to save analysis '{name}': {e}") from e
        logger.info("Saved analysis %s (%s)", record.id, record.name)
        return record

    def get(self, analysis_id: str) -> SavedAnalysis:
        path = self._path(analysis_id)
        if not path.exists():
            raise AnalysisNotFoundError(analysis_id)
        try:
            return _load(path)
        except (json.JSONDecodeError, TypeError, KeyError) as e:
            raise StorageError(f"Saved analysis {analysis_id} is unreadable: {e}") from e

    def list_analyses(self) -> list[SavedAnalysis]:
        """All saved analyses, newest first. Malformed files are skipped."""
        if not self.store_dir.is_dir():
            return []
        records: list[SavedAnalysis] = []
        for path in self.store_dir.glob("*.json"):
            try:
                records.append(_load(path))
            except (json.JSONDecodeError, TypeError, KeyError) as e:
                logger.warning("Skipping malformed analysis file %s: %s", path.name, e)
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def delete(self, analysis_id: str) -> None:
        path = self._path(analysis_id)
        if not path.exists():
            raise AnalysisNotFoundError(analysis_id)
        path.unlink()
        logger.info("Deleted analysis %s", analysis_id)


def _load(path: Path) -> SavedAnalysis:
    data = json.loads(path.read_text(encoding="utf-8"))
    return SavedAnalysis(**data)
