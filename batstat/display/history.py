"""
History fetcher for the log viewer.
Reads every device store in the log directory without modifying it.
"""

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from batstat.shared.database import count_rows, fetch_recent
from batstat.shared.models import Sample

logger = logging.getLogger(__name__)


@dataclass
class DeviceHistory:
    """Recent rows of one device's store"""
    name: str
    path: Path
    row_count: int
    samples: List[Sample] = field(default_factory=list)
    error: Optional[str] = None


class HistoryFetcher:
    """Loads recent samples from every ``*.db`` store in a log directory"""

    def __init__(self, log_dir: Union[str, Path]):
        self.log_dir = Path(log_dir)

    def store_paths(self) -> List[Path]:
        return sorted(self.log_dir.glob("*.db"))

    def fetch(self, limit: int = 10) -> List[DeviceHistory]:
        histories = []
        for path in self.store_paths():
            histories.append(self._fetch_one(path, limit))
        return histories

    def _fetch_one(self, path: Path, limit: int) -> DeviceHistory:
        name = path.stem
        try:
            rows = fetch_recent(path, limit)
            total = count_rows(path)
        except sqlite3.Error as e:
            logger.error(f"Failed to read {path}: {e}")
            return DeviceHistory(name=name, path=path, row_count=0, error=str(e))

        # Rows come back as (id, time, present, ...); the id is not part of a sample
        samples = [Sample(*row[1:]) for row in rows]
        return DeviceHistory(name=name, path=path, row_count=total, samples=samples)
