"""Metadata tracking for report runs.

Each run that writes to an output directory records what it loaded, how
many rows the Cleaner removed, which reports ran and whether it succeeded.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

RUN_VERSION = "reports_v1"


@dataclass
class RunMetadata:
    """Metadata for one report run.

    Attributes:
        dataset: Path of the dataset that was loaded.
        rows_loaded: Records inserted by the load.
        rows_purged: Records removed by the Cleaner.
        reports: Names of the reports that ran, in order.
        empty_reports: Names of the reports that returned an empty result.
        version: Version string for the report logic.
        last_run: ISO timestamp of when the run finished.
        status: "ok" or "failed".
        error: Error message when status is "failed".
    """

    dataset: str
    rows_loaded: int
    rows_purged: int
    reports: list[str]
    version: str
    last_run: str
    status: str
    empty_reports: list[str] = field(default_factory=list)
    error: Optional[str] = None


def _meta_path(meta_dir: Path, dataset: str) -> Path:
    meta_dir.mkdir(parents=True, exist_ok=True)
    return meta_dir / f"{Path(dataset).stem}.json"


def write_metadata(meta_dir: Path, metadata: RunMetadata) -> Path:
    """Write the metadata file for a run; returns its path."""
    path = _meta_path(meta_dir, metadata.dataset)
    path.write_text(json.dumps(asdict(metadata), indent=2))
    logger.debug("Wrote metadata: %s", path)
    return path


def read_metadata(meta_dir: Path, dataset: str) -> Optional[RunMetadata]:
    """Read the metadata of the last run over ``dataset``, if any."""
    path = _meta_path(meta_dir, dataset)
    if not path.exists():
        return None
    try:
        return RunMetadata(**json.loads(path.read_text()))
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning("Error reading metadata %s: %s", path, e)
        return None
