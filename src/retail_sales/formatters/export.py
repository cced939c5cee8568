"""Export report results as CSV files and JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import pandas as pd

logger = logging.getLogger(__name__)

SCALARS_FILE = "scalars.json"


def presentable(df: pd.DataFrame) -> pd.DataFrame:
    """Copy of ``df`` with dates as YYYY-MM-DD and times as HH:MM:SS strings."""
    out = df.copy()
    if "sale_date" in out.columns:
        out["sale_date"] = out["sale_date"].dt.strftime("%Y-%m-%d")
    if "sale_time" in out.columns:
        out["sale_time"] = (pd.Timestamp(0) + out["sale_time"]).dt.strftime("%H:%M:%S")
    return out


def to_jsonable(result: Any) -> Any:
    """Convert a report result into plain JSON types."""
    if isinstance(result, pd.DataFrame):
        return json.loads(presentable(result).to_json(orient="records"))
    if isinstance(result, (set, frozenset)):
        return sorted(result)
    return result


def results_to_json(results: Mapping[str, Any]) -> str:
    """Serialize a name -> result mapping as a JSON document."""
    return json.dumps({name: to_jsonable(r) for name, r in results.items()}, indent=2)


def write_results(output_dir: Path, results: Mapping[str, Any]) -> list[Path]:
    """Write DataFrame results as ``<name>.csv`` and scalars to ``scalars.json``.

    Returns:
        Paths of the files written.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    scalars: dict[str, Any] = {}
    for name, result in results.items():
        if isinstance(result, pd.DataFrame):
            path = output_dir / f"{name}.csv"
            presentable(result).to_csv(path, index=False, encoding="utf-8")
            written.append(path)
        else:
            scalars[name] = to_jsonable(result)
    if scalars:
        path = output_dir / SCALARS_FILE
        path.write_text(json.dumps(scalars, indent=2))
        written.append(path)
    logger.info("Wrote %d file(s) to %s", len(written), output_dir)
    return written
