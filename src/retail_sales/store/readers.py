"""Read the sales dataset from CSV into a TableStore."""

from __future__ import annotations

import glob
import logging
from pathlib import Path
from typing import Sequence

import pandas as pd

from retail_sales.exceptions import SchemaError
from retail_sales.store.table import TableStore

logger = logging.getLogger(__name__)


def _read_csv(path: str) -> pd.DataFrame:
    try:
        return pd.read_csv(path, encoding="utf-8-sig", dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as e:
        raise SchemaError(f"{path}: file is empty, expected a header row") from e
    except pd.errors.ParserError as e:
        raise SchemaError(f"{path}: malformed CSV: {e}") from e
    except UnicodeDecodeError as e:
        raise SchemaError(f"{path}: not UTF-8 text ({e.reason} at byte {e.start})") from e


def read_sales_csv(paths: str | Path | Sequence[str | Path]) -> pd.DataFrame:
    """Read one or many sales CSVs (supports globs) as raw text.

    Every cell is read as a string with pandas' NA detection disabled so
    that null handling and type parsing happen in one place, the store.

    Raises:
        FileNotFoundError: If no file matches.
        SchemaError: If a file is empty, not UTF-8 or not well-formed CSV.
    """
    specs = [paths] if isinstance(paths, (str, Path)) else list(paths)
    files: list[str] = []
    for p in specs:
        matched = sorted(glob.glob(str(p)))
        files.extend(matched if matched else ([str(p)] if Path(p).is_file() else []))
    if not files:
        raise FileNotFoundError(f"No input files matched: {[str(p) for p in specs]!r}")

    dfs = [_read_csv(f) for f in files]
    logger.info("Read %d file(s): %s", len(files), files)
    if len(dfs) == 1:
        return dfs[0]
    return pd.concat(dfs, ignore_index=True)


def load_table(paths: str | Path | Sequence[str | Path]) -> TableStore:
    """Read the dataset and load it into a new TableStore.

    Raises:
        FileNotFoundError: If the dataset does not exist.
        SchemaError: If the dataset does not match the table schema.
    """
    return TableStore.from_rows(read_sales_csv(paths))
