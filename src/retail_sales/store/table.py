"""Table Store: the in-memory sales table.

The store owns a single typed pandas DataFrame with the eleven columns of
``retail_sales.store.schema.COLUMNS``. Rows enter only through ``load``
(validated as a whole batch) and leave only through ``delete_where``.
Reports read ``TableStore.frame``, which is a copy, so they cannot mutate
the live table.

Predicates are frame predicates: callables that take the live DataFrame and
return a boolean mask aligned with it, e.g.::

    store.delete_where(lambda df: df["quantity"].isna())
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, Mapping, Union

import pandas as pd

from retail_sales.exceptions import SchemaError
from retail_sales.store import parsing
from retail_sales.store.record import Record
from retail_sales.store.schema import COLUMNS, DTYPES, HEADER_ALIASES

logger = logging.getLogger(__name__)

FramePredicate = Callable[[pd.DataFrame], Any]
Rows = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]

_PARSERS: dict[str, Callable[[Any], Any]] = {
    "transaction_id": parsing.to_int,
    "sale_date": parsing.to_date,
    "sale_time": parsing.to_time,
    "customer_id": parsing.to_int,
    "gender": parsing.to_gender,
    "age": parsing.to_int,
    "category": parsing.to_text,
    "quantity": parsing.to_int,
    "price_per_unit": parsing.to_float,
    "cogs": parsing.to_float,
    "total_sale": parsing.to_float,
}

# column -> (check, description) applied to non-null parsed values
_RANGE_CHECKS: dict[str, tuple[Callable[[Any], bool], str]] = {
    "age": (lambda v: v >= 0, "must be >= 0"),
    "quantity": (lambda v: v > 0, "must be > 0"),
    "price_per_unit": (lambda v: v >= 0, "must be >= 0"),
    "cogs": (lambda v: v >= 0, "must be >= 0"),
    "total_sale": (lambda v: v >= 0, "must be >= 0"),
}


def empty_frame() -> pd.DataFrame:
    """Return a zero-row DataFrame with the table's columns and dtypes."""
    return pd.DataFrame({col: pd.Series(dtype=DTYPES[col]) for col in COLUMNS})


def normalize_headers(columns: Iterable[Any]) -> list[str]:
    """Map raw headers to table column names (snake_case + aliases)."""
    out = []
    for col in columns:
        snake = parsing.to_snake(str(col))
        out.append(HEADER_ALIASES.get(snake, snake))
    return out


class TableStore:
    """Ordered collection of live sales records."""

    def __init__(self) -> None:
        self._frame = empty_frame()

    @classmethod
    def from_rows(cls, rows: Rows) -> TableStore:
        """Create a store and load ``rows`` into it."""
        store = cls()
        store.load(rows)
        return store

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        return f"TableStore(count={self.count()})"

    @property
    def frame(self) -> pd.DataFrame:
        """A copy of the live table, in load order."""
        return self._frame.copy()

    def count(self) -> int:
        """Number of live records."""
        return len(self._frame)

    def load(self, rows: Rows) -> int:
        """Validate and bulk-insert rows.

        The whole batch is parsed and checked before anything is inserted,
        so a failing load leaves the store unchanged.

        Args:
            rows: A DataFrame, or an iterable of mappings keyed by column name.
                Header names are matched after snake_case normalisation.

        Returns:
            Number of records inserted.

        Raises:
            SchemaError: If a required column is missing, a value cannot be
                parsed or is out of range, or a transaction_id is null or
                duplicated.
        """
        raw = rows.copy() if isinstance(rows, pd.DataFrame) else pd.DataFrame.from_records(list(rows))
        if raw.empty and len(raw.columns) == 0:
            logger.debug("load() called with no rows")
            return 0

        raw.columns = normalize_headers(raw.columns)
        duplicated = sorted({c for c in raw.columns if list(raw.columns).count(c) > 1})
        if duplicated:
            raise SchemaError(f"Duplicate columns after normalisation: {duplicated}")

        missing = [c for c in COLUMNS if c not in raw.columns]
        if missing:
            raise SchemaError(
                f"Missing required column(s): {missing}. Found columns: {list(raw.columns)}",
                field=missing[0],
            )

        extras = [c for c in raw.columns if c not in COLUMNS]
        if extras:
            logger.warning("Ignoring unexpected column(s): %s", extras)

        parsed = {col: self._parse_column(raw[col].tolist(), col) for col in COLUMNS}
        self._check_transaction_ids(parsed["transaction_id"])

        batch = self._build_frame(parsed)
        if self._frame.empty:
            self._frame = batch
        else:
            self._frame = pd.concat([self._frame, batch], ignore_index=True)

        logger.info("Loaded %d row(s); %d live record(s)", len(batch), self.count())
        return len(batch)

    def distinct_values(self, field: str) -> set[Any]:
        """Set of distinct non-null values observed for ``field``.

        Raises:
            ValueError: If ``field`` is not a table column.
        """
        if field not in COLUMNS:
            raise ValueError(f"Unknown field '{field}'. Must be one of {COLUMNS}.")
        series = self._frame[field].dropna()
        if field == "sale_date":
            return {ts.date() for ts in pd.to_datetime(series.unique())}
        if field == "sale_time":
            return {(pd.Timestamp(0) + pd.Timedelta(td)).time() for td in series.unique()}
        if DTYPES[field] in ("int64", "Int64"):
            return {int(v) for v in series.unique()}
        if DTYPES[field] == "float64":
            return {float(v) for v in series.unique()}
        return set(series.unique())

    def scan(self, predicate: FramePredicate | None = None) -> Iterator[Record]:
        """Lazily yield the records matching ``predicate`` (all if None).

        The matching set is fixed when ``scan`` is called; calling it again
        without an intervening delete yields the same records.
        """
        frame = self._frame if predicate is None else self._frame[self._mask(predicate)]
        return (Record.from_row(row) for row in frame.itertuples(index=False))

    def delete_where(self, predicate: FramePredicate) -> int:
        """Remove every record matching ``predicate``.

        Returns:
            Number of records removed. Removal is irreversible.
        """
        mask = self._mask(predicate)
        removed = int(mask.sum())
        if removed:
            self._frame = self._frame[~mask].reset_index(drop=True)
        logger.debug("delete_where removed %d record(s); %d live", removed, self.count())
        return removed

    # ---------- internals ----------

    def _mask(self, predicate: FramePredicate) -> pd.Series:
        result = predicate(self._frame)
        if len(result) != len(self._frame):
            raise ValueError(
                f"Predicate returned {len(result)} values for {len(self._frame)} records"
            )
        mask = pd.Series(result, index=self._frame.index)
        return mask.fillna(False).astype(bool)

    @staticmethod
    def _parse_column(values: list[Any], column: str) -> list[Any]:
        parser = _PARSERS[column]
        check = _RANGE_CHECKS.get(column)
        out = []
        for row, value in enumerate(values):
            try:
                parsed = parser(value)
            except ValueError as e:
                raise SchemaError(
                    f"Row {row}: column '{column}': {e}", row=row, field=column
                ) from e
            if parsed is not None and check is not None and not check[0](parsed):
                raise SchemaError(
                    f"Row {row}: column '{column}': {parsed!r} {check[1]}",
                    row=row,
                    field=column,
                )
            out.append(parsed)
        return out

    def _check_transaction_ids(self, ids: list[Any]) -> None:
        existing = set(self._frame["transaction_id"].tolist())
        seen: set[int] = set()
        for row, tid in enumerate(ids):
            if tid is None:
                raise SchemaError(
                    f"Row {row}: column 'transaction_id' is null", row=row, field="transaction_id"
                )
            if tid in seen or tid in existing:
                raise SchemaError(
                    f"Row {row}: duplicate transaction_id {tid}", row=row, field="transaction_id"
                )
            seen.add(tid)

    @staticmethod
    def _build_frame(parsed: dict[str, list[Any]]) -> pd.DataFrame:
        columns: dict[str, pd.Series] = {}
        for col in COLUMNS:
            values = parsed[col]
            dtype = DTYPES[col]
            if col == "sale_date":
                series = pd.to_datetime(pd.Series(values, dtype=object)).astype(dtype)
            elif col == "sale_time":
                series = pd.to_timedelta(pd.Series(values, dtype=object)).astype(dtype)
            else:
                series = pd.Series(values, dtype=dtype)
            columns[col] = series.reset_index(drop=True)
        return pd.DataFrame(columns)
