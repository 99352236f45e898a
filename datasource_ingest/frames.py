"""
In-memory pandas views of parsed records.

These helpers are for downstream tooling that wants a table rather than a
stream (quick inspection, joins, notebooks). They do not write files;
persisted output is left to the consumer.

- ``records_to_dataframe`` -- one row per record; identifiers rendered as
  their normalized values, tuples of identifiers joined with ``|``.
- ``schema_to_dataframe`` -- the field documentation of a record type.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import pandas as pd

from datasource_ingest.identifiers import Identifier
from datasource_ingest.records import Record

logger = logging.getLogger(__name__)

_MULTI_VALUE_SEPARATOR = "|"


def _render(value: Any) -> Any:
    if isinstance(value, Identifier):
        return value.value
    if isinstance(value, (tuple, list, frozenset, set)):
        return _MULTI_VALUE_SEPARATOR.join(str(v) for v in value)
    return value


def records_to_dataframe(records: Iterable[Record]) -> pd.DataFrame:
    """Collect records into a DataFrame.

    Columns follow the dataclass field order, with the provenance columns
    ``byte_offset`` and ``line_number`` first. Missing values stay ``None``.
    All records are expected to share one record type; the first record's
    type decides the columns.

    Args:
        records: Records to collect (consumed once).

    Returns:
        A DataFrame, empty (no columns) if *records* is empty.
    """
    rows: list[dict[str, Any]] = []
    columns: list[str] | None = None
    for record in records:
        if columns is None:
            columns = ["byte_offset", "line_number", *type(record).data_field_names()]
        rows.append({name: _render(getattr(record, name)) for name in columns})

    if columns is None:
        return pd.DataFrame()
    df = pd.DataFrame(rows, columns=columns)
    logger.debug("Collected %d records into a %d-column DataFrame", len(df), len(columns))
    return df


def schema_to_dataframe(record_type: type[Record]) -> pd.DataFrame:
    """Describe a record type's fields as a two-column DataFrame.

    Fields without documentation get an empty description.

    Raises:
        ValueError: If the record type has no ``SCHEMA``.
    """
    schema = record_type.SCHEMA
    if schema is None:
        raise ValueError(f"{record_type.__name__} has no SCHEMA attached")
    names = record_type.data_field_names()
    return pd.DataFrame({
        "field": names,
        "description": [schema.fields.get(name, "") for name in names],
    })
