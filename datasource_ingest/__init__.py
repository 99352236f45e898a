"""
datasource-ingest: streaming record parsers for flat-text bioinformatics dumps.

Public API surface:

- ``open_reader(path, format_name, ...)`` -- **recommended entry point**.
  Returns a ``RecordReader`` that lazily yields typed, provenance-tagged
  records from one file. Malformed rows are skipped and reported, never
  fatal.

- ``open_source(source_config)`` -- same, driven by one ``SourceConfig``
  entry of an ingest config file.

- ``iter_config_readers(config_path)`` -- loads and validates an ingest
  config YAML and yields ``(SourceConfig, RecordReader)`` pairs, one file at
  a time.

- ``records_to_dataframe(records)`` -- collect a reader (or any iterable of
  records) into a pandas DataFrame for inspection.

Typical use::

    import datasource_ingest

    with datasource_ingest.open_reader("gene2refseq.gz", "gene2refseq") as reader:
        for record in reader:
            print(record.gene_id, record.rna_accession)
        print(reader.stats, len(reader.diagnostics))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from datasource_ingest.config import SourceConfig, load_config, validate_sources
from datasource_ingest.datasources import DataSource, get_catalog
from datasource_ingest.diagnostics import DiagnosticsSink
from datasource_ingest.frames import records_to_dataframe
from datasource_ingest.identifiers import Identifier, IdentifierKind
from datasource_ingest.reader import RecordReader
from datasource_ingest.registry import get_format
from datasource_ingest.xref import build_xref_map

__all__ = [
    "open_reader",
    "open_source",
    "iter_config_readers",
    "RecordReader",
    "Identifier",
    "IdentifierKind",
    "DataSource",
    "get_catalog",
    "build_xref_map",
    "records_to_dataframe",
]

logger = logging.getLogger(__name__)


def open_reader(
    path: str | Path,
    format_name: str,
    encoding: str = "utf-8",
    diagnostics: DiagnosticsSink | None = None,
) -> RecordReader:
    """Open a lazy record reader over one dump file.

    Args:
        path: Path to the dump file (``.gz`` is decompressed on the fly).
        format_name: Registered format name, e.g. ``"gene2refseq"`` or
            ``"transfac_gene"``.
        encoding: Character encoding of the file.
        diagnostics: Optional sink collecting skipped-record reports.

    Returns:
        A ``RecordReader``; use it as a context manager or call ``close()``.

    Raises:
        UnknownFormatError: If *format_name* is not registered.
        SourceReadError: If the file cannot be opened or the encoding is
            unsupported.
    """
    record_format = get_format(format_name)
    return RecordReader(path, record_format, encoding=encoding, diagnostics=diagnostics)


def open_source(
    source: SourceConfig,
    diagnostics: DiagnosticsSink | None = None,
) -> RecordReader:
    """Open a reader for one ``SourceConfig`` entry."""
    return open_reader(
        source.input_path,
        source.format_name,
        encoding=source.encoding,
        diagnostics=diagnostics,
    )


def iter_config_readers(
    config_path: str | Path,
) -> Iterator[tuple[SourceConfig, RecordReader]]:
    """Yield a reader for each source listed in an ingest config.

    Each reader is closed once the caller moves on to the next source (or
    stops iterating), whether or not it was fully consumed.

    Raises:
        FileNotFoundError: If *config_path* does not exist.
        pydantic.ValidationError: If the config fails schema validation.
        ConfigValidationError: If a source names an unknown format.
        SourceReadError: If a source file cannot be opened.
    """
    config = load_config(config_path)
    validate_sources(config)
    for source in config.sources:
        logger.info("Opening source %s (%s)", source.input_path, source.format_name)
        with open_source(source) as reader:
            yield source, reader
