"""
Custom exception hierarchy for datasource-ingest.

The split mirrors how failures are handled while streaming a dump:
- ``SourceReadError`` is fatal and propagates to the caller.
- ``DataFormatError`` (and its subclasses) describes bad input data. The
  record reader catches it, reports the failure, and skips the record.
- ``ReaderStateError`` signals caller misuse of the iteration contract and
  is never caused by input data.
"""


class DatasourceIngestError(Exception):
    """Base exception for all datasource-ingest errors."""


class SourceReadError(DatasourceIngestError):
    """Raised when a source file cannot be opened, read, or decoded.

    Covers missing files, unreadable streams, and unsupported character
    encodings.
    """


class DataFormatError(DatasourceIngestError):
    """Base class for recoverable problems with the content of a record."""


class RecordParseError(DataFormatError):
    """Raised when a record group does not have the expected structure.

    For example, a tab-delimited row with the wrong number of fields, a
    non-numeric position column, or a multi-line block missing its
    accession line.
    """


class IdentifierFormatError(DataFormatError):
    """Raised when a raw value does not satisfy an identifier's format rule."""


class ReaderStateError(DatasourceIngestError):
    """Raised when a RecordReader is used out of order.

    ``next()`` without a preceding ``has_next()`` that returned ``True``,
    or any read after exhaustion.
    """


class ConfigValidationError(DatasourceIngestError):
    """Raised when an ingest configuration file fails validation."""


class UnknownFormatError(DatasourceIngestError):
    """Raised when a format name does not match any registered format."""


class CatalogError(DatasourceIngestError):
    """Raised when the data source catalog table is inconsistent.

    Duplicate names, or a data source that references an undeclared subset.
    """
