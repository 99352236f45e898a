"""
RecordReader: the lazy pull-iteration engine shared by every format.

A reader composes a ``LineSource``, the format's ``BoundaryAssembler`` and
the format's ``parse_group()`` behind one contract:

- ``has_next()`` looks ahead for the next valid record. Groups that fail to
  parse (``DataFormatError``) are logged, reported to the diagnostics sink,
  and skipped; they never stop iteration. The first record that parses is
  cached. Repeated calls with no ``next()`` in between return the same
  answer and consume no further input.
- ``next()`` hands out the cached record and clears the cache. Calling it
  without a preceding ``has_next()`` that returned ``True`` is a
  ``ReaderStateError`` (caller misuse, distinct from bad input).
- ``close()`` releases the file; it is idempotent and safe mid-iteration.
  The file is also released automatically at exhaustion and whenever an
  unexpected exception escapes the reader.

State machine::

    UNINITIALIZED --initialize()--> READY | EXHAUSTED
    READY   --next()-->     PENDING
    PENDING --has_next()--> READY | EXHAUSTED

Readers also implement the Python iterator and context-manager protocols::

    with RecordReader("gene2refseq.gz", Gene2RefseqFormat()) as reader:
        for record in reader:
            ...
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generic, Iterator, TypeVar, cast

from datasource_ingest.diagnostics import DiagnosticsSink, ParseFailure
from datasource_ingest.exceptions import DataFormatError, ReaderStateError
from datasource_ingest.formats.base import RecordFormat
from datasource_ingest.lines import LineSource
from datasource_ingest.records import Record

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)
T = TypeVar("T")


class ReaderState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    PENDING = "pending"
    READY = "ready"
    EXHAUSTED = "exhausted"


@dataclass
class ReadStats:
    """Counters for one pass over one file."""
    records_emitted: int = 0
    groups_skipped: int = 0
    comment_lines_skipped: int = 0


class RecordReader(Generic[R]):
    """Streams typed records out of a flat-text file.

    Args:
        path: File to read (``.gz`` is decompressed transparently).
        record_format: The format collaborator that assembles and parses
            record groups.
        encoding: Character encoding of the file.
        diagnostics: Sink receiving one ``ParseFailure`` per skipped group.
            A private sink is created when omitted.

    Raises:
        SourceReadError: If the file cannot be opened or the encoding is
            unsupported.
    """

    def __init__(
        self,
        path: str | Path,
        record_format: RecordFormat,
        encoding: str = "utf-8",
        diagnostics: DiagnosticsSink | None = None,
    ) -> None:
        self.path = Path(path)
        self.record_format = record_format
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsSink()
        self.stats = ReadStats()
        self._assembler = record_format.new_assembler()
        self._source = LineSource(self.path, encoding)
        self._state = ReaderState.UNINITIALIZED
        self._cached: R | None = None
        self._confirmed = False
        logger.info("Reading %s records from %s", record_format.name, self.path)

    # ------------------------------------------------------------------
    # Iteration contract
    # ------------------------------------------------------------------

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def lines_consumed(self) -> int:
        """Physical lines pulled from the source so far."""
        return self._source.line_number

    def initialize(self) -> None:
        """Skip any header and look ahead for the first record.

        Called implicitly by the first ``has_next()``.

        Raises:
            ReaderStateError: If the reader was already initialized.
        """
        if self._state is not ReaderState.UNINITIALIZED:
            raise ReaderStateError(f"Reader for {self.path} is already initialized")
        self._guarded(self._assembler.initialize, self._source)
        self._state = ReaderState.PENDING
        self._guarded(self._advance)

    def has_next(self) -> bool:
        """True if another record is available. Idempotent until ``next()``."""
        if self._state is ReaderState.UNINITIALIZED:
            self.initialize()
        elif self._state is ReaderState.PENDING:
            self._guarded(self._advance)
        self._confirmed = self._state is ReaderState.READY
        return self._confirmed

    def next(self) -> R:
        """Return the record found by the last ``has_next()`` call.

        Raises:
            ReaderStateError: If ``has_next()`` was not called, returned
                ``False``, or the reader is exhausted or closed.
        """
        if self._state is ReaderState.EXHAUSTED:
            raise ReaderStateError(f"Reader for {self.path} is exhausted")
        if not self._confirmed or self._state is not ReaderState.READY:
            raise ReaderStateError(
                "next() called without a preceding has_next() that returned True"
            )
        record = cast(R, self._cached)
        self._cached = None
        self._confirmed = False
        self._state = ReaderState.PENDING
        self.stats.records_emitted += 1
        return record

    def close(self) -> None:
        """Release the underlying file. Safe to call more than once."""
        if self._state is not ReaderState.EXHAUSTED:
            self._state = ReaderState.EXHAUSTED
            self._cached = None
            self._confirmed = False
        self._source.close()

    # ------------------------------------------------------------------
    # Python protocols
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[R]:
        return self

    def __next__(self) -> R:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def __enter__(self) -> RecordReader[R]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _guarded(self, step: Callable[..., T], *args: object) -> T:
        """Run *step*, closing the source if anything escapes."""
        try:
            return step(*args)
        except BaseException:
            self.close()
            raise

    def _advance(self) -> None:
        """Pull groups until one parses (READY) or input ends (EXHAUSTED)."""
        while True:
            group = self._assembler.next_group(self._source)
            self.stats.comment_lines_skipped = self._assembler.comment_lines_skipped
            if group is None:
                self._finish()
                return
            try:
                record = self.record_format.parse_group(group)
            except DataFormatError as e:
                self._skip(ParseFailure.from_group(self.record_format.name, group, e))
                continue
            logger.debug(
                "Parsed %s record at line %d", self.record_format.name, group.line_number
            )
            self._cached = record  # type: ignore[assignment]
            self._state = ReaderState.READY
            return

    def _skip(self, failure: ParseFailure) -> None:
        self.stats.groups_skipped += 1
        self.diagnostics.record(failure)
        logger.warning(
            "Skipping malformed %s record at line %d (byte %d) of %s: %s | %s",
            failure.format_name, failure.line_number, failure.byte_offset,
            self.path.name, failure.reason, failure.excerpt,
        )

    def _finish(self) -> None:
        self._state = ReaderState.EXHAUSTED
        self._source.close()
        logger.info(
            "Finished %s: %d records emitted, %d groups skipped, %d comment lines",
            self.path.name, self.stats.records_emitted,
            self.stats.groups_skipped, self.stats.comment_lines_skipped,
        )
