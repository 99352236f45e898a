"""
Record-boundary assembly: grouping physical lines into record groups.

Two strategies cover every flat-text format handled by the package:

- ``SingleLineAssembler`` -- one table row per physical line. Comment lines
  (and, by default, blank lines) are discarded without being reported as
  failures.
- ``MultiLineAssembler`` -- blocks of lines closed by a terminator line
  (e.g. ``//`` in TRANSFAC/EMBL-style files). A header is skipped until the
  first line that starts a real record.

Assemblers hold cursor state (the pre-fetched line of a multi-line format),
so each ``RecordReader`` gets its own instance via
``RecordFormat.new_assembler()``.
"""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterator

from datasource_ingest.lines import Line, LineSource

logger = logging.getLogger(__name__)

LinePredicate = Callable[[Line], bool]


@dataclass(frozen=True)
class RecordGroup:
    """The ordered raw lines that make up exactly one record."""
    lines: tuple[Line, ...]

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("A RecordGroup needs at least one line")

    @property
    def first_line(self) -> Line:
        return self.lines[0]

    @property
    def byte_offset(self) -> int:
        return self.lines[0].byte_offset

    @property
    def line_number(self) -> int:
        return self.lines[0].line_number

    @property
    def texts(self) -> list[str]:
        return [line.text for line in self.lines]

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)


class TrailingGroupPolicy(enum.Enum):
    """What to do with buffered lines when the stream ends before a terminator."""
    EMIT = "emit"
    DISCARD = "discard"


def starts_with(prefix: str) -> LinePredicate:
    """Build a predicate matching lines whose text starts with *prefix*."""
    def _predicate(line: Line) -> bool:
        return line.text.startswith(prefix)
    _predicate.__name__ = f"starts_with({prefix!r})"
    return _predicate


def _is_blank(line: Line) -> bool:
    return not line.text.strip()


class BoundaryAssembler(ABC):
    """Groups lines pulled from a ``LineSource`` into ``RecordGroup``s."""

    def __init__(self) -> None:
        self.comment_lines_skipped = 0

    def initialize(self, source: LineSource) -> None:
        """Prepare for the first group (header skipping). No-op by default."""

    @abstractmethod
    def next_group(self, source: LineSource) -> RecordGroup | None:
        """Return the next record group, or ``None`` once input is exhausted."""


class SingleLineAssembler(BoundaryAssembler):
    """Every non-comment line is its own record group.

    Args:
        comment_prefix: Lines starting with this marker are skipped and
            counted. ``None`` disables comment handling.
        skip_blank_lines: Skip lines containing only whitespace.
    """

    def __init__(self, comment_prefix: str | None = "#", skip_blank_lines: bool = True) -> None:
        super().__init__()
        self.comment_prefix = comment_prefix
        self.skip_blank_lines = skip_blank_lines

    def next_group(self, source: LineSource) -> RecordGroup | None:
        while (line := source.next_line()) is not None:
            if self.comment_prefix and line.text.startswith(self.comment_prefix):
                self.comment_lines_skipped += 1
                continue
            if self.skip_blank_lines and _is_blank(line):
                continue
            return RecordGroup((line,))
        return None


class MultiLineAssembler(BoundaryAssembler):
    """Buffers lines until a terminator line closes the record.

    The terminator itself is never part of a group. The line after it is
    pre-fetched and becomes the first line of the next group.

    Args:
        is_first_record: Matches the first line of real data; every line
            before it is header and is discarded.
        is_terminator: Matches the line that closes a record.
        trailing_group: How to treat lines left in the buffer when the
            stream ends without a final terminator.
    """

    def __init__(
        self,
        is_first_record: LinePredicate,
        is_terminator: LinePredicate,
        trailing_group: TrailingGroupPolicy,
    ) -> None:
        super().__init__()
        self.is_first_record = is_first_record
        self.is_terminator = is_terminator
        self.trailing_group = trailing_group
        self.header_lines_skipped = 0
        self._pending: Line | None = None

    def initialize(self, source: LineSource) -> None:
        line = source.next_line()
        while line is not None and not self.is_first_record(line):
            self.header_lines_skipped += 1
            line = source.next_line()
        self._pending = line
        if line is None:
            logger.warning(
                "No record start found in %s after %d header lines",
                source.path, self.header_lines_skipped,
            )
        else:
            logger.debug(
                "Skipped %d header lines in %s; first record at line %d",
                self.header_lines_skipped, source.path, line.line_number,
            )

    def next_group(self, source: LineSource) -> RecordGroup | None:
        line = self._pending
        # Stray terminators or blank lines between blocks never start a group.
        while line is not None and (self.is_terminator(line) or _is_blank(line)):
            line = source.next_line()
        if line is None:
            self._pending = None
            return None

        buffer = [line]
        while True:
            line = source.next_line()
            if line is None:
                self._pending = None
                return self._finish_trailing(buffer, source)
            if self.is_terminator(line):
                self._pending = source.next_line()
                return RecordGroup(tuple(buffer))
            buffer.append(line)

    def _finish_trailing(self, buffer: list[Line], source: LineSource) -> RecordGroup | None:
        if self.trailing_group is TrailingGroupPolicy.EMIT:
            return RecordGroup(tuple(buffer))
        logger.warning(
            "Discarding %d unterminated trailing lines starting at line %d of %s",
            len(buffer), buffer[0].line_number, source.path,
        )
        return None
