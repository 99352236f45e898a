"""
Capability interface implemented once per flat-file format.

The contract is small on purpose:
1. ``new_assembler()`` returns a fresh ``BoundaryAssembler`` configured for
   the format (single-line with comment skipping, or multi-line with header
   skip and terminator). It covers both header initialization and group
   assembly.
2. ``parse_group()`` turns one ``RecordGroup`` into a typed ``Record`` or
   raises a ``DataFormatError`` subclass (``RecordParseError``,
   ``IdentifierFormatError``) when the group is structurally invalid.

The generic ``RecordReader`` engine drives any implementation; formats
never subclass the reader.

The field helpers below encode the conventions shared by NCBI-style
tab-delimited dumps: tab delimiter, ``-`` as the null sentinel.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from datasource_ingest.assemblers import BoundaryAssembler, RecordGroup
from datasource_ingest.exceptions import RecordParseError
from datasource_ingest.identifiers import NULL_SENTINEL, is_null
from datasource_ingest.lines import Line
from datasource_ingest.records import Record


class RecordFormat(ABC):
    """Abstract base class for format-specific record parsers.

    Subclasses set ``name``, ``data_source`` and ``record_type`` and
    implement ``new_assembler()`` and ``parse_group()``. Instances must not
    keep per-file state; that belongs in the assembler.
    """

    name: ClassVar[str]
    data_source: ClassVar[str]
    record_type: ClassVar[type[Record]]

    @abstractmethod
    def new_assembler(self) -> BoundaryAssembler:
        """Create the boundary assembler for one pass over one file."""

    @abstractmethod
    def parse_group(self, group: RecordGroup) -> Record:
        """Parse one record group.

        Raises:
            RecordParseError: If the group does not have the expected shape.
            IdentifierFormatError: If a referenced identifier is malformed.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def split_fields(line: Line, expected: int, delimiter: str = "\t") -> list[str]:
    """Split a table row, requiring exactly *expected* fields.

    Empty trailing fields are kept, so a row that is one delimiter short is
    detected.

    Raises:
        RecordParseError: On a field-count mismatch.
    """
    fields = line.text.split(delimiter)
    if len(fields) != expected:
        raise RecordParseError(
            f"Unexpected number of fields ({len(fields)}, expected {expected}) "
            f"on line {line.line_number}"
        )
    return fields


def nullable(token: str, sentinel: str = NULL_SENTINEL) -> str | None:
    """Return *token*, or ``None`` if it is the null sentinel."""
    return None if is_null(token, sentinel) else token


def parse_optional_int(token: str, field_name: str, sentinel: str = NULL_SENTINEL) -> int | None:
    """Parse an integer column that may hold the null sentinel.

    Raises:
        RecordParseError: If the token is neither the sentinel nor an integer.
    """
    if is_null(token, sentinel):
        return None
    try:
        return int(token.strip())
    except ValueError as e:
        raise RecordParseError(f"Field '{field_name}' is not an integer: {token!r}") from e
