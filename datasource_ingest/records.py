"""
Record base type and its companion documentation schema.

Every parsed record is an immutable dataclass deriving from ``Record``.
Provenance (byte offset and line number) always points at the first
physical line of the group the record was parsed from.

Descriptive metadata (what a field means, which license and citation apply
to the source) lives in a separate ``RecordSchema`` attached to the record
class as ``SCHEMA``. The parsing path never reads it; it exists for
documentation and export tooling (see ``frames.schema_to_dataframe``).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from datasource_ingest.assemblers import RecordGroup

if TYPE_CHECKING:
    from datasource_ingest.datasources import DataSource


class RecordSchema(BaseModel):
    """Static field documentation for one record type."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Human-readable record type name")
    data_source: str = Field(..., description="Catalog tag of the authority")
    license: str | None = None
    citation: str | None = None
    comment: str = ""
    fields: dict[str, str] = Field(
        default_factory=dict,
        description="Field name -> description",
    )


@dataclass(frozen=True, kw_only=True)
class Record:
    """Base class for parsed records.

    Attributes:
        byte_offset: Offset of the first byte of the record's first line.
        line_number: 1-based number of the record's first line.
    """

    byte_offset: int
    line_number: int

    DATA_SOURCE: ClassVar[str] = "ANY"
    SCHEMA: ClassVar[RecordSchema | None] = None

    @property
    def data_source(self) -> DataSource:
        """Catalog entry of the authority the record was published by."""
        from datasource_ingest.datasources import get_catalog

        return get_catalog().get(self.DATA_SOURCE)

    @classmethod
    def provenance(cls, group: RecordGroup) -> dict[str, int]:
        """Keyword arguments carrying the provenance of *group*."""
        return {"byte_offset": group.byte_offset, "line_number": group.line_number}

    @classmethod
    def data_field_names(cls) -> list[str]:
        """Names of the format-specific fields, in declaration order."""
        return [
            f.name for f in dataclasses.fields(cls)
            if f.name not in ("byte_offset", "line_number")
        ]

    def as_dict(self) -> dict[str, Any]:
        """Shallow field mapping (identifiers are left as objects)."""
        return {f.name: getattr(self, f.name) for f in dataclasses.fields(self)}
