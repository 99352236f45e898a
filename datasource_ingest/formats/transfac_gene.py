"""
TRANSFAC ``gene.dat`` parser (multi-line, ``//``-terminated blocks).

Input structure::

    VV  TRANSFAC GENE TABLE, Release ...      <- header, skipped
    XX
    //
    AC  G000001                               <- first line of a record
    XX
    SD  Alb
    DE  albumin
    OS  mouse, Mus musculus
    DR  ENTREZGENE: 11657.
    DR  MGI: MGI:87991.
    FA  T00001 C/EBPalpha; Mammalia.
    //                                        <- terminator (not part of the group)

Each line starts with a two-letter code; the value begins after the code
and its padding. Codes not listed in ``_FIELD_CODES`` (``XX`` spacers,
``DT`` dates, binding sites, ...) are ignored.

An unterminated final block is still emitted as a record.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from datasource_ingest.assemblers import (
    BoundaryAssembler,
    MultiLineAssembler,
    RecordGroup,
    TrailingGroupPolicy,
    starts_with,
)
from datasource_ingest.exceptions import RecordParseError
from datasource_ingest.formats.base import RecordFormat
from datasource_ingest.identifiers import Identifier, IdentifierKind, make_identifier
from datasource_ingest.reader import RecordReader
from datasource_ingest.records import Record, RecordSchema
from datasource_ingest.xref import XrefResult, build_xref_map

logger = logging.getLogger(__name__)

FILE_NAME = "gene.dat"
RECORD_START = "AC"
TERMINATOR = "//"

_FIELD_CODES = {"AC", "SD", "DE", "OS", "DR", "FA"}
_DB_REFERENCE = re.compile(r"^(?P<db>[A-Za-z][\w-]*):\s*(?P<value>[^;\s]+)")
_FACTOR_ID = re.compile(r"^(T\d{5})\b")


@dataclass(frozen=True, kw_only=True)
class TransfacGeneRecord(Record):
    """One gene entry of TRANSFAC ``gene.dat``."""
    gene_id: Identifier
    symbol: str | None
    description: str | None
    species: str | None
    entrez_gene_id: Identifier | None
    mgi_id: Identifier | None
    encoded_factor_ids: tuple[Identifier, ...]

    DATA_SOURCE = "TRANSFAC"


TransfacGeneRecord.SCHEMA = RecordSchema(
    label="TRANSFAC gene record",
    data_source="TRANSFAC",
    license="TRANSFAC public license",
    citation=(
        "Matys V, et al. TRANSFAC and its module TRANSCompel: transcriptional "
        "gene regulation in eukaryotes. Nucleic Acids Res. 2006;34:D108-10."
    ),
    fields={
        "gene_id": "TRANSFAC internal gene accession (AC), e.g. G000001",
        "symbol": "gene symbol (SD)",
        "description": "gene description (DE)",
        "species": "organism (OS)",
        "entrez_gene_id": "Entrez Gene cross-reference (DR ENTREZGENE)",
        "mgi_id": "MGI cross-reference (DR MGI)",
        "encoded_factor_ids": "TRANSFAC factors encoded by this gene (FA)",
    },
)


def _split_code(text: str) -> tuple[str, str]:
    return text[:2], text[2:].strip()


class TransfacGeneFormat(RecordFormat):
    """Parser for TRANSFAC ``gene.dat``."""

    name = "transfac_gene"
    data_source = "TRANSFAC"
    record_type = TransfacGeneRecord

    def new_assembler(self) -> BoundaryAssembler:
        return MultiLineAssembler(
            is_first_record=starts_with(RECORD_START),
            is_terminator=starts_with(TERMINATOR),
            trailing_group=TrailingGroupPolicy.EMIT,
        )

    def parse_group(self, group: RecordGroup) -> TransfacGeneRecord:
        values: dict[str, list[str]] = {code: [] for code in _FIELD_CODES}
        for line in group:
            code, value = _split_code(line.text)
            if code in values and value:
                values[code].append(value)

        if not values["AC"]:
            raise RecordParseError(
                f"Record block starting at line {group.line_number} has no AC line"
            )

        entrez_gene_id = None
        mgi_id = None
        for reference in values["DR"]:
            match = _DB_REFERENCE.match(reference)
            if match is None:
                continue
            db = match.group("db").upper()
            value = match.group("value").rstrip(".")
            if db == "ENTREZGENE" and entrez_gene_id is None:
                entrez_gene_id = make_identifier(IdentifierKind.ENTREZ_GENE, value)
            elif db == "MGI" and mgi_id is None:
                mgi_id = make_identifier(IdentifierKind.MGI, value)

        factor_ids: list[Identifier] = []
        for entry in values["FA"]:
            match = _FACTOR_ID.match(entry)
            if match is None:
                raise RecordParseError(f"Unrecognized FA entry: {entry!r}")
            factor = make_identifier(IdentifierKind.TRANSFAC_FACTOR, match.group(1))
            if factor not in factor_ids:
                factor_ids.append(factor)

        return TransfacGeneRecord(
            gene_id=make_identifier(IdentifierKind.TRANSFAC_GENE, values["AC"][0]),
            symbol=_first(values["SD"]),
            description=_first(values["DE"]),
            species=_first(values["OS"]),
            entrez_gene_id=entrez_gene_id,
            mgi_id=mgi_id,
            encoded_factor_ids=tuple(factor_ids),
            **Record.provenance(group),
        )


def _first(values: list[str]) -> str | None:
    return values[0] if values else None


def transfac_gene_to_entrez_gene_map(
    path: str | Path,
    encoding: str = "latin-1",
) -> XrefResult[Identifier, Identifier]:
    """Map TRANSFAC gene IDs (G000001) to Entrez Gene IDs where one is given."""
    with RecordReader(path, TransfacGeneFormat(), encoding=encoding) as reader:
        return build_xref_map(reader, lambda r: [(r.gene_id, r.entrez_gene_id)])


def transfac_factor_to_gene_map(
    path: str | Path,
    encoding: str = "latin-1",
) -> XrefResult[Identifier, Identifier]:
    """Map TRANSFAC factor IDs (T00001) to the gene ID that encodes them."""
    with RecordReader(path, TransfacGeneFormat(), encoding=encoding) as reader:
        return build_xref_map(
            reader,
            lambda r: [(factor_id, r.gene_id) for factor_id in r.encoded_factor_ids],
        )
