"""
NCBI Gene ``gene2refseq`` parser (single-line, tab-delimited).

Input structure:
  - Line 1: ``#tax_id  GeneID  status  ...`` column header (a comment line)
  - Lines 2+: one row per (gene, RefSeq) association, 16 tab-separated
    fields, ``-`` where a value does not apply

Column order::

    tax_id, GeneID, status,
    RNA_nucleotide_accession.version, RNA_nucleotide_gi,
    protein_accession.version, protein_gi,
    genomic_nucleotide_accession.version, genomic_nucleotide_gi,
    start_position_on_the_genomic_accession,
    end_position_on_the_genomic_accession,
    orientation, assembly,
    mature_peptide_accession.version, mature_peptide_gi, Symbol

Accession columns are only populated when ``status`` is present: a row with
status ``-`` yields no accessions even if the accession columns hold
values. The GI columns are not conditioned on status.

Orientation is normally ``+``, ``-`` or ``?``, but any single character is kept
as-is; only an empty or multi-character value rejects the row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from datasource_ingest.assemblers import BoundaryAssembler, RecordGroup, SingleLineAssembler
from datasource_ingest.exceptions import RecordParseError
from datasource_ingest.formats.base import (
    RecordFormat,
    nullable,
    parse_optional_int,
    split_fields,
)
from datasource_ingest.identifiers import (
    Identifier,
    IdentifierKind,
    make_identifier,
    optional_identifier,
)
from datasource_ingest.reader import RecordReader
from datasource_ingest.records import Record, RecordSchema
from datasource_ingest.xref import XrefResult, build_xref_map

logger = logging.getLogger(__name__)

FILE_NAME = "gene2refseq.gz"
FIELD_COUNT = 16

_POSITION_NOTE = (
    "position of the gene feature on the genomic accession, '-' if not "
    "applicable; positions are 0-based"
)


@dataclass(frozen=True, kw_only=True)
class Gene2RefseqRecord(Record):
    """One row of ``gene2refseq``."""
    taxon_id: Identifier
    gene_id: Identifier
    status: str | None
    rna_accession: Identifier | None
    rna_gi: Identifier | None
    protein_accession: Identifier | None
    protein_gi: Identifier | None
    genomic_accession: Identifier | None
    genomic_gi: Identifier | None
    start_position: int | None
    end_position: int | None
    orientation: str
    assembly: str | None
    mature_peptide_accession: Identifier | None
    mature_peptide_gi: Identifier | None
    symbol: str | None

    DATA_SOURCE = "EG"


Gene2RefseqRecord.SCHEMA = RecordSchema(
    label="gene2refseq record",
    data_source="EG",
    license="NCBI",
    citation=(
        "The NCBI handbook [Internet]. Bethesda (MD): National Library of "
        "Medicine (US), National Center for Biotechnology Information; 2002 "
        "Oct. Chapter 19 Gene: A Directory of Genes. Available from "
        "http://www.ncbi.nlm.nih.gov/books/NBK21091"
    ),
    fields={
        "taxon_id": "the unique identifier provided by NCBI Taxonomy for the species or strain/isolate",
        "gene_id": "the unique identifier for a gene",
        "status": (
            "status of the RefSeq: INFERRED, MODEL, NA, PREDICTED, PROVISIONAL, "
            "REVIEWED, SUPPRESSED, VALIDATED"
        ),
        "rna_accession": "may be null (-) for some genomes",
        "rna_gi": "the gi for an RNA nucleotide accession, '-' if not applicable",
        "protein_accession": "will be null (-) for RNA-coding genes",
        "protein_gi": "the gi for a protein accession, '-' if not applicable",
        "genomic_accession": (
            "may be null (-) if a RefSeq was provided after the genomic "
            "accession was submitted"
        ),
        "genomic_gi": "the gi for a genomic nucleotide accession, '-' if not applicable",
        "start_position": _POSITION_NOTE,
        "end_position": _POSITION_NOTE,
        "orientation": "orientation of the gene feature on the genomic accession, '?' if not applicable",
        "assembly": "the name of the assembly, '-' if not applicable",
        "mature_peptide_accession": "accession.version of the mature peptide, '-' if not applicable",
        "mature_peptide_gi": "the gi for the mature peptide, '-' if not applicable",
        "symbol": "the default symbol for the gene",
    },
)


def _status_gated_accession(token: str, status: str | None) -> Identifier | None:
    if status is None:
        return None
    return optional_identifier(IdentifierKind.REFSEQ, token)


def _gi(token: str) -> Identifier | None:
    return optional_identifier(IdentifierKind.GI_NUMBER, token)


class Gene2RefseqFormat(RecordFormat):
    """Parser for the NCBI ``gene2refseq`` table."""

    name = "gene2refseq"
    data_source = "EG"
    record_type = Gene2RefseqRecord

    def __init__(self, comment_prefix: str = "#") -> None:
        self.comment_prefix = comment_prefix

    def new_assembler(self) -> BoundaryAssembler:
        return SingleLineAssembler(comment_prefix=self.comment_prefix)

    def parse_group(self, group: RecordGroup) -> Gene2RefseqRecord:
        toks = split_fields(group.first_line, FIELD_COUNT)

        status = nullable(toks[2])

        orientation = toks[11].strip()
        if len(orientation) != 1:
            raise RecordParseError(
                f"Expected a single-character orientation, got {toks[11]!r}"
            )

        return Gene2RefseqRecord(
            taxon_id=make_identifier(IdentifierKind.NCBI_TAXON, toks[0]),
            gene_id=make_identifier(IdentifierKind.ENTREZ_GENE, toks[1]),
            status=status,
            rna_accession=_status_gated_accession(toks[3], status),
            rna_gi=_gi(toks[4]),
            protein_accession=_status_gated_accession(toks[5], status),
            protein_gi=_gi(toks[6]),
            genomic_accession=_status_gated_accession(toks[7], status),
            genomic_gi=_gi(toks[8]),
            start_position=parse_optional_int(toks[9], "start_position"),
            end_position=parse_optional_int(toks[10], "end_position"),
            orientation=orientation,
            assembly=nullable(toks[12]),
            mature_peptide_accession=_status_gated_accession(toks[13], status),
            mature_peptide_gi=_gi(toks[14]),
            symbol=nullable(toks[15]),
            **Record.provenance(group),
        )


def refseq_rna_to_gene_map(
    path: str | Path,
    encoding: str = "utf-8",
) -> XrefResult[Identifier, Identifier]:
    """Map RefSeq RNA accessions to the Entrez Gene ID they belong to.

    Rows without an RNA accession are ignored; the first gene seen for an
    accession wins.
    """
    with RecordReader(path, Gene2RefseqFormat(), encoding=encoding) as reader:
        return build_xref_map(reader, lambda r: [(r.rna_accession, r.gene_id)])
