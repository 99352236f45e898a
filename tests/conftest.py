"""
Shared test fixtures and sample dump contents for datasource-ingest tests.

Sample files are small inline strings written to ``tmp_path`` by the
fixtures below; no downloaded dumps are required. Line numbers quoted in
comments are the 1-based physical line numbers of each sample.
"""

from __future__ import annotations

from pathlib import Path

import pytest


def _row(*fields: str) -> str:
    return "\t".join(fields)


# ---------------------------------------------------------------------------
# NCBI gene2refseq sample
# ---------------------------------------------------------------------------
GENE2REFSEQ_HEADER = "#" + _row(
    "tax_id", "GeneID", "status", "RNA_nucleotide_accession.version",
    "RNA_nucleotide_gi", "protein_accession.version", "protein_gi",
    "genomic_nucleotide_accession.version", "genomic_nucleotide_gi",
    "start_position_on_the_genomic_accession",
    "end_position_on_the_genomic_accession", "orientation", "assembly",
    "mature_peptide_accession.version", "mature_peptide_gi", "Symbol",
)

ROW_A2M_RNA = _row(
    "9606", "1", "VALIDATED", "NM_000014.4", "123", "-", "-", "-", "-",
    "-", "-", "+", "-", "-", "-", "A2M",
)
# One field short (symbol column dropped)
ROW_SHORT = ROW_A2M_RNA.rsplit("\t", 1)[0]
ROW_A2M_FULL = _row(
    "9606", "2", "REVIEWED", "NM_000014.6", "312033", "NP_000005.3", "312034",
    "NC_000012.12", "568815586", "9067663", "9115918", "-",
    "Reference GRCh38.p14 Primary Assembly", "-", "-", "A2M",
)
# Accession columns populated but status is '-'
ROW_NO_STATUS = _row(
    "9606", "10", "-", "NM_000015.3", "-", "NP_000006.2", "-", "NC_000008.11",
    "-", "18391281", "18401218", "+", "-", "-", "-", "NAT2",
)
ROW_BAD_GENE_ID = _row(
    "9606", "GENE1", "VALIDATED", "NM_000016.6", "-", "-", "-", "-", "-",
    "-", "-", "+", "-", "-", "-", "ACADM",
)
ROW_MOUSE = _row(
    "10090", "11657", "PROVISIONAL", "NM_009654.4", "-", "NP_033784.1", "-",
    "-", "-", "-", "-", "?", "-", "-", "-", "Alb",
)

GENE2REFSEQ_LINES = [
    GENE2REFSEQ_HEADER,     # 1  comment
    ROW_A2M_RNA,            # 2  record
    ROW_SHORT,              # 3  skipped (15 fields)
    ROW_A2M_FULL,           # 4  record
    ROW_NO_STATUS,          # 5  record
    ROW_BAD_GENE_ID,        # 6  skipped (bad GeneID)
    "# end of human block",  # 7  comment
    ROW_MOUSE,              # 8  record
]
GENE2REFSEQ_SAMPLE = "\n".join(GENE2REFSEQ_LINES) + "\n"
GENE2REFSEQ_RECORD_LINES = [2, 4, 5, 8]
GENE2REFSEQ_SKIPPED_LINES = [3, 6]


# ---------------------------------------------------------------------------
# TRANSFAC gene.dat sample
# ---------------------------------------------------------------------------
TRANSFAC_GENE_LINES = [
    "VV  TRANSFAC GENE TABLE, Release 7.0 - public - 2004-08-31",  # 1 header
    "XX",                                # 2 header
    "//",                                # 3 header
    "AC  G000001",                       # 4 record 1
    "XX",
    "ID  MOUSE$ALBU",
    "XX",
    "SD  Alb",
    "XX",
    "DE  albumin",
    "XX",
    "OS  mouse, Mus musculus",
    "XX",
    "DR  EMBL: AJ011413;",
    "DR  ENTREZGENE: 11657.",
    "DR  MGI: MGI:87991.",
    "XX",
    "FA  T00001 C/EBPalpha; Mammalia.",
    "FA  T00002 HNF-1alpha; Mammalia.",  # 19
    "//",                                # 20 terminator
    "AC  G000002",                       # 21 record 2
    "XX",
    "SD  Ttr",
    "DE  transthyretin",
    "OS  mouse, Mus musculus",
    "DR  ENTREZGENE: 22139.",            # 26
    "//",                                # 27 terminator
    "AC  G000003",                       # 28 record 3
    "XX",
    "SD  CYP1A1",
    "OS  human, Homo sapiens",
    "FA  T00003 AhR; Mammalia.",         # 32
    "//",                                # 33 terminator
]
TRANSFAC_GENE_SAMPLE = "\n".join(TRANSFAC_GENE_LINES) + "\n"
TRANSFAC_RECORD_LINES = [4, 21, 28]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def gene2refseq_file(tmp_path: Path) -> Path:
    """The gene2refseq sample written to disk."""
    path = tmp_path / "gene2refseq"
    path.write_text(GENE2REFSEQ_SAMPLE, encoding="utf-8")
    return path


@pytest.fixture()
def transfac_gene_file(tmp_path: Path) -> Path:
    """The TRANSFAC gene.dat sample written to disk."""
    path = tmp_path / "gene.dat"
    path.write_text(TRANSFAC_GENE_SAMPLE, encoding="latin-1")
    return path


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs whole files end-to-end)",
    )
