"""
Unit tests for the TRANSFAC gene.dat format (datasource_ingest.formats.transfac_gene).
"""

import pytest

from datasource_ingest.assemblers import RecordGroup
from datasource_ingest.exceptions import IdentifierFormatError, RecordParseError
from datasource_ingest.formats.transfac_gene import (
    TransfacGeneFormat,
    TransfacGeneRecord,
    transfac_factor_to_gene_map,
    transfac_gene_to_entrez_gene_map,
)
from datasource_ingest.identifiers import IdentifierKind, make_identifier
from datasource_ingest.lines import Line
from datasource_ingest.reader import RecordReader
from tests.conftest import TRANSFAC_RECORD_LINES


def _group(*texts: str, first_line: int = 10) -> RecordGroup:
    return RecordGroup(tuple(
        Line(text, 0, first_line + i) for i, text in enumerate(texts)
    ))


def _parse(*texts: str) -> TransfacGeneRecord:
    return TransfacGeneFormat().parse_group(_group(*texts))


def _gene(value):
    return make_identifier(IdentifierKind.TRANSFAC_GENE, value)


def _factor(value):
    return make_identifier(IdentifierKind.TRANSFAC_FACTOR, value)


def _entrez(value):
    return make_identifier(IdentifierKind.ENTREZ_GENE, value)


# ---------------------------------------------------------------------------
# parse_group
# ---------------------------------------------------------------------------

class TestParseGroup:
    def test_minimal_block(self):
        record = _parse("AC  G000123")
        assert record.gene_id == _gene("G000123")
        assert record.symbol is None
        assert record.entrez_gene_id is None
        assert record.encoded_factor_ids == ()
        assert record.line_number == 10

    def test_fields_and_references(self):
        record = _parse(
            "AC  G000001",
            "XX",
            "SD  Alb",
            "DE  albumin",
            "OS  mouse, Mus musculus",
            "DR  EMBL: AJ011413;",
            "DR  ENTREZGENE: 11657.",
            "DR  MGI: MGI:87991.",
            "FA  T00001 C/EBPalpha; Mammalia.",
        )
        assert record.symbol == "Alb"
        assert record.description == "albumin"
        assert record.species == "mouse, Mus musculus"
        assert record.entrez_gene_id == _entrez(11657)
        assert record.mgi_id == make_identifier(IdentifierKind.MGI, "MGI:87991")
        assert record.encoded_factor_ids == (_factor("T00001"),)

    def test_first_reference_wins(self):
        record = _parse("AC  G000001", "DR  ENTREZGENE: 1.", "DR  ENTREZGENE: 2.")
        assert record.entrez_gene_id == _entrez(1)

    def test_duplicate_factors_collapsed(self):
        record = _parse(
            "AC  G000001",
            "FA  T00002 HNF-1alpha.",
            "FA  T00001 C/EBPalpha.",
            "FA  T00002 HNF-1alpha; isoform.",
        )
        assert record.encoded_factor_ids == (_factor("T00002"), _factor("T00001"))

    def test_unrelated_codes_ignored(self):
        record = _parse("AC  G000001", "DT  01.01.1999 (created)", "BS  R00001.", "XX")
        assert record.gene_id.value == "G000001"

    def test_missing_accession(self):
        with pytest.raises(RecordParseError, match="no AC line"):
            _parse("SD  Alb", "DE  albumin")

    def test_malformed_accession(self):
        with pytest.raises(IdentifierFormatError):
            _parse("AC  X000001")

    def test_malformed_factor(self):
        with pytest.raises(RecordParseError, match="FA entry"):
            _parse("AC  G000001", "FA  C/EBPalpha")

    def test_malformed_entrez_reference(self):
        with pytest.raises(IdentifierFormatError):
            _parse("AC  G000001", "DR  ENTREZGENE: abc.")


# ---------------------------------------------------------------------------
# Whole-file behaviour
# ---------------------------------------------------------------------------

class TestTransfacGeneFile:
    def test_records_and_provenance(self, transfac_gene_file):
        with RecordReader(transfac_gene_file, TransfacGeneFormat(), encoding="latin-1") as reader:
            records = list(reader)
        assert [r.line_number for r in records] == TRANSFAC_RECORD_LINES
        assert [r.symbol for r in records] == ["Alb", "Ttr", "CYP1A1"]
        assert records[0].encoded_factor_ids == (_factor("T00001"), _factor("T00002"))
        assert records[1].mgi_id is None
        assert records[2].description is None
        assert records[0].byte_offset > 0
        assert records[0].data_source.display_name == "TRANSFAC"

    def test_unterminated_last_block_is_kept(self, tmp_path):
        path = tmp_path / "gene.dat"
        path.write_text("AC  G000001\n//\nAC  G000002\nSD  Tail\n", encoding="latin-1")
        with RecordReader(path, TransfacGeneFormat(), encoding="latin-1") as reader:
            records = list(reader)
        assert [r.gene_id.value for r in records] == ["G000001", "G000002"]

    def test_bad_block_is_skipped(self, tmp_path):
        path = tmp_path / "gene.dat"
        path.write_text(
            "AC  G000001\n//\nAC  G000002\nFA  nonsense\n//\nAC  G000003\n//\n",
            encoding="latin-1",
        )
        with RecordReader(path, TransfacGeneFormat(), encoding="latin-1") as reader:
            records = list(reader)
            assert reader.diagnostics.line_numbers() == [3]
        assert [r.gene_id.value for r in records] == ["G000001", "G000003"]


class TestTransfacMaps:
    def test_gene_to_entrez(self, transfac_gene_file):
        result = transfac_gene_to_entrez_gene_map(transfac_gene_file)
        assert result.mapping == {
            _gene("G000001"): _entrez(11657),
            _gene("G000002"): _entrez(22139),
        }

    def test_factor_to_gene(self, transfac_gene_file):
        result = transfac_factor_to_gene_map(transfac_gene_file)
        assert result.mapping == {
            _factor("T00001"): _gene("G000001"),
            _factor("T00002"): _gene("G000001"),
            _factor("T00003"): _gene("G000003"),
        }
