"""
Unit tests for the data source catalog (datasource_ingest.datasources).

Tests the built-in YAML catalog, lenient parsing, subset membership, and
validation of custom catalog files.
"""

import pytest
from pydantic import ValidationError

from datasource_ingest.datasources import (
    GENE_OR_GENE_PRODUCT,
    ONTOLOGY,
    DataSource,
    DataSourceCatalog,
    get_catalog,
    load_catalog,
)
from datasource_ingest.exceptions import CatalogError


@pytest.fixture()
def catalog():
    return get_catalog()


class TestBuiltinCatalog:
    def test_loaded_once(self, catalog):
        assert get_catalog() is catalog

    def test_size(self, catalog):
        assert len(catalog) > 200
        assert len(list(catalog)) == len(catalog)

    def test_names_unique_and_upper_case(self, catalog):
        names = [source.name for source in catalog]
        assert len(names) == len(set(names))
        assert all(name == name.upper() for name in names)

    def test_display_name_defaults_to_name(self, catalog):
        assert catalog.get("AFFYMETRIX").display_name == "AFFYMETRIX"
        assert catalog.get("ANY").display_name == "Any data source"

    def test_declared_subsets(self, catalog):
        assert set(catalog.subset_names) == {GENE_OR_GENE_PRODUCT, ONTOLOGY}


class TestParse:
    @pytest.mark.parametrize("text", ["EG", "REFSEQ", "TRANSFAC", "MGI"])
    def test_known(self, catalog, text):
        source = catalog.parse(text)
        assert source is not None
        assert source.name == text

    @pytest.mark.parametrize("text", ["eg", "Eg", " EG", "EG ", "transfac"])
    def test_lookup_is_exact(self, catalog, text):
        assert catalog.parse(text) is None
        with pytest.raises(KeyError):
            catalog.get(text)

    @pytest.mark.parametrize("text", ["", "   ", "NOT_A_SOURCE", "E G", None, 42])
    def test_unknown_returns_none(self, catalog, text):
        assert catalog.parse(text) is None
        assert not catalog.is_data_source(text)

    def test_get_unknown_raises(self, catalog):
        with pytest.raises(KeyError):
            catalog.get("NOT_A_SOURCE")

    def test_contains(self, catalog):
        assert "MGI" in catalog
        assert "mgi" not in catalog
        assert catalog.get("MGI") in catalog
        assert "nope" not in catalog
        assert DataSource(name="NOPE") not in catalog

    def test_str(self, catalog):
        assert str(catalog.get("EG")) == "EG"


class TestSubsets:
    def test_gene_or_gene_product(self, catalog):
        members = {s.name for s in catalog.subset(GENE_OR_GENE_PRODUCT)}
        assert {"EG", "UNIPROT", "MGI", "HGNC", "REFSEQ"} <= members
        assert "GO" not in members

    def test_ontology(self, catalog):
        members = {s.name for s in catalog.subset(ONTOLOGY)}
        assert {"GO", "CHEBI", "SO"} <= members
        assert "EG" not in members

    def test_multiple_membership(self, catalog):
        assert catalog.in_subset("PR", GENE_OR_GENE_PRODUCT)
        assert catalog.in_subset("PR", ONTOLOGY)

    def test_in_subset_accepts_source_or_text(self, catalog):
        assert catalog.in_subset(catalog.get("EG"), GENE_OR_GENE_PRODUCT)
        assert catalog.in_subset("EG", GENE_OR_GENE_PRODUCT)
        assert not catalog.in_subset("eg", GENE_OR_GENE_PRODUCT)
        assert not catalog.in_subset("NOT_A_SOURCE", GENE_OR_GENE_PRODUCT)

    def test_subsets_are_frozen(self, catalog):
        assert isinstance(catalog.subset(ONTOLOGY), frozenset)

    def test_unknown_subset(self, catalog):
        with pytest.raises(KeyError, match="Unknown data source subset"):
            catalog.subset("proteins")


class TestCustomCatalog:
    def _write(self, tmp_path, text):
        path = tmp_path / "catalog.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_load(self, tmp_path):
        path = self._write(tmp_path, (
            "subsets:\n"
            "  ontology: Ontologies\n"
            "data_sources:\n"
            "  - name: GO\n"
            "    subsets: [ontology]\n"
            "  - name: EG\n"
            "    display_name: Entrez Gene\n"
        ))
        catalog = load_catalog(path)
        assert len(catalog) == 2
        assert catalog.in_subset("GO", "ontology")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalog(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        with pytest.raises(CatalogError, match="empty"):
            load_catalog(self._write(tmp_path, ""))

    def test_duplicate_name(self, tmp_path):
        path = self._write(tmp_path, "data_sources:\n  - name: GO\n  - name: GO\n")
        with pytest.raises(CatalogError, match="Duplicate"):
            load_catalog(path)

    def test_undeclared_subset(self, tmp_path):
        path = self._write(tmp_path, "data_sources:\n  - name: GO\n    subsets: [ontology]\n")
        with pytest.raises(CatalogError, match="undeclared subset"):
            load_catalog(path)

    def test_lower_case_name_rejected(self, tmp_path):
        path = self._write(tmp_path, "data_sources:\n  - name: go\n")
        with pytest.raises(ValidationError):
            load_catalog(path)

    def test_direct_construction(self):
        catalog = DataSourceCatalog([DataSource(name="X")], {})
        assert catalog.get("X").name == "X"
        assert catalog.parse("x") is None
