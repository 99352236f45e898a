"""
The closed catalog of data source (authority) tags.

The catalog is data-driven: ``catalog/datasources.yaml`` lists every tag
with its display name, homepage, and named-subset memberships. The table is
loaded and validated once per process (``get_catalog()``) and is immutable
afterwards. Subset membership is precomputed into frozensets, so checks such
as "is this a gene-or-gene-product authority?" are O(1).

``DataSourceCatalog.parse()`` never raises on unrecognized input; it is
used to validate configuration values and other untrusted text.

Why YAML instead of a hardcoded enum:
- The tag list is long and mostly descriptive; keeping it as data keeps
  display names and subsets next to each tag.
- New tags or subsets are added by editing the YAML file only.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from datasource_ingest.exceptions import CatalogError

logger = logging.getLogger(__name__)

_CATALOG_PATH = Path(__file__).parent / "catalog" / "datasources.yaml"

GENE_OR_GENE_PRODUCT = "gene_or_gene_product"
ONTOLOGY = "ontology"


class DataSource(BaseModel):
    """One authority tag from the catalog."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str = ""
    url: str | None = None
    subsets: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value or value != value.strip().upper():
            raise ValueError(f"Data source names must be upper-case tags, got {value!r}")
        return value

    @model_validator(mode="before")
    @classmethod
    def _default_display_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("display_name"):
            data = {**data, "display_name": data.get("name", "")}
        return data

    def __str__(self) -> str:
        return self.name


class _CatalogFile(BaseModel):
    """Schema of ``datasources.yaml``."""
    subsets: dict[str, str] = Field(default_factory=dict)
    data_sources: list[DataSource]


class DataSourceCatalog:
    """Immutable lookup table of ``DataSource`` tags and named subsets."""

    def __init__(self, sources: list[DataSource], subsets: dict[str, str]) -> None:
        by_name: dict[str, DataSource] = {}
        members: dict[str, set[DataSource]] = {name: set() for name in subsets}
        for source in sources:
            if source.name in by_name:
                raise CatalogError(f"Duplicate data source in catalog: {source.name}")
            undeclared = source.subsets - set(members)
            if undeclared:
                raise CatalogError(
                    f"Data source {source.name} references undeclared subset(s): "
                    f"{sorted(undeclared)}"
                )
            by_name[source.name] = source
            for subset_name in source.subsets:
                members[subset_name].add(source)

        self._by_name = MappingProxyType(by_name)
        self._subset_descriptions = MappingProxyType(dict(subsets))
        self._subsets = MappingProxyType(
            {name: frozenset(found) for name, found in members.items()}
        )

    def parse(self, text: object) -> DataSource | None:
        """Return the tag named by *text*, or ``None`` if it is not in the catalog.

        Matching is exact: names are case-sensitive and surrounding
        whitespace is not stripped. Never raises.
        """
        if not isinstance(text, str):
            return None
        return self._by_name.get(text)

    def is_data_source(self, text: object) -> bool:
        return self.parse(text) is not None

    def get(self, name: str) -> DataSource:
        """Return the tag called *name*.

        Raises:
            KeyError: If *name* is not in the catalog.
        """
        source = self.parse(name)
        if source is None:
            raise KeyError(f"Unknown data source: {name!r}")
        return source

    def subset(self, subset_name: str) -> frozenset[DataSource]:
        """Members of a named subset.

        Raises:
            KeyError: If the subset is not declared.
        """
        if subset_name not in self._subsets:
            raise KeyError(
                f"Unknown data source subset: {subset_name!r}. "
                f"Declared subsets: {sorted(self._subsets)}"
            )
        return self._subsets[subset_name]

    def in_subset(self, source: DataSource | str, subset_name: str) -> bool:
        if isinstance(source, str):
            parsed = self.parse(source)
            if parsed is None:
                return False
            source = parsed
        return source in self.subset(subset_name)

    @property
    def subset_names(self) -> dict[str, str]:
        """Declared subsets mapped to their descriptions."""
        return dict(self._subset_descriptions)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, DataSource):
            return self._by_name.get(item.name) == item
        return self.parse(item) is not None

    def __iter__(self) -> Iterator[DataSource]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)


def load_catalog(path: str | Path | None = None) -> DataSourceCatalog:
    """Load and validate a catalog YAML file (defaults to the built-in one).

    Raises:
        FileNotFoundError: If the catalog file does not exist.
        CatalogError: If the file is empty or internally inconsistent.
        pydantic.ValidationError: If an entry fails schema validation.
    """
    path = Path(path) if path is not None else _CATALOG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise CatalogError(f"Catalog file is empty: {path}")

    parsed = _CatalogFile.model_validate(raw)
    catalog = DataSourceCatalog(parsed.data_sources, parsed.subsets)
    logger.debug("Loaded %d data sources from %s", len(catalog), path)
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> DataSourceCatalog:
    """The built-in catalog, loaded once per process."""
    return load_catalog()
