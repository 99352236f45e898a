"""
Typed identifiers for external database references.

A single ``Identifier`` type covers every reference kind. What distinguishes
an Entrez Gene ID from a RefSeq accession is its ``IdentifierKind``, which
selects an ``IdentifierRule`` (format pattern, numeric normalization,
authority tag) from the immutable ``RULES`` table.

Construction is the only validation gate: an ``Identifier`` that exists is
known to be valid, and it never changes afterwards. Two identifiers are
equal (and hash equally) iff they have the same kind and the same
normalized value, so they can be used directly as mapping keys when
building cross-reference tables.

Null sentinel:
    Flat-file dumps write ``-`` for "not applicable". That token maps to
    absence (``None`` from ``optional_identifier``); it can never be
    wrapped in an ``Identifier``.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from datasource_ingest.exceptions import IdentifierFormatError

if TYPE_CHECKING:
    from datasource_ingest.datasources import DataSource

NULL_SENTINEL = "-"


def is_null(token: str | None, sentinel: str = NULL_SENTINEL) -> bool:
    """True if *token* is absent or is the not-applicable sentinel."""
    return token is None or token.strip() == sentinel


class IdentifierKind(str, enum.Enum):
    """The supported identifier variants."""
    NCBI_TAXON = "NCBI_TAXON"
    ENTREZ_GENE = "ENTREZ_GENE"
    GI_NUMBER = "GI_NUMBER"
    REFSEQ = "REFSEQ"
    TRANSFAC_GENE = "TRANSFAC_GENE"
    TRANSFAC_FACTOR = "TRANSFAC_FACTOR"
    MGI = "MGI"
    HGNC = "HGNC"
    UNIPROT = "UNIPROT"
    GO = "GO"
    CHEBI = "CHEBI"
    PUBMED = "PUBMED"
    OMIM = "OMIM"
    ENSEMBL_GENE = "ENSEMBL_GENE"


@dataclass(frozen=True)
class IdentifierRule:
    """Format rule for one identifier kind.

    Attributes:
        kind: The variant this rule validates.
        authority: DataSource catalog tag of the issuing authority.
        pattern: Regular expression the stripped raw text must fully match.
        numeric: Store the value as ``int`` (drops leading zeros).
        description: Short human-readable description of the format.
    """
    kind: IdentifierKind
    authority: str
    pattern: re.Pattern[str]
    numeric: bool = False
    description: str = ""

    def normalize(self, raw: object) -> str | int:
        """Validate *raw* and return its normalized value.

        Raises:
            IdentifierFormatError: If *raw* violates the rule.
        """
        if isinstance(raw, bool):
            raise IdentifierFormatError(f"Invalid {self.kind.value} identifier: {raw!r}")
        if isinstance(raw, int):
            if not self.numeric:
                raise IdentifierFormatError(
                    f"{self.kind.value} identifiers are not numeric; got {raw!r}"
                )
            text = str(raw)
        elif isinstance(raw, str):
            text = raw.strip()
        else:
            raise IdentifierFormatError(
                f"Invalid {self.kind.value} identifier type: {type(raw).__name__}"
            )

        if text == NULL_SENTINEL:
            raise IdentifierFormatError(
                f"The null sentinel '{NULL_SENTINEL}' is not a {self.kind.value} "
                "identifier; use optional_identifier() for nullable fields"
            )
        if not self.pattern.fullmatch(text):
            raise IdentifierFormatError(
                f"Invalid {self.kind.value} identifier: {raw!r} "
                f"(expected {self.description or self.pattern.pattern})"
            )
        if self.numeric:
            value = int(text)
            if value < 1:
                raise IdentifierFormatError(
                    f"Invalid {self.kind.value} identifier: {raw!r} (must be positive)"
                )
            return value
        return text


def _rule(
    kind: IdentifierKind,
    authority: str,
    pattern: str,
    description: str,
    numeric: bool = False,
) -> tuple[IdentifierKind, IdentifierRule]:
    compiled = re.compile(pattern, re.ASCII)
    return kind, IdentifierRule(kind, authority, compiled, numeric, description)


_DIGITS = r"\d+"
_UNIPROT = (
    r"(?:[OPQ][0-9][A-Z0-9]{3}[0-9]|[A-NR-Z][0-9](?:[A-Z][A-Z0-9]{2}[0-9]){1,2})"
    r"(?:-\d+)?"
)

RULES: Mapping[IdentifierKind, IdentifierRule] = MappingProxyType(dict([
    _rule(IdentifierKind.NCBI_TAXON, "NCBI_TAXON", _DIGITS, "positive integer", numeric=True),
    _rule(IdentifierKind.ENTREZ_GENE, "EG", _DIGITS, "positive integer", numeric=True),
    _rule(IdentifierKind.GI_NUMBER, "GENBANK", _DIGITS, "positive integer", numeric=True),
    _rule(IdentifierKind.PUBMED, "PM", _DIGITS, "positive integer", numeric=True),
    _rule(
        IdentifierKind.REFSEQ, "REFSEQ", r"[A-Z]{2}_[A-Z]{0,4}\d+(?:\.\d+)?",
        "two-letter prefix, underscore, digits, optional .version (e.g. NM_000014.4)",
    ),
    _rule(IdentifierKind.TRANSFAC_GENE, "TRANSFAC", r"G\d{5,6}", "G followed by 5-6 digits"),
    _rule(IdentifierKind.TRANSFAC_FACTOR, "TRANSFAC", r"T\d{5}", "T followed by 5 digits"),
    _rule(IdentifierKind.MGI, "MGI", r"MGI:\d+", "MGI:<digits>"),
    _rule(IdentifierKind.HGNC, "HGNC", r"HGNC:\d+", "HGNC:<digits>"),
    _rule(IdentifierKind.UNIPROT, "UNIPROT", _UNIPROT, "UniProtKB accession"),
    _rule(IdentifierKind.GO, "GO", r"GO:\d{7}", "GO:<7 digits>"),
    _rule(IdentifierKind.CHEBI, "CHEBI", r"CHEBI:\d+", "CHEBI:<digits>"),
    _rule(IdentifierKind.OMIM, "OMIM", r"\d{6}", "6-digit MIM number"),
    _rule(
        IdentifierKind.ENSEMBL_GENE, "ENSEMBL", r"ENS[A-Z]*G\d{11}(?:\.\d+)?",
        "Ensembl stable gene ID (e.g. ENSG00000175899)",
    ),
]))


def rule_for(kind: IdentifierKind | str) -> IdentifierRule:
    return RULES[IdentifierKind(kind)]


@dataclass(frozen=True, repr=False)
class Identifier:
    """An immutable, validated reference to an external database record.

    Args:
        kind: Identifier variant (an ``IdentifierKind`` or its name).
        value: Raw value; normalized during construction.

    Raises:
        IdentifierFormatError: If *value* violates the variant's rule.
        ValueError: If *kind* is not a known variant.
    """
    kind: IdentifierKind
    value: str | int

    def __post_init__(self) -> None:
        kind = IdentifierKind(self.kind)
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "value", RULES[kind].normalize(self.value))

    @property
    def rule(self) -> IdentifierRule:
        return RULES[self.kind]

    @property
    def authority(self) -> str:
        """Catalog tag of the issuing authority."""
        return RULES[self.kind].authority

    @property
    def data_source(self) -> DataSource:
        from datasource_ingest.datasources import get_catalog

        return get_catalog().get(self.authority)

    @property
    def curie(self) -> str:
        """Prefixed form, e.g. ``EG:1`` or ``MGI:87991`` (never double-prefixed)."""
        text = str(self.value)
        if ":" in text:
            return text
        return f"{self.authority}:{text}"

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"Identifier({self.kind.value}, {self.value!r})"


def make_identifier(kind: IdentifierKind | str, raw: str | int) -> Identifier:
    """Construct an identifier, failing on invalid input (including the sentinel)."""
    return Identifier(IdentifierKind(kind), raw)


def optional_identifier(
    kind: IdentifierKind | str,
    raw: str | int | None,
    sentinel: str = NULL_SENTINEL,
) -> Identifier | None:
    """Construct an identifier for a nullable field.

    Returns ``None`` for ``None`` and for the null sentinel; every other
    value must satisfy the variant's rule.
    """
    if raw is None or (isinstance(raw, str) and is_null(raw, sentinel)):
        return None
    return Identifier(IdentifierKind(kind), raw)
