"""
Format registry for datasource-ingest.

Maps format names (as used in ingest configuration files) to
``RecordFormat`` classes. The built-in map is built lazily to avoid
circular imports: format modules import the reader, and the reader imports
the format base class.
"""

from __future__ import annotations

import logging

from datasource_ingest.exceptions import UnknownFormatError
from datasource_ingest.formats.base import RecordFormat

logger = logging.getLogger(__name__)

_FORMATS: dict[str, type[RecordFormat]] = {}


def _get_format_map() -> dict[str, type[RecordFormat]]:
    """Lazily register the built-in formats."""
    if not _FORMATS:
        from datasource_ingest.formats.gene2refseq import Gene2RefseqFormat
        from datasource_ingest.formats.transfac_gene import TransfacGeneFormat

        for format_cls in (Gene2RefseqFormat, TransfacGeneFormat):
            _FORMATS.setdefault(format_cls.name, format_cls)
    return _FORMATS


def register_format(format_cls: type[RecordFormat]) -> type[RecordFormat]:
    """Register an additional format class (usable as a class decorator).

    Raises:
        ValueError: If another class is already registered under the name.
    """
    formats = _get_format_map()
    existing = formats.get(format_cls.name)
    if existing is not None and existing is not format_cls:
        raise ValueError(
            f"Format name '{format_cls.name}' is already registered to "
            f"{existing.__name__}"
        )
    formats[format_cls.name] = format_cls
    logger.debug("Registered format '%s' -> %s", format_cls.name, format_cls.__name__)
    return format_cls


def available_formats() -> list[str]:
    return sorted(_get_format_map())


def get_format(name: str) -> RecordFormat:
    """Instantiate the format registered under *name*.

    Raises:
        UnknownFormatError: If no format has that name.
    """
    format_cls = _get_format_map().get(name)
    if format_cls is None:
        raise UnknownFormatError(
            f"Unknown format: '{name}'. Available formats: {available_formats()}"
        )
    return format_cls()
