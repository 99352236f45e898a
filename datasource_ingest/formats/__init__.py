"""
Format sub-package for datasource-ingest.

Contains the ``RecordFormat`` capability interface and the concrete
format collaborators that plug into the generic ``RecordReader``.

Design: Strategy Pattern
- base.py defines the RecordFormat ABC and shared field helpers.
- gene2refseq.py implements the NCBI gene2refseq table (single-line).
- transfac_gene.py implements TRANSFAC gene.dat (multi-line blocks).

Format classes are looked up by name through ``datasource_ingest.registry``.
Submodules are not imported here: they depend on ``reader``, which in turn
depends on ``formats.base``.
"""
