"""
Catalog data sub-package for datasource-ingest.

Holds ``datasources.yaml``, the table of data source tags read by
``datasource_ingest.datasources``.
"""
