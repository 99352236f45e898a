"""
Configuration models and YAML I/O for datasource-ingest.

This module defines the Pydantic models that map 1:1 to an ingest config
YAML file, plus helpers for loading, saving, and validating it.

Key models:
- IngestConfig: Top-level config (list of sources + log level).
- SourceConfig: One input file, the format that reads it, and its encoding.

Key functions:
- load_config(path) -> IngestConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
- validate_sources(config): Cross-check format names against the registry.

Example file::

    log_level: INFO
    sources:
      - input_path: downloads/gene2refseq.gz
        format_name: gene2refseq
      - input_path: downloads/transfac/gene.dat
        format_name: transfac_gene
        encoding: latin-1

Why Pydantic + YAML:
- Pydantic gives strict validation and clear error messages.
- YAML is easy to hand-edit when adding a new dump to a run.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from datasource_ingest.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


class SourceConfig(BaseModel):
    """One source file to read."""

    input_path: str = Field(..., description="Path to the dump file (.gz allowed)")
    format_name: str = Field(..., description="Registered format name, e.g. 'gene2refseq'")
    encoding: str = Field("utf-8", description="Character encoding of the file")

    @field_validator("input_path", "format_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class IngestConfig(BaseModel):
    """Top-level configuration for a datasource-ingest run."""

    sources: list[SourceConfig] = Field(..., description="Files to read, in order")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Log level used by the command-line scripts"
    )

    @model_validator(mode="after")
    def _check_sources(self) -> IngestConfig:
        """Require at least one source and no repeated input paths."""
        if not self.sources:
            raise ValueError("An ingest config needs at least one source.")
        seen: set[str] = set()
        for source in self.sources:
            if source.input_path in seen:
                raise ValueError(f"Source '{source.input_path}' is listed more than once.")
            seen.add(source.input_path)
        return self


def load_config(path: str | Path) -> IngestConfig:
    """Load and validate an ingest config YAML file.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return IngestConfig.model_validate(raw)


def save_config(config: IngestConfig, path: str | Path) -> None:
    """Serialize an IngestConfig to YAML with a header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# datasource-ingest configuration\n")
        f.write("# One entry per dump file; format_name selects the parser.\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)


def validate_sources(config: IngestConfig) -> None:
    """Check that every source names a registered format.

    Raises:
        ConfigValidationError: If any format name is unknown.
    """
    from datasource_ingest.registry import available_formats

    known = set(available_formats())
    unknown = [s for s in config.sources if s.format_name not in known]
    if unknown:
        details = "\n".join(f"  {s.input_path}: '{s.format_name}'" for s in unknown)
        raise ConfigValidationError(
            f"The following sources use unknown formats:\n{details}\n"
            f"Available formats: {sorted(known)}"
        )
    logger.info("Config validation passed: %d sources", len(config.sources))
