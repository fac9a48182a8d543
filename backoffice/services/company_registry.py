"""
Company registry snapshot loading.

The registry is exported by the data-access layer as a CSV or parquet file
with one row per company and one pair of effective-date columns per service
category. This module:
- Reads the snapshot with polars.
- Normalizes the display-name column and drops unnamed rows.
- Keeps the frame in memory so requests don't re-read the file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import polars as pl

from backoffice.core.config import settings


logger = logging.getLogger(__name__)

_REGISTRY: Optional[pl.DataFrame] = None


class RegistryUnavailableError(RuntimeError):
    """Raised when the registry snapshot cannot be read."""


def read_registry_file(path: Path) -> pl.DataFrame:
    """
    Read a registry snapshot. Every column is read as text for CSV files so
    effective dates reach the filter engine exactly as exported.
    """
    if not path.exists():
        raise RegistryUnavailableError(f"Company registry not found at {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".parquet":
            return pl.read_parquet(path)
        if suffix == ".csv":
            return pl.read_csv(path, infer_schema_length=0)
    except pl.exceptions.PolarsError as e:
        raise RegistryUnavailableError(f"Could not read company registry {path}: {e}") from e
    raise RegistryUnavailableError(f"Unsupported registry format: {path.suffix}")


def _normalize_registry(df: pl.DataFrame) -> pl.DataFrame:
    """
    Normalize a raw registry frame.

    - Lower-cases and strips column names.
    - Ensures a 'name' column (falling back to 'company_name').
    - Drops rows without a name.
    - Adds a stable integer 'id' if the export has none.
    """
    columns = [col.strip().lower() for col in df.columns]
    duplicates = sorted({col for col in columns if columns.count(col) > 1})
    if duplicates:
        raise RegistryUnavailableError(
            f"Company registry has columns differing only by case or spacing: {', '.join(duplicates)}"
        )

    try:
        df = df.rename(dict(zip(df.columns, columns)))

        if "name" not in df.columns:
            if "company_name" in df.columns:
                df = df.with_columns(pl.col("company_name").alias("name"))
            else:
                raise RegistryUnavailableError("Company registry has no 'name' or 'company_name' column")

        initial_count = df.height
        df = df.with_columns(
            pl.col("name").cast(pl.Utf8).str.strip_chars().alias("name")
        ).filter(pl.col("name").is_not_null() & (pl.col("name") != ""))
        dropped = initial_count - df.height
        if dropped:
            logger.info("Dropped %d registry rows without a company name", dropped)

        if "id" not in df.columns:
            df = df.with_columns(pl.int_range(0, pl.len()).alias("id"))
    except pl.exceptions.PolarsError as e:
        raise RegistryUnavailableError(f"Could not normalize company registry: {e}") from e

    return df


def load_company_registry(path: Optional[Path] = None) -> pl.DataFrame:
    registry_path = Path(path) if path is not None else settings.COMPANY_REGISTRY_PATH
    df = _normalize_registry(read_registry_file(registry_path))
    logger.info("Loaded %d companies from %s", df.height, registry_path)
    return df


def get_company_registry(force_reload: bool = False) -> pl.DataFrame:
    """
    Retrieve the in-memory registry, loading it on first use.

    This is the canonical entrypoint other parts of the backend should use.
    """
    global _REGISTRY

    if _REGISTRY is None or force_reload:
        _REGISTRY = load_company_registry()
    return _REGISTRY


def set_company_registry(df: Optional[pl.DataFrame]) -> None:
    """Replace the cached registry (None forces a reload on next access)."""
    global _REGISTRY
    _REGISTRY = _normalize_registry(df) if df is not None else None


def registry_records(force_reload: bool = False) -> List[Dict[str, Any]]:
    return get_company_registry(force_reload=force_reload).to_dicts()
