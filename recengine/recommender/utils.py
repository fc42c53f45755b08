"""Utility functions for recommendation system.

This module provides CSV loaders that turn catalog and interaction exports
into the records the engine consumes. The engine itself never touches disk;
these helpers are used by the CLI scripts and the service layer.
"""

import logging
from pathlib import Path
from typing import List

import pandas as pd

from recengine.recommender.models import CatalogItem, InteractionEvent, InteractionType

# Configure module logger
logger = logging.getLogger(__name__)

CATALOG_REQUIRED_COLUMNS = {"item_id"}
CATALOG_TEXT_COLUMNS = ["name", "description", "manufacturer", "category", "subcategory"]
CATALOG_NUMERIC_COLUMNS = {"price": 0.0, "rating": 0.0, "view_count": 0}
CATALOG_FLAG_COLUMNS = ["is_featured", "is_on_sale"]

INTERACTION_REQUIRED_COLUMNS = {"user_id", "item_id", "type"}

_TRUE_STRINGS = {"true", "1", "yes", "y", "t"}


def _read_csv(csv_path: str) -> pd.DataFrame:
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    logger.info(f"Loading CSV from {csv_path}")
    return pd.read_csv(csv_path)


def _as_flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if pd.isna(value):
        return False
    return bool(value)


def load_catalog_csv(csv_path: str) -> List[CatalogItem]:
    """Load catalog items from a CSV file.

    The file needs an ``item_id`` column (``product_id`` and
    ``product_name`` are accepted as aliases). Missing optional columns take
    their defaults; missing text cells become empty strings.

    Args:
        csv_path: Path to the catalog CSV.

    Returns:
        Catalog items in file order.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If the id column is missing.

    Example:
        >>> catalog = load_catalog_csv("data/fake_catalog.csv")
        >>> engine.initialize(catalog)
    """
    df = _read_csv(csv_path)
    df = df.rename(columns={"product_id": "item_id", "product_name": "name"})

    if not CATALOG_REQUIRED_COLUMNS.issubset(df.columns):
        missing = CATALOG_REQUIRED_COLUMNS - set(df.columns)
        raise ValueError(f"CSV missing required columns: {missing}")

    for column in CATALOG_TEXT_COLUMNS:
        if column not in df.columns:
            df[column] = ""
        df[column] = df[column].fillna("").astype(str)

    for column, default in CATALOG_NUMERIC_COLUMNS.items():
        if column not in df.columns:
            df[column] = default
        df[column] = pd.to_numeric(df[column], errors="coerce").fillna(default)

    for column in CATALOG_FLAG_COLUMNS:
        if column not in df.columns:
            df[column] = False
        df[column] = df[column].map(_as_flag)

    items = [
        CatalogItem(
            item_id=_native(row.item_id),
            name=row.name,
            description=row.description,
            manufacturer=row.manufacturer,
            category=row.category,
            subcategory=row.subcategory,
            price=float(row.price),
            rating=float(row.rating),
            is_featured=bool(row.is_featured),
            is_on_sale=bool(row.is_on_sale),
            view_count=int(row.view_count),
        )
        for row in df.itertuples(index=False)
    ]

    logger.info(f"Loaded {len(items)} catalog items")
    return items


def load_interactions_csv(csv_path: str) -> List[InteractionEvent]:
    """Load interaction events from a CSV file.

    Required columns are ``user_id``, ``item_id`` and ``type``; ``timestamp``
    and ``rating`` are optional. User ids are returned as strings, the form
    the service uses for path and body ids. Events come back sorted by
    timestamp when timestamps are present, in file order otherwise.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If required columns are missing.
        InvalidInteractionTypeError: If a row carries an unsupported type.
    """
    df = _read_csv(csv_path)
    df = df.rename(columns={"product_id": "item_id"})

    if not INTERACTION_REQUIRED_COLUMNS.issubset(df.columns):
        missing = INTERACTION_REQUIRED_COLUMNS - set(df.columns)
        raise ValueError(f"CSV missing required columns: {missing}")

    has_timestamps = "timestamp" in df.columns
    if has_timestamps:
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
        df = df.sort_values("timestamp", kind="stable").reset_index(drop=True)

    events = []
    for row in df.to_dict(orient="records"):
        rating = row.get("rating")
        kwargs = {
            "rating": None if rating is None or pd.isna(rating) else float(rating),
        }
        if has_timestamps:
            kwargs["timestamp"] = row["timestamp"].to_pydatetime()

        events.append(
            InteractionEvent(
                user_id=str(_native(row["user_id"])),
                item_id=_native(row["item_id"]),
                type=InteractionType.parse(row["type"]),
                **kwargs,
            )
        )

    logger.info(f"Loaded {len(events)} interaction events")
    logger.info(f"Unique users: {df['user_id'].nunique()}")
    return events


def _native(value):
    """Convert numpy scalars to plain Python values."""
    return value.item() if hasattr(value, "item") else value
