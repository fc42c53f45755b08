"""Generate a fake product catalog and interaction log for development.

This module creates synthetic ecommerce data for exercising the
recommendation engine: a catalog CSV with text, category, price and rating
fields, and an interaction CSV with weighted event types and timestamps.

Example:
    Run the script directly to generate default data:
        $ python scripts/generate_fake_data.py

    Or import and use programmatically:
        from scripts.generate_fake_data import generate_fake_catalog
        catalog_df = generate_fake_catalog(num_products=200)
"""

import argparse
import random
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import pandas as pd

# Default configuration constants
DEFAULT_NUM_USERS = 50
DEFAULT_NUM_PRODUCTS = 100
DEFAULT_NUM_INTERACTIONS = 1000
DEFAULT_DAYS_BACK = 90
DEFAULT_SEED = 42

CATEGORIES = {
    "electronics": ["laptops", "phones", "audio", "cameras"],
    "books": ["fiction", "science", "history", "cooking"],
    "home": ["kitchen", "furniture", "lighting", "decor"],
    "sports": ["running", "cycling", "fitness", "outdoor"],
    "clothing": ["shoes", "jackets", "shirts", "accessories"],
}
MANUFACTURERS = ["Acme", "Globex", "Initech", "Umbrella", "Stark", "Wayne"]
ADJECTIVES = [
    "premium", "budget", "eco-friendly", "durable", "portable",
    "compact", "professional", "classic", "modern", "wireless",
]

# Relative frequency of each interaction type in generated logs
INTERACTION_MIX = {"view": 0.6, "like": 0.2, "cart_add": 0.12, "purchase": 0.08}


def generate_fake_catalog(
    num_products: int = DEFAULT_NUM_PRODUCTS,
    seed: int = DEFAULT_SEED,
) -> pd.DataFrame:
    """Generate a synthetic product catalog.

    Returns:
        DataFrame with columns item_id, name, description, manufacturer,
        category, subcategory, price, rating, is_featured, is_on_sale,
        view_count.

    Raises:
        ValueError: If num_products is not positive.
    """
    if num_products <= 0:
        raise ValueError("num_products must be positive")

    rng = random.Random(seed)
    products = []

    for item_id in range(1, num_products + 1):
        category = rng.choice(sorted(CATEGORIES))
        subcategory = rng.choice(CATEGORIES[category])
        manufacturer = rng.choice(MANUFACTURERS)
        adjectives = rng.sample(ADJECTIVES, 2)

        products.append({
            "item_id": item_id,
            "name": f"{manufacturer} {adjectives[0]} {subcategory} {item_id}",
            "description": f"A {adjectives[0]}, {adjectives[1]} {subcategory} item for {category} lovers",
            "manufacturer": manufacturer,
            "category": category,
            "subcategory": subcategory,
            "price": round(rng.uniform(5, 1500), 2),
            "rating": round(rng.uniform(1, 5), 1),
            "is_featured": rng.random() < 0.1,
            "is_on_sale": rng.random() < 0.2,
            "view_count": rng.randint(0, 5000),
        })

    return pd.DataFrame(products)


def generate_fake_interactions(
    num_users: int = DEFAULT_NUM_USERS,
    num_products: int = DEFAULT_NUM_PRODUCTS,
    num_interactions: int = DEFAULT_NUM_INTERACTIONS,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    seed: int = DEFAULT_SEED,
) -> pd.DataFrame:
    """Generate a synthetic interaction log.

    Each row is one event with a type drawn from INTERACTION_MIX and a
    random timestamp in the date range. Purchases carry a 1-5 rating.

    Returns:
        DataFrame with columns user_id, item_id, type, timestamp, rating,
        sorted by timestamp.

    Raises:
        ValueError: If any count is non-positive or start_date is not
            before end_date.
    """
    if num_users <= 0 or num_products <= 0 or num_interactions <= 0:
        raise ValueError(
            "num_users, num_products, and num_interactions must be positive"
        )

    if end_date is None:
        end_date = datetime.now()
    if start_date is None:
        start_date = end_date - timedelta(days=DEFAULT_DAYS_BACK)
    if start_date >= end_date:
        raise ValueError("start_date must be before end_date")

    rng = random.Random(seed)
    types = list(INTERACTION_MIX)
    type_weights = list(INTERACTION_MIX.values())
    total_seconds = int((end_date - start_date).total_seconds())

    interactions = []
    for _ in range(num_interactions):
        interaction_type = rng.choices(types, weights=type_weights)[0]
        interactions.append({
            "user_id": rng.randint(1, num_users),
            "item_id": rng.randint(1, num_products),
            "type": interaction_type,
            "timestamp": start_date + timedelta(seconds=rng.randrange(total_seconds)),
            "rating": rng.randint(1, 5) if interaction_type == "purchase" else None,
        })

    df = pd.DataFrame(interactions)
    return df.sort_values("timestamp").reset_index(drop=True)


def main() -> None:
    """Generate both CSVs into the data/ directory and print a summary."""
    parser = argparse.ArgumentParser(description="Generate fake catalog and interaction data")
    parser.add_argument("--num-users", type=int, default=DEFAULT_NUM_USERS)
    parser.add_argument("--num-products", type=int, default=DEFAULT_NUM_PRODUCTS)
    parser.add_argument("--num-interactions", type=int, default=DEFAULT_NUM_INTERACTIONS)
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    parser.add_argument(
        "--output-dir",
        type=str,
        default=str(Path(__file__).parent.parent / "data"),
        help="Directory for the generated CSVs (default: data/)",
    )
    args = parser.parse_args()

    print(f"Generating {args.num_products} products and {args.num_interactions} interactions...")

    try:
        catalog_df = generate_fake_catalog(args.num_products, seed=args.seed)
        interactions_df = generate_fake_interactions(
            num_users=args.num_users,
            num_products=args.num_products,
            num_interactions=args.num_interactions,
            seed=args.seed,
        )
    except ValueError as e:
        print(f"Error generating data: {e}")
        return

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    catalog_path = output_dir / "fake_catalog.csv"
    interactions_path = output_dir / "fake_interactions.csv"
    catalog_df.to_csv(catalog_path, index=False)
    interactions_df.to_csv(interactions_path, index=False)

    print(f"\nData generated successfully!")
    print(f"Catalog saved to: {catalog_path}")
    print(f"Interactions saved to: {interactions_path}")
    print(f"\nData summary:")
    print(f"  Products: {len(catalog_df)}")
    print(f"  Interactions: {len(interactions_df)}")
    print(f"  Unique users: {interactions_df['user_id'].nunique()}")
    print(f"  Events by type: {interactions_df['type'].value_counts().to_dict()}")


if __name__ == '__main__':
    main()
