"""CLI script for getting product recommendations.

Useful for testing and evaluation. Loads a catalog and an interaction log
from CSV, builds the engine in memory, and prints recommendations.
"""

import argparse
import logging
import sys
from typing import List, Optional

from recengine.recommender.engine import RecommendationEngine
from recengine.recommender.errors import RecEngineError
from recengine.recommender.models import Recommendation
from recengine.recommender.utils import load_catalog_csv, load_interactions_csv

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)


def get_recommendations(
    catalog_csv: str,
    interactions_csv: Optional[str],
    user_id: Optional[str] = None,
    mode: str = "hybrid",
    limit: int = 10,
    similar_to: Optional[str] = None,
) -> List[Recommendation]:
    """Build an engine from CSV exports and query it.

    Args:
        catalog_csv: Path to the catalog CSV
        interactions_csv: Optional path to the interaction log CSV
        user_id: User to recommend for; None means trending
        mode: "content", "collaborative" or "hybrid"
        limit: Number of recommendations to return
        similar_to: Item id for item-to-item recommendations

    Returns:
        Ranked recommendations
    """
    with RecommendationEngine() as engine:
        engine.initialize(load_catalog_csv(catalog_csv))
        if interactions_csv:
            engine.record_events(load_interactions_csv(interactions_csv))

        if similar_to is not None:
            anchor = int(similar_to) if similar_to.isdigit() else similar_to
            return engine.recommend_similar_to(anchor, limit)
        if user_id is None:
            return engine.fallback(limit)

        return engine.recommend(user_id, mode=mode, limit=limit)


def main() -> None:
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Get product recommendations from catalog and interaction CSVs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/predict_cli.py data/fake_catalog.csv --interactions data/fake_interactions.csv --user 42
  python scripts/predict_cli.py data/fake_catalog.csv --interactions data/fake_interactions.csv --user 42 --mode collaborative
  python scripts/predict_cli.py data/fake_catalog.csv --similar-to 7 --limit 5
  python scripts/predict_cli.py data/fake_catalog.csv --limit 5
        """
    )

    parser.add_argument("catalog", type=str, help="Catalog CSV file")
    parser.add_argument("--interactions", type=str, default=None, help="Interaction log CSV file")
    parser.add_argument("--user", type=str, default=None, help="User id to recommend for")
    parser.add_argument(
        "--mode",
        type=str,
        choices=["content", "collaborative", "hybrid"],
        default="hybrid",
        help="Recommendation mode (default: hybrid)"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of recommendations to return (default: 10)"
    )
    parser.add_argument("--similar-to", type=str, default=None, help="Item id for similar-item lookup")
    parser.add_argument("--scores", action="store_true", help="Show scores and methods")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    try:
        recommendations = get_recommendations(
            catalog_csv=args.catalog,
            interactions_csv=args.interactions,
            user_id=args.user,
            mode=args.mode,
            limit=args.limit,
            similar_to=args.similar_to,
        )
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except RecEngineError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    if args.similar_to is not None:
        heading = f"Items similar to {args.similar_to}"
    elif args.user is not None:
        heading = f"Recommendations for user {args.user} (mode: {args.mode})"
    else:
        heading = "Trending products"

    print(f"\n{heading}:")
    print(f"  Top {len(recommendations)} products: {[rec.item_id for rec in recommendations]}")

    if args.scores:
        print("\nScores:")
        for rank, rec in enumerate(recommendations, start=1):
            print(f"  {rank:>2}. item {rec.item_id}: {rec.score:.4f} ({rec.method.value})")

    print()


if __name__ == "__main__":
    main()
