"""Records shared by the recommendation engine.

Catalog items, interaction events, feature vectors and recommendations are
plain frozen dataclasses. Interaction types and recommendation methods are
enumerations so unknown values are rejected at the boundary instead of being
compared as strings deep inside the engine.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from recengine.recommender.errors import InvalidInteractionTypeError, InvalidModeError

ItemId = Union[int, str]
UserId = Union[int, str]


def id_sort_key(value: Union[int, str]) -> Tuple[bool, Union[int, str]]:
    """Sort key that orders mixed int and str ids: numbers first, then strings."""
    return (isinstance(value, str), value)


class InteractionType(str, Enum):
    """Kinds of user-item interaction accepted by the ledger."""

    VIEW = "view"
    LIKE = "like"
    CART_ADD = "cart_add"
    PURCHASE = "purchase"

    @classmethod
    def parse(cls, value: Union[str, "InteractionType"]) -> "InteractionType":
        """Coerce a raw value to an InteractionType.

        Raises:
            InvalidInteractionTypeError: If the value is not one of the four
                supported types.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidInteractionTypeError(value) from None


# Additive weight contributed by one event of each type
INTERACTION_WEIGHTS: Dict[InteractionType, int] = {
    InteractionType.VIEW: 1,
    InteractionType.LIKE: 3,
    InteractionType.CART_ADD: 5,
    InteractionType.PURCHASE: 10,
}


class RecommendationMethod(str, Enum):
    """How a recommendation was produced."""

    CONTENT = "content"
    COLLABORATIVE = "collaborative"
    HYBRID = "hybrid"
    FALLBACK = "fallback"
    CATEGORY_BASED = "category_based"


class RecommendationMode(str, Enum):
    """Personalized modes a caller can request."""

    CONTENT = "content"
    COLLABORATIVE = "collaborative"
    HYBRID = "hybrid"

    @classmethod
    def parse(cls, value: Union[str, "RecommendationMode"]) -> "RecommendationMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidModeError(value) from None


@dataclass(frozen=True)
class CatalogItem:
    """A product as supplied by the catalog collaborator."""

    item_id: ItemId
    name: str = ""
    description: str = ""
    manufacturer: str = ""
    category: str = ""
    subcategory: str = ""
    price: float = 0.0
    rating: float = 0.0
    is_featured: bool = False
    is_on_sale: bool = False
    view_count: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CatalogItem":
        """Build an item from a loosely-typed product record.

        Accepts ``product_id``/``product_name`` as aliases for
        ``item_id``/``name``. Unknown keys are ignored.
        """
        item_id = data.get("item_id", data.get("product_id"))
        if item_id is None:
            raise ValueError("Catalog record is missing an item id")

        return cls(
            item_id=item_id,
            name=str(data.get("name", data.get("product_name", "")) or ""),
            description=str(data.get("description", "") or ""),
            manufacturer=str(data.get("manufacturer", "") or ""),
            category=str(data.get("category", "") or ""),
            subcategory=str(data.get("subcategory", "") or ""),
            price=float(data.get("price", 0.0) or 0.0),
            rating=float(data.get("rating", 0.0) or 0.0),
            is_featured=bool(data.get("is_featured", False)),
            is_on_sale=bool(data.get("is_on_sale", False)),
            view_count=int(data.get("view_count", 0) or 0),
        )

    def text_blob(self) -> str:
        """Text fields joined in indexing order."""
        return " ".join(
            [
                self.name,
                self.description,
                self.category,
                self.subcategory,
                self.manufacturer,
            ]
        )


@dataclass(frozen=True)
class InteractionEvent:
    """One user-item interaction. Never mutated once recorded."""

    user_id: UserId
    item_id: ItemId
    type: InteractionType
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    rating: Optional[float] = None

    @property
    def weight(self) -> int:
        return INTERACTION_WEIGHTS[self.type]


@dataclass(frozen=True)
class FeatureVector:
    """Indexed representation of one catalog item.

    ``position`` is the item's row in the generation's TF-IDF matrix and does
    not change for the lifetime of that generation.
    """

    item_id: ItemId
    position: int
    term_frequencies: Mapping[str, int]
    category: str
    subcategory: str
    price: float
    rating: float
    manufacturer: str
    is_featured: bool
    is_on_sale: bool


@dataclass(frozen=True)
class Recommendation:
    """A ranked item returned to callers."""

    item_id: ItemId
    score: float
    method: RecommendationMethod

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "score": self.score,
            "method": self.method.value,
        }
