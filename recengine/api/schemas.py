"""Request and response models for the RecEngine API."""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from recengine.recommender.models import CatalogItem, Recommendation

ItemIdField = Union[int, str]


class CatalogItemPayload(BaseModel):
    """One catalog product as sent by the catalog supplier."""

    item_id: ItemIdField = Field(..., description="Stable unique product id")
    name: str = ""
    description: str = ""
    manufacturer: str = ""
    category: str = ""
    subcategory: str = ""
    price: float = Field(default=0.0, ge=0)
    rating: float = Field(default=0.0, ge=0, le=5)
    is_featured: bool = False
    is_on_sale: bool = False
    view_count: int = Field(default=0, ge=0)

    def to_item(self) -> CatalogItem:
        return CatalogItem(**self.model_dump())


class InitializeRequest(BaseModel):
    items: List[CatalogItemPayload] = Field(..., description="Full product catalog")


class InitializeResponse(BaseModel):
    generation: int
    num_items: int
    built_at: str


class InteractionRequest(BaseModel):
    user_id: Union[int, str] = Field(..., description="Interacting user")
    item_id: ItemIdField = Field(..., description="Product interacted with")
    type: str = Field(..., description="view, like, cart_add or purchase")
    rating: Optional[float] = Field(default=None, ge=1, le=5)


class InteractionResponse(BaseModel):
    user_id: str
    item_id: ItemIdField
    type: str
    timestamp: str


class RecommendationItem(BaseModel):
    item_id: ItemIdField
    score: float
    method: str

    @classmethod
    def from_recommendation(cls, rec: Recommendation) -> "RecommendationItem":
        return cls(item_id=rec.item_id, score=rec.score, method=rec.method.value)


class RecommendationResponse(BaseModel):
    """Ranked recommendations returned to API callers.

    Attributes:
        user_id: User the list was generated for, if any.
        mode: Requested mode.
        count: Number of recommendations.
        recommendations: Ranked items with score and producing method.
        generation: Catalog generation the list was computed against.
    """

    user_id: Optional[str] = None
    mode: str
    count: int
    recommendations: List[RecommendationItem]
    generation: Optional[int] = None


class TopCategory(BaseModel):
    category: str
    count: int


class UserStatsResponse(BaseModel):
    user_id: str
    total_interactions: int
    unique_items: int
    interactions_by_type: Dict[str, int]
    top_categories: List[TopCategory]
