from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RawHotelRecord(BaseModel):
    """One row of the hotels table, as handed over by the dataset loader."""

    property_name: str = ""
    address: str = ""
    city: str = ""
    country: str = ""
    state: str = ""
    hotel_star_rating: str = ""
    hotel_facilities: str = ""
    room_type: str = ""
    price: float = 0.0
    latitude: float = 0.0
    longitude: float = 0.0
    top_positive_review: str = ""
    top_negative_review: str = ""
    average_rating: float = 0.0
    reviews_summary: str = ""
    reviews_from_different_sites: str = ""


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class PlatformRating(BaseModel):
    model_config = ConfigDict(frozen=True)

    rating: float = 0.0
    reviews_count: int = 0


class AggregatedHotel(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    address: str
    city: str
    country: str | None = None
    average_score: float = Field(default=0.0, ge=0.0, le=10.0)
    total_reviews: int = 0
    positive_word_count: int = 1
    negative_word_count: int = 0
    tags: list[str] = Field(default_factory=list)
    reviews: list[str] = Field(default_factory=list)
    confidence_score: int = Field(default=0, ge=0, le=100)
    price_range: float = Field(..., gt=0)
    coordinates: Coordinates
    platform_ratings: dict[str, PlatformRating] = Field(default_factory=dict)
    star_rating: int | None = None
    room_type: str | None = None
    facilities_brief: str = ""
    review_summary: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        """Identity of a hotel across filter merges."""
        return (self.name, self.address)


class ScoredHotel(AggregatedHotel):
    final_score: int
    price_tier: str


class RecommendationFilters(BaseModel):
    price_min: float | None = Field(default=None, ge=0)
    price_max: float | None = Field(default=None, ge=0)
    star_ratings: list[int] = Field(default_factory=list)
    avg_rating_min: float | None = Field(default=None, ge=0.0, le=10.0)
    avg_rating_max: float | None = Field(default=None, ge=0.0, le=10.0)
    area: str | None = Field(default=None, description="Preferred area or address fragment")
    extra_requirements: str | None = Field(
        default=None, description="Free-text requirements appended to the search query"
    )


class RecommendationRequest(BaseModel):
    persona: str = Field(..., min_length=1, description="Family, Business, Luxury, Solo or Couple")
    city: str = Field(default="all", description='City name, or "all" for no city filter')
    preferences: list[str] = Field(default_factory=list)
    filters: RecommendationFilters | None = None


class CityStats(BaseModel):
    name: str
    hotel_count: int
    avg_rating: float


class Insights(BaseModel):
    total_analyzed: int
    average_rating: float
    top_features: list[str]
    city_stats: CityStats


class RecommendationResult(BaseModel):
    hotels: list[ScoredHotel]
    insights: Insights
    used_fallback: bool = False
    used_geocode: bool = False


class PriceTier(BaseModel):
    min: float
    max: float
    label: str
    tag: str


PRICE_TIERS: list[PriceTier] = [
    PriceTier(min=500, max=1000, label="₹500 - ₹1,000", tag="Budget Pick"),
    PriceTier(min=1000, max=2000, label="₹1,000 - ₹2,000", tag="Mid-Range"),
    PriceTier(min=2000, max=3000, label="₹2,000 - ₹3,000", tag="Premium"),
    PriceTier(min=3000, max=4000, label="₹3,000 - ₹4,000", tag="Luxury"),
    PriceTier(min=4000, max=10000, label="₹4,000+", tag="Ultra Luxury"),
]


def price_tier_for(price: float) -> PriceTier:
    """Return the first tier whose inclusive band holds *price*, else the top tier."""
    for tier in PRICE_TIERS:
        if tier.min <= price <= tier.max:
            return tier
    return PRICE_TIERS[-1]
