"""
Data models for the Recipe Assistant.

These models define the core entities used throughout the system:
- RecipeContent: Structured recipe body parsed from model output
- RecipeNutrition: Partial per-serving nutrition facts
- ParsedRecipe / ParsedRecipeForDB: Parser output and its storage shape
- StoredRecipe: A recipe record after the store assigned id and timestamp
- FoodProduct, PriceEntry, PricesPage: OpenFoodFacts payloads
- IngredientPriceEstimate: Price estimate for one ingredient line
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


NUTRIENT_KEYS = ("calories", "protein", "carbs", "fat", "fiber", "sugar")

CONFIDENCE_LEVELS = ("high", "medium", "low", "none")
PRICE_SOURCES = ("exact", "fuzzy", "category", "none")


def _string_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"content_json.{key} must be a list, got {type(value).__name__}")
    return [str(item) for item in value]


@dataclass
class RecipeContent:
    """Structured recipe body.

    Ingredient lines keep quantity and name together ("2 cups flour");
    times are kept as the text the model wrote ("20 minutes").
    """
    title: str
    ingredients: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)  # Cooking order
    tips: List[str] = field(default_factory=list)
    servings: Optional[int] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    total_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the content_json shape. Unknown fields are omitted."""
        data: Dict[str, Any] = {
            "title": self.title,
            "ingredients": list(self.ingredients),
            "instructions": list(self.instructions),
        }
        if self.tips:
            data["tips"] = list(self.tips)
        if self.servings is not None:
            data["servings"] = self.servings
        if self.prep_time is not None:
            data["prepTime"] = self.prep_time
        if self.cook_time is not None:
            data["cookTime"] = self.cook_time
        if self.total_time is not None:
            data["totalTime"] = self.total_time
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecipeContent":
        """Create RecipeContent from a content_json dictionary."""
        return cls(
            title=data.get("title", ""),
            ingredients=_string_list(data, "ingredients"),
            instructions=_string_list(data, "instructions"),
            tips=_string_list(data, "tips"),
            servings=data.get("servings"),
            prep_time=data.get("prepTime"),
            cook_time=data.get("cookTime"),
            total_time=data.get("totalTime"),
        )


@dataclass
class RecipeNutrition:
    """Nutrition facts per serving.

    Each field is either a non-negative integer or None. None means the
    value was not found, not zero.
    """
    calories: Optional[int] = None
    protein: Optional[int] = None
    carbs: Optional[int] = None
    fat: Optional[int] = None
    fiber: Optional[int] = None
    sugar: Optional[int] = None

    def __str__(self) -> str:
        """Human-readable nutrition summary."""
        parts = []
        if self.calories is not None:
            parts.append(f"{self.calories} cal")
        if self.protein is not None:
            parts.append(f"{self.protein}g protein")
        if self.carbs is not None:
            parts.append(f"{self.carbs}g carbs")
        if self.fat is not None:
            parts.append(f"{self.fat}g fat")
        return ", ".join(parts) if parts else "Nutrition info unavailable"

    def is_empty(self) -> bool:
        return all(getattr(self, key) is None for key in NUTRIENT_KEYS)

    def is_complete(self) -> bool:
        """True when calories, protein, carbs and fat are all known."""
        return (
            self.calories is not None
            and self.calories > 0
            and self.protein is not None
            and self.carbs is not None
            and self.fat is not None
        )

    def to_dict(self) -> Dict[str, int]:
        """Only the nutrients that were found."""
        return {
            key: getattr(self, key)
            for key in NUTRIENT_KEYS
            if getattr(self, key) is not None
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["RecipeNutrition"]:
        if not data:
            return None
        return cls(**{key: data[key] for key in NUTRIENT_KEYS if data.get(key) is not None})


@dataclass
class ParsedRecipeForDB:
    """Parser output in the shape handed to the recipe store."""
    title: str
    content_json: RecipeContent
    nutrition: Optional[RecipeNutrition] = None
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: Dict[str, Any] = {
            "title": self.title,
            "content_json": self.content_json.to_dict(),
            "tags": list(self.tags),
        }
        if self.nutrition and not self.nutrition.is_empty():
            data["nutrition"] = self.nutrition.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParsedRecipeForDB":
        """Create a record from its dictionary form (e.g. an API body)."""
        content = dict(data.get("content_json") or {})
        content.setdefault("title", data["title"])
        return cls(
            title=data["title"],
            content_json=RecipeContent.from_dict(content),
            nutrition=RecipeNutrition.from_dict(data.get("nutrition")),
            tags=list(data.get("tags") or []),
        )


@dataclass
class ParsedRecipe:
    """Recipe structure extracted from a model response."""
    title: str
    content: RecipeContent
    nutrition: Optional[RecipeNutrition] = None
    tags: List[str] = field(default_factory=list)

    def to_db_record(self) -> ParsedRecipeForDB:
        return ParsedRecipeForDB(
            title=self.title,
            content_json=self.content,
            nutrition=self.nutrition,
            tags=list(self.tags),
        )


@dataclass
class StoredRecipe(ParsedRecipeForDB):
    """A recipe record persisted by the store."""
    id: str = ""
    created_at: str = ""  # ISO-8601

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["id"] = self.id
        data["created_at"] = self.created_at
        return data


# =============================================================================
# Price estimation models
# =============================================================================

@dataclass
class FoodProduct:
    """Product entry from the OpenFoodFacts product database."""
    code: str
    product_name: Optional[str] = None
    brands: Optional[str] = None
    image_url: Optional[str] = None
    categories_tags: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "FoodProduct":
        return cls(
            code=str(data.get("code", "")),
            product_name=data.get("product_name"),
            brands=data.get("brands"),
            image_url=data.get("image_url"),
            categories_tags=list(data.get("categories_tags") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "product_name": self.product_name,
            "brands": self.brands,
            "image_url": self.image_url,
            "categories_tags": list(self.categories_tags),
        }


@dataclass
class PriceEntry:
    """One reported price from the OpenFoodFacts prices database."""
    product_code: str
    price: float
    currency: str
    date: str  # YYYY-MM-DD
    id: Optional[int] = None
    product_name: Optional[str] = None
    location_osm_id: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PriceEntry":
        try:
            price = float(data.get("price") or 0)
        except (TypeError, ValueError):
            price = 0.0
        return cls(
            id=data.get("id"),
            product_code=str(data.get("product_code", "")),
            product_name=data.get("product_name"),
            price=price,
            currency=data.get("currency") or "",
            date=data.get("date") or "",
            location_osm_id=data.get("location_osm_id"),
        )


@dataclass
class PricesPage:
    """A page of price entries."""
    items: List[PriceEntry] = field(default_factory=list)
    page: int = 1
    pages: int = 1
    size: int = 0
    total: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PricesPage":
        return cls(
            items=[PriceEntry.from_api(item) for item in data.get("items") or []],
            page=data.get("page") or 1,
            pages=data.get("pages") or 1,
            size=data.get("size") or 0,
            total=data.get("total") or 0,
        )


@dataclass
class AveragePrice:
    """Mean price over the samples that passed the currency/date filter."""
    price: float
    currency: str
    sample_size: int


@dataclass
class IngredientPriceEstimate:
    """Price estimate for a single ingredient line.

    confidence is a coarse label ("high", "medium", "low", "none") derived
    from sample size and name similarity, not a probability.
    """
    ingredient_name: str
    estimated_price: Optional[float]
    currency: str
    confidence: str = "none"
    source: str = "none"  # One of PRICE_SOURCES
    matched_product_name: Optional[str] = None
    product_code: Optional[str] = None

    def __post_init__(self):
        if self.confidence not in CONFIDENCE_LEVELS:
            raise ValueError(f"Unknown confidence level: {self.confidence!r}")
        if self.source not in PRICE_SOURCES:
            raise ValueError(f"Unknown price source: {self.source!r}")

    @classmethod
    def no_estimate(cls, ingredient_name: str, currency: str) -> "IngredientPriceEstimate":
        return cls(
            ingredient_name=ingredient_name,
            estimated_price=None,
            currency=currency,
            confidence="none",
            source="none",
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "ingredientName": self.ingredient_name,
            "estimatedPrice": self.estimated_price,
            "currency": self.currency,
            "confidence": self.confidence,
            "source": self.source,
        }
        if self.matched_product_name is not None:
            data["matchedProductName"] = self.matched_product_name
        if self.product_code is not None:
            data["productCode"] = self.product_code
        return data
