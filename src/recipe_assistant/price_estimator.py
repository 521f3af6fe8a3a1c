"""
Ingredient price estimation via OpenFoodFacts.

Uses two public APIs:
- Product search / product API (world.openfoodfacts.org)
- Prices API (prices.openfoodfacts.org)

Ingredient lines are cleaned ("2 cups chopped fresh basil" -> "basil"),
searched, and the first product with reported prices gives the estimate.
Confidence is a coarse label from sample size and name similarity.

Example usage:
    >>> estimator = PriceEstimator(OpenFoodFactsClient())
    >>> estimate = estimator.estimate_ingredient_price("500g pasta")
    >>> print(estimate.estimated_price, estimate.confidence)
"""

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Callable, Dict, List, Optional

import requests

from .data.models import (
    AveragePrice,
    FoodProduct,
    IngredientPriceEstimate,
    PricesPage,
)

logger = logging.getLogger(__name__)


PRODUCT_API_BASE = "https://world.openfoodfacts.org/api/v2"
PRICES_API_BASE = "https://prices.openfoodfacts.org/api/v1"
SEARCH_API_BASE = "https://world.openfoodfacts.org/cgi/search.pl"

PRODUCT_FIELDS = "code,product_name,brands,image_url,categories_tags"

HEADERS = {
    "User-Agent": "RecipeAssistant/1.0 (price estimation)",
}

DEFAULT_CURRENCY = "GBP"

# Requests per batch and pause between batches (seconds)
BATCH_SIZE = 3
BATCH_DELAY = 0.5

# Prices older than this are only used when nothing recent exists
RECENT_PRICE_MONTHS = 12

SEARCH_RESULTS_PER_INGREDIENT = 5

_QUANTITY_UNIT = re.compile(
    r"^\d+(\.\d+)?\s*"
    r"(cup|cups|tablespoon|tablespoons|tbsp|teaspoon|teaspoons|tsp|pound|pounds|lb|lbs|"
    r"ounce|ounces|oz|gram|grams|g|kilogram|kilograms|kg|ml|milliliter|milliliters|"
    r"liter|liters|l|piece|pieces|slice|slices|clove|cloves|can|cans|package|packages|"
    r"pkg|box|boxes|jar|jars|bottle|bottles)s?\s+",
    re.IGNORECASE,
)
_LEADING_AMOUNT = re.compile(r"^[\d./¼½¾⅓⅔⅛⅜⅝⅞\s]+")

PREPARATION_WORDS = [
    "fresh", "frozen", "dried", "chopped", "diced", "sliced", "minced",
    "crushed", "grated", "shredded", "cooked", "raw", "organic", "large",
    "small", "medium", "whole", "halved", "quartered", "peeled", "unpeeled",
    "ripe", "green", "red", "yellow", "white", "black", "brown",
]
_PREPARATION = re.compile(r"\b(" + "|".join(PREPARATION_WORDS) + r")\b", re.IGNORECASE)


def clean_ingredient_name(ingredient: str) -> str:
    """
    Reduce an ingredient line to a searchable product name.

    Examples:
        "2 cups chopped fresh basil, packed" -> "basil"
        "1 large onion" -> "onion"
        "1 (14 oz) can tomatoes" -> unchanged (nothing usable is left)
    """
    cleaned = ingredient

    # Drop preparation notes after a comma or in parentheses
    cleaned = cleaned.split(",")[0].strip()
    cleaned = cleaned.split("(")[0].strip()

    cleaned = _QUANTITY_UNIT.sub("", cleaned)
    cleaned = _LEADING_AMOUNT.sub("", cleaned).strip()
    cleaned = _PREPARATION.sub("", cleaned).strip()
    cleaned = re.sub(r"\s+", " ", cleaned).strip()

    if len(cleaned) < 2:
        return ingredient
    return cleaned


def calculate_name_similarity(name1: str, name2: str) -> float:
    """
    Rough similarity between two product names (0.0-1.0).

    1.0 for equal names, 0.8 when one contains the other, otherwise the
    share of common words relative to the longer name.
    """
    s1 = name1.lower().strip()
    s2 = name2.lower().strip()

    if not s1 or not s2:
        return 0.0
    if s1 == s2:
        return 1.0
    if s1 in s2 or s2 in s1:
        return 0.8

    words1 = set(s1.split())
    words2 = set(s2.split())
    overlap = len(words1 & words2)
    return overlap / max(len(words1), len(words2))


def _one_year_before(day: date) -> date:
    try:
        return day.replace(year=day.year - RECENT_PRICE_MONTHS // 12)
    except ValueError:
        # Feb 29
        return day.replace(year=day.year - RECENT_PRICE_MONTHS // 12, day=28)


def _parse_price_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None


class OpenFoodFactsClient:
    """HTTP client for the OpenFoodFacts product and prices APIs.

    Network, HTTP and JSON errors are logged and reported as "no data".
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        product_api_base: str = PRODUCT_API_BASE,
        prices_api_base: str = PRICES_API_BASE,
        search_api_base: str = SEARCH_API_BASE,
    ):
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)
        self.timeout = timeout
        self.product_api_base = product_api_base
        self.prices_api_base = prices_api_base
        self.search_api_base = search_api_base

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_product_by_barcode(self, barcode: str) -> Optional[FoodProduct]:
        """
        Get product information by barcode.

        Returns:
            FoodProduct or None if unknown or the request failed
        """
        try:
            data = self._get_json(f"{self.product_api_base}/product/{barcode}.json")
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error fetching product {barcode}: {e}")
            return None

        if isinstance(data, dict) and data.get("status") == 1 and data.get("product"):
            return FoodProduct.from_api(data["product"])
        return None

    def search_products(self, query: str, limit: int = 10) -> List[FoodProduct]:
        """Search products by name."""
        params = {
            "search_terms": query,
            "page_size": str(limit),
            "json": "1",
            "fields": PRODUCT_FIELDS,
        }
        try:
            data = self._get_json(self.search_api_base, params=params)
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error searching products for '{query}': {e}")
            return []

        products = data.get("products") if isinstance(data, dict) else None
        if not isinstance(products, list):
            return []
        return [FoodProduct.from_api(p) for p in products if isinstance(p, dict)]

    def get_prices_by_barcode(self, barcode: str) -> Optional[PricesPage]:
        """Get reported prices for a product."""
        try:
            data = self._get_json(
                f"{self.prices_api_base}/prices",
                params={"product_code": barcode},
            )
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error fetching prices for {barcode}: {e}")
            return None

        if not isinstance(data, dict):
            return None
        return PricesPage.from_api(data)


class PriceEstimator:
    """Estimates ingredient prices from OpenFoodFacts price reports."""

    def __init__(
        self,
        client: Optional[OpenFoodFactsClient] = None,
        currency: str = DEFAULT_CURRENCY,
        batch_size: int = BATCH_SIZE,
        batch_delay: float = BATCH_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the estimator.

        Args:
            client: OpenFoodFacts client (a default one is created if omitted)
            currency: Default currency for estimates
            batch_size: Ingredients looked up concurrently per batch
            batch_delay: Seconds to wait between batches
            sleep: Sleep function (replaceable in tests)
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self.client = client or OpenFoodFactsClient()
        self.currency = currency
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self._sleep = sleep

    def get_average_price_by_barcode(
        self,
        barcode: str,
        currency: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Optional[AveragePrice]:
        """
        Average reported price for a product.

        Uses prices in the given currency from the last 12 months, or all
        prices in that currency when none are recent. Non-positive prices
        are ignored.
        """
        currency = currency or self.currency
        prices = self.client.get_prices_by_barcode(barcode)
        if not prices or not prices.items:
            return None

        cutoff = _one_year_before(today or date.today())

        usable = [p for p in prices.items if p.currency == currency and p.price > 0]
        recent = [
            p for p in usable
            if (_parse_price_date(p.date) or date.min) >= cutoff
        ]
        selected = recent or usable

        if not selected:
            return None

        average = sum(p.price for p in selected) / len(selected)
        return AveragePrice(
            price=round(average, 2),
            currency=currency,
            sample_size=len(selected),
        )

    def estimate_ingredient_price(
        self,
        ingredient_name: str,
        currency: Optional[str] = None,
    ) -> IngredientPriceEstimate:
        """
        Estimate the price of one ingredient line.

        Never raises; failures produce an estimate with confidence "none".
        """
        currency = currency or self.currency
        try:
            return self._estimate(ingredient_name, currency)
        except Exception as e:
            logger.error(f"Error estimating price for '{ingredient_name}': {e}", exc_info=True)
            return IngredientPriceEstimate.no_estimate(ingredient_name, currency)

    def _estimate(self, ingredient_name: str, currency: str) -> IngredientPriceEstimate:
        cleaned_name = clean_ingredient_name(ingredient_name)
        products = self.client.search_products(cleaned_name, SEARCH_RESULTS_PER_INGREDIENT)

        for product in products:
            if not product.code:
                continue

            average = self.get_average_price_by_barcode(product.code, currency)
            if not average or average.sample_size <= 0:
                continue

            if average.sample_size >= 3:
                confidence = "high"
            elif average.sample_size >= 2:
                confidence = "medium"
            else:
                confidence = "low"

            similarity = calculate_name_similarity(cleaned_name, product.product_name or "")
            if similarity < 0.5 and confidence == "high":
                confidence = "medium"

            return IngredientPriceEstimate(
                ingredient_name=ingredient_name,
                estimated_price=average.price,
                currency=average.currency,
                confidence=confidence,
                source="exact" if similarity > 0.7 else "fuzzy",
                matched_product_name=product.product_name,
                product_code=product.code,
            )

        logger.debug(f"No priced product found for '{cleaned_name}'")
        return IngredientPriceEstimate.no_estimate(ingredient_name, currency)

    def estimate_ingredients_prices(
        self,
        ingredients: List[str],
        currency: Optional[str] = None,
    ) -> List[IngredientPriceEstimate]:
        """
        Estimate prices for several ingredients.

        Ingredients are looked up in batches of batch_size; lookups inside a
        batch run concurrently and batches are separated by batch_delay.
        Results keep the input order.
        """
        currency = currency or self.currency
        estimates: List[IngredientPriceEstimate] = []

        for start in range(0, len(ingredients), self.batch_size):
            batch = ingredients[start:start + self.batch_size]

            with ThreadPoolExecutor(max_workers=len(batch), thread_name_prefix="price_") as executor:
                estimates.extend(
                    executor.map(lambda name: self.estimate_ingredient_price(name, currency), batch)
                )

            if start + self.batch_size < len(ingredients):
                self._sleep(self.batch_delay)

        logger.info(
            f"Estimated prices for {len(ingredients)} ingredients "
            f"({sum(1 for e in estimates if e.estimated_price is not None)} priced)"
        )
        return estimates


def estimate_total(estimates: List[IngredientPriceEstimate], currency: str = DEFAULT_CURRENCY) -> Dict[str, Any]:
    """
    Sum priced estimates.

    Returns:
        {"total": float, "currency": str, "priced": int, "unpriced": int}
    """
    priced = [e for e in estimates if e.estimated_price is not None]
    if priced:
        currency = priced[0].currency
    return {
        "total": round(sum(e.estimated_price for e in priced), 2),
        "currency": currency,
        "priced": len(priced),
        "unpriced": len(estimates) - len(priced),
    }
