"""
Price routes for the FastAPI application.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...price_estimator import PriceEstimator, estimate_total
from ..dependencies import get_price_estimator

logger = logging.getLogger(__name__)

router = APIRouter()


class EstimatePricesRequest(BaseModel):
    """Request body for estimating ingredient prices."""
    ingredients: List[str] = Field(min_length=1)
    currency: Optional[str] = None


@router.post("/prices/estimate")
def estimate_prices(
    estimate_request: EstimatePricesRequest,
    estimator: PriceEstimator = Depends(get_price_estimator),
):
    """
    Estimate prices for a list of ingredient lines.

    Returns:
        {"estimates": [...], "total": {...}} with estimates in input order
    """
    currency = (estimate_request.currency or estimator.currency).upper()
    estimates = estimator.estimate_ingredients_prices(estimate_request.ingredients, currency)
    return {
        "estimates": [e.to_dict() for e in estimates],
        "total": estimate_total(estimates, currency),
    }


@router.get("/prices/products/{barcode}")
def get_product(
    barcode: str,
    estimator: PriceEstimator = Depends(get_price_estimator),
):
    """Get product information and its average price by barcode."""
    product = estimator.client.get_product_by_barcode(barcode)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    average = estimator.get_average_price_by_barcode(barcode)
    data = product.to_dict()
    data["average_price"] = None
    if average is not None:
        data["average_price"] = {
            "price": average.price,
            "currency": average.currency,
            "sample_size": average.sample_size,
        }
    return data
