"""
Service dependencies for the API routes.

Services are created once in the app lifespan and kept on app.state; these
getters read them back so tests can swap them via dependency_overrides.
"""
from fastapi import Request

from ..data.database import DatabaseInterface
from ..price_estimator import PriceEstimator
from ..recipe_generator import RecipeGenerator


def get_db(request: Request) -> DatabaseInterface:
    """Dependency to get the recipe store."""
    return request.app.state.db


def get_price_estimator(request: Request) -> PriceEstimator:
    """Dependency to get the price estimator."""
    return request.app.state.price_estimator


def get_generator(request: Request) -> RecipeGenerator:
    """Dependency to get the meal recipe generator."""
    return request.app.state.generator
