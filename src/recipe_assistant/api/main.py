"""
FastAPI application for the Recipe Assistant.

Services (recipe store, price estimator, meal generator) are built once in
the lifespan from AppConfig and kept on app.state.
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import AppConfig
from ..data.database import DatabaseInterface
from ..llm_provider import get_llm_provider
from ..price_estimator import OpenFoodFactsClient, PriceEstimator
from ..recipe_generator import RecipeGenerator
from .routes import prices, recipes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if os.getenv("DEBUG", "false").lower() == "true" else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_services(app: FastAPI, config: AppConfig) -> None:
    """Create the store, estimator and generator on app.state."""
    db = DatabaseInterface(db_dir=config.db_dir)
    llm = get_llm_provider(
        api_key=config.anthropic_api_key,
        use_null=config.use_null_llm,
        model=config.llm_model,
    )

    app.state.config = config
    app.state.db = db
    app.state.price_estimator = PriceEstimator(
        client=OpenFoodFactsClient(timeout=config.http_timeout),
        currency=config.price_currency,
        batch_size=config.price_batch_size,
        batch_delay=config.price_batch_delay,
    )
    app.state.generator = RecipeGenerator(llm, db=db, timeout=config.llm_timeout)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Configuration to use; loaded from the environment at
            startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Recipe Assistant API...")
        build_services(app, config or AppConfig.from_env())
        logger.info(f"Services initialized (db_dir={app.state.config.db_dir})")

        yield

        app.state.price_estimator.client.session.close()
        logger.info("Recipe Assistant API shutdown complete")

    app = FastAPI(
        title="Recipe Assistant API",
        description="Parse, store, price and generate recipes",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        generator = getattr(request.app.state, "generator", None)
        return {
            "status": "healthy",
            "version": __version__,
            "null_llm": generator.llm.is_null if generator else None,
        }

    app.include_router(recipes.router, prefix="/api", tags=["recipes"])
    app.include_router(prices.router, prefix="/api", tags=["prices"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = AppConfig.from_env()
    uvicorn.run(
        "recipe_assistant.api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
