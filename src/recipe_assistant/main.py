#!/usr/bin/env python3
"""
Command line entry point for the Recipe Assistant.

Commands:
    parse     Parse recipe text (file or stdin) into a recipe record
    prices    Estimate prices for ingredient lines
    generate  Generate a meal recipe with the LLM
    serve     Run the REST API
"""

import argparse
import json
import logging
import sys

from .config import AppConfig
from .data.database import DatabaseInterface
from .llm_provider import get_llm_provider
from .price_estimator import OpenFoodFactsClient, PriceEstimator, estimate_total
from .recipe_generator import MEAL_TYPES, InvalidMealTypeError, RecipeGenerationError, RecipeGenerator
from .recipe_parser import parse_recipe_from_ai

logger = logging.getLogger(__name__)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def run_parse(args, config: AppConfig) -> int:
    if args.file and args.file != "-":
        with open(args.file, encoding="utf-8") as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    record = parse_recipe_from_ai(text)
    if args.save:
        record = DatabaseInterface(db_dir=config.db_dir).create_recipe(record)

    _print_json(record.to_dict())
    return 0


def run_prices(args, config: AppConfig) -> int:
    currency = (args.currency or config.price_currency).upper()
    estimator = PriceEstimator(
        client=OpenFoodFactsClient(timeout=config.http_timeout),
        currency=currency,
        batch_size=config.price_batch_size,
        batch_delay=config.price_batch_delay,
    )

    estimates = estimator.estimate_ingredients_prices(args.ingredients, currency)
    _print_json({
        "estimates": [e.to_dict() for e in estimates],
        "total": estimate_total(estimates, currency),
    })
    return 0


def run_generate(args, config: AppConfig) -> int:
    llm = get_llm_provider(
        api_key=config.anthropic_api_key,
        use_null=config.use_null_llm,
        model=config.llm_model,
    )
    db = None if args.no_save else DatabaseInterface(db_dir=config.db_dir)
    generator = RecipeGenerator(llm, db=db, timeout=config.llm_timeout)

    try:
        recipe = generator.generate_meal_recipe(
            meal_type=args.meal_type,
            dietary_restrictions=args.dietary,
            preferences=args.preferences,
        )
    except (InvalidMealTypeError, RecipeGenerationError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    _print_json(recipe.to_dict())
    return 0


def run_serve(args, config: AppConfig) -> int:
    import uvicorn

    uvicorn.run(
        "recipe_assistant.api.main:app",
        host=args.host or config.host,
        port=args.port or config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
    return 0


COMMANDS = {
    "parse": run_parse,
    "prices": run_prices,
    "generate": run_generate,
    "serve": run_serve,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recipe Assistant")
    parser.add_argument(
        "--db-dir",
        type=str,
        help="Database directory (default: RECIPE_DB_DIR or data)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse recipe text into a record")
    parse_cmd.add_argument("file", nargs="?", help="Text file to parse (default: stdin)")
    parse_cmd.add_argument("--save", action="store_true", help="Store the parsed recipe")

    prices_cmd = subparsers.add_parser("prices", help="Estimate ingredient prices")
    prices_cmd.add_argument("ingredients", nargs="+", help="Ingredient lines, e.g. '500g pasta'")
    prices_cmd.add_argument("--currency", type=str, help="Currency code (default: PRICE_CURRENCY)")

    generate_cmd = subparsers.add_parser("generate", help="Generate a meal recipe")
    generate_cmd.add_argument("--meal-type", choices=MEAL_TYPES, default="dinner")
    generate_cmd.add_argument(
        "--dietary",
        action="append",
        help="Dietary restriction (repeatable)",
    )
    generate_cmd.add_argument("--preferences", type=str, help="Free-text preferences")
    generate_cmd.add_argument("--no-save", action="store_true", help="Do not store the recipe")

    serve_cmd = subparsers.add_parser("serve", help="Run the REST API")
    serve_cmd.add_argument("--host", type=str)
    serve_cmd.add_argument("--port", type=int)

    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    config = AppConfig.from_env()
    if args.db_dir:
        config.db_dir = args.db_dir

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or config.debug) else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.debug(f"Running command: {args.command}")
    return COMMANDS[args.command](args, config)


if __name__ == "__main__":
    sys.exit(main())
