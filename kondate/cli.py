# -*- coding: utf-8 -*-
"""
Command-line access to the meal planner.

Usage:
    python -m kondate.cli generate 鶏肉 玉ねぎ 人参
    python -m kondate.cli generate --image fridge.jpg [--route image_structured]
    python -m kondate.cli routes
    python -m kondate.cli serve
"""

from __future__ import annotations

import argparse
import json
import logging
import mimetypes
import sys
from pathlib import Path

from .config import settings
from .meal_plan.errors import MealPlanGenerationError, MealPlanInputError
from .meal_plan.prompt import ImagePayload
from .meal_plan.service import HYBRID, IMAGE_CHAT, ROUTES, TEXT_CHAT, generate_meal_plan


def _default_route(has_ingredients: bool, has_image: bool):
    if has_ingredients and has_image:
        return HYBRID
    return IMAGE_CHAT if has_image else TEXT_CHAT


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate one meal plan and print it as JSON."""
    image = None
    if args.image:
        path = Path(args.image)
        if not path.is_file():
            print(f"Error: Image not found: {path}", file=sys.stderr)
            return 2
        mime, _ = mimetypes.guess_type(path.name)
        image = ImagePayload(data=path.read_bytes(), mime_type=mime or "image/jpeg")

    route = ROUTES[args.route] if args.route else _default_route(bool(args.ingredients), image is not None)

    try:
        plan = generate_meal_plan(route, ingredients=args.ingredients, image=image)
    except MealPlanInputError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except MealPlanGenerationError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    print(json.dumps(plan.to_payload(), ensure_ascii=False, indent=2))
    return 0


def cmd_routes(args: argparse.Namespace) -> int:
    """List generation routes and their configured models."""
    for route in ROUTES.values():
        mode = "structured" if route.structured else "chat"
        print(f"{route.name:<18} {route.provider:<7} {mode:<10} {route.model}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("kondate.api:app", host=args.host, port=args.port, reload=False)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="AI meal planner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    generate_parser = subparsers.add_parser("generate", help="Generate a meal plan")
    generate_parser.add_argument("ingredients", nargs="*", help="Available ingredients")
    generate_parser.add_argument("--image", help="Photo of the available ingredients")
    generate_parser.add_argument(
        "--route",
        choices=sorted(ROUTES),
        help="Generation route (default: chosen from the inputs)",
    )

    subparsers.add_parser("routes", help="Show generation routes")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=settings.host)
    serve_parser.add_argument("--port", type=int, default=settings.port)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "generate": cmd_generate,
        "routes": cmd_routes,
        "serve": cmd_serve,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
