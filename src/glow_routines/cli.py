"""CLI entry point for inspecting a store export: today view, conflicts, schedules."""

from __future__ import annotations

import argparse
import json
import logging
from datetime import date
from typing import Any, Sequence

from .config import Config
from .conflicts import ConflictDetector
from .date_math import parse_date
from .logging import setup_logging
from .models import Product
from .products import active_products, expiry_info, inactive_products
from .routine import finish_routine, get_steps_for_date, routine_progress
from .schedule import active_dates, describe_schedule, is_product_active_on
from .snapshot import read_snapshot

logger = logging.getLogger(__name__)


def _date_arg(raw: str) -> date:
    try:
        return parse_date(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="glow-routines",
        description="Evaluate routine schedules and ingredient conflicts over a JSON store export.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    today = subparsers.add_parser("today", help="Steps due on a date, with completion state and progress.")
    today.add_argument("--data", required=True, help="Path to the JSON store export.")
    today.add_argument("--date", type=_date_arg, default=None, help="YYYY-MM-DD (defaults to today).")
    today.add_argument(
        "--time-of-day",
        choices=("morning", "evening"),
        default=None,
        help="Restrict to one routine window. Defaults to both windows.",
    )

    conflicts = subparsers.add_parser("conflicts", help="Ingredient conflicts among in-use products.")
    conflicts.add_argument("--data", required=True, help="Path to the JSON store export.")
    conflicts.add_argument(
        "--product-id",
        default=None,
        help="Only conflicts involving this product (included even when stopped).",
    )

    schedule = subparsers.add_parser("schedule", help="Dates on which a step is due.")
    schedule.add_argument("--data", required=True, help="Path to the JSON store export.")
    schedule.add_argument("--step-id", required=True, help="Routine step id.")
    schedule.add_argument("--start", type=_date_arg, default=None, help="First date (defaults to today).")
    schedule.add_argument("--days", type=int, default=14, help="Number of days to evaluate.")

    products = subparsers.add_parser("products", help="In-use and shelved products with schedule and PAO status.")
    products.add_argument("--data", required=True, help="Path to the JSON store export.")
    products.add_argument("--date", type=_date_arg, default=None, help="YYYY-MM-DD (defaults to today).")

    finish = subparsers.add_parser("finish", help="Plan marking the remaining steps of a window skipped.")
    finish.add_argument("--data", required=True, help="Path to the JSON store export.")
    finish.add_argument("--time-of-day", required=True, choices=("morning", "evening"))
    finish.add_argument("--date", type=_date_arg, default=None, help="YYYY-MM-DD (defaults to today).")
    return parser


def _run(args: argparse.Namespace, config: Config) -> dict[str, Any]:
    snapshot = read_snapshot(args.data)
    today = date.today()

    if args.command == "today":
        target = args.date or today
        steps = get_steps_for_date(snapshot.steps, snapshot.completions, target, args.time_of_day)
        progress = routine_progress(steps)
        return {
            "date": target.isoformat(),
            "time_of_day": args.time_of_day,
            "steps": [
                {
                    "id": step.id,
                    "name": step.step.name,
                    "category": step.step.category.value,
                    "time_of_day": step.step.time_of_day.value,
                    "order": step.order,
                    "status": step.status,
                    "product_used": step.product_used,
                }
                for step in steps
            ],
            "progress": {
                "completed": progress.completed,
                "skipped": progress.skipped,
                "total": progress.total,
                "fully_actioned": progress.fully_actioned,
            },
        }

    if args.command == "conflicts":
        detector = ConflictDetector(config.conflict_rules())
        if args.product_id:
            product = snapshot.product(args.product_id)
            if product is None:
                raise SystemExit(f"Unknown product id: {args.product_id}")
            found = detector.detect_for_product(product, snapshot.products)
        else:
            found = detector.detect(snapshot.products)
        return {"conflicts": [conflict.to_dict() for conflict in found]}

    if args.command == "schedule":
        step = snapshot.step(args.step_id)
        if step is None:
            raise SystemExit(f"Unknown step id: {args.step_id}")
        start = args.start or today
        return {
            "step_id": step.id,
            "schedule": describe_schedule(step.schedule),
            "start": start.isoformat(),
            "days": args.days,
            "active_dates": [day.isoformat() for day in active_dates(step.schedule, start, args.days)],
        }

    if args.command == "products":
        target = args.date or today

        def _describe(product: Product) -> dict[str, Any]:
            expiry = expiry_info(product, target, warning_days=config.pao_warning_days)
            return {
                "id": product.id,
                "name": product.name,
                "time_of_day": product.time_of_day.value,
                "schedule": describe_schedule(product.schedule),
                "due": is_product_active_on(product, target),
                "expiry": None if expiry is None else {"label": expiry.label, "warning": expiry.is_warning},
            }

        return {
            "active": [_describe(product) for product in active_products(snapshot.products)],
            "inactive": [_describe(product) for product in inactive_products(snapshot.products)],
        }

    plan = finish_routine(snapshot.steps, snapshot.completions, args.time_of_day, args.date or today)
    return {"skipped": len(plan.upserts), "plan": plan.to_dict()}


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    config = Config.from_env()
    setup_logging(config.log_format, config.log_level)
    logger.debug("Running %s", args.command, extra={"glow_command": args.command})

    result = _run(args, config)
    print(json.dumps(result, indent=2, sort_keys=True))
    raise SystemExit(0)


if __name__ == "__main__":
    main()
