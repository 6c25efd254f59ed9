#!/usr/bin/env python3
"""
hydrotime Command Line Interface

Main entry point for the `hydrotime` command.

Usage:
    hydrotime onboard --height 175 --weight 70
    hydrotime drink --volume 250            # manual log
    hydrotime respond --done                # answered a reminder, drank
    hydrotime respond --not-yet
    hydrotime predict                       # one prediction for right now
    hydrotime forecast --count 12           # plan the next reminders
    hydrotime goal                          # today's adjusted goal
    hydrotime stats
    hydrotime weights [--reset]
    hydrotime --version

Every command prints JSON. Exit code is 1 on error.
"""

import argparse
import json
import sys

from hydrotime import __version__
from hydrotime.config_models import load_config
from hydrotime.learning.models import DEFAULT_WEIGHTS
from hydrotime.logging_config import setup_logging
from hydrotime.mobile.scheduler import InMemoryNotifier
from hydrotime.service import HydrationError, HydrationService
from hydrotime.storage import SQLiteStore, load_weights, save_weights


def _build_service(args) -> HydrationService:
    config = load_config(args.config)
    db_path = args.db or config.storage.resolve_db_path()
    return HydrationService(SQLiteStore(db_path), InMemoryNotifier(), config=config)


def _print(result: dict) -> None:
    print(json.dumps(result, indent=2, default=str))


def cmd_onboard(service: HydrationService, args) -> dict:
    profile = service.complete_onboarding(height=args.height, weight=args.weight)
    return {"success": True, "profile": profile}


def cmd_drink(service: HydrationService, args) -> dict:
    log = service.log_drink(args.volume, manual_log=not args.auto)
    return {"success": True, "log": log.to_dict()}


def cmd_respond(service: HydrationService, args) -> dict:
    response = service.record_response(responded=True, done=args.done)
    return {
        "success": True,
        "response": response.to_dict(),
        "scheduled": [r.to_dict() for r in service.scheduled],
    }


def cmd_predict(service: HydrationService, args) -> dict:
    return {"success": True, "prediction": service.predict().to_dict()}


def cmd_forecast(service: HydrationService, args) -> dict:
    entries = service.reschedule(count=args.count)
    return {
        "success": True,
        "forecast": [e.to_dict() for e in entries],
        "horizon_ms": sum(e.delay_ms for e in entries),
        "scheduled": [r.to_dict() for r in service.scheduled],
    }


def cmd_goal(service: HydrationService, args) -> dict:
    return {"success": True, "daily_goal": service.refresh_goal()}


def cmd_stats(service: HydrationService, args) -> dict:
    return {"success": True, "stats": service.stats()}


def cmd_weights(service: HydrationService, args) -> dict:
    if args.reset:
        save_weights(service.store, DEFAULT_WEIGHTS)
    return {"success": True, "weights": load_weights(service.store).to_dict()}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="hydrotime",
        description="hydrotime - adaptive hydration reminders",
    )
    parser.add_argument("--version", "-V", action="store_true", help="Show version and exit")
    parser.add_argument("--db", default=None, help="SQLite database path (default: from config)")
    parser.add_argument("--config", default=None, help="YAML config path (default: args/hydration.yaml)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    onboard_parser = subparsers.add_parser("onboard", help="Create the profile and base goal")
    onboard_parser.add_argument("--height", type=float, required=True, help="Height in cm")
    onboard_parser.add_argument("--weight", type=float, required=True, help="Weight in kg")
    onboard_parser.set_defaults(func=cmd_onboard)

    drink_parser = subparsers.add_parser("drink", help="Log a drink")
    drink_parser.add_argument("--volume", type=float, required=True, help="Volume in ml")
    drink_parser.add_argument(
        "--auto", action="store_true", help="Drink was prompted by a reminder, not logged by hand"
    )
    drink_parser.set_defaults(func=cmd_drink)

    respond_parser = subparsers.add_parser("respond", help="Answer a reminder")
    answer = respond_parser.add_mutually_exclusive_group(required=True)
    answer.add_argument("--done", dest="done", action="store_true", help="Drank water")
    answer.add_argument("--not-yet", dest="done", action="store_false", help="Not yet")
    respond_parser.set_defaults(func=cmd_respond)

    predict_parser = subparsers.add_parser("predict", help="Predict for the current moment")
    predict_parser.set_defaults(func=cmd_predict)

    forecast_parser = subparsers.add_parser("forecast", help="Plan and schedule upcoming reminders")
    forecast_parser.add_argument(
        "--count", type=int, default=None, help="Reminders to plan (default: from config)"
    )
    forecast_parser.set_defaults(func=cmd_forecast)

    goal_parser = subparsers.add_parser("goal", help="Today's adjusted goal in ml")
    goal_parser.set_defaults(func=cmd_goal)

    stats_parser = subparsers.add_parser("stats", help="Progress, streak and goal")
    stats_parser.set_defaults(func=cmd_stats)

    weights_parser = subparsers.add_parser("weights", help="Show the learned weights")
    weights_parser.add_argument("--reset", action="store_true", help="Restore default weights")
    weights_parser.set_defaults(func=cmd_weights)

    args = parser.parse_args(argv)

    if args.version:
        print(f"hydrotime {__version__}")
        return 0

    if not args.command:
        parser.print_help()
        return 0

    setup_logging()
    service = _build_service(args)

    try:
        result = args.func(service, args)
    except (HydrationError, ValueError) as e:
        result = {"success": False, "error": str(e)}

    _print(result)
    return 0 if result.get("success") else 1


if __name__ == "__main__":
    sys.exit(main())
