#!/usr/bin/env python3
"""Command-line interface for battery planning."""

import argparse
import logging
import os
import sys

from battery_planner.config import load_config
from battery_planner.errors import PlannerError, RunError, format_error_chain
from battery_planner.io.forecasts import load_forecasts
from battery_planner.io.plan import export_plan_csv, plan_to_frame, save_plan
from battery_planner.io.prices import load_day_ahead_prices
from battery_planner.models.battery import Battery
from battery_planner.models.planning import plan_battery_usage

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "BATTERY_PLANNER_LOG"


def configure_logging(level=None):
    """Configure the root logger from ``level`` or the environment (default INFO)."""
    level = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_planning(config_path, forecasts_path, prices_path, output_path, csv_path=None):
    """Load all inputs, plan the battery usage and save the plan.

    Returns:
        The plan entries

    Raises:
        RunError: naming the stage that failed, chained to the cause
    """
    try:
        config = load_config(config_path)
    except PlannerError as exc:
        raise RunError("Failed to load config") from exc
    logger.info("Loaded configuration: %s", config.as_dict())

    try:
        forecasts = load_forecasts(forecasts_path)
    except PlannerError as exc:
        raise RunError("Failed to load forecasts") from exc
    logger.info("Loaded forecasts data successfully.")

    battery = Battery.from_config(config.settings)

    try:
        prices, average_price = load_day_ahead_prices(prices_path)
    except PlannerError as exc:
        raise RunError("Failed to load day-ahead prices") from exc
    logger.info(
        "Loaded day-ahead prices successfully. Average price: %s", average_price
    )

    try:
        plan = plan_battery_usage(
            forecasts,
            prices,
            battery,
            config.settings.grid_limit,
            average_price,
            policy=config.policy,
        )
    except PlannerError as exc:
        raise RunError("Failed to plan battery usage") from exc

    try:
        save_plan(plan, output_path)
        if csv_path:
            export_plan_csv(plan, csv_path)
    except PlannerError as exc:
        raise RunError("Failed to save the plan") from exc

    return plan


def plan_command(args):
    """Run the planning pipeline and report a summary."""
    plan = run_planning(
        args.config, args.forecasts, args.prices, args.output, args.csv
    )

    df = plan_to_frame(plan)
    counts = df["action"].value_counts()
    print(
        f"Planned {len(df)} intervals | "
        f"discharge {counts.get('discharge', 0)} ({df['energy_from_battery'].sum():,.0f} Wh) | "
        f"charge {counts.get('charge', 0)} ({df['energy_to_battery'].sum():,.0f} Wh) | "
        f"hold {counts.get('hold', 0)}"
    )
    print(f"Battery planning complete! Check {args.output} for details.")


def config_command(args):
    """Display the current configuration."""
    try:
        config = load_config(args.config).as_dict()
    except PlannerError as exc:
        raise RunError("Failed to load config") from exc

    if args.section:
        # Display a specific section
        if args.section in config:
            print(f"Configuration for [{args.section}]:")
            for key, value in config[args.section].items():
                print(f"  {key} = {value}")
        else:
            print(f"Section [{args.section}] not found in configuration.")
            print("Available sections:")
            for section in config.keys():
                print(f"  {section}")
    else:
        print("Current configuration:")
        for section, section_config in config.items():
            print(f"[{section}]")
            for key, value in section_config.items():
                print(f"  {key} = {value}")
            print()


def build_parser():
    parser = argparse.ArgumentParser(
        description="Plan battery charging and discharging against a grid limit"
    )
    log_help = f"Logging level (default: ${LOG_LEVEL_ENV} or INFO)"
    parser.add_argument("--log-level", default=None, help=log_help)

    # SUPPRESS keeps a subcommand from resetting a level given before it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--log-level", default=argparse.SUPPRESS, help=log_help)

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    plan_parser = subparsers.add_parser(
        "plan", parents=[common], help="Plan battery usage for the forecast horizon"
    )
    plan_parser.add_argument(
        "--config",
        default=None,
        help="TOML or YAML configuration file (default: nearest config.toml)",
    )
    plan_parser.add_argument(
        "--forecasts",
        default="forecasts.json",
        help="JSON file with consumption forecasts",
    )
    plan_parser.add_argument(
        "--prices",
        default="day-ahead.json",
        help="JSON file with hourly day-ahead prices",
    )
    plan_parser.add_argument(
        "--output",
        default="output_plan.json",
        help="Path to save the plan",
    )
    plan_parser.add_argument(
        "--csv",
        help="Optional path to also export the plan as CSV",
    )
    plan_parser.set_defaults(func=plan_command)

    config_parser = subparsers.add_parser(
        "config", parents=[common], help="Display configuration settings"
    )
    config_parser.add_argument(
        "--config",
        default=None,
        help="TOML or YAML configuration file (default: nearest config.toml)",
    )
    config_parser.add_argument(
        "--section", help="Specific configuration section to display"
    )
    config_parser.set_defaults(func=config_command)

    return parser


def main(argv=None):
    """Entry point for the battery-planner command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.log_level)

    try:
        args.func(args)
    except PlannerError as exc:
        print(format_error_chain(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
