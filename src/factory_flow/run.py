"""Entry point for the factory-flow command line."""

import argparse
import logging
import sys

from factory_flow.cli.analyze import analyze as analyze_func
from factory_flow.cli.simulate import simulate as simulate_func
from factory_flow.errors import ConfigurationError
from factory_flow.loader import ConfigLoader


def _positive_float(value: str) -> float:
    """argparse type for strictly positive numbers."""
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return number


def _analyze_command(args: argparse.Namespace) -> None:
    """Handle 'analyze' subcommand."""
    analyze_func(run_name=args.run, config_dir=args.config)


def _simulate_command(args: argparse.Namespace) -> None:
    """Handle 'simulate' subcommand."""
    simulate_func(
        run_name=args.run,
        config_dir=args.config,
        speed=args.speed,
        frame_rate=args.frame_rate,
        max_duration_sec=args.max_duration,
        export=args.export,
        output_dir=args.output,
    )


def _equipment_command(args: argparse.Namespace) -> None:
    """Handle 'equipment' subcommand."""
    loader = ConfigLoader(args.config)
    specs = loader.list_equipment()
    if not specs:
        print(f"No equipment found in {args.config}/equipment")
        return
    print(f"{'ID':<20} {'NAME':<28} {'CYCLE (s)':>10} {'CAPACITY':>9}")
    for spec in specs:
        print(
            f"{spec.id:<20} {spec.name:<28} {spec.cycle_time:>10.1f} {spec.max_capacity:>9}"
        )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="factory-flow",
        description="Factory floor flow simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  analyze     Print live critical-path statistics for a layout
  simulate    Play units through a layout frame by frame
  equipment   List the equipment library

Examples:
  python -m factory_flow analyze --run machining_line
  python -m factory_flow simulate --run parallel_finishing --speed 10
  python -m factory_flow simulate --run machining_line --export
        """,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # === 'analyze' subcommand ===
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Print live statistics for a layout",
        description="Compute total cycle time, throughput and bottleneck.",
    )
    analyze_parser.add_argument("--run", required=True, help="Run config name (required)")
    analyze_parser.add_argument(
        "--config",
        default="config",
        help="Config directory path (default: config)",
    )
    analyze_parser.set_defaults(func=_analyze_command)

    # === 'simulate' subcommand ===
    simulate_parser = subparsers.add_parser(
        "simulate",
        help="Play units through a layout",
        description="Run a headless play-by-play simulation of a layout.",
    )
    simulate_parser.add_argument("--run", required=True, help="Run config name (required)")
    simulate_parser.add_argument(
        "--config",
        default="config",
        help="Config directory path (default: config)",
    )
    simulate_parser.add_argument(
        "--speed",
        type=_positive_float,
        default=None,
        help="Speed multiplier (default: from run config)",
    )
    simulate_parser.add_argument(
        "--frame-rate",
        type=_positive_float,
        default=None,
        help="Frames per second (default: from run config)",
    )
    simulate_parser.add_argument(
        "--max-duration",
        type=_positive_float,
        default=None,
        help="Frame clock limit in seconds (default: from run config)",
    )
    simulate_parser.add_argument(
        "--export",
        action="store_true",
        help="Export timeline and events to CSV files",
    )
    simulate_parser.add_argument(
        "--output",
        default="output",
        help="Output directory for CSV export (default: output)",
    )
    simulate_parser.set_defaults(func=_simulate_command)

    # === 'equipment' subcommand ===
    equipment_parser = subparsers.add_parser(
        "equipment",
        help="List the equipment library",
    )
    equipment_parser.add_argument(
        "--config",
        default="config",
        help="Config directory path (default: config)",
    )
    equipment_parser.set_defaults(func=_equipment_command)

    return parser


def main(argv=None) -> int:
    """CLI entry point with subcommands."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    try:
        args.func(args)
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
