"""Command-line entry point for running a synthetic person session."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from .analysis import SessionArtifacts, run_session
from .config import DecayConfig, EngineConfig, NoiseConfig, SimulationConfig


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human-readable string."""
    if seconds < 60:
        return f"{seconds:.2f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.1f}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        return f"{hours}h {minutes}m"


def print_header(text: str, width: int = 70) -> None:
    """Print a formatted section header."""
    print("\n" + "=" * width)
    print(f"  {text}")
    print("=" * width)


def print_summary(artifacts: SessionArtifacts, elapsed: float, verbose: bool) -> None:
    print_header("Session Summary")

    print(f"\nRuntime: {format_duration(elapsed)}")
    print(f"Ticks: {len(artifacts.trajectory)}")

    final = artifacts.final_state.bio
    print("\n--- Final Bio State ---")
    for name, value in final.values().items():
        print(f"  {name + ':':<22}{value:.3f}")

    if artifacts.threshold_counts:
        print("\n--- Threshold Events ---")
        for key, count in sorted(artifacts.threshold_counts.items()):
            print(f"  {key + ':':<30}{count}")

    if verbose:
        print("\n--- Tagged Output ---")
        for line in artifacts.lines:
            print(line)


def parse_scenario(value: str) -> tuple[str, list[str]]:
    """Parse ``name=descriptor;descriptor`` into a scenario pair."""
    name, sep, rest = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"Scenario must look like name=descriptor;descriptor, got {value!r}")
    return name.strip(), [part for part in rest.split(";") if part.strip()]


def build_config(args: argparse.Namespace) -> SimulationConfig:
    engine = EngineConfig(
        decay=DecayConfig(multiplier=args.multiplier),
        noise=NoiseConfig(sigma=args.sigma),
    )
    return SimulationConfig(tick_seconds=args.dt, engine=engine)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run a synthetic person simulation with an offline scripted mind.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --ticks 600                        # Ten simulated minutes
  %(prog)s --ticks 300 --multiplier 1.0       # Real-time decay speed
  %(prog)s --input "~freezing cold room"      # Operator input before the first tick
  %(prog)s --scenario "winter=cold;no food"   # Persistent environment
  %(prog)s --output-dir results/ --verbose    # CSV, plot and tagged lines
        """,
    )
    parser.add_argument("--ticks", type=int, default=600, help="Number of ticks to run (default: 600).")
    parser.add_argument("--dt", type=float, default=1.0, help="Simulated seconds per tick (default: 1.0).")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the noise generator.")
    parser.add_argument(
        "--multiplier",
        type=float,
        default=5.0,
        help="Decay speed multiplier; 1.0 is real time (default: 5.0).",
    )
    parser.add_argument("--sigma", type=float, default=0.002, help="Per-second noise sigma (default: 0.002).")
    parser.add_argument(
        "--input",
        action="append",
        default=[],
        help="Operator line queued before the first tick; repeatable. *text* is an action, ~text the environment.",
    )
    parser.add_argument(
        "--scenario",
        type=parse_scenario,
        default=None,
        help="Persistent scenario as name=descriptor;descriptor.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory where the trajectory CSV, summary and plot are written.",
    )
    parser.add_argument("--no-plot", action="store_true", help="Skip the trajectory plot.")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output, debug logging and tagged per-tick lines.",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all output except errors and final results.",
    )
    args = parser.parse_args()

    if args.quiet:
        os.environ["PERSON_VERBOSITY"] = "0"
    elif args.verbose:
        os.environ["PERSON_VERBOSITY"] = "2"
    else:
        os.environ["PERSON_VERBOSITY"] = "1"

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if not args.quiet:
        print_header("Synthetic Person Session")
        print(f"\nTicks: {args.ticks} x {args.dt}s, decay multiplier {args.multiplier}")
        if args.output_dir is not None:
            print(f"Output directory: {args.output_dir.resolve()}")

    start_time = time.time()

    try:
        artifacts = run_session(
            args.ticks,
            config=build_config(args),
            seed=args.seed,
            inputs=args.input,
            scenario=args.scenario,
            output_dir=args.output_dir,
            plot=not args.no_plot,
        )
        elapsed = time.time() - start_time

        if args.quiet:
            print(" ".join(f"{name}={value:.3f}" for name, value in artifacts.final_state.bio.values().items()))
        else:
            print_summary(artifacts, elapsed, args.verbose)
            print("\n" + artifacts.summary)
            print_header("Session Complete")

    except ValueError as e:
        elapsed = time.time() - start_time
        print(
            f"\nError after {format_duration(elapsed)}:\n"
            f"Invalid configuration: {e}",
            file=sys.stderr
        )
        sys.exit(1)
    except Exception as e:
        elapsed = time.time() - start_time
        print(
            f"\nError after {format_duration(elapsed)}: {e}\n"
            f"For help, run: python -m person_sim --help",
            file=sys.stderr
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
