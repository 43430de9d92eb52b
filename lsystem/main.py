"""
L-system engine - command-line demonstration.

Main entry point: grows a character L-system and prints each generation.
"""

from __future__ import annotations
import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from lsystem.config import LSystemConfig, PRESET_CONFIGS
from lsystem.core import GrowthResult, show
from lsystem.storage import save_result


logger = logging.getLogger(__name__)


def run_lsystem(
    config: LSystemConfig,
    output_dir: Optional[Path] = None,
    name: str = "lsystem",
) -> GrowthResult:
    """
    Run an L-system described by a configuration.

    Args:
        config: L-system configuration
        output_dir: Directory for the result file
            (default: config.output.base_path; nothing saved if both are None)
        name: Base name of the result file

    Returns:
        GrowthResult of the run
    """
    system = config.to_engine()
    if output_dir is None:
        output_dir = config.output.base_path

    logger.info(f"Starting run: {name}")
    logger.info(f"Axiom: {config.axiom}, Rules: {len(config.rules)}, Generations: {config.generations}")

    result = system.run(
        max_generations=config.generations,
        store_history=True,
        max_length=config.max_length,
    )

    logger.info(
        f"Stopped after {result.stats.generations} generations ({result.stop_reason}), "
        f"final length {result.stats.final_length}"
    )

    if output_dir is not None:
        saved = result if config.output.save_history else replace(result, history=[])
        path = save_result(saved, Path(output_dir) / f"{name}.json", compress=config.output.compress)
        logger.info(f"Result saved to: {path}")

    return result


def format_generation(index: int, generation: List) -> str:
    """One output row: index, length and text of a generation."""
    return f"{index:3} ({len(generation):5})-> {show(generation)}"


def print_generations(result: GrowthResult, out: Optional[TextIO] = None) -> None:
    """Print the axiom followed by one row per generation (default: stdout)."""
    out = out if out is not None else sys.stdout
    if not result.history:
        return
    print(show(result.history[0]), file=out)
    for i, generation in enumerate(result.history[1:], start=1):
        print(format_generation(i, generation), file=out)


def parse_rule(text: str) -> Tuple[str, str]:
    """Parse 'A=AB' into ('A', 'AB')."""
    atom, sep, production = text.partition('=')
    if not sep or len(atom) != 1:
        raise ValueError(f"Rule must look like X=PRODUCTION, got {text!r}")
    return atom, production


def build_config(args: argparse.Namespace) -> LSystemConfig:
    """Combine preset, config file, and command-line overrides."""
    if args.config is not None:
        config = LSystemConfig.load(args.config)
    else:
        config = PRESET_CONFIGS[args.preset]()

    if args.rule:
        config.rules = dict(parse_rule(r) for r in args.rule)
    if args.axiom is not None:
        config.axiom = args.axiom
    if args.generations is not None:
        config.generations = args.generations
    if args.max_length is not None:
        config.max_length = args.max_length

    return config


def main(argv: Optional[List[str]] = None):
    """Command-line interface for growing L-systems."""
    parser = argparse.ArgumentParser(description="L-system generator")

    parser.add_argument('--preset', choices=sorted(PRESET_CONFIGS), default='algae',
                       help='Predefined system (default: algae)')
    parser.add_argument('--config', type=str, default=None,
                       help='JSON configuration file (overrides --preset)')
    parser.add_argument('--axiom', type=str, default=None,
                       help='Axiom string')
    parser.add_argument('--rule', action='append', default=[],
                       help='Production rule X=PRODUCTION (repeatable)')
    parser.add_argument('--generations', type=int, default=None,
                       help='Number of generations')
    parser.add_argument('--max-length', type=int, default=None,
                       help='Stop once a generation is longer than this')
    parser.add_argument('--output', type=str, default=None,
                       help="Directory to save the result JSON (overrides output.base_path)")
    parser.add_argument('--name', type=str, default='lsystem',
                       help='Result name (default: lsystem)')
    parser.add_argument('--visualize', action='store_true',
                       help="Plot generation lengths (requires an output directory)")
    parser.add_argument('--verbose', action='store_true',
                       help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = build_config(args)
        output_dir = Path(args.output) if args.output else config.output.base_path
        if args.visualize and output_dir is None:
            parser.error("--visualize requires --output or output.base_path")
        result = run_lsystem(config, output_dir=output_dir, name=args.name)
    except ValueError as e:
        parser.error(str(e))

    print_generations(result)

    if args.visualize:
        logger.info("Generating visualization...")
        import matplotlib.pyplot as plt
        from lsystem.visualization import plot_growth

        ax = plot_growth(result, title=args.name)
        viz_path = output_dir / f"{args.name}_growth.png"
        ax.figure.savefig(viz_path, dpi=150)
        plt.close(ax.figure)

        logger.info(f"Visualization saved to: {viz_path}")

    return result


if __name__ == "__main__":
    main()
