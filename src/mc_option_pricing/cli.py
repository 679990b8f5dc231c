"""
Command-line pricing of a European option by Monte Carlo.

Usage:
    mc-price --strike 105 --spot 100 --vol 0.2 --rate 0.05 --expiry 1 --paths 100000
    mc-price --put --strategy monthly_averaged --validate

Exit codes:
    0 = Priced successfully
    1 = Invalid input or numeric failure
    2 = Priced, but a validation gate HALTed
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from mc_option_pricing.config.settings import SETTINGS
from mc_option_pricing.errors import PricingError
from mc_option_pricing.options.payoffs.base import OptionType, make_payoff
from mc_option_pricing.options.simulation.gaussian import SamplingMethod
from mc_option_pricing.options.simulation.gbm import ModelParameters, PathStrategy
from mc_option_pricing.options.simulation.monte_carlo import MonteCarloEngine
from mc_option_pricing.validation.gates import ValidationEngine

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with defaults matching the reference scenario."""
    parser = argparse.ArgumentParser(
        prog="mc-price",
        description="Monte Carlo price of a European option under Black-Scholes",
    )
    parser.add_argument("--expiry", type=float, default=1.0, help="Expiry in years (default: 1)")
    parser.add_argument("--strike", type=float, default=105.0, help="Strike (default: 105)")
    parser.add_argument("--spot", type=float, default=100.0, help="Spot (default: 100)")
    parser.add_argument("--vol", type=float, default=0.2, help="Volatility (default: 0.2)")
    parser.add_argument("--rate", type=float, default=0.05, help="Risk-free rate (default: 0.05)")
    parser.add_argument(
        "--paths",
        type=int,
        default=SETTINGS.simulation.n_paths,
        help=f"Number of paths (default: {SETTINGS.simulation.n_paths})",
    )
    parser.add_argument("--put", action="store_true", help="Price a put (default: call)")
    parser.add_argument(
        "--method",
        choices=[m.value for m in SamplingMethod],
        default=SETTINGS.simulation.sampling_method,
        help="Gaussian sampler",
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in PathStrategy],
        default=SETTINGS.simulation.path_strategy,
        help="Path generator",
    )
    parser.add_argument("--seed", type=int, default=SETTINGS.simulation.seed, help="Random seed")
    parser.add_argument("--validate", action="store_true", help="Run result validation gates")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one simulation and print the price and standard error."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        params = ModelParameters(
            spot=args.spot, volatility=args.vol, rate=args.rate, expiry=args.expiry
        )
        payoff = make_payoff(args.strike, OptionType.PUT if args.put else OptionType.CALL)
        engine = MonteCarloEngine(strategy=args.strategy, method=args.method, seed=args.seed)
        result = engine.run(payoff, params, args.paths)
    except PricingError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"The price of the option is ${result.price:.6f}")
    print(f"The standard error of the simulation is ${result.standard_error:.6f}")

    if args.validate:
        report = ValidationEngine().validate(result, payoff, params)
        for gate in report.results:
            print(f"  [{gate.status.value.upper()}] {gate.gate_name}: {gate.message}")
        if not report.passed:
            return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
