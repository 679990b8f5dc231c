#!/usr/bin/env python3
"""
Monte Carlo Convergence Study.

Prices the reference European call (S=100, K=105, σ=20%, r=5%, T=1) with
each Gaussian sampler and shows how the standard error shrinks with the
number of paths:

    SE ~ σ_payoff / √N   ->   4x the paths, half the error

Key Concepts:
- Gaussian sampler: summation (CLT), polar Box-Muller, cosine Box-Muller
- Direct terminal vs monthly-averaged path generation
- Convergence rate: fitted slope of log(SE) vs log(N), theory -0.5

Usage:
    python examples/01_convergence_study.py          # Full study
    python examples/01_convergence_study.py --ci     # CI mode (fewer paths)
"""

import argparse

from mc_option_pricing import (
    CallPayoff,
    ModelParameters,
    MonteCarloEngine,
    PathStrategy,
    SamplingMethod,
    black_scholes_price,
    convergence_analysis,
)


def compare_samplers(params: ModelParameters, payoff: CallPayoff, n_paths: int, seed: int) -> None:
    """Print one row per sampler and path strategy."""
    print(f"{'sampler':<10} {'strategy':<18} {'price':>10} {'std error':>10}")
    print("-" * 51)
    for method in SamplingMethod:
        for strategy in PathStrategy:
            engine = MonteCarloEngine(method=method, strategy=strategy, seed=seed)
            result = engine.run(payoff, params, n_paths)
            print(
                f"{method.value:<10} {strategy.value:<18} "
                f"{result.price:>10.4f} {result.standard_error:>10.4f}"
            )


def main() -> None:
    parser = argparse.ArgumentParser(description="Monte Carlo convergence study")
    parser.add_argument("--ci", action="store_true", help="Run with fewer paths")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    params = ModelParameters(spot=100.0, volatility=0.20, rate=0.05, expiry=1.0)
    payoff = CallPayoff(strike=105.0)
    analytical = black_scholes_price(
        params.spot, payoff.strike, params.rate, 0.0, params.volatility, params.expiry,
        payoff.option_type,
    )

    path_counts = (1_000, 4_000, 16_000) if args.ci else (1_000, 4_000, 16_000, 64_000, 256_000)
    sampler_paths = 5_000 if args.ci else 50_000

    print("=" * 60)
    print("EUROPEAN CALL: S=100, K=105, σ=20%, r=5%, T=1")
    print(f"Black-Scholes price: {analytical:.4f}")
    print("=" * 60)

    print(f"\nSamplers at N={sampler_paths:,}")
    compare_samplers(params, payoff, sampler_paths, args.seed)

    print("\nConvergence (polar, direct terminal)")
    df = convergence_analysis(params, payoff, analytical, path_counts=path_counts, seed=args.seed)
    print(df.to_string(index=False, float_format=lambda x: f"{x:.4f}"))
    print(f"\nFitted convergence rate: {df.attrs['convergence_rate']:.3f} (theory: -0.500)")


if __name__ == "__main__":
    main()
