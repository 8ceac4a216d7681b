#!/usr/bin/env python3
# scripts/run_sampler.py
#
# ============================================================
# CLI ENTRY POINT: sample a trained NQS and estimate its energy
# ============================================================
#
# USAGE:
#   python scripts/run_sampler.py configs/heisenberg1d.yaml
#   python scripts/run_sampler.py --weights Ising1d_40_1.wf --model ising1d \
#       --coupling 1.0 --nsweeps 1e4 --seed 1234
#   python scripts/run_sampler.py configs/heisenberg1d.yaml --filestates states.txt
#
# WHAT THIS SCRIPT DOES:
#   1. Loads the YAML config (if given) and applies command-line overrides
#   2. Loads the RBM weights and builds the requested Hamiltonian
#   3. Thermalizes, samples, and measures the local energy every sweep
#   4. Prints the binned energy per site, its error and the autocorrelation time
#   5. Optionally saves the sampled states, the energy stream and a trace plot
#
# ============================================================

import argparse
import sys
import os

# Add project root to path so the package imports without installation
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nqs_sampler.config import MODELS, RunConfig, load_config
from nqs_sampler.errors import NqsError
from nqs_sampler.runner import run


# ============================================================
# SECTION: Argument Parsing
# ============================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Monte Carlo energy of a trained neural-network quantum state.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_sampler.py configs/heisenberg1d.yaml
  python scripts/run_sampler.py --weights Ising1d_40_1.wf --model ising1d --coupling 1.0
        """
    )
    parser.add_argument('config', nargs='?', default=None,
                        help='YAML run configuration (flags below override it)')
    parser.add_argument('--weights', '--filename', dest='weights',
                        help='file containing the neural-network weights')
    parser.add_argument('--model', choices=MODELS,
                        help='Hamiltonian to measure')
    parser.add_argument('--coupling', type=float,
                        help='transverse field h (ising1d) or J_z (heisenberg)')
    parser.add_argument('--nsweeps', dest='n_sweeps', type=float,
                        help='number of Monte Carlo sweeps (default 1.0e4)')
    parser.add_argument('--seed', type=int,
                        help='random seed; negative uses the clock (default -1)')
    parser.add_argument('--filestates', dest='states_file',
                        help='file to print the sampled configurations to')
    parser.add_argument('--energies', dest='energies_file',
                        help='.npz file for the local-energy stream')
    parser.add_argument('--plot', dest='plot_file',
                        help='image file for the energy trace plot')
    parser.add_argument('--no-progress', dest='progress', action='store_false',
                        default=None, help='disable the progress bar')
    return parser.parse_args(argv)


def resolve_config(args) -> RunConfig:
    """Merge the YAML file (if any) with the command-line overrides."""
    overrides = {
        key: value for key, value in vars(args).items()
        if key != 'config' and value is not None
    }
    if args.config is None:
        return RunConfig.from_dict(overrides)

    base = load_config(args.config)
    merged = {**vars(base), **overrides}
    return RunConfig.from_dict(merged)


# ============================================================
# SECTION: Main Entry Point
# ============================================================

def main(argv=None) -> int:
    args = parse_args(argv)

    print("=" * 62)
    print("  Neural-network quantum states sampler")
    print("=" * 62)

    try:
        config = resolve_config(args)
        outcome = run(config)
    except NqsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"\nSeed: {outcome.seed}  |  acceptance rate: {outcome.acceptance_rate:.3f}")
    print("Done.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
