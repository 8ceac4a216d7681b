# nqs_sampler/runner.py
#
# Wires a RunConfig into objects and runs the sampler.
#
#   RunConfig -> RBM (weight file) + Hamiltonian (model, coupling)
#             -> MetropolisSampler -> BinningResult (+ optional files)

from typing import NamedTuple
import numpy as np

from .ansatz import RBM
from .config import MODELS, RunConfig
from .errors import UnknownModelError
from .hamiltonians import Heisenberg1d, Heisenberg2d, IsingHamiltonian
from .sampler import MetropolisSampler
from .statistics import BinningResult
from .utils import plot_energy_trace, save_energies


class RunResult(NamedTuple):
    """Everything a finished run produced."""
    result: BinningResult
    energies: np.ndarray
    acceptance_rate: float
    seed: int


def build_hamiltonian(model: str, n_spins: int, coupling: float,
                      pbc: bool = True, verbose: bool = False):
    """
    Construct the Hamiltonian named by `model`.

    Args:
        model:    'ising1d', 'heisenberg1d' or 'heisenberg2d' (case-insensitive).
        n_spins:  Number of sites.
        coupling: Transverse field h (Ising) or J_z (Heisenberg).
        pbc:      Periodic boundary conditions.

    Raises:
        UnknownModelError: for any other model name.
        LatticeError:      heisenberg2d with a non-square n_spins.
    """
    name = model.lower()
    if name == 'ising1d':
        return IsingHamiltonian(n_spins, h=coupling, pbc=pbc, verbose=verbose)
    elif name == 'heisenberg1d':
        return Heisenberg1d(n_spins, jz=coupling, pbc=pbc, verbose=verbose)
    elif name == 'heisenberg2d':
        return Heisenberg2d(n_spins, jz=coupling, pbc=pbc, verbose=verbose)
    else:
        raise UnknownModelError(
            f"Unknown model '{model}'. Choose one of: {', '.join(MODELS)}."
        )


def run(config: RunConfig, verbose: bool = True) -> RunResult:
    """
    Execute one sampling run described by `config`.

    Loads the wavefunction, builds the Hamiltonian on its visible units,
    samples, and writes the optional states/energies/plot outputs.
    """
    ansatz = RBM.from_file(config.weights, verbose=verbose)
    hamiltonian = build_hamiltonian(config.model, ansatz.n_visible, config.coupling,
                                    pbc=config.pbc, verbose=verbose)

    with MetropolisSampler(
        ansatz                 = ansatz,
        hamiltonian            = hamiltonian,
        seed                   = config.seed,
        conserve_magnetization = config.conserve_magnetization,
        verbose                = verbose,
        progress               = config.progress,
    ) as sampler:
        if config.states_file:
            sampler.set_states_file(config.states_file)

        result = sampler.run(
            n_sweeps     = config.n_sweeps,
            therm_factor = config.therm_factor,
            sweep_factor = config.sweep_factor,
            n_flips      = config.n_flips,
        )
        energies = sampler.energies
        acceptance = sampler.acceptance_rate
        seed = sampler.seed

    if config.energies_file:
        path = save_energies(config.energies_file, energies, result)
        if verbose:
            print(f"Energies saved: {path}")

    if config.plot_file:
        plot_energy_trace(energies, ansatz.n_visible, result, save_path=config.plot_file)

    return RunResult(result=result, energies=energies,
                     acceptance_rate=acceptance, seed=seed)
