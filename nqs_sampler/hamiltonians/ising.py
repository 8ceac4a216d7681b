# nqs_sampler/hamiltonians/ising.py
#
# 1D Transverse Field Ising Model (TFIM).
#
# H = -J * sum_i(sigma_i^z * sigma_{i+1}^z) - h * sum_i(sigma_i^x)
#
# Two competing terms:
#   - J term (diagonal): neighboring spins want to align (ferromagnetic)
#   - h term (off-diagonal): sigma_i^x flips spin i, with amplitude -h
#
# Quantum phase transition at h/J = 1.0.

import numpy as np

from .base import Connection, Hamiltonian
from .lattice import chain_bonds


class IsingHamiltonian(Hamiltonian):
    """
    1D Transverse Field Ising Model, periodic by default.

    H = -J * sum_<ij> sigma_i^z sigma_j^z - h * sum_i sigma_i^x

    Connected configurations of |sigma>: the diagonal term plus one
    single-site flip per site with matrix element -h. The flip list does not
    depend on sigma, so it is built once.
    """

    def __init__(self, n_spins: int, h: float = 1.0, J: float = 1.0,
                 pbc: bool = True, verbose: bool = False):
        """
        Args:
            n_spins: Number of spins in the chain.
            h:       Transverse field strength. Phase transition at h/J = 1.0.
            J:       Ferromagnetic coupling strength.
            pbc:     Include the bond between the last and first spin.
        """
        super().__init__(n_spins, chain_bonds(n_spins, pbc))
        self.h = h
        self.J = J
        self.pbc = pbc

        self._off_diagonal = [Connection((i,), complex(-h)) for i in range(n_spins)]

        if verbose:
            print(f"Using the 1d Transverse-field Ising model with h = {h}")

    @property
    def min_flips(self) -> int:
        return 1

    def find_connections(self, spins: np.ndarray) -> list:
        """
        Diagonal: -J * sum_<ij> sigma_i sigma_j.
        Off-diagonal: ((i,), -h) for every site i.
        """
        diagonal = Connection((), complex(-self.J * self.bond_sum(spins)))
        return [diagonal] + self._off_diagonal

    def __repr__(self) -> str:
        return f"IsingHamiltonian(n_spins={self.n_spins}, h={self.h}, J={self.J}, pbc={self.pbc})"
