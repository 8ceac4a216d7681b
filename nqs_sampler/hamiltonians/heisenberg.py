# nqs_sampler/hamiltonians/heisenberg.py
#
# Antiferromagnetic Heisenberg models on a chain and on a square lattice.
#
#   H = J_z * sum_<ij> sigma_i^z sigma_j^z  -  sum_<ij> (sigma_i^x sigma_j^x + sigma_i^y sigma_j^y)
#
# The exchange term only acts on antiparallel bonds, where it swaps the two
# spins with matrix element -2. The sign is the one obtained after the Marshall
# rotation of one sublattice, so the trained wavefunction does not need to
# carry the Marshall sign itself.
#
# Both variants share the rule and differ only in the bond set.

import numpy as np

from .base import Connection, Hamiltonian
from .lattice import bonds_from_neighbors, chain_bonds, square_neighbors, square_side


EXCHANGE_MEL = -2.0


class _ExchangeHamiltonian(Hamiltonian):
    """Diagonal J_z * sum sigma_i sigma_j plus a -2 swap per antiparallel bond."""

    def __init__(self, n_spins: int, bonds: list, jz: float):
        super().__init__(n_spins, bonds)
        self.jz = jz

    @property
    def min_flips(self) -> int:
        return 2

    def find_connections(self, spins: np.ndarray) -> list:
        connections = [Connection((), complex(self.jz * self.bond_sum(spins)))]

        for i, j in self._bonds:
            if spins[i] != spins[j]:
                connections.append(Connection((i, j), complex(EXCHANGE_MEL)))

        return connections


class Heisenberg1d(_ExchangeHamiltonian):
    """
    1D Heisenberg chain, periodic by default.

    Bonds are (i, i+1) for i < N-1, plus (N-1, 0) with pbc.
    """

    def __init__(self, n_spins: int, jz: float = 1.0, pbc: bool = True,
                 verbose: bool = False):
        super().__init__(n_spins, chain_bonds(n_spins, pbc), jz)
        self.pbc = pbc
        if verbose:
            print(f"Using the 1d Heisenberg model with J_z = {jz}")

    def __repr__(self) -> str:
        return f"Heisenberg1d(n_spins={self.n_spins}, jz={self.jz}, pbc={self.pbc})"


class Heisenberg2d(_ExchangeHamiltonian):
    """
    Heisenberg model on an L x L square lattice, periodic by default.

    Raises LatticeError unless n_spins is a perfect square.
    """

    def __init__(self, n_spins: int, jz: float = 1.0, pbc: bool = True,
                 verbose: bool = False):
        neighbors = square_neighbors(n_spins, pbc)
        super().__init__(n_spins, bonds_from_neighbors(neighbors), jz)
        self.pbc = pbc
        self.side = square_side(n_spins)
        self.neighbors = neighbors
        if verbose:
            print(f"Using the 2d Heisenberg model with J_z = {jz}")

    def __repr__(self) -> str:
        return (
            f"Heisenberg2d(n_spins={self.n_spins}, side={self.side}, "
            f"jz={self.jz}, pbc={self.pbc})"
        )
