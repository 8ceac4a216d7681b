# nqs_sampler/hamiltonians/base.py
#
# Abstract base class for lattice spin Hamiltonians.
#
# A Hamiltonian is queried through one capability: given a configuration
# |sigma>, list every |sigma'> with <sigma'|H|sigma> != 0. Each |sigma'> is
# encoded as the set of sites to flip in sigma, next to its matrix element.
# Entry 0 is always the diagonal term (no flips). The sampler turns this list
# into the local energy
#
#   E_loc(sigma) = sum_k  psi(sigma'_k)/psi(sigma) * mel_k
#
# without knowing which model it is sampling.

from abc import ABC, abstractmethod
from typing import NamedTuple, Tuple
import numpy as np


class Connection(NamedTuple):
    """One connected configuration: sites to flip and the matrix element."""
    flips: Tuple[int, ...]
    mel: complex


class Hamiltonian(ABC):
    """
    Abstract base class for Hamiltonians on a fixed bond set.

    Subclasses must implement `find_connections` and `min_flips`. Couplings
    and topology are fixed at construction; queries never mutate the object.
    """

    def __init__(self, n_spins: int, bonds: list):
        self._n_spins = n_spins
        self._bonds = [tuple(bond) for bond in bonds]

    @abstractmethod
    def find_connections(self, spins: np.ndarray) -> list:
        """
        Enumerate configurations connected to `spins` by the Hamiltonian.

        Args:
            spins: numpy array of shape (n_spins,), values in {+1, -1}

        Returns:
            List of Connection; index 0 is the diagonal (empty flips).
        """
        pass

    @property
    @abstractmethod
    def min_flips(self) -> int:
        """Number of sites flipped by one off-diagonal term (1 or 2)."""
        pass

    @property
    def n_spins(self) -> int:
        return self._n_spins

    @property
    def bonds(self) -> list:
        """Nearest-neighbour bonds (i, j) the interaction runs over."""
        return list(self._bonds)

    def bond_sum(self, spins: np.ndarray) -> float:
        """sum over bonds of sigma_i * sigma_j."""
        return float(sum(int(spins[i]) * int(spins[j]) for i, j in self._bonds))

    def diagonal_energy(self, spins: np.ndarray) -> float:
        """The classical (diagonal) energy <sigma|H|sigma>."""
        return float(np.real(self.find_connections(spins)[0].mel))
