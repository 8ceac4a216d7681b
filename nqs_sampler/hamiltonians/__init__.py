# nqs_sampler/hamiltonians/__init__.py
#
# Exposes the Hamiltonian classes at the package level so you can write:
#
#   from nqs_sampler.hamiltonians import IsingHamiltonian, Heisenberg1d, Heisenberg2d

from .base import Connection, Hamiltonian
from .ising import IsingHamiltonian
from .heisenberg import Heisenberg1d, Heisenberg2d

__all__ = [
    "Connection",
    "Hamiltonian",
    "IsingHamiltonian",
    "Heisenberg1d",
    "Heisenberg2d",
]
