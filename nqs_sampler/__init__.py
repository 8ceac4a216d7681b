# nqs_sampler/__init__.py
#
# Monte Carlo sampler for pre-trained neural-network quantum states.
#
#   from nqs_sampler import RBM, Heisenberg1d, MetropolisSampler
#
#   rbm = RBM.from_file("weights/Heisenberg1d_40_1_1.wf")
#   sampler = MetropolisSampler(rbm, Heisenberg1d(rbm.n_visible), seed=1234)
#   result = sampler.run(n_sweeps=1e4)

from .ansatz import RBM
from .config import RunConfig, load_config
from .errors import (
    ConfigurationError,
    LatticeError,
    MalformedInputError,
    NqsError,
    StatesFileError,
    UnknownModelError,
    WeightFileError,
)
from .hamiltonians import Heisenberg1d, Heisenberg2d, IsingHamiltonian
from .sampler import MetropolisSampler
from .statistics import BinningResult, binning_analysis

__version__ = "0.1.0"

__all__ = [
    "RBM",
    "RunConfig",
    "load_config",
    "ConfigurationError",
    "LatticeError",
    "MalformedInputError",
    "NqsError",
    "StatesFileError",
    "UnknownModelError",
    "WeightFileError",
    "Heisenberg1d",
    "Heisenberg2d",
    "IsingHamiltonian",
    "MetropolisSampler",
    "BinningResult",
    "binning_analysis",
]
