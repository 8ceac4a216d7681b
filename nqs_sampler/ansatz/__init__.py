# nqs_sampler/ansatz/__init__.py
#
# Exposes the wavefunction classes at the package level so you can write:
#
#   from nqs_sampler.ansatz import RBM

from .base import Ansatz
from .rbm import RBM, lncosh
from .weights import load_weights, parse_complex

__all__ = ["Ansatz", "RBM", "lncosh", "load_weights", "parse_complex"]
