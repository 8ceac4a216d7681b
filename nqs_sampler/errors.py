# nqs_sampler/errors.py
#
# Exception types raised at the boundaries of a sampling run.
#
# Every failure here is fatal for the run: the weight file is unreadable,
# the lattice does not fit the model, the run parameters are out of range,
# or the configuration output file cannot be opened. Nothing inside the
# Metropolis loop raises; these are checked before sampling starts.

class NqsError(Exception):
    """Base class for all errors raised by nqs_sampler."""


# ============================================================
# Malformed Input
# ============================================================

class MalformedInputError(NqsError, ValueError):
    """The inputs describe a system that cannot be sampled."""


class WeightFileError(MalformedInputError):
    """Weight file missing, unparsable, negative unit count, or truncated."""


class LatticeError(MalformedInputError):
    """Lattice size incompatible with the model or the sampling constraint."""


class UnknownModelError(MalformedInputError):
    """Hamiltonian selector does not name one of the implemented models."""


# ============================================================
# Invalid Run Configuration
# ============================================================

class ConfigurationError(NqsError, ValueError):
    """Run parameters (sweeps, thermalization, flips, config file) invalid."""


# ============================================================
# Resources
# ============================================================

class StatesFileError(NqsError, OSError):
    """The sampled-configuration output file could not be opened."""
