# nqs_sampler/ansatz/base.py
#
# Abstract base class for variational wavefunctions used by the sampler.
#
# The sampler never looks inside a wavefunction. It only needs amplitude
# ratios between the current configuration and a configuration differing by
# a few spin flips, plus a two-phase cache protocol:
#
#   reset_cache(spins)        -- rebuild the look-up table from scratch
#   log_ratio(spins, flips)   -- evaluate a move WITHOUT touching the cache
#   apply_flips(spins, flips) -- commit an accepted move to the cache
#
# A rejected move therefore costs nothing to roll back.

from abc import ABC, abstractmethod
import numpy as np


class Ansatz(ABC):
    """
    Abstract base class for cached neural quantum state ansatze.

    Subclasses provide:
      - log_psi(spins): log amplitude from scratch
      - log_ratio(spins, flips): log[psi(flipped)/psi(spins)] from the cache
      - reset_cache(spins) / apply_flips(spins, flips): cache maintenance
      - n_visible: number of physical spins
    """

    @abstractmethod
    def log_psi(self, spins: np.ndarray) -> complex:
        """
        Compute log(psi(spins)) without using the cache.

        Args:
            spins: array of shape (n_visible,) with values +1 or -1

        Returns:
            log(psi(spins)) as a complex scalar.
        """
        pass

    @abstractmethod
    def log_ratio(self, spins: np.ndarray, flips) -> complex:
        """
        Compute log[psi(spins with `flips` flipped) / psi(spins)].

        The cache must describe `spins`. Nothing is mutated.

        Args:
            spins: current configuration, shape (n_visible,)
            flips: sequence of site indices to flip (may be empty)

        Returns:
            Complex log ratio; exactly 0 for an empty flip set.
        """
        pass

    @abstractmethod
    def reset_cache(self, spins: np.ndarray) -> None:
        """Rebuild the look-up table for `spins`."""
        pass

    @abstractmethod
    def apply_flips(self, spins: np.ndarray, flips) -> None:
        """
        Update the look-up table for an accepted move.

        Must be called BEFORE the sites in `flips` are flipped in `spins`.
        """
        pass

    @property
    @abstractmethod
    def n_visible(self) -> int:
        """Number of visible units (= physical spins)."""
        pass

    def amplitude_ratio(self, spins: np.ndarray, flips) -> complex:
        """psi(flipped) / psi(spins) = exp(log_ratio)."""
        return np.exp(self.log_ratio(spins, flips))
