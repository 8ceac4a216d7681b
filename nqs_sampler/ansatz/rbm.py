# nqs_sampler/ansatz/rbm.py
#
# Restricted Boltzmann Machine (RBM) wavefunction with a look-up table.
#
# The RBM is the first NQS architecture from Carleo & Troyer (2017). It has
# N visible units (physical spins) and M hidden units. Summing the hidden
# units out analytically gives
#
#   log psi(sigma) = sum_i a_i*sigma_i + sum_j lncosh(theta_j)
#   theta_j        = b_j + sum_i sigma_i*W[i,j]
#
# All parameters are complex, so psi carries a phase as well as a modulus.
#
# The hidden pre-activations theta are kept as a look-up table for the
# current configuration. Flipping a set of spins changes theta by
# -2*sum_f sigma_f*W[f,:], so an amplitude ratio costs O(n_flips * M)
# instead of the O(N * M) of a full evaluation.

import numpy as np

from .base import Ansatz
from .weights import load_weights


LNCOSH_CUTOFF = 12.0
LOG2 = np.log(2.0)


def lncosh(x):
    """
    Numerically safe log(cosh(x)) for complex x (scalar or array).

    Real part: log(cosh(|Re x|)) up to |Re x| = 12, then the asymptote
    |Re x| - log(2), so cosh never overflows. The imaginary part of x enters
    through log(cos(Im x) + i*tanh(Re x)*sin(Im x)), which is exact since
        cosh(xr + i*xi) = cosh(xr) * (cos(xi) + i*tanh(xr)*sin(xi)).
    """
    x = np.asarray(x, dtype=complex)
    xr = x.real
    xi = x.imag
    xp = np.abs(xr)

    real_part = np.where(
        xp <= LNCOSH_CUTOFF,
        np.log(np.cosh(np.minimum(xp, LNCOSH_CUTOFF))),
        xp - LOG2,
    )
    return real_part + np.log(np.cos(xi) + 1j * np.tanh(xr) * np.sin(xi))


class RBM(Ansatz):
    """
    Complex-valued Restricted Boltzmann Machine with cached theta.

    Parameters:
        a (N,):    visible biases
        b (M,):    hidden biases
        W (N, M):  weight matrix connecting visible to hidden units

    Total parameters: N + M + N*M. Parameters are fixed after construction.
    """

    def __init__(self, a: np.ndarray, b: np.ndarray, W: np.ndarray):
        """
        Args:
            a: visible biases, shape (N,)
            b: hidden biases, shape (M,)
            W: weights, shape (N, M)
        """
        self.a = np.asarray(a, dtype=complex)
        self.b = np.asarray(b, dtype=complex)
        self.W = np.asarray(W, dtype=complex)

        if self.W.shape != (len(self.a), len(self.b)):
            raise ValueError(
                f"W shape {self.W.shape} does not match "
                f"(n_visible, n_hidden) = ({len(self.a)}, {len(self.b)})"
            )

        self._theta = None

    @classmethod
    def from_file(cls, path: str, verbose: bool = True) -> "RBM":
        """Load a trained RBM from a weight file (see ansatz/weights.py)."""
        rbm = cls(*load_weights(path))
        if verbose:
            print(f"NQS loaded from file {path}")
            print(f"  N_visible = {rbm.n_visible}  N_hidden = {rbm.n_hidden}")
        return rbm

    @classmethod
    def random(cls, n_visible: int, alpha: int = 1, seed: int = 42,
               scale: float = 0.01) -> "RBM":
        """
        RBM with small complex Gaussian parameters and M = alpha * n_visible.

        A small scale keeps the wavefunction close to uniform.
        """
        rng = np.random.default_rng(seed)
        n_hidden = alpha * n_visible

        def draw(*shape):
            return rng.normal(0, scale, size=shape) + 1j * rng.normal(0, scale, size=shape)

        return cls(draw(n_visible), draw(n_hidden), draw(n_visible, n_hidden))

    # ------------------------------------------------------------------
    # Amplitudes
    # ------------------------------------------------------------------

    def theta(self, spins: np.ndarray) -> np.ndarray:
        """Hidden pre-activations b + W^T sigma, computed from scratch."""
        return self.b + np.asarray(spins) @ self.W

    def log_psi(self, spins: np.ndarray) -> complex:
        """
        Compute log(psi(sigma)) = a . sigma + sum_j lncosh(theta_j).

        Args:
            spins: array of shape (n_visible,) with values +1 or -1

        Returns:
            Log amplitude as a complex scalar.
        """
        spins = np.asarray(spins)
        visible_term = self.a @ spins
        hidden_term = np.sum(lncosh(self.theta(spins)))
        return complex(visible_term + hidden_term)

    def log_ratio(self, spins: np.ndarray, flips) -> complex:
        """
        log[psi(sigma')/psi(sigma)] where sigma' flips the sites in `flips`.

        Uses the cached theta of sigma:
            visible part: -2 * sum_f a_f*sigma_f
            hidden part:  sum_j lncosh(theta_j - 2*sum_f sigma_f*W[f,j])
                                - lncosh(theta_j)
        """
        if len(flips) == 0:
            return 0j

        theta = self._require_cache()
        flips = list(flips)
        s = np.asarray(spins)[flips]

        visible_term = -2.0 * np.sum(self.a[flips] * s)
        theta_new = theta - 2.0 * (s @ self.W[flips])
        hidden_term = np.sum(lncosh(theta_new) - lncosh(theta))
        return complex(visible_term + hidden_term)

    # ------------------------------------------------------------------
    # Look-up table
    # ------------------------------------------------------------------

    def reset_cache(self, spins: np.ndarray) -> None:
        """Rebuild theta from the full configuration: O(N * M)."""
        self._theta = self.theta(spins)

    def apply_flips(self, spins: np.ndarray, flips) -> None:
        """
        Patch theta for an accepted move: O(n_flips * M).

        `spins` is the configuration BEFORE the flips are applied.
        """
        if len(flips) == 0:
            return
        theta = self._require_cache()
        flips = list(flips)
        s = np.asarray(spins)[flips]
        theta -= 2.0 * (s @ self.W[flips])

    @property
    def cache(self) -> np.ndarray:
        """Copy of the current look-up table (None before reset_cache)."""
        return None if self._theta is None else self._theta.copy()

    def _require_cache(self) -> np.ndarray:
        if self._theta is None:
            raise RuntimeError("RBM look-up table not initialised; call reset_cache() first")
        return self._theta

    # ------------------------------------------------------------------
    # Sizes
    # ------------------------------------------------------------------

    @property
    def n_visible(self) -> int:
        return len(self.a)

    @property
    def n_hidden(self) -> int:
        return len(self.b)

    @property
    def parameters(self) -> np.ndarray:
        """All parameters as a flat vector: [a | b | W.flatten()]."""
        return np.concatenate([self.a, self.b, self.W.flatten()])

    @property
    def n_params(self) -> int:
        return self.n_visible + self.n_hidden + self.n_visible * self.n_hidden

    def __repr__(self) -> str:
        return (
            f"RBM(n_visible={self.n_visible}, n_hidden={self.n_hidden}, "
            f"n_params={self.n_params})"
        )
