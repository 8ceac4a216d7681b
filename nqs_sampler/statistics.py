# nqs_sampler/statistics.py
#
# Binning analysis of the local-energy stream.
#
# Consecutive Metropolis samples are correlated, so the naive standard error
# sqrt(var/M) underestimates the true error of the mean. Averaging over
# contiguous blocks that are long compared to the autocorrelation time gives
# nearly independent block means, and the standard error of THOSE is an
# honest error bar. The ratio of the blocked to the unblocked variance also
# gives an estimate of the integrated autocorrelation time:
#
#   tau ~ 0.5 * block_size * var(block means) / var(samples)
#
# Means and variances are accumulated with Welford's online recurrence,
# which is stable even when the energy is large compared to its spread.

from typing import NamedTuple
import numpy as np

from .errors import ConfigurationError


N_BLOCKS = 50


# ============================================================
# Welford Accumulator
# ============================================================

class RunningStats:
    """Online mean and unbiased variance (Welford)."""

    def __init__(self):
        self.count = 0
        self.mean = 0.0
        self._m2 = 0.0

    def push(self, x: float) -> None:
        self.count += 1
        delta = x - self.mean
        self.mean += delta / self.count
        self._m2 += delta * (x - self.mean)

    @property
    def variance(self) -> float:
        """Sample variance with the (n - 1) denominator; 0 for n < 2."""
        if self.count < 2:
            return 0.0
        return self._m2 / (self.count - 1)


# ============================================================
# Binning Analysis
# ============================================================

class BinningResult(NamedTuple):
    """Outcome of a binning analysis, energies already divided by N."""
    energy: float
    error: float
    n_blocks: int
    block_size: int
    autocorrelation_time: float
    blocked_mean: float
    blocked_variance: float
    unblocked_mean: float
    unblocked_variance: float


def binning_analysis(energies, n_spins: int, n_blocks: int = N_BLOCKS) -> BinningResult:
    """
    Estimate the energy per site and its error from a correlated stream.

    Only the real part of each local energy is used. The stream is cut into
    `n_blocks` blocks of floor(M / n_blocks) samples; the remainder at the
    end is discarded (from both the blocked and the unblocked statistics).

    Args:
        energies: sequence of (complex) local energies, one per sweep.
        n_spins:  Number of sites N used to normalise the result.
        n_blocks: Number of blocks.

    Returns:
        BinningResult with energy = <E>/N, error = sqrt(var_block/n_blocks)/N.

    Raises:
        ConfigurationError: if there are fewer samples than blocks.
    """
    values = np.real(np.asarray(energies))

    if n_blocks < 2:
        raise ConfigurationError(f"Binning needs at least 2 blocks, got {n_blocks}")

    block_size = len(values) // n_blocks
    if block_size == 0:
        raise ConfigurationError(
            f"Cannot bin {len(values)} samples into {n_blocks} blocks"
        )

    unblocked = RunningStats()
    blocked = RunningStats()

    for k in range(n_blocks):
        block_sum = 0.0
        for x in values[k * block_size:(k + 1) * block_size]:
            x = float(x)
            block_sum += x
            unblocked.push(x)
        blocked.push(block_sum / block_size)

    energy = blocked.mean / n_spins
    error = np.sqrt(blocked.variance / n_blocks) / n_spins

    if unblocked.variance > 0:
        tau = 0.5 * block_size * blocked.variance / unblocked.variance
    else:
        tau = 0.0

    return BinningResult(
        energy=float(energy),
        error=float(error),
        n_blocks=n_blocks,
        block_size=block_size,
        autocorrelation_time=float(tau),
        blocked_mean=blocked.mean,
        blocked_variance=blocked.variance,
        unblocked_mean=unblocked.mean,
        unblocked_variance=unblocked.variance,
    )


# ============================================================
# Report
# ============================================================

def significant_digits(error: float) -> int:
    """
    Decimal places worth printing for a value with this error bar.

    An error of order 1e-k (k > 0) gives k + 2 digits; errors of order one
    or larger give none. A zero or non-finite error gives 6.
    """
    if not np.isfinite(error) or error <= 0:
        return 6
    ndigits = int(np.log10(error))
    return -ndigits + 2 if ndigits < 0 else 0


def format_report(result: BinningResult) -> list:
    """Human-readable lines for the final energy estimate."""
    ndigits = significant_digits(result.error)
    return [
        "Estimated average energy per spin :",
        f"{result.energy:.{ndigits}e} +/-  {result.error:.0e}",
        f"Error estimated with binning analysis consisting of {result.n_blocks} bins",
        f"Block size is {result.block_size}",
        f"Estimated autocorrelation time is {result.autocorrelation_time:.0e}",
    ]
