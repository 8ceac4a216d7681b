# nqs_sampler/sampler.py
#
# Metropolis-Hastings sampler of spin configurations from |psi(sigma)|^2,
# measuring the local energy once per sweep.
#
# <E> = sum_sigma |psi(sigma)|^2 * E_loc(sigma) cannot be summed over all 2^N
# configurations, so we draw configurations with the Metropolis algorithm and
# average E_loc over them. A move flips one spin (transverse-field Ising) or
# exchanges two antiparallel spins (Heisenberg), and is accepted with
# probability min(1, |psi(new)/psi(old)|^2).
#
# The wavefunction keeps a look-up table for the current configuration. The
# order inside one move is fixed:
#
#   propose -> ratio from the table (no mutation) -> if accepted: patch the
#   table using the PRE-flip spins, then flip the spins.
#
# A rejected move leaves everything untouched.

from enum import Enum
import math
import time
import numpy as np

from .ansatz.base import Ansatz
from .errors import ConfigurationError, LatticeError, StatesFileError
from .hamiltonians.base import Hamiltonian
from .statistics import binning_analysis, format_report
from .utils import make_progress_bar


MIN_SWEEPS = 50


class SamplerState(Enum):
    UNINITIALIZED = "uninitialized"
    THERMALIZING = "thermalizing"
    SAMPLING = "sampling"
    FINISHED = "finished"


def resolve_seed(seed) -> int:
    """Negative or missing seeds are replaced by the wall-clock time."""
    if seed is None or seed < 0:
        return time.time_ns()
    return int(seed)


class MetropolisSampler:
    """
    Metropolis-Hastings sampler driving a cached wavefunction.

    The sampler owns the spin configuration, the random generator, the
    acceptance counters and the stream of local energies. It talks to the
    wavefunction only through the Ansatz interface and to the Hamiltonian
    only through find_connections / min_flips.
    """

    def __init__(self, ansatz: Ansatz, hamiltonian: Hamiltonian, seed: int = None,
                 conserve_magnetization: bool = True, verbose: bool = True,
                 progress: bool = False):
        """
        Args:
            ansatz:      Wavefunction with a look-up table (e.g. RBM).
            hamiltonian: Operator whose energy is measured.
            seed:        Random seed. None or negative: derived from the clock.
            conserve_magnetization:
                         Start from a zero-magnetization state and only propose
                         two-site moves that exchange antiparallel spins.
            verbose:     Print progress markers and the final report.
            progress:    Show a tqdm progress bar over the sampling sweeps.
        """
        if hamiltonian.n_spins != ansatz.n_visible:
            raise LatticeError(
                f"Hamiltonian has {hamiltonian.n_spins} sites but the "
                f"wavefunction has {ansatz.n_visible} visible units"
            )

        self.ansatz = ansatz
        self.hamiltonian = hamiltonian
        self.n_spins = ansatz.n_visible
        self.conserve_magnetization = conserve_magnetization
        self.verbose = verbose
        self.progress = progress

        self.seed = resolve_seed(seed)
        self.rng = np.random.default_rng(self.seed)

        self.state = SamplerState.UNINITIALIZED
        self.current_spins = None
        self._energies = []
        self._states_file = None

        self._n_proposed = 0
        self._n_accepted = 0

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _random_site(self) -> int:
        return int(self.rng.integers(0, self.n_spins))

    def init_random_state(self) -> np.ndarray:
        """
        Draw a random configuration and rebuild the look-up table.

        Each spin is -1 or +1 with probability 1/2. With magnetization
        conservation, randomly chosen majority spins are then flipped until
        the total is exactly zero.

        Raises:
            LatticeError: odd number of spins with magnetization conservation.
        """
        spins = np.where(self.rng.random(self.n_spins) < 0.5, -1, 1)

        if self.conserve_magnetization:
            if self.n_spins % 2:
                raise LatticeError(
                    "Cannot initialise a random state with zero magnetization "
                    f"for an odd number of spins ({self.n_spins})"
                )
            total = int(np.sum(spins))
            while total != 0:
                majority = 1 if total > 0 else -1
                site = self._random_site()
                while spins[site] != majority:
                    site = self._random_site()
                spins[site] = -majority
                total -= 2 * majority

        self.current_spins = spins
        self.ansatz.reset_cache(self.current_spins)
        return spins.copy()

    def reset_state(self, spins: np.ndarray = None) -> None:
        """
        Reset the configuration (random if None) and rebuild the look-up table.

        Acceptance counters are cleared as well.
        """
        if spins is None:
            self.init_random_state()
        else:
            spins = np.array(spins, dtype=int)
            if spins.shape != (self.n_spins,):
                raise LatticeError(
                    f"Configuration has shape {spins.shape}, expected ({self.n_spins},)"
                )
            self.current_spins = spins
            self.ansatz.reset_cache(self.current_spins)
        self.reset_acceptance_stats()

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def rand_spin(self, n_flips: int):
        """
        Propose the sites of one move.

        Returns:
            Tuple of 1 or 2 site indices, or None when a two-site proposal
            is invalid: with magnetization conservation the two spins must be
            antiparallel, otherwise the two sites must differ.
        """
        first = self._random_site()
        if n_flips == 1:
            return (first,)

        second = self._random_site()
        if self.conserve_magnetization:
            valid = self.current_spins[first] != self.current_spins[second]
        else:
            valid = first != second
        return (first, second) if valid else None

    def move(self, n_flips: int) -> bool:
        """
        One Metropolis step.

        Acceptance probability A = |psi(proposed)/psi(current)|^2, accepted
        when A > u with u uniform in [0, 1). An invalid proposal counts as a
        move but is never tested for acceptance.

        Returns:
            True if the move was accepted.
        """
        accepted = False
        flips = self.rand_spin(n_flips)

        if flips is not None:
            acceptance = np.abs(self.ansatz.amplitude_ratio(self.current_spins, flips)) ** 2

            if acceptance > self.rng.random():
                # the table update must see the spins before the flip
                self.ansatz.apply_flips(self.current_spins, flips)
                self.current_spins[list(flips)] *= -1
                self._n_accepted += 1
                accepted = True

        self._n_proposed += 1
        return accepted

    def sweep(self, n_flips: int, sweep_factor: int = 1) -> None:
        """n_spins * sweep_factor consecutive moves."""
        for _ in range(self.n_spins * sweep_factor):
            self.move(n_flips)

    # ------------------------------------------------------------------
    # Measurements
    # ------------------------------------------------------------------

    def local_energy(self) -> complex:
        """
        E_loc(sigma) = sum_k psi(sigma'_k)/psi(sigma) * <sigma'_k|H|sigma>.

        The diagonal term has no flips, so its ratio is exactly 1.
        """
        energy = 0j
        for flips, mel in self.hamiltonian.find_connections(self.current_spins):
            energy += self.ansatz.amplitude_ratio(self.current_spins, flips) * mel
        return complex(energy)

    def measure_energy(self) -> complex:
        """Measure the local energy and append it to the sample stream."""
        energy = self.local_energy()
        self._energies.append(energy)
        return energy

    @property
    def spins(self) -> np.ndarray:
        """Copy of the current configuration."""
        return None if self.current_spins is None else self.current_spins.copy()

    @property
    def energies(self) -> np.ndarray:
        """Copy of the sample stream (complex, one entry per sampling sweep)."""
        return np.array(self._energies, dtype=complex)

    # ------------------------------------------------------------------
    # Configuration output
    # ------------------------------------------------------------------

    def set_states_file(self, path: str) -> None:
        """
        Write every sampled configuration to `path`, one line per sweep.

        Raises:
            StatesFileError: if the file cannot be opened for writing.
        """
        self.close()
        try:
            self._states_file = open(path, "w")
        except OSError as exc:
            raise StatesFileError(
                f"Cannot open file {path} for writing: {exc.strerror or exc}"
            ) from exc
        self._log(f"Saving sampled configurations to file {path}")

    def write_state(self) -> None:
        line = "".join(f"{int(s):2d} " for s in self.current_spins)
        self._states_file.write(line + "\n")

    def close(self) -> None:
        """Close the configuration output file, if any."""
        if self._states_file is not None:
            self._states_file.close()
            self._states_file = None

    def __enter__(self) -> "MetropolisSampler":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    def burn_in(self, n_sweeps: int, n_flips: int, sweep_factor: int = 1) -> None:
        """Run n_sweeps sweeps without measuring, then reset the counters."""
        self.state = SamplerState.THERMALIZING
        for _ in range(n_sweeps):
            self.sweep(n_flips, sweep_factor)
        self.reset_acceptance_stats()

    def sample(self, n_sweeps: int, n_flips: int, sweep_factor: int = 1) -> np.ndarray:
        """
        Run n_sweeps sweeps, measuring one local energy after each.

        The configuration is written to the states file (if set) before the
        measurement.

        Returns:
            Complex array of the local energies measured by this call.
        """
        self.state = SamplerState.SAMPLING
        start = len(self._energies)

        sweeps = make_progress_bar(range(n_sweeps), desc="Sweeping",
                                   total=n_sweeps, enabled=self.progress)
        for _ in sweeps:
            self.sweep(n_flips, sweep_factor)
            if self._states_file is not None:
                self.write_state()
            self.measure_energy()

        return np.array(self._energies[start:], dtype=complex)

    def run(self, n_sweeps: float, therm_factor: float = 0.1, sweep_factor: int = 1,
            n_flips: int = None):
        """
        Full Monte Carlo run: initialise, thermalize, sample, analyse.

        Args:
            n_sweeps:     Number of sampling sweeps (>= 50).
            therm_factor: Fraction of n_sweeps spent thermalizing, in [0, 1].
            sweep_factor: A sweep is n_spins * sweep_factor moves.
            n_flips:      Sites flipped per move. Default: hamiltonian.min_flips.

        Returns:
            BinningResult of the measured local energies.

        Raises:
            ConfigurationError: if any argument is out of range.
        """
        if n_flips is None:
            n_flips = self.hamiltonian.min_flips

        if n_flips not in (1, 2):
            raise ConfigurationError(f"The number of spin flips should be 1 or 2, got {n_flips}")
        if not 0.0 <= therm_factor <= 1.0:
            raise ConfigurationError(
                f"The thermalization factor should be between 0 and 1, got {therm_factor}"
            )
        if n_sweeps < MIN_SWEEPS:
            raise ConfigurationError(
                f"Please enter a number of sweeps sufficiently large (>= {MIN_SWEEPS}), got {n_sweeps}"
            )
        if sweep_factor < 1:
            raise ConfigurationError(f"The sweep factor should be >= 1, got {sweep_factor}")

        n_therm = int(math.floor(n_sweeps * therm_factor))
        n_measure = int(math.ceil(n_sweeps))

        self._log("Starting Monte Carlo sampling")
        self._log(f"Number of sweeps to be performed is {n_measure}")

        self._energies = []
        self.init_random_state()
        self.reset_acceptance_stats()

        self._log(f"Thermalization ({n_therm} sweeps)...")
        self.burn_in(n_therm, n_flips, sweep_factor)

        self._log("Sweeping...")
        self.sample(n_measure, n_flips, sweep_factor)
        self.state = SamplerState.FINISHED
        self._log(f"Sweeping done, acceptance rate {self.acceptance_rate:.3f}")

        result = binning_analysis(self._energies, self.n_spins)
        for line in format_report(result):
            self._log(line)
        return result

    # ------------------------------------------------------------------
    # Acceptance statistics
    # ------------------------------------------------------------------

    @property
    def acceptance_rate(self) -> float:
        """Fraction of moves that were accepted (invalid proposals included)."""
        if self._n_proposed == 0:
            return 0.0
        return self._n_accepted / self._n_proposed

    def reset_acceptance_stats(self) -> None:
        self._n_proposed = 0
        self._n_accepted = 0

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)
