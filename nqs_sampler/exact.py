# nqs_sampler/exact.py
#
# Exact references for small lattices.
#
# Builds the full 2^N x 2^N Hamiltonian as a sparse matrix straight from
# find_connections, so every operator gets a matrix without a dedicated
# builder. Two quantities come out of it:
#
#   - the exact ground-state energy (Lanczos, scipy eigsh)
#   - the exact variational energy <psi|H|psi>/<psi|psi> of a given
#     wavefunction, summing over every basis state
#
# The second is what the Monte Carlo estimate converges to, which makes it
# the reference for checking the sampler end to end. Only feasible for
# N <= ~20.

import warnings
import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg as spla


# ============================================================
# Basis State Utilities
# ============================================================

def _idx_to_spins(idx: int, n_spins: int) -> np.ndarray:
    """
    Convert a basis state index to its spin configuration.

    Encoding: bit i of idx -> spin at site i (0 -> -1, 1 -> +1).
    """
    bits = (idx >> np.arange(n_spins)) & 1
    return 2 * bits - 1


def _flip_mask(flips) -> int:
    mask = 0
    for site in flips:
        mask ^= 1 << int(site)
    return mask


def _warn_if_large(n_spins: int) -> None:
    if n_spins > 20:
        dim = 2 ** n_spins
        warnings.warn(
            f"Exact enumeration for N={n_spins} spins visits {dim} basis states. "
            f"This may be very slow.",
            UserWarning, stacklevel=3
        )


# ============================================================
# Sparse Hamiltonian Matrix
# ============================================================

def hamiltonian_matrix(hamiltonian) -> sp.csr_matrix:
    """
    Sparse matrix of any Hamiltonian in the sigma^z basis.

    Column s holds <s'|H|s> for every connection of s; flipping the sites of
    a connection is an XOR of the corresponding bits of the index.
    """
    n = hamiltonian.n_spins
    _warn_if_large(n)
    dim = 2 ** n
    rows, cols, data = [], [], []

    for s_idx in range(dim):
        spins = _idx_to_spins(s_idx, n)
        for flips, mel in hamiltonian.find_connections(spins):
            rows.append(s_idx ^ _flip_mask(flips))
            cols.append(s_idx)
            data.append(mel)

    # duplicate (row, col) entries are summed by the COO -> CSR conversion
    return sp.coo_matrix((np.array(data, dtype=complex), (rows, cols)),
                         shape=(dim, dim)).tocsr()


def exact_ground_state_energy(hamiltonian) -> float:
    """Lowest eigenvalue of the full Hamiltonian (Lanczos, 'SA')."""
    H = hamiltonian_matrix(hamiltonian)
    if not np.any(H.data.imag):
        H = H.real
    eigenvalues = spla.eigsh(H, k=1, which='SA', return_eigenvectors=False, tol=0)
    return float(np.real(eigenvalues[0]))


# ============================================================
# Exact Variational Energy
# ============================================================

def exact_variational_energy(ansatz, hamiltonian, magnetization: int = None) -> float:
    """
    <psi|H|psi> / <psi|psi> by summing over the whole basis.

    Args:
        ansatz:        Wavefunction with log_psi(spins).
        hamiltonian:   Operator on the same number of sites.
        magnetization: If given, restrict psi to basis states whose spin sum
                       equals it (the sector a conserving sampler explores).

    Returns:
        Real part of the variational energy (total, not per site).
    """
    n = hamiltonian.n_spins
    _warn_if_large(n)
    dim = 2 ** n

    basis = [_idx_to_spins(idx, n) for idx in range(dim)]
    log_psi = np.array([ansatz.log_psi(spins) for spins in basis], dtype=complex)

    if magnetization is not None:
        sector = np.array([int(np.sum(spins)) == magnetization for spins in basis])
        log_psi = np.where(sector, log_psi, -np.inf)

    # shift by the largest log-modulus so the largest amplitude is O(1)
    shift = np.max(np.real(log_psi))
    psi = np.zeros(dim, dtype=complex)
    finite = np.isfinite(np.real(log_psi))
    psi[finite] = np.exp(log_psi[finite] - shift)

    H = hamiltonian_matrix(hamiltonian)
    energy = np.vdot(psi, H @ psi) / np.vdot(psi, psi)
    return float(np.real(energy))
