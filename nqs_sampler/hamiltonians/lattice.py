# nqs_sampler/hamiltonians/lattice.py
#
# Bond sets for the chain and square-lattice models.
#
# Sites on the L x L square lattice are numbered row by row: site s sits at
# column s % L and row s // L. A missing neighbour (open boundaries) is
# stored as -1 in the neighbour table.

import math

from ..errors import LatticeError


def chain_bonds(n_spins: int, pbc: bool = True) -> list:
    """
    Nearest-neighbour bonds (i, i+1) of a 1D chain.

    With pbc the wraparound bond (N-1, 0) is appended last.
    """
    bonds = [(i, i + 1) for i in range(n_spins - 1)]
    if pbc and n_spins > 0:
        bonds.append((n_spins - 1, 0))
    return bonds


def square_side(n_spins: int) -> int:
    """Side L of the square lattice with L*L == n_spins."""
    side = math.isqrt(n_spins) if n_spins >= 0 else -1
    if side < 0 or side * side != n_spins:
        raise LatticeError(
            f"The number of spins ({n_spins}) is not compatible with a square lattice"
        )
    return side


def square_neighbors(n_spins: int, pbc: bool = True) -> list:
    """
    Neighbour table of the square lattice.

    Returns:
        List of [left, right, up, down] site indices for every site, where
        "up" is the previous row and "down" the next one. Without pbc an
        edge neighbour is -1.

    Raises:
        LatticeError: if n_spins is not a perfect square.
    """
    L = square_side(n_spins)
    table = []

    for s in range(n_spins):
        col = s % L

        if col > 0:
            left = s - 1
        else:
            left = s + L - 1 if pbc else -1

        if col < L - 1:
            right = s + 1
        else:
            right = s - L + 1 if pbc else -1

        up = s - L
        if up < 0:
            up = up + n_spins if pbc else -1

        down = s + L
        if down >= n_spins:
            down = down - n_spins if pbc else -1

        table.append([left, right, up, down])

    return table


def bonds_from_neighbors(neighbors: list) -> list:
    """All (i, j) with i < j from a neighbour table, without duplicates."""
    bonds = []
    seen = set()
    for i, row in enumerate(neighbors):
        for j in row:
            if i < j and (i, j) not in seen:
                seen.add((i, j))
                bonds.append((i, j))
    return bonds
