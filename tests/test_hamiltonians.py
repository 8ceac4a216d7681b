# tests/test_hamiltonians.py
#
# ============================================================
# UNIT TESTS: Hamiltonians (Ising 1D, Heisenberg 1D and 2D)
# ============================================================
#
# WHAT WE'RE TESTING:
#   find_connections() is the only thing the sampler asks a Hamiltonian.
#   Entry 0 is the diagonal (classical) energy; the remaining entries are the
#   configurations reachable by one off-diagonal term.
#
# TEST STRATEGY:
#   - The diagonal entry is compared with the bond energy computed
#     independently with np.roll over the chain / square grid.
#   - Off-diagonal entries are checked by hand for simple states
#     (all-up, Neel).
#   - The square-lattice neighbour table is checked site by site on 4x4.
#   - Exact diagonalization of the assembled matrix reproduces known
#     ground-state energies for N = 4.
#
# ============================================================

import sys
import os
import unittest
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nqs_sampler.errors import LatticeError
from nqs_sampler.exact import exact_ground_state_energy, hamiltonian_matrix
from nqs_sampler.hamiltonians import Heisenberg1d, Heisenberg2d, IsingHamiltonian
from nqs_sampler.hamiltonians.lattice import (
    bonds_from_neighbors, chain_bonds, square_neighbors, square_side,
)


def _random_spins(n_spins, seed):
    return np.random.default_rng(seed).choice([-1, 1], size=n_spins)


# ============================================================
# SECTION: Lattice Helpers
# ============================================================

class TestLattice(unittest.TestCase):
    """Bond sets of the chain and the square lattice."""

    def test_chain_bonds(self):
        self.assertEqual(chain_bonds(4, pbc=True), [(0, 1), (1, 2), (2, 3), (3, 0)])
        self.assertEqual(chain_bonds(4, pbc=False), [(0, 1), (1, 2), (2, 3)])

    def test_square_side(self):
        self.assertEqual(square_side(16), 4)
        self.assertEqual(square_side(1), 1)
        for n in [2, 8, 15, 17]:
            with self.subTest(n=n):
                with self.assertRaises(LatticeError):
                    square_side(n)

    def test_periodic_neighbors(self):
        """
        4x4 lattice, rows 0-3 / 4-7 / 8-11 / 12-15, order [left, right, up, down].
        """
        table = square_neighbors(16, pbc=True)
        self.assertEqual(table[0], [3, 1, 12, 4])
        self.assertEqual(table[5], [4, 6, 1, 9])
        self.assertEqual(table[7], [6, 4, 3, 11])
        self.assertEqual(table[15], [14, 12, 11, 3])

    def test_open_neighbors(self):
        table = square_neighbors(16, pbc=False)
        self.assertEqual(table[0], [-1, 1, -1, 4])
        self.assertEqual(table[15], [14, -1, 11, -1])
        self.assertEqual(table[5], [4, 6, 1, 9])

    def test_bond_counts(self):
        """Periodic L x L: 2N bonds. Open: 2L(L-1) bonds."""
        self.assertEqual(len(bonds_from_neighbors(square_neighbors(16, pbc=True))), 32)
        self.assertEqual(len(bonds_from_neighbors(square_neighbors(16, pbc=False))), 24)

    def test_bonds_are_ordered_and_unique(self):
        """On the 2x2 periodic lattice left and right neighbours coincide."""
        bonds = bonds_from_neighbors(square_neighbors(4, pbc=True))
        self.assertEqual(len(bonds), len(set(bonds)))
        self.assertTrue(all(i < j for i, j in bonds))
        self.assertEqual(sorted(bonds), [(0, 1), (0, 2), (1, 3), (2, 3)])


# ============================================================
# SECTION: Ising Hamiltonian Tests
# ============================================================

class TestIsingHamiltonian(unittest.TestCase):
    """Tests for IsingHamiltonian.find_connections()."""

    def test_all_up(self):
        """
        All-up spins on a periodic 4-site chain.

        PHYSICS: -J sum s_i s_{i+1} = -4; one flip per site with -h.
        """
        ham = IsingHamiltonian(n_spins=4, h=0.5)
        connections = ham.find_connections(np.ones(4, dtype=int))

        self.assertEqual(len(connections), 5)
        self.assertEqual(connections[0].flips, ())
        self.assertAlmostEqual(connections[0].mel, -4.0)
        for i, (flips, mel) in enumerate(connections[1:]):
            self.assertEqual(flips, (i,))
            self.assertEqual(mel, -0.5)

    def test_open_chain(self):
        """Without the wraparound bond only N-1 bonds contribute."""
        ham = IsingHamiltonian(n_spins=4, h=1.0, pbc=False)
        self.assertAlmostEqual(ham.diagonal_energy(np.ones(4, dtype=int)), -3.0)

    def test_diagonal_matches_classical_energy(self):
        """Diagonal == -J sum_i s_i s_{i+1} for random configurations."""
        ham = IsingHamiltonian(n_spins=10, h=0.7, J=1.3)
        for seed in range(5):
            spins = _random_spins(10, seed)
            expected = -1.3 * np.sum(spins * np.roll(spins, -1))
            self.assertAlmostEqual(ham.diagonal_energy(spins), expected, places=12)

    def test_min_flips(self):
        self.assertEqual(IsingHamiltonian(n_spins=4).min_flips, 1)

    def test_exact_pure_zz(self):
        """Without field the ground state is fully polarised: E = -J N."""
        ham = IsingHamiltonian(n_spins=4, h=0.0)
        self.assertAlmostEqual(exact_ground_state_energy(ham), -4.0, places=8)

    def test_exact_critical_point_negative(self):
        ham = IsingHamiltonian(n_spins=6, h=1.0)
        self.assertLess(exact_ground_state_energy(ham), -6.0)


# ============================================================
# SECTION: Heisenberg Hamiltonian Tests
# ============================================================

class TestHeisenberg1d(unittest.TestCase):
    """Tests for Heisenberg1d.find_connections()."""

    def test_all_up_has_no_exchange(self):
        ham = Heisenberg1d(n_spins=4, jz=1.0)
        connections = ham.find_connections(np.ones(4, dtype=int))
        self.assertEqual(len(connections), 1)
        self.assertAlmostEqual(connections[0].mel, 4.0)

    def test_neel_state(self):
        """
        Neel state: every bond antiparallel.

        PHYSICS: J_z * 4 * (-1) = -4 on the diagonal, and one -2 exchange
        per bond, including the wraparound bond (3, 0).
        """
        ham = Heisenberg1d(n_spins=4, jz=1.0)
        connections = ham.find_connections(np.array([+1, -1, +1, -1]))

        self.assertAlmostEqual(connections[0].mel, -4.0)
        self.assertEqual([c.flips for c in connections[1:]], [(0, 1), (1, 2), (2, 3), (3, 0)])
        self.assertTrue(all(c.mel == -2.0 for c in connections[1:]))

    def test_exchange_only_on_antiparallel_bonds(self):
        ham = Heisenberg1d(n_spins=6, jz=0.5, pbc=False)
        spins = np.array([+1, +1, -1, -1, +1, -1])
        flips = [c.flips for c in ham.find_connections(spins)[1:]]
        self.assertEqual(flips, [(1, 2), (3, 4), (4, 5)])

    def test_diagonal_matches_classical_energy(self):
        ham = Heisenberg1d(n_spins=8, jz=0.8)
        for seed in range(5):
            spins = _random_spins(8, seed)
            expected = 0.8 * np.sum(spins * np.roll(spins, -1))
            self.assertAlmostEqual(ham.diagonal_energy(spins), expected, places=12)

    def test_find_connections_does_not_mutate(self):
        ham = Heisenberg1d(n_spins=6)
        spins = _random_spins(6, 1)
        before = spins.copy()
        first = ham.find_connections(spins)
        second = ham.find_connections(spins)
        np.testing.assert_array_equal(spins, before)
        self.assertEqual(first, second)

    def test_min_flips(self):
        self.assertEqual(Heisenberg1d(n_spins=4).min_flips, 2)

    def test_exact_four_site_ring(self):
        """
        N=4 ring: H is unitarily equivalent to sum sigma_i . sigma_j, whose
        ground state (total spin 0 singlet) has E = 4 * (-2) = -8.
        """
        ham = Heisenberg1d(n_spins=4, jz=1.0)
        self.assertAlmostEqual(exact_ground_state_energy(ham), -8.0, places=8)

    def test_matrix_is_hermitian(self):
        H = hamiltonian_matrix(Heisenberg1d(n_spins=6, jz=0.7))
        self.assertAlmostEqual(abs(H - H.conj().T).max(), 0.0, places=12)


class TestHeisenberg2d(unittest.TestCase):
    """Tests for Heisenberg2d on the square lattice."""

    def test_non_square_rejected(self):
        with self.assertRaises(LatticeError):
            Heisenberg2d(n_spins=8)

    def test_side_and_bonds(self):
        ham = Heisenberg2d(n_spins=16)
        self.assertEqual(ham.side, 4)
        self.assertEqual(len(ham.bonds), 32)
        self.assertEqual(len(Heisenberg2d(n_spins=16, pbc=False).bonds), 24)

    def test_checkerboard(self):
        """Checkerboard on 4x4 periodic: all 32 bonds antiparallel."""
        ham = Heisenberg2d(n_spins=16, jz=1.0)
        rows, cols = np.divmod(np.arange(16), 4)
        spins = np.where((rows + cols) % 2 == 0, 1, -1)

        connections = ham.find_connections(spins)
        self.assertAlmostEqual(connections[0].mel, -32.0)
        self.assertEqual(len(connections), 33)
        for flips, mel in connections[1:]:
            self.assertNotEqual(spins[flips[0]], spins[flips[1]])
            self.assertEqual(mel, -2.0)

    def test_diagonal_matches_classical_energy(self):
        """Diagonal == J_z * (horizontal + vertical neighbour products)."""
        ham = Heisenberg2d(n_spins=16, jz=1.5)
        for seed in range(5):
            spins = _random_spins(16, seed)
            grid = spins.reshape(4, 4)
            expected = 1.5 * (np.sum(grid * np.roll(grid, -1, axis=1)) +
                              np.sum(grid * np.roll(grid, -1, axis=0)))
            self.assertAlmostEqual(ham.diagonal_energy(spins), expected, places=12)

    def test_min_flips(self):
        self.assertEqual(Heisenberg2d(n_spins=4).min_flips, 2)


# ============================================================
# SECTION: Entry Point
# ============================================================

if __name__ == '__main__':
    unittest.main(verbosity=2)
