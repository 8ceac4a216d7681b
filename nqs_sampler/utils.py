# nqs_sampler/utils.py
#
# Infrastructure utilities: progress bar, saving the energy stream, plotting.
#
# The energy trace plot shows the raw local energy per sweep together with
# the binned estimate, which is the quickest way to spot a chain that has
# not thermalized or is stuck.

import os
import numpy as np
from tqdm import tqdm


# ============================================================
# Progress Bar
# ============================================================

def make_progress_bar(iterable, desc: str = "", total: int = None,
                      enabled: bool = True, **kwargs):
    """Wrap an iterable with a tqdm progress bar (a no-op bar if not enabled)."""
    return tqdm(iterable, desc=desc, total=total, disable=not enabled, **kwargs)


# ============================================================
# Energy Stream I/O
# ============================================================

def save_energies(path: str, energies, result=None) -> str:
    """
    Save the local-energy stream (and optionally its binning result) to .npz.

    Args:
        path:     Output file. numpy appends ".npz" if missing.
        energies: Complex local energies, one per sweep.
        result:   Optional BinningResult stored field by field.

    Returns:
        Path of the written file.
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    arrays = {'energies': np.asarray(energies, dtype=complex)}
    if result is not None:
        for name, value in result._asdict().items():
            arrays[name] = np.asarray(value)

    np.savez(path, **arrays)
    return path if path.endswith('.npz') else path + '.npz'


def load_energies(path: str) -> np.ndarray:
    """Load the local-energy stream written by save_energies."""
    with np.load(path) as data:
        return data['energies'].copy()


# ============================================================
# Plotting
# ============================================================

def plot_energy_trace(energies, n_spins: int, result=None,
                      save_path: str = None) -> None:
    """
    Plot the local energy per site against the sweep index.

    If a BinningResult is given, its estimate is drawn as a horizontal line
    with a +/- error band.

    Args:
        energies:  Complex local energies, one per sweep.
        n_spins:   Number of sites (energies are divided by it).
        result:    Optional BinningResult of the same stream.
        save_path: File path to save figure. None = plt.show().
    """
    import matplotlib.pyplot as plt

    e_site = np.real(np.asarray(energies)) / n_spins
    sweeps = np.arange(len(e_site))

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.plot(sweeps, e_site, color='royalblue', linewidth=0.8, alpha=0.7,
            label='E_loc / N')

    if result is not None:
        ax.axhline(result.energy, color='crimson', linestyle='--', linewidth=1.5,
                   label=f'Binned: {result.energy:.5f}')
        ax.fill_between(sweeps,
                        result.energy - result.error,
                        result.energy + result.error,
                        alpha=0.25, color='crimson', label='±1 error')

    ax.set_xlabel('Sweep')
    ax.set_ylabel('Local energy per site')
    ax.set_title('Monte Carlo Energy Trace')
    ax.legend()
    ax.grid(True, alpha=0.3)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Saved plot: {save_path}")
    else:
        plt.show()

    plt.close(fig)
