# nqs_sampler/config.py
#
# Run configuration: everything a sampling run needs, resolved up front.
#
# A run is described by a YAML file such as
#
#   weights: weights/Heisenberg1d_40_1_1.wf
#   model: heisenberg1d        # ising1d | heisenberg1d | heisenberg2d
#   coupling: 1.0              # h for ising1d, J_z for the Heisenberg models
#   n_sweeps: 1.0e4
#   seed: -1                   # negative: seed from the clock
#   states_file: states.txt    # optional
#
# so the sampling settings of a result are recorded next to it.

from dataclasses import dataclass, fields
import math
from typing import Optional

import yaml

from .errors import ConfigurationError


MODELS = ("ising1d", "heisenberg1d", "heisenberg2d")


@dataclass
class RunConfig:
    """Resolved settings of one sampling run."""

    weights: str
    model: str
    coupling: float
    n_sweeps: float = 1.0e4
    seed: int = -1
    states_file: Optional[str] = None
    therm_factor: float = 0.1
    sweep_factor: int = 1
    n_flips: Optional[int] = None
    pbc: bool = True
    conserve_magnetization: bool = True
    energies_file: Optional[str] = None
    plot_file: Optional[str] = None
    progress: bool = True

    @classmethod
    def from_dict(cls, raw: dict) -> "RunConfig":
        """
        Build a RunConfig from a plain mapping, checking keys and types.

        Only the shape of the values is checked here; ranges (sweep count,
        thermalization fraction, flips) are checked by the sampler and the
        model name by the runner.

        Raises:
            ConfigurationError: unknown or missing keys, or wrong types.
        """
        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"Run configuration must be a mapping, got {type(raw).__name__}"
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

        missing = [key for key in ("weights", "model", "coupling") if raw.get(key) is None]
        if missing:
            raise ConfigurationError(f"Missing required configuration keys: {', '.join(missing)}")

        values = {key: value for key, value in raw.items() if value is not None}
        values['weights'] = str(values['weights'])
        values['model'] = str(values['model']).lower()
        values['coupling'] = _number(values['coupling'], 'coupling')
        for key in ('n_sweeps', 'therm_factor'):
            if key in values:
                values[key] = _number(values[key], key)
        for key in ('seed', 'sweep_factor', 'n_flips'):
            if key in values:
                values[key] = _integer(values[key], key)
        for key in ('pbc', 'conserve_magnetization', 'progress'):
            if key in values and not isinstance(values[key], bool):
                raise ConfigurationError(f"'{key}' must be true or false, got {values[key]!r}")
        for key in ('states_file', 'energies_file', 'plot_file'):
            if key in values:
                values[key] = str(values[key])

        return cls(**values)


def _number(value, name: str) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"'{name}' must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'{name}' must be a number, got {value!r}") from None


def _integer(value, name: str) -> int:
    number = _number(value, name)
    if not math.isfinite(number) or number != int(number):
        raise ConfigurationError(f"'{name}' must be an integer, got {value!r}")
    return int(number)


def load_config(path: str) -> RunConfig:
    """
    Load a YAML run configuration.

    Raises:
        ConfigurationError: if the file cannot be read or parsed, or its
            content is not a valid run configuration.
    """
    try:
        with open(path, 'r') as f:
            raw = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read configuration file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in configuration file {path}: {exc}") from exc

    return RunConfig.from_dict(raw)
