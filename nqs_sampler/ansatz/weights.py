# nqs_sampler/ansatz/weights.py
#
# Reader for trained RBM weight files.
#
# The file is plain whitespace-delimited text read in strict order:
#
#   N_visible N_hidden
#   a_0 ... a_{N_visible-1}                      (visible biases)
#   b_0 ... b_{N_hidden-1}                       (hidden biases)
#   W_00 W_01 ... W_{N_visible-1,N_hidden-1}     (visible-major)
#
# Each coefficient is a complex token "(re,im)"; a bare real "x" is read
# as (x,0). Anything after the last weight is ignored.

import re
import numpy as np

from ..errors import WeightFileError


# A parenthesised token may contain spaces: "( 0.1 , -0.2 )"
_TOKEN_RE = re.compile(r"\([^)]*\)?|\)|[^\s()]+")


def parse_complex(token: str) -> complex:
    """
    Parse one coefficient token.

    Accepted forms: "(re,im)", "(re)" and a bare real "re".

    Raises:
        WeightFileError: if the token is not a number in one of these forms.
    """
    text = token.strip()
    try:
        if text.startswith("("):
            if not text.endswith(")"):
                raise ValueError("unbalanced parenthesis")
            parts = text[1:-1].split(",")
            if len(parts) == 1:
                return complex(float(parts[0]), 0.0)
            if len(parts) == 2:
                return complex(float(parts[0]), float(parts[1]))
            raise ValueError("too many components")
        return complex(float(text), 0.0)
    except ValueError as exc:
        raise WeightFileError(f"Invalid coefficient {token!r}: {exc}") from exc


def _tokens(text: str):
    for match in _TOKEN_RE.finditer(text):
        yield match.group(0)


def load_weights(path: str):
    """
    Load RBM parameters from a weight file.

    Args:
        path: Path of the text weight file.

    Returns:
        (a, b, W): complex arrays of shapes (N,), (M,), (N, M).

    Raises:
        WeightFileError: if the file cannot be read, declares a negative
            unit count, contains an unparsable token, or ends before all
            N + M + N*M coefficients have been read.
    """
    try:
        with open(path, "r") as f:
            text = f.read()
    except OSError as exc:
        raise WeightFileError(
            f"Cannot load from file {path}: {exc.strerror or exc}"
        ) from exc

    tokens = _tokens(text)

    def next_token(what: str) -> str:
        try:
            return next(tokens)
        except StopIteration:
            raise WeightFileError(
                f"Invalid weight file {path}: input ended while reading {what}"
            ) from None

    counts = []
    for what in ("N_visible", "N_hidden"):
        token = next_token(what)
        try:
            counts.append(int(token))
        except ValueError:
            raise WeightFileError(
                f"Invalid weight file {path}: {what} must be an integer, got {token!r}"
            ) from None
    n_visible, n_hidden = counts

    if n_visible < 0 or n_hidden < 0:
        raise WeightFileError(
            f"Invalid weight file {path}: negative unit count "
            f"(N_visible={n_visible}, N_hidden={n_hidden})"
        )

    a = np.empty(n_visible, dtype=complex)
    b = np.empty(n_hidden, dtype=complex)
    W = np.empty((n_visible, n_hidden), dtype=complex)

    for i in range(n_visible):
        a[i] = parse_complex(next_token(f"visible bias {i}"))
    for j in range(n_hidden):
        b[j] = parse_complex(next_token(f"hidden bias {j}"))
    for i in range(n_visible):
        for j in range(n_hidden):
            W[i, j] = parse_complex(next_token(f"weight ({i},{j})"))

    return a, b, W
