from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Union

import numpy as np

from affine_decrypt.errors import InputNotFoundError, ShortInputError

N_ELEMENTS = 1024
DEFAULT_INPUT = "encrypted01.bin"

# Little-endian 4-byte signed integers, no header.
CIPHERTEXT_DTYPE = np.dtype("<i4")

PathLike = Union[str, "os.PathLike[str]"]


def load_ciphertext(path: PathLike = DEFAULT_INPUT, n_elements: int = N_ELEMENTS) -> np.ndarray:
    """
    Read exactly ``n_elements`` ciphertext values from ``path``.

    Bytes past the last element are ignored. A file holding fewer values
    raises ShortInputError instead of leaving the tail of the buffer undefined.
    """
    try:
        with open(path, "rb") as f:
            data = f.read(n_elements * CIPHERTEXT_DTYPE.itemsize)
    except OSError:
        # A directory or unreadable file is reported the same way as a missing one
        raise InputNotFoundError(path) from None
    values = np.frombuffer(data, dtype=CIPHERTEXT_DTYPE, count=len(data) // CIPHERTEXT_DTYPE.itemsize)
    if values.size < n_elements:
        raise ShortInputError(path, expected=n_elements, found=int(values.size))
    return values.astype(np.int32)


def write_ciphertext(path: PathLike, values: Iterable[int]) -> Path:
    out = Path(path)
    np.asarray(list(values), dtype=CIPHERTEXT_DTYPE).tofile(out)
    return out


__all__ = ["CIPHERTEXT_DTYPE", "DEFAULT_INPUT", "N_ELEMENTS", "load_ciphertext", "write_ciphertext"]
