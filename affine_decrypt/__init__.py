"""
GPU affine-cipher decryption.

A fixed 1024-element int32 buffer is loaded from disk, decrypted by a Triton
kernel (one lane per element) and printed as text.
"""
from __future__ import annotations

from affine_decrypt.cipher import DEFAULT_PARAMS, CipherParams
from affine_decrypt.errors import DecryptError, DeviceError, InputNotFoundError, ShortInputError

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_PARAMS",
    "CipherParams",
    "DecryptError",
    "DeviceError",
    "InputNotFoundError",
    "ShortInputError",
]
