"""
Affine cipher parameters and host-side reference arithmetic.

Encryption is E(p) = (A * p + B) mod M, decryption
D(c) = A_inv * (c - B) mod M. The device kernel computes D; the functions here
are the plain-Python version used to build inputs and to check results.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def modulo(x: int, m: int) -> int:
    # Remainder is kept in [0, m) for negative x as well.
    r = x % m
    return r + m if r < 0 else r


def mod_inverse(a: int, m: int) -> Optional[int]:
    """
    Modular inverse of a modulo m by brute-force search.
    Returns None when a and m are not coprime.
    """
    a = a % m
    for x in range(1, m):
        if (a * x) % m == 1:
            return x
    return None


@dataclass(frozen=True)
class CipherParams:
    multiplier: int
    shift: int
    modulus: int
    inverse: int

    def __post_init__(self) -> None:
        if self.modulus <= 0:
            raise ValueError(f"modulus must be positive, got {self.modulus}")
        if (self.multiplier * self.inverse) % self.modulus != 1:
            raise ValueError(
                f"{self.inverse} is not the inverse of {self.multiplier} mod {self.modulus}"
            )

    @classmethod
    def from_key(cls, multiplier: int, shift: int, modulus: int) -> "CipherParams":
        inverse = mod_inverse(multiplier, modulus)
        if inverse is None:
            raise ValueError(f"No modular inverse for multiplier = {multiplier} mod {modulus}.")
        return cls(multiplier=multiplier, shift=shift, modulus=modulus, inverse=inverse)


DEFAULT_PARAMS = CipherParams(multiplier=15, shift=27, modulus=128, inverse=111)


def encrypt(p: int, params: CipherParams = DEFAULT_PARAMS) -> int:
    return modulo(params.multiplier * p + params.shift, params.modulus)


def decrypt(c: int, params: CipherParams = DEFAULT_PARAMS) -> int:
    return modulo(params.inverse * (c - params.shift), params.modulus)


def encrypt_text(text: str, params: CipherParams = DEFAULT_PARAMS) -> list[int]:
    """Encrypt each character code of ``text``; codes must fit below the modulus."""
    return [encrypt(ord(ch), params) for ch in text]


__all__ = [
    "CipherParams",
    "DEFAULT_PARAMS",
    "decrypt",
    "encrypt",
    "encrypt_text",
    "mod_inverse",
    "modulo",
]
