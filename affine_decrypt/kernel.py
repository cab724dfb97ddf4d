from dataclasses import dataclass

import torch
import triton
import triton.language as tl

from affine_decrypt.cipher import CipherParams


@dataclass(frozen=True)
class LaunchConfig:
    groups: int            # Number of Triton programs on axis 0
    lanes_per_group: int   # BLOCK_SIZE: elements handled by each program

    @property
    def total_lanes(self) -> int:
        return self.groups * self.lanes_per_group


def launch_config(n_elements: int, groups: int) -> LaunchConfig:
    # The grid has to cover the buffer exactly: no partial group, no spare lanes.
    assert groups > 0, f"groups must be positive, got {groups}"
    assert n_elements % groups == 0, f"{n_elements} elements do not split into {groups} groups"
    lanes = n_elements // groups
    # tl.arange only accepts power-of-two ranges
    assert lanes & (lanes - 1) == 0, f"lanes per group must be a power of two, got {lanes}"
    return LaunchConfig(groups=groups, lanes_per_group=lanes)


def global_indices(config: LaunchConfig) -> list[int]:
    # Host-side mirror of the index computation in affine_decrypt_kernel
    return [
        pid * config.lanes_per_group + lane
        for pid in range(config.groups)
        for lane in range(config.lanes_per_group)
    ]


@triton.jit
def modulo(x, m):
    # Integer remainder follows the sign of x; shift negatives back into [0, m)
    r = x % m
    return tl.where(r < 0, r + m, r)


# Triton kernel for affine-cipher decryption
# Computes: plaintext[i] = (inverse * (ciphertext[i] - shift)) mod modulus
@triton.jit
def affine_decrypt_kernel(
    ciphertext_ptr,          # Pointer to encrypted values in GPU memory (int32)
    plaintext_ptr,           # Pointer to the output buffer in GPU memory (int32)
    n_elements,              # Total number of elements in both buffers
    inverse,                 # Modular inverse of the cipher multiplier
    shift,                   # Additive cipher key
    modulus,                 # Cipher modulus
    BLOCK_SIZE: tl.constexpr # Lanes per program (group)
):
    # Program ID along axis 0 is the group index
    pid = tl.program_id(axis=0)

    # Global index of every lane in this group
    offsets = pid * BLOCK_SIZE + tl.arange(0, BLOCK_SIZE)

    # Mask to ensure we only touch valid indices
    mask = offsets < n_elements

    # Each lane reads its own ciphertext element
    c = tl.load(ciphertext_ptr + offsets, mask=mask)

    # Undo the affine transform with the precomputed inverse
    p = modulo(inverse * (c - shift), modulus)

    # Disjoint writes: lane i owns plaintext[i]
    tl.store(plaintext_ptr + offsets, p, mask=mask)


# ciphertext, plaintext are int32 tensors on the GPU
def solve(ciphertext: torch.Tensor, plaintext: torch.Tensor, N: int, params: CipherParams, config: LaunchConfig):
    assert config.total_lanes == N, f"launch covers {config.total_lanes} lanes for {N} elements"
    grid = (config.groups,)
    affine_decrypt_kernel[grid](
        ciphertext,
        plaintext,
        N,
        params.inverse,
        params.shift,
        params.modulus,
        BLOCK_SIZE=config.lanes_per_group,
    )


__all__ = ["LaunchConfig", "affine_decrypt_kernel", "global_indices", "launch_config", "solve"]
