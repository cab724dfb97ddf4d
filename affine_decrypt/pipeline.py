"""
Host-side orchestration of one decrypt run.

Every interaction with the device is a single step: it either returns its
result or raises DeviceError tagged with the step label. Nothing here exits
the process; the caller decides what a failure means.
"""
from __future__ import annotations

from typing import Any, Callable, TypeVar

import numpy as np
import torch

from affine_decrypt.cipher import CipherParams
from affine_decrypt.errors import DeviceError
from affine_decrypt.kernel import LaunchConfig, solve

T = TypeVar("T")

ALLOCATE = "allocating device buffers"
COPY_IN = "copying ciphertext to device"
LAUNCH = "launching decrypt kernel"
SYNCHRONIZE = "waiting for decrypt kernel"
COPY_OUT = "copying plaintext to host"
RELEASE = "releasing device buffers"


DEVICE_FAILURES = (RuntimeError, ValueError)
# torch raises AssertionError from its lazy CUDA init when built without CUDA
# support; that first happens while allocating.
ALLOCATION_FAILURES = DEVICE_FAILURES + (AssertionError,)


def device_step(step: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    failures = ALLOCATION_FAILURES if step == ALLOCATE else DEVICE_FAILURES
    try:
        return fn(*args, **kwargs)
    except failures as e:
        raise DeviceError(step, str(e) or type(e).__name__) from e


def _synchronize(device: torch.device) -> None:
    if device.type == "cuda":
        torch.cuda.synchronize(device)


def _release(device: torch.device) -> None:
    if device.type == "cuda":
        torch.cuda.empty_cache()


def decrypt_buffer(
    ciphertext: np.ndarray,
    params: CipherParams,
    config: LaunchConfig,
    device: str = "cuda",
) -> np.ndarray:
    """
    Decrypt ``ciphertext`` on ``device`` and return the plaintext on the host.

    Steps run strictly in order: allocate, copy in, launch, synchronize,
    copy out, release. The first failing step raises DeviceError and the
    remaining steps are skipped.
    """
    n = int(ciphertext.shape[0])
    assert config.total_lanes == n, f"launch covers {config.total_lanes} lanes for {n} elements"
    dev = device_step(ALLOCATE, torch.device, device)

    d_ciphertext = device_step(ALLOCATE, torch.empty, n, dtype=torch.int32, device=dev)
    d_plaintext = device_step(ALLOCATE, torch.empty, n, dtype=torch.int32, device=dev)

    host_in = torch.from_numpy(np.ascontiguousarray(ciphertext, dtype=np.int32))
    device_step(COPY_IN, d_ciphertext.copy_, host_in)

    device_step(LAUNCH, solve, d_ciphertext, d_plaintext, n, params, config)
    device_step(SYNCHRONIZE, _synchronize, dev)

    plaintext = device_step(COPY_OUT, lambda: d_plaintext.cpu().numpy().copy())

    del d_ciphertext, d_plaintext
    device_step(RELEASE, _release, dev)
    return plaintext


def render(plaintext: np.ndarray) -> bytes:
    # Low byte of every element as one output byte, then a newline.
    return (plaintext.astype(np.int64) & 0xFF).astype(np.uint8).tobytes() + b"\n"


__all__ = [
    "ALLOCATE",
    "COPY_IN",
    "COPY_OUT",
    "LAUNCH",
    "RELEASE",
    "SYNCHRONIZE",
    "decrypt_buffer",
    "device_step",
    "render",
]
