from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Ensure repo root is importable for all tests.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _cuda_available() -> bool:
    try:
        import torch
    except Exception:
        return False
    try:
        return bool(torch.cuda.is_available())
    except Exception:
        return False


CUDA = _cuda_available()

# Without a GPU, run Triton kernels through the interpreter on CPU tensors.
# Must be set before any @triton.jit function is defined.
if not CUDA:
    os.environ.setdefault("TRITON_INTERPRET", "1")

KERNEL_DEVICE = "cuda" if CUDA else "cpu"


@pytest.fixture
def kernel_device() -> str:
    return KERNEL_DEVICE
