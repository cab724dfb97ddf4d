import numpy as np
import pytest

from affine_decrypt.cipher import DEFAULT_PARAMS, encrypt_text
from affine_decrypt.errors import DeviceError
from affine_decrypt.kernel import launch_config
from affine_decrypt.pipeline import ALLOCATE, LAUNCH, SYNCHRONIZE, decrypt_buffer, device_step, render


def test_decrypt_buffer_end_to_end(kernel_device):
    text = ("Hello, GPU! " * 100)[:1024]
    ciphertext = np.asarray(encrypt_text(text), dtype=np.int32)
    plaintext = decrypt_buffer(ciphertext, DEFAULT_PARAMS, launch_config(1024, 8), device=kernel_device)
    assert render(plaintext) == text.encode("ascii") + b"\n"


def test_decrypt_buffer_leaves_input_untouched(kernel_device):
    ciphertext = np.full(1024, 106, dtype=np.int32)
    decrypt_buffer(ciphertext, DEFAULT_PARAMS, launch_config(1024, 8), device=kernel_device)
    assert (ciphertext == 106).all()


def test_decrypt_buffer_asserts_coverage():
    with pytest.raises(AssertionError):
        decrypt_buffer(np.zeros(512, dtype=np.int32), DEFAULT_PARAMS, launch_config(1024, 8), device="cpu")


def test_device_step_tags_failures():
    def boom():
        raise RuntimeError("invalid device ordinal")

    with pytest.raises(DeviceError) as ei:
        device_step(LAUNCH, boom)
    assert ei.value.step == LAUNCH
    assert str(ei.value) == "CUDA ERROR: launching decrypt kernel: invalid device ordinal."


def test_device_step_passes_results_through():
    assert device_step(LAUNCH, lambda a, b=0: a + b, 1, b=2) == 3


def test_unknown_device_is_a_device_error():
    with pytest.raises(DeviceError):
        decrypt_buffer(np.zeros(1024, dtype=np.int32), DEFAULT_PARAMS, launch_config(1024, 8), device="no-such-device")


def test_render_uses_low_byte():
    assert render(np.array([65, 65 + 256, 66 - 512], dtype=np.int32)) == b"AAB\n"


def test_render_keeps_high_bytes_single():
    assert render(np.array([200, 255, 128], dtype=np.int32)) == b"\xc8\xff\x80\n"


def test_device_error_keeps_first_line_of_torch_text():
    def boom():
        raise RuntimeError(
            "CUDA error: an illegal memory access was encountered.\n"
            "CUDA kernel errors might be asynchronously reported at some other API call.\n"
        )

    with pytest.raises(DeviceError) as ei:
        device_step(SYNCHRONIZE, boom)
    assert str(ei.value) == "CUDA ERROR: waiting for decrypt kernel: CUDA error: an illegal memory access was encountered."


def test_assertions_outside_allocation_are_not_device_errors():
    def bad_launch():
        raise AssertionError("launch covers 512 lanes for 1024 elements")

    with pytest.raises(AssertionError):
        device_step(LAUNCH, bad_launch)


def test_torch_without_cuda_is_an_allocation_error():
    def no_cuda():
        raise AssertionError("Torch not compiled with CUDA enabled")

    with pytest.raises(DeviceError) as ei:
        device_step(ALLOCATE, no_cuda)
    assert str(ei.value) == "CUDA ERROR: allocating device buffers: Torch not compiled with CUDA enabled."
