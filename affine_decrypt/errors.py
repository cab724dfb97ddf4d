from __future__ import annotations


class DecryptError(Exception):
    """Base class for every fatal condition of a decrypt run."""


class InputNotFoundError(DecryptError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Error: Could not find {path} file")


class ShortInputError(DecryptError):
    def __init__(self, path, expected: int, found: int):
        self.path = path
        self.expected = expected
        self.found = found
        super().__init__(f"Error: {path} holds {found} of {expected} elements")


def _first_line(text: str) -> str:
    # torch error text can span several lines and end in its own period
    lines = str(text).strip().splitlines()
    return (lines[0] if lines else "").rstrip(".")


class DeviceError(DecryptError):
    """A failed allocation, transfer, launch, synchronize or release on the device."""

    def __init__(self, step: str, description: str):
        self.step = step
        self.description = description
        super().__init__(f"CUDA ERROR: {step}: {_first_line(description)}.")


__all__ = ["DecryptError", "InputNotFoundError", "ShortInputError", "DeviceError"]
