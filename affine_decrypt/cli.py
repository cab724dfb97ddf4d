from __future__ import annotations

import argparse
import os
import sys
from typing import Optional, Sequence

from affine_decrypt.cipher import DEFAULT_PARAMS
from affine_decrypt.errors import DecryptError, InputNotFoundError, ShortInputError
from affine_decrypt.kernel import launch_config
from affine_decrypt.loader import DEFAULT_INPUT, N_ELEMENTS, load_ciphertext
from affine_decrypt.pipeline import decrypt_buffer, render

DEFAULT_GROUPS = 8

EXIT_FAILURE = 1
EXIT_MISSING_INPUT = 2
EXIT_SHORT_INPUT = 3


def _exit_code(e: DecryptError) -> int:
    if isinstance(e, InputNotFoundError):
        return EXIT_MISSING_INPUT
    if isinstance(e, ShortInputError):
        return EXIT_SHORT_INPUT
    return EXIT_FAILURE


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="affine-decrypt", description="Decrypt an affine-cipher buffer on the GPU.")
    ap.add_argument(
        "--input",
        default=os.getenv("AFFINE_DECRYPT_INPUT", DEFAULT_INPUT),
        help=f"ciphertext file of {N_ELEMENTS} little-endian int32 values (default: {DEFAULT_INPUT})",
    )
    ap.add_argument(
        "--device",
        default=os.getenv("AFFINE_DECRYPT_DEVICE", "cuda"),
        help="torch device the kernel runs on (default: cuda)",
    )
    ap.add_argument("--groups", type=int, default=DEFAULT_GROUPS, help="number of kernel programs (default: 8)")
    return ap


def _groups_problem(groups: int) -> Optional[str]:
    if groups <= 0:
        return f"--groups must be positive, got {groups}"
    if N_ELEMENTS % groups:
        return f"--groups {groups} does not split {N_ELEMENTS} elements evenly"
    lanes = N_ELEMENTS // groups
    if lanes & (lanes - 1):
        return f"--groups {groups} gives {lanes} lanes per group, which is not a power of two"
    return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    # Extra positional arguments are tolerated and ignored.
    args, _unused = ap.parse_known_args(argv)
    problem = _groups_problem(args.groups)
    if problem:
        ap.error(problem)
    config = launch_config(N_ELEMENTS, args.groups)
    try:
        ciphertext = load_ciphertext(args.input, N_ELEMENTS)
        plaintext = decrypt_buffer(ciphertext, DEFAULT_PARAMS, config, device=args.device)
    except DecryptError as e:
        print(str(e), file=sys.stderr)
        return _exit_code(e)
    sys.stdout.flush()
    sys.stdout.buffer.write(render(plaintext))
    sys.stdout.buffer.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
