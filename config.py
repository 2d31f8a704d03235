import os
from typing import List, Mapping, Optional

CFLAGS_ENV_VAR = "PARSEH_CFLAGS"
LIBCLANG_ENV_VAR = "LIBCLANG_PATH"


def split_cflags(value: str) -> List[str]:
    """Splits a flag string on single spaces, dropping the empty tokens."""
    return [token for token in value.split(" ") if token]


def clang_args(include_dirs: Optional[List[str]] = None,
               defines: Optional[List[str]] = None,
               extra: Optional[List[str]] = None,
               environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    Builds the compiler flags handed to libclang.

    Command-line flags come first, then the contents of ``PARSEH_CFLAGS`` in
    their original order.
    """
    environ = os.environ if environ is None else environ
    args = [f"-I{d}" for d in include_dirs or []]
    args += [f"-D{d}" for d in defines or []]
    args += list(extra or [])
    env_flags = environ.get(CFLAGS_ENV_VAR)
    if env_flags:
        args += split_cflags(env_flags)
    return args


def libclang_path(cli_value: Optional[str] = None,
                  environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    environ = os.environ if environ is None else environ
    return cli_value or environ.get(LIBCLANG_ENV_VAR) or None
