#!/usr/bin/env python3
import argparse
import sys
from typing import List, Optional

# Ensure libclang is installed:
# pip install libclang
from clang.cindex import LibclangError

from clang_provider import ClangDecl, configure_libclang, parse_translation_unit
from config import clang_args, libclang_path
from decl_collector import collect
from diagnostics import Diagnostics, FatalDiagnostic, ParsehError
from emitter import emit
from out_types import Function
from type_classifier import TypeClassifier


def collect_functions(root, diagnostics: Diagnostics) -> List[Function]:
    """Runs the collector over a declaration tree (a ``Decl`` or ``ClangDecl``)."""
    functions = collect(root, TypeClassifier(diagnostics))
    diagnostics.debug(f"Functions: {len(functions)}, warnings: {len(diagnostics.warnings)}")
    return functions


def translate_header(header_path: str, c_args: Optional[List[str]] = None,
                     diagnostics: Optional[Diagnostics] = None) -> List[Function]:
    """Parses a C header and returns the functions its extern block declares."""
    diagnostics = diagnostics or Diagnostics()
    tu = parse_translation_unit(header_path, c_args, diagnostics)
    return collect_functions(ClangDecl(tu.cursor), diagnostics)


# --- Main Execution ---
def main(argv: Optional[List[str]] = None):
    """Command-line interface for the extern block generator."""
    parser = argparse.ArgumentParser(
        description="Generate extern function declarations from a C header file."
    )
    parser.add_argument("header", help="Path to the C header file to parse.")
    parser.add_argument(
        "-o", "--output", default="-",
        help="Path to the output file (default: standard output)."
    )
    parser.add_argument(
        "-I", dest="include_dirs", action="append", default=[],
        help="Add a directory to the Clang include path (e.g., -I/usr/include)."
    )
    parser.add_argument(
        "-D", dest="defines", action="append", default=[],
        help="Define a preprocessor macro (e.g., -DFOO=1)."
    )
    parser.add_argument(
        "--libclang", default=None,
        help="Path to the libclang shared library (default: $LIBCLANG_PATH or the bundled one)."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Print debug traces to standard error."
    )

    args = parser.parse_args(argv)

    diagnostics = Diagnostics(verbose=args.verbose)
    configure_libclang(libclang_path(args.libclang))
    c_args = clang_args(args.include_dirs, args.defines)

    try:
        functions = translate_header(args.header, c_args, diagnostics)
    except FatalDiagnostic as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    except (FileNotFoundError, ParsehError, LibclangError) as e:
        print(f"An error occurred: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output == "-":
        emit(functions, sys.stdout)
    else:
        with open(args.output, "w") as f:
            emit(functions, f)
        diagnostics.debug(f"Successfully generated bindings at: {args.output}")


if __name__ == "__main__":
    main()
