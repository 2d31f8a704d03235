import sys
from typing import List, Optional, TextIO

from c_types import SourceLocation, UNKNOWN_LOCATION


class ParsehError(RuntimeError):
    """Base class for every error that ends a translation run."""


class FatalDiagnostic(ParsehError):
    """A location-tagged error that aborts the whole run."""

    def __init__(self, location: Optional[SourceLocation], message: str):
        self.location = location or UNKNOWN_LOCATION
        self.message = message
        super().__init__(f"{self.location}: {message}")


class UnsupportedTypeError(FatalDiagnostic):
    """The classifier reached a C type kind that has no mapping."""


class ToolingLimitationError(FatalDiagnostic):
    """A type stayed unclassifiable even after canonicalization."""


class SourceDiagnosticsError(ParsehError):
    """The AST provider reported diagnostics for the input file."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"{count} diagnostic(s) reported while parsing")


class ContractViolation(AssertionError):
    """The declaration event stream broke the collector's protocol."""


class Diagnostics:
    """
    Location-aware reporting to an error stream.

    Warnings are printed and kept in ``warnings`` so callers (and tests) can
    inspect what was skipped. Fatal diagnostics are raised, never printed here;
    the command-line boundary prints them once before exiting.
    """

    def __init__(self, stream: Optional[TextIO] = None, verbose: bool = False):
        self.stream = stream
        self.verbose = verbose
        self.warnings: List[str] = []

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stderr

    def report(self, location: Optional[SourceLocation], message: str):
        print(f"{location or UNKNOWN_LOCATION}: {message}", file=self._out())

    def warn(self, location: Optional[SourceLocation], message: str):
        self.warnings.append(message)
        self.report(location, f"warning: {message}")

    def debug(self, message: str):
        if self.verbose:
            print(f"DEBUG: {message}", file=self._out())
