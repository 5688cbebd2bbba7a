"""
Error types for GasLens.

Only compiler-side failures are represented here. Both are recoverable: the
tree adapter catches them and falls back to the built-in parser, keeping the
exception around so callers can tell why the richer tree was not used.
"""


class GasLensError(Exception):
    """Base class for all GasLens errors."""


class CompilerUnavailableError(GasLensError):
    """solc could not be invoked or exited with a failure.

    Covers a missing py-solc-x install, no installed compiler binary, a
    process error and compilation errors reported by solc itself.
    """


class CompilerOutputError(GasLensError):
    """solc ran but its output could not be located or decoded."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output
