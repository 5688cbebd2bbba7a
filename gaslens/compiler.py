"""
solc driver.

Compiles a single source string through py-solc-x and returns the compact AST
of that source unit. Every failure is reported as one of the two recoverable
errors in ``gaslens.errors`` so the adapter can fall back to the built-in
parser.
"""

import logging
from typing import Any, Dict, Optional

from gaslens.errors import CompilerOutputError, CompilerUnavailableError
from gaslens.solc_ast import select_source_ast

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_NAME = "Contract.sol"


class SolcCompiler:
    """Thin wrapper around py-solc-x standard-JSON compilation."""

    def __init__(self, solc_version: str = "0.8.30"):
        # YAML may hand over a float such as 0.8
        self.solc_version = str(solc_version)
        try:
            import solcx
            self._solcx = solcx
        except ImportError:
            self._solcx = None

    @property
    def available(self) -> bool:
        """Whether py-solc-x is importable."""
        return self._solcx is not None

    def compile_ast(self, source: str, source_name: str = DEFAULT_SOURCE_NAME) -> Dict[str, Any]:
        """Compile source and return its compact AST document.

        Raises:
            CompilerUnavailableError: solc could not run or rejected the source.
            CompilerOutputError: solc ran but produced no usable AST.
        """
        output = self._compile_standard(source, source_name)

        errors = [e for e in output.get("errors", []) if e.get("severity") == "error"]
        if errors:
            first = errors[0]
            message = first.get("formattedMessage", first.get("message", "unknown error"))
            raise CompilerUnavailableError(f"solc reported {len(errors)} error(s): {message}")

        return select_source_ast(output, source_name)

    def _compile_standard(self, source: str, source_name: str) -> Dict[str, Any]:
        solcx = self._solcx
        if solcx is None:
            raise CompilerUnavailableError("py-solc-x is not installed")

        input_json: Dict[str, Any] = {
            "language": "Solidity",
            "sources": {source_name: {"content": source}},
            "settings": {
                "outputSelection": {
                    "*": {"": ["ast"]},
                },
            },
        }

        logger.debug(f"Compiling {source_name} with solc {self.solc_version}")
        try:
            solcx.set_solc_version(self.solc_version)
            output = solcx.compile_standard(input_json, allow_empty=True)
        except solcx.exceptions.SolcNotInstalled as e:
            raise CompilerUnavailableError(f"solc {self.solc_version} is not installed: {e}") from e
        except solcx.exceptions.SolcError as e:
            raise CompilerUnavailableError(f"solc failed: {e}") from e
        except OSError as e:
            raise CompilerUnavailableError(f"Could not run solc: {e}") from e
        except ValueError as e:
            # packaging InvalidVersion and solcx UnsupportedVersionError
            raise CompilerUnavailableError(f"Invalid solc version {self.solc_version!r}: {e}") from e

        if not isinstance(output, dict):
            raise CompilerOutputError(f"Unexpected solc output type: {type(output).__name__}")
        return output


def compile_to_ast(source: str, solc_version: Optional[str] = None) -> Dict[str, Any]:
    """Compile source with a fresh compiler wrapper."""
    compiler = SolcCompiler(solc_version) if solc_version else SolcCompiler()
    return compiler.compile_ast(source)
