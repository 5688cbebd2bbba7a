"""
Tree adapter: compiler AST when possible, fallback parse otherwise.

Falls back to the built-in lexer and parser when solc is unavailable, fails,
or produces output that cannot be located or decoded, so callers always get
a tree. The fallback runs once and its result is final however sparse it is.
"""

import logging
from typing import Optional

from gaslens.compiler import SolcCompiler
from gaslens.errors import CompilerOutputError, CompilerUnavailableError
from gaslens.parser import parse_source
from gaslens.solc_ast import decode_ast, decode_compiler_output
from gaslens.views import CompilerTree, FallbackTree, SourceTree

logger = logging.getLogger(__name__)


def load_tree(
    source: str,
    compiler: Optional[SolcCompiler] = None,
    use_compiler: bool = True,
) -> SourceTree:
    """Build the richest tree available for source.

    Args:
        source: Solidity source text.
        compiler: Compiler wrapper to use; a default one is created if omitted.
        use_compiler: Skip solc entirely and parse with the fallback parser.
    """
    if not use_compiler:
        logger.info("Compiler disabled, using fallback parser")
        return fallback_tree(source)

    compiler = compiler or SolcCompiler()
    try:
        document = compiler.compile_ast(source)
        return CompilerTree(decode_ast(document))
    except CompilerUnavailableError as e:
        logger.warning(f"solc unavailable or failed ({e}), falling back to built-in parser")
        return fallback_tree(source, e)
    except CompilerOutputError as e:
        logger.warning(f"Unexpected solc output ({e}), falling back to built-in parser")
        return fallback_tree(source, e)


def tree_from_compiler_output(source: str, output: Optional[str]) -> SourceTree:
    """Decode captured `solc --ast-compact-json` output, or fall back when absent or unusable."""
    if output is None:
        return fallback_tree(source, CompilerUnavailableError("No compiler output available"))
    try:
        return CompilerTree(decode_compiler_output(output))
    except CompilerOutputError as e:
        logger.warning(f"Unexpected solc output ({e}), falling back to built-in parser")
        return fallback_tree(source, e)


def fallback_tree(source: str, reason: Optional[Exception] = None) -> FallbackTree:
    return FallbackTree(parse_source(source), fallback_reason=reason)
