"""
Typed model of the solc compact-JSON AST.

solc emits a loosely structured JSON document. This module decodes it in one
pass into ``SolcNode`` records that expose the links the gas checks need
(body, statements, initialiser, operands, index access parts, declared type)
under stable attribute names. Unknown keys are ignored and missing keys
decode to ``None`` or an empty list, so a partial document still yields a
usable tree.

``src`` spans (``start:length:fileIndex``) are kept verbatim because report
locations are passed through to downstream tooling unchanged.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from gaslens.errors import CompilerOutputError

logger = logging.getLogger(__name__)

# Banner printed by `solc --ast-compact-json` before each source unit
_COMPACT_AST_RE = re.compile(r"JSON AST \(compact format\):.*?(\{.*\})", re.DOTALL)


@dataclass
class SolcNode:
    """One node of the solc compact AST."""
    node_type: str
    src: str = ""
    id: Optional[int] = None
    name: str = ""
    value: str = ""
    operator: str = ""
    member_name: str = ""
    type_string: str = ""
    state_variable: bool = False
    referenced_declaration: Optional[int] = None

    nodes: List["SolcNode"] = field(default_factory=list)
    statements: List["SolcNode"] = field(default_factory=list)
    declarations: List["SolcNode"] = field(default_factory=list)
    parameters: List["SolcNode"] = field(default_factory=list)
    return_parameters: List["SolcNode"] = field(default_factory=list)

    body: Optional["SolcNode"] = None
    expression: Optional["SolcNode"] = None
    initial_value: Optional["SolcNode"] = None
    type_name: Optional["SolcNode"] = None
    condition: Optional["SolcNode"] = None
    true_body: Optional["SolcNode"] = None
    false_body: Optional["SolcNode"] = None
    left_expression: Optional["SolcNode"] = None
    right_expression: Optional["SolcNode"] = None
    base_expression: Optional["SolcNode"] = None
    index_expression: Optional["SolcNode"] = None
    left_hand_side: Optional["SolcNode"] = None
    right_hand_side: Optional["SolcNode"] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["SolcNode"]:
        """Decode a compact-AST JSON object. Returns None for non-objects."""
        if not isinstance(data, dict):
            return None

        type_desc = data.get("typeDescriptions")
        type_string = type_desc.get("typeString") if isinstance(type_desc, dict) else ""
        ref = data.get("referencedDeclaration")
        value = data.get("value")

        return cls(
            node_type=data.get("nodeType", ""),
            src=data.get("src", ""),
            id=data.get("id"),
            name=data.get("name") or "",
            value=value if isinstance(value, str) else "",
            operator=data.get("operator") or "",
            member_name=data.get("memberName") or "",
            type_string=type_string or "",
            state_variable=bool(data.get("stateVariable", False)),
            referenced_declaration=ref if isinstance(ref, int) else None,
            nodes=_decode_list(data.get("nodes")),
            statements=_decode_list(data.get("statements")),
            declarations=_decode_list(data.get("declarations")),
            parameters=_decode_params(data.get("parameters")),
            return_parameters=_decode_params(data.get("returnParameters")),
            body=cls.from_dict(data.get("body")),
            expression=cls.from_dict(data.get("expression")),
            initial_value=cls.from_dict(data.get("initialValue")),
            type_name=cls.from_dict(data.get("typeName")),
            condition=cls.from_dict(data.get("condition")),
            true_body=cls.from_dict(data.get("trueBody")),
            false_body=cls.from_dict(data.get("falseBody")),
            left_expression=cls.from_dict(data.get("leftExpression")),
            right_expression=cls.from_dict(data.get("rightExpression")),
            base_expression=cls.from_dict(data.get("baseExpression")),
            index_expression=cls.from_dict(data.get("indexExpression")),
            left_hand_side=cls.from_dict(data.get("leftHandSide")),
            right_hand_side=cls.from_dict(data.get("rightHandSide")),
        )

    @property
    def declared_type(self) -> str:
        """Elementary name of the declared type, or "" when unknown."""
        if self.type_name is None:
            return ""
        return self.type_name.name or self.type_name.type_string

    @property
    def operand_text(self) -> str:
        """Bare name or literal value, "" for anything more complex."""
        return self.name or self.value

    def children(self) -> Iterator["SolcNode"]:
        """Structural children in source order: definitions, then statements."""
        yield from self.nodes
        yield from self.parameters
        yield from self.return_parameters
        yield from self.declarations
        if self.body is not None:
            yield self.body
        yield from self.statements
        if self.true_body is not None:
            yield self.true_body
        if self.false_body is not None:
            yield self.false_body

    def walk(self) -> Iterator["SolcNode"]:
        """Depth-first pre-order over structural children."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children())))


def _decode_list(items: Any) -> List[SolcNode]:
    if not isinstance(items, list):
        return []
    decoded = (SolcNode.from_dict(item) for item in items)
    return [node for node in decoded if node is not None]


def _decode_params(params: Any) -> List[SolcNode]:
    # FunctionDefinition carries a ParameterList object; the list itself holds the array
    if isinstance(params, dict):
        return _decode_list(params.get("parameters"))
    return _decode_list(params)


def decode_ast(document: Dict[str, Any]) -> SolcNode:
    """Decode a SourceUnit document into a typed tree."""
    try:
        root = SolcNode.from_dict(document)
    except RecursionError as e:
        raise CompilerOutputError("AST too deep to decode") from e
    if root is None or not root.node_type:
        raise CompilerOutputError("AST document has no nodeType")
    return root


def extract_ast_json(output: str) -> Dict[str, Any]:
    """Locate and parse the compact AST in `solc --ast-compact-json` console output.

    Plain JSON input (no banner) is accepted as-is.
    """
    text = output.strip()
    if not text.startswith("{"):
        match = _COMPACT_AST_RE.search(output)
        if not match:
            raise CompilerOutputError("No JSON AST found in solc output", output)
        text = match.group(1)
        logger.debug("Located compact AST after the solc banner")

    try:
        document = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise CompilerOutputError(f"Failed to decode solc AST JSON: {e}", output) from e

    if not isinstance(document, dict):
        raise CompilerOutputError("solc AST JSON is not an object", output)
    return document


def select_source_ast(output: Dict[str, Any], source_name: Optional[str] = None) -> Dict[str, Any]:
    """Pick the AST of one source unit out of standard-JSON compiler output."""
    sources = output.get("sources")
    if not isinstance(sources, dict) or not sources:
        raise CompilerOutputError("Compiler output has no sources section")

    if source_name is not None and source_name in sources:
        entry = sources[source_name]
    else:
        entry = next(iter(sources.values()))

    ast = entry.get("ast") if isinstance(entry, dict) else None
    if not isinstance(ast, dict):
        raise CompilerOutputError("Compiler output has no AST for the source unit")
    return ast


def decode_compiler_output(output: str) -> SolcNode:
    """Decode raw `solc --ast-compact-json` output into a typed tree."""
    return decode_ast(extract_ast_json(output))
