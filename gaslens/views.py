"""
Unified analysis views over the two tree shapes.

The gas checks never look at a concrete tree. They ask a ``SourceTree`` for a
small closed set of views (loops, declarations, binary expressions, cached
accesses) and each tree shape answers from its own schema:

* ``FallbackTree`` wraps the built-in parser's ``Node`` tree. It has no type
  annotations and no expression trees, so it answers ``None`` ("not
  applicable") for declarations and function expression scopes.
* ``CompilerTree`` wraps the typed solc AST.

Locations are copied from the tree without reformatting: ``line N`` for the
fallback tree, the solc ``src`` span for the compiler tree.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional

from gaslens.parser import LOOP_KINDS, Node, NodeKind
from gaslens.solc_ast import SolcNode

SOLC_LOOP_TYPES = ("ForStatement", "WhileStatement", "DoWhileStatement")


class TreeOrigin(Enum):
    """Which producer built a tree"""
    COMPILER = "compiler"
    FALLBACK = "fallback"


class AccessStyle(Enum):
    MEMBER = "member"  # base.member
    INDEX = "index"    # base[index]


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AccessView:
    """A storage access cached into a local (or read) inside a loop."""
    base: str
    key: str
    style: AccessStyle

    @property
    def label(self) -> str:
        if self.style is AccessStyle.INDEX:
            return f"{self.base}[{self.key}]"
        return f"{self.base}.{self.key}"


@dataclass(frozen=True)
class LoopView:
    body: Any  # concrete body node, opaque to the checks
    location: str


@dataclass(frozen=True)
class DeclarationView:
    name: str
    declared_type: Optional[str]
    location: str


@dataclass(frozen=True)
class BinaryExprView:
    left: str
    operator: str
    right: str

    @property
    def label(self) -> str:
        return f"{self.left} {self.operator} {self.right}"


@dataclass
class FunctionScope:
    """Binary expressions collected from one function body."""
    name: str
    location: str
    expressions: List[BinaryExprView] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Tree interface
# ---------------------------------------------------------------------------

class SourceTree(ABC):
    """A parsed source unit, projectable into analysis views."""

    origin: TreeOrigin

    @abstractmethod
    def loops(self) -> Iterator[LoopView]:
        """Every loop in the tree, depth-first pre-order."""

    @abstractmethod
    def cached_accesses(self, loop: LoopView) -> Iterator[AccessView]:
        """Accesses found anywhere in a loop body, in source order."""

    def declarations(self) -> Optional[List[DeclarationView]]:
        """Variable declarations with their declared type, or None if not applicable."""
        return None

    def function_scopes(self) -> Optional[List[FunctionScope]]:
        """Per-function binary expressions, or None if not applicable."""
        return None


class FallbackTree(SourceTree):
    """Views over the built-in parser's tree."""

    origin = TreeOrigin.FALLBACK

    def __init__(self, root: Node, fallback_reason: Optional[Exception] = None):
        self.root = root
        self.fallback_reason = fallback_reason

    def loops(self) -> Iterator[LoopView]:
        for node in self.root.walk():
            if node.kind in LOOP_KINDS:
                yield LoopView(body=node, location=f"line {node.line}")

    def cached_accesses(self, loop: LoopView) -> Iterator[AccessView]:
        body: Node = loop.body
        for node in body.walk():
            if node is body:
                continue
            if node.kind is NodeKind.MEMBER_ACCESS and node.children:
                yield AccessView(base=node.value, key=node.children[0].value, style=AccessStyle.MEMBER)


class CompilerTree(SourceTree):
    """Views over the typed solc AST."""

    origin = TreeOrigin.COMPILER
    fallback_reason = None

    def __init__(self, root: SolcNode):
        self.root = root

    def loops(self) -> Iterator[LoopView]:
        for node in self.root.walk():
            if node.node_type in SOLC_LOOP_TYPES:
                yield LoopView(body=node.body, location=node.src)

    def cached_accesses(self, loop: LoopView) -> Iterator[AccessView]:
        if loop.body is None:
            return
        for node in loop.body.walk():
            if node.node_type != "VariableDeclarationStatement":
                continue
            access = _index_access(node.initial_value)
            if access is not None:
                yield access

    def declarations(self) -> Optional[List[DeclarationView]]:
        result: List[DeclarationView] = []
        for node in self.root.walk():
            if node.node_type == "VariableDeclaration":
                result.append(DeclarationView(
                    name=node.name,
                    declared_type=node.declared_type or None,
                    location=node.src,
                ))
        return result

    def function_scopes(self) -> Optional[List[FunctionScope]]:
        scopes: List[FunctionScope] = []
        for node in self.root.walk():
            if node.node_type == "FunctionDefinition" and node.body is not None:
                scope = FunctionScope(name=node.name, location=node.src)
                _collect_binary_expressions(node.body, scope.expressions)
                scopes.append(scope)
        return scopes


def _index_access(node: Optional[SolcNode]) -> Optional[AccessView]:
    if node is None or node.node_type != "IndexAccess":
        return None
    if node.base_expression is None or node.index_expression is None:
        return None
    base = node.base_expression.operand_text
    index = node.index_expression.operand_text
    if not base or not index:
        return None
    return AccessView(base=base, key=index, style=AccessStyle.INDEX)


def _collect_binary_expressions(node: Optional[SolcNode], out: List[BinaryExprView]) -> None:
    """Collect simple binary operations, pre-order, anywhere under node.

    Equality is textual on the immediate operands only: ``a * 2`` and
    ``2 * a`` are different keys. Nested operands are still searched for
    candidates of their own.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        if current is None:
            continue

        if current.node_type == "BinaryOperation" and current.left_expression and current.right_expression:
            left = current.left_expression.operand_text
            right = current.right_expression.operand_text
            if left and right:
                out.append(BinaryExprView(left=left, operator=current.operator, right=right))

        following = [current.left_expression, current.right_expression, current.initial_value]
        if current.node_type in ("Return", "ExpressionStatement"):
            following.append(current.expression)
        if current.node_type == "Assignment":
            following.append(current.right_hand_side)
        following.extend(current.statements)
        following.extend((current.body, current.true_body, current.false_body))
        # reversed so the stack pops them in source order
        stack.extend(reversed(following))
