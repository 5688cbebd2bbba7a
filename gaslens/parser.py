"""
Fallback Solidity parser.

Used when solc is unavailable or fails. It builds a deliberately small tree:
loop, conditional and function skeletons plus the identifiers and member
accesses found in their bodies. Everything else is skipped.

The parser never raises. Incomplete constructs produce partial or empty
nodes and parsing carries on. Every step consumes at least one token, so
it always terminates.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from gaslens.lexer import Lexer, Token, TokenKind

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    """Fallback tree node tags"""
    SOURCE_UNIT = "SourceUnit"
    FOR_STATEMENT = "ForStatement"
    WHILE_STATEMENT = "WhileStatement"
    IF_STATEMENT = "IfStatement"
    FUNCTION_DEFINITION = "FunctionDefinition"
    BLOCK = "Block"
    MEMBER_ACCESS = "MemberAccess"
    IDENTIFIER = "Identifier"


LOOP_KINDS = (NodeKind.FOR_STATEMENT, NodeKind.WHILE_STATEMENT)

CONTROL_KEYWORDS = {
    "for": NodeKind.FOR_STATEMENT,
    "while": NodeKind.WHILE_STATEMENT,
    "if": NodeKind.IF_STATEMENT,
}


@dataclass
class Node:
    """A node of the fallback tree"""
    kind: NodeKind
    value: str = ""
    children: List["Node"] = field(default_factory=list)
    line: int = 0

    def walk(self):
        """Yield this node and its descendants, depth-first pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


class FallbackParser:
    """Recursive-descent builder over a token stream with one token of lookahead."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @property
    def current(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def advance(self) -> None:
        if self.pos < len(self.tokens):
            self.pos += 1

    def _at(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        tok = self.current
        if tok is None or tok.kind is not kind:
            return False
        return text is None or tok.text == text

    def _at_punct(self, text: str) -> bool:
        return self._at(TokenKind.PUNCTUATION, text)

    def _line(self) -> int:
        tok = self.current
        if tok is not None:
            return tok.line
        return self.tokens[-1].line if self.tokens else 0

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def parse(self) -> Node:
        """Build the fallback tree from the whole token stream."""
        root = Node(NodeKind.SOURCE_UNIT, line=1)
        while not self.at_end():
            tok = self.current
            if tok.kind is TokenKind.KEYWORD and tok.text in CONTROL_KEYWORDS:
                root.children.append(self._parse_control(CONTROL_KEYWORDS[tok.text]))
            elif tok.kind is TokenKind.KEYWORD and tok.text == "function":
                root.children.append(self._parse_function())
            else:
                self.advance()
        logger.debug("Fallback parser built %d top-level statements from %d tokens",
                     len(root.children), len(self.tokens))
        return root

    # ------------------------------------------------------------------
    # Statement builders
    # ------------------------------------------------------------------

    def _parse_control(self, kind: NodeKind) -> Node:
        """Parse for/while/if: keyword, parenthesised header, optional block."""
        node = Node(kind, line=self._line())
        self.advance()  # keyword

        if not self._at_punct("("):
            return node
        self._skip_balanced("(", ")")

        if self._at_punct("{"):
            node.children.append(self._parse_block())
        return node

    def _parse_function(self) -> Node:
        """Parse a function: optional name, skipped header, optional body."""
        node = Node(NodeKind.FUNCTION_DEFINITION, line=self._line())
        self.advance()  # 'function'

        if self._at(TokenKind.IDENTIFIER):
            node.value = self.current.text
            self.advance()

        if self._at_punct("("):
            self._skip_balanced("(", ")")

        # visibility, mutability, modifiers and returns (...) up to the body
        while not self.at_end():
            tok = self.current
            if tok.kind is TokenKind.PUNCTUATION and tok.text in ("{", "}"):
                break
            if tok.kind is TokenKind.OPERATOR and tok.text == ";":
                self.advance()
                return node
            if tok.kind is TokenKind.KEYWORD and (tok.text in CONTROL_KEYWORDS or tok.text == "function"):
                return node
            if tok.kind is TokenKind.PUNCTUATION and tok.text == "(":
                self._skip_balanced("(", ")")
                continue
            self.advance()

        if self._at_punct("{"):
            node.children.append(self._parse_block())
        return node

    def _parse_block(self) -> Node:
        """Parse a brace-delimited block up to its matching close brace."""
        block = Node(NodeKind.BLOCK, line=self._line())
        self.advance()  # '{'
        depth = 1

        while not self.at_end():
            tok = self.current
            if tok.kind is TokenKind.PUNCTUATION and tok.text == "{":
                depth += 1
                self.advance()
            elif tok.kind is TokenKind.PUNCTUATION and tok.text == "}":
                depth -= 1
                self.advance()
                if depth == 0:
                    break
            elif tok.kind is TokenKind.KEYWORD and tok.text in CONTROL_KEYWORDS:
                block.children.append(self._parse_control(CONTROL_KEYWORDS[tok.text]))
            elif tok.kind is TokenKind.IDENTIFIER:
                block.children.append(self._parse_access())
            else:
                self.advance()
        return block

    def _parse_access(self) -> Node:
        """Parse an identifier and an optional `.member` projection."""
        tok = self.current
        node = Node(NodeKind.MEMBER_ACCESS, value=tok.text, line=tok.line)
        self.advance()

        if self._at(TokenKind.OPERATOR, "."):
            self.advance()
            if self._at(TokenKind.IDENTIFIER):
                member = self.current
                node.children.append(Node(NodeKind.IDENTIFIER, value=member.text, line=member.line))
                self.advance()
        return node

    def _skip_balanced(self, opener: str, closer: str) -> None:
        """Skip from an opener through its matching closer, counting nesting depth."""
        self.advance()  # opener
        depth = 1
        while not self.at_end():
            tok = self.current
            self.advance()
            if tok.kind is TokenKind.PUNCTUATION:
                if tok.text == opener:
                    depth += 1
                elif tok.text == closer:
                    depth -= 1
                    if depth == 0:
                        return


def parse_source(source: str) -> Node:
    """Tokenize and parse source into a fallback tree."""
    return FallbackParser(Lexer().tokenize(source)).parse()
