"""
Tests for the fallback parser.

Covers statement skeletons, depth-aware header and block matching, member
access nodes, and termination on malformed input.
"""

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from gaslens.lexer import tokenize
from gaslens.parser import FallbackParser, Node, NodeKind, parse_source


def kinds(nodes):
    return [n.kind for n in nodes]


class RecordingParser(FallbackParser):
    """Parser that records the cursor before and after every advance."""

    def __init__(self, tokens):
        super().__init__(tokens)
        self.steps = []

    def advance(self):
        before = self.pos
        super().advance()
        self.steps.append((before, self.pos))


class TestTopLevel(unittest.TestCase):

    def test_empty_source(self):
        root = parse_source("")
        self.assertEqual(root.kind, NodeKind.SOURCE_UNIT)
        self.assertEqual(root.children, [])

    def test_statements_in_source_order(self):
        root = parse_source("""
            while (a) { }
            if (b) { }
            for (;;) { }
        """)
        self.assertEqual(kinds(root.children), [
            NodeKind.WHILE_STATEMENT, NodeKind.IF_STATEMENT, NodeKind.FOR_STATEMENT,
        ])
        self.assertEqual([n.line for n in root.children], [2, 3, 4])

    def test_non_statement_tokens_are_skipped(self):
        root = parse_source("pragma solidity ^0.8.0; contract C { uint x; }")
        self.assertEqual(root.children, [])


class TestLoopAndConditional(unittest.TestCase):

    def test_loop_with_block(self):
        root = parse_source("for (uint i = 0; i < n; i++) { user.balance; }")
        loop = root.children[0]
        self.assertEqual(loop.kind, NodeKind.FOR_STATEMENT)
        self.assertEqual(kinds(loop.children), [NodeKind.BLOCK])
        access = loop.children[0].children[0]
        self.assertEqual(access.kind, NodeKind.MEMBER_ACCESS)
        self.assertEqual(access.value, "user")
        self.assertEqual(access.children[0].value, "balance")

    def test_nested_parens_in_header(self):
        root = parse_source("for (uint i = f(a, (b)); i < g(n); i++) { x.y; }")
        loop = root.children[0]
        self.assertEqual(len(loop.children), 1)
        block = loop.children[0]
        self.assertEqual([n.value for n in block.children], ["x"])

    def test_nested_braces_stay_in_block(self):
        root = parse_source("while (x) { { c.d; } e.f; } g.h;")
        self.assertEqual(len(root.children), 1)
        block = root.children[0].children[0]
        self.assertEqual([n.value for n in block.children], ["c", "e"])

    def test_nested_control_flow_in_any_block(self):
        root = parse_source("if (a) { while (b) { for (;;) { x.y; } } }")
        if_node = root.children[0]
        while_node = if_node.children[0].children[0]
        self.assertEqual(while_node.kind, NodeKind.WHILE_STATEMENT)
        for_node = while_node.children[0].children[0]
        self.assertEqual(for_node.kind, NodeKind.FOR_STATEMENT)

    def test_missing_paren_yields_degenerate_node(self):
        root = parse_source("for x { a.b; }")
        self.assertEqual(kinds(root.children), [NodeKind.FOR_STATEMENT])
        self.assertEqual(root.children[0].children, [])

    def test_missing_block_yields_empty_statement(self):
        root = parse_source("if (a) return;")
        self.assertEqual(root.children[0].children, [])

    def test_block_line_is_opening_brace_line(self):
        root = parse_source("for (;;)\n{\n x.y;\n}")
        self.assertEqual(root.children[0].line, 1)
        self.assertEqual(root.children[0].children[0].line, 2)


class TestFunction(unittest.TestCase):

    def test_function_name_and_body(self):
        root = parse_source("""
            function accrue(uint256 n) external view returns (uint256 total) {
                for (uint i = 0; i < n; i++) { total += user.balance; }
            }
        """)
        func = root.children[0]
        self.assertEqual(func.kind, NodeKind.FUNCTION_DEFINITION)
        self.assertEqual(func.value, "accrue")
        body = func.children[0]
        self.assertEqual(body.kind, NodeKind.BLOCK)
        self.assertEqual(kinds(body.children), [NodeKind.FOR_STATEMENT])

    def test_modifier_with_arguments_in_header(self):
        root = parse_source("function f() onlyRole(ADMIN) { a.b; }")
        body = root.children[0].children[0]
        self.assertEqual([n.value for n in body.children], ["a"])

    def test_function_without_body(self):
        root = parse_source("function f(uint a) external; for (;;) { }")
        self.assertEqual(kinds(root.children), [NodeKind.FUNCTION_DEFINITION, NodeKind.FOR_STATEMENT])
        self.assertEqual(root.children[0].children, [])

    def test_anonymous_function(self):
        root = parse_source("function () { x.y; }")
        func = root.children[0]
        self.assertEqual(func.value, "")
        self.assertEqual(len(func.children), 1)

    def test_body_identifiers_become_accesses(self):
        root = parse_source("function f() { a = b.c; }")
        body = root.children[0].children[0]
        self.assertEqual([(n.value, len(n.children)) for n in body.children], [("a", 0), ("b", 1)])


class TestMemberAccess(unittest.TestCase):

    def test_chained_access(self):
        root = parse_source("if (x) { a.b.c; }")
        block = root.children[0].children[0]
        self.assertEqual([n.value for n in block.children], ["a", "c"])
        self.assertEqual(block.children[0].children[0].value, "b")

    def test_dot_without_member(self):
        root = parse_source("if (x) { a.; }")
        block = root.children[0].children[0]
        self.assertEqual(block.children[0].value, "a")
        self.assertEqual(block.children[0].children, [])


class TestMalformedInput(unittest.TestCase):
    """The parser must terminate and advance on every step"""

    MALFORMED = [
        "",
        "for",
        "for (",
        "for (((((",
        "while (a { b.c;",
        "if (a) { { { x.y;",
        "function",
        "function f(",
        "function f() public returns (uint",
        "}}}} )))) {{{{",
        "for (;;) } } while",
        "function f() { for (i; i < (n; i++) { a.b; }",
    ]

    def test_terminates_and_advances(self):
        for source in self.MALFORMED:
            with self.subTest(source=source):
                tokens = tokenize(source)
                parser = RecordingParser(tokens)
                root = parser.parse()
                self.assertIsInstance(root, Node)
                self.assertTrue(parser.at_end())
                self.assertEqual(parser.pos, len(tokens))
                for before, after in parser.steps:
                    self.assertGreater(after, before)

    def test_unbalanced_header_consumes_rest(self):
        root = parse_source("for (a (b) { x.y; }")
        self.assertEqual(len(root.children), 1)
        self.assertEqual(root.children[0].children, [])


class TestWalk(unittest.TestCase):

    def test_pre_order(self):
        root = parse_source("function f() { for (;;) { a.b; } c.d; }")
        order = [(n.kind, n.value) for n in root.walk()]
        self.assertEqual(order, [
            (NodeKind.SOURCE_UNIT, ""),
            (NodeKind.FUNCTION_DEFINITION, "f"),
            (NodeKind.BLOCK, ""),
            (NodeKind.FOR_STATEMENT, ""),
            (NodeKind.BLOCK, ""),
            (NodeKind.MEMBER_ACCESS, "a"),
            (NodeKind.IDENTIFIER, "b"),
            (NodeKind.MEMBER_ACCESS, "c"),
            (NodeKind.IDENTIFIER, "d"),
        ])


if __name__ == '__main__':
    unittest.main()
