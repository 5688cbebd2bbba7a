"""
Solidity Lexer

Turns raw Solidity source into a flat token stream for the fallback parser.
Symbols are matched longest-first, so multi-character operators such as
``++`` or ``<=`` always come out as a single token.

Limitations: block comments and string literals are not modelled. A ``//``
comment ends the current line.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class TokenKind(Enum):
    """Token categories"""
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    NUMBER = "number"


@dataclass(frozen=True)
class Token:
    """A single lexical token"""
    kind: TokenKind
    text: str
    line: int  # 1-based


KEYWORDS = frozenset({
    "for", "while", "if", "else", "function", "return", "returns",
    "uint", "mapping", "public", "private", "internal", "external",
    "view", "pure", "payable", "memory", "storage", "calldata",
})

OPERATORS = (
    "**=", "<<=", ">>=",
    "++", "--", "**", "==", "!=", "<=", ">=", "&&", "||", "<<", ">>",
    "+=", "-=", "*=", "/=", "%=", "|=", "&=", "^=", "=>",
    "=", ".", ";", "<", ">", "+", "-", "*", "/", "%", "!", "&", "|",
    "^", "~", "?", ":",
)

PUNCTUATION = ("(", ")", "{", "}", "[", "]", ",")

LINE_COMMENT = "//"

_NUMBER_RE = re.compile(r"(?:[0-9]+(?:_[0-9]+)*|0[xX][0-9a-fA-F]+)")


class Lexer:
    """Tokenizes Solidity source line by line"""

    def __init__(self, keywords: Optional[frozenset] = None):
        self.keywords = keywords if keywords is not None else KEYWORDS
        self.symbols = self._initialize_symbol_table()

    def _initialize_symbol_table(self) -> List[Tuple[str, TokenKind]]:
        """Build the symbol table, longest symbol first (maximal munch)"""
        table = [(LINE_COMMENT, None)]
        table.extend((op, TokenKind.OPERATOR) for op in OPERATORS)
        table.extend((p, TokenKind.PUNCTUATION) for p in PUNCTUATION)
        # sorted() is stable, so equal-length symbols keep declaration order
        return sorted(table, key=lambda entry: len(entry[0]), reverse=True)

    def tokenize(self, source: str) -> List[Token]:
        """Tokenize the whole source into an ordered token list"""
        tokens: List[Token] = []
        for line_number, line in enumerate(source.split("\n"), start=1):
            tokens.extend(self._tokenize_line(line, line_number))
        return tokens

    def _tokenize_line(self, line: str, line_number: int) -> List[Token]:
        tokens: List[Token] = []
        pending = ""
        i = 0
        while i < len(line):
            char = line[i]

            if char.isspace():
                if pending:
                    tokens.append(self._classify(pending, line_number))
                    pending = ""
                i += 1
                continue

            symbol = self._match_symbol(line, i)
            if symbol is None:
                pending += char
                i += 1
                continue

            text, kind = symbol
            if pending:
                tokens.append(self._classify(pending, line_number))
                pending = ""
            if kind is None:
                # rest of the line is a comment
                return tokens
            tokens.append(Token(kind, text, line_number))
            i += len(text)

        if pending:
            tokens.append(self._classify(pending, line_number))
        return tokens

    def _match_symbol(self, line: str, position: int) -> Optional[Tuple[str, Optional[TokenKind]]]:
        """Return the longest known symbol starting at position, if any"""
        for text, kind in self.symbols:
            if line.startswith(text, position):
                return text, kind
        return None

    def _classify(self, text: str, line_number: int) -> Token:
        """Classify a flushed buffer as keyword, number or identifier"""
        if text in self.keywords:
            return Token(TokenKind.KEYWORD, text, line_number)
        if _NUMBER_RE.fullmatch(text):
            return Token(TokenKind.NUMBER, text, line_number)
        return Token(TokenKind.IDENTIFIER, text, line_number)


def tokenize(source: str) -> List[Token]:
    """Tokenize source with the default keyword set."""
    return Lexer().tokenize(source)
