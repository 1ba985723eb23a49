"""Token model: the lexical categories of dscript and the immutable Token record produced by the Scanner."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union


class TokenKind(Enum):
    # punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    SEMICOLON = auto()

    # operators
    MINUS = auto()
    PLUS = auto()
    SLASH = auto()
    STAR = auto()
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # keywords
    AND = auto()
    BREAK = auto()
    CLASS = auto()
    CONST = auto()
    ELSE = auto()
    FALSE = auto()
    FOR = auto()
    FUN = auto()
    IF = auto()
    MUT = auto()
    NULL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS = {
    "and": TokenKind.AND,
    "break": TokenKind.BREAK,
    "class": TokenKind.CLASS,
    "const": TokenKind.CONST,
    "else": TokenKind.ELSE,
    "false": TokenKind.FALSE,
    "for": TokenKind.FOR,
    "fun": TokenKind.FUN,
    "if": TokenKind.IF,
    "mut": TokenKind.MUT,
    "null": TokenKind.NULL,
    "or": TokenKind.OR,
    "print": TokenKind.PRINT,
    "return": TokenKind.RETURN,
    "super": TokenKind.SUPER,
    "this": TokenKind.THIS,
    "true": TokenKind.TRUE,
    "while": TokenKind.WHILE,
}


@dataclass(frozen=True)
class Token:
    """A classified lexeme. literal is only set for NUMBER (float) and STRING (str) tokens."""
    kind: TokenKind
    text: str
    literal: Optional[Union[float, str]]
    line: int

    def __str__(self):
        if self.literal is None:
            return f"{self.kind.name} '{self.text}' (line {self.line})"
        return f"{self.kind.name} '{self.text}' {self.literal!r} (line {self.line})"
