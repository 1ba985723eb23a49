"""Lexical analysis for dscript. Turns raw source text into a flat list of Tokens.

The scanner never raises: unexpected characters and unterminated strings are reported to the Diagnostics sink and
skipped, so that the parser still gets a (partial) token stream and can surface its own errors in the same run.
"""

from dscript.core.token import KEYWORDS, Token, TokenKind


SINGLE_CHAR = {
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    "{": TokenKind.LEFT_BRACE,
    "}": TokenKind.RIGHT_BRACE,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "-": TokenKind.MINUS,
    "+": TokenKind.PLUS,
    ";": TokenKind.SEMICOLON,
    "*": TokenKind.STAR,
}

# char: (kind if followed by "=", kind otherwise)
ONE_OR_TWO_CHAR = {
    "!": (TokenKind.BANG_EQUAL, TokenKind.BANG),
    "=": (TokenKind.EQUAL_EQUAL, TokenKind.EQUAL),
    "<": (TokenKind.LESS_EQUAL, TokenKind.LESS),
    ">": (TokenKind.GREATER_EQUAL, TokenKind.GREATER),
}

WHITESPACE = " \r\t"


def is_digit(char):
    return char is not None and "0" <= char <= "9"


def is_alpha(char):
    return char is not None and ("a" <= char <= "z" or "A" <= char <= "Z" or char == "_")


def is_alphanumeric(char):
    return is_alpha(char) or is_digit(char)


class Scanner:
    """Single left-to-right cursor over source. start marks the beginning of the lexeme being scanned."""

    def __init__(self, source, diagnostics):
        self.source = source
        self.diagnostics = diagnostics

        self.tokens = []
        self.start = 0
        self.current = 0
        self.line = 1

    def scan(self):
        """Returns all tokens in source, always terminated by a single EOF token on the last line."""
        while not self.at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenKind.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in WHITESPACE:
            return
        elif char == "\n":
            self.line += 1
        elif char in SINGLE_CHAR:
            self.add_token(SINGLE_CHAR[char])
        elif char in ONE_OR_TWO_CHAR:
            two_char, one_char = ONE_OR_TWO_CHAR[char]
            self.add_token(two_char if self.match("=") else one_char)
        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.at_end():  # comment runs to end of line
                    self.advance()
            else:
                self.add_token(TokenKind.SLASH)
        elif char == "\"":
            self.string()
        elif is_digit(char):
            self.number()
        elif is_alpha(char):
            self.identifier()
        else:
            self.diagnostics.error_at_line(self.line, f"Unexpected character '{char}'.")

    def string(self):
        while self.peek() != "\"" and not self.at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.at_end():
            self.diagnostics.error_at_line(self.line, "Unterminated string.")
            return

        self.advance()  # closing "
        self.add_token(TokenKind.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.add_token(TokenKind.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while is_alphanumeric(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenKind.IDENTIFIER))

    def at_end(self):
        return self.current >= len(self.source)

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        """Consumes the current character only if it is expected."""
        if self.at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return None if self.at_end() else self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return None
        return self.source[self.current + 1]

    def add_token(self, kind, literal=None):
        self.tokens.append(Token(kind, self.source[self.start:self.current], literal, self.line))


def scan(source, diagnostics):
    """Shorthand for Scanner(source, diagnostics).scan()."""
    return Scanner(source, diagnostics).scan()
