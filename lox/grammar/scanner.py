"""Lexical analysis for Lox. Converts raw source text into a flat list of Tokens, terminated by an EOF token.

Scanning is a single left-to-right pass with one character of lookahead (two for the fractional part of a number).
Unexpected characters and unterminated strings are reported to the Diagnostics sink, and scanning continues.
"""

from lox.grammar.tokens import KEYWORDS, Token, TokenType


class Scanner:
    """Scans one source text. Use scan_tokens once per Scanner."""
    SINGLE = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "*": TokenType.STAR,
    }
    # char: (type if followed by "=", type otherwise)
    DOUBLE = {
        "!": (TokenType.BANG_EQUAL, TokenType.BANG),
        "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
        "<": (TokenType.LESS_EQUAL, TokenType.LESS),
        ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
    }
    KEYWORDS = KEYWORDS

    def __init__(self, source, diagnostics):
        self.source = source
        self.diagnostics = diagnostics
        self.tokens = []

        self.start = 0    # first character of the lexeme being scanned
        self.current = 0  # character about to be consumed
        self.line = 1
        self.line_start = 0  # index of the first character of the current line

    def scan_tokens(self):
        """Scans the whole source and returns the token list."""
        while not self.at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in Scanner.SINGLE:
            self.add_token(Scanner.SINGLE[char])
        elif char in Scanner.DOUBLE:
            matched, single = Scanner.DOUBLE[char]
            self.add_token(matched if self.match("=") else single)
        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.at_end():  # comment runs to end of line
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
        elif char in " \r\t":
            pass
        elif char == "\n":
            self.line += 1
            self.line_start = self.current
        elif char == "\"":
            self.string()
        elif Scanner.is_digit(char):
            self.number()
        elif Scanner.is_alpha(char):
            self.identifier()
        else:
            self.diagnostics.error(self.line, "Unexpected character.")

    def string(self):
        """Strings are unescaped and may span lines."""
        while self.peek() != "\"" and not self.at_end():
            if self.peek() == "\n":
                self.line += 1
                self.line_start = self.current + 1
            self.advance()

        if self.at_end():
            self.diagnostics.error(self.line, "Unterminated string.")
            return

        self.advance()  # closing "
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self):
        while Scanner.is_digit(self.peek()):
            self.advance()

        # a trailing "." is only part of the number if a digit follows it
        if self.peek() == "." and Scanner.is_digit(self.peek_next()):
            self.advance()
            while Scanner.is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while Scanner.is_alpha(self.peek()) or Scanner.is_digit(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(Scanner.KEYWORDS.get(text, TokenType.IDENTIFIER))

    def add_token(self, token_type, literal=None):
        column = self.start - self.line_start if self.start >= self.line_start else None
        self.tokens.append(Token(token_type, self.source[self.start:self.current], literal, self.line, column))

    def match(self, expected):
        """Consumes the next character only if it is expected."""
        if self.at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def peek(self):
        return "\0" if self.at_end() else self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def at_end(self):
        return self.current >= len(self.source)

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"
