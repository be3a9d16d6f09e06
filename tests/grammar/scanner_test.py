import unittest

from lox.grammar.scanner import Scanner
from lox.grammar.tokens import TokenType
from lox.lang.error import Diagnostics


def scan(source):
    diagnostics = Diagnostics()
    return Scanner(source, diagnostics).scan_tokens(), diagnostics


def types(source):
    tokens, __ = scan(source)
    return [token.type for token in tokens]


class ScannerTestCase(unittest.TestCase):

    def test_punctuation(self):
        cases = {
            "(){},.-+;*/": [
                TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
                TokenType.COMMA, TokenType.DOT, TokenType.MINUS, TokenType.PLUS, TokenType.SEMICOLON,
                TokenType.STAR, TokenType.SLASH, TokenType.EOF
            ],
            "! != = == < <= > >=": [
                TokenType.BANG, TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EQUAL_EQUAL, TokenType.LESS,
                TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.EOF
            ],
            "!==": [TokenType.BANG_EQUAL, TokenType.EQUAL, TokenType.EOF],
            "": [TokenType.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, types(case), case)

    def test_comments_and_whitespace(self):
        tokens, diagnostics = scan("// a comment (\n\t a \r// another")
        self.assertFalse(diagnostics)
        self.assertEqual([TokenType.IDENTIFIER, TokenType.EOF], [token.type for token in tokens])
        self.assertEqual(2, tokens[0].line)

    def test_numbers(self):
        cases = {"123": 123.0, "1.5": 1.5, "0.25": 0.25, "007": 7.0}
        for case, expected in cases.items():
            tokens, __ = scan(case)
            self.assertEqual(TokenType.NUMBER, tokens[0].type, case)
            self.assertEqual(expected, tokens[0].literal, case)
            self.assertEqual(case, tokens[0].lexeme, case)

    def test_trailing_dot_is_not_part_of_number(self):
        tokens, __ = scan("12.")
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.EOF], [token.type for token in tokens])
        self.assertEqual("12", tokens[0].lexeme)

        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.IDENTIFIER, TokenType.EOF], types("1.abs"))

    def test_strings(self):
        tokens, diagnostics = scan("\"hello world\"")
        self.assertFalse(diagnostics)
        self.assertEqual("hello world", tokens[0].literal)
        self.assertEqual("\"hello world\"", tokens[0].lexeme)

    def test_multiline_string_counts_lines(self):
        tokens, __ = scan("\"one\ntwo\nthree\" x")
        string, identifier, eof = tokens
        self.assertEqual("one\ntwo\nthree", string.literal)
        self.assertEqual(3, identifier.line)
        self.assertEqual(3, eof.line)
        self.assertIsNone(string.column)
        self.assertEqual(7, identifier.column)

    def test_columns(self):
        tokens, __ = scan("var a = 1;\n  a = a >= 2;")
        self.assertEqual([0, 4, 6, 8, 9, 2, 4, 6, 8, 11, 12], [token.column for token in tokens[:-1]])

    def test_unterminated_string(self):
        tokens, diagnostics = scan("print \"oops")
        self.assertEqual([TokenType.PRINT, TokenType.EOF], [token.type for token in tokens])
        self.assertEqual(["Unterminated string."], [diagnostic.message for diagnostic in diagnostics])

    def test_identifiers_and_keywords(self):
        should_pass = {
            "and": TokenType.AND, "class": TokenType.CLASS, "else": TokenType.ELSE, "false": TokenType.FALSE,
            "for": TokenType.FOR, "fun": TokenType.FUN, "if": TokenType.IF, "nil": TokenType.NIL,
            "or": TokenType.OR, "print": TokenType.PRINT, "return": TokenType.RETURN, "super": TokenType.SUPER,
            "this": TokenType.THIS, "true": TokenType.TRUE, "var": TokenType.VAR, "while": TokenType.WHILE,
            "orchid": TokenType.IDENTIFIER, "_private": TokenType.IDENTIFIER, "x1_y2": TokenType.IDENTIFIER,
            "Class": TokenType.IDENTIFIER,
        }
        for case, expected in should_pass.items():
            self.assertEqual([expected, TokenType.EOF], types(case), case)

    def test_unexpected_characters_are_not_fatal(self):
        tokens, diagnostics = scan("var @ a # = 1;\n$")
        self.assertEqual(
            [TokenType.VAR, TokenType.IDENTIFIER, TokenType.EQUAL, TokenType.NUMBER, TokenType.SEMICOLON,
             TokenType.EOF],
            [token.type for token in tokens])
        self.assertEqual([1, 1, 2], [diagnostic.line for diagnostic in diagnostics])
        self.assertTrue(all(diagnostic.message == "Unexpected character." for diagnostic in diagnostics))

    def test_rescanning_lexemes_is_idempotent(self):
        source = (
            "class Cake < Pastry {\n"
            "  taste(a, b) { // comment\n"
            "    return this.flavor + \"is\nnice\" + super.taste() >= 1.5 != !nil;\n"
            "  }\n"
            "}\n"
            "for (var i = 0; i <= 10.; i = i - 1) print i / 2 * 3;\n"
        )
        tokens, diagnostics = scan(source)
        self.assertFalse(diagnostics)

        rescanned, diagnostics = scan(" ".join(token.lexeme for token in tokens))
        self.assertFalse(diagnostics)

        def strip(tokens):
            return [(token.type, token.lexeme, token.literal) for token in tokens]

        self.assertEqual(strip(tokens), strip(rescanned))


if __name__ == '__main__':
    unittest.main()
