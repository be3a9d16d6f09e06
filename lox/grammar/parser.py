"""Recursive-descent parser for Lox. See lox/grammar/ast.py for the grammar.

Expressions are parsed by precedence climbing, one method per precedence level (lowest first: assignment, or, and,
equality, comparison, term, factor, unary, call, primary). Errors are reported to the Diagnostics sink; the parser then
unwinds to the enclosing declaration with a ParseError and synchronizes on the next statement boundary, so that one
mistake produces one diagnostic. Some errors (invalid assignment target, too many arguments) are reported without
unwinding at all.
"""

from lox.grammar import ast
from lox.grammar.tokens import TokenType
from lox.lang.error import ParseError


class Parser:
    """Parses one token list. Use parse once per Parser."""
    MAX_ARGUMENTS = 8
    # tokens that begin a new declaration/statement, where synchronize can resume
    BOUNDARIES = {
        TokenType.CLASS,
        TokenType.FUN,
        TokenType.VAR,
        TokenType.FOR,
        TokenType.IF,
        TokenType.WHILE,
        TokenType.PRINT,
        TokenType.RETURN,
    }

    def __init__(self, tokens, diagnostics):
        self.tokens = tokens
        self.diagnostics = diagnostics
        self.current = 0

    def parse(self):
        """Returns the list of top-level statements. The list is only meaningful if no diagnostics were reported."""
        statements = []
        while not self.at_end():
            statement = self.declaration()
            if statement is not None:
                statements.append(statement)
        return statements

    # declarations and statements

    def declaration(self):
        try:
            if self.match(TokenType.CLASS):
                return self.class_declaration()
            if self.match(TokenType.FUN):
                return self.function("function")
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def class_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect class name.")

        superclass = None
        if self.match(TokenType.LESS):
            superclass = ast.Variable(self.consume(TokenType.IDENTIFIER, "Expect superclass name."))

        self.consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")
        methods = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.at_end():
            methods.append(self.function("method"))
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")

        return ast.Class(name, superclass, tuple(methods))

    def function(self, kind):
        """Parses a function or method (the "fun" keyword, if any, is already consumed). kind is used for errors."""
        name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name."))
            while self.match(TokenType.COMMA):
                if len(params) >= Parser.MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGUMENTS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name."))
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        return ast.Function(name, tuple(params), tuple(self.block()))

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name, initializer)

    def statement(self):
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.LEFT_BRACE):
            return ast.Block(tuple(self.block()))
        return self.expression_statement()

    def for_statement(self):
        """Desugars `for (init; cond; incr) body` into `{ init; while (cond) { body; incr; } }`."""
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = ast.Block((body, ast.Expression(increment)))
        if condition is None:
            condition = ast.Literal(True)
        body = ast.While(condition, body)
        if initializer is not None:
            body = ast.Block((initializer, body))

        return body

    def if_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.statement()

        return ast.If(condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return ast.Print(value)

    def return_statement(self):
        keyword = self.previous()
        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return ast.Return(keyword, value)

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return ast.While(condition, self.statement())

    def block(self):
        """Parses declarations up to the closing brace (the opening brace is already consumed)."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.at_end():
            statement = self.declaration()
            if statement is not None:
                statements.append(statement)

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ast.Expression(expr)

    # expressions, lowest precedence first

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()  # right-associative

            if isinstance(expr, ast.Variable):
                return ast.Assign(expr.name, value)
            if isinstance(expr, ast.Get):
                return ast.Set(expr.object, expr.name, value)

            self.error(equals, "Invalid assignment target.")  # reported, but no need to synchronize

        return expr

    def logic_or(self):
        expr = self.logic_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            expr = ast.Logical(expr, operator, self.logic_and())
        return expr

    def logic_and(self):
        expr = self.equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            expr = ast.Logical(expr, operator, self.equality())
        return expr

    def equality(self):
        return self.binary(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self.binary(
            self.term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL)

    def term(self):
        return self.binary(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self):
        return self.binary(self.unary, TokenType.SLASH, TokenType.STAR)

    def binary(self, operand, *operators):
        """Parses a left-associative chain of operand separated by any of operators."""
        expr = operand()
        while self.match(*operators):
            operator = self.previous()
            expr = ast.Binary(expr, operator, operand())
        return expr

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            return ast.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()

        while True:
            if self.match(TokenType.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(TokenType.DOT):
                name = self.consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = ast.Get(expr, name)
            else:
                break

        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(TokenType.RIGHT_PAREN):
            arguments.append(self.expression())
            while self.match(TokenType.COMMA):
                if len(arguments) >= Parser.MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {Parser.MAX_ARGUMENTS} arguments.")
                arguments.append(self.expression())

        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return ast.Call(callee, paren, tuple(arguments))

    def primary(self):
        if self.match(TokenType.FALSE):
            return ast.Literal(False)
        if self.match(TokenType.TRUE):
            return ast.Literal(True)
        if self.match(TokenType.NIL):
            return ast.Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return ast.Literal(self.previous().literal)

        if self.match(TokenType.SUPER):
            keyword = self.previous()
            self.consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self.consume(TokenType.IDENTIFIER, "Expect superclass method name.")
            return ast.Super(keyword, method)
        if self.match(TokenType.THIS):
            return ast.This(self.previous())
        if self.match(TokenType.IDENTIFIER):
            return ast.Variable(self.previous())

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    # error recovery

    def synchronize(self):
        """Discards tokens until a statement boundary: just past a ";", or just before a declaration/statement
        keyword.
        """
        self.advance()

        while not self.at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in Parser.BOUNDARIES:
                return
            self.advance()

    def error(self, token, message):
        """Reports message at token and returns (does not raise) a ParseError for the caller to raise."""
        self.diagnostics.token_error(token, message)
        return ParseError(message)

    # token stream helpers

    def consume(self, token_type, message):
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    def match(self, *token_types):
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def check(self, token_type):
        if self.at_end():
            return False
        return self.peek().type is token_type

    def advance(self):
        if not self.at_end():
            self.current += 1
        return self.previous()

    def at_end(self):
        return self.peek().type is TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]
