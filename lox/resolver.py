"""Static resolution pass. Walks the statement list once and, for every expression that refers to a variable (including
`this` and `super`), records how many scopes separate the use from its declaration. References that aren't found in
any local scope are left unrecorded and are looked up dynamically in the globals.

The pass also rejects programs that are syntactically valid but meaningless: redeclaring a local, reading a local in
its own initializer, `return` outside a function (or with a value inside an initializer), `this` outside a class,
`super` outside a subclass, and a class inheriting from itself. All of these are reported to the Diagnostics sink and
resolution carries on.
"""

from enum import Enum, auto

from lox.grammar import ast
from lox.lang.error import GenericException


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    INITIALIZER = auto()
    METHOD = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:
    """Resolves statements on behalf of interpreter, whose resolve method receives the computed distances."""

    def __init__(self, interpreter, diagnostics):
        self.interpreter = interpreter
        self.diagnostics = diagnostics

        self.scopes = []  # stack of {name: whether or not initialized}; globals are not tracked
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, statements):
        for statement in statements:
            self.resolve_stmt(statement)

    def resolve_stmt(self, stmt):
        if isinstance(stmt, ast.Block):
            self.begin_scope()
            self.resolve(stmt.statements)
            self.end_scope()

        elif isinstance(stmt, ast.Var):
            self.declare(stmt.name)
            if stmt.initializer is not None:
                self.resolve_expr(stmt.initializer)
            self.define(stmt.name)

        elif isinstance(stmt, ast.Function):
            self.declare(stmt.name)
            self.define(stmt.name)  # defined eagerly so the function can refer to itself
            self.resolve_function(stmt, FunctionType.FUNCTION)

        elif isinstance(stmt, ast.Class):
            self.resolve_class(stmt)

        elif isinstance(stmt, (ast.Expression, ast.Print)):
            self.resolve_expr(stmt.expression)

        elif isinstance(stmt, ast.If):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self.resolve_stmt(stmt.else_branch)

        elif isinstance(stmt, ast.While):
            self.resolve_expr(stmt.condition)
            self.resolve_stmt(stmt.body)

        elif isinstance(stmt, ast.Return):
            if self.current_function is FunctionType.NONE:
                self.diagnostics.token_error(stmt.keyword, "Can't return from top-level code.")
            if stmt.value is not None:
                if self.current_function is FunctionType.INITIALIZER:
                    self.diagnostics.token_error(stmt.keyword, "Can't return a value from an initializer.")
                self.resolve_expr(stmt.value)

        else:
            raise GenericException("cannot resolve '{}'", type(stmt).__name__, internal=True)

    def resolve_expr(self, expr):
        if isinstance(expr, ast.Variable):
            if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
                self.diagnostics.token_error(expr.name, "Can't read local variable in its own initializer.")
            self.resolve_local(expr, expr.name)

        elif isinstance(expr, ast.Assign):
            self.resolve_expr(expr.value)
            self.resolve_local(expr, expr.name)

        elif isinstance(expr, (ast.Binary, ast.Logical)):
            self.resolve_expr(expr.left)
            self.resolve_expr(expr.right)

        elif isinstance(expr, ast.Call):
            self.resolve_expr(expr.callee)
            for argument in expr.arguments:
                self.resolve_expr(argument)

        elif isinstance(expr, ast.Get):
            self.resolve_expr(expr.object)

        elif isinstance(expr, ast.Set):
            self.resolve_expr(expr.value)
            self.resolve_expr(expr.object)

        elif isinstance(expr, ast.Grouping):
            self.resolve_expr(expr.expression)

        elif isinstance(expr, ast.Unary):
            self.resolve_expr(expr.right)

        elif isinstance(expr, ast.This):
            if self.current_class is ClassType.NONE:
                self.diagnostics.token_error(expr.keyword, "Can't use 'this' outside of a class.")
                return
            self.resolve_local(expr, expr.keyword)

        elif isinstance(expr, ast.Super):
            if self.current_class is ClassType.NONE:
                self.diagnostics.token_error(expr.keyword, "Can't use 'super' outside of a class.")
            elif self.current_class is not ClassType.SUBCLASS:
                self.diagnostics.token_error(expr.keyword, "Can't use 'super' in a class with no superclass.")
            self.resolve_local(expr, expr.keyword)

        elif not isinstance(expr, ast.Literal):
            raise GenericException("cannot resolve '{}'", type(expr).__name__, internal=True)

    def resolve_class(self, stmt):
        """Methods are resolved inside up to two synthetic scopes: one binding `super` (subclasses only), and within it
        one binding `this`. The Interpreter builds matching environments at runtime.
        """
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            if stmt.name.lexeme == stmt.superclass.name.lexeme:
                self.diagnostics.token_error(stmt.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.resolve_expr(stmt.superclass)

            self.begin_scope()
            self.scopes[-1]["super"] = True

        self.begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            kind = FunctionType.INITIALIZER if method.name.lexeme == "init" else FunctionType.METHOD
            self.resolve_function(method, kind)

        self.end_scope()
        if stmt.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class

    def resolve_function(self, function, kind):
        enclosing_function = self.current_function
        self.current_function = kind

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve(function.body)
        self.end_scope()

        self.current_function = enclosing_function

    def resolve_local(self, expr, name):
        """Records the distance to the innermost scope declaring name. Unrecorded means global."""
        for distance, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, distance)
                return

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        """Marks name as present but not yet initialized in the innermost scope."""
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.diagnostics.token_error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name):
        if self.scopes:
            self.scopes[-1][name.lexeme] = True
