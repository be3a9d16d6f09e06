"""Lox tree-walking interpreter.

Basic program flow (see lox/lang/session.py, which drives it):
    1. Scanner: turns source text into tokens (lox/grammar/scanner.py)
    2. Parser: builds a list of statements by recursive descent (lox/grammar/parser.py)
    3. Resolver: computes lexical binding distances and rejects misuses of scope (lox/resolver.py)
    4. Interpreter: walks the statements and executes them directly (this module)
Any diagnostic in steps 1 to 3 stops the pipeline before execution. In step 4, the first runtime error stops the run.
"""

import math
import time

from lox.grammar import ast
from lox.grammar.tokens import TokenType
from lox.lang.error import GenericException, LoxRuntimeError
from lox.runtime.environment import Environment
from lox.runtime.objects import LoxCallable, LoxClass, LoxFunction, LoxInstance, NativeFunction, Return


def is_truthy(value):
    """nil and false are falsy, everything else (including 0 and "") is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Values of different runtime kinds are never equal. Numbers and strings compare by value, and NaN equals NaN."""
    if type(left) is not type(right):
        return False
    if isinstance(left, float) and math.isnan(left) and math.isnan(right):
        return True
    return left == right


def stringify(value):
    """Textual form of a runtime value, as written by print."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        text = repr(value)
        return text[:-2] if text.endswith(".0") else text
    return str(value)


class Interpreter:
    """Executes resolved statements. out is called with the text of every print statement."""

    def __init__(self, out=print):
        self.out = out

        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}  # node_id: binding distance, filled in by the Resolver

        self.globals.define("clock", NativeFunction("clock", 0, time.time))

    def interpret(self, statements):
        """Executes statements in order. Raises LoxRuntimeError on the first runtime error."""
        for statement in statements:
            self.execute(statement)

    def resolve(self, expr, depth):
        """Called by the Resolver for every expression bound in a local scope."""
        self.locals[expr.node_id] = depth

    def execute_block(self, statements, environment):
        """Executes statements in environment, restoring the current environment afterwards (even on unwind)."""
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                self.execute(statement)
        finally:
            self.environment = previous

    def execute(self, stmt):
        if isinstance(stmt, ast.Expression):
            self.evaluate(stmt.expression)

        elif isinstance(stmt, ast.Print):
            self.out(stringify(self.evaluate(stmt.expression)))

        elif isinstance(stmt, ast.Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)

        elif isinstance(stmt, ast.Block):
            self.execute_block(stmt.statements, Environment(self.environment))

        elif isinstance(stmt, ast.If):
            if is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                self.execute(stmt.else_branch)

        elif isinstance(stmt, ast.While):
            while is_truthy(self.evaluate(stmt.condition)):
                self.execute(stmt.body)

        elif isinstance(stmt, ast.Function):
            self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))

        elif isinstance(stmt, ast.Return):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value)
            raise Return(value)

        elif isinstance(stmt, ast.Class):
            self.execute_class(stmt)

        else:
            raise GenericException("cannot execute '{}'", type(stmt).__name__, internal=True)

    def execute_class(self, stmt):
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

        self.environment.define(stmt.name.lexeme, None)

        if superclass is not None:  # mirrors the Resolver's synthetic `super` scope
            self.environment = Environment(self.environment)
            self.environment.define("super", superclass)

        methods = {
            method.name.lexeme: LoxFunction(method, self.environment, method.name.lexeme == "init")
            for method in stmt.methods
        }
        klass = LoxClass(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(stmt.name, klass)

    def evaluate(self, expr):
        if isinstance(expr, ast.Literal):
            return expr.value

        elif isinstance(expr, ast.Grouping):
            return self.evaluate(expr.expression)

        elif isinstance(expr, ast.Unary):
            return self.evaluate_unary(expr)

        elif isinstance(expr, ast.Binary):
            return self.evaluate_binary(expr)

        elif isinstance(expr, ast.Logical):
            left = self.evaluate(expr.left)
            if expr.operator.type is TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        elif isinstance(expr, ast.Variable):
            return self.look_up_variable(expr.name, expr)

        elif isinstance(expr, ast.Assign):
            value = self.evaluate(expr.value)
            distance = self.locals.get(expr.node_id)
            if distance is not None:
                self.environment.assign_at(distance, expr.name.lexeme, value)
            else:
                self.globals.assign(expr.name, value)
            return value

        elif isinstance(expr, ast.Call):
            return self.evaluate_call(expr)

        elif isinstance(expr, ast.Get):
            obj = self.evaluate(expr.object)
            if isinstance(obj, LoxInstance):
                return obj.get(expr.name)
            raise LoxRuntimeError(expr.name, "Only instances have properties.")

        elif isinstance(expr, ast.Set):
            obj = self.evaluate(expr.object)
            if not isinstance(obj, LoxInstance):
                raise LoxRuntimeError(expr.name, "Only instances have fields.")
            value = self.evaluate(expr.value)
            obj.set(expr.name, value)
            return value

        elif isinstance(expr, ast.This):
            return self.look_up_variable(expr.keyword, expr)

        elif isinstance(expr, ast.Super):
            distance = self.locals[expr.node_id]
            superclass = self.environment.get_at(distance, "super")
            instance = self.environment.get_at(distance - 1, "this")  # `this` scope is just inside `super`

            method = superclass.find_method(instance, expr.method.lexeme)
            if method is None:
                raise LoxRuntimeError(expr.method, f"Undefined property '{expr.method.lexeme}'.")
            return method

        raise GenericException("cannot evaluate '{}'", type(expr).__name__, internal=True)

    def evaluate_unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.BANG:
            return not is_truthy(right)

        check_number_operands(expr.operator, right)
        return -right

    def evaluate_binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator

        if operator.type is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if operator.type is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if operator.type is TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        check_number_operands(operator, left, right)

        if operator.type is TokenType.MINUS:
            return left - right
        if operator.type is TokenType.STAR:
            return left * right
        if operator.type is TokenType.SLASH:
            return divide(left, right)
        if operator.type is TokenType.GREATER:
            return left > right
        if operator.type is TokenType.GREATER_EQUAL:
            return left >= right
        if operator.type is TokenType.LESS:
            return left < right
        if operator.type is TokenType.LESS_EQUAL:
            return left <= right

        raise GenericException("unknown binary operator '{}'", operator.lexeme, internal=True)

    def evaluate_call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Value is not callable: can only call functions and classes.")
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(expr.paren, "Stack overflow.") from None

    def look_up_variable(self, name, expr):
        distance = self.locals.get(expr.node_id)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)


def check_number_operands(operator, *operands):
    if all(isinstance(operand, float) for operand in operands):
        return
    if len(operands) == 1:
        raise LoxRuntimeError(operator, "Operand must be a number.")
    raise LoxRuntimeError(operator, "Operands must be numbers.")


def divide(left, right):
    """IEEE 754 division: dividing by zero gives an infinity (or NaN for 0/0) instead of an error."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right
