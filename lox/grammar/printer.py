"""Prints syntax trees back out as canonical Lox source.

Only groupings that were written in the source are parenthesized, so printing a tree produced by the Parser and parsing
the result again gives back a tree of the same shape. `for` loops come back out in their desugared form.
"""

from decimal import Decimal

from lox.grammar import ast


def print_expr(expr):
    """Returns canonical source for expr."""
    if isinstance(expr, ast.Literal):
        return literal(expr.value)
    elif isinstance(expr, ast.Grouping):
        return f"({print_expr(expr.expression)})"
    elif isinstance(expr, ast.Unary):
        return f"{expr.operator.lexeme}{print_expr(expr.right)}"
    elif isinstance(expr, (ast.Binary, ast.Logical)):
        return f"{print_expr(expr.left)} {expr.operator.lexeme} {print_expr(expr.right)}"
    elif isinstance(expr, ast.Variable):
        return expr.name.lexeme
    elif isinstance(expr, ast.Assign):
        return f"{expr.name.lexeme} = {print_expr(expr.value)}"
    elif isinstance(expr, ast.Call):
        return f"{print_expr(expr.callee)}({', '.join(print_expr(arg) for arg in expr.arguments)})"
    elif isinstance(expr, ast.Get):
        return f"{print_expr(expr.object)}.{expr.name.lexeme}"
    elif isinstance(expr, ast.Set):
        return f"{print_expr(expr.object)}.{expr.name.lexeme} = {print_expr(expr.value)}"
    elif isinstance(expr, ast.This):
        return "this"
    elif isinstance(expr, ast.Super):
        return f"super.{expr.method.lexeme}"
    raise TypeError(f"not an expression: {expr!r}")


def print_stmt(stmt, indents=0):
    """Returns canonical source for stmt, indented by indents levels."""
    pad = "    " * indents

    if isinstance(stmt, ast.Expression):
        return f"{pad}{print_expr(stmt.expression)};"
    elif isinstance(stmt, ast.Print):
        return f"{pad}print {print_expr(stmt.expression)};"
    elif isinstance(stmt, ast.Var):
        if stmt.initializer is None:
            return f"{pad}var {stmt.name.lexeme};"
        return f"{pad}var {stmt.name.lexeme} = {print_expr(stmt.initializer)};"
    elif isinstance(stmt, ast.Block):
        return pad + _body(stmt.statements, indents)
    elif isinstance(stmt, ast.If):
        result = f"{pad}if ({print_expr(stmt.condition)})\n{print_stmt(stmt.then_branch, indents + 1)}"
        if stmt.else_branch is not None:
            result += f"\n{pad}else\n{print_stmt(stmt.else_branch, indents + 1)}"
        return result
    elif isinstance(stmt, ast.While):
        return f"{pad}while ({print_expr(stmt.condition)})\n{print_stmt(stmt.body, indents + 1)}"
    elif isinstance(stmt, ast.Function):
        return f"{pad}fun {_function(stmt, indents)}"
    elif isinstance(stmt, ast.Return):
        if stmt.value is None:
            return f"{pad}return;"
        return f"{pad}return {print_expr(stmt.value)};"
    elif isinstance(stmt, ast.Class):
        result = f"{pad}class {stmt.name.lexeme}"
        if stmt.superclass is not None:
            result += f" < {stmt.superclass.name.lexeme}"
        methods = "".join(f"{'    ' * (indents + 1)}{_function(method, indents + 1)}\n" for method in stmt.methods)
        return f"{result} {{\n{methods}{pad}}}"
    raise TypeError(f"not a statement: {stmt!r}")


def print_program(statements):
    """Returns canonical source for a list of statements."""
    return "\n".join(print_stmt(stmt) for stmt in statements)


def literal(value):
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")  # Lox numbers have no exponent syntax
    return f"\"{value}\""


def _function(function, indents):
    params = ", ".join(param.lexeme for param in function.params)
    return f"{function.name.lexeme}({params}) {_body(function.body, indents)}"


def _body(statements, indents):
    inner = "".join(print_stmt(stmt, indents + 1) + "\n" for stmt in statements)
    return f"{{\n{inner}{'    ' * indents}}}"
