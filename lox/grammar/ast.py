"""Abstract syntax tree for Lox: two closed families of immutable nodes, Expr and Stmt.

Nodes compare by identity, never by structure: the Resolver records binding distances per node, and two identical
references to `x` at different positions must resolve independently. Every node is therefore given a stable integer
node_id when it is built, which is what the Interpreter's distance table is keyed by.

```
<program>    ::= <declaration>* EOF
<declaration>::= <class_decl> | <fun_decl> | <var_decl> | <statement>
<class_decl> ::= "class" IDENTIFIER ( "<" IDENTIFIER )? "{" <function>* "}"
<fun_decl>   ::= "fun" <function>
<function>   ::= IDENTIFIER "(" <parameters>? ")" <block>
<var_decl>   ::= "var" IDENTIFIER ( "=" <expression> )? ";"
<statement>  ::= <expr_stmt> | <for_stmt> | <if_stmt> | <print_stmt> | <return_stmt> | <while_stmt> | <block>

<expression> ::= <assignment>
<assignment> ::= ( <call> "." )? IDENTIFIER "=" <assignment> | <logic_or>
<logic_or>   ::= <logic_and> ( "or" <logic_and> )*
<logic_and>  ::= <equality> ( "and" <equality> )*
<equality>   ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison> ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>       ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>     ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>      ::= ( "!" | "-" ) <unary> | <call>
<call>       ::= <primary> ( "(" <arguments>? ")" | "." IDENTIFIER )*
<primary>    ::= "true" | "false" | "nil" | "this" | NUMBER | STRING | IDENTIFIER | "(" <expression> ")"
               | "super" "." IDENTIFIER
```

`for` loops have no node of their own: the Parser desugars them into Block/While.
"""

from dataclasses import dataclass, field
from itertools import count
from typing import Optional, Tuple, Union

from lox.grammar.tokens import Token

_node_ids = count()


@dataclass(frozen=True, eq=False)
class Expr:
    """Superclass of all expression nodes."""
    node_id: int = field(default_factory=lambda: next(_node_ids), init=False, repr=False)


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, for error attribution
    arguments: Tuple[Expr, ...]


@dataclass(frozen=True, eq=False)
class Get(Expr):
    object: Expr
    name: Token


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: Optional[Union[bool, float, str]]


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Super(Expr):
    keyword: Token
    method: Token


@dataclass(frozen=True, eq=False)
class This(Expr):
    keyword: Token


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


@dataclass(frozen=True, eq=False)
class Stmt:
    """Superclass of all statement nodes."""
    node_id: int = field(default_factory=lambda: next(_node_ids), init=False, repr=False)


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class Class(Stmt):
    name: Token
    superclass: Optional[Variable]
    methods: Tuple[Function, ...]


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt
