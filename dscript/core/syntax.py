"""Abstract syntax tree for dscript.

The tree is a closed set of frozen dataclasses: Expr variants and Stmt variants. Nodes carry no behavior; the
Interpreter matches on their type. Operator and name tokens are kept on the nodes so that runtime errors can point at
the right line.

```
<program>     ::= <declaration>* EOF
<declaration> ::= "mut" IDENTIFIER ( "=" <expression> )? ";"
                | "const" IDENTIFIER "=" <expression> ";"
                | <statement>
<statement>   ::= <expr_stmt> | <print_stmt> | <if_stmt> | <while_stmt> | <for_stmt> | <break_stmt> | <block>
<expression>  ::= <assignment>
<assignment>  ::= IDENTIFIER "=" <assignment> | <or>
<or>          ::= <and> ( "or" <and> )*
<and>         ::= <equality> ( "and" <equality> )*
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>        ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>      ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <call>
<call>        ::= <primary> ( "(" <arguments>? ")" )*
<primary>     ::= "true" | "false" | "null" | NUMBER | STRING | IDENTIFIER | "(" <expression> ")"
```
"""

from dataclasses import dataclass, fields
from typing import Optional, Tuple, Union

from dscript.core.token import Token


class Expr:
    """Base of every expression node."""


class Stmt:
    """Base of every statement node."""


@dataclass(frozen=True)
class Literal(Expr):
    value: Union[float, str, bool, None]


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Paren(Expr):
    inner: Expr


@dataclass(frozen=True)
class Unary(Expr):
    op: Token
    operand: Expr


@dataclass(frozen=True)
class Binary(Expr):
    op: Token
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    op: Token  # AND or OR
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Assignment(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    args: Tuple[Expr, ...]
    paren: Token  # closing paren, for error attribution


@dataclass(frozen=True)
class ExpressionStatement(Stmt):
    expr: Expr


@dataclass(frozen=True)
class Print(Stmt):
    keyword: Token
    expr: Expr


@dataclass(frozen=True)
class ConstDecl(Stmt):
    name: Token
    initializer: Expr


@dataclass(frozen=True)
class MutDecl(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Break(Stmt):
    keyword: Token


def display(node, indents=0):
    """Recursively displays a syntax tree in a readable format.

    Format:
    <Node>(<token or literal fields>, nodes=[
        <Node>(...),
        ...
    ])

    Tokens are shown by their source text, child nodes are nested one level deeper and None children are omitted.
    """
    pad = "    " * indents
    attrs, children = [], []

    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, Token):
            attrs.append(f"{f.name}='{value.text}'")
        elif isinstance(value, (Expr, Stmt)):
            children.append(value)
        elif isinstance(value, tuple):
            children.extend(value)
        elif f.name == "value":
            attrs.append(f"value={value!r}")

    result = f"{pad}{type(node).__name__}({', '.join(attrs)}"
    if children:
        if attrs:
            result += ", "
        result += "nodes=["
        result += ",".join("\n" + display(child, indents + 1) for child in children)
        result += f"\n{pad}]"
    return result + ")"


def first_token(node):
    """Returns a token of node for error attribution, or None if the subtree carries none.

    Walks breadth-first without recursion, so it works on trees too deep for the Python stack.
    """
    pending = [node]
    while pending:
        current = pending.pop(0)
        for f in fields(current):
            value = getattr(current, f.name)
            if isinstance(value, Token):
                return value
            if isinstance(value, (Expr, Stmt)):
                pending.append(value)
            elif isinstance(value, tuple):
                pending.extend(value)
    return None
