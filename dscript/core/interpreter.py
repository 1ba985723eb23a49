"""Tree-walking interpreter for dscript.

Statements are executed by execute(), which returns an outcome instead of raising for control flow: None when the
statement completed normally, or the Break node that fired when a break is unwinding to its loop. Runtime errors are
ExecutionErrors and propagate as exceptions up to interpret(), which reports them and abandons the rest of the run.
Exhausting the Python stack on a deeply nested tree is reported the same way, as NestingTooDeep.
"""

import math
import sys
import time

from dscript.core.callable import Callable, NativeFunction
from dscript.core.errors import (ArityMismatch, BreakOutsideLoop, ExecutionError, NestingTooDeep, NotCallable,
                                 TypeMismatch)
from dscript.core.scope import ScopeArena
from dscript.core.syntax import (Assignment, Binary, Block, Break, Call, ConstDecl, ExpressionStatement, If, Literal,
                                 Logical, MutDecl, Paren, Print, Unary, Variable, While, first_token)
from dscript.core.token import Token, TokenKind
from dscript.core.value import is_equal, is_number, is_truthy, stringify, to_number


def create_natives(out):
    """Returns the natives of the global scope by name. print writes to the out stream."""

    def native_print(value):
        print(stringify(value), file=out)
        return None

    return {
        "clock": NativeFunction("clock", 0, time.monotonic),
        "print": NativeFunction("print", 1, native_print),
    }


def divide(left, right):
    """IEEE division: dividing by zero gives +/-Infinity, or NaN for 0/0."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


ARITHMETIC = {
    TokenKind.MINUS: lambda a, b: a - b,
    TokenKind.STAR: lambda a, b: a * b,
    TokenKind.SLASH: divide,
    TokenKind.GREATER: lambda a, b: a > b,
    TokenKind.GREATER_EQUAL: lambda a, b: a >= b,
    TokenKind.LESS: lambda a, b: a < b,
    TokenKind.LESS_EQUAL: lambda a, b: a <= b,
}


class Interpreter:
    """Owns one scope arena. Bindings persist across interpret() calls (the shell relies on that)."""

    def __init__(self, diagnostics, out=None):
        self.diagnostics = diagnostics
        self.out = out if out is not None else sys.stdout
        self.scopes = ScopeArena()

        self.natives = create_natives(self.out)
        for name, native in self.natives.items():
            self.scopes.define(Token(TokenKind.IDENTIFIER, name, None, 0), native, False)

    def interpret(self, statements):
        """Executes statements in order. The first runtime error is reported and stops the run."""
        try:
            for stmt in statements:
                try:
                    outcome = self.execute(stmt)
                except RecursionError:
                    token = first_token(stmt) or Token(TokenKind.EOF, "", None, 0)
                    raise NestingTooDeep(token, "Statements nested too deeply.") from None
                if outcome is not None:
                    raise BreakOutsideLoop(outcome.keyword, "'break' used outside of a loop.")
        except ExecutionError as error:
            self.diagnostics.runtime_error(error)

    # statements

    def execute(self, stmt):
        """Executes stmt in the current scope. Returns None, or the Break node being propagated to its loop."""
        if isinstance(stmt, ExpressionStatement):
            self.evaluate(stmt.expr)

        elif isinstance(stmt, Print):
            self.natives["print"].invoke([self.evaluate(stmt.expr)])

        elif isinstance(stmt, MutDecl):
            value = None if stmt.initializer is None else self.evaluate(stmt.initializer)
            self.scopes.define(stmt.name, value, True)

        elif isinstance(stmt, ConstDecl):
            self.scopes.define(stmt.name, self.evaluate(stmt.initializer), False)

        elif isinstance(stmt, Block):
            with self.scopes.child():
                for inner in stmt.statements:
                    outcome = self.execute(inner)
                    if outcome is not None:
                        return outcome

        elif isinstance(stmt, If):
            if is_truthy(self.evaluate(stmt.condition)):
                return self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                return self.execute(stmt.else_branch)

        elif isinstance(stmt, While):
            while is_truthy(self.evaluate(stmt.condition)):
                if self.execute(stmt.body) is not None:
                    break  # break stops at the nearest loop

        elif isinstance(stmt, Break):
            return stmt

        else:
            raise TypeError(f"unknown statement {type(stmt).__name__}")

        return None

    # expressions

    def evaluate(self, expr):
        if isinstance(expr, Literal):
            return expr.value

        elif isinstance(expr, Variable):
            return self.scopes.get(expr.name)

        elif isinstance(expr, Paren):
            return self.evaluate(expr.inner)

        elif isinstance(expr, Assignment):
            value = self.evaluate(expr.value)
            self.scopes.assign(expr.name, value)
            return value

        elif isinstance(expr, Unary):
            operand = self.evaluate(expr.operand)
            if expr.op.kind is TokenKind.MINUS:
                return -to_number(operand)
            return not is_truthy(operand)

        elif isinstance(expr, Logical):
            left = self.evaluate(expr.left)
            if expr.op.kind is TokenKind.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        elif isinstance(expr, Binary):
            return self.binary(expr.op, self.evaluate(expr.left), self.evaluate(expr.right))

        elif isinstance(expr, Call):
            return self.call(expr)

        raise TypeError(f"unknown expression {type(expr).__name__}")

    def binary(self, op, left, right):
        if op.kind is TokenKind.EQUAL_EQUAL:
            return is_equal(left, right)
        if op.kind is TokenKind.BANG_EQUAL:
            return not is_equal(left, right)

        if op.kind is TokenKind.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and (isinstance(right, str) or is_number(right)):
                return left + stringify(right)
            if is_number(left) and isinstance(right, str):
                return stringify(left) + right
            raise TypeMismatch(op, "Operands must be two numbers or two strings.")

        if not (is_number(left) and is_number(right)):
            raise TypeMismatch(op, "Operands must be numbers.")
        return ARITHMETIC[op.kind](left, right)

    def call(self, expr):
        callee = self.evaluate(expr.callee)
        args = [self.evaluate(arg) for arg in expr.args]

        if not isinstance(callee, Callable):
            raise NotCallable(expr.paren, "Can only call functions.")
        if len(args) != callee.arity():
            raise ArityMismatch(expr.paren, f"Expected {callee.arity()} arguments but got {len(args)}.")

        return callee.invoke(args)


def interpret(statements, diagnostics, out=None):
    """Runs statements in a fresh Interpreter and returns it."""
    interpreter = Interpreter(diagnostics, out)
    interpreter.interpret(statements)
    return interpreter
