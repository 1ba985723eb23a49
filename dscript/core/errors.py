"""Exceptions raised by the core. Parse errors never leave the Parser; ExecutionErrors unwind to
Interpreter.interpret, which reports them through Diagnostics.
"""


class ExecutionError(Exception):
    """Runtime error raised while interpreting. token is the token the error is attributed to (for its line)."""

    def __init__(self, token, message):
        super().__init__(message)
        self.token = token
        self.message = message


class TypeMismatch(ExecutionError):
    """Operand types do not fit the operator."""


class UndefinedVariable(ExecutionError):
    """Name is not bound in any enclosing scope."""

    def __init__(self, token):
        super().__init__(token, f"Undefined variable '{token.text}'.")


class DuplicateBinding(ExecutionError):
    """Name is already bound in the current scope."""

    def __init__(self, token):
        super().__init__(token, f"Variable '{token.text}' is already defined in this scope.")


class ImmutableAssignment(ExecutionError):
    """Assignment to a const binding."""

    def __init__(self, token):
        super().__init__(token, f"Cannot assign to constant '{token.text}'.")


class NotCallable(ExecutionError):
    """Callee is not a Callable."""


class ArityMismatch(ExecutionError):
    """Wrong number of arguments in a call."""


class BreakOutsideLoop(ExecutionError):
    """A break was reached with no enclosing while loop."""


class ParseError(Exception):
    """Raised inside the Parser to unwind to the nearest declaration. Never escapes Parser.parse."""


class NestingTooDeep(ExecutionError):
    """Statements nested deeper than the host stack allows."""
