"""Error handling for the dscript language.

Three kinds of errors reach the user: lexical errors and parse errors (both reported as they are found, so that a
single run can surface several of them), and runtime errors (which unwind to the top level and stop the run). All of
them are funnelled through a Diagnostics sink that is handed explicitly to the Scanner, Parser and Interpreter.

ErrorHandler wraps the driver itself: anything that isn't a dscript error and makes it all the way up to it is assumed
to be an internal issue.
"""

import sys
from dataclasses import dataclass, field

from termcolor import colored

from dscript.core.errors import (ArityMismatch, BreakOutsideLoop, DuplicateBinding, ExecutionError,  # noqa: F401
                                  ImmutableAssignment, NestingTooDeep, NotCallable, ParseError, TypeMismatch,
                                  UndefinedVariable)
from dscript.core.token import TokenKind


@dataclass(frozen=True)
class Diagnostic:
    kind: str  # "lex", "parse" or "runtime"
    line: int
    message: str


@dataclass
class Diagnostics:
    """Accumulates the "had an error" flags for one execution unit and prints formatted messages.

    The driver owns the lifecycle: it inspects the flags after each run and calls reset (or, in the shell, clears
    had_error and the recorded diagnostics but keeps had_runtime_error) before the next one.
    """
    stream: object = None
    had_error: bool = False
    had_runtime_error: bool = False
    diagnostics: list = field(default_factory=list)

    @staticmethod
    def format_message(line, where, message):
        """Returns "[line N] Error<where>: message". where is either empty or starts with a space."""
        return f"[line {line}] Error{where or ''}: {message}"

    def error_at_line(self, line, message, kind="lex"):
        self._report(kind, line, "", message)

    def error_at_token(self, token, message):
        """Reports a parse error at token. EOF is described as "at end", anything else by its source text."""
        where = " at end" if token.kind is TokenKind.EOF else f" at token '{token.text}'"
        self._report("parse", token.line, where, message)

    def runtime_error(self, error):
        """Reports an ExecutionError that unwound to the top level."""
        self.had_runtime_error = True
        self.diagnostics.append(Diagnostic("runtime", error.token.line, error.message))

        location = colored(f"[Runtime error at line {error.token.line}]", attrs=["bold"])
        self._print(f"{location}: {colored(error.message, 'red')}")

    def reset(self):
        self.had_error = False
        self.had_runtime_error = False
        self.diagnostics.clear()

    def _report(self, kind, line, where, message):
        self.had_error = True
        self.diagnostics.append(Diagnostic(kind, line, message))

        msg = self.format_message(line, where, message)
        prefix, __, text = msg.partition(": ")
        self._print(colored(prefix + ":", ErrorHandler.ERROR, attrs=["bold"]) + " " + text)

    def _print(self, msg):
        print(msg, file=self.stream if self.stream is not None else sys.stderr)


class DriverException(Exception):
    """Error raised by the driver itself (bad file, etc.) rather than by a running script."""

    def __init__(self, msg, args=None, exit_code=1, internal=False):
        if args is None:
            args = []
        if isinstance(args, str):
            args = [args]

        super().__init__(msg.format(*args))
        self.msg = msg.format(*(colored(arg, attrs=["bold"]) for arg in args))  # bold the offending snippets
        self.exit_code = exit_code
        self.internal = internal


class ErrorHandler:
    """Context manager that turns Python errors escaping the driver into dscript error messages."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream

    def throw(self, error):
        """Prints error (a DriverException) and exits if this handler is fatal."""
        error_msg = ""
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg, file=self.stream if self.stream is not None else sys.stderr)

        if self.fatal:
            sys.exit(error.exit_code)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(DriverException("keyboard interrupt", exit_code=130))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(DriverException("maximum nesting depth exceeded", exit_code=70))
        elif exc_type is DriverException:
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(DriverException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", exit_code=70,
                                       internal=True))
            do_exit = True

        return not do_exit
