"""Session control for dscript. A Session owns one Interpreter and one Diagnostics sink and runs source through
scan -> parse -> interpret, either a whole file at once or one shell line at a time.
"""

from dscript.core.interpreter import Interpreter
from dscript.core.parser import parse
from dscript.core.scanner import scan
from dscript.core.syntax import display
from dscript.lang.error import Diagnostics, DriverException


class Session:
    """Governs a dscript session. Bindings made by one run stay visible to the next."""
    SH_FILE = "<in>"  # shell filename

    def __init__(self, path=SH_FILE, out=None, err=None):
        self.path = path  # used for error messages
        self.out = out

        self.diagnostics = Diagnostics(stream=err)
        self.interpreter = Interpreter(self.diagnostics, out=out)

    def read(self):
        """Returns the contents of this session's file."""
        try:
            with open(self.path, "r") as file:
                return file.read()
        except OSError:
            raise DriverException("'{}' could not be opened", self.path, exit_code=66)

    def compile(self, source):
        """Scans and parses source. Returns the statements, or None if any lexical/syntax error was reported."""
        statements = parse(scan(source, self.diagnostics), self.diagnostics)
        if self.diagnostics.had_error:
            return None
        return statements

    def run(self, source):
        """Runs one execution unit. Nothing is executed if it has a syntax error."""
        statements = self.compile(source)
        if statements is not None:
            self.interpreter.interpret(statements)

    def run_file(self):
        self.run(self.read())

    def run_line(self, line):
        """Runs one shell line. The syntax flag and the recorded diagnostics are cleared beforehand, interpreter state
        and the runtime flag are kept.
        """
        self.diagnostics.had_error = False
        self.diagnostics.diagnostics.clear()
        self.run(line)

    def tokens(self, source):
        """Token dump, one per line, for --tokens."""
        return [str(token) for token in scan(source, self.diagnostics)]

    def tree(self, source):
        """Syntax tree dump, one top-level statement per entry, for --ast."""
        return [display(stmt) for stmt in parse(scan(source, self.diagnostics), self.diagnostics)]

    @property
    def exit_code(self):
        """Process exit code for a file run: 65 for syntax errors, 70 for runtime errors, else 0."""
        if self.diagnostics.had_error:
            return 65
        if self.diagnostics.had_runtime_error:
            return 70
        return 0
