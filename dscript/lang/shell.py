"""Handles interactive/command-line mode for the dscript interpreter. Uses cmd as backend."""

import cmd
import io

from dscript.core.scanner import scan
from dscript.core.token import TokenKind
from dscript.lang.error import Diagnostics, ErrorHandler


class Shell(cmd.Cmd):
    """dscript interpreter shell."""
    intro = "dscript interpreter :: Python backend\nType 'help' for more information, 'exit' to quit."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    @staticmethod
    def is_open(source):
        """Whether source still has unclosed braces or parentheses, i.e. needs another line.

        Brackets are counted on the scanned tokens, so the ones inside strings and comments don't count. Lexical
        errors are left for the real run to report.
        """
        depth = {TokenKind.LEFT_BRACE: 0, TokenKind.LEFT_PAREN: 0}
        closers = {TokenKind.RIGHT_BRACE: TokenKind.LEFT_BRACE, TokenKind.RIGHT_PAREN: TokenKind.LEFT_PAREN}

        for token in scan(source, Diagnostics(stream=io.StringIO())):
            if token.kind in depth:
                depth[token.kind] += 1
            elif token.kind in closers:
                depth[closers[token.kind]] -= 1
        return any(count > 0 for count in depth.values())

    def default(self, line):
        """Executes arbitrary dscript source."""
        source = self._tmp_line + line + "\n"

        if self.is_open(source):
            self._tmp_line = source
            self.prompt = self.secondary_prompt
            return

        self.flush(source)

    def flush(self, source):
        """Runs source and goes back to the primary prompt."""
        self._tmp_line = ""
        self.prompt = self._tmp_prompt
        with ErrorHandler(fatal=False):  # needed because cmd.Cmd automatically exits on Exception
            self.sess.run_line(source)

    def onecmd(self, line):
        # cmd.Cmd treats a leading identifier as a command name: route everything but the builtins to default
        command = line.strip()
        if command == "EOF":
            if self._tmp_line:
                self.flush(self._tmp_line)  # reports the unclosed block instead of waiting for more input
            return self.do_EOF(line)
        if self._tmp_line or command not in ("help", "exit"):
            if not command and not self._tmp_line:
                return self.emptyline()
            return self.default(line)
        return super().onecmd(line)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the dscript interpreter!\n\n"
              "Statements end with ';'. Declare with 'mut x = 1;' or 'const y = 2;', print with\n"
              "'print x + y;', and use if/while/for/break and { blocks } as in C. Bindings persist\n"
              "between lines. Lines with unclosed braces continue on the next prompt.", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
