"""Runs dscript files or the interactive shell. Called from the ds console script.

Exit codes: 0 on success, 65 if the script has lexical/syntax errors, 70 if it stopped on a runtime error, 66 if the
file could not be opened.
"""

import argparse
import sys

from dscript.lang.error import ErrorHandler
from dscript.lang.session import Session
from dscript.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="ds", description="dscript interpreter")
    parser.add_argument("file", help="script to run (if empty, goes to interactive mode)", nargs="?")

    dump = parser.add_mutually_exclusive_group()
    dump.add_argument("--tokens", action="store_true", help="print the token stream instead of running")
    dump.add_argument("--ast", action="store_true", help="print the syntax tree instead of running")
    return parser


def main(argv=None):
    """Runs the dscript interpreter and returns the process exit code."""
    args = build_parser().parse_args(argv)

    with ErrorHandler():
        if args.file is None:
            Shell(Session(Session.SH_FILE)).cmdloop()
            return 0

        sess = Session(args.file)
        if args.tokens or args.ast:
            source = sess.read()
            for line in sess.tokens(source) if args.tokens else sess.tree(source):
                print(line)
        else:
            sess.run_file()
        return sess.exit_code


if __name__ == "__main__":
    sys.exit(main())
