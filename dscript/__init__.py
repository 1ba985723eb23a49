"""dscript: a small dynamically-typed scripting language.

Basic program flow:
    1. Scanner (core/scanner.py): source text to a flat list of Tokens. Bad characters are reported and skipped.
    2. Parser (core/parser.py): recursive descent over the tokens, producing the syntax tree in core/syntax.py. A bad
       statement is reported, skipped up to the next statement boundary, and parsing goes on.
    3. Interpreter (core/interpreter.py): walks the tree against a chain of lexical scopes (core/scope.py). Not a
       compiler, so statements are executed as they are reached.

Errors from all three stages go to a Diagnostics sink (lang/error.py) that the driver (lang/session.py, main.py)
inspects to decide whether to run and which exit code to use.
"""

__version__ = "0.1.0"
