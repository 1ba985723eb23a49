"""Recursive-descent parser for dscript. See dscript/core/syntax.py for the grammar.

Each binary precedence level is a left-associative loop over the next-tighter level. A malformed declaration raises
ParseError, which is caught in declaration(): the error has already been reported, the parser synchronizes to the next
statement boundary and the declaration is dropped from the result. Nesting too deep for the Python stack is reported
and recovered from the same way, so parse() itself never raises.
"""

from dscript.core.errors import ParseError
from dscript.core.syntax import (Assignment, Binary, Block, Break, Call, ConstDecl, ExpressionStatement, If, Literal,
                                 Logical, MutDecl, Paren, Print, Unary, Variable, While)
from dscript.core.token import TokenKind


MAX_ARGUMENTS = 255

# tokens that begin a new declaration/statement, used by synchronize
STATEMENT_STARTS = {
    TokenKind.CLASS,
    TokenKind.FUN,
    TokenKind.MUT,
    TokenKind.CONST,
    TokenKind.FOR,
    TokenKind.IF,
    TokenKind.WHILE,
    TokenKind.PRINT,
    TokenKind.RETURN,
}


class Parser:

    def __init__(self, tokens, diagnostics):
        self.tokens = tokens
        self.diagnostics = diagnostics
        self.current = 0

    def parse(self):
        """Returns the list of successfully parsed statements. Errors are reported to diagnostics."""
        statements = []
        while not self.at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # declarations and statements

    def declaration(self):
        try:
            if self.match(TokenKind.MUT):
                return self.mut_declaration()
            if self.match(TokenKind.CONST):
                return self.const_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None
        except RecursionError:
            self.error(self.peek(), "Expression nested too deeply.")
            self.synchronize()
            return None

    def mut_declaration(self):
        name = self.consume(TokenKind.IDENTIFIER, "Expected variable name.")

        initializer = None
        if self.match(TokenKind.EQUAL):
            initializer = self.expression()

        self.consume(TokenKind.SEMICOLON, "Expected ';' after variable declaration.")
        return MutDecl(name, initializer)

    def const_declaration(self):
        name = self.consume(TokenKind.IDENTIFIER, "Expected constant name.")
        self.consume(TokenKind.EQUAL, "Constant must be initialized.")
        initializer = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after constant declaration.")
        return ConstDecl(name, initializer)

    def statement(self):
        if self.match(TokenKind.IF):
            return self.if_statement()
        if self.match(TokenKind.WHILE):
            return self.while_statement()
        if self.match(TokenKind.FOR):
            return self.for_statement()
        if self.match(TokenKind.BREAK):
            return self.break_statement()
        if self.match(TokenKind.PRINT):
            return self.print_statement()
        if self.match(TokenKind.LEFT_BRACE):
            return Block(tuple(self.block()))
        return self.expression_statement()

    def if_statement(self):
        self.consume(TokenKind.LEFT_PAREN, "Expected '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expected ')' after if condition.")

        then_branch = self.statement()
        else_branch = self.statement() if self.match(TokenKind.ELSE) else None
        return If(condition, then_branch, else_branch)

    def while_statement(self):
        self.consume(TokenKind.LEFT_PAREN, "Expected '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expected ')' after while condition.")
        return While(condition, self.statement())

    def for_statement(self):
        """Desugars `for (init; cond; incr) body` into `{ init; while (cond) { body; incr; } }`."""
        self.consume(TokenKind.LEFT_PAREN, "Expected '(' after 'for'.")

        if self.match(TokenKind.SEMICOLON):
            initializer = None
        elif self.match(TokenKind.MUT):
            initializer = self.mut_declaration()
        elif self.match(TokenKind.CONST):
            initializer = self.const_declaration()
        else:
            initializer = self.expression_statement()

        condition = Literal(True)
        if not self.check(TokenKind.SEMICOLON):
            condition = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after loop condition.")

        increment = None
        if not self.check(TokenKind.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenKind.RIGHT_PAREN, "Expected ')' after for clauses.")

        body = self.statement()
        if increment is not None:
            body = Block((body, ExpressionStatement(increment)))

        loop = While(condition, body)
        if initializer is None:
            return Block((loop,))
        return Block((initializer, loop))

    def break_statement(self):
        keyword = self.previous()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after 'break'.")
        return Break(keyword)

    def print_statement(self):
        keyword = self.previous()
        value = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after value.")
        return Print(keyword, value)

    def block(self):
        statements = []
        while not self.check(TokenKind.RIGHT_BRACE) and not self.at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenKind.RIGHT_BRACE, "Expected '}' after block.")
        return statements

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after expression.")
        return ExpressionStatement(expr)

    # expressions, loosest to tightest

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logical_or()

        if self.match(TokenKind.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, Variable):
                return Assignment(expr.name, value)

            self.error(equals, "Invalid assignment target.")  # reported, but no need to synchronize

        return expr

    def logical_or(self):
        expr = self.logical_and()
        while self.match(TokenKind.OR):
            op = self.previous()
            expr = Logical(op, expr, self.logical_and())
        return expr

    def logical_and(self):
        expr = self.equality()
        while self.match(TokenKind.AND):
            op = self.previous()
            expr = Logical(op, expr, self.equality())
        return expr

    def equality(self):
        return self._binary(self.comparison, TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL)

    def comparison(self):
        return self._binary(self.term, TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS,
                            TokenKind.LESS_EQUAL)

    def term(self):
        return self._binary(self.factor, TokenKind.MINUS, TokenKind.PLUS)

    def factor(self):
        return self._binary(self.unary, TokenKind.SLASH, TokenKind.STAR)

    def unary(self):
        if self.match(TokenKind.BANG, TokenKind.MINUS):
            op = self.previous()
            return Unary(op, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()
        while self.match(TokenKind.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee):
        args = []
        if not self.check(TokenKind.RIGHT_PAREN):
            while True:
                if len(args) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                args.append(self.expression())
                if not self.match(TokenKind.COMMA):
                    break

        paren = self.consume(TokenKind.RIGHT_PAREN, "Expected ')' after arguments.")
        return Call(callee, tuple(args), paren)

    def primary(self):
        if self.match(TokenKind.FALSE):
            return Literal(False)
        if self.match(TokenKind.TRUE):
            return Literal(True)
        if self.match(TokenKind.NULL):
            return Literal(None)

        if self.match(TokenKind.NUMBER, TokenKind.STRING):
            return Literal(self.previous().literal)

        if self.match(TokenKind.IDENTIFIER):
            return Variable(self.previous())

        if self.match(TokenKind.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenKind.RIGHT_PAREN, "Expected ')' after expression.")
            return Paren(expr)

        raise self.error(self.peek(), "Expected expression.")

    def _binary(self, operand, *kinds):
        """Left-associative loop: operand ( kind operand )*."""
        expr = operand()
        while self.match(*kinds):
            op = self.previous()
            expr = Binary(op, expr, operand())
        return expr

    # token cursor

    def match(self, *kinds):
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def consume(self, kind, message):
        if self.check(kind):
            return self.advance()
        raise self.error(self.peek(), message)

    def check(self, kind):
        return not self.at_end() and self.peek().kind is kind

    def advance(self):
        if not self.at_end():
            self.current += 1
        return self.previous()

    def at_end(self):
        return self.peek().kind is TokenKind.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def error(self, token, message):
        """Reports a parse error and returns (does not raise) a ParseError for the caller to raise if it must unwind."""
        self.diagnostics.error_at_token(token, message)
        return ParseError(message)

    def synchronize(self):
        """Discards tokens until the next statement boundary so one bad statement doesn't cascade into false errors."""
        self.advance()

        while not self.at_end():
            if self.previous().kind is TokenKind.SEMICOLON:
                return
            if self.peek().kind in STATEMENT_STARTS:
                return
            self.advance()


def parse(tokens, diagnostics):
    """Shorthand for Parser(tokens, diagnostics).parse()."""
    return Parser(tokens, diagnostics).parse()
