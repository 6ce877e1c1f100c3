"""Generic precedence-climbing (Pratt) parser.

The engine knows nothing about any particular language. A grammar
registers parselets into three tables keyed by token signature:

* statement parselets, tried first for every statement;
* prefix parselets, which start an expression;
* infix parselets, which extend the expression parsed so far.

A signature is ``"kind:value"`` (for example ``"symbol:+"``) or the
wildcard ``"kind:"``, which matches any token of that kind when no exact
entry exists. Statement handlers are called as ``fn(tokens)``, prefix
handlers as ``fn(tokens, precedence)`` and infix handlers as
``fn(tokens, left, precedence)``; each is invoked after its token has been
consumed.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, NamedTuple, Optional

from .ast import Binary, Node
from .errors import LoxSyntaxError
from .lexer import SYMBOLS, Scanner, Token
from .source import Cursor, Position
from .trie import SymbolTrie


class Parselet(NamedTuple):
    precedence: int
    parse: Callable[..., Node]


class TokenStream(Cursor):
    """Cursor over scanner output: `peek`, `peek_next`, `consume`, `back`."""


def read_label(label: str):
    kind, _, value = label.partition(':')
    return kind, value


class Parser:
    def __init__(self, symbols: Iterable[str] = SYMBOLS):
        self.symbols = SymbolTrie(symbols)
        self.scanner = Scanner(self.symbols)
        self.statement: Dict[str, Parselet] = {}
        self.prefix: Dict[str, Parselet] = {}
        self.infix: Dict[str, Parselet] = {}
        self.label = ''

    # Registration

    def add_statement(self, label: str, fn: Callable[..., Node]) -> 'Parser':
        self.statement[label] = Parselet(0, fn)
        return self

    def add_prefix(self, label: str, precedence: int, fn: Callable[..., Node]) -> 'Parser':
        self.prefix[label] = Parselet(precedence, fn)
        return self

    def add_infix(self, label: str, precedence: int, fn: Callable[..., Node]) -> 'Parser':
        self.infix[label] = Parselet(precedence, fn)
        return self

    def add_symbol(self, symbol: str) -> None:
        self.symbols.add(symbol)

    def remove_symbol(self, symbol: str) -> None:
        self.symbols.remove(symbol)

    # Entry points

    def tokenize(self, text: str, label: str = '') -> List[Token]:
        return self.scanner.tokenize(text, str(label))

    def parse_program(self, text: str, label: str = '') -> Node:
        self.label = str(label)
        tokens = TokenStream(self.scanner.scan(text, self.label))
        statements = []

        if not tokens.incomplete():
            return self.create_node("module", (0, 0), (0, 0), tuple(statements))

        start = tokens.peek().start
        while tokens.incomplete():
            statements.append(self.parse_statement(tokens))
        end = tokens.previous().end

        return self.create_node("module", start, end, tuple(statements))

    def parse_statement(self, tokens: TokenStream) -> Node:
        if not tokens.incomplete():
            self.throw_unexpected_end_of_input(tokens)
        parselet = self.get_parselet(self.statement, tokens.consume())
        if parselet is not None:
            return parselet.parse(tokens)

        tokens.back()
        start = tokens.peek().start
        expression = self.parse_expression(tokens)
        end = self.end_statement(tokens)
        return self.create_node("expression", start, end, expression)

    def parse_expression(self, tokens: TokenStream, precedence: int = 0) -> Node:
        if not tokens.incomplete():
            self.throw_unexpected_end_of_input(tokens)
        token = tokens.consume()
        parselet = self.get_parselet(self.prefix, token)
        if parselet is None:
            raise LoxSyntaxError.unexpected_token(token, self.label)

        left = parselet.parse(tokens, parselet.precedence)

        while precedence < self.get_precedence(tokens):
            parselet = self.get_parselet(self.infix, tokens.consume())
            left = parselet.parse(tokens, left, parselet.precedence)

        return left

    # Table lookups

    def get_precedence(self, tokens: TokenStream) -> int:
        if not tokens.incomplete():
            return 0
        parselet = self.get_parselet(self.infix, tokens.peek())
        return parselet.precedence if parselet is not None else 0

    @staticmethod
    def get_parselet(collection: Dict[str, Parselet], token: Token) -> Optional[Parselet]:
        return collection.get(f"{token.kind}:{token.value}") or collection.get(f"{token.kind}:")

    # Errors

    def error(self, tokens: TokenStream, message: str) -> LoxSyntaxError:
        """Build a syntax error positioned at the upcoming token."""
        token = tokens.peek()
        line, column = token.start if token is not None else self.last_position(tokens)
        return LoxSyntaxError(line, column, message, self.label)

    @staticmethod
    def last_position(tokens: TokenStream) -> Position:
        previous = tokens.previous()
        return previous.end if previous is not None else (0, 0)

    def throw_unexpected_token(self, token: Token):
        raise LoxSyntaxError.unexpected_token(token, self.label)

    def throw_unexpected_end_of_input(self, tokens: TokenStream):
        raise LoxSyntaxError.unexpected_end_of_input(self.last_position(tokens), self.label)

    # Parselet factories for common shapes

    def binary(self, type: str) -> Callable[..., Node]:
        def parse(tokens: TokenStream, left: Node, precedence: int) -> Node:
            right = self.parse_expression(tokens, precedence)
            end = tokens.previous().end
            return self.create_node(type, left.start, end, Binary(left, right))
        return parse

    def unary(self, type: str) -> Callable[..., Node]:
        def parse(tokens: TokenStream, precedence: int) -> Node:
            start = tokens.previous().start
            expression = self.parse_expression(tokens, precedence)
            end = tokens.previous().end
            return self.create_node(type, start, end, expression)
        return parse

    def literal(self, type: str) -> Callable[..., Node]:
        def parse(tokens: TokenStream, precedence: int) -> Node:
            token = tokens.previous()
            return self.create_node(type, token.start, token.end, token.value)
        return parse

    # Token utilities

    @staticmethod
    def create_node(type: str, start: Position, end: Position, data=None) -> Node:
        return Node(type, start, end, data)

    def match(self, tokens: TokenStream, label: str) -> bool:
        token = tokens.peek()
        if token is None:
            return False
        kind, value = read_label(label)
        return token.match(kind, value)

    def ensure(self, tokens: TokenStream, label: str) -> str:
        """Consume a token matching `label` and return its value."""
        if not tokens.incomplete():
            self.throw_unexpected_end_of_input(tokens)
        if not self.match(tokens, label):
            self.throw_unexpected_token(tokens.peek())
        return tokens.consume().value

    def should_end_statement(self, tokens: TokenStream) -> bool:
        token = tokens.peek()
        return token is None or token.precedes_newline or token.match("symbol", ";")

    def end_statement(self, tokens: TokenStream) -> Position:
        """Finish a statement at a ``;`` or at a token on a later line."""
        token = tokens.peek()
        if token is None:
            return tokens.previous().end
        if token.match("symbol", ";"):
            tokens.consume()
            return token.end
        if token.precedes_newline:
            return tokens.previous().end
        self.throw_unexpected_token(token)
