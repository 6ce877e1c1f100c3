"""Tokenizer for Lox source text.

The scanner is a generator: tokens are produced on demand as the parser
pulls them, in a single pass over a `CharSource`. Keywords are ordinary
identifiers here; the grammar decides what they mean.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, List, Optional

from .errors import LoxSyntaxError
from .source import CharSource, Position, TextBuffer
from .trie import SymbolTrie

IDENTIFIER = 'identifier'
NUMBER = 'number'
STRING = 'string'
SYMBOL = 'symbol'

IDENTIFIER_START = frozenset('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_')
DIGITS = frozenset('0123456789')

# Spellings without a parselet still lex; the parser rejects them.
SYMBOLS = [
    "!",
    "=", ":=",
    "{", "}",
    "(", ")",
    ".", ",",
    "[", "]",
    "+", "-", "/", "*", "**",
    "<", ">", "<<", ">>", "<<<", ">>>",
    "+=", "/=", "-=", "*=", "**=",
    "%", "^", "&", ":", "|", "~", "?", ";",
    "??", "||", "&&", "::", "..",
    "<=", ">=", "=>", "->",
    "==", "===", "!==", "!=",
]


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    start: Position
    end: Position
    precedes_newline: bool = False

    def match(self, kind: str, value: str = '') -> bool:
        return self.kind == kind and (value == '' or value == self.value)


def is_identifier_start(ch: Optional[str]) -> bool:
    return ch is not None and ch in IDENTIFIER_START


def is_digit(ch: Optional[str]) -> bool:
    return ch is not None and ch in DIGITS


class Scanner:
    def __init__(self, symbols: SymbolTrie):
        self.symbols = symbols

    def scan(self, text: str, label: str = '') -> Iterator[Token]:
        source = CharSource(text)
        buffer = TextBuffer()
        previous: Optional[Token] = None
        while source.incomplete():
            ch = source.peek()
            token: Optional[Token] = None
            if is_identifier_start(ch):
                token = self.scan_identifier(source, buffer)
            elif is_digit(ch):
                token = self.scan_number(source, buffer)
            elif ch == '"':
                token = self.scan_string(source, buffer, label)
            elif self.symbols.child(ch) is not None:
                token = self.scan_symbol(source, label)
            elif ch.isspace():
                source.consume()
            else:
                raise LoxSyntaxError.invalid_token(source.position(), ch, label)
            if token is not None:
                token = self.check_newline(previous, token)
                previous = token
                yield token

    def tokenize(self, text: str, label: str = '') -> List[Token]:
        return list(self.scan(text, label))

    def scan_identifier(self, source: CharSource, buffer: TextBuffer) -> Token:
        start = source.position()
        while is_identifier_start(source.peek()) or is_digit(source.peek()):
            buffer.push(source.consume())
        return Token(IDENTIFIER, buffer.consume(), start, source.position())

    def scan_number(self, source: CharSource, buffer: TextBuffer) -> Token:
        start = source.position()
        while is_digit(source.peek()):
            buffer.push(source.consume())
        if source.peek() == '.':
            source.consume()
            if is_digit(source.peek()):
                buffer.push('.')
                while is_digit(source.peek()):
                    buffer.push(source.consume())
            else:
                # a trailing '.' belongs to whatever follows the number
                source.back()
        return Token(NUMBER, buffer.consume(), start, source.position())

    def scan_string(self, source: CharSource, buffer: TextBuffer, label: str) -> Token:
        start = source.position()
        source.consume()  # opening quote
        escaped = False
        for ch in source:
            if escaped:
                escaped = False
                buffer.push(ch)
            elif ch == '\\':
                escaped = True
            elif ch == '"':
                return Token(STRING, buffer.consume(), start, source.position())
            else:
                buffer.push(ch)
        buffer.consume()
        raise LoxSyntaxError.unterminated_string_literal(source.position(), label)

    def scan_line_comment(self, source: CharSource) -> None:
        source.consume()
        source.consume()
        for ch in source:
            if ch == '\n':
                return

    def scan_block_comment(self, source: CharSource) -> None:
        # An unterminated block comment simply runs to the end of input.
        source.consume()
        source.consume()
        for ch in source:
            if ch == '*' and source.peek() == '/':
                source.consume()
                return

    def scan_symbol(self, source: CharSource, label: str) -> Optional[Token]:
        if source.peek() == '/':
            following = source.peek_next()
            if following == '*':
                self.scan_block_comment(source)
                return None
            if following == '/':
                self.scan_line_comment(source)
                return None

        start = source.position()
        node = self.symbols
        for ch in source:
            child = node.child(ch)
            if child is None:
                source.back()
                if node.value is None:
                    raise LoxSyntaxError.invalid_token(source.position(), ch, label)
                break
            node = child

        if node.value is None:
            raise LoxSyntaxError.unexpected_end_of_input(source.position(), label)
        return Token(SYMBOL, node.value, start, source.position())

    @staticmethod
    def check_newline(previous: Optional[Token], token: Token) -> Token:
        if previous is None or previous.end[0] < token.start[0]:
            return replace(token, precedes_newline=True)
        return token
