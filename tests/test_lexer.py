import pytest

from lox.errors import LoxSyntaxError
from lox.lexer import SYMBOLS, Scanner
from lox.trie import SymbolTrie


def scan(text, symbols=SYMBOLS):
    return Scanner(SymbolTrie(symbols)).tokenize(text, 'test.lox')


def kinds(text):
    return [(t.kind, t.value) for t in scan(text)]


def test_identifiers_numbers_strings_and_symbols():
    assert kinds('var x = 12.5 + "hi";') == [
        ('identifier', 'var'),
        ('identifier', 'x'),
        ('symbol', '='),
        ('number', '12.5'),
        ('symbol', '+'),
        ('string', 'hi'),
        ('symbol', ';'),
    ]


def test_maximal_munch():
    assert kinds('a <= b == c') == [
        ('identifier', 'a'),
        ('symbol', '<='),
        ('identifier', 'b'),
        ('symbol', '=='),
        ('identifier', 'c'),
    ]
    assert [t.value for t in scan('!==')] == ['!==']


def test_dead_end_backs_up_to_deepest_match():
    assert [t.value for t in scan('<<<<')] == ['<<<', '<']


def test_symbol_without_terminal_value_is_invalid():
    with pytest.raises(LoxSyntaxError) as excinfo:
        scan('-x', symbols=['->'])
    assert excinfo.value.message == 'invalid or unexpected token "x"'


def test_symbol_prefix_at_end_of_input():
    with pytest.raises(LoxSyntaxError) as excinfo:
        scan('-', symbols=['->'])
    assert excinfo.value.message == 'unexpected end of input'


def test_unknown_character():
    with pytest.raises(LoxSyntaxError) as excinfo:
        scan('a # b')
    err = excinfo.value
    assert err.message == 'invalid or unexpected token "#"'
    assert (err.line, err.column) == (0, 2)
    assert err.label == 'test.lox'


def test_trailing_dot_is_not_part_of_number():
    assert kinds('1.foo') == [('number', '1'), ('symbol', '.'), ('identifier', 'foo')]
    assert kinds('3.') == [('number', '3'), ('symbol', '.')]


def test_string_escapes():
    assert scan(r'"a\"b\\c"')[0].value == 'a"b\\c'


def test_unterminated_string():
    with pytest.raises(LoxSyntaxError) as excinfo:
        scan('"open')
    assert excinfo.value.message == 'unterminated string literal'


def test_comments_are_skipped():
    assert kinds('a // line\nb /* block\n */ c') == [
        ('identifier', 'a'),
        ('identifier', 'b'),
        ('identifier', 'c'),
    ]
    assert kinds('a / b') == [('identifier', 'a'), ('symbol', '/'), ('identifier', 'b')]


def test_unterminated_block_comment_ends_the_input():
    assert kinds('a /* never closed') == [('identifier', 'a')]


def test_precedes_newline():
    tokens = scan('a b\nc')
    assert [t.precedes_newline for t in tokens] == [True, False, True]


def test_positions_are_zero_based():
    token = scan('\n  foo')[0]
    assert token.start == (1, 2)
    assert token.end == (1, 5)


def test_keywords_are_plain_identifiers():
    assert kinds('while') == [('identifier', 'while')]


def test_scan_is_lazy():
    tokens = Scanner(SymbolTrie(SYMBOLS)).scan('ok #')
    assert next(tokens).value == 'ok'
    with pytest.raises(LoxSyntaxError):
        next(tokens)
