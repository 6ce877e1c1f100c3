import pytest

from lox.errors import LoxSyntaxError
from lox.pratt import Parser


def calculator():
    parser = Parser()
    parser.add_infix('symbol:+', 1, parser.binary('+'))
    parser.add_infix('symbol:*', 2, parser.binary('*'))
    parser.add_prefix('symbol:-', 3, parser.unary('neg'))
    parser.add_prefix('number:', 4, parser.literal('number'))
    return parser


def evaluate(node):
    if node.type == 'number':
        return float(node.data)
    if node.type == 'neg':
        return -evaluate(node.data)
    left = evaluate(node.data.left)
    right = evaluate(node.data.right)
    return left + right if node.type == '+' else left * right


def test_precedence_climbing():
    program = calculator().parse_program('1 + 2 * 3;')
    assert program.type == 'module'
    statement = program.data[0]
    assert statement.type == 'expression'
    assert evaluate(statement.data) == 7


def test_binary_operators_are_left_associative():
    node = calculator().parse_program('1 + 2 + 3').data[0].data
    assert node.type == '+'
    assert node.data.left.type == '+'
    assert node.data.right.type == 'number'


def test_prefix_binds_tighter_than_infix():
    node = calculator().parse_program('-2 * 3').data[0].data
    assert node.type == '*'
    assert node.data.left.type == 'neg'


def test_newline_terminates_a_statement():
    program = calculator().parse_program('1 + 2\n3 * 4')
    assert [evaluate(s.data) for s in program.data] == [3, 12]


def test_two_expressions_on_one_line_are_rejected():
    with pytest.raises(LoxSyntaxError) as excinfo:
        calculator().parse_program('1 2')
    assert excinfo.value.message == 'unexpected token "number:2"'


def test_missing_prefix_parselet():
    with pytest.raises(LoxSyntaxError) as excinfo:
        calculator().parse_program('* 2')
    assert excinfo.value.message == 'unexpected token "symbol:*"'


def test_unexpected_end_of_input():
    with pytest.raises(LoxSyntaxError) as excinfo:
        calculator().parse_program('1 +', 'calc')
    assert excinfo.value.message == 'unexpected end of input'
    assert excinfo.value.label == 'calc'


def test_empty_program():
    for source in ('', '  \n\t'):
        program = calculator().parse_program(source)
        assert program.data == ()
        assert program.start == (0, 0)
        assert program.end == (0, 0)


def test_exact_signature_wins_over_wildcard():
    parser = calculator()
    parser.add_prefix('identifier:', 4, parser.literal('name'))
    parser.add_prefix('identifier:pi', 4, parser.literal('pi'))
    statements = parser.parse_program('pi; tau').data
    assert [s.data.type for s in statements] == ['pi', 'name']


def test_statement_parselet():
    parser = calculator()

    def parse_show(tokens):
        start = tokens.previous().start
        expression = parser.parse_expression(tokens)
        end = parser.end_statement(tokens)
        return parser.create_node('show', start, end, expression)

    parser.add_statement('identifier:show', parse_show)
    statement = parser.parse_program('show 1 + 1;').data[0]
    assert statement.type == 'show'
    assert statement.start == (0, 0)
    assert statement.end == (0, 11)
    assert evaluate(statement.data) == 2


def test_add_and_remove_symbol():
    parser = Parser()
    parser.add_symbol('^^')
    assert [t.value for t in parser.tokenize('^^')] == ['^^']
    parser.remove_symbol('^^')
    assert [t.value for t in parser.tokenize('^^')] == ['^', '^']
