import pytest

from lox.errors import LoxSyntaxError
from lox.interpreter import parse_program, resolve_program
from lox.resolver import Resolver


def resolve(source, globals=()):
    program = parse_program(source)
    return program, Resolver().resolve(program, globals)


def resolve_error(source, globals=()):
    with pytest.raises(LoxSyntaxError) as excinfo:
        resolve(source, globals)
    return excinfo.value


def test_globals_are_left_out_of_the_table():
    _, table = resolve('var a = 1; print a;')
    assert len(table) == 0


def test_local_distance_counts_enclosing_blocks():
    program, table = resolve('{ var a = 1; { print a; } }')
    reference = program.data[0].data[1].data[0].data
    assert reference.type == 'identifier'
    assert table[reference] == 1


def test_for_loop_scopes():
    program, table = resolve('for (var i = 0; i < 1; i = i + 1) { print i; }')
    loop = program.data[0].data
    assert table[loop.condition.data.left] == 0
    assert table[loop.step] == 0
    # iteration scope plus the body block
    assert table[loop.body.data[0].data] == 2


def test_super_and_this_distances():
    program, table = resolve('class A { m() {} }\nclass B < A { m() { super.m(); return this; } }')
    method = program.data[1].data.methods[0]
    super_node = method.block.data[0].data.data.left
    this_node = method.block.data[1].data
    assert super_node.type == 'super'
    # parameters, receiver, superclass
    assert table[super_node] == 2
    assert table[this_node] == 1


def test_undefined_variable():
    err = resolve_error('\n  print missing;')
    assert err.message == "Undefined variable 'missing'."
    assert (err.line, err.column) == (1, 8)


def test_host_globals_resolve():
    resolve('print clock;', globals=['clock'])
    assert resolve_error('print clock;').message == "Undefined variable 'clock'."


def test_own_initializer():
    message = 'Cannot read local variable in its own initializer.'
    assert resolve_error('{ var a = a; }').message == message
    assert resolve_error('var a = a;').message == message
    # an existing global may seed its own redeclaration
    resolve('var a = 1; var a = a;')


def test_duplicate_local():
    err = resolve_error('{ var a; var a; }')
    assert err.message == 'Variable with this name already declared in this scope.'


def test_functions_and_classes_are_hoisted():
    resolve('fun a() { return b(); } fun b() { return 1; }')
    resolve('{ fun a() { return B(); } class B {} }')


def test_return_rules():
    assert resolve_error('return 1;').message == 'Cannot return from top-level code.'
    err = resolve_error('class A { init() { return 1; } }')
    assert err.message == 'Cannot return a value from an initializer.'
    resolve('class A { init() { return; } }')


def test_this_and_super_rules():
    assert resolve_error('print this;').message == "Cannot use 'this' outside of a class."
    assert resolve_error('fun f() { this; }').message == "Cannot use 'this' outside of a class."
    assert resolve_error('print super.x;').message == "Cannot use 'super' outside of a class."
    err = resolve_error('class A { m() { super.m(); } }')
    assert err.message == "Cannot use 'super' in a class with no superclass."


def test_parameter_and_argument_limits():
    err = resolve_error('fun f(a, b, c, d, e, g, h, i, j) {}')
    assert err.message == 'Cannot have more than 8 parameters.'
    resolve('fun f(a, b, c, d, e, g, h, i) {}')

    args = ', '.join(['1'] * 256)
    err = resolve_error('fun f() {}\nf(%s);' % args)
    assert err.message == 'Cannot have more than 255 arguments.'


def test_resolution_is_deterministic():
    program = parse_program('fun f(x) { var y = x; { return y; } }\nclass A { m() { return this; } }')
    resolver = Resolver()
    first = resolver.resolve(program)
    second = resolver.resolve(program)
    assert dict(first) == dict(second)
    assert len(first) > 0


def test_table_is_read_only():
    program, table = resolve('{ var a; a; }')
    node = program.data[0].data[1].data
    with pytest.raises(TypeError):
        table[node] = 5


def test_resolve_program_entry_point():
    program = parse_program('fun f(a) { return a; }')
    table = resolve_program(program, label='entry.lox')
    assert list(table.values()) == [0]
    with pytest.raises(LoxSyntaxError) as excinfo:
        resolve_program(parse_program('print x;'), label='entry.lox')
    assert excinfo.value.label == 'entry.lox'
