import pytest

from lox.errors import LoxRuntimeError
from lox.interpreter import Interpreter, parse_program
from lox.runtime import LoxClass, LoxInstance


def run(source):
    output = []
    interpreter = Interpreter(print_sink=output.append)
    interpreter.run(parse_program(source))
    return output, interpreter


def output_of(source):
    return run(source)[0]


def error_of(source):
    with pytest.raises(LoxRuntimeError) as excinfo:
        run(source)
    return excinfo.value.message


def test_fields_and_methods():
    source = '''
    class Point {
      init(x, y) {
        this.x = x;
        this.y = y;
      }
      sum() { return this.x + this.y; }
    }
    var p = Point(1, 2);
    print p.sum();
    p.x = 10;
    print p.sum();
    '''
    assert output_of(source) == ['3', '12']


def test_bound_method_keeps_its_receiver():
    source = '''
    class Person {
      init(name) { this.name = name; }
      hello() { print "hi " + this.name; }
    }
    var hello = Person("ada").hello;
    var other = Person("bob");
    other.hello = hello;
    other.hello();
    '''
    assert output_of(source) == ['hi ada']


def test_fields_shadow_methods():
    source = '''
    class A { m() { return "method"; } }
    fun f() { return "field"; }
    var a = A();
    a.m = f;
    print a.m();
    '''
    assert output_of(source) == ['field']


def test_computed_properties():
    source = '''
    class Map {}
    var m = Map();
    m["a" + "b"] = 1;
    m[2] = "two";
    print m.ab;
    print m[1 + 1];
    '''
    assert output_of(source) == ['1', 'two']


def test_initializer_returns_instance():
    source = '''
    class A {
      init() { this.count = 0; }
    }
    var a = A();
    a.count = 5;
    print a.init() == a;
    print a.count;
    '''
    assert output_of(source) == ['true', '0']


def test_early_return_in_initializer():
    source = '''
    class A {
      init(flag) {
        this.seen = "start";
        if (flag) return;
        this.seen = "end";
      }
    }
    print A(true).seen;
    print A(false).seen;
    '''
    assert output_of(source) == ['start', 'end']


def test_super_keeps_the_receiver():
    source = '''
    class A {
      describe() { return "A from " + this.name; }
    }
    class B < A {
      init() { this.name = "B"; }
      describe() {
        print super.describe();
        return this.name;
      }
    }
    print B().describe();
    '''
    assert output_of(source) == ['A from B', 'B']


def test_inherited_initializer():
    source = '''
    class A { init(v) { this.v = v; } }
    class B < A {}
    print B(7).v;
    '''
    assert output_of(source) == ['7']


def test_string_forms():
    source = '''
    class Thing { m() {} }
    print Thing;
    print Thing();
    print Thing().m;
    '''
    assert output_of(source) == ['Thing', 'Thing instance', '<fn m>']


@pytest.mark.parametrize('source, message', [
    ('class A { init(a) {} } A();', 'Expected 1 arguments but got 0.'),
    ('class A {} A(1);', 'Expected 0 arguments but got 1.'),
    ('class A {} print A().missing;', "Undefined property 'missing'."),
    ('class A {} print A()[1];', "Undefined property '1'."),
    ('var x = 1; x.y = 2;', 'Only instances have fields.'),
    ('var x = "s"; x[0] = 2;', 'Only instances have fields.'),
    ('print "s".length;', 'Only instances have properties.'),
    ('print nil[0];', 'Only instances have properties.'),
    ('var NotAClass = "x"; class A < NotAClass {}', 'Superclass must be a class.'),
    ('class A < A {}', 'A class cannot inherit from itself.'),
    ('class A {} class B < A { m() { return super.nope; } } B().m();', "Undefined property 'nope'."),
])
def test_class_errors(source, message):
    assert error_of(source) == message


def test_class_values_from_the_host():
    _, interpreter = run('class P { init(a, b) {} } var p = P(1, 2); p.tag = "x";')
    klass = interpreter.context.globals.get('P')
    assert isinstance(klass, LoxClass)
    assert klass.arity() == 2
    assert klass.find_method('init') is not None
    instance = interpreter.context.globals.get('p')
    assert isinstance(instance, LoxInstance)
    assert instance.klass is klass
    assert instance.properties == {'tag': 'x'}


def test_computed_keys_keep_their_type():
    source = '''
    class Box {}
    var b = Box();
    b[1] = "one";
    b[true] = "yes";
    b[false] = "no";
    b["1"] = "string one";
    print b[1];
    print b[true];
    print b[false];
    print b["1"];
    '''
    assert output_of(source) == ['one', 'yes', 'no', 'string one']
    assert error_of('class Box {} var b = Box(); b[1] = "one"; print b[true];') == "Undefined property 'true'."
    assert error_of('class Box {} var b = Box(); b[0] = "zero"; print b[false];') == "Undefined property 'false'."


def test_named_and_computed_string_keys_share_a_slot():
    source = '''
    class Box {}
    var b = Box();
    b.name = "a";
    print b["name"];
    b["name"] = "b";
    print b.name;
    '''
    assert output_of(source) == ['a', 'b']


def test_native_arity():
    _, interpreter = run('')
    assert interpreter.context.globals.get('clock').arity() == 0
