"""Tree-walking evaluator for Lox, plus the convenience entry points.

The pipeline is lex, parse, resolve, evaluate. The first three happen
before any statement runs, so a syntax error never leaves partial output
behind; a runtime error stops evaluation where it happens and keeps
whatever was already printed.
"""

from __future__ import annotations

import operator
import sys
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .ast import Node
from .builtin_function import NativeFunction
from .context import Context
from .errors import LoxError, LoxRuntimeError, LoxSyntaxError
from .grammar import parse
from .resolver import Resolver
from .runtime import (
    LoxCallable, LoxClass, LoxFunction, LoxInstance,
    add, check_number_operands, divide, is_equal, is_truthy, negate, stringify,
)
from .std import populate_standard_environment
from .walker import Walker


def _numeric(op: Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
    def apply(a: Any, b: Any) -> Any:
        check_number_operands(a, b)
        return op(a, b)
    return apply


BINARY_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    ",": lambda a, b: b,
    "==": is_equal,
    "!=": lambda a, b: not is_equal(a, b),
    "<": _numeric(operator.lt),
    ">": _numeric(operator.gt),
    "<=": _numeric(operator.le),
    ">=": _numeric(operator.ge),
    "+": add,
    "-": _numeric(operator.sub),
    "*": _numeric(operator.mul),
    "/": divide,
}


# Each Lox call nests roughly a dozen Python frames.
RECURSION_LIMIT = 12000


class Interpreter(Walker):
    """Core interpreter that executes a Lox AST."""
    def __init__(
        self,
        print_sink: Optional[Callable[[str], Any]] = print,
        natives: Optional[Mapping[str, Tuple[int, Callable[[List[Any]], Any]]]] = None,
        debug_level: int = 0,
        debug_file: str = 'debug.txt',
    ):
        super().__init__()
        self.context = Context(print_sink)
        self.resolver = Resolver()
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None
        populate_standard_environment(self)
        for name, (arity, fn) in (natives or {}).items():
            self.define_native(name, arity, fn)

    def debug(self, msg: str, level: int = 1):
        if self.debug_level >= level:
            if self.debug_fp is None:
                # reopened after a previous run closed it
                self.debug_fp = open(self.debug_file, 'a')
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def define_native(self, name: str, arity: int, fn: Callable[[List[Any]], Any]) -> NativeFunction:
        native = NativeFunction(name, arity, fn)
        self.context.set_global(name, native)
        self.debug(f"define native {name}/{arity}", 2)
        return native

    # Public API
    def resolve(self, program: Node, label: str = '') -> Mapping[Node, int]:
        return self.resolver.resolve(program, self.context.globals.values.keys(), label)

    def run(self, program: Node, label: str = '') -> None:
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(limit, RECURSION_LIMIT))
        try:
            self.debug(f"resolve {label or '<input>'}")
            self.context.locals = self.resolve(program, label)
            self.debug(f"evaluate {label or '<input>'}")
            self.walk_statement(program, self.context)
            self.debug("done")
        except RecursionError as e:
            raise LoxRuntimeError("Stack overflow.") from e
        finally:
            sys.setrecursionlimit(limit)
            self.close()

    # Walker hooks

    def iterations(self, condition: Node, ctx: Context) -> Iterator[None]:
        while is_truthy(self.walk_expression(condition, ctx)):
            yield

    def returned(self, ctx: Context) -> bool:
        return ctx.should_return()

    def walk_method(self, method, ctx: Context) -> LoxFunction:
        return LoxFunction(method, ctx.environment)

    def walk_superclass(self, node: Node, ctx: Context) -> Optional[LoxClass]:
        declaration = node.data
        if declaration.superclass is None:
            return None
        name = declaration.superclass.data
        if name == declaration.name:
            raise LoxRuntimeError("A class cannot inherit from itself.")
        superclass = ctx.lookup(name, declaration.superclass)
        if not isinstance(superclass, LoxClass):
            raise LoxRuntimeError("Superclass must be a class.")
        return superclass

    def define_class(self, node: Node, superclass, methods, ctx: Context) -> None:
        ctx.define(node.data.name, LoxClass(node.data.name, superclass, methods))
        self.debug(f"define class {node.data.name}", 2)

    # Statements

    def walk_function(self, node: Node, ctx: Context) -> None:
        ctx.define(node.data.name, LoxFunction(node.data, ctx.environment))
        self.debug(f"define function {node.data.name}", 2)

    def walk_variable(self, node: Node, ctx: Context) -> None:
        value = self.walk_expression(node.data.initialiser, ctx)
        ctx.define(node.data.name, value)
        self.debug(f"declare {node.data.name} = {stringify(value)}", 2)

    def walk_expression_statement(self, node: Node, ctx: Context) -> None:
        self.walk_expression(node.data, ctx)

    def walk_return(self, node: Node, ctx: Context) -> None:
        ctx.record_return(self.walk_expression(node.data, ctx))

    def walk_print(self, node: Node, ctx: Context) -> None:
        ctx.print(stringify(self.walk_expression(node.data, ctx)))

    def walk_if(self, node: Node, ctx: Context) -> None:
        branch = node.data
        test = self.walk_expression(branch.condition, ctx)
        truthy = is_truthy(test)
        self.debug(f"if condition {stringify(test)} -> {truthy}", 3)
        self.walk_statement(branch.then_statement if truthy else branch.else_statement, ctx)

    # Expressions

    def walk_binary(self, node: Node, ctx: Context) -> Any:
        a = self.walk_expression(node.data.left, ctx)
        b = self.walk_expression(node.data.right, ctx)
        return BINARY_OPERATORS[node.type](a, b)

    def walk_logical(self, node: Node, ctx: Context) -> Any:
        a = self.walk_expression(node.data.left, ctx)
        if node.type == "or":
            if is_truthy(a):
                return a
        elif not is_truthy(a):
            return a
        return self.walk_expression(node.data.right, ctx)

    def walk_conditional(self, node: Node, ctx: Context) -> Any:
        expr = node.data
        if is_truthy(self.walk_expression(expr.condition, ctx)):
            return self.walk_expression(expr.then_expr, ctx)
        return self.walk_expression(expr.else_expr, ctx)

    def walk_unary(self, node: Node, ctx: Context) -> Any:
        value = self.walk_expression(node.data, ctx)
        if node.type == "!":
            return not is_truthy(value)
        return negate(value)

    def walk_grouping(self, node: Node, ctx: Context) -> Any:
        return self.walk_expression(node.data, ctx)

    def walk_number(self, node: Node, ctx: Context) -> float:
        return float(node.data)

    def walk_string(self, node: Node, ctx: Context) -> str:
        return node.data

    def walk_boolean(self, node: Node, ctx: Context) -> bool:
        return node.data == "true"

    def walk_nil(self, node: Node, ctx: Context) -> None:
        return None

    def walk_identifier(self, node: Node, ctx: Context) -> Any:
        return ctx.lookup(node.data, node)

    def walk_context(self, node: Node, ctx: Context) -> Any:
        return ctx.lookup("this", node)

    def walk_super(self, node: Node, ctx: Context) -> Any:
        superclass = ctx.lookup("super", node)
        method = superclass.find_method(node.data)
        if method is None:
            raise LoxRuntimeError(f"Undefined property '{node.data}'.")
        # the receiver frame sits one scope inside the one binding "super"
        receiver = ctx.resolve(node, -1).get("this")
        return method.bind(receiver)

    def walk_member(self, node: Node, ctx: Context) -> Any:
        instance = self.walk_expression(node.data.left, ctx)
        if not isinstance(instance, LoxInstance):
            raise LoxRuntimeError("Only instances have properties.")
        return instance.get(node.data.name)

    def walk_computed(self, node: Node, ctx: Context) -> Any:
        instance = self.walk_expression(node.data.left, ctx)
        key = self.walk_expression(node.data.expression, ctx)
        if not isinstance(instance, LoxInstance):
            raise LoxRuntimeError("Only instances have properties.")
        return instance.get(key)

    def walk_set(self, node: Node, ctx: Context) -> Any:
        instance = self.walk_expression(node.data.left, ctx)
        if not isinstance(instance, LoxInstance):
            raise LoxRuntimeError("Only instances have fields.")
        value = self.walk_expression(node.data.right, ctx)
        instance.set(node.data.name, value)
        return value

    def walk_computed_set(self, node: Node, ctx: Context) -> Any:
        instance = self.walk_expression(node.data.left, ctx)
        key = self.walk_expression(node.data.expression, ctx)
        if not isinstance(instance, LoxInstance):
            raise LoxRuntimeError("Only instances have fields.")
        value = self.walk_expression(node.data.right, ctx)
        instance.set(key, value)
        return value

    def walk_assignment(self, node: Node, ctx: Context) -> Any:
        value = self.walk_expression(node.data.right, ctx)
        ctx.assign(node.data.name, node, value)
        return value

    def walk_call(self, node: Node, ctx: Context) -> Any:
        callee = self.walk_expression(node.data.left, ctx)
        args = [self.walk_expression(arg, ctx) for arg in node.data.args]
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError("Can only call functions and classes.")
        self.debug(f"call {stringify(callee)} with {len(args)} argument(s)", 3)
        return callee.call(self, args, ctx)


def parse_program(source: str, label: str = '') -> Node:
    """Parse Lox source text into a module node."""
    return parse(source, label)


def resolve_program(program: Node, globals: Iterable[str] = (), label: str = '') -> Mapping[Node, int]:
    return Resolver().resolve(program, globals, label)


def run_program(
    source: str,
    print_sink: Optional[Callable[[str], Any]] = print,
    debug_level: int = 0,
    label: str = '',
) -> Interpreter:
    """Convenience function to parse and run a Lox program from source string."""
    program = parse_program(source, label)
    interpreter = Interpreter(print_sink=print_sink, debug_level=debug_level)
    interpreter.run(program, label)
    return interpreter


def compile_module(file_path: str, debug_level: int = 0) -> Interpreter:
    """Compile and execute a Lox file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level=debug_level, label=file_path)


__all__ = [
    'Interpreter', 'LoxError', 'LoxSyntaxError', 'LoxRuntimeError',
    'parse_program', 'resolve_program', 'run_program', 'compile_module',
]
