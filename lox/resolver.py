"""Static scope resolution.

`Resolver.resolve` walks a parsed module once and returns a read-only table
mapping every name-reference node (and every declaration node) to the
number of scopes between the reference and the binding. Names that are not
found in any local scope must be globals and are left out of the table.
"""

from __future__ import annotations

import enum
from contextlib import contextmanager
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

from .ast import FunctionDecl, Node
from .errors import LoxSyntaxError
from .walker import Walker

MAX_PARAMETERS = 8
MAX_ARGUMENTS = 255


class FunctionType(enum.Enum):
    NONE = 'none'
    FUNCTION = 'function'
    METHOD = 'method'
    INITIALIZER = 'initializer'


class ClassType(enum.Enum):
    NONE = 'none'
    CLASS = 'class'
    SUBCLASS = 'subclass'


class ResolverContext:
    def __init__(self, globals: Iterable[str] = (), label: str = ''):
        self.stack: List[Dict[str, bool]] = []
        self.globals: Dict[str, bool] = {name: True for name in globals}
        self.lookup: Dict[Node, int] = {}
        self.function_type = FunctionType.NONE
        self.class_type = ClassType.NONE
        self.label = label
        # node currently being resolved, for error positions
        self.node: Optional[Node] = None

    def error(self, message: str, node: Optional[Node] = None) -> LoxSyntaxError:
        node = node or self.node
        line, column = node.start if node is not None else (0, 0)
        return LoxSyntaxError(line, column, message, self.label)

    def push(self) -> None:
        self.stack.append({})

    def pop(self) -> None:
        self.stack.pop()

    @contextmanager
    def scope(self) -> Iterator[None]:
        self.push()
        try:
            yield
        finally:
            self.pop()

    def declare(self, name: str) -> None:
        if self.stack:
            frame = self.stack[-1]
            if name in frame:
                raise self.error("Variable with this name already declared in this scope.")
            frame[name] = False
        else:
            self.globals.setdefault(name, False)

    def define(self, name: str) -> None:
        if self.stack:
            self.stack[-1][name] = True
        else:
            self.globals[name] = True

    def bind(self, name: str, value=None) -> None:
        self.declare(name)
        self.define(name)

    def resolve_local(self, node: Node, name: str) -> None:
        for distance, frame in enumerate(reversed(self.stack)):
            if name in frame:
                if frame[name] is False:
                    raise self.error("Cannot read local variable in its own initializer.", node)
                self.lookup[node] = distance
                return
        if name not in self.globals:
            raise self.error(f"Undefined variable '{name}'.", node)
        if self.globals[name] is False:
            raise self.error("Cannot read local variable in its own initializer.", node)

    @contextmanager
    def function(self, kind: FunctionType) -> Iterator[None]:
        enclosing = self.function_type
        self.function_type = kind
        try:
            yield
        finally:
            self.function_type = enclosing

    @contextmanager
    def class_body(self, kind: ClassType) -> Iterator[None]:
        enclosing = self.class_type
        self.class_type = kind
        try:
            yield
        finally:
            self.class_type = enclosing


class Resolver(Walker):
    def resolve(self, program: Node, globals: Iterable[str] = (), label: str = '') -> Mapping[Node, int]:
        ctx = ResolverContext(globals, label)
        self.walk_statement(program, ctx)
        return MappingProxyType(ctx.lookup)

    def walk_statement(self, node: Node, ctx: ResolverContext) -> None:
        ctx.node = node
        super().walk_statement(node, ctx)

    def walk_expression(self, node: Node, ctx: ResolverContext) -> None:
        ctx.node = node
        super().walk_expression(node, ctx)

    # Walker hooks

    def iterations(self, condition: Node, ctx: ResolverContext) -> Iterator[None]:
        self.walk_expression(condition, ctx)
        yield

    def walk_statements(self, statements, ctx: ResolverContext) -> None:
        self.hoist(statements, ctx)
        super().walk_statements(statements, ctx)

    def hoist(self, statements, ctx: ResolverContext) -> None:
        """Declare every function and class of a statement list up front."""
        for statement in statements:
            if statement.type in ("function", "class"):
                ctx.node = statement
                name = statement.data.name
                ctx.declare(name)
                ctx.define(name)
                ctx.resolve_local(statement, name)

    def walk_method(self, method: FunctionDecl, ctx: ResolverContext) -> None:
        kind = FunctionType.INITIALIZER if method.name == "init" else FunctionType.METHOD
        with ctx.scope():
            ctx.bind("this")
            self.walk_callable(method, kind, ctx)

    def walk_superclass(self, node: Node, ctx: ResolverContext) -> None:
        superclass = node.data.superclass
        if superclass is not None:
            ctx.resolve_local(superclass, superclass.data)

    def define_class(self, node: Node, superclass, methods, ctx: ResolverContext) -> None:
        return None

    def walk_callable(self, declaration: FunctionDecl, kind: FunctionType, ctx: ResolverContext) -> None:
        if len(declaration.parameters) > MAX_PARAMETERS:
            raise ctx.error(f"Cannot have more than {MAX_PARAMETERS} parameters.", declaration.block)
        with ctx.function(kind), ctx.scope():
            for parameter in declaration.parameters:
                ctx.bind(parameter)
            self.walk_statements(declaration.block.data, ctx)

    # Statements

    def walk_function(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_callable(node.data, FunctionType.FUNCTION, ctx)

    def walk_class(self, node: Node, ctx: ResolverContext) -> None:
        kind = ClassType.CLASS if node.data.superclass is None else ClassType.SUBCLASS
        with ctx.class_body(kind):
            super().walk_class(node, ctx)

    def walk_variable(self, node: Node, ctx: ResolverContext) -> None:
        declaration = node.data
        ctx.declare(declaration.name)
        self.walk_expression(declaration.initialiser, ctx)
        ctx.define(declaration.name)
        ctx.resolve_local(node, declaration.name)

    def walk_expression_statement(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_expression(node.data, ctx)

    def walk_return(self, node: Node, ctx: ResolverContext) -> None:
        if ctx.function_type is FunctionType.NONE:
            raise ctx.error("Cannot return from top-level code.")
        if ctx.function_type is FunctionType.INITIALIZER and node.data.type != "blank":
            raise ctx.error("Cannot return a value from an initializer.")
        self.walk_expression(node.data, ctx)

    def walk_print(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_expression(node.data, ctx)

    def walk_if(self, node: Node, ctx: ResolverContext) -> None:
        branch = node.data
        self.walk_expression(branch.condition, ctx)
        self.walk_statement(branch.then_statement, ctx)
        self.walk_statement(branch.else_statement, ctx)

    # Expressions

    def walk_binary(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_expression(node.data.left, ctx)
        self.walk_expression(node.data.right, ctx)

    walk_logical = walk_binary

    def walk_conditional(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_expression(node.data.condition, ctx)
        self.walk_expression(node.data.then_expr, ctx)
        self.walk_expression(node.data.else_expr, ctx)

    def walk_unary(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_expression(node.data, ctx)

    walk_grouping = walk_unary

    def walk_literal(self, node: Node, ctx: ResolverContext) -> None:
        return None

    walk_number = walk_string = walk_boolean = walk_nil = walk_literal

    def walk_identifier(self, node: Node, ctx: ResolverContext) -> None:
        ctx.resolve_local(node, node.data)

    def walk_context(self, node: Node, ctx: ResolverContext) -> None:
        if ctx.class_type is ClassType.NONE:
            raise ctx.error("Cannot use 'this' outside of a class.")
        ctx.resolve_local(node, "this")

    def walk_super(self, node: Node, ctx: ResolverContext) -> None:
        if ctx.class_type is ClassType.NONE:
            raise ctx.error("Cannot use 'super' outside of a class.")
        if ctx.class_type is ClassType.CLASS:
            raise ctx.error("Cannot use 'super' in a class with no superclass.")
        ctx.resolve_local(node, "super")

    def walk_member(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_expression(node.data.left, ctx)

    def walk_computed(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_expression(node.data.left, ctx)
        self.walk_expression(node.data.expression, ctx)

    def walk_set(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_expression(node.data.left, ctx)
        self.walk_expression(node.data.right, ctx)

    def walk_computed_set(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_expression(node.data.left, ctx)
        self.walk_expression(node.data.expression, ctx)
        self.walk_expression(node.data.right, ctx)

    def walk_assignment(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_expression(node.data.right, ctx)
        ctx.resolve_local(node, node.data.name)

    def walk_call(self, node: Node, ctx: ResolverContext) -> None:
        self.walk_expression(node.data.left, ctx)
        if len(node.data.args) > MAX_ARGUMENTS:
            raise ctx.error(f"Cannot have more than {MAX_ARGUMENTS} arguments.", node)
        for arg in node.data.args:
            self.walk_expression(arg, ctx)
