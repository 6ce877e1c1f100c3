"""Table-dispatched tree walker shared by the resolver and the interpreter.

Both passes must open and close scopes at exactly the same points, or the
distances recorded by the resolver would address the wrong runtime frame.
The traversal of every scope-opening construct therefore lives here, once;
subclasses only decide what a scope *is* (a declaration map or a runtime
`Environment`) and what happens at the leaves.

Scopes opened, outermost first:

* ``block``: one scope for its statements.
* ``while``: one scope around the loop, plus one per iteration for the body.
* ``for``: one scope for setup, condition and step, plus one per iteration
  for the body.
* ``class`` with a superclass: one scope binding ``super`` that every method
  closes over.
* method access: one scope binding ``this`` (see `walk_method`).
* call: one scope binding the parameters. The body block's statements are
  walked directly in it, without a further block scope.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Sequence

from .ast import Node

STATEMENTS = {
    "module": "walk_module",
    "function": "walk_function",
    "class": "walk_class",
    "variable": "walk_variable",
    "expression": "walk_expression_statement",
    "return": "walk_return",
    "print": "walk_print",
    "if": "walk_if",
    "while": "walk_while",
    "for": "walk_for",
    "block": "walk_block",
    "blank": "walk_blank",
}

EXPRESSIONS = {
    ",": "walk_binary",
    "?": "walk_conditional",
    "or": "walk_logical",
    "and": "walk_logical",
    "==": "walk_binary",
    "!=": "walk_binary",
    "<": "walk_binary",
    ">": "walk_binary",
    "<=": "walk_binary",
    ">=": "walk_binary",
    "+": "walk_binary",
    "-": "walk_binary",
    "*": "walk_binary",
    "/": "walk_binary",
    "!": "walk_unary",
    "minus": "walk_unary",
    "grouping": "walk_grouping",
    "number": "walk_number",
    "string": "walk_string",
    "boolean": "walk_boolean",
    "nil": "walk_nil",
    "blank": "walk_nil",
    "identifier": "walk_identifier",
    "context": "walk_context",
    "super": "walk_super",
    "member": "walk_member",
    "computed": "walk_computed",
    "set": "walk_set",
    "computed-set": "walk_computed_set",
    "assignment": "walk_assignment",
    "call": "walk_call",
}


class Walker:
    """Dispatches nodes by `type` to ``walk_*`` methods taking ``(node, ctx)``."""

    def __init__(self):
        self.statements: Dict[str, Any] = {t: getattr(self, name) for t, name in STATEMENTS.items()}
        self.expressions: Dict[str, Any] = {t: getattr(self, name) for t, name in EXPRESSIONS.items()}

    def walk_statement(self, node: Node, ctx) -> Any:
        handler = self.statements.get(node.type)
        if handler is None:
            raise TypeError(f"unexpected statement type {node.type!r}")
        return handler(node, ctx)

    def walk_expression(self, node: Node, ctx) -> Any:
        handler = self.expressions.get(node.type)
        if handler is None:
            raise TypeError(f"unexpected expression type {node.type!r}")
        return handler(node, ctx)

    # Hooks

    def iterations(self, condition: Node, ctx) -> Iterator[None]:
        """Yield once per loop iteration, walking `condition` as needed."""
        raise NotImplementedError

    def returned(self, ctx) -> bool:
        return False

    def walk_statements(self, statements: Sequence[Node], ctx) -> None:
        for statement in statements:
            self.walk_statement(statement, ctx)
            if self.returned(ctx):
                break

    def walk_method(self, method, ctx) -> Any:
        raise NotImplementedError

    def walk_superclass(self, node: Node, ctx) -> Any:
        raise NotImplementedError

    def define_class(self, node: Node, superclass: Any, methods: Dict[str, Any], ctx) -> None:
        raise NotImplementedError

    # Scope-opening statements

    def walk_module(self, node: Node, ctx) -> None:
        self.walk_statements(node.data, ctx)

    def walk_block(self, node: Node, ctx) -> None:
        with ctx.scope():
            self.walk_statements(node.data, ctx)

    def walk_while(self, node: Node, ctx) -> None:
        loop = node.data
        with ctx.scope():
            for _ in self.iterations(loop.condition, ctx):
                with ctx.scope():
                    self.walk_statement(loop.body, ctx)
                if self.returned(ctx):
                    break

    def walk_for(self, node: Node, ctx) -> None:
        loop = node.data
        with ctx.scope():
            self.walk_statement(loop.setup, ctx)
            for _ in self.iterations(loop.condition, ctx):
                with ctx.scope():
                    self.walk_statement(loop.body, ctx)
                if self.returned(ctx):
                    break
                self.walk_expression(loop.step, ctx)

    def walk_class(self, node: Node, ctx) -> None:
        declaration = node.data
        superclass = self.walk_superclass(node, ctx)
        if declaration.superclass is None:
            methods = {m.name: self.walk_method(m, ctx) for m in declaration.methods}
        else:
            with ctx.scope():
                ctx.bind("super", superclass)
                methods = {m.name: self.walk_method(m, ctx) for m in declaration.methods}
        self.define_class(node, superclass, methods, ctx)

    def walk_blank(self, node: Node, ctx) -> None:
        return None
