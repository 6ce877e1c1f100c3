"""Evaluation state threaded through the interpreter.

A `Context` owns the current scope chain, the stack of active calls, the
print sink and the resolver's distance table. Scopes are parent-linked
`Environment` frames rooted at the global frame; closures keep a reference
to the frame they were created in, so frames are shared rather than copied.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional

from .ast import Node
from .environment import Environment


@dataclass
class CallStack:
    parent: Optional['CallStack'] = None
    has_returned: bool = False
    return_value: Any = None

    def record(self, value: Any) -> None:
        self.has_returned = True
        self.return_value = value


class Context:
    def __init__(self, print_sink: Optional[Callable[[str], Any]] = None):
        self.globals = Environment()
        self.environment: Environment = self.globals
        self.call_stack: Optional[CallStack] = None
        self.print_sink = print_sink
        self.locals: Mapping[Node, int] = {}

    # Globals

    def set_global(self, name: str, value: Any) -> None:
        if name in self.globals:
            raise ValueError(f"{name} is already defined on the global scope")
        self.globals.define(name, value)

    # Scope chain

    def push(self) -> None:
        self.environment = Environment(self.environment)

    def pop(self) -> None:
        self.environment = self.environment.parent

    @contextmanager
    def scope(self) -> Iterator[Environment]:
        self.push()
        try:
            yield self.environment
        finally:
            self.pop()

    def swap_scope(self, scope: Environment) -> Environment:
        previous = self.environment
        self.environment = scope
        return previous

    def define(self, name: str, value: Any) -> None:
        self.environment.define(name, value)

    bind = define

    def resolve(self, node: Node, offset: int = 0) -> Environment:
        """Return the frame that `node`'s name was resolved to."""
        distance = self.locals.get(node)
        if distance is None:
            return self.globals
        return self.environment.ancestor(distance + offset)

    def lookup(self, name: str, node: Node) -> Any:
        return self.resolve(node).get(name)

    def assign(self, name: str, node: Node, value: Any) -> None:
        self.resolve(node).assign(name, value)

    # Calls

    @contextmanager
    def frame(self, scope: Environment) -> Iterator[CallStack]:
        """Run a call body in `scope` with its own return slot."""
        previous = self.swap_scope(scope)
        self.call_stack = CallStack(self.call_stack)
        call = self.call_stack
        try:
            yield call
        finally:
            self.call_stack = call.parent
            self.swap_scope(previous)

    def record_return(self, value: Any) -> None:
        if self.call_stack is None:
            raise RuntimeError("Invalid return statement")
        self.call_stack.record(value)

    def should_return(self) -> bool:
        return self.call_stack is not None and self.call_stack.has_returned

    # Output

    def print(self, text: str) -> None:
        if self.print_sink is not None:
            self.print_sink(text)
