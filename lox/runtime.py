"""Runtime object model and value semantics for Lox.

Lox values map onto Python values directly: ``nil`` is ``None``, booleans
are ``bool``, numbers are ``float`` and strings are ``str``. Functions,
classes and instances are the classes below.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .ast import FunctionDecl
from .environment import Environment
from .errors import LoxRuntimeError


class LoxCallable:
    """Anything a Lox call expression can invoke."""
    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter, args: List[Any], ctx) -> Any:
        raise NotImplementedError


def check_arity(expected: int, args: List[Any]) -> None:
    if len(args) != expected:
        raise LoxRuntimeError(f"Expected {expected} arguments but got {len(args)}.")


@dataclass(eq=False)
class LoxFunction(LoxCallable):
    declaration: FunctionDecl
    closure: Environment

    @property
    def name(self) -> str:
        return self.declaration.name

    def arity(self) -> int:
        return len(self.declaration.parameters)

    def bind(self, instance: 'LoxInstance') -> 'BoundMethod':
        scope = Environment(self.closure)
        scope.define("this", instance)
        return BoundMethod(self.declaration, scope, instance)

    def bind_initializer(self, instance: 'LoxInstance') -> 'BoundInitializer':
        scope = Environment(self.closure)
        scope.define("this", instance)
        return BoundInitializer(self.declaration, scope, instance)

    def call(self, interpreter, args: List[Any], ctx) -> Any:
        check_arity(self.arity(), args)
        scope = Environment(self.closure)
        for name, value in zip(self.declaration.parameters, args):
            scope.define(name, value)
        with ctx.frame(scope) as frame:
            interpreter.walk_statements(self.declaration.block.data, ctx)
        return frame.return_value

    def __str__(self) -> str:
        return f"<fn {self.name}>"


@dataclass(eq=False)
class BoundMethod(LoxFunction):
    receiver: Optional['LoxInstance'] = None


@dataclass(eq=False)
class BoundInitializer(BoundMethod):
    """A bound ``init``: always evaluates to its receiver."""
    def call(self, interpreter, args: List[Any], ctx) -> Any:
        result = super().call(interpreter, args, ctx)
        if result is not None:
            raise LoxRuntimeError("Cannot return a value from an initializer.")
        return self.receiver


@dataclass(eq=False)
class LoxClass(LoxCallable):
    name: str
    superclass: Optional['LoxClass']
    methods: Dict[str, LoxFunction] = field(default_factory=dict)

    def find_method(self, name: str) -> Optional[LoxFunction]:
        klass: Optional[LoxClass] = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        return initializer.arity() if initializer is not None else 0

    def call(self, interpreter, args: List[Any], ctx) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind_initializer(instance).call(interpreter, args, ctx)
        else:
            check_arity(self.arity(), args)
        return instance

    def __str__(self) -> str:
        return self.name


def property_key(name: Any) -> Any:
    """Tag boolean and number keys so `true`, `1` and `"1"` name distinct slots."""
    if isinstance(name, bool):
        return ("boolean", name)
    if is_number(name):
        return ("number", float(name))
    return name


@dataclass(eq=False)
class LoxInstance:
    klass: LoxClass
    properties: Dict[Any, Any] = field(default_factory=dict)

    def get(self, name: Any) -> Any:
        key = property_key(name)
        if key in self.properties:
            return self.properties[key]
        method = self.klass.find_method(name) if isinstance(name, str) else None
        if method is None:
            raise LoxRuntimeError(f"Undefined property '{stringify(name)}'.")
        if name == "init":
            return method.bind_initializer(self)
        return method.bind(self)

    def set(self, name: Any, value: Any) -> None:
        self.properties[property_key(name)] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"


# Value semantics

def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    return value is not None and value is not False


def is_equal(a: Any, b: Any) -> bool:
    if isinstance(a, bool) or isinstance(b, bool):
        return a is b
    if is_number(a) and is_number(b):
        return a == b
    if type(a) is not type(b):
        return False
    return a == b


def check_number_operand(value: Any) -> None:
    if not is_number(value):
        raise LoxRuntimeError("Operand must be a number.")


def check_number_operands(a: Any, b: Any) -> None:
    if not (is_number(a) and is_number(b)):
        raise LoxRuntimeError("Operands must be numbers.")


def add(a: Any, b: Any) -> Any:
    if is_number(a) and is_number(b):
        return float(a) + float(b)
    if isinstance(a, str) and isinstance(b, str):
        return a + b
    raise LoxRuntimeError("Operands must be two numbers or two strings.")


def divide(a: Any, b: Any) -> float:
    check_number_operands(a, b)
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return float(a) / float(b)


def negate(value: Any) -> float:
    check_number_operand(value)
    return -float(value)


def stringify(value: Any) -> str:
    if value is None:
        return "nil"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-0"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)
