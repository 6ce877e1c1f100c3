from dataclasses import dataclass
from typing import Any, Callable, List

from lox.runtime import LoxCallable, check_arity


@dataclass(eq=False)
class NativeFunction(LoxCallable):
    name: str
    native_arity: int
    fn: Callable[[List[Any]], Any]

    def arity(self) -> int:
        return self.native_arity

    def call(self, interpreter, args: List[Any], ctx) -> Any:
        check_arity(self.arity(), args)
        return self.fn(args)

    def __str__(self) -> str:
        return "<native fn>"

    def __repr__(self) -> str:
        return f"<native {self.name}>"
