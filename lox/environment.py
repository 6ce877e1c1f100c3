from typing import Any, Dict, Optional

from lox.errors import LoxRuntimeError


class Environment:
    """Represents a scope environment mapping identifiers to values."""
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        raise LoxRuntimeError.undefined(name)

    def define(self, name: str, value: Any):
        self.values[name] = value

    def assign(self, name: str, value: Any):
        # Only rebinds an existing name; declaration goes through define()
        if name not in self.values:
            raise LoxRuntimeError.undefined(name)
        self.values[name] = value

    def ancestor(self, distance: int) -> 'Environment':
        env = self
        for _ in range(distance):
            if env.parent is None:
                raise RuntimeError(f"scope distance {distance} exceeds scope depth")
            env = env.parent
        return env
