from typing import Tuple


class LoxError(Exception):
    """Base class for the two failure shapes the interpreter reports."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LoxSyntaxError(LoxError):
    """Lexical, grammatical or resolution failure, raised before evaluation."""
    def __init__(self, line: int, column: int, message: str, label: str = ''):
        LoxError.__init__(self, message)
        self.args = (f'{message} @ {line}:{column} "{label}"',)
        self.line = line
        self.column = column
        self.label = label

    def __str__(self) -> str:
        return f"SyntaxError: {self.args[0]}"

    @classmethod
    def unexpected_token(cls, token, label: str = '') -> 'LoxSyntaxError':
        line, column = token.start
        return cls(line, column, f'unexpected token "{token.kind}:{token.value}"', label)

    @classmethod
    def invalid_token(cls, position: Tuple[int, int], value: str, label: str = '') -> 'LoxSyntaxError':
        line, column = position
        return cls(line, column, f'invalid or unexpected token "{value}"', label)

    @classmethod
    def unexpected_end_of_input(cls, position: Tuple[int, int], label: str = '') -> 'LoxSyntaxError':
        line, column = position
        return cls(line, column, 'unexpected end of input', label)

    @classmethod
    def unterminated_string_literal(cls, position: Tuple[int, int], label: str = '') -> 'LoxSyntaxError':
        line, column = position
        return cls(line, column, 'unterminated string literal', label)


class LoxRuntimeError(LoxError):
    """Exception type used to propagate Lox runtime errors."""
    def __str__(self) -> str:
        return f"RuntimeError: {self.message}"

    @classmethod
    def undefined(cls, name: str) -> 'LoxRuntimeError':
        return cls(f"Undefined variable '{name}'.")
