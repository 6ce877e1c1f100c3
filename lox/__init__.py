# Lox language package
# This package provides a parser, resolver and tree-walking interpreter for Lox.
from .interpreter import (
    run_program, compile_module, parse_program, resolve_program,
    Interpreter, LoxError, LoxSyntaxError, LoxRuntimeError,
)

__all__ = [
    'run_program',
    'compile_module',
    'parse_program',
    'resolve_program',
    'Interpreter',
    'LoxError',
    'LoxSyntaxError',
    'LoxRuntimeError',
]
