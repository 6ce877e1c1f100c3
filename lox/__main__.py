"""CLI entry point for the Lox interpreter.

Usage:
    python -m lox [-v|-vv|-vvv] <program_file>
    python -m lox [-v...] --tokens <program_file>
    python -m lox [-v...] --emit-ast <program_file>
    python -m lox [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokens      Print the token stream of the given .lox file as JSON
  --emit-ast    Parse the given .lox file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Syntax errors exit with status 65 and
runtime errors with status 70.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import ast_from_obj, ast_to_obj, tokens_to_obj
from .errors import LoxError, LoxSyntaxError
from .grammar import LoxParser
from .interpreter import Interpreter, parse_program

EXIT_SYNTAX_ERROR = 65
EXIT_RUNTIME_ERROR = 70


def read_file(path: str) -> str:
    program_file = Path(path)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def fail(error: LoxError) -> None:
    print(str(error), file=sys.stderr)
    sys.exit(EXIT_SYNTAX_ERROR if isinstance(error, LoxSyntaxError) else EXIT_RUNTIME_ERROR)


def execute(program, label: str, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(program, label)
    except LoxError as e:
        fail(e)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Lox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', metavar='LOX_FILE', help='print the tokens of the given .lox file as JSON')
    group.add_argument('--emit-ast', metavar='LOX_FILE', help='emit AST JSON for the given .lox file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Lox program file (.lox) to execute')
    args = parser.parse_args(argv)

    # Token dump mode
    if args.tokens:
        source = read_file(args.tokens)
        try:
            tokens = LoxParser().tokenize(source, args.tokens)
        except LoxError as e:
            fail(e)
        json.dump(tokens_to_obj(tokens), sys.stdout, ensure_ascii=False, indent=2)
        print()
        return

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_file(args.emit_ast)
        try:
            ast_program = parse_program(source, args.emit_ast)
        except LoxError as e:
            fail(e)
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        data = json.loads(read_file(args.ast))
        execute(ast_from_obj(data), args.ast, args.v)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --tokens/--emit-ast/--ast')
    source = read_file(args.program)
    try:
        ast_program = parse_program(source, args.program)
    except LoxError as e:
        fail(e)
    execute(ast_program, args.program, args.v)


if __name__ == '__main__':
    main()
