"""CLI entry point for the uvl interpreter.

Usage:
    python -m uvl [-v|-vv|-vvv] [program_file]
    python -m uvl [-v...] --emit-ast <program_file>
    python -m uvl [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .uvl file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file an interactive prompt is started. Debug information
is written to `debug.txt` in the current directory when verbosity is
greater than zero.

Exit status is 65 for bad input (missing file, lex, parse or name errors,
unsupported operators) and 70 for runtime errors.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_from_obj, program_to_obj
from .errors import UvlError, UvlRuntimeError
from .interpreter import Interpreter
from .parser import parse_program
from .shell import Shell

EX_DATAERR = 65
EX_SOFTWARE = 70


def exit_code(err: UvlError) -> int:
    return EX_SOFTWARE if isinstance(err, UvlRuntimeError) else EX_DATAERR


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(EX_DATAERR)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='uvl', description="uvl language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='UVL_FILE', help='emit AST JSON for the given .uvl file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='uvl program file to execute; omit for the interactive prompt')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            statements = parse_program(source, str(program_file))
        except UvlError as e:
            print(e, file=sys.stderr)
            sys.exit(exit_code(e))
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        data = json.loads(read_source(Path(args.ast)))
        statements = ast_from_obj(data)
        interpreter = Interpreter(debug_level=args.v)
        try:
            interpreter.execute(statements)
        except UvlError as e:
            print(e, file=sys.stderr)
            sys.exit(exit_code(e))
        finally:
            interpreter.close()
        return

    # Interactive prompt
    if not args.program:
        interpreter = Interpreter(prompt_mode=True, debug_level=args.v)
        try:
            Shell(interpreter).cmdloop()
        except KeyboardInterrupt:
            print()
        finally:
            interpreter.close()
        return

    # Default: execute source file
    program_file = Path(args.program)
    source = read_source(program_file)
    interpreter = Interpreter(debug_level=args.v)
    try:
        interpreter.run(str(program_file), source)
    except UvlError as e:
        print(e, file=sys.stderr)
        sys.exit(exit_code(e))
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
