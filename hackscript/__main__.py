"""CLI entry point for the HackScript interpreter.

Usage:
    python -m hackscript [-v|-vv|-vvv|-vvvv] [--max-steps N] <program_file>
    python -m hackscript [-v...] --emit-ast <program_file>
    python -m hackscript [-v...] --ast <ast_json_file>
    python -m hackscript [-v...] -i

Options:
  -v            Increase debug verbosity (can be repeated)
  --max-steps   Abort a run after N executed statements/loop iterations
  --emit-ast    Parse the given program and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  -i            Start an interactive session

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Program output goes to stdout; diagnostics
and runtime errors go to stderr and make the exit status 1.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj, ast_from_obj
from .errors import HackScriptError
from .interpreter import ExecutionResult, Interpreter
from .parser import parse_program
from .values import NullVal, to_string

PROMPT = 'hs> '


def read_source(path: str) -> str:
    program_file = Path(path)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def report(result: ExecutionResult) -> bool:
    for line in result.output:
        print(line)
    for diagnostic in result.diagnostics:
        print(str(diagnostic), file=sys.stderr)
    if result.error is not None:
        print(f"Runtime error: {result.error}", file=sys.stderr)
    return result.success


def interactive(interpreter: Interpreter) -> None:
    """Line-oriented session; state persists between entries until :reset."""
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print()
            return
        command = line.strip()
        if not command:
            continue
        if command in (':quit', ':q'):
            return
        if command == ':reset':
            interpreter.reset()
            continue
        if command == ':vars':
            for var in interpreter.list_variables():
                keyword = 'let' if var.mutable else 'const'
                print(f"{keyword} {var.name}: {var.type} = {to_string(var.value)}")
            continue
        if command == ':funcs':
            for func in interpreter.list_functions():
                print(func.signature)
            continue
        result = interpreter.execute(line)
        report(result)
        if result.success and result.value is not None and not isinstance(result.value, NullVal):
            print(f"=> {to_string(result.value)}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="HackScript language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--max-steps', type=int, default=None, metavar='N',
                        help='abort after N executed statements or loop iterations')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PROGRAM_FILE', help='emit AST JSON for the given program')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    group.add_argument('-i', '--interactive', action='store_true', help='start an interactive session')
    parser.add_argument('program', nargs='?', help='HackScript program file to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast_program, diagnostics = parse_program(read_source(args.emit_ast))
        if diagnostics:
            for diagnostic in diagnostics:
                print(str(diagnostic), file=sys.stderr)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    interpreter = Interpreter(debug_level=args.v, max_steps=args.max_steps)
    try:
        if args.interactive:
            interactive(interpreter)
            return

        # Execute from AST JSON; the stored tree is trusted and not re-checked
        if args.ast:
            data = json.loads(read_source(args.ast))
            ast_program = ast_from_obj(data)
            try:
                interpreter.run(ast_program)
            except (HackScriptError, RecursionError) as e:
                for line in interpreter.output:
                    print(line)
                message = e.message if isinstance(e, HackScriptError) else 'Maximum call depth exceeded'
                print(f"Runtime error: {message}", file=sys.stderr)
                sys.exit(1)
            for line in interpreter.output:
                print(line)
            return

        # Default: execute source file
        if not args.program:
            parser.error('missing program file; or use --emit-ast/--ast/-i')
        if not report(interpreter.execute(read_source(args.program))):
            sys.exit(1)
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
